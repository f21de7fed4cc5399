"""Grade a trade (and optionally simulate it) from the command line.

Usage:
    python -m src.trade_engine.run_analysis <league.json|demo> <teamAOut> <teamBOut> [weeks] [iterations] [seed]

Player id lists are comma-separated. When ``weeks`` is given the season is
also simulated with and without the trade.

Examples:
    python -m src.trade_engine.run_analysis demo player1 player3
    python -m src.trade_engine.run_analysis league.json p1,p2 p7 6 2000 42
"""

import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from src.league.demo import build_demo_league
from src.league.errors import TradeRefereeError
from src.league.loader import load_league
from src.league.models import League, Trade
from src.logging_config import setup_logging
from src.simulation_engine.config import DEFAULT_ITERATIONS
from src.simulation_engine.season_simulator import SeasonSimulator
from src.trade_engine.counter_offers import suggest_counter_offers
from src.trade_engine.trade_analyzer import analyze_trade

logger = logging.getLogger(__name__)


def _split_ids(raw: str) -> List[str]:
    return [pid.strip() for pid in raw.split(",") if pid.strip()]


def _load(source: str) -> League:
    if source == "demo":
        return build_demo_league()
    return load_league(Path(source))


def run_analysis(
    source: str,
    team_a_out: List[str],
    team_b_out: List[str],
    weeks: Optional[int] = None,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
) -> Dict:
    """Grade the trade and return a JSON-serializable report.

    The report holds ``grade`` and ``counterOffers``, plus ``simulation``
    when *weeks* is given.
    """
    league = _load(source)
    trade = Trade(team_a_out=tuple(team_a_out), team_b_out=tuple(team_b_out))

    grade = analyze_trade(league, trade)
    report: Dict = {
        "grade": grade.to_dict(),
        "counterOffers": [o.to_dict() for o in suggest_counter_offers(league, trade)],
    }

    if weeks is not None:
        result = SeasonSimulator(league).simulate_league(trade, weeks, iterations, seed=seed)
        report["simulation"] = result.to_dict()
        logger.info("Season outlook:\n%s", result.to_frame().to_string(index=False))

    return report


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 4:
        print(__doc__)
        sys.exit(2)

    weeks = int(sys.argv[4]) if len(sys.argv) > 4 else None
    iterations = int(sys.argv[5]) if len(sys.argv) > 5 else DEFAULT_ITERATIONS
    seed = int(sys.argv[6]) if len(sys.argv) > 6 else None

    try:
        report = run_analysis(
            sys.argv[1],
            _split_ids(sys.argv[2]),
            _split_ids(sys.argv[3]),
            weeks,
            iterations,
            seed,
        )
    except TradeRefereeError as e:
        logger.error("Analysis rejected: %s", e)
        sys.exit(1)
    except Exception:
        logger.exception("Analysis failed")
        sys.exit(1)

    print(json.dumps(report, indent=2))
