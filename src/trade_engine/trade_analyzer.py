"""Trade analyzer - orchestrates the grading pipeline for one trade."""

import logging
from typing import Dict

from src.league.models import League, Trade
from src.trade_engine.fairness import compute_fairness
from src.trade_engine.grading import assign_risk_tags, letter_for_score
from src.trade_engine.models import GradeResult, PlayerValuation
from src.trade_engine.rationale import RationaleGenerator
from src.trade_engine.roster_impact import compute_impacts
from src.trade_engine.trade_validation import ResolvedTrade, resolve_trade, validate_league
from src.trade_engine.valuation import ValuationModel

logger = logging.getLogger(__name__)


class TradeAnalyzer:
    """Grades trades for a single league.

    Runs validate -> resolve -> value -> impact -> fairness -> grade ->
    rationale. Each stage is a pure function of the previous stage's output,
    so the whole analysis is deterministic for identical inputs. Any
    validation failure raises before a result is built.
    """

    def __init__(self, league: League):
        validate_league(league)
        self.league = league
        self.model = ValuationModel(league.scoring_rules, league.settings)
        self.rationale = RationaleGenerator(self.model)

    def analyze_trade(self, trade: Trade) -> GradeResult:
        """Grade *trade*.

        Raises:
            InvalidTradeError: If the trade does not match the rosters.
        """
        resolved = resolve_trade(self.league, trade)
        valuations = self.valuate(resolved)
        impacts = compute_impacts(resolved, valuations)
        fairness = compute_fairness(*impacts)
        letter = letter_for_score(fairness.score)
        risk_tags = assign_risk_tags(
            fairness, valuations.values(), resolved, self.league.settings
        )
        rationale = self.rationale.generate(resolved, impacts, fairness, valuations)

        logger.info(
            "Graded trade %s <-> %s: %.1f (%s), towards=%s, risks=%s",
            resolved.team_a.team_id,
            resolved.team_b.team_id,
            fairness.score,
            letter.value,
            fairness.towards_team_id,
            [tag.value for tag in risk_tags],
        )

        return GradeResult(
            score=fairness.score,
            letter=letter,
            team_impacts=impacts,
            fairness=fairness,
            rationale=rationale,
            risk_tags=risk_tags,
        )

    def valuate(self, resolved: ResolvedTrade) -> Dict[str, PlayerValuation]:
        """Valuation for every player moving in the trade, keyed by id."""
        traded = resolved.team_a_outgoing + resolved.team_b_outgoing
        return {p.player_id: self.model.valuate(p) for p in traded}


def analyze_trade(league: League, trade: Trade) -> GradeResult:
    """Grade *trade* within *league*.

    Raises:
        InsufficientLeagueDataError: Missing scoring rules or fewer than
            two teams.
        InvalidTradeError: The trade does not match the league's rosters.
    """
    return TradeAnalyzer(league).analyze_trade(trade)
