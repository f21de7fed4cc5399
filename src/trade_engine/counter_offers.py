"""Counter-offer suggestions that bring an uneven trade closer to fair."""

import logging
from typing import List, Tuple

from src.league.models import League, Trade
from src.trade_engine.config import CANDIDATE_POOL_SIZE, MAX_COUNTER_OFFERS
from src.trade_engine.models import CounterOffer
from src.trade_engine.trade_analyzer import TradeAnalyzer
from src.trade_engine.trade_validation import ResolvedTrade, resolve_trade
from src.trade_engine.valuation import player_value_table

logger = logging.getLogger(__name__)


class CounterOfferSuggester:
    """Searches one-player adjustments to a trade.

    Two kinds of adjustment are tried against the team the trade favors:

    * it sends one more of its players, drawn from the
      ``CANDIDATE_POOL_SIZE`` players whose value is nearest the gap;
    * it gives back one of the players it receives, when it receives
      more than one.

    Only adjustments that strictly raise the score are suggested.
    """

    def __init__(self, league: League):
        self.league = league
        self.analyzer = TradeAnalyzer(league)
        self.values = player_value_table(league)

    def suggest(self, trade: Trade, max_suggestions: int = MAX_COUNTER_OFFERS) -> List[CounterOffer]:
        """Best counter-offers for *trade*, highest score first.

        Ties are ordered by fewer players moved, then by player ids.
        """
        original = self.analyzer.analyze_trade(trade)
        favored_id = original.fairness.towards_team_id
        if favored_id is None or max_suggestions <= 0:
            return []

        resolved = resolve_trade(self.league, trade)
        gap = next(i.net_delta for i in original.team_impacts if i.team_id == favored_id)

        offers: List[CounterOffer] = []
        for candidate, description in self._candidates(resolved, favored_id, gap):
            grade = self.analyzer.analyze_trade(candidate)
            if grade.score > original.score:
                offers.append(CounterOffer(candidate, grade, description))

        offers.sort(key=lambda o: (
            -o.grade.score,
            len(o.trade.team_a_out) + len(o.trade.team_b_out),
            o.trade.team_a_out,
            o.trade.team_b_out,
        ))
        logger.info(
            "Found %d counter-offers improving on %.1f (kept %d)",
            len(offers), original.score, min(len(offers), max_suggestions),
        )
        return offers[:max_suggestions]

    def _candidates(
        self,
        resolved: ResolvedTrade,
        favored_id: str,
        gap: float,
    ) -> List[Tuple[Trade, str]]:
        a_out = [p.player_id for p in resolved.team_a_outgoing]
        b_out = [p.player_id for p in resolved.team_b_outgoing]
        favored_is_a = favored_id == resolved.team_a.team_id
        favored = resolved.team_a if favored_is_a else resolved.team_b
        names = dict(zip(self.values["player_id"], self.values["name"]))

        def build(new_a: List[str], new_b: List[str]) -> Trade:
            return Trade(
                team_a_out=tuple(new_a),
                team_b_out=tuple(new_b),
                team_a_id=resolved.team_a.team_id,
                team_b_id=resolved.team_b.team_id,
            )

        candidates: List[Tuple[Trade, str]] = []

        pool = self.values[
            (self.values["team_id"] == favored_id)
            & ~self.values["player_id"].isin(a_out + b_out)
        ]
        pool = (
            pool.assign(distance=(pool["value"] - gap).abs())
            .sort_values(["distance", "player_id"])
            .head(CANDIDATE_POOL_SIZE)
        )
        for player_id in pool["player_id"]:
            if favored_is_a:
                trade = build(a_out + [player_id], b_out)
            else:
                trade = build(a_out, b_out + [player_id])
            candidates.append((trade, f"{favored.name} adds {names[player_id]}"))

        received = b_out if favored_is_a else a_out
        if len(received) > 1:
            for player_id in received:
                remaining = [pid for pid in received if pid != player_id]
                trade = build(a_out, remaining) if favored_is_a else build(remaining, b_out)
                candidates.append(
                    (trade, f"{favored.name} no longer receives {names[player_id]}")
                )

        return candidates


def suggest_counter_offers(
    league: League,
    trade: Trade,
    max_suggestions: int = MAX_COUNTER_OFFERS,
) -> List[CounterOffer]:
    """Up to *max_suggestions* better-graded alternatives to *trade*."""
    return CounterOfferSuggester(league).suggest(trade, max_suggestions)
