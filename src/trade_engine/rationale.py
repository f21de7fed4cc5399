"""Weighted, human-readable explanation of a trade grade."""

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from src.league.lineup import LineupBuilder
from src.league.models import Player, Team
from src.trade_engine.config import (
    PROJECTION_QUALITY_IMPACT,
    ROSTER_NEED_STEP,
    ROSTER_SPOT_STEP,
)
from src.trade_engine.models import FairnessResult, PlayerValuation, RationaleEntry, TeamImpact
from src.trade_engine.trade_validation import ResolvedTrade
from src.trade_engine.valuation import ValuationModel

logger = logging.getLogger(__name__)

IMPACT_PRECISION = 3


def _clamp_impact(impact: float) -> float:
    return round(max(-1.0, min(1.0, impact)), IMPACT_PRECISION)


def _gap_percent(a: float, b: float) -> float:
    larger = max(a, b)
    return 0.0 if larger <= 0 else 100.0 * abs(a - b) / larger


class RationaleGenerator:
    """Builds rationale entries from the intermediate grading signals."""

    def __init__(self, model: ValuationModel):
        self.model = model
        self.lineups = LineupBuilder(model.settings)

    def generate(
        self,
        resolved: ResolvedTrade,
        impacts: Tuple[TeamImpact, TeamImpact],
        fairness: FairnessResult,
        valuations: Mapping[str, PlayerValuation],
    ) -> Tuple[RationaleEntry, ...]:
        """All applicable entries, strongest first (ties by factor name)."""
        entries = [self._value_differential(impacts, fairness)]
        for entry in (
            self._positional_value(resolved, fairness, valuations),
            self._roster_need(resolved),
            self._projection_quality(resolved, valuations),
            self._roster_spots(resolved),
        ):
            if entry is not None:
                entries.append(entry)

        entries.sort(key=lambda e: (-abs(e.impact), e.factor))
        logger.debug("Rationale factors: %s", [(e.factor, e.impact) for e in entries])
        return tuple(entries)

    # ------------------------------------------------------------------
    # Factors
    # ------------------------------------------------------------------

    @staticmethod
    def _value_differential(
        impacts: Tuple[TeamImpact, TeamImpact],
        fairness: FairnessResult,
    ) -> RationaleEntry:
        if fairness.towards_team_id is None:
            text = "Both sides send the same trade value"
        else:
            winner = next(i for i in impacts if i.team_id == fairness.towards_team_id)
            text = (
                f"{winner.team_name} gains {winner.net_delta:.1f} value per week "
                f"({fairness.delta_percent:.1f}% gap)"
            )
        return RationaleEntry(
            factor="Value Differential",
            impact=_clamp_impact(-fairness.delta_percent / 100.0),
            text=text,
        )

    def _positional_value(
        self,
        resolved: ResolvedTrade,
        fairness: FairnessResult,
        valuations: Mapping[str, PlayerValuation],
    ) -> Optional[RationaleEntry]:
        """How positional scarcity moves the balance relative to raw projections."""
        raw_a = sum(valuations[p.player_id].projection for p in resolved.team_a_outgoing)
        raw_b = sum(valuations[p.player_id].projection for p in resolved.team_b_outgoing)
        raw_gap = _gap_percent(raw_a, raw_b)
        impact = _clamp_impact((raw_gap - fairness.delta_percent) / 100.0)
        if impact == 0:
            return None

        direction = "narrows" if impact > 0 else "widens"
        return RationaleEntry(
            factor="Positional Value",
            impact=impact,
            text=(
                f"Positional scarcity {direction} the raw projection gap "
                f"from {raw_gap:.1f}% to {fairness.delta_percent:.1f}%"
            ),
        )

    def _open_slots(self, roster) -> Dict[str, int]:
        return self.lineups.open_starting_slots(roster, self.model.projection)

    def _roster_need(self, resolved: ResolvedTrade) -> Optional[RationaleEntry]:
        """Starting-lineup holes each team fills or opens."""
        net_filled = 0
        notes: List[str] = []
        for team, outgoing, incoming in (
            (resolved.team_a, resolved.team_a_outgoing, resolved.team_b_outgoing),
            (resolved.team_b, resolved.team_b_outgoing, resolved.team_a_outgoing),
        ):
            after: Team = team.exchange(outgoing, incoming)
            before_open = self._open_slots(team.roster)
            after_open = self._open_slots(after.roster)

            filled = sorted(
                slot for slot, n in before_open.items() if after_open.get(slot, 0) < n
            )
            opened = sorted(
                slot for slot, n in after_open.items() if before_open.get(slot, 0) < n
            )
            net_filled += sum(before_open.values()) - sum(after_open.values())
            if filled:
                notes.append(f"{team.name} fills {', '.join(filled)}")
            if opened:
                notes.append(f"{team.name} opens a hole at {', '.join(opened)}")

        if not notes or net_filled == 0:
            return None
        return RationaleEntry(
            factor="Roster Need",
            impact=_clamp_impact(net_filled * ROSTER_NEED_STEP),
            text="; ".join(notes),
        )

    @staticmethod
    def _projection_quality(
        resolved: ResolvedTrade,
        valuations: Mapping[str, PlayerValuation],
    ) -> Optional[RationaleEntry]:
        traded: List[Player] = list(resolved.team_a_outgoing) + list(resolved.team_b_outgoing)
        missing = [p.name for p in traded if valuations[p.player_id].low_sample]
        if not missing:
            return None
        return RationaleEntry(
            factor="Projection Quality",
            impact=_clamp_impact(PROJECTION_QUALITY_IMPACT),
            text=f"No reliable projection for {', '.join(missing)}",
        )

    @staticmethod
    def _roster_spots(resolved: ResolvedTrade) -> Optional[RationaleEntry]:
        sent_a = len(resolved.team_a_outgoing)
        sent_b = len(resolved.team_b_outgoing)
        if sent_a == sent_b:
            return None

        # The side receiving more players has to make room for them.
        crowded = resolved.team_a if sent_b > sent_a else resolved.team_b
        extra = abs(sent_a - sent_b)
        return RationaleEntry(
            factor="Roster Spots",
            impact=_clamp_impact(-ROSTER_SPOT_STEP * extra),
            text=(
                f"{sent_a}-for-{sent_b} trade: {crowded.name} must clear "
                f"{extra} roster spot{'s' if extra > 1 else ''}"
            ),
        )
