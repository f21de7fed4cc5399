"""Letter grade and risk tag assignment."""

from typing import Iterable, List, Set, Tuple

from src.league.models import LeagueSettings, Position, Team
from src.trade_engine.config import FAILING_GRADE, GRADE_THRESHOLDS, RISK_THRESHOLDS
from src.trade_engine.models import FairnessResult, LetterGrade, PlayerValuation, RiskTag
from src.trade_engine.trade_validation import ResolvedTrade


def letter_for_score(score: float) -> LetterGrade:
    """Map a 0-100 score to a letter using ``GRADE_THRESHOLDS``."""
    for minimum, letter in GRADE_THRESHOLDS:
        if score >= minimum:
            return letter
    return FAILING_GRADE


def depleted_positions(resolved: ResolvedTrade, settings: LeagueSettings) -> List[Tuple[str, Position]]:
    """``(team_id, position)`` pairs a team is left with no players at.

    Only positions with dedicated starting slots count.
    """
    slots = settings.starting_slot_counts()
    depleted = []
    for team, outgoing, incoming in (
        (resolved.team_a, resolved.team_a_outgoing, resolved.team_b_outgoing),
        (resolved.team_b, resolved.team_b_outgoing, resolved.team_a_outgoing),
    ):
        after: Team = team.exchange(outgoing, incoming)
        for position in sorted({p.position for p in outgoing}, key=lambda p: p.value):
            if slots.get(position.value, 0) > 0 and after.count_position(position) == 0:
                depleted.append((team.team_id, position))
    return depleted


def assign_risk_tags(
    fairness: FairnessResult,
    traded: Iterable[PlayerValuation],
    resolved: ResolvedTrade,
    settings: LeagueSettings,
) -> Tuple[RiskTag, ...]:
    """Risk markers for a graded trade, in ``RiskTag`` declaration order."""
    tags: Set[RiskTag] = set()

    if fairness.delta_percent >= RISK_THRESHOLDS["lopsided_delta_percent"]:
        tags.add(RiskTag.LOPSIDED_VALUE)

    if any(v.low_sample for v in traded):
        tags.add(RiskTag.LOW_SAMPLE_PROJECTION)

    if depleted_positions(resolved, settings):
        tags.add(RiskTag.POSITION_DEPLETION)

    if len(resolved.team_a_outgoing) != len(resolved.team_b_outgoing):
        tags.add(RiskTag.ROSTER_IMBALANCE)

    return tuple(tag for tag in RiskTag if tag in tags)
