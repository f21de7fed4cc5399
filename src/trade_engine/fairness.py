"""Directional fairness measurement and 0-100 trade score.

Formula::

    deltaPercent = 100 * (largerGain - smallerGain) / (2 * max(outA, outB))
    score = 100 - deltaPercent

In a two-team trade each side's gain mirrors the other's loss, so the
spread is ``2 * |outA - outB|`` and deltaPercent reduces to
``|outA - outB| / max(outA, outB)``: zero when both sides send equal value,
approaching 100 as one side's outgoing value vanishes. When nothing of value
moves the trade counts as even.
"""

from src.trade_engine.config import EVEN_TRADE_TOLERANCE
from src.trade_engine.models import FairnessResult, TeamImpact

SCORE_PRECISION = 1


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def compute_fairness(impact_a: TeamImpact, impact_b: TeamImpact) -> FairnessResult:
    """Fairness of a trade from both teams' impacts."""
    if impact_a.net_delta == impact_b.net_delta:
        return FairnessResult(
            towards_team_id=None,
            delta_percent=0.0,
            score=100.0,
            explanation="Even trade: both teams exchange equal value",
        )

    winner, loser = (
        (impact_a, impact_b)
        if impact_a.net_delta > impact_b.net_delta
        else (impact_b, impact_a)
    )
    spread = winner.net_delta - loser.net_delta
    denominator = 2 * max(impact_a.outgoing_value, impact_b.outgoing_value)
    delta_percent = _clamp(100.0 * spread / denominator) if denominator > 0 else 0.0
    delta_percent = round(delta_percent, SCORE_PRECISION)
    score = round(_clamp(100.0 - delta_percent), SCORE_PRECISION)

    if delta_percent == 0.0:
        explanation = (
            f"Essentially even; {winner.team_name} gains by less than "
            f"{10 ** -SCORE_PRECISION:.{SCORE_PRECISION}f}% of the value exchanged"
        )
    elif delta_percent <= EVEN_TRADE_TOLERANCE:
        explanation = (
            f"Roughly even; slightly favors {winner.team_name} "
            f"({delta_percent:.1f}% value gap)"
        )
    else:
        explanation = (
            f"Favors {winner.team_name} by {delta_percent:.1f}% "
            f"of the value exchanged"
        )

    return FairnessResult(
        towards_team_id=winner.team_id,
        delta_percent=delta_percent,
        score=score,
        explanation=explanation,
    )
