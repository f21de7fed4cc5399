"""Team-level value totals for a trade."""

from typing import Mapping, Sequence, Tuple

from src.league.errors import InvalidTradeError
from src.league.models import Player, Team
from src.trade_engine.models import PlayerValuation, TeamImpact
from src.trade_engine.trade_validation import ResolvedTrade

VALUE_PRECISION = 2


def _side_total(
    team: Team,
    players: Sequence[Player],
    valuations: Mapping[str, PlayerValuation],
) -> float:
    if not players:
        raise InvalidTradeError(f"Team {team.team_id} must send at least one player")
    total = 0.0
    for player in players:
        valuation = valuations.get(player.player_id)
        if valuation is None:
            raise InvalidTradeError(
                f"Player {player.player_id} could not be resolved for team {team.team_id}"
            )
        total += valuation.value
    return total


def compute_impacts(
    resolved: ResolvedTrade,
    valuations: Mapping[str, PlayerValuation],
) -> Tuple[TeamImpact, TeamImpact]:
    """Outgoing, incoming and net value for both teams, team A first.

    Totals are rounded to ``VALUE_PRECISION`` places; downstream fairness
    math works from these reported figures.
    """
    a_out = round(_side_total(resolved.team_a, resolved.team_a_outgoing, valuations), VALUE_PRECISION)
    b_out = round(_side_total(resolved.team_b, resolved.team_b_outgoing, valuations), VALUE_PRECISION)

    return (
        TeamImpact(
            team_id=resolved.team_a.team_id,
            team_name=resolved.team_a.name,
            outgoing_value=a_out,
            incoming_value=b_out,
            net_delta=round(b_out - a_out, VALUE_PRECISION),
        ),
        TeamImpact(
            team_id=resolved.team_b.team_id,
            team_name=resolved.team_b.name,
            outgoing_value=b_out,
            incoming_value=a_out,
            net_delta=round(a_out - b_out, VALUE_PRECISION),
        ),
    )
