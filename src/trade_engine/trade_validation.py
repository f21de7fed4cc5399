"""League and trade validation, and resolution of trade ids to players."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.league.errors import InsufficientLeagueDataError, InvalidTradeError
from src.league.models import League, Player, Team, Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTrade:
    """A validated trade with every id mapped to its player and team."""

    team_a: Team
    team_b: Team
    team_a_outgoing: Tuple[Player, ...]
    team_b_outgoing: Tuple[Player, ...]

    def apply(self, league: League) -> League:
        """Return *league* with both rosters updated as if the trade executed."""
        return league.replace_teams([
            self.team_a.exchange(self.team_a_outgoing, self.team_b_outgoing),
            self.team_b.exchange(self.team_b_outgoing, self.team_a_outgoing),
        ])


def validate_league(league: League) -> None:
    """Raise InsufficientLeagueDataError if the league cannot be graded."""
    if league.scoring_rules is None:
        raise InsufficientLeagueDataError(
            f"League {league.league_id} has no scoring rules"
        )
    if len(league.teams) < 2:
        raise InsufficientLeagueDataError(
            f"League {league.league_id} needs at least two teams "
            f"(has {len(league.teams)})"
        )


def validate_trade(trade: Trade) -> None:
    """Structural checks that need no league data."""
    if not trade.team_a_out:
        raise InvalidTradeError("Team A must send at least one player")
    if not trade.team_b_out:
        raise InvalidTradeError("Team B must send at least one player")

    for side, ids in (("A", trade.team_a_out), ("B", trade.team_b_out)):
        if len(set(ids)) != len(ids):
            raise InvalidTradeError(f"Team {side} lists the same player more than once")

    overlap = set(trade.team_a_out) & set(trade.team_b_out)
    if overlap:
        raise InvalidTradeError(
            f"Players appear on both sides of the trade: {sorted(overlap)}"
        )


def _resolve_side(
    league: League,
    side: str,
    player_ids: Sequence[str],
    claimed_team_id: Optional[str],
) -> Tuple[Team, Tuple[Player, ...]]:
    team: Optional[Team] = None
    if claimed_team_id is not None:
        team = league.get_team(claimed_team_id)
        if team is None:
            raise InvalidTradeError(f"Team {claimed_team_id} is not in the league")

    players: List[Player] = []
    for player_id in player_ids:
        holders = league.teams_holding(player_id)
        if not holders:
            raise InvalidTradeError(f"Player {player_id} is not on any roster")
        if len(holders) > 1:
            raise InvalidTradeError(
                f"Player {player_id} is rostered by more than one team: "
                f"{[t.team_id for t in holders]}"
            )
        holder = holders[0]
        if team is None:
            team = holder
        elif holder.team_id != team.team_id:
            raise InvalidTradeError(
                f"Player {player_id} is not on team {side}'s roster "
                f"({team.team_id}); found on {holder.team_id}"
            )
        players.append(holder.get_player(player_id))

    return team, tuple(players)


def resolve_trade(league: League, trade: Trade) -> ResolvedTrade:
    """Validate *trade* against *league* and resolve ids to players.

    Raises:
        InvalidTradeError: If a side is empty, an id repeats or appears on
            both sides, an id is not rostered, or a side's players do not
            all belong to that side's team.
    """
    validate_trade(trade)
    team_a, a_out = _resolve_side(league, "A", trade.team_a_out, trade.team_a_id)
    team_b, b_out = _resolve_side(league, "B", trade.team_b_out, trade.team_b_id)

    if team_a.team_id == team_b.team_id:
        raise InvalidTradeError(
            f"Both sides of the trade belong to team {team_a.team_id}"
        )

    logger.debug(
        "Resolved trade: %s sends %s, %s sends %s",
        team_a.team_id, [p.player_id for p in a_out],
        team_b.team_id, [p.player_id for p in b_out],
    )
    return ResolvedTrade(team_a, team_b, a_out, b_out)
