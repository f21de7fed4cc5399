"""Remaining-season matchup schedules."""

from typing import List, Optional, Sequence, Tuple

from src.league.errors import InsufficientLeagueDataError
from src.league.models import League, Matchup


def round_robin(team_ids: Sequence[str]) -> List[List[Matchup]]:
    """Single round-robin rounds using the circle method.

    With an odd number of teams one team sits out (has a bye) each round.
    """
    slots: List[Optional[str]] = list(team_ids)
    if len(slots) % 2:
        slots.append(None)

    rounds: List[List[Matchup]] = []
    half = len(slots) // 2
    for _ in range(len(slots) - 1):
        pairs = []
        for i in range(half):
            home, away = slots[i], slots[-1 - i]
            if home is not None and away is not None:
                pairs.append((home, away))
        rounds.append(pairs)
        # Keep the first slot fixed and rotate the rest clockwise.
        slots = [slots[0], slots[-1]] + slots[1:-1]
    return rounds


def remaining_schedule(league: League, weeks_remaining: int) -> List[Tuple[Matchup, ...]]:
    """Matchups for each of the next *weeks_remaining* weeks.

    Uses the league's explicit schedule when present (cycled if shorter),
    otherwise a round-robin starting at the round for the current week.

    Raises:
        InsufficientLeagueDataError: If the explicit schedule names a team
            that is not in the league or is empty.
    """
    team_ids = [t.team_id for t in league.teams]

    if league.schedule is not None:
        if not league.schedule:
            raise InsufficientLeagueDataError("League schedule has no weeks")
        known = set(team_ids)
        for week in league.schedule:
            for home, away in week:
                if home not in known or away not in known:
                    raise InsufficientLeagueDataError(
                        f"Schedule matchup {home} vs {away} names an unknown team"
                    )
        return [
            tuple(league.schedule[w % len(league.schedule)])
            for w in range(weeks_remaining)
        ]

    rounds = round_robin(team_ids)
    offset = max(league.settings.current_week - 1, 0)
    return [
        tuple(rounds[(offset + w) % len(rounds)])
        for w in range(weeks_remaining)
    ]
