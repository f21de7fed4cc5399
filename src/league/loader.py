"""Build League objects from the JSON payload used by the API layer.

The payload mirrors a manually entered league::

    {
      "id": "...", "name": "...",
      "teams": [{"id": "...", "name": "...", "owner": "...",
                 "roster": [{"id": "...", "name": "...", "position": "QB",
                             "team": "KC", "projectedPoints": 20.0}]}],
      "scoring": {"passingYards": 0.04, ...},
      "settings": {"rosterPositions": [...], "playoffTeams": 4,
                   "regularSeasonWeeks": 14, "currentWeek": 8}
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from src.league.errors import InsufficientLeagueDataError
from src.league.models import (
    League,
    LeagueSettings,
    Player,
    Position,
    ScoringRules,
    StatCategory,
    Team,
    normalize_roster_slots,
)

logger = logging.getLogger(__name__)


def _parse_stats(raw: Optional[Mapping]) -> Optional[Dict[StatCategory, float]]:
    if not raw:
        return None
    return {StatCategory(key): float(value) for key, value in raw.items()}


def _player_from_dict(raw: Mapping) -> Player:
    return Player(
        player_id=str(raw["id"]),
        name=raw.get("name", str(raw["id"])),
        position=Position.parse(raw["position"]),
        team=raw.get("team", ""),
        projected_points=raw.get("projectedPoints"),
        stats=_parse_stats(raw.get("stats")),
    )


def _team_from_dict(raw: Mapping) -> Team:
    return Team(
        team_id=str(raw["id"]),
        name=raw.get("name", str(raw["id"])),
        owner=raw.get("owner", ""),
        roster=tuple(_player_from_dict(p) for p in raw.get("roster", [])),
        wins=float(raw.get("wins", 0)),
        losses=float(raw.get("losses", 0)),
        points_for=float(raw.get("pointsFor", 0)),
    )


def league_from_dict(payload: Mapping) -> League:
    """Convert a league payload into a :class:`League`.

    Raises:
        InsufficientLeagueDataError: If required keys are missing or
            values cannot be parsed.
    """
    try:
        teams = tuple(_team_from_dict(t) for t in payload["teams"])
        scoring = payload.get("scoring")
        scoring_rules = (
            ScoringRules({StatCategory(k): float(v) for k, v in scoring.items()})
            if scoring is not None
            else None
        )
        raw_settings = payload.get("settings", {})
        settings = LeagueSettings(
            roster_slots=normalize_roster_slots(raw_settings.get("rosterPositions")),
            playoff_teams=int(raw_settings.get("playoffTeams", 4)),
            regular_season_weeks=int(raw_settings.get("regularSeasonWeeks", 14)),
            current_week=int(raw_settings.get("currentWeek", 1)),
            league_size=int(raw_settings.get("leagueSize", len(teams))),
        )
        schedule = payload.get("schedule")
        if schedule is not None:
            schedule = tuple(
                tuple((str(home), str(away)) for home, away in week)
                for week in schedule
            )
    except KeyError as e:
        raise InsufficientLeagueDataError(f"League payload missing key {e}") from e
    except (TypeError, ValueError) as e:
        raise InsufficientLeagueDataError(f"Malformed league payload: {e}") from e

    return League(
        league_id=str(payload.get("id", "manual-league")),
        name=payload.get("name", "Manual League"),
        teams=teams,
        scoring_rules=scoring_rules,
        settings=settings,
        schedule=schedule,
    )


def load_league(path: Path) -> League:
    """Load a league payload from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"League file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    league = league_from_dict(payload)
    logger.info(
        "Loaded league %s (%d teams) from %s",
        league.league_id, len(league.teams), path,
    )
    return league
