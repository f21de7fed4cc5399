"""League data models - immutable snapshots supplied by the calling layer."""

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from src.league.config import (
    DEFAULT_LEAGUE_SIZE,
    DEFAULT_PLAYOFF_TEAMS,
    DEFAULT_REGULAR_SEASON_WEEKS,
    DEFAULT_ROSTER_SLOTS,
    FLEX_ELIGIBLE_POSITIONS,
    NON_STARTING_SLOTS,
    POSITION_ALIASES,
)


class Position(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DEF = "DEF"

    @classmethod
    def parse(cls, value: Union[str, "Position"]) -> "Position":
        """Parse a platform position string (``"DST"`` maps to ``DEF``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        key = POSITION_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown position: {value!r}") from None


class StatCategory(str, Enum):
    PASSING_YARDS = "passingYards"
    PASSING_TOUCHDOWNS = "passingTouchdowns"
    INTERCEPTIONS = "interceptions"
    RUSHING_YARDS = "rushingYards"
    RUSHING_TOUCHDOWNS = "rushingTouchdowns"
    RECEIVING_YARDS = "receivingYards"
    RECEIVING_TOUCHDOWNS = "receivingTouchdowns"
    RECEPTIONS = "receptions"
    FUMBLES = "fumbles"


@dataclass(frozen=True)
class ScoringRules:
    """Per-unit point weights for each statistical category."""

    weights: Mapping[StatCategory, float] = field(default_factory=dict)

    def weight(self, category: StatCategory) -> float:
        return float(self.weights.get(category, 0.0))

    def points(self, stats: Mapping[StatCategory, float]) -> float:
        """Fantasy points for a raw stat line under these rules."""
        return sum(self.weight(cat) * float(amount) for cat, amount in stats.items())


@dataclass(frozen=True)
class Player:
    """A rostered player as reported by the league data source."""

    player_id: str
    name: str
    position: Position
    team: str = ""
    projected_points: Optional[float] = 0.0
    stats: Optional[Mapping[StatCategory, float]] = None  # Raw weekly stat line, if known


def normalize_roster_slots(
    slots: Union[Mapping[str, int], Sequence[str], None],
) -> Dict[str, int]:
    """Count roster slots from either a ``{slot: n}`` mapping or a slot list.

    Platform spellings (``"BN"``, ``"DST"``) are mapped to canonical names.
    """
    if not slots:
        return {}
    if isinstance(slots, Mapping):
        items: Iterable[Tuple[str, int]] = slots.items()
    else:
        items = Counter(slots).items()

    counted: Dict[str, int] = {}
    for slot, count in items:
        key = str(slot).strip().upper()
        key = POSITION_ALIASES.get(key, key)
        counted[key] = counted.get(key, 0) + int(count)
    return counted


@dataclass(frozen=True)
class LeagueSettings:
    """League configuration settings."""

    roster_slots: Mapping[str, int] = field(default_factory=dict)
    playoff_teams: int = DEFAULT_PLAYOFF_TEAMS
    regular_season_weeks: int = DEFAULT_REGULAR_SEASON_WEEKS
    current_week: int = 1
    league_size: int = DEFAULT_LEAGUE_SIZE

    @property
    def remaining_weeks(self) -> int:
        """Regular-season weeks left, counting the current week."""
        return max(self.regular_season_weeks - self.current_week + 1, 0)

    def effective_roster_slots(self) -> Dict[str, int]:
        """Roster slots, falling back to the default layout when none are set."""
        slots = normalize_roster_slots(self.roster_slots)
        return slots or dict(DEFAULT_ROSTER_SLOTS)

    def starting_slots(self, position: Position) -> float:
        """Starting slots available to *position*, including a FLEX share.

        FLEX slots are split evenly between the FLEX-eligible positions.
        """
        slots = self.effective_roster_slots()
        starters = float(slots.get(position.value, 0))
        if position.value in FLEX_ELIGIBLE_POSITIONS:
            starters += slots.get("FLEX", 0) / len(FLEX_ELIGIBLE_POSITIONS)
        return starters

    def starting_slot_counts(self) -> Dict[str, int]:
        """Slot counts with bench and reserve slots removed."""
        return {
            slot: count
            for slot, count in self.effective_roster_slots().items()
            if slot not in NON_STARTING_SLOTS and count > 0
        }


@dataclass(frozen=True)
class Team:
    """A single team's roster and current record."""

    team_id: str
    name: str
    owner: str = ""
    roster: Tuple[Player, ...] = ()
    wins: float = 0.0
    losses: float = 0.0
    points_for: float = 0.0

    def player_ids(self) -> List[str]:
        return [p.player_id for p in self.roster]

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.roster:
            if player.player_id == player_id:
                return player
        return None

    def count_position(self, position: Position) -> int:
        return sum(1 for p in self.roster if p.position == position)

    def exchange(self, outgoing: Sequence[Player], incoming: Sequence[Player]) -> "Team":
        """Return a copy with *outgoing* removed and *incoming* appended."""
        leaving = {p.player_id for p in outgoing}
        kept = tuple(p for p in self.roster if p.player_id not in leaving)
        return replace(self, roster=kept + tuple(incoming))


Matchup = Tuple[str, str]


@dataclass(frozen=True)
class League:
    """Complete league snapshot for one grading or simulation request."""

    league_id: str
    name: str
    teams: Tuple[Team, ...]
    scoring_rules: Optional[ScoringRules]
    settings: LeagueSettings = field(default_factory=LeagueSettings)
    schedule: Optional[Tuple[Tuple[Matchup, ...], ...]] = None  # Remaining weeks, in order

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.teams:
            if team.team_id == team_id:
                return team
        return None

    def teams_holding(self, player_id: str) -> List[Team]:
        """All teams whose roster includes *player_id*."""
        return [t for t in self.teams if t.get_player(player_id) is not None]

    def replace_teams(self, updated: Iterable[Team]) -> "League":
        """Return a copy with the given teams swapped in by ``team_id``."""
        by_id = {t.team_id: t for t in updated}
        return replace(
            self,
            teams=tuple(by_id.get(t.team_id, t) for t in self.teams),
        )


@dataclass(frozen=True)
class Trade:
    """Player ids leaving each side of a two-team trade.

    ``team_a_id`` / ``team_b_id`` are optional; when omitted the owning team
    is inferred from the rosters.
    """

    team_a_out: Tuple[str, ...]
    team_b_out: Tuple[str, ...]
    team_a_id: Optional[str] = None
    team_b_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "team_a_out", tuple(self.team_a_out))
        object.__setattr__(self, "team_b_out", tuple(self.team_b_out))

    @classmethod
    def from_dict(cls, payload: Mapping) -> "Trade":
        """Build a trade from the ``{teamAOut, teamBOut}`` request shape."""
        return cls(
            team_a_out=tuple(payload.get("teamAOut", ())),
            team_b_out=tuple(payload.get("teamBOut", ())),
            team_a_id=payload.get("teamAId"),
            team_b_id=payload.get("teamBId"),
        )

    def to_dict(self) -> Dict:
        out: Dict = {"teamAOut": list(self.team_a_out), "teamBOut": list(self.team_b_out)}
        if self.team_a_id is not None:
            out["teamAId"] = self.team_a_id
        if self.team_b_id is not None:
            out["teamBId"] = self.team_b_id
        return out
