"""Starting lineup selection and slot assignment."""

from typing import Callable, Dict, List, Sequence

from src.league.config import FLEX_ELIGIBLE_POSITIONS, NON_STARTING_SLOTS
from src.league.models import LeagueSettings, Player, Position

_FILLABLE_SLOTS = {p.value for p in Position} | {"FLEX"}


class LineupBuilder:
    """Assigns a roster to lineup slots by descending projection."""

    def __init__(self, settings: LeagueSettings):
        self.slot_limits = settings.effective_roster_slots()

    def determine_slot(self, filled: Dict[str, List[Player]], position: str) -> str:
        """
        Determine which slot the next player at *position* should fill.

        Priority: specific position -> FLEX (if eligible) -> BENCH.
        """
        if len(filled.get(position, [])) < self.slot_limits.get(position, 0):
            return position

        if position in FLEX_ELIGIBLE_POSITIONS:
            if len(filled.get("FLEX", [])) < self.slot_limits.get("FLEX", 0):
                return "FLEX"

        return "BENCH"

    def assign_slots(
        self,
        roster: Sequence[Player],
        projection: Callable[[Player], float],
    ) -> Dict[str, List[Player]]:
        """Place every player, best projection first (ties by player id)."""
        ordered = sorted(roster, key=lambda p: (-projection(p), p.player_id))
        filled: Dict[str, List[Player]] = {}
        for player in ordered:
            slot = self.determine_slot(filled, player.position.value)
            filled.setdefault(slot, []).append(player)
        return filled

    def starters(
        self,
        roster: Sequence[Player],
        projection: Callable[[Player], float],
    ) -> List[Player]:
        """Players that would start this week."""
        return [
            player
            for slot, players in self.assign_slots(roster, projection).items()
            if slot not in NON_STARTING_SLOTS
            for player in players
        ]

    def open_starting_slots(
        self,
        roster: Sequence[Player],
        projection: Callable[[Player], float],
    ) -> Dict[str, int]:
        """Starting slots the roster cannot fill, by slot name."""
        filled = self.assign_slots(roster, projection)
        return {
            slot: limit - len(filled.get(slot, []))
            for slot, limit in self.slot_limits.items()
            if slot in _FILLABLE_SLOTS and limit > len(filled.get(slot, []))
        }
