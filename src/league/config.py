# Default roster configuration (used when a league supplies no slots)
DEFAULT_ROSTER_SLOTS = {
    "QB": 1,
    "RB": 2,
    "WR": 2,
    "TE": 1,
    "FLEX": 1,
    "DEF": 1,
    "K": 1,
    "BENCH": 6,
}

# Default league settings
DEFAULT_LEAGUE_SIZE = 12
DEFAULT_PLAYOFF_TEAMS = 4
DEFAULT_REGULAR_SEASON_WEEKS = 14

FLEX_ELIGIBLE_POSITIONS = {"RB", "WR", "TE"}

# Slots that never contribute to a weekly score
NON_STARTING_SLOTS = {"BENCH", "BN", "IR", "TAXI"}

# Platform spellings mapped to canonical slot / position names
POSITION_ALIASES = {
    "DST": "DEF",
    "D/ST": "DEF",
    "BN": "BENCH",
    "W/R/T": "FLEX",
}
