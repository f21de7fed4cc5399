from src.league.demo import build_demo_league
from src.league.errors import (
    InsufficientLeagueDataError,
    InvalidTradeError,
    SimulationParameterError,
    TradeRefereeError,
)
from src.league.lineup import LineupBuilder
from src.league.models import (
    League,
    LeagueSettings,
    Player,
    Position,
    ScoringRules,
    StatCategory,
    Team,
    Trade,
)

__all__ = [
    "InsufficientLeagueDataError",
    "InvalidTradeError",
    "League",
    "LeagueSettings",
    "LineupBuilder",
    "Player",
    "Position",
    "ScoringRules",
    "SimulationParameterError",
    "StatCategory",
    "Team",
    "Trade",
    "TradeRefereeError",
    "build_demo_league",
]
