"""Error taxonomy shared by the grading and simulation engines."""


class TradeRefereeError(Exception):
    """Base class for errors raised by the trade engines."""


class InvalidTradeError(TradeRefereeError):
    """Raised when a trade does not match the league's rosters."""


class InsufficientLeagueDataError(TradeRefereeError):
    """Raised when the league lacks the data needed to grade or simulate."""


class SimulationParameterError(TradeRefereeError):
    """Raised for non-positive weeks remaining or iteration counts."""
