from src.trade_engine.models import LetterGrade

# Valuation parameters
POSITION_SCARCITY_WEIGHTS = {
    "QB": 1.2,
    "RB": 2.0,
    "WR": 1.8,
    "TE": 1.5,
    "K": 1.0,
    "DEF": 1.0,
}

# Startable pool size per position in a 12-team league
REPLACEMENT_POOL_SIZES = {
    "QB": 12,
    "RB": 36,
    "WR": 36,
    "TE": 12,
    "K": 12,
    "DEF": 12,
}

# Grading thresholds: minimum score for each letter, best first
GRADE_THRESHOLDS = (
    (90.0, LetterGrade.A),
    (80.0, LetterGrade.B),
    (70.0, LetterGrade.C),
    (60.0, LetterGrade.D),
)
FAILING_GRADE = LetterGrade.F

RISK_THRESHOLDS = {
    "lopsided_delta_percent": 40.0,  # deltaPercent at or above this is lopsided
    "low_sample_projection": 0.0,    # projections at or below this are unreliable
}

# Rationale factor impacts
ROSTER_NEED_STEP = 0.25         # Per starting hole filled or opened
PROJECTION_QUALITY_IMPACT = -0.3
ROSTER_SPOT_STEP = 0.1          # Per extra player on one side
EVEN_TRADE_TOLERANCE = 5.0      # deltaPercent treated as even in explanations

# Counter-offer search
CANDIDATE_POOL_SIZE = 15  # Players nearest the value gap to try
MAX_COUNTER_OFFERS = 3
