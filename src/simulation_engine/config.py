# Monte Carlo parameters
DEFAULT_ITERATIONS = 1000
MAX_ITERATIONS = 10000  # Requests above this are clamped, not rejected
CHUNK_SIZE = 250  # Iterations per partial aggregate / work unit

# Weekly score distribution: Normal(projection, volatility * projection), clipped at 0
PROJECTION_VOLATILITY = 0.35  # Boom/bust spread as a fraction of projection
MIN_WEEKLY_STDDEV = 1.0  # Floor for players with a small positive projection

# Parallel execution
PARALLEL_ITERATION_THRESHOLD = 5000  # AUTO strategy fans out at or above this
PARALLEL_WORKERS = 4  # CPU cores for parallel simulation

# Half a win to each side when weekly scores tie
TIE_CREDIT = 0.5
