from src.simulation_engine.aggregator import SimulationAggregator
from src.simulation_engine.models import (
    ExecutionStrategy,
    SimulationConfig,
    SimulationResult,
)
from src.simulation_engine.season_simulator import SeasonSimulator, simulate_league

__all__ = [
    "ExecutionStrategy",
    "SeasonSimulator",
    "SimulationAggregator",
    "SimulationConfig",
    "SimulationResult",
    "simulate_league",
]
