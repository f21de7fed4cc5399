"""Data models for the simulation engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from src.simulation_engine.config import (
    CHUNK_SIZE,
    MAX_ITERATIONS,
    MIN_WEEKLY_STDDEV,
    PARALLEL_ITERATION_THRESHOLD,
    PARALLEL_WORKERS,
    PROJECTION_VOLATILITY,
)


class ExecutionStrategy(str, Enum):
    AUTO = "auto"            # Sequential below the parallel threshold
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"    # Process pool


@dataclass(frozen=True)
class SimulationConfig:
    """Caller-supplied simulation limits and tuning."""

    max_iterations: int = MAX_ITERATIONS
    chunk_size: int = CHUNK_SIZE
    volatility: float = PROJECTION_VOLATILITY
    min_stddev: float = MIN_WEEKLY_STDDEV
    parallel_threshold: int = PARALLEL_ITERATION_THRESHOLD
    workers: int = PARALLEL_WORKERS
    strategy: ExecutionStrategy = ExecutionStrategy.AUTO


@dataclass(frozen=True)
class SeasonOutcomes:
    """Raw results for a batch of simulated seasons under one scenario.

    Arrays are indexed ``[iteration, team]`` (``trajectory`` is
    ``[iteration, week, team]`` cumulative points).
    """

    qualified: np.ndarray
    points: np.ndarray
    wins: np.ndarray
    trajectory: np.ndarray


@dataclass(frozen=True)
class TeamSeasonOutlook:
    """Projected end-of-season outlook for one team in one scenario."""

    team_id: str
    team_name: str
    playoff_probability: float
    mean_points: float
    points_variance: float
    mean_wins: float
    trajectory: Tuple[float, ...]  # Mean cumulative points after each week

    def to_dict(self) -> Dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "playoffProbability": self.playoff_probability,
            "meanPoints": self.mean_points,
            "pointsVariance": self.points_variance,
            "meanWins": self.mean_wins,
            "trajectory": list(self.trajectory),
        }


@dataclass(frozen=True)
class ScenarioSummary:
    teams: Tuple[TeamSeasonOutlook, ...]

    def get(self, team_id: str) -> Optional[TeamSeasonOutlook]:
        for outlook in self.teams:
            if outlook.team_id == team_id:
                return outlook
        return None

    def to_dict(self) -> Dict:
        return {"teams": [t.to_dict() for t in self.teams]}


@dataclass(frozen=True)
class TeamOddsDelta:
    """Change in a trading team's outlook attributable to the trade."""

    team_id: str
    team_name: str
    playoff_probability_delta: float  # with - without
    std_error: float
    mean_points_delta: float

    def to_dict(self) -> Dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "playoffProbabilityDelta": self.playoff_probability_delta,
            "stdError": self.std_error,
            "meanPointsDelta": self.mean_points_delta,
        }


@dataclass(frozen=True)
class SimulationResult:
    with_trade: ScenarioSummary
    without_trade: ScenarioSummary
    delta: Tuple[TeamOddsDelta, ...]
    iterations_used: int
    iterations_requested: int
    truncated: bool
    seed: int
    weeks_remaining: int

    def to_dict(self) -> Dict:
        return {
            "withTrade": self.with_trade.to_dict(),
            "withoutTrade": self.without_trade.to_dict(),
            "delta": {"teams": [d.to_dict() for d in self.delta]},
            "iterationsUsed": self.iterations_used,
            "iterationsRequested": self.iterations_requested,
            "truncated": self.truncated,
            "seed": str(self.seed),
            "weeksRemaining": self.weeks_remaining,
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per team and scenario with the headline statistics."""
        rows = []
        for scenario, summary in (("with_trade", self.with_trade), ("without_trade", self.without_trade)):
            for outlook in summary.teams:
                rows.append({
                    "scenario": scenario,
                    "team_id": outlook.team_id,
                    "team_name": outlook.team_name,
                    "playoff_probability": outlook.playoff_probability,
                    "mean_points": outlook.mean_points,
                    "points_variance": outlook.points_variance,
                    "mean_wins": outlook.mean_wins,
                })
        return pd.DataFrame(rows)
