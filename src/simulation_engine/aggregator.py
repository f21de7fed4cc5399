"""Mergeable summary statistics over simulated seasons.

Every accumulator here is built from a batch of iterations and combined
with :meth:`merge`. Qualification counts and paired qualification
differences are integers, so they merge exactly in any order; point and win
moments use the pairwise mean/M2 update (Chan et al.), which is
order-independent up to floating-point rounding. Callers wanting bit-for-bit
reproducibility merge partials in a fixed order.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from src.simulation_engine.models import (
    ScenarioSummary,
    SeasonOutcomes,
    TeamOddsDelta,
    TeamSeasonOutlook,
)


@dataclass(frozen=True)
class RunningMoments:
    """Count, mean and sum of squared deviations per team."""

    count: int
    mean: np.ndarray
    m2: np.ndarray

    @classmethod
    def empty(cls, num_teams: int) -> "RunningMoments":
        return cls(0, np.zeros(num_teams), np.zeros(num_teams))

    @classmethod
    def from_batch(cls, values: np.ndarray) -> "RunningMoments":
        """Moments of an ``(iterations, teams)`` batch."""
        if values.shape[0] == 0:
            return cls.empty(values.shape[1])
        mean = values.mean(axis=0)
        return cls(values.shape[0], mean, ((values - mean) ** 2).sum(axis=0))

    def merge(self, other: "RunningMoments") -> "RunningMoments":
        if other.count == 0:
            return self
        if self.count == 0:
            return other
        count = self.count + other.count
        delta = other.mean - self.mean
        mean = self.mean + delta * (other.count / count)
        m2 = self.m2 + other.m2 + delta ** 2 * (self.count * other.count / count)
        return RunningMoments(count, mean, m2)

    @property
    def variance(self) -> np.ndarray:
        """Sample variance (zero with fewer than two observations)."""
        if self.count < 2:
            return np.zeros_like(self.mean)
        return self.m2 / (self.count - 1)


@dataclass(frozen=True)
class ScenarioAccumulator:
    """Aggregates for one scenario (with or without the trade)."""

    iterations: int
    qualified: np.ndarray        # int, per team
    points: RunningMoments
    wins: RunningMoments
    trajectory_sum: np.ndarray   # (weeks, teams) sum of cumulative points

    @classmethod
    def empty(cls, num_teams: int, weeks: int) -> "ScenarioAccumulator":
        return cls(
            iterations=0,
            qualified=np.zeros(num_teams, dtype=np.int64),
            points=RunningMoments.empty(num_teams),
            wins=RunningMoments.empty(num_teams),
            trajectory_sum=np.zeros((weeks, num_teams)),
        )

    @classmethod
    def from_outcomes(cls, outcomes: SeasonOutcomes) -> "ScenarioAccumulator":
        return cls(
            iterations=outcomes.qualified.shape[0],
            qualified=outcomes.qualified.sum(axis=0, dtype=np.int64),
            points=RunningMoments.from_batch(outcomes.points),
            wins=RunningMoments.from_batch(outcomes.wins),
            trajectory_sum=outcomes.trajectory.sum(axis=0),
        )

    def merge(self, other: "ScenarioAccumulator") -> "ScenarioAccumulator":
        return ScenarioAccumulator(
            iterations=self.iterations + other.iterations,
            qualified=self.qualified + other.qualified,
            points=self.points.merge(other.points),
            wins=self.wins.merge(other.wins),
            trajectory_sum=self.trajectory_sum + other.trajectory_sum,
        )

    def probabilities(self) -> np.ndarray:
        if self.iterations == 0:
            return np.zeros_like(self.qualified, dtype=float)
        return self.qualified / self.iterations


class SimulationAggregator:
    """Paired with-trade / without-trade aggregates for a set of teams.

    Per-iteration qualification differences (with minus without, each in
    {-1, 0, 1}) are tracked as integer sums so the trade-attributable
    probability delta and its standard error merge exactly.
    """

    def __init__(
        self,
        team_ids: Sequence[str],
        team_names: Sequence[str],
        weeks: int,
        with_trade: Optional[ScenarioAccumulator] = None,
        without_trade: Optional[ScenarioAccumulator] = None,
        diff_sum: Optional[np.ndarray] = None,
        diff_sq_sum: Optional[np.ndarray] = None,
    ):
        num_teams = len(team_ids)
        self.team_ids = tuple(team_ids)
        self.team_names = tuple(team_names)
        self.weeks = weeks
        self.with_trade = with_trade or ScenarioAccumulator.empty(num_teams, weeks)
        self.without_trade = without_trade or ScenarioAccumulator.empty(num_teams, weeks)
        self.diff_sum = diff_sum if diff_sum is not None else np.zeros(num_teams, dtype=np.int64)
        self.diff_sq_sum = (
            diff_sq_sum if diff_sq_sum is not None else np.zeros(num_teams, dtype=np.int64)
        )

    @property
    def iterations(self) -> int:
        return self.with_trade.iterations

    def observe(self, with_trade: SeasonOutcomes, without_trade: SeasonOutcomes) -> "SimulationAggregator":
        """Aggregator with a batch of paired iterations folded in."""
        if with_trade.qualified.shape != without_trade.qualified.shape:
            raise ValueError("Paired outcomes must cover the same iterations and teams")

        diff = with_trade.qualified.astype(np.int64) - without_trade.qualified.astype(np.int64)
        batch = SimulationAggregator(
            self.team_ids,
            self.team_names,
            self.weeks,
            with_trade=ScenarioAccumulator.from_outcomes(with_trade),
            without_trade=ScenarioAccumulator.from_outcomes(without_trade),
            diff_sum=diff.sum(axis=0),
            diff_sq_sum=(diff * diff).sum(axis=0),
        )
        return self.merge(batch)

    def merge(self, other: "SimulationAggregator") -> "SimulationAggregator":
        if other.team_ids != self.team_ids or other.weeks != self.weeks:
            raise ValueError("Cannot merge aggregates for different teams or horizons")
        return SimulationAggregator(
            self.team_ids,
            self.team_names,
            self.weeks,
            with_trade=self.with_trade.merge(other.with_trade),
            without_trade=self.without_trade.merge(other.without_trade),
            diff_sum=self.diff_sum + other.diff_sum,
            diff_sq_sum=self.diff_sq_sum + other.diff_sq_sum,
        )

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def _scenario_summary(self, acc: ScenarioAccumulator) -> ScenarioSummary:
        probabilities = acc.probabilities()
        variance = acc.points.variance
        trajectory = (
            acc.trajectory_sum / acc.iterations
            if acc.iterations
            else np.zeros_like(acc.trajectory_sum)
        )
        teams = tuple(
            TeamSeasonOutlook(
                team_id=team_id,
                team_name=self.team_names[idx],
                playoff_probability=float(probabilities[idx]),
                mean_points=float(acc.points.mean[idx]),
                points_variance=float(variance[idx]),
                mean_wins=float(acc.wins.mean[idx]),
                trajectory=tuple(float(x) for x in trajectory[:, idx]),
            )
            for idx, team_id in enumerate(self.team_ids)
        )
        return ScenarioSummary(teams=teams)

    def _delta(self, idx: int) -> TeamOddsDelta:
        n = self.iterations
        mean_diff = self.diff_sum[idx] / n if n else 0.0
        if n > 1:
            diff_var = (self.diff_sq_sum[idx] - self.diff_sum[idx] ** 2 / n) / (n - 1)
            std_error = math.sqrt(max(diff_var, 0.0) / n)
        else:
            std_error = 0.0
        return TeamOddsDelta(
            team_id=self.team_ids[idx],
            team_name=self.team_names[idx],
            playoff_probability_delta=float(mean_diff),
            std_error=float(std_error),
            mean_points_delta=float(
                self.with_trade.points.mean[idx] - self.without_trade.points.mean[idx]
            ),
        )

    def summary(self, involved_team_ids: Sequence[str]) -> Tuple[ScenarioSummary, ScenarioSummary, Tuple[TeamOddsDelta, ...]]:
        """With-trade summary, without-trade summary, and deltas for *involved_team_ids*."""
        index: Dict[str, int] = {team_id: i for i, team_id in enumerate(self.team_ids)}
        return (
            self._scenario_summary(self.with_trade),
            self._scenario_summary(self.without_trade),
            tuple(self._delta(index[team_id]) for team_id in involved_team_ids),
        )
