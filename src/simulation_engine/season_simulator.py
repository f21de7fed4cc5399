"""Monte Carlo season simulator.

Each iteration plays out the remaining weeks twice on the same random
draws: once with the trade applied to rosters and once without, so the
playoff-odds delta is a paired comparison.

Weekly player scores are drawn from ``Normal(mu, sigma)`` clipped at 0
(a censored normal), where ``mu`` is the player's rules-adjusted weekly
projection and ``sigma = max(volatility * mu, min_stddev)`` for ``mu > 0``
(zero otherwise). Only each team's best projected starting lineup scores.

Iteration ``i`` draws from its own generator seeded with
``SeedSequence(seed, spawn_key=(i,))``, so results do not depend on which
worker ran which iteration. Iterations run in fixed-size chunks whose
partial aggregates are merged in chunk order.
"""

import concurrent.futures
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from src.league.errors import SimulationParameterError
from src.league.lineup import LineupBuilder
from src.league.models import League, Player, Trade
from src.simulation_engine.aggregator import SimulationAggregator
from src.simulation_engine.config import DEFAULT_ITERATIONS, TIE_CREDIT
from src.simulation_engine.models import (
    ExecutionStrategy,
    SeasonOutcomes,
    SimulationConfig,
    SimulationResult,
)
from src.simulation_engine.schedule import remaining_schedule
from src.trade_engine.trade_validation import resolve_trade, validate_league
from src.trade_engine.valuation import ValuationModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonPlan:
    """Everything a worker needs to simulate a range of iterations.

    Arrays are indexed by player (``P``) and team (``T``) in league order.
    """

    team_ids: Tuple[str, ...]
    team_names: Tuple[str, ...]
    means: np.ndarray            # (P,)
    stddevs: np.ndarray          # (P,)
    lineup_with: np.ndarray      # (T, P) 1.0 where the player starts
    lineup_without: np.ndarray   # (T, P)
    matchups: Tuple[Tuple[np.ndarray, np.ndarray], ...]  # per week: (home idx, away idx)
    initial_wins: np.ndarray     # (T,)
    initial_points: np.ndarray   # (T,)
    playoff_teams: int
    seed: int

    @property
    def weeks(self) -> int:
        return len(self.matchups)


def play_seasons(plan: SeasonPlan, draws: np.ndarray, lineup: np.ndarray) -> SeasonOutcomes:
    """Resolve standings for a batch of player-score draws.

    Args:
        plan: The season plan.
        draws: ``(iterations, weeks, players)`` weekly player scores.
        lineup: ``(teams, players)`` starter membership.
    """
    n = draws.shape[0]
    num_teams = len(plan.team_ids)
    team_scores = draws @ lineup.T  # (n, weeks, teams)

    wins = np.tile(plan.initial_wins, (n, 1))
    for week, (home, away) in enumerate(plan.matchups):
        home_scores = team_scores[:, week, home]
        away_scores = team_scores[:, week, away]
        ties = np.where(home_scores == away_scores, TIE_CREDIT, 0.0)
        np.add.at(wins, (slice(None), home), (home_scores > away_scores) + ties)
        np.add.at(wins, (slice(None), away), (away_scores > home_scores) + ties)

    trajectory = plan.initial_points + np.cumsum(team_scores, axis=1)
    points = trajectory[:, -1, :]

    # Seeds: most wins, then most points, then league order.
    league_order = np.broadcast_to(np.arange(num_teams), (n, num_teams))
    order = np.lexsort((league_order, -points, -wins), axis=-1)
    seeds = np.argsort(order, axis=1)
    qualified = seeds < plan.playoff_teams

    return SeasonOutcomes(qualified=qualified, points=points, wins=wins, trajectory=trajectory)


def draw_scores(plan: SeasonPlan, start: int, stop: int) -> np.ndarray:
    """Weekly scores for iterations ``[start, stop)``, one generator each."""
    draws = np.empty((stop - start, plan.weeks, len(plan.means)))
    for offset, iteration in enumerate(range(start, stop)):
        rng = np.random.default_rng(np.random.SeedSequence(plan.seed, spawn_key=(iteration,)))
        draws[offset] = rng.normal(plan.means, plan.stddevs, size=(plan.weeks, len(plan.means)))
    return np.maximum(draws, 0.0)


def simulate_chunk(plan: SeasonPlan, start: int, stop: int) -> SimulationAggregator:
    """Simulate iterations ``[start, stop)`` and return their partial aggregate."""
    draws = draw_scores(plan, start, stop)
    aggregator = SimulationAggregator(plan.team_ids, plan.team_names, plan.weeks)
    return aggregator.observe(
        play_seasons(plan, draws, plan.lineup_with),
        play_seasons(plan, draws, plan.lineup_without),
    )


class SeasonSimulator:
    """Projects how a trade shifts each team's playoff odds.

    The simulator holds only the league and configuration it was built
    with; every call to :meth:`simulate_league` is independent.
    """

    def __init__(self, league: League, config: Optional[SimulationConfig] = None):
        validate_league(league)
        self.league = league
        self.config = config or SimulationConfig()
        self.model = ValuationModel(league.scoring_rules, league.settings)
        self.lineups = LineupBuilder(league.settings)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def simulate_league(
        self,
        trade: Trade,
        weeks_remaining: int,
        iterations: int = DEFAULT_ITERATIONS,
        seed: Optional[int] = None,
        time_budget: Optional[float] = None,
        should_stop: Optional[Callable[[], bool]] = None,
        executor: Optional[concurrent.futures.Executor] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> SimulationResult:
        """Simulate the rest of the season with and without *trade*.

        Args:
            trade: The proposed trade.
            weeks_remaining: Regular-season weeks left to play.
            iterations: Requested iterations; clamped to
                ``config.max_iterations``.
            seed: Base seed. When omitted one is drawn from fresh entropy
                and reported on the result.
            time_budget: Seconds after which no further chunks start.
            should_stop: Polled between chunks; returning True stops early.
            executor: Runs chunks when given, overriding the configured
                strategy.
            clock: Time source for *time_budget*.

        Returns:
            A :class:`SimulationResult`, flagged ``truncated`` when stopped
            early. At least one chunk is always completed.

        Raises:
            SimulationParameterError: Non-positive weeks or iterations,
                or a seed that is not a non-negative integer.
            InvalidTradeError: The trade does not match the rosters.
        """
        self._validate_parameters(weeks_remaining, iterations, time_budget, seed)
        if iterations > self.config.max_iterations:
            logger.info(
                "Clamping %d requested iterations to %d",
                iterations, self.config.max_iterations,
            )
        iterations_used_cap = min(iterations, self.config.max_iterations)

        if seed is None:
            seed = int(np.random.SeedSequence().entropy)

        resolved = resolve_trade(self.league, trade)
        plan = self.build_plan(resolved.apply(self.league), weeks_remaining, seed)
        chunks = self._chunks(iterations_used_cap)

        deadline = clock() + time_budget if time_budget is not None else None

        def stop_requested() -> bool:
            if should_stop is not None and should_stop():
                return True
            return deadline is not None and clock() >= deadline

        if executor is not None:
            partials, truncated = self._run_with_executor(executor, plan, chunks, stop_requested, deadline, clock)
        elif self._use_pool(iterations_used_cap):
            pool = concurrent.futures.ProcessPoolExecutor(max_workers=self.config.workers)
            truncated = False
            try:
                partials, truncated = self._run_with_executor(pool, plan, chunks, stop_requested, deadline, clock)
            finally:
                pool.shutdown(wait=not truncated, cancel_futures=True)
        else:
            partials, truncated = self._run_sequential(plan, chunks, stop_requested)

        total = SimulationAggregator(plan.team_ids, plan.team_names, plan.weeks)
        for partial in partials:
            total = total.merge(partial)

        with_trade, without_trade, delta = total.summary(
            (resolved.team_a.team_id, resolved.team_b.team_id)
        )
        if truncated:
            logger.warning(
                "Simulation stopped early after %d of %d iterations",
                total.iterations, iterations_used_cap,
            )
        logger.info(
            "Simulated %d iterations over %d weeks (seed=%d): %s",
            total.iterations, weeks_remaining, seed,
            ", ".join(
                f"{d.team_id} {d.playoff_probability_delta:+.3f}" for d in delta
            ),
        )

        return SimulationResult(
            with_trade=with_trade,
            without_trade=without_trade,
            delta=delta,
            iterations_used=total.iterations,
            iterations_requested=iterations,
            truncated=truncated,
            seed=seed,
            weeks_remaining=weeks_remaining,
        )

    def build_plan(self, traded_league: League, weeks_remaining: int, seed: int) -> SeasonPlan:
        """Precompute distributions, lineups and matchups for both scenarios."""
        players: List[Player] = [p for team in self.league.teams for p in team.roster]
        index = {p.player_id: i for i, p in enumerate(players)}

        means = np.array([self.model.projection(p) for p in players], dtype=float)
        stddevs = np.where(
            means > 0,
            np.maximum(means * self.config.volatility, self.config.min_stddev),
            0.0,
        )

        team_index = {t.team_id: i for i, t in enumerate(self.league.teams)}
        matchups = tuple(
            (
                np.array([team_index[home] for home, _ in week], dtype=np.intp),
                np.array([team_index[away] for _, away in week], dtype=np.intp),
            )
            for week in remaining_schedule(self.league, weeks_remaining)
        )

        return SeasonPlan(
            team_ids=tuple(t.team_id for t in self.league.teams),
            team_names=tuple(t.name for t in self.league.teams),
            means=means,
            stddevs=stddevs,
            lineup_with=self._lineup_matrix(traded_league, index),
            lineup_without=self._lineup_matrix(self.league, index),
            matchups=matchups,
            initial_wins=np.array([t.wins for t in self.league.teams], dtype=float),
            initial_points=np.array([t.points_for for t in self.league.teams], dtype=float),
            playoff_teams=self.league.settings.playoff_teams,
            seed=seed,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_parameters(weeks_remaining, iterations, time_budget, seed=None) -> None:
        for name, value in (("weeks_remaining", weeks_remaining), ("iterations", iterations)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise SimulationParameterError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise SimulationParameterError(f"{name} must be positive, got {value}")
        if time_budget is not None and time_budget <= 0:
            raise SimulationParameterError(f"time_budget must be positive, got {time_budget}")
        if seed is not None and (
            isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0
        ):
            raise SimulationParameterError(f"seed must be a non-negative integer, got {seed!r}")

    def _lineup_matrix(self, league: League, index) -> np.ndarray:
        matrix = np.zeros((len(league.teams), len(index)))
        for t, team in enumerate(league.teams):
            for player in self.lineups.starters(team.roster, self.model.projection):
                matrix[t, index[player.player_id]] = 1.0
        return matrix

    def _chunks(self, iterations: int) -> List[Tuple[int, int]]:
        size = max(self.config.chunk_size, 1)
        return [(start, min(start + size, iterations)) for start in range(0, iterations, size)]

    def _use_pool(self, iterations: int) -> bool:
        if self.config.strategy == ExecutionStrategy.PARALLEL:
            return True
        if self.config.strategy == ExecutionStrategy.SEQUENTIAL:
            return False
        return iterations >= self.config.parallel_threshold

    @staticmethod
    def _run_sequential(
        plan: SeasonPlan,
        chunks: Sequence[Tuple[int, int]],
        stop_requested: Callable[[], bool],
    ) -> Tuple[List[SimulationAggregator], bool]:
        partials = []
        for i, (start, stop) in enumerate(chunks):
            partials.append(simulate_chunk(plan, start, stop))
            if i + 1 < len(chunks) and stop_requested():
                return partials, True
        return partials, False

    @staticmethod
    def _run_with_executor(
        executor: concurrent.futures.Executor,
        plan: SeasonPlan,
        chunks: Sequence[Tuple[int, int]],
        stop_requested: Callable[[], bool],
        deadline: Optional[float],
        clock: Callable[[], float],
    ) -> Tuple[List[SimulationAggregator], bool]:
        """Fan chunks out to *executor*; collect them back in chunk order."""
        futures = [executor.submit(simulate_chunk, plan, start, stop) for start, stop in chunks]
        partials = [futures[0].result()]
        truncated = False
        for future in futures[1:]:
            if stop_requested():
                truncated = True
                break
            timeout = max(deadline - clock(), 0.0) if deadline is not None else None
            try:
                partials.append(future.result(timeout=timeout))
            except concurrent.futures.TimeoutError:
                truncated = True
                break

        if truncated:
            for future in futures[len(partials):]:
                future.cancel()
        return partials, truncated


def simulate_league(
    league: League,
    trade: Trade,
    weeks_remaining: int,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """Simulate *league* for *weeks_remaining* weeks with and without *trade*."""
    return SeasonSimulator(league, config).simulate_league(
        trade, weeks_remaining, iterations, seed=seed
    )
