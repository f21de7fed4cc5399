"""Tests for the Monte Carlo season simulator."""

import itertools
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import numpy as np
import pytest

from src.league.errors import InvalidTradeError, SimulationParameterError
from src.league.models import Trade
from src.simulation_engine.models import ExecutionStrategy, SimulationConfig
from src.simulation_engine.season_simulator import (
    SeasonPlan,
    SeasonSimulator,
    play_seasons,
    simulate_league,
)

SMALL = SimulationConfig(chunk_size=100, strategy=ExecutionStrategy.SEQUENTIAL)


def _make_simulator(league, **config):
    return SeasonSimulator(league, replace(SMALL, **config))


def _make_plan(matchups, playoff_teams, num_teams=3):
    return SeasonPlan(
        team_ids=tuple(f"t{i}" for i in range(num_teams)),
        team_names=tuple(f"Team {i}" for i in range(num_teams)),
        means=np.zeros(num_teams),
        stddevs=np.zeros(num_teams),
        lineup_with=np.eye(num_teams),
        lineup_without=np.eye(num_teams),
        matchups=tuple((np.array([h]), np.array([a])) for h, a in matchups),
        initial_wins=np.zeros(num_teams),
        initial_points=np.zeros(num_teams),
        playoff_teams=playoff_teams,
        seed=0,
    )


# ── Standings resolution ─────────────────────────────────────────────


class TestPlaySeasons:
    def test_winner_and_points_tiebreak(self):
        plan = _make_plan([(0, 1)], playoff_teams=2)
        outcomes = play_seasons(plan, np.array([[[10.0, 5.0, 7.0]]]), plan.lineup_with)
        np.testing.assert_array_equal(outcomes.wins, [[1.0, 0.0, 0.0]])
        # t1 and t2 are 0-0 on wins; t2 has more points
        np.testing.assert_array_equal(outcomes.qualified, [[True, False, True]])

    def test_tie_splits_credit(self):
        plan = _make_plan([(0, 1)], playoff_teams=1)
        outcomes = play_seasons(plan, np.array([[[6.0, 6.0, 0.0]]]), plan.lineup_with)
        np.testing.assert_array_equal(outcomes.wins, [[0.5, 0.5, 0.0]])
        # Fully tied on wins and points: league order decides
        np.testing.assert_array_equal(outcomes.qualified, [[True, False, False]])

    def test_trajectory_accumulates(self):
        plan = _make_plan([(0, 1), (1, 2)], playoff_teams=1)
        draws = np.array([[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]])
        outcomes = play_seasons(plan, draws, plan.lineup_with)
        np.testing.assert_array_equal(outcomes.trajectory, [[[1, 2, 3], [5, 7, 9]]])
        np.testing.assert_array_equal(outcomes.points, [[5, 7, 9]])

    def test_bench_players_do_not_score(self):
        plan = _make_plan([(0, 1)], playoff_teams=1)
        lineup = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        outcomes = play_seasons(plan, np.array([[[1.0, 50.0, 0.0]]]), lineup)
        np.testing.assert_array_equal(outcomes.wins, [[1.0, 0.0, 0.0]])


# ── Parameters ───────────────────────────────────────────────────────


class TestParameters:
    @pytest.mark.parametrize("weeks,iterations", [(0, 100), (-2, 100), (4, 0), (4, -10)])
    def test_non_positive(self, four_team_league, qb_swap, weeks, iterations):
        with pytest.raises(SimulationParameterError, match="must be positive"):
            _make_simulator(four_team_league).simulate_league(qb_swap, weeks, iterations)

    @pytest.mark.parametrize("iterations", [2.5, "100", True])
    def test_non_integer(self, four_team_league, qb_swap, iterations):
        with pytest.raises(SimulationParameterError, match="must be an integer"):
            _make_simulator(four_team_league).simulate_league(qb_swap, 4, iterations)

    def test_non_positive_time_budget(self, four_team_league, qb_swap):
        with pytest.raises(SimulationParameterError):
            _make_simulator(four_team_league).simulate_league(qb_swap, 4, 100, time_budget=0)

    @pytest.mark.parametrize("seed", [-1, 2.5, "7", True])
    def test_bad_seed(self, four_team_league, qb_swap, seed):
        with pytest.raises(SimulationParameterError, match="seed must be a non-negative integer"):
            _make_simulator(four_team_league).simulate_league(qb_swap, 3, 10, seed=seed)

    def test_numpy_integer_seed_accepted(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(qb_swap, 3, 10, seed=np.int64(3))
        assert result.seed == 3

    def test_invalid_trade(self, four_team_league):
        with pytest.raises(InvalidTradeError):
            _make_simulator(four_team_league).simulate_league(Trade(["t1_qb"], ["t1_k"]), 4, 100)

    def test_iterations_clamped(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league, max_iterations=300).simulate_league(
            qb_swap, 4, 1000, seed=1
        )
        assert result.iterations_used == 300
        assert result.iterations_requested == 1000
        assert not result.truncated


# ── Results ──────────────────────────────────────────────────────────


class TestSimulateLeague:
    def test_same_seed_same_result(self, four_team_league, qb_swap):
        sim = _make_simulator(four_team_league)
        first = sim.simulate_league(qb_swap, 6, 300, seed=42)
        second = sim.simulate_league(qb_swap, 6, 300, seed=42)
        assert first.to_dict() == second.to_dict()

    def test_different_seed_different_draws(self, four_team_league, qb_swap):
        sim = _make_simulator(four_team_league)
        first = sim.simulate_league(qb_swap, 6, 300, seed=1)
        second = sim.simulate_league(qb_swap, 6, 300, seed=2)
        assert first.with_trade.get("t1").mean_points != second.with_trade.get("t1").mean_points

    def test_seed_reported_when_drawn(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(qb_swap, 3, 100)
        assert isinstance(result.seed, int)
        assert result.to_dict()["seed"] == str(result.seed)

    def test_executor_matches_sequential(self, four_team_league, qb_swap):
        sim = _make_simulator(four_team_league)
        sequential = sim.simulate_league(qb_swap, 5, 450, seed=9)
        with ThreadPoolExecutor(max_workers=3) as executor:
            pooled = sim.simulate_league(qb_swap, 5, 450, seed=9, executor=executor)
        assert pooled.to_dict() == sequential.to_dict()

    def test_process_pool_matches_sequential(self, four_team_league, qb_swap):
        sequential = _make_simulator(four_team_league).simulate_league(qb_swap, 5, 450, seed=9)
        pooled = _make_simulator(
            four_team_league, strategy=ExecutionStrategy.PARALLEL, workers=2
        ).simulate_league(qb_swap, 5, 450, seed=9)
        assert pooled.to_dict() == sequential.to_dict()

    def test_probabilities_sum_to_playoff_spots(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(qb_swap, 6, 400, seed=3)
        for summary in (result.with_trade, result.without_trade):
            total = sum(t.playoff_probability for t in summary.teams)
            assert total == pytest.approx(four_team_league.settings.playoff_teams)
            assert all(0.0 <= t.playoff_probability <= 1.0 for t in summary.teams)

    def test_delta_is_with_minus_without(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(qb_swap, 6, 400, seed=3)
        assert [d.team_id for d in result.delta] == ["t1", "t2"]
        for delta in result.delta:
            expected = (
                result.with_trade.get(delta.team_id).playoff_probability
                - result.without_trade.get(delta.team_id).playoff_probability
            )
            assert delta.playoff_probability_delta == pytest.approx(expected)

    def test_trajectory_ends_at_mean_points(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(qb_swap, 4, 200, seed=5)
        for outlook in result.with_trade.teams:
            assert len(outlook.trajectory) == 4
            assert outlook.trajectory[-1] == pytest.approx(outlook.mean_points)
            assert list(outlook.trajectory) == sorted(outlook.trajectory)

    def test_losing_starting_qb_hurts(self, four_team_league):
        # t1 sends its QB for a kicker and is left without a QB
        result = _make_simulator(four_team_league).simulate_league(
            Trade(["t1_qb"], ["t2_k"]), 6, 500, seed=11
        )
        t1 = next(d for d in result.delta if d.team_id == "t1")
        assert t1.mean_points_delta < 0
        assert t1.playoff_probability_delta < 0

    def test_standard_error_shrinks(self, four_team_league):
        trade = Trade(["t1_qb"], ["t2_k"])
        sim = _make_simulator(four_team_league)
        small = sim.simulate_league(trade, 6, 200, seed=8).delta[0]
        large = sim.simulate_league(trade, 6, 3200, seed=8).delta[0]
        assert small.std_error > 0
        assert large.std_error < small.std_error

    def test_existing_record_counts(self, four_team_league, qb_swap):
        leader = replace(four_team_league.get_team("t4"), wins=8, points_for=1200.0)
        league = four_team_league.replace_teams([leader])
        result = _make_simulator(league).simulate_league(qb_swap, 2, 200, seed=4)
        assert result.without_trade.get("t4").playoff_probability == 1.0
        assert result.without_trade.get("t4").mean_points > 1200.0

    def test_result_frame(self, four_team_league, qb_swap):
        df = _make_simulator(four_team_league).simulate_league(qb_swap, 3, 100, seed=1).to_frame()
        assert len(df) == 8
        assert set(df["scenario"]) == {"with_trade", "without_trade"}

    def test_module_function(self, four_team_league, qb_swap):
        result = simulate_league(four_team_league, qb_swap, 3, 100, seed=1, config=SMALL)
        assert result.iterations_used == 100
        assert result.weeks_remaining == 3


# ── Early stopping ───────────────────────────────────────────────────


class TestEarlyStop:
    def test_should_stop_keeps_first_chunk(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(
            qb_swap, 4, 500, seed=1, should_stop=lambda: True
        )
        assert result.truncated
        assert result.iterations_used == 100

    def test_time_budget(self, four_team_league, qb_swap):
        ticks = itertools.count(0, 10)
        result = _make_simulator(four_team_league).simulate_league(
            qb_swap, 4, 500, seed=1, time_budget=5, clock=lambda: next(ticks)
        )
        assert result.truncated
        assert result.iterations_used == 100

    def test_generous_budget_completes(self, four_team_league, qb_swap):
        result = _make_simulator(four_team_league).simulate_league(
            qb_swap, 4, 300, seed=1, time_budget=3600
        )
        assert not result.truncated
        assert result.iterations_used == 300

    def test_executor_stop(self, four_team_league, qb_swap):
        with ThreadPoolExecutor(max_workers=2) as executor:
            result = _make_simulator(four_team_league).simulate_league(
                qb_swap, 4, 500, seed=1, should_stop=lambda: True, executor=executor
            )
        assert result.truncated
        assert result.iterations_used == 100

    def test_truncated_prefix_matches_full_run(self, four_team_league, qb_swap):
        sim = _make_simulator(four_team_league)
        stopped = sim.simulate_league(qb_swap, 4, 500, seed=6, should_stop=lambda: True)
        first_chunk = sim.simulate_league(qb_swap, 4, 100, seed=6)
        assert stopped.with_trade.to_dict() == first_chunk.with_trade.to_dict()


# ── Execution strategy ───────────────────────────────────────────────


class TestExecutionStrategy:
    def test_auto_switches_at_threshold(self, four_team_league):
        sim = _make_simulator(four_team_league, strategy=ExecutionStrategy.AUTO, parallel_threshold=500)
        assert not sim._use_pool(499)
        assert sim._use_pool(500)

    def test_sequential_never_pools(self, four_team_league):
        sim = _make_simulator(four_team_league, parallel_threshold=1)
        assert not sim._use_pool(10_000)

    def test_parallel_always_pools(self, four_team_league):
        sim = _make_simulator(four_team_league, strategy=ExecutionStrategy.PARALLEL)
        assert sim._use_pool(1)
