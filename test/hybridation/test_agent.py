#!/usr/bin/env python3
"""
Tests for the Agent round model: iteration counts, timestamps, copies and the
improvement ratio.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Core.heuristic import Heuristic
from Core.problem import Solution
from Heuristics.local_search import LocalSearchHeuristic
from Hybridation.agent import MAX_ITERATIONS, MIN_ITERATIONS, Agent
from Knapsack.knapsack import KnapsackProblem


class CountingHeuristic(Heuristic):
    """Evaluates one neighbour per call and counts the calls."""

    name = "counting"

    def __init__(self, problem, *, rng=None):
        super().__init__(problem, rng=rng)
        self.calls = 0

    def execute_once(self, solution):
        self.calls += 1
        candidate = self.problem.neighbor(solution, self.rng)
        candidate.evaluate()
        return candidate


class FrozenHeuristic(Heuristic):
    """Performs no evaluations: returns a copy of the input."""

    name = "frozen"

    def execute_once(self, solution):
        return solution.copy()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def problem():
    return KnapsackProblem([10, 40, 30, 50, 35], [5, 4, 6, 3, 7], 10, seed=0)


@pytest.fixture
def start(problem):
    sol = problem.get_initial_solution()
    sol.evaluate()
    return sol


# =============================================================================
# Construction
# =============================================================================

class TestAgentConstruction:

    def test_reference_iteration_bounds(self):
        assert (MIN_ITERATIONS, MAX_ITERATIONS) == (100, 150)

    def test_initial_state(self, problem, start):
        agent = Agent(CountingHeuristic(problem), start, problem.evaluation_counter)
        assert agent.state == "idle"
        assert agent.previous_timestamp == agent.current_timestamp
        assert agent.previous_solution == agent.current_solution
        assert agent.previous_solution is not agent.current_solution
        assert agent.calculate_improvement_ratio() == 0.0

    def test_constructor_copies_solution(self, problem, start):
        agent = Agent(CountingHeuristic(problem), start, problem.evaluation_counter)
        start.representation[0] = 1
        assert agent.current_solution.representation[0] == 0

    def test_rejects_invalid_bounds(self, problem, start):
        with pytest.raises(ValueError):
            Agent(CountingHeuristic(problem), start, problem.evaluation_counter, min_iterations=10, max_iterations=5)
        with pytest.raises(ValueError):
            Agent(CountingHeuristic(problem), start, problem.evaluation_counter, min_iterations=-1)


# =============================================================================
# Stepping
# =============================================================================

class TestAgentStep:

    def test_step_calls_heuristic_within_bounds(self, problem, start):
        heuristic = CountingHeuristic(problem, rng=np.random.default_rng(0))
        agent = Agent(heuristic, start, problem.evaluation_counter, rng=np.random.default_rng(1))
        for _ in range(30):
            before = heuristic.calls
            performed = agent.step()
            assert heuristic.calls - before == performed
            assert MIN_ITERATIONS <= performed <= MAX_ITERATIONS

    def test_iteration_draw_covers_closed_range(self, problem, start):
        agent = Agent(
            CountingHeuristic(problem), start, problem.evaluation_counter,
            min_iterations=2, max_iterations=4, rng=np.random.default_rng(3),
        )
        assert {agent.generate_iterations() for _ in range(200)} == {2, 3, 4}

    def test_step_advances_timestamps(self, problem, start):
        counter = problem.evaluation_counter
        agent = Agent(
            CountingHeuristic(problem, rng=np.random.default_rng(0)), start, counter,
            min_iterations=5, max_iterations=8, rng=np.random.default_rng(1),
        )
        first_stamp = agent.current_timestamp
        performed = agent.step()
        assert agent.previous_timestamp == first_stamp
        assert agent.current_timestamp == counter.current_count()
        assert agent.current_timestamp - agent.previous_timestamp == performed
        assert agent.state == "ready"

        agent.step()
        assert agent.previous_timestamp <= agent.current_timestamp

    def test_step_snapshots_previous_solution(self, problem, start):
        agent = Agent(
            CountingHeuristic(problem, rng=np.random.default_rng(0)), start, problem.evaluation_counter,
            min_iterations=3, max_iterations=3, rng=np.random.default_rng(1),
        )
        agent.step()
        after_first = agent.get_current_solution()
        agent.step()
        assert agent.previous_solution == after_first
        assert agent.previous_solution is not agent.current_solution

    def test_execute_once_leaves_bookkeeping(self, problem, start):
        heuristic = CountingHeuristic(problem, rng=np.random.default_rng(0))
        agent = Agent(heuristic, start, problem.evaluation_counter)
        previous = agent.previous_solution
        stamp = agent.current_timestamp
        agent.execute_once()
        assert heuristic.calls == 1
        assert agent.previous_solution is previous
        assert agent.current_timestamp == stamp
        assert agent.state == "ready"

    def test_zero_iterations_is_allowed(self, problem, start):
        heuristic = CountingHeuristic(problem)
        agent = Agent(heuristic, start, problem.evaluation_counter, min_iterations=0, max_iterations=0)
        assert agent.step() == 0
        assert heuristic.calls == 0


# =============================================================================
# Copies and improvement ratio
# =============================================================================

class TestAgentSolutions:

    def test_get_current_solution_returns_copy(self, problem, start):
        agent = Agent(CountingHeuristic(problem), start, problem.evaluation_counter)
        external = agent.get_current_solution()
        external.representation[:] = 1
        external.fitness = None
        assert agent.current_solution.representation.tolist() == [0, 0, 0, 0, 0]
        assert agent.evaluate_current_solution() == 0.0

    def test_set_current_solution_copies_and_keeps_previous(self, problem, start):
        agent = Agent(CountingHeuristic(problem), start, problem.evaluation_counter)
        best = Solution([0, 1, 0, 1, 0], problem)
        previous = agent.previous_solution
        stamp = agent.current_timestamp
        agent.set_current_solution(best)
        best.representation[0] = 1
        assert agent.current_solution.representation.tolist() == [0, 1, 0, 1, 0]
        assert agent.previous_solution is previous
        assert agent.current_timestamp == stamp

    def test_improvement_ratio_is_gain_per_evaluation(self, problem, start):
        agent = Agent(
            LocalSearchHeuristic(problem, rng=np.random.default_rng(0)), start, problem.evaluation_counter,
            min_iterations=3, max_iterations=6, rng=np.random.default_rng(1),
        )
        agent.step()
        gain = agent.current_solution.score() - agent.previous_solution.score()
        elapsed = agent.current_timestamp - agent.previous_timestamp
        assert elapsed > 0
        assert agent.calculate_improvement_ratio() == pytest.approx(gain / elapsed)

    def test_improvement_ratio_without_evaluations(self, problem, start):
        agent = Agent(FrozenHeuristic(problem), start, problem.evaluation_counter, min_iterations=4, max_iterations=4)
        agent.step()
        assert agent.current_timestamp == agent.previous_timestamp
        assert agent.calculate_improvement_ratio() == 0.0
