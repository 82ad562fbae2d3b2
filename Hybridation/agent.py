"""
Agent: runs one heuristic over its own solution in rounds and tracks how fast
it improves, measured against the shared evaluation counter.
"""

from __future__ import annotations

from typing import Literal, Optional

import numpy as np

from Core.evaluator import EvaluationCounter
from Core.heuristic import Heuristic
from Core.problem import Solution

AgentState = Literal["idle", "stepping", "ready"]

MIN_ITERATIONS = 100
MAX_ITERATIONS = 150


class Agent:
    """
    Executes a heuristic on a private copy of a solution.

    Every call to `step` is a round: the current solution and its timestamp are
    snapshotted as the previous ones, then the heuristic runs a random number
    of times in ``[min_iterations, max_iterations]`` and the current timestamp
    is taken from the evaluation counter.
    """

    def __init__(
        self,
        heuristic: Heuristic,
        solution: Solution,
        counter: EvaluationCounter,
        *,
        min_iterations: int = MIN_ITERATIONS,
        max_iterations: int = MAX_ITERATIONS,
        rng: Optional[np.random.Generator] = None,
        name: Optional[str] = None,
    ):
        if min_iterations < 0:
            raise ValueError("min_iterations cannot be negative.")
        if max_iterations < min_iterations:
            raise ValueError("max_iterations must be greater than or equal to min_iterations.")
        self.solver = heuristic
        self.counter = counter
        self.min_iterations = int(min_iterations)
        self.max_iterations = int(max_iterations)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.name = name or getattr(heuristic, "name", type(heuristic).__name__)
        self.state: AgentState = "idle"

        self.current_solution = solution.copy()
        self.current_timestamp = counter.current_count()
        self.previous_solution: Solution
        self.previous_timestamp: int
        self._update_previous_solution()

    def calculate_improvement_ratio(self) -> float:
        """
        Score gained per evaluation since the last round boundary.

        Returns 0.0 when no evaluations elapsed, e.g. before the first step or
        for a heuristic that performs no evaluations.
        """
        elapsed = self.current_timestamp - self.previous_timestamp
        if elapsed <= 0:
            return 0.0
        return (self.current_solution.score() - self.previous_solution.score()) / elapsed

    def evaluate_current_solution(self) -> float:
        return self.current_solution.score()

    def get_current_solution(self) -> Solution:
        """Returns a copy of the current solution."""
        return self.current_solution.copy()

    def set_current_solution(self, solution: Solution) -> None:
        """Overwrites the current solution; previous snapshot and timestamps are kept."""
        self.current_solution = solution.copy()

    def execute_once(self) -> None:
        """Performs a single heuristic execution on the current solution."""
        previous_state = self.state
        self.state = "stepping"
        try:
            self.current_solution = self.solver.execute_once(self.current_solution)
        finally:
            if previous_state != "stepping":
                self.state = "ready"

    def step(self) -> int:
        """Runs one round and returns the number of heuristic executions performed."""
        self._update_previous_solution()
        iterations = self.generate_iterations()

        self.state = "stepping"
        try:
            for _ in range(iterations):
                self.execute_once()
        finally:
            self.state = "ready"

        self.current_timestamp = self.counter.current_count()
        return iterations

    def generate_iterations(self) -> int:
        """Uniform draw from the closed range [min_iterations, max_iterations]."""
        return int(self.rng.integers(self.min_iterations, self.max_iterations, endpoint=True))

    def _update_previous_solution(self) -> None:
        self.previous_solution = self.current_solution.copy()
        self.previous_timestamp = self.current_timestamp

    def __repr__(self) -> str:
        return (
            f"Agent(name={self.name!r}, state={self.state!r}, "
            f"score={self.current_solution.fitness}, timestamp={self.current_timestamp})"
        )
