"""Metropolis acceptance walk adapted from simulated annealing."""

from __future__ import annotations

import math

from Core.heuristic import Heuristic
from Core.problem import Solution


class MetropolisHeuristic(Heuristic):
    """
    Simulated annealing move at a fixed temperature.

    Each execution proposes one neighbour. Improvements are always accepted,
    while worse neighbours are accepted with probability
    ``exp(delta / temperature)``, letting the walk leave local optima. The
    temperature does not cool between calls so the outcome only depends on
    the input solution and the random stream.
    """

    name = "metropolis"

    def __init__(self, problem, *, temperature: float = 1.0, rng=None):
        super().__init__(problem, rng=rng)
        if temperature <= 0:
            raise ValueError("Temperature must be positive.")
        self.temperature = float(temperature)

    def execute_once(self, solution: Solution) -> Solution:
        neighbour = self.problem.neighbor(solution, self.rng)
        delta = neighbour.score() - solution.score()
        if delta >= 0 or self.rng.random() < self._acceptance_probability(delta):
            return neighbour
        return solution.copy()

    def _acceptance_probability(self, delta: float) -> float:
        return math.exp(delta / self.temperature)
