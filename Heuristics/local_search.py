"""Sampling local search: best of a random number of neighbours."""

from __future__ import annotations

from typing import Optional

from Core.heuristic import Heuristic
from Core.problem import Solution


class LocalSearchHeuristic(Heuristic):
    """
    Draws a neighbour count in ``[min_neighbours, max_neighbours]``, generates
    that many neighbours of the input and returns the best of them, even when
    it is worse than the input. The first candidate at the top score wins ties.
    """

    name = "local_search"

    def __init__(self, problem, *, min_neighbours: int = 5, max_neighbours: int = 10, rng=None):
        super().__init__(problem, rng=rng)
        if min_neighbours < 1:
            raise ValueError("Local search needs at least one neighbour per execution.")
        if max_neighbours < min_neighbours:
            raise ValueError("max_neighbours must be greater than or equal to min_neighbours.")
        self.min_neighbours = int(min_neighbours)
        self.max_neighbours = int(max_neighbours)

    def generate_number_of_neighbours(self) -> int:
        return int(self.rng.integers(self.min_neighbours, self.max_neighbours, endpoint=True))

    def execute_once(self, solution: Solution) -> Solution:
        best: Optional[Solution] = None
        for _ in range(self.generate_number_of_neighbours()):
            candidate = self.problem.neighbor(solution, self.rng)
            candidate.evaluate()
            if best is None or candidate.score() > best.score():
                best = candidate
        return best
