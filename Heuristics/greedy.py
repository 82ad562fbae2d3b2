"""Constructive greedy heuristic used to seed the hybrid search."""

from __future__ import annotations

import numpy as np

from Core.heuristic import Heuristic
from Core.problem import Solution


class GreedyHeuristic(Heuristic):
    """
    Single pass over the items in descending value density, adding every item
    that still fits. Items already selected in the input are kept.

    Deterministic: applying it to its own output returns an equal solution.
    """

    name = "greedy"

    def execute_once(self, solution: Solution) -> Solution:
        problem = self.problem
        mask = np.array(solution.representation, dtype=int)
        remaining = problem.capacity - problem.total_weight(mask)
        for idx in problem.density_order():
            if mask[idx] == 0 and problem.weights[idx] <= remaining:
                mask[idx] = 1
                remaining -= float(problem.weights[idx])
        candidate = Solution(problem.repair_mask(mask), problem)
        candidate.evaluate()
        return candidate
