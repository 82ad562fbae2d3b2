"""Bit-flip mutation heuristic for exploring away from the current solution."""

from __future__ import annotations

import numpy as np

from Core.heuristic import Heuristic
from Core.problem import Solution


class BitFlipMutationHeuristic(Heuristic):
    """Flips every item with ``flip_probability`` (at least one item) and repairs."""

    name = "mutation"

    def __init__(self, problem, *, flip_probability: float = 0.1, rng=None):
        super().__init__(problem, rng=rng)
        if not 0.0 < flip_probability < 1.0:
            raise ValueError("flip_probability must lie strictly between 0 and 1.")
        self.flip_probability = float(flip_probability)

    def execute_once(self, solution: Solution) -> Solution:
        mask = np.array(solution.representation, dtype=int)
        flips = self.rng.random(mask.shape[0]) < self.flip_probability
        if not np.any(flips):
            flips[self.rng.integers(mask.shape[0])] = True
        mask[flips] = 1 - mask[flips]
        child = Solution(self.problem.repair_mask(mask), self.problem)
        child.evaluate()
        return child
