import abc
from typing import Any, Dict, Optional

import numpy as np

from .evaluator import EvaluationCounter


class Solution:
    """Represents a candidate solution to a maximization problem."""

    def __init__(self, representation: Any, problem: 'ProblemInterface'):
        self.representation = np.array(representation, dtype=int)
        self.problem = problem
        self.fitness: Optional[float] = None

    def evaluate(self) -> float:
        """Calculates and caches the fitness of this solution (higher is better)."""
        if self.fitness is None:
            self.fitness = float(self.problem.evaluate(self))
        return self.fitness

    def score(self) -> float:
        return self.evaluate()

    def relative_gap(self, other: 'Solution') -> float:
        """
        Normalized amount by which this solution is worse than `other`.

        Returns 0.0 when this solution is equal or better. A reference score of
        zero makes any worse solution a full gap of 1.0.
        """
        own = self.score()
        reference = other.score()
        if own >= reference:
            return 0.0
        if reference == 0:
            return 1.0
        return (reference - own) / abs(reference)

    def copy(self) -> 'Solution':
        """Creates an independent copy; the representation array is never shared."""
        new_solution = Solution(self.representation.copy(), self.problem)
        new_solution.fitness = self.fitness
        return new_solution

    def __lt__(self, other: 'Solution') -> bool:
        return self.score() < other.score()

    def __gt__(self, other: 'Solution') -> bool:
        return self.score() > other.score()

    def __eq__(self, other: object) -> bool:
        """Checks if two solutions are equal based on representation."""
        if not isinstance(other, Solution):
            return NotImplemented
        return np.array_equal(self.representation, other.representation)

    __hash__ = None

    def __str__(self) -> str:
        return f"Solution({self.representation.tolist()}, Fitness: {self.fitness})"


class ProblemInterface(abc.ABC):
    """
    Abstract base class defining the interface for an optimization problem.

    Every problem owns an EvaluationCounter; `evaluate` implementations must
    call `_count_evaluation` once per fitness computation.
    """

    evaluation_counter: EvaluationCounter

    @abc.abstractmethod
    def evaluate(self, solution: Solution) -> float:
        """
        Evaluates the fitness of a given solution. Higher values are better.

        Args:
            solution: The Solution object to evaluate.

        Returns:
            The fitness value (float).
        """
        pass

    @abc.abstractmethod
    def get_initial_solution(self) -> Solution:
        """
        Returns the starting solution the hybrid search is seeded from.
        """
        pass

    @abc.abstractmethod
    def get_problem_info(self) -> Dict[str, Any]:
        """
        Returns a dictionary containing essential information about the problem.
        Examples: 'dimension', 'problem_type', 'capacity'.
        """
        pass

    @abc.abstractmethod
    def neighbor(self, solution: Solution, rng: Optional[np.random.Generator] = None) -> Solution:
        """
        Produces one new, unevaluated neighbour of `solution` without mutating it.
        """
        pass

    def repair_mask(self, mask: Any) -> Any:
        """
        Optional repair function for binary masks (e.g., knapsack feasibility).
        Defaults to returning the mask unchanged.
        """
        return mask

    def _count_evaluation(self) -> None:
        self.evaluation_counter.increment()
