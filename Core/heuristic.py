import abc
from typing import Optional

import numpy as np

from .problem import ProblemInterface, Solution


class Heuristic(abc.ABC):
    """
    Abstract base class for single-solution search heuristics.

    A heuristic turns one solution into one new candidate per call. It keeps no
    state between calls other than its random generator, so the result of
    `execute_once` depends only on the input and the random stream.
    """

    name: str = "heuristic"

    def __init__(self, problem: ProblemInterface, *, rng: Optional[np.random.Generator] = None):
        """
        Args:
            problem: An object implementing ProblemInterface.
            rng: Random generator owned by this heuristic instance.
        """
        self.problem = problem
        self.rng = rng if rng is not None else np.random.default_rng()

    @abc.abstractmethod
    def execute_once(self, solution: Solution) -> Solution:
        """
        Performs one unit of work and returns a new, independent solution.

        Implementations must not mutate `solution`, and every candidate they
        build must go through the problem's neighbour/repair operators so the
        result stays feasible.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
