"""Problem, heuristic and evaluation primitives shared by the hybrid search."""

from .evaluator import EvaluationCounter
from .heuristic import Heuristic
from .problem import ProblemInterface, Solution

__all__ = ["EvaluationCounter", "Heuristic", "ProblemInterface", "Solution"]
