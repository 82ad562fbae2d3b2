"""
Heuristic variants for the knapsack hybrid search.

- greedy: constructive seeding heuristic
- local_search: best of a random number of neighbours
- metropolis: fixed-temperature annealing move
- mutation: random bit-flip exploration
"""

from .greedy import GreedyHeuristic
from .local_search import LocalSearchHeuristic
from .metropolis import MetropolisHeuristic
from .mutation import BitFlipMutationHeuristic
from .registry import (
    HeuristicFactory,
    create_heuristic,
    get_heuristic_factory,
    list_heuristics,
    register_heuristic,
    unregister_heuristic,
)

__all__ = [
    "GreedyHeuristic",
    "LocalSearchHeuristic",
    "MetropolisHeuristic",
    "BitFlipMutationHeuristic",
    "HeuristicFactory",
    "create_heuristic",
    "get_heuristic_factory",
    "list_heuristics",
    "register_heuristic",
    "unregister_heuristic",
]
