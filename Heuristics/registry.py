"""
Registry of heuristic variants.

Each variant registers a factory under a unique name. The coordinator
enumerates the agent-role factories to build one agent per variant, and uses
the seeding-role factory to produce the initial best solution. Iteration
order is registration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Type

import numpy as np

from Core.heuristic import Heuristic
from Core.problem import ProblemInterface

Role = Literal["agent", "seeding"]


@dataclass
class HeuristicFactory:
    """Describes how to instantiate a heuristic variant."""
    name: str
    cls: Type[Heuristic]
    default_kwargs: Dict[str, Any] = field(default_factory=dict)
    role: Role = "agent"

    def build(
        self,
        problem: ProblemInterface,
        *,
        rng: Optional[np.random.Generator] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Heuristic:
        params: Dict[str, Any] = dict(self.default_kwargs)
        if overrides:
            params.update(overrides)
        return self.cls(problem, rng=rng, **params)


_heuristic_factories: Dict[str, HeuristicFactory] = {}
_BUILTINS_REGISTERED = False


def register_heuristic(factory: HeuristicFactory) -> None:
    """
    Register (or override) a heuristic factory.

    Built-ins are loaded first, so an override always replaces the built-in of
    the same name and a new variant is appended after them.
    """
    _ensure_builtin_heuristics()
    _store(factory)


def unregister_heuristic(name: str) -> None:
    _ensure_builtin_heuristics()
    _heuristic_factories.pop(name, None)


def _store(factory: HeuristicFactory) -> None:
    if factory.role not in ("agent", "seeding"):
        raise ValueError(f"Unsupported heuristic role: {factory.role}")
    if not isinstance(factory.cls, type) or not issubclass(factory.cls, Heuristic):
        raise ValueError(f"{factory.cls!r} is not a Heuristic subclass.")
    _heuristic_factories[factory.name] = factory


def get_heuristic_factory(name: str) -> HeuristicFactory:
    _ensure_builtin_heuristics()
    factory = _heuristic_factories.get(name)
    if factory is None:
        raise KeyError(f"Heuristic '{name}' is not registered.")
    return factory


def list_heuristics(role: Optional[Role] = "agent") -> List[HeuristicFactory]:
    """Registered factories for `role` (all factories when role is None)."""
    _ensure_builtin_heuristics()
    return [f for f in _heuristic_factories.values() if role is None or f.role == role]


def create_heuristic(
    name: str,
    problem: ProblemInterface,
    *,
    rng: Optional[np.random.Generator] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Heuristic:
    return get_heuristic_factory(name).build(problem, rng=rng, overrides=overrides)


# --- Built-in variants ----------------------------------------------------

def _ensure_builtin_heuristics():
    global _BUILTINS_REGISTERED
    if _BUILTINS_REGISTERED:
        return
    _register_builtin_heuristics()
    _BUILTINS_REGISTERED = True


def _register_builtin_heuristics():
    from .greedy import GreedyHeuristic
    from .local_search import LocalSearchHeuristic
    from .metropolis import MetropolisHeuristic
    from .mutation import BitFlipMutationHeuristic

    _store(HeuristicFactory("greedy", GreedyHeuristic, role="seeding"))
    _store(
        HeuristicFactory("local_search", LocalSearchHeuristic, {"min_neighbours": 5, "max_neighbours": 10})
    )
    _store(HeuristicFactory("metropolis", MetropolisHeuristic, {"temperature": 1.0}))
    _store(HeuristicFactory("mutation", BitFlipMutationHeuristic, {"flip_probability": 0.1}))
