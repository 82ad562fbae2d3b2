from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from Core.evaluator import EvaluationCounter
from Core.problem import ProblemInterface, Solution


class KnapsackProblem(ProblemInterface):
    """0/1 knapsack posed as a maximization task (total value, penalize overflow)."""

    def __init__(
        self,
        values: Iterable[float],
        weights: Iterable[float],
        capacity: float,
        *,
        penalty_factor: Optional[float] = None,
        counter: Optional[EvaluationCounter] = None,
        seed: Optional[int] = None,
    ) -> None:
        vals = np.asarray(list(values), dtype=float)
        wts = np.asarray(list(weights), dtype=float)
        if vals.shape != wts.shape:
            raise ValueError("values and weights must have matching lengths")
        if vals.size == 0:
            raise ValueError("knapsack must contain at least one item")
        if np.any(wts <= 0):
            raise ValueError("weights must be strictly positive")
        if np.any(vals < 0):
            raise ValueError("values must be non-negative")
        capacity = float(capacity)
        if capacity <= 0:
            raise ValueError("capacity must be positive")

        self.values = vals
        self.weights = wts
        self.capacity = capacity
        base_penalty = float(np.max(vals / wts))
        self.penalty_factor = float(penalty_factor) if penalty_factor is not None else max(1.0, 2.0 * base_penalty)
        self.evaluation_counter = counter if counter is not None else EvaluationCounter()
        self._rng = np.random.default_rng(seed)
        self._density = vals / wts
        # Stable sort keeps index order among equal densities
        self._density_order = np.argsort(-self._density, kind="stable")

    # ---- ProblemInterface API ----
    def evaluate(self, solution: Solution) -> float:
        mask = self._to_vector(solution.representation)
        total_value = float(np.dot(self.values, mask))
        total_weight = float(np.dot(self.weights, mask))
        overflow = max(0.0, total_weight - self.capacity)
        self._count_evaluation()
        return total_value - self.penalty_factor * overflow

    def get_initial_solution(self) -> Solution:
        """The empty knapsack."""
        return Solution(np.zeros(self.values.size, dtype=int), self)

    def random_solution(self, rng: Optional[np.random.Generator] = None) -> Solution:
        rng = rng if rng is not None else self._rng
        mask = rng.integers(0, 2, size=self.values.size)
        return Solution(self._repair(mask), self)

    def get_problem_info(self) -> dict:
        return {
            "dimension": int(self.values.size),
            "problem_type": "binary",
            "capacity": float(self.capacity),
            "values": self.values.copy(),
            "weights": self.weights.copy(),
            "penalty_factor": float(self.penalty_factor),
            "value_bounds": (0.0, float(np.sum(self.values))),
            "weight_bounds": (0.0, float(np.sum(self.weights))),
        }

    def neighbor(self, solution: Solution, rng: Optional[np.random.Generator] = None) -> Solution:
        """Flips one random item; an overweight result is repaired by dropping low-density items."""
        rng = rng if rng is not None else self._rng
        mask = self._to_vector(solution.representation)
        idx = int(rng.integers(0, mask.size))
        mask[idx] = 1 - mask[idx]
        if mask[idx] == 1 and self.total_weight(mask) > self.capacity:
            mask = self._repair(mask)
        return Solution(mask, self)

    def repair_mask(self, mask: Iterable) -> np.ndarray:
        return self._repair(self._to_vector(mask))

    # ---- Domain helpers ----
    def total_weight(self, rep: Iterable) -> float:
        return float(np.dot(self.weights, self._to_vector(rep)))

    def total_value(self, rep: Iterable) -> float:
        return float(np.dot(self.values, self._to_vector(rep)))

    def is_feasible(self, solution: Union[Solution, Iterable]) -> bool:
        rep = solution.representation if isinstance(solution, Solution) else solution
        return self.total_weight(rep) <= self.capacity

    def density_order(self) -> np.ndarray:
        """Item indices sorted by descending value/weight density."""
        return self._density_order.copy()

    # ---- internal helpers ----
    def _repair(self, mask: np.ndarray) -> np.ndarray:
        mask = np.asarray(mask, dtype=int).copy()
        total_weight = float(np.dot(self.weights, mask))
        if total_weight <= self.capacity:
            return mask
        # Drop weakest items first
        for j in self._density_order[::-1]:
            if mask[j] == 0:
                continue
            mask[j] = 0
            total_weight -= float(self.weights[j])
            if total_weight <= self.capacity:
                break
        return mask

    def _to_vector(self, rep: Iterable) -> np.ndarray:
        arr = np.array(rep, dtype=int)
        if arr.size != self.values.size:
            raise ValueError("representation length mismatch with problem dimension")
        return np.clip(arr, 0, 1)


@dataclass
class KnapsackSpec:
    n_items: int
    value_range: Tuple[float, float]
    weight_range: Tuple[float, float]
    capacity_ratio: float = 0.5
    seed: Optional[int] = None


def generate_random_knapsack(spec: KnapsackSpec) -> Tuple[KnapsackProblem, dict]:
    """Random instance plus the fractional (LP relaxation) value bound."""
    rng = np.random.default_rng(spec.seed)
    n = max(1, int(spec.n_items))
    v_low, v_high = spec.value_range
    w_low, w_high = spec.weight_range
    if w_low <= 0:
        raise ValueError("weight_range must be strictly positive")
    values = rng.uniform(v_low, v_high, size=n)
    weights = rng.uniform(w_low, w_high, size=n)
    # Scale capacity to fraction of total weight (controls tightness)
    capacity = float(spec.capacity_ratio) * float(np.sum(weights))
    problem = KnapsackProblem(values, weights, capacity, seed=spec.seed)

    best_value = 0.0
    remaining_cap = capacity
    for idx in problem.density_order():
        if weights[idx] <= remaining_cap:
            best_value += values[idx]
            remaining_cap -= weights[idx]
        else:
            best_value += (remaining_cap / weights[idx]) * values[idx]
            break

    bounds = {
        "lower_bound": 0.0,
        "upper_bound": float(best_value),
    }
    return problem, bounds


def load_knapsack(path: Union[str, Path], *, counter: Optional[EvaluationCounter] = None) -> KnapsackProblem:
    """
    Loads an instance from a JSON file of the form
    ``{"values": [...], "weights": [...], "capacity": 10}``.
    """
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    missing = [key for key in ("values", "weights", "capacity") if key not in data]
    if missing:
        raise ValueError(f"Knapsack instance {path} is missing fields: {', '.join(missing)}")
    return KnapsackProblem(
        data["values"],
        data["weights"],
        data["capacity"],
        penalty_factor=data.get("penalty_factor"),
        counter=counter,
        seed=data.get("seed"),
    )
