"""Agent/coordinator hybridization of knapsack heuristics."""

from .agent import Agent
from .coordinator import Coordinator, CoordinatorConfig, RoundRecord

__all__ = ["Agent", "Coordinator", "CoordinatorConfig", "RoundRecord"]
