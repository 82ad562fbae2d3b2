from .knapsack import KnapsackProblem, KnapsackSpec, generate_random_knapsack, load_knapsack

__all__ = ["KnapsackProblem", "KnapsackSpec", "generate_random_knapsack", "load_knapsack"]
