#!/bin/python
"""
Entry point for solving 0/1 knapsack instances with the agent/coordinator
hybridization of heuristics.

Instances are either generated at random (--items) or loaded from a JSON file
(--instance).
"""
import argparse
import re
import time
from typing import Callable, Optional, Sequence, Tuple

from Core.utils import setup_logging
from Heuristics.registry import list_heuristics
from Hybridation.coordinator import Coordinator, CoordinatorConfig
from Knapsack.knapsack import KnapsackSpec, generate_random_knapsack, load_knapsack


def iteration_range(text: str) -> Tuple[int, int]:
    """Parses 'N' or 'LO-HI' into a (min, max) pair of iterations per round."""
    match = re.fullmatch(r"\s*(\d+)\s*(?:-\s*(\d+)\s*)?", text)
    if match is None:
        raise argparse.ArgumentTypeError(f"Invalid iterations '{text}': expected N or LO-HI with LO, HI >= 0")
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) is not None else low
    if high < low:
        raise argparse.ArgumentTypeError(f"Invalid iterations '{text}': upper bound is below lower bound")
    return low, high


def _bounded(cast: Callable[[str], float], minimum: float, description: str) -> Callable[[str], float]:
    def parse(text: str):
        try:
            value = cast(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"'{text}' is not a valid {cast.__name__}") from None
        if value < minimum:
            raise argparse.ArgumentTypeError(f"{value} is not {description}")
        return value
    parse.__name__ = description
    return parse


non_negative_int = _bounded(int, 0, "a non-negative integer")
non_negative_float = _bounded(float, 0.0, "a non-negative number")
positive_int = _bounded(int, 1, "a positive integer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run cooperating knapsack heuristics coordinated in rounds."
    )

    # Instance
    parser.add_argument(
        "--instance",
        default=None,
        help="JSON instance file with 'values', 'weights' and 'capacity' (overrides --items)"
    )
    parser.add_argument(
        "--items",
        "-n",
        type=positive_int,
        default=50,
        help="Number of items of a randomly generated instance (default: 50)"
    )
    parser.add_argument(
        "--capacity-ratio",
        type=float,
        default=0.5,
        help="Capacity as a fraction of the total item weight (default: 0.5)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)"
    )

    # Coordination
    parser.add_argument(
        "--iterations",
        "-i",
        type=iteration_range,
        default=(100, 150),
        help="Heuristic executions per agent round, N or LO-HI (default: 100-150)"
    )
    parser.add_argument(
        "--stagnation",
        type=non_negative_int,
        default=1000,
        help="Rounds without improvement before stopping (default: 1000)"
    )
    parser.add_argument(
        "--threshold",
        type=non_negative_float,
        default=0.5,
        help="Relative gap to the best solution that triggers redirection (default: 0.5)"
    )
    parser.add_argument(
        "--heuristics",
        nargs="+",
        default=None,
        help="Registered heuristics to run as agents (default: all)"
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Step agents concurrently on a thread pool"
    )
    parser.add_argument(
        "--workers",
        type=positive_int,
        default=None,
        help="Thread pool size in parallel mode (default: one per agent)"
    )

    # Output
    parser.add_argument(
        "--log-dir",
        default="logs",
        help="Directory for log files (default: logs)"
    )
    parser.add_argument(
        "--plot",
        default=None,
        help="Save the convergence plot to this path"
    )
    parser.add_argument(
        "--no-visualize",
        action="store_true",
        help="Disable visualization of results"
    )
    return parser


def run_hybrid(args: argparse.Namespace) -> dict:
    """Build the instance and coordinator from parsed arguments and solve."""
    logger = setup_logging(args.log_dir, seed=args.seed)

    if args.instance:
        problem = load_knapsack(args.instance)
        bounds = None
    else:
        spec = KnapsackSpec(
            n_items=args.items,
            value_range=(1.0, 100.0),
            weight_range=(1.0, 50.0),
            capacity_ratio=args.capacity_ratio,
            seed=args.seed,
        )
        problem, bounds = generate_random_knapsack(spec)

    min_iterations, max_iterations = args.iterations
    config = CoordinatorConfig(
        min_iterations=min_iterations,
        max_iterations=max_iterations,
        max_rounds_without_improvement=args.stagnation,
        worse_than_best_threshold=args.threshold,
        parallel=args.parallel,
        max_workers=args.workers,
        seed=args.seed,
    )

    print(f"Problem: knapsack with {problem.values.size} items, capacity {problem.capacity:.2f}")
    print(f"Agents: {', '.join(args.heuristics or [f.name for f in list_heuristics('agent')])}")
    print("-" * 50)

    start_time = time.time()
    coordinator = Coordinator(problem.get_initial_solution(), config, heuristics=args.heuristics, logger=logger)
    best = coordinator.solve()
    elapsed_time = time.time() - start_time

    summary = coordinator.report()
    summary["elapsed"] = elapsed_time
    summary["feasible"] = problem.is_feasible(best)

    print("\n" + "=" * 50)
    print("Optimization completed!")
    print(f"Time elapsed: {elapsed_time:.2f} seconds")
    print(f"Rounds: {summary['rounds']}, evaluations: {summary['evaluations']}")
    print(f"Best value: {best.score():.4f} (weight {problem.total_weight(best.representation):.2f})")
    if bounds is not None:
        print(f"Fractional upper bound: {bounds['upper_bound']:.4f}")
    print("Selected items:", [int(i) for i, bit in enumerate(best.representation) if bit])
    print("=" * 50)

    if args.plot or not args.no_visualize:
        import matplotlib.pyplot as plt
        from Hybridation.plotting import plot_convergence

        fig = plot_convergence(coordinator.history, args.plot)
        if not args.no_visualize:
            plt.show()
        elif fig is not None:
            plt.close(fig)

    return summary


def main(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments and run the coordinator."""
    args = build_parser().parse_args(argv)
    run_hybrid(args)


if __name__ == "__main__":
    main()
