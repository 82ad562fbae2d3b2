#!/usr/bin/env python3
"""
Tests for the command line entry point, argument validation and convergence plots.
"""

import argparse
import json
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from Core.utils import setup_logging
from Hybridation.coordinator import Coordinator, CoordinatorConfig
from Hybridation.plotting import plot_convergence
from Knapsack.knapsack import KnapsackProblem
import main as cli


# =============================================================================
# Argument types
# =============================================================================

class TestIterationRange:

    def test_single_value_is_a_pair(self):
        assert cli.iteration_range("7") == (7, 7)

    def test_range(self):
        assert cli.iteration_range("100-150") == (100, 150)
        assert cli.iteration_range("5-5") == (5, 5)

    @pytest.mark.parametrize("text", ["150-100", "abc", "-3", "1-", "1:2"])
    def test_rejects_malformed_or_reversed(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.iteration_range(text)


class TestArgumentValidation:

    @pytest.mark.parametrize("argv", [
        ["--stagnation", "-1"],
        ["--threshold", "-1"],
        ["--workers", "0"],
        ["--items", "0"],
        ["--iterations", "150-100"],
        ["--stagnation", "many"],
    ])
    def test_invalid_values_exit_with_usage_error(self, argv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(argv)
        assert excinfo.value.code == 2
        assert f"argument {argv[0]}" in capsys.readouterr().err

    def test_boundary_values_are_accepted(self):
        args = cli.build_parser().parse_args(["--stagnation", "0", "--threshold", "0", "--workers", "1"])
        assert (args.stagnation, args.threshold, args.workers) == (0, 0.0, 1)


# =============================================================================
# Logging
# =============================================================================

def test_setup_logging_writes_file(tmp_path):
    log_dir = tmp_path / "logs"
    logger = setup_logging(str(log_dir), run_name="unit", seed=5)
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert (log_dir / "unit.log").exists()
    assert "[Seed: 5]" in (log_dir / "unit.log").read_text()
    assert setup_logging(str(log_dir), run_name="unit") is logger
    assert len(logger.handlers) == 2


# =============================================================================
# Plotting
# =============================================================================

class TestPlotting:

    def test_plot_convergence_saves_file(self, tmp_path):
        problem = KnapsackProblem([10, 40, 30, 50, 35], [5, 4, 6, 3, 7], 10)
        config = CoordinatorConfig(min_iterations=2, max_iterations=4, max_rounds_without_improvement=5, seed=3)
        coordinator = Coordinator(problem.get_initial_solution(), config)
        coordinator.solve()

        target = tmp_path / "convergence.png"
        fig = plot_convergence(coordinator.history, str(target))
        assert fig is not None
        assert target.exists()

    def test_plot_convergence_empty_history(self):
        assert plot_convergence([]) is None


# =============================================================================
# Command line
# =============================================================================

class TestCommandLine:

    def test_parser_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.iterations == (100, 150)
        assert args.stagnation == 1000
        assert args.threshold == 0.5
        assert args.heuristics is None

    def test_run_random_instance(self, tmp_path, capsys):
        args = cli.build_parser().parse_args([
            "--items", "12", "--iterations", "3-5", "--stagnation", "5",
            "--no-visualize", "--log-dir", str(tmp_path),
        ])
        summary = cli.run_hybrid(args)
        assert summary["feasible"] is True
        assert summary["finished"] is True
        assert "Optimization completed!" in capsys.readouterr().out

    def test_main_with_instance_and_plot(self, tmp_path):
        instance = tmp_path / "instance.json"
        instance.write_text(json.dumps({"values": [10, 40, 30, 50, 35], "weights": [5, 4, 6, 3, 7], "capacity": 10}))
        plot_path = tmp_path / "plot.png"
        cli.main([
            "--instance", str(instance), "--iterations", "2-3", "--stagnation", "3",
            "--heuristics", "local_search", "mutation", "--parallel",
            "--no-visualize", "--plot", str(plot_path), "--log-dir", str(tmp_path),
        ])
        assert plot_path.exists()

    def test_saved_plot_is_closed_when_not_shown(self, tmp_path):
        plt.close("all")
        plot_path = tmp_path / "plot.png"
        cli.main([
            "--items", "8", "--iterations", "2", "--stagnation", "2",
            "--no-visualize", "--plot", str(plot_path), "--log-dir", str(tmp_path),
        ])
        assert plot_path.exists()
        assert plt.get_fignums() == []
