"""Convergence plots for coordinator runs."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from .coordinator import RoundRecord

logger = logging.getLogger(__name__)


def plot_convergence(history: Sequence[RoundRecord], save_path: Optional[str] = None):
    """
    Visualize the best score per round, marking rounds where agents were redirected.

    Args:
        history: Round records produced by Coordinator.solve()
        save_path: Path to save the plot image (optional)

    Returns:
        The matplotlib figure, or None when there is nothing to plot.
    """
    if not history:
        logger.warning("No history available to plot convergence")
        return None

    rounds = [record.round for record in history]
    scores = [record.best_score for record in history]

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(rounds, scores, 'b-', alpha=0.7, label='Best score')

    redirected = [(record.round, record.best_score) for record in history if record.redirected]
    if redirected:
        ax.plot(*zip(*redirected), 'o', color='orange', markersize=4, label='Agents redirected')

    ax.set_title('Optimization Progress')
    ax.set_xlabel('Round')
    ax.set_ylabel('Best Score (Total Value)')
    ax.grid(True)
    ax.legend()

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Convergence plot saved to '{save_path}'")
    return fig
