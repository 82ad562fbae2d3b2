"""
Evaluation counter shared by every solution of a problem instance.

The count is used as a logical clock: agents stamp their solutions with it
to measure search effort, never wall-clock time.
"""

from __future__ import annotations

import threading


class EvaluationCounter:
    """Thread-safe, monotonically non-decreasing count of fitness evaluations."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("Evaluation counter cannot start below zero.")
        self._count = int(start)
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Adds `amount` evaluations and returns the new count."""
        if amount < 0:
            raise ValueError("Evaluation counter cannot be decremented.")
        with self._lock:
            self._count += int(amount)
            return self._count

    def current_count(self) -> int:
        with self._lock:
            return self._count

    @property
    def count(self) -> int:
        return self.current_count()

    def reset(self) -> None:
        with self._lock:
            self._count = 0

    def __repr__(self) -> str:
        return f"EvaluationCounter(count={self.current_count()})"
