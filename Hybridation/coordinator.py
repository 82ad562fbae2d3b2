"""
Coordinator: runs one agent per registered heuristic in rounds, keeps the best
solution found by any of them and pulls agents that fall too far behind back
to it.

Each round is: step every agent (sequentially, or on a thread pool joined
before moving on), update the global best, then redirect underperforming
agents. The search stops after too many consecutive rounds without
improvement, or when an external stop event is set.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Sequence

import numpy as np

from Core.problem import Solution
from Heuristics.registry import HeuristicFactory, get_heuristic_factory, list_heuristics

from .agent import MAX_ITERATIONS, MIN_ITERATIONS, Agent

MAX_ROUNDS_WITHOUT_IMPROVEMENT = 1000
WORSE_THAN_BEST_THRESHOLD = 0.5


@dataclass
class CoordinatorConfig:
    """Tunable parameters of the round-based search."""
    min_iterations: int = MIN_ITERATIONS
    max_iterations: int = MAX_ITERATIONS
    max_rounds_without_improvement: int = MAX_ROUNDS_WITHOUT_IMPROVEMENT
    worse_than_best_threshold: float = WORSE_THAN_BEST_THRESHOLD
    parallel: bool = False
    max_workers: Optional[int] = None
    seed: Optional[int] = None
    log_interval: int = 100
    record_history: bool = True
    history_limit: Optional[int] = None
    heuristic_kwargs: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.min_iterations < 0:
            raise ValueError("min_iterations cannot be negative.")
        if self.max_iterations < self.min_iterations:
            raise ValueError("max_iterations must be greater than or equal to min_iterations.")
        if self.max_rounds_without_improvement < 0:
            raise ValueError("max_rounds_without_improvement cannot be negative.")
        if self.worse_than_best_threshold < 0:
            raise ValueError("worse_than_best_threshold cannot be negative.")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        if self.log_interval < 1:
            raise ValueError("log_interval must be at least 1.")
        if self.history_limit is not None and self.history_limit < 1:
            raise ValueError("history_limit must be at least 1.")


@dataclass
class RoundRecord:
    """Snapshot of the coordinator at the end of a round."""
    round: int
    best_score: float
    rounds_not_improving: int
    improved: bool
    redirected: int
    evaluations: int
    improvement_ratios: Dict[str, float] = field(default_factory=dict)


class Coordinator:
    """
    Runs several agents that implement different heuristics over the same
    knapsack problem and shares the best solution between them.
    """

    def __init__(
        self,
        knapsack: Solution,
        config: Optional[CoordinatorConfig] = None,
        *,
        heuristics: Optional[Sequence[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            knapsack: The initial solution of the problem to be solved.
            config: Search parameters; defaults to the reference values.
            heuristics: Names of the registered heuristics to run as agents.
                Defaults to every registered agent-role heuristic.
            logger: Logger for progress messages.
        """
        self.config = config if config is not None else CoordinatorConfig()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.problem = knapsack.problem
        self.counter = self.problem.evaluation_counter

        self.initial_solution = knapsack.copy()
        self._factories = self._resolve_factories(heuristics)
        self._seed_factory = self._resolve_seed_factory()
        self._validate_heuristic_kwargs()
        self._seed_sequence = np.random.SeedSequence(self.config.seed)
        self._executor: Optional[ThreadPoolExecutor] = None

        self.agents: List[Agent] = []
        self.current_best: Solution
        self.rounds_not_improving = 0
        self.round = 0
        # Oldest rounds are dropped once history_limit is reached
        self.history: Deque[RoundRecord] = deque(maxlen=self.config.history_limit)

        self.initialize()

    def has_finished(self) -> bool:
        """True once more than the allowed number of rounds passed without improvement."""
        return self.rounds_not_improving > self.config.max_rounds_without_improvement

    def initialize(self) -> None:
        """Produces the initial best solution with one round of the greedy heuristic."""
        agent = self._create_agent(self._seed_factory, self.initial_solution)
        agent.step()
        self.current_best = agent.get_current_solution()
        self.logger.info(
            f"Initial best from {agent.name}: score={self.current_best.score():.4f} "
            f"(evaluations={self.counter.current_count()})"
        )

    def solve(self, stop_event: Optional[threading.Event] = None) -> Solution:
        """
        Creates one agent per heuristic and runs rounds until the search stagnates
        or `stop_event` is set. Returns a copy of the best solution found.
        """
        self.agents = [self._create_agent(factory, self.current_best) for factory in self._factories]
        self.logger.info(
            f"Solving with agents: {', '.join(agent.name for agent in self.agents)} "
            f"(parallel={self.config.parallel})"
        )

        if self.config.parallel:
            with ThreadPoolExecutor(max_workers=self.config.max_workers or len(self.agents)) as executor:
                self._executor = executor
                try:
                    self._run_rounds(stop_event)
                finally:
                    self._executor = None
        else:
            self._run_rounds(stop_event)

        self.logger.info(
            f"Search finished after {self.round} rounds: best score={self.current_best.score():.4f}, "
            f"evaluations={self.counter.current_count()}"
        )
        return self.current_best.copy()

    def run_agents_once(self) -> None:
        """Runs one step of every agent; returns only after all of them finished."""
        if not self.config.parallel:
            for agent in self.agents:
                agent.step()
            return

        if self._executor is not None:
            self._step_on(self._executor)
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers or max(1, len(self.agents))) as executor:
                self._step_on(executor)

    def update_current_best(self) -> bool:
        """Adopts any agent solution that beats the current best and tracks stagnation."""
        improved = False
        for agent in self.agents:
            if agent.evaluate_current_solution() > self.current_best.score():
                self.current_best = agent.get_current_solution()
                improved = True
                self.rounds_not_improving = 0
                self.logger.debug(
                    f"Round {self.round}: {agent.name} improved best to {self.current_best.score():.4f}"
                )

        if not improved:
            self.rounds_not_improving += 1
        return improved

    def redirect_agents(self) -> int:
        """
        Resets agents lagging too far behind the best solution to a copy of it.
        Their previous-solution snapshots and timestamps are left untouched.
        """
        redirected = 0
        threshold = self.config.worse_than_best_threshold
        for agent in self.agents:
            gap = agent.current_solution.relative_gap(self.current_best)
            if gap > threshold:
                agent.set_current_solution(self.current_best)
                redirected += 1
                self.logger.debug(f"Round {self.round}: redirected {agent.name} (gap={gap:.3f})")
        return redirected

    def report(self) -> Dict[str, Any]:
        """Logs and returns a summary of the search state."""
        summary = {
            "rounds": self.round,
            "best_score": self.current_best.score(),
            "best_solution": self.current_best.representation.tolist(),
            "evaluations": self.counter.current_count(),
            "rounds_not_improving": self.rounds_not_improving,
            "finished": self.has_finished(),
            "agents": {agent.name: agent.evaluate_current_solution() for agent in self.agents},
        }
        self.logger.info(
            f"Rounds: {summary['rounds']} - Best score: {summary['best_score']:.4f} - "
            f"Evaluations: {summary['evaluations']} - Rounds not improving: {summary['rounds_not_improving']}"
        )
        return summary

    # ---- internal helpers ----
    def _run_rounds(self, stop_event: Optional[threading.Event]) -> None:
        while not self.has_finished():
            if stop_event is not None and stop_event.is_set():
                self.logger.info(f"Search cancelled at round {self.round}.")
                break
            self.round += 1
            self.run_agents_once()
            improved = self.update_current_best()
            # Ratios are taken before redirection resets any agent
            ratios = {agent.name: agent.calculate_improvement_ratio() for agent in self.agents}
            redirected = self.redirect_agents()
            if self.config.record_history:
                self.history.append(
                    RoundRecord(
                        round=self.round,
                        best_score=self.current_best.score(),
                        rounds_not_improving=self.rounds_not_improving,
                        improved=improved,
                        redirected=redirected,
                        evaluations=self.counter.current_count(),
                        improvement_ratios=ratios,
                    )
                )
            if self.round % self.config.log_interval == 0:
                self.logger.info(
                    f"Round {self.round} - Best score: {self.current_best.score():.4f} - "
                    f"Rounds not improving: {self.rounds_not_improving}"
                )

    def _step_on(self, executor: ThreadPoolExecutor) -> None:
        futures = [executor.submit(agent.step) for agent in self.agents]
        # Barrier: re-raises the first failure after every agent was scheduled
        for future in futures:
            future.result()

    def _create_agent(self, factory: HeuristicFactory, solution: Solution) -> Agent:
        agent_seed, heuristic_seed = self._seed_sequence.spawn(2)
        heuristic = factory.build(
            self.problem,
            rng=np.random.default_rng(heuristic_seed),
            overrides=self.config.heuristic_kwargs.get(factory.name),
        )
        return Agent(
            heuristic,
            solution,
            self.counter,
            min_iterations=self.config.min_iterations,
            max_iterations=self.config.max_iterations,
            rng=np.random.default_rng(agent_seed),
            name=factory.name,
        )

    @staticmethod
    def _resolve_factories(names: Optional[Sequence[str]]) -> List[HeuristicFactory]:
        if names is None:
            factories = list_heuristics("agent")
        else:
            if len(set(names)) != len(names):
                raise ValueError("Heuristic names must be unique.")
            factories = [get_heuristic_factory(name) for name in names]
        if not factories:
            raise ValueError("At least one heuristic must be registered to build agents.")
        return factories

    @staticmethod
    def _resolve_seed_factory() -> HeuristicFactory:
        seeding = list_heuristics("seeding")
        if not seeding:
            raise ValueError("No seeding heuristic is registered.")
        return seeding[0]

    def _validate_heuristic_kwargs(self) -> None:
        """
        Rejects overrides for heuristics this coordinator does not run, and
        builds each overridden heuristic once so bad parameters fail here.
        """
        known = {factory.name: factory for factory in [self._seed_factory, *self._factories]}
        unknown = sorted(set(self.config.heuristic_kwargs) - set(known))
        if unknown:
            raise ValueError(f"heuristic_kwargs names heuristics that are not in use: {', '.join(unknown)}")
        for name, overrides in self.config.heuristic_kwargs.items():
            # Throwaway generator keeps the seeded streams untouched
            known[name].build(self.problem, rng=np.random.default_rng(0), overrides=overrides)
