"""Experiment execution engine.

Runs an optimizer on every problem of a suite, several times, with a logger
attached. Problems are evaluated one after another in the calling thread.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from statistics import mean, stdev
from typing import Any
import threading
import time

import numpy as np
import pandas as pd
import psutil

from evalbench.log import get_logger
from evalbench.loggers import Logger
from evalbench.problems.base import IntegerProblem, Problem
from evalbench.types import OptimizationType

_log = get_logger(__name__)

Optimizer = Callable[[Problem, int, np.random.Generator], None]
"""Optimizer signature: (problem, budget, rng). Results are read from problem.state."""

DEFAULT_REAL_BOUNDS = (-5.0, 5.0)
DEFAULT_INTEGER_BOUNDS = (0, 1)


def _get_current_memory_mb() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / (1024 * 1024)


class MemoryTracker:
    """Track peak memory usage during execution."""

    def __init__(self, interval: float = 0.01):
        self.interval = interval
        self.peak_memory_mb: float = 0.0
        self.baseline_mb: float = 0.0
        self._stop = False
        self._thread: threading.Thread | None = None

    def __enter__(self) -> "MemoryTracker":
        self.baseline_mb = _get_current_memory_mb()
        self.peak_memory_mb = self.baseline_mb
        self._stop = False
        self._thread = threading.Thread(target=self._monitor, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self._stop = True
        if self._thread:
            self._thread.join(timeout=1.0)

    def _monitor(self) -> None:
        """Monitor memory usage in background."""
        while not self._stop:
            current = _get_current_memory_mb()
            if current > self.peak_memory_mb:
                self.peak_memory_mb = current
            time.sleep(self.interval)

    @property
    def delta_mb(self) -> float:
        """Memory increase from baseline."""
        return max(0.0, self.peak_memory_mb - self.baseline_mb)


def _bounds(problem: Problem) -> tuple[np.ndarray, np.ndarray]:
    n = problem.meta_data.n_variables
    default = DEFAULT_INTEGER_BOUNDS if isinstance(problem, IntegerProblem) else DEFAULT_REAL_BOUNDS
    constraint = problem.constraint
    lower = constraint.lower_bounds if constraint.lower_bounds is not None else (default[0],) * n
    upper = constraint.upper_bounds if constraint.upper_bounds is not None else (default[1],) * n
    return np.asarray(lower), np.asarray(upper)


def random_search(problem: Problem, budget: int, rng: np.random.Generator) -> None:
    """Sample `budget` points uniformly within the problem bounds.

    Unbounded real problems are sampled in [-5, 5], unbounded integer
    problems in {0, 1}. Stops early once the optimum is found.
    """
    lower, upper = _bounds(problem)
    integer = isinstance(problem, IntegerProblem)
    for _ in range(budget):
        if integer:
            x = rng.integers(lower, upper, endpoint=True).tolist()
        else:
            x = rng.uniform(lower, upper).tolist()
        problem(x)
        if problem.state.optimum_found:
            break


@dataclass
class ExperimentRun:
    """Single optimizer run on one problem."""

    problem: str
    problem_id: int
    instance: int
    n_variables: int
    run_index: int
    evaluations: int
    best_y: float
    optimum_found: bool
    run_time: float
    peak_memory_mb: float | None = None


@dataclass
class ExperimentSummary:
    """Summary statistics for one problem over all runs."""

    problem: str
    instance: int
    n_variables: int
    n_runs: int
    best_y: float
    best_y_mean: float
    best_y_std: float
    success_rate: float
    run_time_mean: float
    peak_memory_max_mb: float | None = None
    all_runs: list[ExperimentRun] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result = {
            "problem": self.problem,
            "instance": self.instance,
            "n_variables": self.n_variables,
            "n_runs": self.n_runs,
            "best_y": self.best_y,
            "best_y_mean": self.best_y_mean,
            "best_y_std": self.best_y_std,
            "success_rate": self.success_rate,
            "run_time_mean": self.run_time_mean,
        }
        if self.peak_memory_max_mb is not None:
            result["peak_memory_max_mb"] = self.peak_memory_max_mb
        return result


@dataclass
class ExperimentResults:
    """Complete experiment results."""

    summaries: list[ExperimentSummary] = field(default_factory=list)
    runs: list[ExperimentRun] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert summaries to pandas DataFrame."""
        return pd.DataFrame([s.to_dict() for s in self.summaries])


class ExperimentRunner:
    """Runs an optimizer across a set of problems."""

    def __init__(
        self,
        problems: Iterable[Problem],
        optimizer: Optimizer = random_search,
        *,
        budget: int = 1000,
        repeats: int = 1,
        seed: int = 42,
        logger: Logger | None = None,
        track_memory: bool = False,
    ):
        if budget <= 0:
            raise ValueError(f"budget must be positive, got {budget}")
        if repeats <= 0:
            raise ValueError(f"repeats must be positive, got {repeats}")
        self.problems = problems
        self.optimizer = optimizer
        self.budget = budget
        self.repeats = repeats
        self.seed = seed
        self.logger = logger
        self.track_memory = track_memory

    def run(self) -> ExperimentResults:
        """Execute all runs."""
        rng = np.random.default_rng(self.seed)
        all_runs: list[ExperimentRun] = []
        summaries: list[ExperimentSummary] = []

        for problem in self.problems:
            # Runs always start from a clean state, even for reused problems.
            problem.reset()
            if self.logger is not None:
                problem.attach_logger(self.logger)
            try:
                runs = self._run_problem(problem, rng)
            finally:
                if self.logger is not None:
                    problem.detach_logger()
            all_runs.extend(runs)
            summaries.append(self._summarize_runs(problem, runs))

        return ExperimentResults(summaries=summaries, runs=all_runs)

    def _run_problem(self, problem: Problem, rng: np.random.Generator) -> list[ExperimentRun]:
        """Run the optimizer on one problem `repeats` times."""
        runs = []
        meta = problem.meta_data
        _log.info("Running %s (%d repeats, budget %d)", meta, self.repeats, self.budget)

        for i in range(self.repeats):
            if i > 0:
                problem.reset()
            peak_memory = None
            start = time.perf_counter()
            if self.track_memory:
                with MemoryTracker() as tracker:
                    self.optimizer(problem, self.budget, rng)
                peak_memory = tracker.delta_mb
            else:
                self.optimizer(problem, self.budget, rng)
            elapsed = time.perf_counter() - start

            state = problem.state
            runs.append(
                ExperimentRun(
                    problem=meta.name,
                    problem_id=meta.problem_id,
                    instance=meta.instance,
                    n_variables=meta.n_variables,
                    run_index=i,
                    evaluations=state.evaluations,
                    best_y=state.current_best.y[0],
                    optimum_found=state.optimum_found,
                    run_time=elapsed,
                    peak_memory_mb=peak_memory,
                )
            )
            _log.debug("Run %d: best=%.6g evals=%d", i, state.current_best.y[0], state.evaluations)

        return runs

    def _summarize_runs(self, problem: Problem, runs: list[ExperimentRun]) -> ExperimentSummary:
        """Compute summary statistics from runs."""
        meta = problem.meta_data
        bests = [r.best_y for r in runs]
        best = min(bests) if meta.optimization_type is OptimizationType.MIN else max(bests)

        memory_values = [r.peak_memory_mb for r in runs if r.peak_memory_mb is not None]

        return ExperimentSummary(
            problem=meta.name,
            instance=meta.instance,
            n_variables=meta.n_variables,
            n_runs=len(runs),
            best_y=best,
            best_y_mean=mean(bests),
            best_y_std=stdev(bests) if len(bests) > 1 else 0.0,
            success_rate=sum(r.optimum_found for r in runs) / len(runs),
            run_time_mean=mean(r.run_time for r in runs),
            peak_memory_max_mb=max(memory_values) if memory_values else None,
            all_runs=runs,
        )


def run_experiment(
    problems: Iterable[Problem],
    optimizer: Optimizer = random_search,
    *,
    budget: int = 1000,
    repeats: int = 1,
    seed: int = 42,
    logger: Logger | None = None,
    track_memory: bool = False,
) -> ExperimentResults:
    """Convenience function to run an experiment.

    Args:
        problems: Problems to optimize, for example a ProblemSuite.
        optimizer: Optimizer called as optimizer(problem, budget, rng).
        budget: Evaluation budget per run.
        repeats: Number of runs per problem.
        seed: Seed of the random generator passed to the optimizer.
        logger: Optional logger attached to each problem in turn.
        track_memory: Whether to track peak memory usage.

    Returns:
        ExperimentResults with summaries and individual runs.
    """
    runner = ExperimentRunner(
        problems,
        optimizer,
        budget=budget,
        repeats=repeats,
        seed=seed,
        logger=logger,
        track_memory=track_memory,
    )
    return runner.run()
