"""Loggers that record evaluation data from problems.

A logger is attached to a problem with `Problem.attach_logger`. The problem
calls `track_problem` on attach and on reset, `log` after every evaluation
and `flush` on detach. Loggers never own the problems they observe.

Example:
    logger = MemoryLogger()
    problem.attach_logger(logger)
    for x in candidates:
        problem(x)
    problem.detach_logger()
    print(logger.to_dataframe())
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from time import perf_counter
from typing import Any

import pandas as pd

from evalbench.types import LogInfo, MetaData, compare_objectives

__all__ = [
    "Logger",
    "Run",
    "MemoryLogger",
    "ConvergenceLogger",
    "ProgressLogger",
]


class Logger(ABC):
    """Interface a problem uses to report evaluations."""

    @abstractmethod
    def track_problem(self, meta_data: MetaData) -> None:
        """Start a new record for the problem described by `meta_data`."""
        ...

    @abstractmethod
    def log(self, info: LogInfo) -> None:
        """Record one evaluation."""
        ...

    def flush(self) -> None:
        """Persist or release buffered data. Default: nothing buffered."""


@dataclass
class Run:
    """Evaluations recorded between two `track_problem` calls."""

    meta_data: MetaData
    run_index: int
    records: list[dict[str, Any]] = field(default_factory=list)

    @property
    def evaluations(self) -> int:
        return self.records[-1]["evaluations"] if self.records else 0

    @property
    def best(self) -> float | None:
        return self.records[-1]["best_y"] if self.records else None


class MemoryLogger(Logger):
    """Keep every evaluation in memory.

    Args:
        store_positions: Also keep the decision vector of each evaluation.
    """

    def __init__(self, *, store_positions: bool = False):
        self.store_positions = store_positions
        self.runs: list[Run] = []
        self.flushed = 0

    @property
    def current_run(self) -> Run | None:
        return self.runs[-1] if self.runs else None

    def track_problem(self, meta_data: MetaData) -> None:
        self.runs.append(Run(meta_data=meta_data, run_index=len(self.runs)))

    def log(self, info: LogInfo) -> None:
        run = self.current_run
        if run is None:
            raise RuntimeError("log() called before track_problem()")
        record: dict[str, Any] = {
            "evaluations": info.evaluations,
            "raw_y": info.y,
            "raw_y_best": info.raw_y_best,
            "y": info.current.y[0],
            "best_y": info.transformed_y_best,
        }
        if self.store_positions:
            record["x"] = list(info.current.x)
        run.records.append(record)

    def flush(self) -> None:
        self.flushed += 1

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per evaluation, tagged with the problem identity."""
        rows = []
        for run in self.runs:
            meta = asdict(run.meta_data)
            meta["optimization_type"] = run.meta_data.optimization_type.value
            for record in run.records:
                rows.append({**meta, "run": run.run_index, **record})
        return pd.DataFrame(rows)


class ConvergenceLogger(Logger):
    """Record (evaluation, best) pairs whenever the best value improves.

    Useful for plotting convergence curves or computing ECDFs.
    """

    def __init__(self) -> None:
        self.history: list[tuple[int, float, float]] = []  # (evals, best, elapsed)
        self._meta_data: MetaData | None = None
        self._best: float | None = None
        self._start_time = perf_counter()

    def track_problem(self, meta_data: MetaData) -> None:
        self._meta_data = meta_data
        self.reset()

    def log(self, info: LogInfo) -> None:
        best = info.transformed_y_best
        direction = self._meta_data.optimization_type if self._meta_data else None
        if self._best is None or (direction is not None and compare_objectives(best, self._best, direction)):
            self._best = best
            self.history.append((info.evaluations, best, perf_counter() - self._start_time))

    @property
    def best(self) -> float | None:
        """Return best objective seen."""
        return self._best

    def reset(self) -> None:
        """Clear history and reset timer."""
        self.history.clear()
        self._start_time = perf_counter()
        self._best = None


class ProgressLogger(Logger):
    """Print a progress line every `interval` evaluations.

    Example output:
        Sphere(1) eval=100 y=12.3 best=0.567 time=0.42s
    """

    def __init__(self, *, interval: int = 100):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._prefix = ""
        self._start = perf_counter()

    def track_problem(self, meta_data: MetaData) -> None:
        self._prefix = f"{meta_data.name}({meta_data.instance}) "
        self._start = perf_counter()

    def log(self, info: LogInfo) -> None:
        if info.evaluations % self.interval == 0:
            elapsed = perf_counter() - self._start
            print(
                f"{self._prefix}eval={info.evaluations} "
                f"y={info.current.y[0]:.6g} best={info.transformed_y_best:.6g} "
                f"time={elapsed:.2f}s"
            )
