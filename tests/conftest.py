"""Shared fixtures for the evalbench test suite."""

import pytest

from evalbench.loggers import Logger
from evalbench.problems.base import RealProblem
from evalbench.types import LogInfo, MetaData, OptimizationType


class RecordingLogger(Logger):
    """Logger that remembers every call it receives."""

    def __init__(self):
        self.tracked: list[MetaData] = []
        self.infos: list[LogInfo] = []
        self.flushes = 0

    def track_problem(self, meta_data: MetaData) -> None:
        self.tracked.append(meta_data)

    def log(self, info: LogInfo) -> None:
        self.infos.append(info)

    def flush(self) -> None:
        self.flushes += 1


class ShiftedSum(RealProblem):
    """sum(x) on a shifted domain with a scaled objective."""

    def __init__(self, instance: int = 1, n_variables: int = 3,
                 direction: OptimizationType = OptimizationType.MIN):
        super().__init__(MetaData(99, "ShiftedSum", instance, n_variables, 1, direction))

    def transform_variables(self, x):
        return [v + 1.0 for v in x]

    def evaluate(self, x):
        return [float(sum(x))]

    def transform_objectives(self, y):
        return [2.0 * v for v in y]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def shifted_sum() -> ShiftedSum:
    return ShiftedSum()
