"""evalbench - Benchmark problems and evaluation tracking for optimization algorithms."""

from evalbench.types import (
    OptimizationType,
    compare_objectives,
    MetaData,
    Solution,
    Constraint,
    LogInfo,
)
from evalbench.problems.base import (
    State,
    Problem,
    RealProblem,
    IntegerProblem,
    WrappedProblem,
    wrap_function,
)
from evalbench.problems.registry import (
    REAL_PROBLEMS,
    INTEGER_PROBLEMS,
    ProblemRegistry,
    ProblemSuite,
    register_problem,
    DuplicateProblemError,
    UnknownProblemError,
)
from evalbench.loggers import Logger, MemoryLogger, ConvergenceLogger, ProgressLogger

__version__ = "0.1.0"

__all__ = [
    # Types
    "OptimizationType",
    "compare_objectives",
    "MetaData",
    "Solution",
    "Constraint",
    "LogInfo",
    # Problems
    "State",
    "Problem",
    "RealProblem",
    "IntegerProblem",
    "WrappedProblem",
    "wrap_function",
    # Registry
    "REAL_PROBLEMS",
    "INTEGER_PROBLEMS",
    "ProblemRegistry",
    "ProblemSuite",
    "register_problem",
    "DuplicateProblemError",
    "UnknownProblemError",
    # Loggers
    "Logger",
    "MemoryLogger",
    "ConvergenceLogger",
    "ProgressLogger",
]
