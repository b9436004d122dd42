"""Problem definitions for benchmarking."""

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
    load_problems,
)
from evalbench.problems.bbob import Sphere, Rastrigin, LinearSlope, GriewankRosenbrock
from evalbench.problems.pbo import OneMax, LeadingOnes, LeadingOnesRuggedness1

__all__ = [
    "State",
    "Problem",
    "RealProblem",
    "IntegerProblem",
    "WrappedProblem",
    "wrap_function",
    "REAL_PROBLEMS",
    "INTEGER_PROBLEMS",
    "ProblemRegistry",
    "ProblemSuite",
    "load_problems",
    # Real-valued problems
    "Sphere",
    "Rastrigin",
    "LinearSlope",
    "GriewankRosenbrock",
    # Pseudo-boolean problems
    "OneMax",
    "LeadingOnes",
    "LeadingOnesRuggedness1",
]
