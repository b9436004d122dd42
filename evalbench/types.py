"""Core value types shared by problems, loggers and the registry.

These types describe a problem (MetaData), its bounds (Constraint), points in
decision/objective space (Solution) and the record sent to loggers (LogInfo).
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "OptimizationType",
    "compare_objectives",
    "MetaData",
    "Solution",
    "Constraint",
    "LogInfo",
    "nan_vector",
]

NAN = float("nan")


class OptimizationType(Enum):
    """Optimization direction."""

    MIN = "minimization"
    MAX = "maximization"

    @property
    def initial_value(self) -> float:
        """Return the worst possible objective value for this direction."""
        return math.inf if self is OptimizationType.MIN else -math.inf


def compare_objectives(a: float, b: float, direction: OptimizationType) -> bool:
    """Return True if `a` is strictly better than `b` under `direction`.

    Equal values are never better, so the first-seen value wins a tie.
    """
    if direction is OptimizationType.MAX:
        return a > b
    return a < b


def nan_vector(size: int) -> list[float]:
    """Return a list of `size` NaN values."""
    return [NAN] * size


@dataclass(frozen=True, slots=True)
class MetaData:
    """Identity and shape of a problem instance.

    Attributes:
        problem_id: Numeric id within the problem family
        name: Problem name
        instance: Instance number, selects the transformation seed
        n_variables: Dimensionality of the decision vector
        n_objectives: Number of objectives (usually 1)
        optimization_type: Minimization or maximization
    """

    problem_id: int
    name: str
    instance: int = 1
    n_variables: int = 5
    n_objectives: int = 1
    optimization_type: OptimizationType = OptimizationType.MIN

    def __post_init__(self) -> None:
        if self.n_variables <= 0:
            raise ValueError(f"n_variables must be positive, got {self.n_variables}")
        if self.n_objectives <= 0:
            raise ValueError(f"n_objectives must be positive, got {self.n_objectives}")

    @property
    def initial_objective_value(self) -> float:
        """Value the best-so-far objective starts at."""
        return self.optimization_type.initial_value

    def __str__(self) -> str:
        return (
            f"{self.name}(id={self.problem_id}, instance={self.instance}, "
            f"n_variables={self.n_variables}, {self.optimization_type.value})"
        )


@dataclass(slots=True)
class Solution[T]:
    """A decision vector together with its objective vector."""

    x: list[T] = field(default_factory=list)
    y: list[float] = field(default_factory=list)

    def copy(self) -> "Solution[T]":
        return Solution(list(self.x), list(self.y))

    @classmethod
    def empty(cls, n_variables: int, n_objectives: int, y: float) -> "Solution[T]":
        """Create a sentinel solution: NaN decision vector, `y` objective."""
        return cls(nan_vector(n_variables), [y] * n_objectives)


@dataclass(frozen=True, slots=True)
class Constraint[T]:
    """Per-variable box bounds.

    A bound of None means that side is unbounded.
    """

    lower_bounds: tuple[T, ...] | None = None
    upper_bounds: tuple[T, ...] | None = None

    @classmethod
    def unbounded(cls) -> "Constraint[T]":
        return cls()

    @classmethod
    def box(cls, lower: T, upper: T, n_variables: int) -> "Constraint[T]":
        """Same lower/upper bound for every variable."""
        if lower > upper:
            raise ValueError(f"Lower bound {lower} exceeds upper bound {upper}")
        return cls((lower,) * n_variables, (upper,) * n_variables)

    def check_size(self, n_variables: int) -> None:
        """Raise ValueError if a declared bound vector does not match `n_variables`."""
        for label, bounds in (("lower", self.lower_bounds), ("upper", self.upper_bounds)):
            if bounds is not None and len(bounds) != n_variables:
                raise ValueError(
                    f"Constraint {label} bounds have size {len(bounds)}, "
                    f"expected n_variables={n_variables}"
                )

    def is_feasible(self, x: Sequence[T]) -> bool:
        """Return True if every variable lies within its bounds."""
        if self.lower_bounds is not None:
            if any(xi < lb for xi, lb in zip(x, self.lower_bounds, strict=True)):
                return False
        if self.upper_bounds is not None:
            if any(xi > ub for xi, ub in zip(x, self.upper_bounds, strict=True)):
                return False
        return True


@dataclass(frozen=True, slots=True)
class LogInfo:
    """Record passed to `Logger.log` after each evaluation.

    Attributes:
        evaluations: Number of evaluations so far
        raw_y_best: Best objective value in the internal domain
        y: Current objective value in the internal domain
        transformed_y_best: Best objective value in the public domain
        current: Current point and public objective vector
        objective: Target point and target objective vector
    """

    evaluations: int
    raw_y_best: float
    y: float
    transformed_y_best: float
    current: Solution[float]
    objective: Solution[float]

