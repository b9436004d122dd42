"""Generic evaluation pipeline shared by every benchmark problem."""

import math
import numbers
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from evalbench.log import get_logger
from evalbench.types import (
    Constraint,
    LogInfo,
    MetaData,
    OptimizationType,
    Solution,
    compare_objectives,
    nan_vector,
)

if TYPE_CHECKING:
    from evalbench.loggers import Logger

__all__ = [
    "State",
    "Problem",
    "RealProblem",
    "IntegerProblem",
    "WrappedProblem",
    "wrap_function",
]

logger = get_logger(__name__)


class State[T]:
    """Mutable evaluation state of a problem.

    `current` and `current_best` live in the public (transformed) domain,
    `current_internal` and `current_best_internal` in the raw domain seen by
    the benchmark formula.
    """

    __slots__ = (
        "_initial",
        "current",
        "current_internal",
        "current_best",
        "current_best_internal",
        "evaluations",
        "optimum_found",
    )

    def __init__(self, initial: Solution[T]):
        self._initial = initial.copy()
        self.reset()

    def reset(self) -> None:
        """Return to the construction-time sentinel values."""
        self.current = self._initial.copy()
        self.current_internal = self._initial.copy()
        self.current_best = self._initial.copy()
        self.current_best_internal = self._initial.copy()
        self.evaluations = 0
        self.optimum_found = False

    def copy(self) -> "State[T]":
        """Return an independent snapshot of this state."""
        snapshot = State.__new__(State)
        snapshot._initial = self._initial
        snapshot.current = self.current.copy()
        snapshot.current_internal = self.current_internal.copy()
        snapshot.current_best = self.current_best.copy()
        snapshot.current_best_internal = self.current_best_internal.copy()
        snapshot.evaluations = self.evaluations
        snapshot.optimum_found = self.optimum_found
        return snapshot

    def update(self, meta_data: MetaData, objective: Solution[T]) -> None:
        """Count one evaluation and update the best-so-far snapshots.

        Only the first objective component is compared. Both domains are
        replaced together, and only on strict improvement.
        """
        self.evaluations += 1
        direction = meta_data.optimization_type
        if compare_objectives(self.current.y[0], self.current_best.y[0], direction):
            self.current_best = self.current.copy()
            self.current_best_internal = self.current_internal.copy()

        target = objective.y[0]
        self.optimum_found = not compare_objectives(target, self.current_best.y[0], direction)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return all(
            _same_solution(getattr(self, name), getattr(other, name))
            for name in ("current", "current_internal", "current_best", "current_best_internal")
        ) and (self.evaluations, self.optimum_found) == (other.evaluations, other.optimum_found)

    def __repr__(self) -> str:
        return (
            f"State(evaluations={self.evaluations}, "
            f"current_best={self.current_best}, optimum_found={self.optimum_found})"
        )


def _same_solution(a: Solution, b: Solution) -> bool:
    """Element-wise equality where NaN equals NaN."""

    def same(u: Sequence[float], v: Sequence[float]) -> bool:
        return len(u) == len(v) and all(
            p == q or (isinstance(p, float) and isinstance(q, float) and math.isnan(p) and math.isnan(q))
            for p, q in zip(u, v)
        )

    return same(a.x, b.x) and same(a.y, b.y)


class Problem[T](ABC):
    """Abstract base class for benchmark problems.

    A problem is called with a decision vector and returns an objective
    vector. Every call runs the same pipeline: input check, variable
    transformation, evaluation, objective transformation, best-so-far update
    and logger notification. Subclasses implement `evaluate` and optionally
    override the transformation hooks.

    Attributes:
        meta_data: Identity and shape of this problem.
        constraint: Box bounds of the decision variables.
        objective: Target solution (the optimum, if known).
        state: Current evaluation state.
    """

    def __init__(
        self,
        meta_data: MetaData,
        constraint: Constraint[T] | None = None,
        objective: Solution[T] | None = None,
    ) -> None:
        """Initialize the problem.

        Args:
            meta_data: Identity and shape of the problem.
            constraint: Variable bounds, unconstrained by default.
            objective: Target solution. Defaults to an unreachable objective
                value so that `optimum_found` is never set.

        Raises:
            ValueError: If the constraint size does not match `n_variables`.
        """
        self._meta_data = meta_data
        self._constraint = constraint if constraint is not None else Constraint.unbounded()
        self._constraint.check_size(meta_data.n_variables)

        if objective is None:
            unreachable = -meta_data.initial_objective_value
            objective = Solution.empty(meta_data.n_variables, meta_data.n_objectives, unreachable)
        self._objective = objective.copy()

        self._state: State[T] = State(
            Solution.empty(
                meta_data.n_variables,
                meta_data.n_objectives,
                meta_data.initial_objective_value,
            )
        )
        self._logger: "Logger | None" = None

    @property
    def meta_data(self) -> MetaData:
        return self._meta_data

    @property
    def constraint(self) -> Constraint[T]:
        return self._constraint

    @property
    def objective(self) -> Solution[T]:
        """A copy of the target solution."""
        return self._objective.copy()

    @property
    def state(self) -> State[T]:
        """A snapshot of the evaluation state; changing it does not affect the problem."""
        return self._state.copy()

    @property
    def logger(self) -> "Logger | None":
        """The attached logger, if any."""
        return self._logger

    # -- hooks -------------------------------------------------------------

    @abstractmethod
    def evaluate(self, x: list[T]) -> list[float]:
        """Evaluate the benchmark formula on an internal decision vector."""
        ...

    def transform_variables(self, x: list[T]) -> list[T]:
        """Map a public decision vector to the internal domain."""
        return x

    def transform_objectives(self, y: list[float]) -> list[float]:
        """Map internal objective values to the public domain."""
        return y

    def check_input(self, x: Sequence[T]) -> bool:
        """Return True if `x` can be evaluated, log a warning otherwise."""
        return self._check_input_dimensions(x)

    def _check_input_dimensions(self, x: Sequence[T]) -> bool:
        if len(x) == 0:
            logger.warning("The solution is empty.")
            return False
        if len(x) != self._meta_data.n_variables:
            logger.warning(
                "The dimension of solution is incorrect: got %d, expected %d.",
                len(x),
                self._meta_data.n_variables,
            )
            return False
        return True

    # -- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        """Reset the state; an attached logger starts a new record."""
        self._state.reset()
        if self._logger is not None:
            self._logger.track_problem(self._meta_data)

    def attach_logger(self, logger: "Logger") -> None:
        """Attach `logger`, replacing any previously attached one.

        The replaced logger is not flushed; call `detach_logger` first for that.
        """
        self._logger = logger
        logger.track_problem(self._meta_data)

    def detach_logger(self) -> None:
        """Flush and forget the attached logger. No-op if none is attached."""
        if self._logger is not None:
            self._logger.flush()
        self._logger = None

    def log_info(self) -> LogInfo:
        """Build the record sent to the attached logger."""
        state = self._state
        return LogInfo(
            evaluations=state.evaluations,
            raw_y_best=state.current_best_internal.y[0],
            y=state.current_internal.y[0],
            transformed_y_best=state.current_best.y[0],
            current=Solution([float(v) for v in state.current.x], list(state.current.y)),
            objective=Solution([float(v) for v in self._objective.x], list(self._objective.y)),
        )

    def __call__(self, x: Sequence[T]) -> list[float]:
        """Evaluate `x` and return its objective vector.

        Invalid input returns a vector of NaN and leaves the state untouched.
        """
        if not self.check_input(x):
            return nan_vector(self._meta_data.n_objectives)

        state = self._state
        state.current.x = list(x)
        state.current_internal.x = self.transform_variables(list(x))
        state.current_internal.y = list(self.evaluate(state.current_internal.x))
        state.current.y = list(self.transform_objectives(list(state.current_internal.y)))
        state.update(self._meta_data, self._objective)
        if self._logger is not None:
            self._logger.log(self.log_info())
        return list(state.current.y)

    def __str__(self) -> str:
        return str(self._meta_data)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(meta_data={self._meta_data!r}, "
            f"constraint={self._constraint!r}, state={self._state!r})"
        )


class RealProblem(Problem[float]):
    """Problem over real-valued decision vectors.

    Input must additionally be finite.
    """

    def check_input(self, x: Sequence[float]) -> bool:
        if not self._check_input_dimensions(x):
            return False
        try:
            if all(math.isfinite(v) for v in x):
                return True
            if any(math.isnan(v) for v in x):
                logger.warning("The solution contains NaN.")
                return False
            if any(math.isinf(v) for v in x):
                logger.warning("The solution contains Inf.")
                return False
        except (TypeError, ValueError, OverflowError):
            pass
        logger.warning("The solution contains invalid values.")
        return False


class IntegerProblem(Problem[int]):
    """Problem over integer-valued decision vectors."""


type Function[T] = Callable[[list[T]], Sequence[float]]


class WrappedProblem[T](Problem[T]):
    """Problem that forwards evaluation to a plain function.

    Runs the same pipeline as any other problem, but is constructed directly
    rather than created from a registry.
    """

    def __init__(
        self,
        function: Function[T],
        name: str,
        n_variables: int,
        n_objectives: int = 1,
        optimization_type: OptimizationType = OptimizationType.MIN,
        constraint: Constraint[T] | None = None,
    ) -> None:
        super().__init__(
            MetaData(
                problem_id=0,
                name=name,
                instance=0,
                n_variables=n_variables,
                n_objectives=n_objectives,
                optimization_type=optimization_type,
            ),
            constraint,
        )
        self._function = function

    def evaluate(self, x: list[T]) -> list[float]:
        result = self._function(x)
        if isinstance(result, numbers.Real):
            return [float(result)]
        return list(result)


def wrap_function[T](
    function: Function[T],
    name: str,
    n_variables: int,
    n_objectives: int = 1,
    optimization_type: OptimizationType = OptimizationType.MIN,
    constraint: Constraint[T] | None = None,
) -> WrappedProblem[T]:
    """Wrap `function` into a problem without subclassing.

    Example:
        problem = wrap_function(lambda x: [sum(v * v for v in x)], "sphere", 5)
        problem([0.0] * 5)  # [0.0]
    """
    return WrappedProblem(function, name, n_variables, n_objectives, optimization_type, constraint)
