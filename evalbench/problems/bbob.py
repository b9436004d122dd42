"""Real-valued reference problems in the style of the BBOB test suite.

Each instance shifts the optimum to a seeded location `xopt` and the optimal
value to a seeded `fopt`. Instance 0 is the untransformed function.

    min  f(x - xopt) + fopt
"""

import math

import numpy as np

from evalbench.problems.base import RealProblem
from evalbench.problems.registry import REAL_PROBLEMS, register_problem
from evalbench.types import Constraint, MetaData, OptimizationType, Solution

__all__ = [
    "BBOBProblem",
    "Sphere",
    "Rastrigin",
    "LinearSlope",
    "GriewankRosenbrock",
]

LOWER_BOUND = -5.0
UPPER_BOUND = 5.0


class BBOBProblem(RealProblem):
    """Base class for BBOB-style problems on [-5, 5]^n.

    Subclasses implement `function` on the internal (shifted) vector and may
    override `_prepare` to compute instance-dependent data.
    """

    problem_id: int = 0
    name: str = ""

    def __init__(self, instance: int = 1, n_variables: int = 5):
        meta_data = MetaData(
            problem_id=self.problem_id,
            name=self.name,
            instance=instance,
            n_variables=n_variables,
            optimization_type=OptimizationType.MIN,
        )
        self.rng = np.random.default_rng(self.problem_id * 10_000 + instance)
        if instance == 0:
            self.xopt = np.zeros(n_variables)
            self.fopt = 0.0
        else:
            self.xopt = np.round(self.rng.uniform(-4.0, 4.0, size=n_variables), 4)
            self.fopt = float(np.clip(np.round(self.rng.standard_cauchy() * 100, 2), -1000, 1000))
        self._prepare(meta_data)
        super().__init__(
            meta_data,
            Constraint.box(LOWER_BOUND, UPPER_BOUND, n_variables),
            Solution(self.optimum().tolist(), [self.fopt]),
        )

    def _prepare(self, meta_data: MetaData) -> None:
        """Compute instance-dependent data before the base class is set up."""

    def optimum(self) -> np.ndarray:
        """Return the location of the optimum in the public domain."""
        return self.xopt

    def function(self, z: np.ndarray) -> float:
        raise NotImplementedError

    def transform_variables(self, x: list[float]) -> list[float]:
        return (np.asarray(x, dtype=float) - self.xopt).tolist()

    def evaluate(self, x: list[float]) -> list[float]:
        return [float(self.function(np.asarray(x, dtype=float)))]

    def transform_objectives(self, y: list[float]) -> list[float]:
        return [v + self.fopt for v in y]


@register_problem(REAL_PROBLEMS, 1, "Sphere")
class Sphere(BBOBProblem):
    """Sphere function: sum(z^2)."""

    problem_id = 1
    name = "Sphere"

    def function(self, z: np.ndarray) -> float:
        return float(np.sum(z**2))


@register_problem(REAL_PROBLEMS, 3, "Rastrigin")
class Rastrigin(BBOBProblem):
    """Rastrigin function: 10 * (n - sum(cos(2 pi z))) + sum(z^2)."""

    problem_id = 3
    name = "Rastrigin"

    def function(self, z: np.ndarray) -> float:
        n = z.size
        return float(10.0 * (n - np.sum(np.cos(2 * np.pi * z))) + np.sum(z**2))


@register_problem(REAL_PROBLEMS, 5, "LinearSlope")
class LinearSlope(BBOBProblem):
    """Linear slope with its optimum in a corner of the search box.

    The slope direction is given by the sign of `xopt`, which sits on the
    boundary. Beyond the boundary the function stays flat.
    """

    problem_id = 5
    name = "LinearSlope"

    def _prepare(self, meta_data: MetaData) -> None:
        signs = np.where(self.xopt < 0.0, -1.0, 1.0)
        self.xopt = signs * UPPER_BOUND
        n = meta_data.n_variables
        exponents = np.arange(n) / (n - 1) if n > 1 else np.zeros(1)
        self.slopes = signs * math.sqrt(100.0) ** exponents

    def transform_variables(self, x: list[float]) -> list[float]:
        return list(x)

    def function(self, z: np.ndarray) -> float:
        inside = z * self.xopt < UPPER_BOUND**2
        clipped = np.where(inside, z, self.xopt)
        return float(np.sum(5.0 * np.abs(self.slopes) - self.slopes * clipped))


@register_problem(REAL_PROBLEMS, 19, "GriewankRosenbrock")
class GriewankRosenbrock(BBOBProblem):
    """Composite Griewank-Rosenbrock function F8F2 on a rotated space.

    Needs at least two variables.
    """

    problem_id = 19
    name = "GriewankRosenbrock"

    def _prepare(self, meta_data: MetaData) -> None:
        n = meta_data.n_variables
        if n < 2:
            raise ValueError(f"{self.name} needs n_variables >= 2, got {n}")
        if meta_data.instance == 0:
            rotation = np.eye(n)
        else:
            q, r = np.linalg.qr(self.rng.standard_normal((n, n)))
            rotation = q * np.sign(np.diag(r))
        self.scale = max(1.0, math.sqrt(n) / 8.0)
        self.rotation = rotation * self.scale

    def optimum(self) -> np.ndarray:
        # z = R x + 0.5 reaches the Rosenbrock optimum at z = 1.
        return np.linalg.solve(self.rotation, np.full(self.rotation.shape[0], 0.5))

    def transform_variables(self, x: list[float]) -> list[float]:
        return (self.rotation @ np.asarray(x, dtype=float) + 0.5).tolist()

    def function(self, z: np.ndarray) -> float:
        c1 = z[:-1] ** 2 - z[1:]
        c2 = 1.0 - z[:-1]
        tmp = 100.0 * c1**2 + c2**2
        result = np.sum(tmp / 4000.0 - np.cos(tmp))
        return float(10.0 + 10.0 * result / (z.size - 1))
