"""Pseudo-boolean reference problems (maximization over {0, 1}^n).

Instance 1 is the raw function. Instances above 1 flip the variables with a
seeded XOR mask and scale the objective: a * f(x XOR mask) + b.
"""

import math

import numpy as np

from evalbench.problems.base import IntegerProblem
from evalbench.problems.registry import INTEGER_PROBLEMS, register_problem
from evalbench.types import Constraint, MetaData, OptimizationType, Solution

__all__ = [
    "PBOProblem",
    "OneMax",
    "LeadingOnes",
    "LeadingOnesRuggedness1",
    "ruggedness1",
]


def ruggedness1(y: float, n: int) -> float:
    """Map fitness values pairwise onto the same level."""
    if y == n:
        return math.ceil(y / 2.0) + 1.0
    if y < n and n % 2 == 0:
        return math.floor(y / 2.0) + 1.0
    if y < n:
        return math.ceil(y / 2.0) + 1.0
    return y


class PBOProblem(IntegerProblem):
    """Base class for pseudo-boolean problems.

    Subclasses implement `function` and `optimal_value`.
    """

    problem_id: int = 0
    name: str = ""

    def __init__(self, instance: int = 1, n_variables: int = 16):
        meta_data = MetaData(
            problem_id=self.problem_id,
            name=self.name,
            instance=instance,
            n_variables=n_variables,
            optimization_type=OptimizationType.MAX,
        )
        if instance > 1:
            rng = np.random.default_rng(self.problem_id * 10_000 + instance)
            self.mask = rng.integers(0, 2, size=n_variables).tolist()
            self.scale = float(np.round(rng.uniform(0.2, 5.0), 4))
            self.offset = float(np.round(rng.uniform(-1000.0, 1000.0), 2))
        else:
            self.mask = [0] * n_variables
            self.scale = 1.0
            self.offset = 0.0

        optimum = [1 ^ m for m in self.mask]
        super().__init__(
            meta_data,
            Constraint.box(0, 1, n_variables),
            Solution(optimum, [self.scale * self.optimal_value(n_variables) + self.offset]),
        )

    def optimal_value(self, n: int) -> float:
        raise NotImplementedError

    def function(self, x: list[int]) -> float:
        raise NotImplementedError

    def transform_variables(self, x: list[int]) -> list[int]:
        return [int(v) ^ m for v, m in zip(x, self.mask)]

    def evaluate(self, x: list[int]) -> list[float]:
        return [float(self.function(x))]

    def transform_objectives(self, y: list[float]) -> list[float]:
        return [self.scale * v + self.offset for v in y]


@register_problem(INTEGER_PROBLEMS, 1, "OneMax")
class OneMax(PBOProblem):
    """Number of ones in the bit string."""

    problem_id = 1
    name = "OneMax"

    def optimal_value(self, n: int) -> float:
        return float(n)

    def function(self, x: list[int]) -> float:
        return float(sum(1 for v in x if v == 1))


def _leading_ones(x: list[int]) -> int:
    count = 0
    for v in x:
        if v != 1:
            break
        count += 1
    return count


@register_problem(INTEGER_PROBLEMS, 2, "LeadingOnes")
class LeadingOnes(PBOProblem):
    """Length of the longest prefix of ones."""

    problem_id = 2
    name = "LeadingOnes"

    def optimal_value(self, n: int) -> float:
        return float(n)

    def function(self, x: list[int]) -> float:
        return float(_leading_ones(x))


@register_problem(INTEGER_PROBLEMS, 15, "LeadingOnesRuggedness1")
class LeadingOnesRuggedness1(PBOProblem):
    """LeadingOnes with neighbouring fitness levels merged.

    See https://doi.org/10.1016/j.asoc.2019.106027
    """

    problem_id = 15
    name = "LeadingOnesRuggedness1"

    def optimal_value(self, n: int) -> float:
        return ruggedness1(n, n)

    def function(self, x: list[int]) -> float:
        return ruggedness1(_leading_ones(x), len(x))
