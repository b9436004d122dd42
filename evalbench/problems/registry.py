"""Problem registries: create benchmark problems by id or name.

Concrete problem classes register themselves with a class decorator:

    @register_problem(REAL_PROBLEMS, 1, "Sphere")
    class Sphere(RealProblem):
        def __init__(self, instance: int, n_variables: int): ...

Real-valued and integer-valued problems live in separate registries. The
registries are filled by importing the modules that define the problems;
`load_problems()` does this once, and is called on the first lookup.
"""

from __future__ import annotations

import importlib
import numbers
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from evalbench.log import get_logger
from evalbench.problems.base import IntegerProblem, Problem, RealProblem

__all__ = [
    "RegistryError",
    "DuplicateProblemError",
    "UnknownProblemError",
    "ProblemFactory",
    "ProblemRegistry",
    "REAL_PROBLEMS",
    "INTEGER_PROBLEMS",
    "register_problem",
    "load_problems",
    "get_registry",
    "ProblemSuite",
]

logger = get_logger(__name__)

ProblemFactory = Callable[[int, int], Problem]
"""Constructor taking (instance, n_variables)."""

# Modules whose import registers the shipped problems.
PROBLEM_MODULES = ("evalbench.problems.bbob", "evalbench.problems.pbo")


class RegistryError(Exception):
    """Base class for registry errors."""


class DuplicateProblemError(RegistryError, ValueError):
    """A key is already bound to a different factory."""


class UnknownProblemError(RegistryError, KeyError):
    """No problem is registered under the requested key."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else super().__str__()


_loaded = False


def load_problems() -> None:
    """Import every module that defines registered problems.

    Runs once per process; later calls return immediately.
    """
    global _loaded
    if _loaded:
        return
    for module in PROBLEM_MODULES:
        importlib.import_module(module)
        logger.debug("Loaded problem module %s", module)
    _loaded = True


class ProblemRegistry[P: Problem]:
    """Mapping from problem id and name to a factory.

    Registration is expected to finish before lookups start. After that the
    registry is only read.
    """

    def __init__(self, family: str, *, autoload: bool = True):
        self.family = family
        self._autoload = autoload
        self._by_id: dict[int, ProblemFactory] = {}
        self._by_name: dict[str, ProblemFactory] = {}
        self._names: dict[int, str] = {}

    def register(self, problem_id: int, name: str, factory: ProblemFactory) -> None:
        """Bind `problem_id` and `name` to `factory`.

        Registering the same factory under the same keys again is a no-op.

        Raises:
            DuplicateProblemError: If either key is bound to another factory.
        """
        existing = self._by_id.get(problem_id)
        if existing is not None and existing is not factory:
            raise DuplicateProblemError(
                f"{self.family} problem id {problem_id} is already registered "
                f"as '{self._names[problem_id]}'"
            )
        existing = self._by_name.get(name)
        if existing is not None and existing is not factory:
            raise DuplicateProblemError(f"{self.family} problem name '{name}' is already registered")
        if problem_id in self._names and self._names[problem_id] != name:
            raise DuplicateProblemError(
                f"{self.family} problem id {problem_id} is already registered "
                f"as '{self._names[problem_id]}'"
            )

        self._by_id[problem_id] = factory
        self._by_name[name] = factory
        self._names[problem_id] = name

    def registers(self, problem_id: int, name: str) -> Callable[[type[P]], type[P]]:
        """Class decorator form of `register`."""

        def decorator(cls: type[P]) -> type[P]:
            self.register(problem_id, name, cls)
            return cls

        return decorator

    def _ensure_loaded(self) -> None:
        if self._autoload:
            load_problems()

    def _lookup(self, key: object) -> ProblemFactory | None:
        # bool is an Integral, but True is not problem 1.
        if isinstance(key, bool):
            return None
        if isinstance(key, numbers.Integral):
            return self._by_id.get(int(key))
        if isinstance(key, str):
            return self._by_name.get(key)
        return None

    def factory(self, key: int | str) -> ProblemFactory:
        """Return the factory registered under an id or a name."""
        self._ensure_loaded()
        factory = self._lookup(key)
        if factory is None:
            raise UnknownProblemError(
                f"Unknown {self.family} problem: {key!r}. "
                f"Available: {[f'{i}:{n}' for i, n in self.list()]}"
            )
        return factory

    def create(self, key: int | str, instance: int, n_variables: int) -> P:
        """Construct a new problem registered under `key`.

        Args:
            key: Numeric problem id or problem name.
            instance: Instance number.
            n_variables: Dimensionality.

        Raises:
            UnknownProblemError: If `key` is not registered.
        """
        problem = self.factory(key)(instance, n_variables)
        logger.debug("Created %s", problem.meta_data)
        return problem

    def list(self) -> list[tuple[int, str]]:
        """Return all registered (id, name) pairs, sorted by id."""
        self._ensure_loaded()
        return sorted(self._names.items())

    def ids(self) -> list[int]:
        return [i for i, _ in self.list()]

    def names(self) -> list[str]:
        return [n for _, n in self.list()]

    def __contains__(self, key: object) -> bool:
        self._ensure_loaded()
        return self._lookup(key) is not None

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._by_id)

    def __repr__(self) -> str:
        return f"ProblemRegistry({self.family!r}, n={len(self._by_id)})"


REAL_PROBLEMS: ProblemRegistry[RealProblem] = ProblemRegistry("real")
INTEGER_PROBLEMS: ProblemRegistry[IntegerProblem] = ProblemRegistry("integer")

_REGISTRIES = {"real": REAL_PROBLEMS, "integer": INTEGER_PROBLEMS}


def get_registry(family: str) -> ProblemRegistry:
    """Return the registry for a family name ("real" or "integer")."""
    try:
        return _REGISTRIES[family]
    except KeyError:
        raise ValueError(f"Unknown problem family: {family}. Choose from {list(_REGISTRIES)}") from None


def register_problem[P: Problem](
    registry: ProblemRegistry[P], problem_id: int, name: str
) -> Callable[[type[P]], type[P]]:
    """Class decorator registering a problem class in `registry`."""
    return registry.registers(problem_id, name)


@dataclass
class ProblemSuite:
    """A set of problems, instances and dimensions from one registry.

    Iterating yields newly constructed problems, ordered by problem, then
    instance, then dimension.
    """

    registry: ProblemRegistry
    problems: list[int | str] = field(default_factory=list)
    instances: list[int] = field(default_factory=lambda: [1])
    dimensions: list[int] = field(default_factory=lambda: [5])

    def __post_init__(self) -> None:
        if not self.problems:
            self.problems = self.registry.ids()
        for key in self.problems:
            if key not in self.registry:
                raise UnknownProblemError(f"Unknown {self.registry.family} problem: {key!r}")
        if any(d <= 0 for d in self.dimensions):
            raise ValueError(f"Dimensions must be positive, got {self.dimensions}")

    def __iter__(self) -> Iterator[Problem]:
        for key in self.problems:
            for instance in self.instances:
                for n_variables in self.dimensions:
                    yield self.registry.create(key, instance, n_variables)

    def __len__(self) -> int:
        return len(self.problems) * len(self.instances) * len(self.dimensions)
