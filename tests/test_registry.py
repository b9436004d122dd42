import numpy as np
import pytest

from evalbench.problems import bbob, pbo, registry as registry_module
from evalbench.problems.registry import (
    INTEGER_PROBLEMS,
    REAL_PROBLEMS,
    DuplicateProblemError,
    ProblemRegistry,
    ProblemSuite,
    UnknownProblemError,
    get_registry,
    register_problem,
)
from tests.conftest import ShiftedSum


def make_factory():
    def factory(instance, n_variables):
        return ShiftedSum(instance, n_variables)

    return factory


@pytest.fixture
def registry():
    return ProblemRegistry("test", autoload=False)


def test_create_by_id_and_name(registry):
    registry.register(7, "shifted", make_factory())

    by_id = registry.create(7, instance=1, n_variables=4)
    by_name = registry.create("shifted", instance=2, n_variables=6)

    assert by_id.meta_data.n_variables == 4
    assert by_id.meta_data.instance == 1
    assert by_name.meta_data.n_variables == 6
    assert by_name.meta_data.instance == 2
    assert by_id is not registry.create(7, 1, 4)


def test_duplicate_key_for_other_factory_fails(registry):
    registry.register(7, "shifted", make_factory())
    with pytest.raises(DuplicateProblemError):
        registry.register(7, "other", make_factory())
    with pytest.raises(DuplicateProblemError):
        registry.register(8, "shifted", make_factory())
    assert registry.list() == [(7, "shifted")]


def test_registration_is_idempotent(registry):
    factory = make_factory()
    registry.register(7, "shifted", factory)
    registry.register(7, "shifted", factory)
    assert len(registry) == 1


def test_unknown_key_fails(registry):
    registry.register(7, "shifted", make_factory())
    with pytest.raises(UnknownProblemError, match="unknown-key"):
        registry.create("unknown-key", 1, 4)
    with pytest.raises(KeyError):
        registry.create(99, 1, 4)


def test_numpy_integer_keys(registry):
    registry.register(7, "shifted", make_factory())
    problem = registry.create(np.int64(7), 1, 4)
    assert problem.meta_data.n_variables == 4
    assert np.int64(7) in registry


def test_bool_is_not_an_id(registry):
    registry.register(1, "shifted", make_factory())
    with pytest.raises(UnknownProblemError):
        registry.create(True, 1, 4)
    assert True not in registry
    assert 1 in registry


def test_failed_load_is_retried(monkeypatch):
    monkeypatch.setattr(registry_module, "_loaded", False)
    monkeypatch.setattr(
        registry_module,
        "PROBLEM_MODULES",
        ("evalbench.problems.bbob", "evalbench.problems.missing_module"),
    )
    for _ in range(2):
        with pytest.raises(ImportError):
            registry_module.load_problems()
        assert registry_module._loaded is False


def test_list_is_sorted_by_id(registry):
    registry.register(9, "b", make_factory())
    registry.register(2, "a", make_factory())
    registry.register(5, "c", make_factory())
    assert registry.list() == [(2, "a"), (5, "c"), (9, "b")]
    assert registry.ids() == [2, 5, 9]
    assert registry.names() == ["a", "c", "b"]
    assert 5 in registry and "b" in registry and "z" not in registry


def test_class_decorator(registry):
    @register_problem(registry, 42, "Decorated")
    class Decorated(ShiftedSum):
        pass

    problem = registry.create("Decorated", 3, 2)
    assert isinstance(problem, Decorated)
    assert problem.meta_data.instance == 3


def test_shipped_problems_are_registered():
    assert REAL_PROBLEMS.list() == [
        (1, "Sphere"),
        (3, "Rastrigin"),
        (5, "LinearSlope"),
        (19, "GriewankRosenbrock"),
    ]
    assert INTEGER_PROBLEMS.list() == [(1, "OneMax"), (2, "LeadingOnes"), (15, "LeadingOnesRuggedness1")]


def test_families_use_separate_registries():
    assert isinstance(REAL_PROBLEMS.create(1, 1, 4), bbob.Sphere)
    assert isinstance(INTEGER_PROBLEMS.create(1, 1, 4), pbo.OneMax)


def test_create_shipped_problem():
    problem = REAL_PROBLEMS.create("Sphere", instance=1, n_variables=4)
    assert problem.meta_data.n_variables == 4
    assert problem.meta_data.instance == 1
    with pytest.raises(UnknownProblemError):
        REAL_PROBLEMS.create("unknown-key", 1, 4)


def test_get_registry():
    assert get_registry("real") is REAL_PROBLEMS
    assert get_registry("integer") is INTEGER_PROBLEMS
    with pytest.raises(ValueError):
        get_registry("complex")


class TestProblemSuite:
    def test_iterates_all_combinations(self):
        suite = ProblemSuite(REAL_PROBLEMS, problems=[1, "Rastrigin"], instances=[1, 2], dimensions=[2, 3])
        problems = list(suite)
        assert len(suite) == len(problems) == 8
        keys = [(p.meta_data.name, p.meta_data.instance, p.meta_data.n_variables) for p in problems]
        assert keys[:4] == [("Sphere", 1, 2), ("Sphere", 1, 3), ("Sphere", 2, 2), ("Sphere", 2, 3)]

    def test_defaults_to_whole_registry(self):
        suite = ProblemSuite(INTEGER_PROBLEMS)
        assert suite.problems == [1, 2, 15]

    def test_unknown_problem_fails_early(self):
        with pytest.raises(UnknownProblemError):
            ProblemSuite(REAL_PROBLEMS, problems=["Nope"])

    def test_invalid_dimension_fails(self):
        with pytest.raises(ValueError):
            ProblemSuite(REAL_PROBLEMS, dimensions=[0])
