import numpy as np
import pytest

from evalbench.loggers import MemoryLogger
from evalbench.problems.base import wrap_function
from evalbench.problems.bbob import Sphere
from evalbench.problems.pbo import OneMax
from evalbench.problems.registry import INTEGER_PROBLEMS, ProblemSuite
from evalbench.runner import ExperimentRunner, random_search, run_experiment
from evalbench.types import OptimizationType


def test_random_search_respects_budget():
    problem = Sphere(1, 3)
    random_search(problem, 50, np.random.default_rng(0))
    assert problem.state.evaluations == 50
    assert problem.constraint.is_feasible(problem.state.current_best.x)


def test_random_search_stops_at_optimum():
    problem = OneMax(1, 2)
    random_search(problem, 1000, np.random.default_rng(0))
    assert problem.state.optimum_found
    assert problem.state.evaluations < 1000


def test_random_search_unbounded_problem():
    problem = wrap_function(lambda x: [sum(v * v for v in x)], "sq", 2)
    random_search(problem, 10, np.random.default_rng(1))
    assert all(-5.0 <= v <= 5.0 for v in problem.state.current.x)


def test_run_experiment_summaries():
    suite = ProblemSuite(INTEGER_PROBLEMS, problems=["OneMax"], instances=[1, 2], dimensions=[4])
    results = run_experiment(suite, budget=200, repeats=3, seed=1)

    assert len(results.summaries) == 2
    assert len(results.runs) == 6
    assert [r.run_index for r in results.runs[:3]] == [0, 1, 2]
    for summary in results.summaries:
        assert summary.n_runs == 3
        assert 0.0 <= summary.success_rate <= 1.0

    df = results.to_dataframe()
    assert list(df["instance"]) == [1, 2]


def test_runner_resets_between_repeats_and_detaches_logger():
    logger = MemoryLogger()
    problem = OneMax(1, 8)
    results = run_experiment([problem], budget=10, repeats=2, logger=logger)

    assert len(logger.runs) == 2
    assert logger.flushed == 1
    assert problem.logger is None
    assert all(run.evaluations <= 10 for run in results.runs)


def test_reused_problem_starts_clean():
    problem = Sphere(1, 3)
    for _ in range(2):
        results = run_experiment([problem], budget=10)
        assert results.runs[0].evaluations == 10


def test_solved_problem_is_reset_before_first_run():
    problem = OneMax(1, 4)
    problem([1, 1, 1, 1])
    assert problem.state.optimum_found

    def no_op(p, budget, rng):
        pass

    results = run_experiment([problem], no_op, budget=5)
    assert results.runs[0].evaluations == 0
    assert not results.runs[0].optimum_found


def test_runner_keeps_foreign_logger():
    logger = MemoryLogger()
    problem = OneMax(1, 4)
    problem.attach_logger(logger)
    run_experiment([problem], budget=5)
    assert problem.logger is logger


def test_summary_best_respects_direction():
    values = iter([3.0, 1.0, 2.0])
    problem = wrap_function(lambda x: [next(values)], "seq", 1, optimization_type=OptimizationType.MAX)

    def one_eval(p, budget, rng):
        p([0.0])

    results = run_experiment([problem], one_eval, budget=1, repeats=3)
    assert results.summaries[0].best_y == 3.0


def test_memory_tracking():
    results = run_experiment([Sphere(1, 2)], budget=5, track_memory=True)
    assert results.runs[0].peak_memory_mb is not None
    assert results.runs[0].peak_memory_mb >= 0.0


@pytest.mark.parametrize("kwargs", [{"budget": 0}, {"repeats": 0}])
def test_runner_rejects_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        ExperimentRunner([], **kwargs)
