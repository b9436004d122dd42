import math

import numpy as np
import pytest

from evalbench.problems.bbob import GriewankRosenbrock, LinearSlope, Rastrigin, Sphere

PROBLEMS = [Sphere, Rastrigin, LinearSlope, GriewankRosenbrock]


@pytest.mark.parametrize("cls", PROBLEMS)
@pytest.mark.parametrize("instance", [0, 1, 7])
def test_optimum_evaluates_to_target(cls, instance):
    problem = cls(instance, 5)
    y = problem(problem.objective.x)
    assert y[0] == pytest.approx(problem.objective.y[0], abs=1e-8)
    assert problem.state.optimum_found or math.isclose(y[0], problem.objective.y[0], abs_tol=1e-8)


@pytest.mark.parametrize("cls", PROBLEMS)
def test_instances_are_reproducible(cls):
    a, b = cls(3, 4), cls(3, 4)
    assert a.objective.x == b.objective.x
    assert a.objective.y == b.objective.y


@pytest.mark.parametrize("cls", [Sphere, Rastrigin])
def test_instances_differ(cls):
    assert cls(1, 4).objective.x != cls(2, 4).objective.x


def test_instance_zero_is_untransformed():
    sphere = Sphere(0, 3)
    assert sphere([1.0, 2.0, 2.0]) == [9.0]
    assert sphere.objective.x == [0.0, 0.0, 0.0]
    assert sphere.objective.y == [0.0]


def test_sphere_views():
    sphere = Sphere(1, 3)
    x = [0.0, 0.0, 0.0]
    y = sphere(x)
    state = sphere.state
    assert state.current_internal.x == pytest.approx((-np.asarray(sphere.xopt)).tolist())
    assert y[0] == pytest.approx(state.current_internal.y[0] + sphere.fopt)


def test_rastrigin_is_rugged():
    rastrigin = Rastrigin(0, 2)
    assert rastrigin([0.5, 0.0])[0] > rastrigin([1.0, 0.0])[0]


def test_linear_slope_is_flat_beyond_optimum():
    slope = LinearSlope(0, 3)
    assert slope([5.0, 5.0, 5.0]) == [0.0]
    assert slope([6.0, 9.0, 5.0]) == [0.0]
    assert slope([0.0, 0.0, 0.0])[0] > 0.0


def test_griewank_rosenbrock_needs_two_variables():
    with pytest.raises(ValueError):
        GriewankRosenbrock(1, 1)


def test_bounds():
    problem = Sphere(1, 3)
    assert problem.constraint.lower_bounds == (-5.0, -5.0, -5.0)
    assert problem.constraint.upper_bounds == (5.0, 5.0, 5.0)


def test_numpy_input_is_accepted():
    assert Sphere(0, 2)(np.array([3.0, 4.0])) == [25.0]
