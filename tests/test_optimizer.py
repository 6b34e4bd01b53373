#!/usr/bin/env python3
"""Tests for the box-constrained optimizer adapter."""

import numpy as np
import pytest

from rbf_drt.drt.optimizer import (
    minimize_box_constrained,
    initial_guess,
    box_bounds,
    _projected_gradient,
)
from rbf_drt.exceptions import ConvergenceError, InvalidInputError, NumericalError


TARGET = np.array([1.0, -2.0, 3.0])


def quadratic(x):
    return float(np.sum((x - TARGET)**2))


def quadratic_grad(x):
    return 2 * (x - TARGET)


def rosenbrock(x):
    return float(np.sum(100.0 * (x[1:] - x[:-1]**2)**2 + (1 - x[:-1])**2))


def test_initial_guess_and_bounds():
    x0 = initial_guess(4)
    lower, upper = box_bounds(4)
    assert np.all(x0 == 0.05)
    assert np.all(lower == 0.0)
    assert np.all(upper == 1e8)


def test_quadratic_with_active_bound():
    lower, upper = box_bounds(3)
    result = minimize_box_constrained(quadratic, initial_guess(3), lower, upper,
                                      jac=quadratic_grad)
    assert np.allclose(result.x, [1.0, 0.0, 3.0], atol=1e-6)
    assert result.fun == pytest.approx(4.0)
    assert result.n_iter > 0


def test_finite_difference_fallback():
    lower, upper = box_bounds(3)
    result = minimize_box_constrained(quadratic, initial_guess(3), lower, upper)
    assert np.allclose(result.x, [1.0, 0.0, 3.0], atol=1e-4)


def test_upper_bound_respected():
    lower = np.zeros(3)
    upper = np.full(3, 2.0)
    result = minimize_box_constrained(quadratic, initial_guess(3), lower, upper,
                                      jac=quadratic_grad)
    assert np.allclose(result.x, [1.0, 0.0, 2.0], atol=1e-6)


def test_deterministic():
    lower, upper = box_bounds(3)
    r1 = minimize_box_constrained(quadratic, initial_guess(3), lower, upper, jac=quadratic_grad)
    r2 = minimize_box_constrained(quadratic, initial_guess(3), lower, upper, jac=quadratic_grad)
    assert np.array_equal(r1.x, r2.x)


def test_budget_exhausted_raises_convergence_error():
    x0 = np.array([0.05, 0.05, 0.05, 0.05])
    lower, upper = np.full(4, -5.0), np.full(4, 5.0)

    with pytest.raises(ConvergenceError) as excinfo:
        minimize_box_constrained(rosenbrock, x0, lower, upper, max_iter=2)

    assert excinfo.value.best_iterate is not None
    assert excinfo.value.best_iterate.shape == (4,)
    assert np.all(excinfo.value.best_iterate >= lower)


def test_non_finite_objective_raises_numerical_error():
    lower, upper = box_bounds(2)
    with pytest.raises(NumericalError):
        minimize_box_constrained(lambda x: np.nan, initial_guess(2), lower, upper)


def test_shape_mismatch_raises():
    with pytest.raises(InvalidInputError):
        minimize_box_constrained(quadratic, initial_guess(3), np.zeros(2), np.ones(3))


def test_inverted_bounds_raise():
    with pytest.raises(InvalidInputError):
        minimize_box_constrained(quadratic, initial_guess(3), np.ones(3), np.zeros(3))


def test_projected_gradient_zeroes_blocked_components():
    x = np.array([0.0, 0.5, 1.0])
    g = np.array([1.0, 1.0, -1.0])
    pg = _projected_gradient(x, g, np.zeros(3), np.ones(3))
    assert np.array_equal(pg, [0.0, 1.0, 0.0])
