#!/usr/bin/env python3
"""Tests for objective functions and method selection."""

import numpy as np
import pytest

from rbf_drt.drt.objectives import (
    DRTMethod,
    parse_method,
    objective,
    objective_gradient,
    joint_objective,
    joint_objective_gradient,
    build_objective,
)
from rbf_drt.exceptions import InvalidInputError


@pytest.fixture
def problem():
    rng = np.random.default_rng(0)
    A_re = rng.uniform(0, 1, (8, 5))
    A_im = rng.uniform(0, 1, (8, 5))
    Z = rng.uniform(1, 5, 8) - 1j * rng.uniform(1, 5, 8)
    w = rng.uniform(0, 2, 5)
    return A_re, A_im, Z, w


def central_difference(fun, w, h=1e-6):
    grad = np.zeros_like(w)
    for i in range(len(w)):
        step = np.zeros_like(w)
        step[i] = h
        grad[i] = (fun(w + step) - fun(w - step)) / (2 * h)
    return grad


def test_objective_value(problem):
    A_re, _, Z, w = problem
    expected = np.sum((A_re @ w - Z.real)**2) + 0.5 * np.sum(w**2)
    assert objective(A_re, Z.real, w, 0.5) == pytest.approx(expected)


def test_objective_without_regularization_is_least_squares(problem):
    A_re, _, Z, w = problem
    assert objective(A_re, Z.real, w, 0.0) == pytest.approx(np.linalg.norm(A_re @ w - Z.real)**2)


def test_joint_objective_adds_regularization_once(problem):
    A_re, A_im, Z, w = problem
    lam = 0.3
    joint = joint_objective(A_im, -Z.imag, A_re, Z.real, w, lam)
    separate = objective(A_im, -Z.imag, w, lam) + objective(A_re, Z.real, w, lam)
    assert joint == pytest.approx(separate - lam * np.sum(w**2))


def test_objective_gradient_matches_finite_differences(problem):
    A_re, _, Z, w = problem
    analytic = objective_gradient(A_re, Z.real, w, 0.1)
    numeric = central_difference(lambda x: objective(A_re, Z.real, x, 0.1), w)
    assert np.allclose(analytic, numeric, rtol=1e-5, atol=1e-6)


def test_joint_gradient_matches_finite_differences(problem):
    A_re, A_im, Z, w = problem
    analytic = joint_objective_gradient(A_im, -Z.imag, A_re, Z.real, w, 0.1)
    numeric = central_difference(
        lambda x: joint_objective(A_im, -Z.imag, A_re, Z.real, x, 0.1), w)
    assert np.allclose(analytic, numeric, rtol=1e-5, atol=1e-6)


@pytest.mark.parametrize("name, member", [
    ('im', DRTMethod.IM), ('re', DRTMethod.RE), ('re_im', DRTMethod.RE_IM),
])
def test_parse_method(name, member):
    assert parse_method(name) is member
    assert parse_method(member) is member


@pytest.mark.parametrize("bad", ['imag', 'RE', '', None, 3])
def test_parse_method_rejects_unknown(bad):
    with pytest.raises(InvalidInputError, match="unknown method"):
        parse_method(bad)


def test_build_objective_im_fits_negated_imaginary_part():
    A = np.eye(3)
    Z = np.array([1 - 2j, 3 - 4j, 5 - 6j])
    fun, jac = build_objective('im', A, A, Z, lam=0.0)
    w = np.array([2.0, 4.0, 6.0])  # -Z''
    assert fun(w) == pytest.approx(0.0)
    assert np.allclose(jac(w), 0.0)


def test_build_objective_re_fits_real_part():
    A = np.eye(3)
    Z = np.array([1 - 2j, 3 - 4j, 5 - 6j])
    fun, _ = build_objective('re', A, 2 * A, Z, lam=0.0)
    assert fun(np.array([1.0, 3.0, 5.0])) == pytest.approx(0.0)


@pytest.mark.parametrize("method", ['im', 're', 're_im'])
def test_build_objective_matches_direct_call(problem, method):
    A_re, A_im, Z, w = problem
    fun, jac = build_objective(method, A_re, A_im, Z, lam=0.2)
    if method == 'im':
        expected = objective(A_im, -Z.imag, w, 0.2)
    elif method == 're':
        expected = objective(A_re, Z.real, w, 0.2)
    else:
        expected = joint_objective(A_im, -Z.imag, A_re, Z.real, w, 0.2)
    assert fun(w) == pytest.approx(expected)
    assert jac(w).shape == w.shape


def test_build_objective_rejects_unknown_method(problem):
    A_re, A_im, Z, _ = problem
    with pytest.raises(InvalidInputError):
        build_objective('magnitude', A_re, A_im, Z, lam=0.1)


def test_build_objective_rejects_negative_lambda(problem):
    A_re, A_im, Z, _ = problem
    with pytest.raises(InvalidInputError, match="lambda"):
        build_objective('im', A_re, A_im, Z, lam=-1e-3)
