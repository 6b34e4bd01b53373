#!/usr/bin/env python3
"""End-to-end tests of the DRT pipeline."""

import numpy as np
import pytest
from scipy.signal import find_peaks

import rbf_drt.drt.core as core
from rbf_drt import compute_DRT, run_drt, compute_drt_batch, generate_voigt_data
from rbf_drt.drt.kernels import SquaredExponentialKernel
from rbf_drt.exceptions import InvalidInputError, ConvergenceError, NumericalError


def _forbid_matrices(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("matrix construction must not start on invalid input")
    monkeypatch.setattr(core, 'build_real_matrix', fail)
    monkeypatch.setattr(core, 'build_imag_matrix', fail)


# ---------------------------------------------------------------------------
# Output contract
# ---------------------------------------------------------------------------

def test_returns_four_index_aligned_arrays(single_rc_data):
    freq, Z, _ = single_rc_data
    taus_peak, amps, taus_out, drt = compute_DRT(freq, Z)

    assert len(taus_peak) == len(amps)
    assert taus_out.shape == drt.shape == (10 * len(freq),)


def test_grid_spans_decade_beyond_data(single_rc_data):
    freq, Z, _ = single_rc_data
    _, _, taus_out, _ = compute_DRT(freq, Z)

    assert taus_out.min() <= 0.1 / freq.max() * (1 + 1e-12)
    assert taus_out.max() >= 10 / freq.min() * (1 - 1e-12)


def test_drt_is_non_negative(single_rc_data):
    freq, Z, _ = single_rc_data
    _, _, _, drt = compute_DRT(freq, Z, method='re_im')
    assert np.all(drt >= 0)


def test_peak_amplitudes_bounded_by_curve(single_rc_data):
    freq, Z, _ = single_rc_data
    strictness = 0.01
    _, amps, _, drt = compute_DRT(freq, Z, peak_strictness=strictness)

    assert len(amps) > 0
    assert np.all(amps <= drt.max())
    assert np.all(amps > strictness * drt.max())


def test_idempotent(single_rc_data):
    freq, Z, _ = single_rc_data
    first = compute_DRT(freq, Z)
    second = compute_DRT(freq, Z)
    for a, b in zip(first, second):
        assert np.array_equal(a, b)


# ---------------------------------------------------------------------------
# Recovery of known time constants
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("ascending", [False, True])
def test_single_rc_gives_exactly_one_peak(single_rc_data, ascending):
    freq, Z, tau0 = single_rc_data
    if ascending:
        freq, Z = freq[::-1], Z[::-1]
    taus_peak, amps, _, _ = compute_DRT(freq, Z)

    assert len(taus_peak) == 1
    assert taus_peak[0] == pytest.approx(tau0, rel=0.05)


@pytest.mark.parametrize("method", ['re', 're_im'])
def test_other_methods_locate_main_peak(single_rc_data, method):
    freq, Z, tau0 = single_rc_data
    taus_peak, amps, _, _ = compute_DRT(freq, Z, method=method)

    main = taus_peak[np.argmax(amps)]
    assert main == pytest.approx(tau0, rel=0.25)


@pytest.mark.parametrize("kernel", ['squared_exponential', 'matern52', 'inverse_quadratic'])
def test_smooth_kernels_locate_main_peak(single_rc_data, kernel):
    freq, Z, tau0 = single_rc_data
    result = run_drt(freq, Z, rbf_kernel=kernel)

    assert result.kernel_name == kernel
    assert np.all(result.gamma >= 0)
    main = result.relaxation_times[np.argmax(result.peak_amplitudes)]
    assert main == pytest.approx(tau0, rel=0.25)


def test_two_rc_elements_give_two_peaks(two_rc_data):
    freq, Z, taus = two_rc_data
    taus_peak, amps, _, _ = compute_DRT(freq, Z)

    assert len(taus_peak) >= 2
    fast, slow = np.sort(np.argsort(amps)[-2:])
    assert taus_peak[fast] == pytest.approx(taus[0], rel=0.25)
    assert taus_peak[slow] == pytest.approx(taus[1], rel=0.25)
    # R2 = 2 * R1 with equal shapes -> larger peak at the slower process
    assert amps[slow] > amps[fast]


# ---------------------------------------------------------------------------
# Peak strictness boundaries
# ---------------------------------------------------------------------------

def test_zero_strictness_keeps_all_detected_peaks(two_rc_data):
    freq, Z, _ = two_rc_data
    result = run_drt(freq, Z, peak_strictness=0.0)
    detected, _ = find_peaks(result.gamma)
    assert np.array_equal(result.peak_indices, detected)


def test_strictness_near_one_keeps_global_maximum(two_rc_data):
    freq, Z, _ = two_rc_data
    all_peaks = run_drt(freq, Z, peak_strictness=0.0)
    strict = run_drt(freq, Z, peak_strictness=0.999)

    assert len(strict.peak_indices) == 1
    best = all_peaks.peak_indices[np.argmax(all_peaks.peak_amplitudes)]
    assert strict.peak_indices[0] == best


# ---------------------------------------------------------------------------
# Structured result
# ---------------------------------------------------------------------------

def test_run_drt_diagnostics(single_rc_data):
    freq, Z, _ = single_rc_data
    result = run_drt(freq, Z, method='re_im')

    assert result.method == 're_im'
    assert result.epsilon > 0
    assert result.lambda_used == 1e-2
    assert result.weights.shape == (len(freq) + 1,)
    assert result.theta.shape == (len(freq),)
    assert np.all(result.weights >= 0)
    assert result.L is None
    assert result.R_inf == pytest.approx(10.0, rel=0.1)
    assert result.reconstruction_error < 5.0
    assert result.Z_reconstructed.shape == Z.shape
    assert result.n_peaks == len(result.peak_resistances)
    assert np.array_equal(result.as_tuple()[2], result.tau)


def test_inductance_term_extends_weights():
    freq = np.logspace(5, -1, 61)
    freq, Z = generate_voigt_data(Rs=5.0, elements=[(50.0, 1e-3)], frequencies=freq, L=1e-6)
    result = run_drt(freq, Z, method='re_im', include_inductance=True)

    assert result.weights.shape == (len(freq) + 2,)
    assert result.L is not None
    assert result.L >= 0
    assert result.theta.shape == (len(freq),)


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("parallel", [False, True])
def test_batch_preserves_order(single_rc_data, two_rc_data, parallel):
    f1, Z1, _ = single_rc_data
    f2, Z2, _ = two_rc_data

    results = compute_drt_batch([(f1, Z1), (f2, Z2)], parallel=parallel, max_workers=2)

    assert len(results) == 2
    assert np.array_equal(results[0].gamma, run_drt(f1, Z1).gamma)
    assert np.array_equal(results[1].gamma, run_drt(f2, Z2).gamma)


def test_batch_propagates_errors(single_rc_data):
    f, Z, _ = single_rc_data
    with pytest.raises(InvalidInputError):
        compute_drt_batch([(f, Z), (f, Z)], method='bogus')


# ---------------------------------------------------------------------------
# Pipeline failures
# ---------------------------------------------------------------------------

class NaNRealTransformKernel(SquaredExponentialKernel):
    def real_transform(self, epsilon, ratio):
        return np.nan


class NaNEvaluationKernel(SquaredExponentialKernel):
    def __call__(self, u, v):
        return np.full(np.broadcast(u, v).shape, np.nan)


def test_optimizer_budget_exhaustion_is_fatal(single_rc_data):
    freq, Z, _ = single_rc_data
    with pytest.raises(ConvergenceError) as exc_info:
        run_drt(freq, Z, max_iter=2)

    assert exc_info.value.best_iterate is not None
    assert exc_info.value.best_iterate.shape == (len(freq) + 1,)


def test_non_finite_matrix_names_stage(single_rc_data):
    freq, Z, _ = single_rc_data
    with pytest.raises(NumericalError, match="real matrix"):
        run_drt(freq, Z, rbf_kernel=NaNRealTransformKernel())


def test_non_finite_drt_names_stage(single_rc_data):
    freq, Z, _ = single_rc_data
    with pytest.raises(NumericalError, match="interpolation"):
        compute_DRT(freq, Z, rbf_kernel=NaNEvaluationKernel())


def test_kernel_object_without_subclassing(single_rc_data):
    freq, Z, _ = single_rc_data

    class Wrapped:
        def __init__(self):
            self._inner = SquaredExponentialKernel()

        def __call__(self, u, v):
            return self._inner(u, v)

        def half_width(self):
            return self._inner.half_width()

        def real_transform(self, epsilon, ratio):
            return self._inner.real_transform(epsilon, ratio)

        def imag_transform(self, epsilon, ratio):
            return self._inner.imag_transform(epsilon, ratio)

    result = run_drt(freq, Z, rbf_kernel=Wrapped())

    assert result.kernel_name == 'Wrapped'
    assert np.array_equal(result.gamma, run_drt(freq, Z).gamma)


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("bad_value", [0.0, -10.0])
def test_non_positive_frequency_rejected_before_matrices(monkeypatch, single_rc_data, bad_value):
    freq, Z, _ = single_rc_data
    freq = freq.copy()
    freq[7] = bad_value
    _forbid_matrices(monkeypatch)

    with pytest.raises(InvalidInputError, match="positive"):
        compute_DRT(freq, Z)


def test_unknown_method_rejected_before_matrices(monkeypatch, single_rc_data):
    freq, Z, _ = single_rc_data
    _forbid_matrices(monkeypatch)

    with pytest.raises(InvalidInputError, match="unknown method"):
        compute_DRT(freq, Z, method='real')


@pytest.mark.parametrize("kwargs, match", [
    ({'lam': -1.0}, "lambda"),
    ({'width_coeff': 0.0}, "width_coeff"),
    ({'peak_strictness': 1.0}, "peak_strictness"),
    ({'rbf_kernel': 'spline'}, "Unknown kernel"),
])
def test_invalid_options_rejected_before_matrices(monkeypatch, single_rc_data, kwargs, match):
    freq, Z, _ = single_rc_data
    _forbid_matrices(monkeypatch)

    with pytest.raises(InvalidInputError, match=match):
        compute_DRT(freq, Z, **kwargs)


def test_length_mismatch(single_rc_data):
    freq, Z, _ = single_rc_data
    with pytest.raises(InvalidInputError, match="mismatch"):
        compute_DRT(freq, Z[:-1])


def test_too_few_points():
    with pytest.raises(InvalidInputError, match="at least 3"):
        compute_DRT([100.0, 10.0], [1 - 1j, 2 - 2j])


def test_non_finite_impedance(single_rc_data):
    freq, Z, _ = single_rc_data
    Z = Z.copy()
    Z[3] = np.nan
    with pytest.raises(InvalidInputError, match="NaN"):
        compute_DRT(freq, Z)
