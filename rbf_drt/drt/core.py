"""
Core DRT (Distribution of Relaxation Times) calculation.

RBF discretization + Tikhonov regularization + non-negativity:

1. shape factor from the frequency spacing
2. forward matrices (real and imaginary)
3. objective for the selected method
4. box-constrained L-BFGS-B solve for the weights
5. interpolation of gamma(tau) on a dense grid
6. peak extraction

Clean design: no INFO logging in core functions, all diagnostics returned
as data. Every failure raises immediately; there is no fallback result.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray, ArrayLike

from .config import (
    DEFAULT_METHOD,
    DEFAULT_WIDTH_COEFF,
    DEFAULT_LAMBDA,
    DEFAULT_PEAK_STRICTNESS,
    MIN_FREQUENCIES,
    OPTIMIZER_MAX_ITER,
)
from .kernels import RBFKernel, resolve_kernel, kernel_name
from .shape_factor import calculate_shape_factor
from .matrices import WeightLayout, build_real_matrix, build_imag_matrix
from .objectives import DRTMethod, parse_method, build_objective
from .optimizer import minimize_box_constrained, initial_guess, box_bounds
from .interpolation import output_frequencies, drt_interpolation
from .peaks import get_peak_inds, estimate_peak_resistance
from ..exceptions import InvalidInputError, NumericalError
from ..utils.impedance import validate_frequencies, validate_impedance

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class DRTResult:
    """
    Complete DRT analysis result.

    The first four fields are the values returned by compute_DRT.
    """
    # Core results
    relaxation_times: NDArray[np.float64]
    peak_amplitudes: NDArray[np.float64]
    tau: NDArray[np.float64]
    gamma: NDArray[np.float64]

    # Fit parameters
    method: str
    epsilon: float
    lambda_used: float
    kernel_name: str

    # Fitted weights
    weights: NDArray[np.float64]
    theta: NDArray[np.float64]
    R_inf: float
    L: Optional[float] = None

    # Measured data and reconstruction
    frequencies: Optional[NDArray[np.float64]] = None
    Z: Optional[NDArray[np.complex128]] = None
    Z_reconstructed: Optional[NDArray[np.complex128]] = None
    reconstruction_error: float = 0.0

    # Optimizer diagnostics
    objective_value: float = 0.0
    n_iterations: int = 0
    optimizer_message: str = ''

    # Peaks
    peak_indices: NDArray[np.intp] = field(default_factory=lambda: np.array([], dtype=np.intp))
    peak_resistances: List[float] = field(default_factory=list)

    @property
    def n_peaks(self) -> int:
        return len(self.peak_indices)

    def as_tuple(self) -> Tuple[NDArray, NDArray, NDArray, NDArray]:
        """(relaxation_times, peak_amplitudes, tau, gamma)"""
        return self.relaxation_times, self.peak_amplitudes, self.tau, self.gamma


# =============================================================================
# Helper Functions
# =============================================================================

def _fit_error(method: DRTMethod, Z: NDArray, Z_fit: NDArray) -> float:
    """Relative RMS misfit [%] on the fitted part(s) of the spectrum."""
    if method is DRTMethod.IM:
        data, model = Z.imag, Z_fit.imag
    elif method is DRTMethod.RE:
        data, model = Z.real, Z_fit.real
    else:
        data, model = Z, Z_fit
    scale = np.sqrt(np.mean(np.abs(data)**2))
    if scale == 0:
        return 0.0
    return float(100 * np.sqrt(np.mean(np.abs(data - model)**2)) / scale)


def _validate_options(width_coeff: float, lam: float, peak_strictness: float) -> None:
    if not np.isfinite(width_coeff) or width_coeff <= 0:
        raise InvalidInputError(f"input: width_coeff must be > 0, got {width_coeff}")
    if not np.isfinite(lam) or lam < 0:
        raise InvalidInputError(f"input: lambda must be >= 0, got {lam}")
    if not 0 <= peak_strictness < 1:
        raise InvalidInputError(f"input: peak_strictness must be in [0, 1), got {peak_strictness}")


# =============================================================================
# Main Functions
# =============================================================================

def run_drt(
    frequencies: ArrayLike,
    measurements: ArrayLike,
    method: Union[str, DRTMethod] = DEFAULT_METHOD,
    width_coeff: float = DEFAULT_WIDTH_COEFF,
    rbf_kernel: Union[None, str, RBFKernel] = None,
    lam: float = DEFAULT_LAMBDA,
    peak_strictness: float = DEFAULT_PEAK_STRICTNESS,
    include_inductance: bool = False,
    max_iter: int = OPTIMIZER_MAX_ITER
) -> DRTResult:
    """
    Calculate the DRT and return a structured result.

    Parameters
    ----------
    frequencies : array_like
        Measured frequencies [Hz], N >= 3, all positive
    measurements : array_like of complex
        Impedance [Ohm], index-aligned with frequencies
    method : str
        'im' (fit -Z'', default), 're' (fit Z') or 're_im' (fit both)
    width_coeff : float
        RBF width coefficient (default: 0.10)
    rbf_kernel : RBFKernel, str or None
        Kernel (default: squared exponential)
    lam : float
        Regularization parameter >= 0 (default: 1e-2)
    peak_strictness : float
        Relative peak threshold in [0, 1) (default: 0.01)
    include_inductance : bool
        Fit a series inductance in addition to R_inf
    max_iter : int
        Optimizer iteration budget

    Returns
    -------
    DRTResult

    Raises
    ------
    InvalidInputError
        Bad input or options (checked before any matrix is built)
    ConvergenceError
        Optimizer did not converge
    NumericalError
        Non-finite values inside the pipeline
    """
    # === Step 0: Validate everything up front ===
    f = validate_frequencies(frequencies, min_points=MIN_FREQUENCIES, stage="input")
    Z = validate_impedance(measurements, len(f), stage="input")
    method = parse_method(method)
    _validate_options(width_coeff, lam, peak_strictness)
    kernel = resolve_kernel(rbf_kernel)
    layout = WeightLayout(len(f), include_inductance)

    logger.debug(f"DRT: {len(f)} points, method={method.value}, {kernel!r}, "
                 f"lambda={lam:g}, width_coeff={width_coeff:g}")

    # === Step 1: Shape factor ===
    epsilon = calculate_shape_factor(f, width_coeff, kernel)

    # === Step 2: Forward matrices ===
    A_re = build_real_matrix(f, epsilon, kernel, include_inductance)
    A_im = build_imag_matrix(f, epsilon, kernel, include_inductance)

    # === Step 3: Objective ===
    fun, jac = build_objective(method, A_re, A_im, Z, lam)

    # === Step 4: Optimize ===
    lower, upper = box_bounds(layout.size)
    opt = minimize_box_constrained(fun, initial_guess(layout.size), lower, upper,
                                   jac=jac, max_iter=max_iter)
    theta, R_inf, L = layout.split(opt.x)

    # === Step 5: Interpolate ===
    f_out = output_frequencies(f)
    gamma = drt_interpolation(f_out, f, theta, epsilon, kernel)
    tau = 1.0 / f_out

    # === Step 6: Peaks ===
    peak_indices = get_peak_inds(gamma, peak_strictness)

    # === Reconstruction ===
    Z_fit = A_re @ opt.x - 1j * (A_im @ opt.x)
    if np.any(~np.isfinite(Z_fit)):
        raise NumericalError("reconstruction: impedance contains NaN or Inf values")
    rel_error = _fit_error(method, Z, Z_fit)

    logger.debug(f"DRT done: eps={epsilon:.4g}, {len(peak_indices)} peaks, "
                 f"fit error {rel_error:.2f}%")

    return DRTResult(
        relaxation_times=tau[peak_indices],
        peak_amplitudes=gamma[peak_indices],
        tau=tau,
        gamma=gamma,
        method=method.value,
        epsilon=epsilon,
        lambda_used=lam,
        kernel_name=kernel_name(kernel),
        weights=opt.x,
        theta=theta,
        R_inf=R_inf,
        L=L,
        frequencies=f,
        Z=Z,
        Z_reconstructed=Z_fit,
        reconstruction_error=rel_error,
        objective_value=opt.fun,
        n_iterations=opt.n_iter,
        optimizer_message=opt.message,
        peak_indices=peak_indices,
        peak_resistances=estimate_peak_resistance(tau, gamma, peak_indices),
    )


def compute_DRT(
    frequencies: ArrayLike,
    measurements: ArrayLike,
    method: Union[str, DRTMethod] = DEFAULT_METHOD,
    width_coeff: float = DEFAULT_WIDTH_COEFF,
    rbf_kernel: Union[None, str, RBFKernel] = None,
    lam: float = DEFAULT_LAMBDA,
    peak_strictness: float = DEFAULT_PEAK_STRICTNESS,
    include_inductance: bool = False
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Compute the DRT of an impedance spectrum.

    See run_drt for parameters and errors.

    Returns
    -------
    relaxation_times : ndarray
        tau at the detected peaks [s]
    peak_amplitudes : ndarray
        gamma at the detected peaks
    taus_out : ndarray
        Dense tau grid [s] (10 * N points, ascending)
    drt : ndarray
        gamma(tau) on the grid
    """
    return run_drt(
        frequencies, measurements,
        method=method,
        width_coeff=width_coeff,
        rbf_kernel=rbf_kernel,
        lam=lam,
        peak_strictness=peak_strictness,
        include_inductance=include_inductance
    ).as_tuple()


def compute_drt_batch(
    spectra: Iterable[Tuple[ArrayLike, ArrayLike]],
    parallel: bool = False,
    max_workers: Optional[int] = None,
    **kwargs
) -> Sequence[DRTResult]:
    """
    Run the DRT on many independent spectra.

    Parameters
    ----------
    spectra : iterable of (frequencies, Z)
        Input spectra
    parallel : bool
        Run spectra concurrently in a thread pool (default: False)
    max_workers : int, optional
        Pool size (default: executor default)
    **kwargs
        Passed to run_drt (kernel names are resolved per call)

    Returns
    -------
    results : list of DRTResult
        In input order. The first error raised is propagated.
    """
    spectra = list(spectra)

    def run_single(spectrum):
        freq, Z = spectrum
        return run_drt(freq, Z, **kwargs)

    if parallel and len(spectra) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(run_single, spectra))

    return [run_single(s) for s in spectra]
