"""
Forward-model matrices of the RBF-DRT problem.

The weight vector is laid out as

    [L, R_inf, theta_1 .. theta_N]   (include_inductance=True)
    [R_inf, theta_1 .. theta_N]      (default)

where theta_j is the weight of the basis function centred at
tau_j = 1 / f_j. The real matrix maps weights to Z', the imaginary matrix
maps weights to -Z'' (the sign convention of the fitted target).
"""

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import NDArray, ArrayLike
from scipy.linalg import toeplitz

from .config import TOEPLITZ_RTOL
from .kernels import RBFKernel, resolve_kernel
from ..exceptions import InvalidInputError, NumericalError
from ..utils.impedance import validate_frequencies

logger = logging.getLogger(__name__)


# =============================================================================
# Weight Layout
# =============================================================================

@dataclass(frozen=True)
class WeightLayout:
    """
    Position of the non-discretization terms in the weight vector.

    Attributes
    ----------
    n_frequencies : int
        Number of basis functions N
    include_inductance : bool
        Whether a series inductance L precedes R_inf
    """
    n_frequencies: int
    include_inductance: bool = False

    @property
    def n_offsets(self) -> int:
        return 2 if self.include_inductance else 1

    @property
    def size(self) -> int:
        """Length of the weight vector (N + number of offsets)."""
        return self.n_frequencies + self.n_offsets

    @property
    def r_inf_index(self) -> int:
        return self.n_offsets - 1

    @property
    def drt_slice(self) -> slice:
        """Slice selecting the discretization weights theta_1 .. theta_N."""
        return slice(self.n_offsets, self.size)

    def split(self, weights: NDArray[np.float64]):
        """
        Split a weight vector into (theta, R_inf, L).

        L is None when the layout has no inductance term.
        """
        if len(weights) != self.size:
            raise InvalidInputError(
                f"weight vector has length {len(weights)}, layout expects {self.size}"
            )
        theta = np.array(weights[self.drt_slice], dtype=np.float64)
        R_inf = float(weights[self.r_inf_index])
        L = float(weights[0]) if self.include_inductance else None
        return theta, R_inf, L


# =============================================================================
# Matrix Construction
# =============================================================================

def _is_log_uniform(f: NDArray[np.float64]) -> bool:
    """True if ln(f) is equally spaced (in either direction)."""
    if len(f) < 3:
        return True
    d = np.diff(np.log(f))
    return bool(np.all(np.abs(d - d[0]) <= TOEPLITZ_RTOL * abs(d[0]))) and d[0] != 0


def _kernel_block(f: NDArray[np.float64], epsilon: float, transform) -> NDArray[np.float64]:
    """
    N x N block of transform(epsilon, f_m / f_n).

    Entries depend on ln(f_m) - ln(f_n) only, so for log-uniform
    frequencies the block is Toeplitz and only 2N - 1 integrals are needed.
    """
    n = len(f)

    if _is_log_uniform(f):
        first_col = np.array([transform(epsilon, f[m] / f[0]) for m in range(n)])
        first_row = np.array([transform(epsilon, f[0] / f[k]) for k in range(n)])
        return toeplitz(first_col, first_row)

    block = np.empty((n, n))
    for m in range(n):
        for k in range(n):
            block[m, k] = transform(epsilon, f[m] / f[k])
    return block


def _prepare(frequencies, epsilon, rbf_kernel, stage):
    f = validate_frequencies(frequencies, min_points=1, stage=stage)
    if not np.isfinite(epsilon) or epsilon <= 0:
        raise InvalidInputError(f"{stage}: shape factor must be > 0, got {epsilon}")
    return f, resolve_kernel(rbf_kernel)


def _check_finite(matrix: NDArray[np.float64], stage: str) -> None:
    if np.any(~np.isfinite(matrix)):
        raise NumericalError(f"{stage}: matrix contains NaN or Inf values")


def build_real_matrix(
    frequencies: ArrayLike,
    epsilon: float,
    rbf_kernel: Union[None, str, RBFKernel] = None,
    include_inductance: bool = False
) -> NDArray[np.float64]:
    """
    Build the matrix mapping weights to the real part Z'.

    Parameters
    ----------
    frequencies : array_like
        Measured frequencies [Hz] (N points)
    epsilon : float
        Shape factor
    rbf_kernel : RBFKernel, str or None
        Kernel providing real_transform (default: squared exponential)
    include_inductance : bool
        Prepend the series inductance column (zero in the real part)

    Returns
    -------
    A_re : ndarray, shape (N, N + 1) or (N, N + 2)
        R_inf column is all ones
    """
    stage = "real matrix"
    f, kernel = _prepare(frequencies, epsilon, rbf_kernel, stage)
    layout = WeightLayout(len(f), include_inductance)

    A_re = np.zeros((len(f), layout.size))
    A_re[:, layout.r_inf_index] = 1.0
    A_re[:, layout.drt_slice] = _kernel_block(f, epsilon, kernel.real_transform)

    _check_finite(A_re, stage)
    logger.debug(f"Built real matrix {A_re.shape}")
    return A_re


def build_imag_matrix(
    frequencies: ArrayLike,
    epsilon: float,
    rbf_kernel: Union[None, str, RBFKernel] = None,
    include_inductance: bool = False
) -> NDArray[np.float64]:
    """
    Build the matrix mapping weights to the negated imaginary part -Z''.

    R_inf contributes nothing to the imaginary part; the optional
    inductance column is -2*pi*f (an inductor has Z'' = +omega*L).

    Returns
    -------
    A_im : ndarray, shape (N, N + 1) or (N, N + 2)
    """
    stage = "imaginary matrix"
    f, kernel = _prepare(frequencies, epsilon, rbf_kernel, stage)
    layout = WeightLayout(len(f), include_inductance)

    A_im = np.zeros((len(f), layout.size))
    if include_inductance:
        A_im[:, 0] = -2 * np.pi * f
    A_im[:, layout.drt_slice] = -_kernel_block(f, epsilon, kernel.imag_transform)

    _check_finite(A_im, stage)
    logger.debug(f"Built imaginary matrix {A_im.shape}")
    return A_im
