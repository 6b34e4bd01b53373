"""
Evaluation of the fitted RBF expansion on a dense relaxation-time grid.
"""

import logging
from typing import Union

import numpy as np
from numpy.typing import NDArray, ArrayLike

from .config import OUTPUT_POINTS_PER_INPUT, GRID_EXTENSION_DECADES
from .kernels import RBFKernel, resolve_kernel
from ..exceptions import InvalidInputError, NumericalError
from ..utils.impedance import validate_frequencies

logger = logging.getLogger(__name__)


def output_frequencies(
    frequencies: ArrayLike,
    points_per_input: int = OUTPUT_POINTS_PER_INPUT,
    extend_decades: int = GRID_EXTENSION_DECADES
) -> NDArray[np.float64]:
    """
    Dense, log-spaced output grid expressed as frequencies.

    The grid runs over whole decades of tau = 1/f, widened by
    `extend_decades` on each side, from the highest to the lowest
    frequency, so tau = 1 / f_out is ascending.

    Parameters
    ----------
    frequencies : array_like
        Measured frequencies [Hz] (N points)
    points_per_input : int
        Grid size is points_per_input * N (default: 10)
    extend_decades : int
        Decades added beyond the measured tau range (default: 1)

    Returns
    -------
    f_out : ndarray, shape (points_per_input * N,)
        Output frequencies [Hz], descending

    Examples
    --------
    >>> f_out = output_frequencies(np.logspace(0, 3, 4))
    >>> len(f_out), f_out[0], f_out[-1]
    (40, 10000.0, 0.1)
    """
    f = validate_frequencies(frequencies, min_points=1, stage="output grid")
    if points_per_input < 1:
        raise InvalidInputError(f"output grid: points_per_input must be >= 1, got {points_per_input}")

    log_tau = np.log10(1.0 / f)
    tau_max = np.ceil(log_tau.max()) + extend_decades
    tau_min = np.floor(log_tau.min()) - extend_decades

    return 10.0 ** np.linspace(-tau_min, -tau_max, points_per_input * len(f))


def drt_interpolation(
    out_frequencies: ArrayLike,
    frequencies: ArrayLike,
    theta: ArrayLike,
    epsilon: float,
    rbf_kernel: Union[None, str, RBFKernel] = None
) -> NDArray[np.float64]:
    """
    Evaluate gamma(tau) = sum_j theta_j * k(eps * x, eps * x0_j).

    x = -ln(f_out) and x0 = -ln(f) are the log relaxation times of the
    output points and the basis centres.

    Parameters
    ----------
    out_frequencies : array_like
        Output grid as frequencies [Hz] (M points)
    frequencies : array_like
        Basis centres as frequencies [Hz] (N points)
    theta : array_like
        Discretization weights (N values, offsets excluded)
    epsilon : float
        Shape factor used for the matrices
    rbf_kernel : RBFKernel, str or None
        Same kernel as used for the matrices

    Returns
    -------
    gamma : ndarray, shape (M,)
    """
    stage = "interpolation"
    f_out = validate_frequencies(out_frequencies, min_points=1, stage=stage)
    f = validate_frequencies(frequencies, min_points=1, stage=stage)
    theta = np.asarray(theta, dtype=np.float64).ravel()

    if len(theta) != len(f):
        raise InvalidInputError(
            f"{stage}: {len(theta)} weights for {len(f)} basis functions"
        )

    kernel = resolve_kernel(rbf_kernel)

    x = -np.log(f_out)
    x0 = -np.log(f)
    K = kernel(epsilon * x[:, np.newaxis], epsilon * x0[np.newaxis, :])
    gamma = K @ theta

    if np.any(~np.isfinite(gamma)):
        raise NumericalError(f"{stage}: DRT contains NaN or Inf values")

    logger.debug(f"Interpolated DRT on {len(f_out)} points")
    return gamma
