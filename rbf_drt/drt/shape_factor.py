"""
Shape factor (epsilon) calibration of the RBF kernel.
"""

import logging
from typing import Optional, Union

import numpy as np
from numpy.typing import ArrayLike

from .config import DEFAULT_WIDTH_COEFF
from .kernels import RBFKernel, resolve_kernel
from ..exceptions import InvalidInputError
from ..utils.impedance import validate_frequencies

logger = logging.getLogger(__name__)


def calculate_shape_factor(
    frequencies: ArrayLike,
    width_coeff: float = DEFAULT_WIDTH_COEFF,
    rbf_kernel: Union[None, str, RBFKernel] = None
) -> float:
    """
    Compute the RBF shape factor from the frequency spacing.

    The kernel full width at half maximum (in units of epsilon*x) is
    matched to the mean spacing of the basis centres in ln(tau):

        epsilon = width_coeff * FWHM / |mean(diff(ln(1/f)))|

    so width_coeff = 0.1 makes every basis function ten spacings wide.

    Parameters
    ----------
    frequencies : array_like
        Measured frequencies [Hz], at least 2, all positive
    width_coeff : float, optional
        Width coefficient > 0 (default: 0.10)
    rbf_kernel : RBFKernel, str or None
        Kernel (default: squared exponential)

    Returns
    -------
    epsilon : float
        Positive shape factor

    Raises
    ------
    InvalidInputError
        On bad frequencies, non-positive width_coeff, or zero mean spacing
    """
    f = validate_frequencies(frequencies, min_points=2, stage="shape factor")

    if not np.isfinite(width_coeff) or width_coeff <= 0:
        raise InvalidInputError(f"shape factor: width_coeff must be > 0, got {width_coeff}")

    kernel = resolve_kernel(rbf_kernel)

    d_ln_tau = abs(float(np.mean(np.diff(np.log(1.0 / f)))))
    if d_ln_tau == 0:
        raise InvalidInputError(
            "shape factor: mean spacing of ln(1/f) is zero (repeated or symmetric frequencies)"
        )

    fwhm = 2.0 * kernel.half_width()
    epsilon = width_coeff * fwhm / d_ln_tau

    logger.debug(f"Shape factor: eps = {epsilon:.4g} "
                 f"(FWHM = {fwhm:.4g}, d ln tau = {d_ln_tau:.4g}, {kernel!r})")
    return float(epsilon)
