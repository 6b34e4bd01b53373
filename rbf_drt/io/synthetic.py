"""
Synthetic data generation for testing and demonstration.
"""

import numpy as np
import logging
from typing import Optional, Sequence, Tuple
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def generate_voigt_data(
    Rs: float = 10.0,
    elements: Sequence[Tuple[float, float]] = ((100.0, 1e-3), (200.0, 1e-1)),
    frequencies: Optional[NDArray[np.float64]] = None,
    L: float = 0.0,
    noise: float = 0.0,
    seed: Optional[int] = None
) -> Tuple[NDArray[np.float64], NDArray[np.complex128]]:
    """
    Generate impedance of a Voigt circuit Rs - L - (R1||C1) - (R2||C2) - ...

    Each (R||C) element is given as (R, tau) with tau = R*C, so its DRT
    is a single line at tau.

    Parameters
    ----------
    Rs : float
        Series resistance [Ω]
    elements : sequence of (R, tau)
        Resistance [Ω] and time constant [s] of each RC element
    frequencies : ndarray, optional
        Frequencies [Hz] (default: 10 mHz - 100 kHz, 10 points per decade)
    L : float
        Series inductance [H]
    noise : float
        Relative Gaussian noise level (0.01 = 1% of |Z|)
    seed : int, optional
        Seed of the noise generator (for reproducible spectra)

    Returns
    -------
    frequencies : ndarray of float
        Frequency values [Hz]
    Z : ndarray of complex
        Complex impedance values [Ω]
    """
    if frequencies is None:
        frequencies = np.logspace(5, -2, 71)
    frequencies = np.asarray(frequencies, dtype=np.float64)
    omega = 2 * np.pi * frequencies

    logger.debug(f"Synthetic Voigt data: Rs = {Rs} Ω, {len(elements)} RC elements")

    Z = Rs + 1j * omega * L + np.zeros_like(omega, dtype=np.complex128)
    for R, tau in elements:
        Z = Z + R / (1 + 1j * omega * tau)

    if noise > 0:
        rng = np.random.default_rng(seed)
        Z = Z + noise * np.abs(Z) * (rng.standard_normal(len(Z)) +
                                     1j * rng.standard_normal(len(Z)))

    return frequencies, Z
