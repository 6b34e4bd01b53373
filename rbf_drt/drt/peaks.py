"""
Peak detection on the interpolated DRT curve.
"""

import logging
from typing import List

import numpy as np
from numpy.typing import NDArray, ArrayLike
from scipy.signal import find_peaks, peak_widths

from .config import DEFAULT_PEAK_STRICTNESS
from ..exceptions import InvalidInputError
from ..utils.compat import np_trapz

logger = logging.getLogger(__name__)


def get_peak_inds(
    drt: ArrayLike,
    strictness: float = DEFAULT_PEAK_STRICTNESS
) -> NDArray[np.intp]:
    """
    Indices of local maxima of the DRT above a relative height threshold.

    Local maxima come from scipy.signal.find_peaks (edges excluded,
    plateaus reported at their middle). A peak is kept when its amplitude
    is strictly above strictness * (largest peak amplitude).

    Parameters
    ----------
    drt : array_like
        DRT curve gamma(tau)
    strictness : float
        Relative threshold in [0, 1) (default: 0.01)

    Returns
    -------
    indices : ndarray of int
        Ascending peak indices; empty if the curve has no local maximum
    """
    if not 0 <= strictness < 1:
        raise InvalidInputError(f"peak extraction: strictness must be in [0, 1), got {strictness}")

    gamma = np.asarray(drt, dtype=np.float64)
    if gamma.ndim != 1:
        raise InvalidInputError(f"peak extraction: DRT must be 1-D, got shape {gamma.shape}")

    candidates, _ = find_peaks(gamma)
    if len(candidates) == 0:
        logger.debug("No local maxima in DRT")
        return candidates

    amplitudes = gamma[candidates]
    max_amplitude = amplitudes.max()
    if strictness == 0:
        return candidates

    keep = amplitudes > strictness * max_amplitude
    logger.debug(f"Peaks: {len(candidates)} found, {int(keep.sum())} above "
                 f"{strictness:g} x max")
    return candidates[keep]


def estimate_peak_resistance(
    tau: ArrayLike,
    gamma: ArrayLike,
    peak_indices: ArrayLike,
    tolerance: float = 0.1
) -> List[float]:
    """
    Polarization resistance of each DRT peak, R = integral gamma d(ln tau).

    The window of a peak is where gamma stays above `tolerance` of the
    peak prominence (scipy.signal.peak_widths at rel_height = 1 - tolerance).
    For overlapping peaks the prominence is measured from the valley
    between them, so a shoulder is not integrated twice.

    Parameters
    ----------
    tau : array_like
        Relaxation times [s], monotonic
    gamma : array_like
        DRT on the tau grid
    peak_indices : array_like of int
        Peaks from get_peak_inds
    tolerance : float
        Fraction of the prominence bounding the window, in [0, 1)

    Returns
    -------
    resistances : list of float
        One value [Ohm] per peak, in the order of peak_indices
    """
    if not 0 <= tolerance < 1:
        raise InvalidInputError(f"peak resistance: tolerance must be in [0, 1), got {tolerance}")

    peaks = np.asarray(peak_indices, dtype=np.intp)
    if len(peaks) == 0:
        return []

    gamma = np.asarray(gamma, dtype=np.float64)
    ln_tau = np.log(np.asarray(tau, dtype=np.float64))

    _, _, left_ips, right_ips = peak_widths(gamma, peaks, rel_height=1.0 - tolerance)
    lo = np.floor(left_ips).astype(np.intp)
    hi = np.ceil(right_ips).astype(np.intp)

    # ln_tau may be descending
    return [abs(float(np_trapz(gamma[a:b + 1], ln_tau[a:b + 1]))) for a, b in zip(lo, hi)]
