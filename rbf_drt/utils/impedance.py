"""
Impedance data utility functions.

Common checks and operations on (frequency, impedance) arrays shared by
the DRT pipeline, the data loaders and the CLI.

Functions
---------
validate_frequencies : Check and convert a frequency sequence
validate_impedance : Check and convert an impedance sequence
"""

import numpy as np
from numpy.typing import NDArray, ArrayLike

from ..exceptions import InvalidInputError


def validate_frequencies(
    frequencies: ArrayLike,
    min_points: int = 2,
    stage: str = "input"
) -> NDArray[np.float64]:
    """
    Convert frequencies to a 1-D float array and check them.

    Parameters
    ----------
    frequencies : array_like
        Frequencies [Hz]
    min_points : int, optional
        Minimum required length (default: 2)
    stage : str, optional
        Pipeline stage named in error messages

    Returns
    -------
    frequencies : ndarray of float

    Raises
    ------
    InvalidInputError
        If the sequence is not 1-D, too short, non-finite or not
        strictly positive (ln(1/f) is undefined for f <= 0)
    """
    try:
        f = np.asarray(frequencies, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{stage}: frequencies are not real numbers ({e})") from e

    if f.ndim != 1:
        raise InvalidInputError(f"{stage}: frequencies must be 1-D, got shape {f.shape}")

    if len(f) < min_points:
        raise InvalidInputError(
            f"{stage}: at least {min_points} frequencies required, got {len(f)}"
        )

    if np.any(~np.isfinite(f)):
        raise InvalidInputError(f"{stage}: frequencies contain NaN or Inf values")

    if np.any(f <= 0):
        raise InvalidInputError(f"{stage}: all frequencies must be positive")

    return f


def validate_impedance(
    Z: ArrayLike,
    n_expected: int,
    stage: str = "input"
) -> NDArray[np.complex128]:
    """
    Convert impedance to a 1-D complex array index-aligned with frequencies.

    Raises
    ------
    InvalidInputError
        On shape or length mismatch or non-finite values
    """
    try:
        z = np.asarray(Z, dtype=np.complex128)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{stage}: impedance values are not numbers ({e})") from e

    if z.ndim != 1:
        raise InvalidInputError(f"{stage}: impedance must be 1-D, got shape {z.shape}")

    if len(z) != n_expected:
        raise InvalidInputError(
            f"{stage}: array length mismatch: {n_expected} frequencies, {len(z)} impedances"
        )

    if np.any(~np.isfinite(z)):
        raise InvalidInputError(f"{stage}: impedance contains NaN or Inf values")

    return z
