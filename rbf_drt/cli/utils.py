"""
Utility functions and dataclasses for the RBF-DRT CLI.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass
class LoadedData:
    """
    Container for loaded EIS data.

    Attributes
    ----------
    frequencies : ndarray
        Frequency values [Hz]
    Z : ndarray
        Complex impedance values [Ohm]
    title : str
        Data title (filename or "Synthetic data")
    """
    frequencies: NDArray[np.float64]
    Z: NDArray[np.complex128]
    title: str


def save_figure(
    fig: Optional[plt.Figure],
    prefix: Optional[str],
    suffix: str,
    fmt: str = 'png'
) -> Optional[str]:
    """
    Save figure to file if fig and prefix are provided.

    Parameters
    ----------
    fig : Figure or None
        Matplotlib figure to save
    prefix : str or None
        File prefix (from --save argument)
    suffix : str
        File suffix (e.g. 'drt')
    fmt : str
        Output format: 'png', 'pdf', 'svg', 'eps' (default: 'png')

    Returns
    -------
    filepath : str or None
        Path written, None if nothing was saved
    """
    if fig is None or prefix is None:
        return None

    filepath = f"{prefix}_{suffix}.{fmt}"
    if fmt == 'png':
        fig.savefig(filepath, dpi=150, bbox_inches='tight')
    else:
        fig.savefig(filepath, bbox_inches='tight')
    logger.info(f"Saved: {filepath}")
    return filepath
