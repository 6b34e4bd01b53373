"""
Plotting functions for DRT results.
"""

import numpy as np
import matplotlib.pyplot as plt
import logging
from typing import Optional

from ..drt.core import DRTResult

logger = logging.getLogger(__name__)


def plot_drt(result: DRTResult, title: Optional[str] = None) -> plt.Figure:
    """
    Plot the DRT spectrum with detected peaks and a Nyquist fit check.

    Parameters
    ----------
    result : DRTResult
        Output of run_drt
    title : str, optional
        Figure title (e.g. data file name)

    Returns
    -------
    fig : matplotlib.figure.Figure
    """
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

    # === DRT Spectrum ===
    ax1.semilogx(result.tau, result.gamma, 'b-', linewidth=2, label='DRT gamma(tau)')
    ax1.fill_between(result.tau, 0, result.gamma, alpha=0.3)
    if result.n_peaks > 0:
        ax1.plot(result.relaxation_times, result.peak_amplitudes, 'ro', markersize=8,
                 label=f'{result.n_peaks} peaks', zorder=5)
    ax1.set_xlabel("tau [s]")
    ax1.set_ylabel("gamma(tau) [Ohm]")
    ax1.set_title(f"DRT ({result.method}, {result.kernel_name}, lambda = {result.lambda_used:g})")
    ax1.legend()
    ax1.grid(True, alpha=0.3, which='both')

    # === Nyquist Comparison ===
    if result.Z is not None and result.Z_reconstructed is not None:
        ax2.plot(result.Z.real, -result.Z.imag, 'o', label='Data', markersize=5)
        ax2.plot(result.Z_reconstructed.real, -result.Z_reconstructed.imag, '-',
                 label='DRT reconstruction', linewidth=2)
        ax2.set_aspect('equal', adjustable='datalim')
    ax2.set_xlabel("Z' [Ohm]")
    ax2.set_ylabel("-Z'' [Ohm]")
    ax2.set_title(f"DRT fit verification (error {result.reconstruction_error:.2f}%)")
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    if title:
        fig.suptitle(title)

    plt.tight_layout()
    return fig
