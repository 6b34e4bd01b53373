"""
Analysis workflow handlers for the RBF-DRT CLI.
"""

import argparse
import logging
from typing import Optional

import matplotlib.pyplot as plt

from .logging import log_separator
from .utils import LoadedData, save_figure
from ..drt import run_drt, DRTResult
from ..visualization import plot_drt

logger = logging.getLogger(__name__)


def run_drt_analysis(
    data: LoadedData,
    args: argparse.Namespace
) -> DRTResult:
    """
    Run DRT analysis and report the result.

    Parameters
    ----------
    data : LoadedData
        Frequencies and impedance
    args : argparse.Namespace
        CLI arguments (uses: method, kernel, width_coeff, lambda_reg,
        peak_strictness, inductance)

    Returns
    -------
    DRTResult
    """
    log_separator()
    logger.info("DRT analysis")
    log_separator()
    logger.info(f"Method: {args.method}, kernel: {args.kernel}, "
                f"lambda = {args.lambda_reg:g}, width coefficient = {args.width_coeff:g}")

    result = run_drt(
        data.frequencies, data.Z,
        method=args.method,
        width_coeff=args.width_coeff,
        rbf_kernel=args.kernel,
        lam=args.lambda_reg,
        peak_strictness=args.peak_strictness,
        include_inductance=args.inductance
    )

    logger.info(f"Shape factor: eps = {result.epsilon:.4g}")
    logger.info(f"Optimizer: {result.n_iterations} iterations")
    logger.info(f"R_inf = {result.R_inf:.4g} Ohm")
    if result.L is not None:
        logger.info(f"L = {result.L * 1e9:.4g} nH")
    logger.info(f"Fit error: {result.reconstruction_error:.2f}%")

    if result.reconstruction_error > 10.0:
        logger.warning(f"High reconstruction error ({result.reconstruction_error:.1f}%) "
                       f"- consider a smaller lambda or another method")

    if result.n_peaks == 0:
        logger.warning("No peaks detected in DRT")
    else:
        logger.info(f"Detected peaks: {result.n_peaks}")
        for i, (tau, amp, R) in enumerate(zip(result.relaxation_times,
                                              result.peak_amplitudes,
                                              result.peak_resistances)):
            logger.info(f"  Peak {i+1}: tau = {tau:.3e} s, gamma = {amp:.4g}, R ~ {R:.4g} Ohm")

    return result


def run_plotting(
    result: DRTResult,
    data: LoadedData,
    args: argparse.Namespace
) -> Optional[plt.Figure]:
    """Plot the DRT result and save it when --save is given."""
    fig = plot_drt(result, title=data.title)
    save_figure(fig, args.save, 'drt', args.format)
    return fig
