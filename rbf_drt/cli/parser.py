"""
Argument parsing for the RBF-DRT CLI.

Options are grouped into Input/Output and DRT Analysis.
"""

import argparse
from typing import List, Optional

from ..version import get_version_string
from ..drt.config import (
    DEFAULT_METHOD,
    DEFAULT_WIDTH_COEFF,
    DEFAULT_LAMBDA,
    DEFAULT_PEAK_STRICTNESS,
)
from ..drt.kernels import KERNELS


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description=f'DRT analysis with RBF discretization ({get_version_string()})',
        usage='rbfdrt [input] [options]',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rbfdrt                               Synthetic data demo
  rbfdrt data.csv                      Analyze CSV data file
  rbfdrt data.csv --method re_im       Fit real and imaginary parts
  rbfdrt data.csv --kernel matern52 --lambda 1e-3
        """
    )

    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {get_version_string()}')

    # ==========================================================================
    # Input/Output Group
    # ==========================================================================
    io_group = parser.add_argument_group('Input/Output')

    io_group.add_argument('input', nargs='?', default=None,
                          help='Input CSV file (frequency, Z_real, Z_imag). '
                               'Without argument, synthetic data is used.')
    io_group.add_argument('--f-min', type=float, default=None,
                          help='Minimum frequency [Hz] - data below will be cut off')
    io_group.add_argument('--f-max', type=float, default=None,
                          help='Maximum frequency [Hz] - data above will be cut off')
    io_group.add_argument('--save', '-s', type=str, default=None,
                          help='Save plots to files with this prefix')
    io_group.add_argument('--format', '-f', type=str, default='png',
                          choices=['png', 'pdf', 'svg', 'eps'],
                          help='Output format for saved plots (default: png)')
    io_group.add_argument('--no-show', action='store_true',
                          help='Do not display plots (useful with --save)')
    io_group.add_argument('--verbose', '-v', action='count', default=0,
                          help='Show debug messages on stderr')
    io_group.add_argument('--quiet', '-q', action='store_true',
                          help='Quiet mode - hide INFO messages, show only warnings and errors')

    # ==========================================================================
    # DRT Analysis Group
    # ==========================================================================
    drt_group = parser.add_argument_group('DRT Analysis')

    drt_group.add_argument('--method', '-m', type=str, default=DEFAULT_METHOD,
                           choices=['im', 're', 're_im'],
                           help=f'Fitted part of the spectrum (default: {DEFAULT_METHOD})')
    drt_group.add_argument('--kernel', '-k', type=str, default='squared_exponential',
                           choices=sorted(KERNELS),
                           help='RBF kernel (default: squared_exponential)')
    drt_group.add_argument('--width-coeff', '-w', type=float, default=DEFAULT_WIDTH_COEFF,
                           help=f'RBF width coefficient (default: {DEFAULT_WIDTH_COEFF})')
    drt_group.add_argument('--lambda', '-l', dest='lambda_reg', type=float,
                           default=DEFAULT_LAMBDA,
                           help=f'Regularization parameter (default: {DEFAULT_LAMBDA})')
    drt_group.add_argument('--peak-strictness', '-p', type=float,
                           default=DEFAULT_PEAK_STRICTNESS,
                           help='Minimum peak height relative to the highest peak '
                                f'(default: {DEFAULT_PEAK_STRICTNESS})')
    drt_group.add_argument('--inductance', action='store_true',
                           help='Fit a series inductance in addition to R_inf')

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Parameters
    ----------
    argv : list of str, optional
        Arguments (default: sys.argv[1:])

    Returns
    -------
    args : argparse.Namespace
        Parsed command line arguments
    """
    return build_parser().parse_args(argv)
