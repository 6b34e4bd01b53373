#!/usr/bin/env python3
"""
DRT Analysis with RBF Discretization
====================================

CLI tool computing the Distribution of Relaxation Times of an EIS spectrum.

Version: Imported from rbf_drt.version (single source of truth)

Usage:
    rbfdrt                              # synthetic data demo
    rbfdrt data.csv                     # imaginary-part fit (default)
    rbfdrt data.csv --method re_im      # joint real + imaginary fit
    rbfdrt data.csv --lambda 1e-3 -v    # weaker regularization, debug output
    rbfdrt data.csv --save out --no-show

    rbfdrt --help                       # help
"""

import argparse
import logging
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from rbf_drt import get_version_string, DRTError
from rbf_drt.cli import (
    setup_logging,
    log_separator,
    parse_arguments,
    load_eis_data,
    filter_by_frequency,
    run_drt_analysis,
    run_plotting,
)

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = parse_arguments(argv)
    setup_logging(args)

    try:
        _run_analysis(args)
    except DRTError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        sys.exit(130)


def _run_analysis(args: argparse.Namespace) -> None:
    """Run the full analysis pipeline."""
    log_separator(60)
    logger.info(f"RBF-DRT Analysis ({get_version_string()})")
    log_separator(60)

    data = load_eis_data(args)
    data = filter_by_frequency(data, args)

    result = run_drt_analysis(data, args)
    run_plotting(result, data, args)

    if not args.no_show:
        plt.show()

    log_separator(60)
    logger.info("Analysis complete")
    log_separator(60)


if __name__ == "__main__":
    main()
