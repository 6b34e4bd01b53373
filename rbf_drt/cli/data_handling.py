"""
Data loading and filtering for the RBF-DRT CLI.

Contains:
- load_eis_data: Load from file or generate synthetic data
- filter_by_frequency: Apply frequency range filter
"""

import argparse
import logging
import os

from .utils import LoadedData
from ..exceptions import InvalidInputError
from ..io import load_csv_data, generate_voigt_data

logger = logging.getLogger(__name__)


# =============================================================================
# Synthetic Data Configuration
# =============================================================================
# Two well separated RC processes with 0.5% noise

SYNTHETIC_DATA_PARAMS = {
    'Rs': 10.0,                                  # Series resistance [Ohm]
    'elements': ((100.0, 1e-3), (200.0, 1e-1)),  # (R [Ohm], tau [s])
    'noise': 0.005,
    'seed': 42,
}


def load_eis_data(args: argparse.Namespace) -> LoadedData:
    """
    Load EIS data from file or generate synthetic data.

    Parameters
    ----------
    args : argparse.Namespace
        Uses args.input (None for synthetic data)

    Raises
    ------
    InvalidInputError
        If the file does not exist, has an unsupported extension or
        cannot be parsed
    """
    if args.input is None:
        frequencies, Z = generate_voigt_data(**SYNTHETIC_DATA_PARAMS)
        logger.info(f"Synthetic data: {len(frequencies)} points, "
                    f"{len(SYNTHETIC_DATA_PARAMS['elements'])} RC elements")
        return LoadedData(frequencies=frequencies, Z=Z, title="Synthetic data")

    if not os.path.exists(args.input):
        raise InvalidInputError(f"File '{args.input}' does not exist!")

    ext = os.path.splitext(args.input)[1].lower()
    if ext not in ('.csv', '.txt'):
        raise InvalidInputError(f"Unsupported format '{ext}'. Supported: .csv, .txt")

    frequencies, Z = load_csv_data(args.input)
    return LoadedData(frequencies=frequencies, Z=Z, title=os.path.basename(args.input))


def filter_by_frequency(
    data: LoadedData,
    args: argparse.Namespace
) -> LoadedData:
    """
    Filter data by frequency range (args.f_min, args.f_max).

    Raises
    ------
    InvalidInputError
        If no data remains after filtering
    """
    if args.f_min is None and args.f_max is None:
        return data

    mask = data.frequencies > 0
    if args.f_min is not None:
        mask &= (data.frequencies >= args.f_min)
        logger.info(f"Applying f_min = {args.f_min} Hz")
    if args.f_max is not None:
        mask &= (data.frequencies <= args.f_max)
        logger.info(f"Applying f_max = {args.f_max} Hz")

    n_before = len(data.frequencies)
    n_after = int(mask.sum())
    logger.info(f"Frequency filter: {n_before} -> {n_after} points "
                f"(removed: {n_before - n_after})")

    if n_after == 0:
        raise InvalidInputError(
            "No data remaining after filtering! Check --f-min and --f-max."
        )

    return LoadedData(
        frequencies=data.frequencies[mask],
        Z=data.Z[mask],
        title=data.title
    )
