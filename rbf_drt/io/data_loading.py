"""
Data loading functions for EIS data.

CSV files with a header row; delimiter and column order are detected
automatically.
"""

import re
import numpy as np
import logging
from typing import Tuple, Optional, List
from numpy.typing import NDArray

from ..drt.config import MIN_FREQUENCIES
from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# Validation constants
MIN_FREQUENCY_RANGE = 10  # Minimum recommended ratio f_max/f_min

# Column aliases after normalization (lowercase, units and spaces removed)
FREQ_ALIASES = ('freq', 'frequency', 'f', 'hz', 'freqhz')
ZREAL_ALIASES = ('zreal', 'z_real', "z'", 're(z)', 'real', 'z.real', 're', 'zre')
ZIMAG_ALIASES = ('zimag', 'z_imag', "z''", 'im(z)', 'imag', 'z.imag', 'im', 'zim')

_UNIT_SUFFIX = re.compile(r'\[[^\]]*\]|\((hz|ohm|ω|Ω)\)', re.IGNORECASE)


def _detect_delimiter(header_line: str) -> str:
    """
    Auto-detect CSV delimiter from header line.

    Tries tab, semicolon and comma; returns the one giving most columns.
    """
    delimiters = ['\t', ';', ',']
    return max(delimiters, key=lambda d: len(header_line.split(d)))


def _normalize_header(header: str) -> str:
    """Lowercase, strip unit annotations like [Hz] or (Ohm) and spaces."""
    return _UNIT_SUFFIX.sub('', header).strip().lower().replace(' ', '')


def _find_column_index(headers: List[str], aliases: Tuple[str, ...]) -> Optional[int]:
    """Index of the first header equal to one of the aliases, or None."""
    normalized = [_normalize_header(h) for h in headers]
    for i, header in enumerate(normalized):
        if header in aliases:
            return i
    return None


def load_csv_data(
    filename: str,
    delimiter: Optional[str] = None
) -> Tuple[NDArray[np.float64], NDArray[np.complex128]]:
    """
    Load EIS data from CSV file with auto-detection of columns and delimiter.

    Automatically detects:
    - Delimiter: comma, semicolon, or tab
    - Columns: frequency, Z_real, Z_imag by header names
    - Comments: lines starting with '#' are ignored

    A decimal comma is accepted whenever the delimiter is not a comma
    (semicolon- or tab-separated files).

    Parameters
    ----------
    filename : str
        Path to CSV file
    delimiter : str, optional
        Column delimiter. If None, auto-detected from header.

    Returns
    -------
    frequencies : ndarray of float
        Frequency values [Hz]
    Z : ndarray of complex
        Complex impedance values [Ω]

    Raises
    ------
    InvalidInputError
        If the file has no usable rows or too few points

    Examples
    --------
    Supported CSV formats:

    Format 1 (comma-separated):
        frequency,Z_real,Z_imag
        100000,10.5,-5.2

    Format 2 (semicolon, European):
        freq;Zreal;Zimag
        100000;10,5;-5,2

    Format 3 (with comments and units):
        # EIS data exported from instrument
        frequency [Hz],Z_real [Ohm],Z_imag [Ohm]
        100000,10.5,-5.2
    """
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except UnicodeDecodeError:
        with open(filename, 'r', encoding='ISO-8859-1') as f:
            lines = f.readlines()

    content = [(i + 1, line.strip()) for i, line in enumerate(lines)]
    content = [(n, line) for n, line in content if line and not line.startswith('#')]

    if len(content) < 2:
        raise InvalidInputError(f"CSV file {filename} must have header and at least one data row")

    header_line = content[0][1]
    if delimiter is None:
        delimiter = _detect_delimiter(header_line)
    logger.debug(f"CSV delimiter: {delimiter!r}")

    headers = header_line.split(delimiter)
    columns = (
        _find_column_index(headers, FREQ_ALIASES),
        _find_column_index(headers, ZREAL_ALIASES),
        _find_column_index(headers, ZIMAG_ALIASES),
    )
    if None in columns:
        logger.warning("Could not detect columns from headers, using positional (0, 1, 2)")
        columns = (0, 1, 2)
    freq_col, zreal_col, zimag_col = columns
    logger.debug(f"Column indices: freq={freq_col}, zreal={zreal_col}, zimag={zimag_col}")

    rows: List[Tuple[float, float, float]] = []
    for line_num, line in content[1:]:
        parts = line.split(delimiter)
        try:
            values = tuple(float(parts[c].strip().replace(',', '.')) for c in columns)
        except (ValueError, IndexError) as e:
            logger.debug(f"Skipping line {line_num}: {e}")
            continue

        if values[0] > 0 and all(np.isfinite(values)):
            rows.append(values)
        else:
            logger.debug(f"Skipping line {line_num}: invalid values {values}")

    if not rows:
        raise InvalidInputError(f"No valid data found in {filename}")

    data = np.array(rows, dtype=np.float64)
    frequencies = data[:, 0]
    Z = data[:, 1] + 1j * data[:, 2]

    if len(frequencies) < MIN_FREQUENCIES:
        raise InvalidInputError(
            f"Dataset must have at least {MIN_FREQUENCIES} points, got {len(frequencies)}"
        )

    freq_range = frequencies.max() / frequencies.min()
    if freq_range < MIN_FREQUENCY_RANGE:
        logger.warning(f"Small frequency range: {freq_range:.1f}x (recommended >{MIN_FREQUENCY_RANGE}x)")

    if len(np.unique(frequencies)) != len(frequencies):
        logger.warning("Dataset contains duplicate frequencies")

    logger.info(f"Loaded {len(frequencies)} points from {filename}")
    logger.info(f"Frequency range: {frequencies.min():.2e} - {frequencies.max():.2e} Hz")

    return frequencies, Z
