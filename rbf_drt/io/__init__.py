"""
I/O module for loading and generating EIS data.
"""

from .data_loading import load_csv_data
from .synthetic import generate_voigt_data

__all__ = [
    'load_csv_data',
    'generate_voigt_data',
]
