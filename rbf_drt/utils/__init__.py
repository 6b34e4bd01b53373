"""
Utility functions for RBF-DRT.

Shared helpers used across the DRT pipeline, data loading and the CLI.
"""

from .compat import np_trapz
from .impedance import validate_frequencies, validate_impedance

__all__ = [
    'np_trapz',
    'validate_frequencies',
    'validate_impedance',
]
