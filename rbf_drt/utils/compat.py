"""
NumPy compatibility utilities.

NumPy >= 2.0 renamed 'trapz' to 'trapezoid'. This module provides a
single import point that works with both versions.

Examples
--------
>>> from rbf_drt.utils.compat import np_trapz
>>> import numpy as np
>>> x = np.linspace(0, 1, 100)
>>> area = np_trapz(x**2, x)
"""

try:
    from numpy import trapezoid as np_trapz
except ImportError:
    # NumPy < 2.0
    from numpy import trapz as np_trapz

__all__ = ['np_trapz']
