"""
Visualization module for DRT results.
"""

from .plots import plot_drt

__all__ = ['plot_drt']
