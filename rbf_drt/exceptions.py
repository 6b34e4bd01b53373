"""
Exception hierarchy for DRT computation.

Every error is raised where it is detected and propagated to the caller.
No stage of the pipeline recovers locally or returns a fallback DRT.
"""

from typing import Optional

import numpy as np
from numpy.typing import NDArray


class DRTError(Exception):
    """Base exception for DRT analysis errors."""
    pass


class InvalidInputError(DRTError, ValueError):
    """Malformed input: bad frequencies, length mismatch, unknown method, etc."""
    pass


class ConvergenceError(DRTError):
    """
    Optimizer did not reach a stationary point within its budget.

    Attributes
    ----------
    best_iterate : ndarray or None
        Last (best) weight vector returned by the optimizer
    message : str
        Optimizer status message
    """

    def __init__(self, message: str,
                 best_iterate: Optional[NDArray[np.float64]] = None):
        super().__init__(message)
        self.message = message
        self.best_iterate = best_iterate


class NumericalError(DRTError, ArithmeticError):
    """Non-finite values produced inside the pipeline."""
    pass
