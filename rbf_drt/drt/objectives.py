"""
Objective functions of the regularized DRT inversion.

All objectives are ridge-regularized least squares:

    J(w) = ||A w - b||^2 + lambda * ||w||^2

with analytic gradients, so the box-constrained quasi-Newton solver does
not need finite differences.
"""

import logging
from enum import Enum
from typing import Callable, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

Objective = Callable[[NDArray[np.float64]], float]
Gradient = Callable[[NDArray[np.float64]], NDArray[np.float64]]


class DRTMethod(str, Enum):
    """Which part of the impedance spectrum is fitted."""
    IM = 'im'
    RE = 're'
    RE_IM = 're_im'


def parse_method(method: Union[str, DRTMethod]) -> DRTMethod:
    """
    Convert a method name to DRTMethod.

    Raises
    ------
    InvalidInputError
        For anything other than 'im', 're' or 're_im'
    """
    if isinstance(method, DRTMethod):
        return method
    try:
        return DRTMethod(method)
    except ValueError:
        valid = ', '.join(repr(m.value) for m in DRTMethod)
        raise InvalidInputError(
            f"objective selection: unknown method {method!r} (expected one of {valid})"
        ) from None


def _check_lambda(lam: float) -> None:
    if not np.isfinite(lam) or lam < 0:
        raise InvalidInputError(f"objective: lambda must be >= 0, got {lam}")


def objective(Z_model: NDArray[np.float64], target: NDArray[np.float64],
              weights: NDArray[np.float64], lam: float) -> float:
    """Single-part objective ||Z_model w - target||^2 + lam ||w||^2."""
    residual = Z_model @ weights - target
    return float(residual @ residual + lam * (weights @ weights))


def objective_gradient(Z_model: NDArray[np.float64], target: NDArray[np.float64],
                       weights: NDArray[np.float64], lam: float) -> NDArray[np.float64]:
    """Gradient of `objective` with respect to the weights."""
    residual = Z_model @ weights - target
    return 2.0 * (Z_model.T @ residual) + 2.0 * lam * weights


def joint_objective(Z_imag: NDArray[np.float64], imag_target: NDArray[np.float64],
                    Z_real: NDArray[np.float64], real_target: NDArray[np.float64],
                    weights: NDArray[np.float64], lam: float) -> float:
    """
    Joint objective over real and imaginary parts.

    The regularization term is added once, not once per part.
    """
    r_im = Z_imag @ weights - imag_target
    r_re = Z_real @ weights - real_target
    return float(r_im @ r_im + r_re @ r_re + lam * (weights @ weights))


def joint_objective_gradient(Z_imag: NDArray[np.float64], imag_target: NDArray[np.float64],
                             Z_real: NDArray[np.float64], real_target: NDArray[np.float64],
                             weights: NDArray[np.float64], lam: float) -> NDArray[np.float64]:
    """Gradient of `joint_objective` with respect to the weights."""
    r_im = Z_imag @ weights - imag_target
    r_re = Z_real @ weights - real_target
    return 2.0 * (Z_imag.T @ r_im + Z_real.T @ r_re) + 2.0 * lam * weights


def build_objective(
    method: Union[str, DRTMethod],
    A_re: NDArray[np.float64],
    A_im: NDArray[np.float64],
    Z: NDArray[np.complex128],
    lam: float
) -> Tuple[Objective, Gradient]:
    """
    Build objective and gradient closures for the selected method.

    Parameters
    ----------
    method : str or DRTMethod
        'im' (fit -Z''), 're' (fit Z') or 're_im' (fit both)
    A_re, A_im : ndarray
        Forward matrices (A_im maps to -Z'')
    Z : ndarray of complex
        Measured impedance
    lam : float
        Regularization parameter >= 0

    Returns
    -------
    fun, jac : callable
        J(w) and its gradient

    Raises
    ------
    InvalidInputError
        For an unknown method or negative lambda
    """
    method = parse_method(method)
    _check_lambda(lam)

    real_target = np.ascontiguousarray(Z.real, dtype=np.float64)
    imag_target = -np.ascontiguousarray(Z.imag, dtype=np.float64)

    if method is DRTMethod.RE_IM:
        def fun(w):
            return joint_objective(A_im, imag_target, A_re, real_target, w, lam)

        def jac(w):
            return joint_objective_gradient(A_im, imag_target, A_re, real_target, w, lam)
    elif method is DRTMethod.IM:
        def fun(w):
            return objective(A_im, imag_target, w, lam)

        def jac(w):
            return objective_gradient(A_im, imag_target, w, lam)
    elif method is DRTMethod.RE:
        def fun(w):
            return objective(A_re, real_target, w, lam)

        def jac(w):
            return objective_gradient(A_re, real_target, w, lam)
    else:
        raise InvalidInputError(f"objective selection: unhandled method {method!r}")

    logger.debug(f"Objective: method={method.value}, lambda={lam:g}")
    return fun, jac
