"""
Box-constrained minimization of the DRT objective.

Thin adapter over scipy's L-BFGS-B (projected quasi-Newton with an
active set), which is deterministic for a fixed starting point.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize, approx_fprime

from .config import (
    WEIGHT_INITIAL_VALUE,
    WEIGHT_UPPER_BOUND,
    OPTIMIZER_MAX_ITER,
    STATIONARITY_TOLERANCE,
)
from ..exceptions import ConvergenceError, InvalidInputError, NumericalError

logger = logging.getLogger(__name__)

# L-BFGS-B status codes
STATUS_CONVERGED = 0
STATUS_BUDGET_EXCEEDED = 1


@dataclass
class OptimizationResult:
    """Result of the box-constrained minimization."""
    x: NDArray[np.float64]
    fun: float
    n_iter: int
    n_fev: int
    message: str


def initial_guess(n: int, value: float = WEIGHT_INITIAL_VALUE) -> NDArray[np.float64]:
    """Starting point with every weight strictly inside the box."""
    return np.full(n, value, dtype=np.float64)


def box_bounds(n: int, upper: float = WEIGHT_UPPER_BOUND) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Lower (zeros) and upper bounds for n non-negative weights."""
    return np.zeros(n), np.full(n, upper, dtype=np.float64)


def _projected_gradient(x: NDArray, g: NDArray, lower: NDArray, upper: NDArray) -> NDArray:
    """Gradient with components pointing out of the box zeroed."""
    pg = g.copy()
    pg[(x <= lower) & (g > 0)] = 0.0
    pg[(x >= upper) & (g < 0)] = 0.0
    return pg


def minimize_box_constrained(
    fun: Callable[[NDArray[np.float64]], float],
    x0: NDArray[np.float64],
    lower: NDArray[np.float64],
    upper: NDArray[np.float64],
    jac: Optional[Callable[[NDArray[np.float64]], NDArray[np.float64]]] = None,
    max_iter: int = OPTIMIZER_MAX_ITER
) -> OptimizationResult:
    """
    Minimize fun(x) subject to lower <= x <= upper.

    Parameters
    ----------
    fun : callable
        Scalar objective
    x0 : ndarray
        Initial guess (inside the box)
    lower, upper : ndarray
        Per-element bounds
    jac : callable, optional
        Gradient of fun. Without it, finite differences are used.
    max_iter : int
        Iteration and function-evaluation budget

    Returns
    -------
    OptimizationResult

    Raises
    ------
    ConvergenceError
        Budget exhausted, or abnormal stop away from a stationary point.
        `best_iterate` holds the last point reached.
    NumericalError
        Objective is not finite at the returned point
    """
    x0 = np.asarray(x0, dtype=np.float64)
    lower = np.asarray(lower, dtype=np.float64)
    upper = np.asarray(upper, dtype=np.float64)

    if not (x0.shape == lower.shape == upper.shape):
        raise InvalidInputError(
            f"optimizer: shape mismatch x0={x0.shape}, lower={lower.shape}, upper={upper.shape}"
        )
    if np.any(lower > upper):
        raise InvalidInputError("optimizer: lower bound exceeds upper bound")

    f0 = fun(x0)
    if not np.isfinite(f0):
        raise NumericalError("optimizer: objective is not finite at the initial guess")

    result = minimize(
        fun, x0,
        jac=jac if jac is not None else '2-point',
        method='L-BFGS-B',
        bounds=list(zip(lower, upper)),
        options={'maxiter': max_iter, 'maxfun': max_iter, 'ftol': 1e-12, 'gtol': 1e-8}
    )

    x = np.clip(result.x, lower, upper)
    message = str(result.message)

    if not np.isfinite(result.fun) or np.any(~np.isfinite(x)):
        raise NumericalError(f"optimizer: non-finite result ({message})")

    if result.status == STATUS_BUDGET_EXCEEDED:
        raise ConvergenceError(
            f"optimizer: no convergence within {max_iter} iterations ({message})",
            best_iterate=x
        )

    if result.status != STATUS_CONVERGED:
        # Abnormal line-search stops are accepted only at a stationary point
        grad = jac if jac is not None else (lambda w: approx_fprime(w, fun, 1e-8))
        g0 = np.max(np.abs(grad(x0)))
        pg = np.max(np.abs(_projected_gradient(x, grad(x), lower, upper)))
        if pg > STATIONARITY_TOLERANCE * max(1.0, g0):
            raise ConvergenceError(
                f"optimizer: stopped away from a stationary point "
                f"(projected gradient {pg:.3g}; {message})",
                best_iterate=x
            )
        logger.debug(f"Optimizer stopped early at a stationary point: {message}")

    logger.debug(f"Optimizer: {result.nit} iterations, {result.nfev} evaluations, "
                 f"J = {result.fun:.6g}")

    return OptimizationResult(
        x=x,
        fun=float(result.fun),
        n_iter=int(result.nit),
        n_fev=int(result.nfev),
        message=message
    )
