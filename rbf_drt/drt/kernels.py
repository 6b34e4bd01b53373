"""
Radial basis function kernels for DRT discretization.

Each kernel provides:
- pointwise evaluation k(u, v) (symmetric, k(u, u) = 1, non-negative)
- the half width at half maximum, used for shape-factor calibration
- the real and imaginary impedance transforms used to build the
  forward matrices

The transforms integrate the Debye (RC) response against the kernel
centred at a basis relaxation time tau_n, with x = ln(tau / tau_n) and
ratio = f_m / f_n:

    re(eps, ratio) =  integral  k(eps*x, 0) / (1 + (2*pi*ratio)^2 * e^(2x)) dx
    im(eps, ratio) = -integral  k(eps*x, 0) * (2*pi*ratio) * e^x
                                / (1 + (2*pi*ratio)^2 * e^(2x)) dx

The default implementation integrates numerically (scipy.integrate.quad);
subclasses may override either transform with a closed form.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Type, Union

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import quad
from scipy.optimize import brentq
from scipy.special import expit

from .config import QUAD_RTOL
from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

ArrayLike = Union[float, NDArray[np.float64]]


# =============================================================================
# Debye response in log-tau coordinates
# =============================================================================

def _debye_real(y: float) -> float:
    """1 / (1 + e^(2y)), overflow-free."""
    return float(expit(-2.0 * y))


def _debye_imag(y: float) -> float:
    """e^y / (1 + e^(2y)) = 1 / (2 cosh y), overflow-free."""
    e = np.exp(-abs(y))
    return float(e / (1.0 + e * e))


# =============================================================================
# Base Class
# =============================================================================

class RBFKernel(ABC):
    """
    Abstract radial basis function kernel.

    Subclasses implement `profile(d)`, the kernel value as a function of
    the distance d = |u - v| >= 0, with profile(0) = 1.
    """

    name = 'rbf'

    @abstractmethod
    def profile(self, d: ArrayLike) -> ArrayLike:
        """Kernel value at distance d >= 0."""

    def __call__(self, u: ArrayLike, v: ArrayLike) -> ArrayLike:
        return self.profile(np.abs(np.asarray(u, dtype=float) - np.asarray(v, dtype=float)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def half_width(self) -> float:
        """
        Distance x > 0 at which k(x, 0) = 0.5.

        Solved with Brent's method on an expanding bracket.
        """
        upper = 1.0
        while self.profile(upper) >= 0.5:
            upper *= 2.0
            if upper > 1e6:
                raise InvalidInputError(
                    f"{self!r} never drops to half maximum"
                )
        return float(brentq(lambda x: self.profile(x) - 0.5, 0.0, upper))

    def real_transform(self, epsilon: float, ratio: float) -> float:
        """Contribution of one basis function to Z' at frequency ratio f_m / f_n."""
        log_a = np.log(2 * np.pi * ratio)

        def integrand(x):
            return _debye_real(x + log_a) * self.profile(abs(epsilon * x))

        value, _ = quad(integrand, -np.inf, np.inf, epsrel=QUAD_RTOL)
        return value

    def imag_transform(self, epsilon: float, ratio: float) -> float:
        """Contribution of one basis function to Z'' at frequency ratio f_m / f_n."""
        log_a = np.log(2 * np.pi * ratio)

        def integrand(x):
            return -_debye_imag(x + log_a) * self.profile(abs(epsilon * x))

        value, _ = quad(integrand, -np.inf, np.inf, epsrel=QUAD_RTOL)
        return value


# =============================================================================
# Concrete Kernels
# =============================================================================

class SquaredExponentialKernel(RBFKernel):
    """Gaussian kernel k(d) = exp(-d^2 / 2)."""

    name = 'squared_exponential'

    def profile(self, d):
        return np.exp(-0.5 * np.square(d))

    def half_width(self) -> float:
        return float(np.sqrt(2 * np.log(2)))


class ExponentialKernel(RBFKernel):
    """C0 Matern kernel k(d) = exp(-d)."""

    name = 'exponential'

    def profile(self, d):
        return np.exp(-d)

    def half_width(self) -> float:
        return float(np.log(2))


class Matern32Kernel(RBFKernel):
    """C2 Matern kernel k(d) = (1 + sqrt(3) d) exp(-sqrt(3) d)."""

    name = 'matern32'

    def profile(self, d):
        s = np.sqrt(3) * d
        return (1 + s) * np.exp(-s)


class Matern52Kernel(RBFKernel):
    """C4 Matern kernel k(d) = (1 + sqrt(5) d + 5 d^2 / 3) exp(-sqrt(5) d)."""

    name = 'matern52'

    def profile(self, d):
        s = np.sqrt(5) * d
        return (1 + s + np.square(s) / 3) * np.exp(-s)


class InverseQuadraticKernel(RBFKernel):
    """Cauchy-type kernel k(d) = 1 / (1 + d^2)."""

    name = 'inverse_quadratic'

    def profile(self, d):
        return 1.0 / (1.0 + np.square(d))

    def half_width(self) -> float:
        return 1.0


KERNELS: Dict[str, Type[RBFKernel]] = {
    cls.name: cls for cls in (
        SquaredExponentialKernel,
        ExponentialKernel,
        Matern32Kernel,
        Matern52Kernel,
        InverseQuadraticKernel,
    )
}


def get_kernel(name: str) -> RBFKernel:
    """
    Return a new kernel instance by name.

    Parameters
    ----------
    name : str
        One of KERNELS keys (case-insensitive, '-' accepted for '_')

    Raises
    ------
    InvalidInputError
        If the name is unknown
    """
    key = name.lower().replace('-', '_')
    try:
        return KERNELS[key]()
    except KeyError:
        raise InvalidInputError(
            f"Unknown kernel '{name}'. Available: {', '.join(sorted(KERNELS))}"
        ) from None


KERNEL_INTERFACE = ('half_width', 'real_transform', 'imag_transform')


def kernel_name(kernel) -> str:
    """Registry name of a kernel, or its class name for user kernels without one."""
    return getattr(kernel, 'name', type(kernel).__name__)


def resolve_kernel(rbf_kernel: Union[None, str, RBFKernel]) -> RBFKernel:
    """
    Turn None / name / kernel object into a kernel (None -> squared exponential).

    Any object is accepted as a kernel when it is callable as k(u, v) and
    provides half_width(), real_transform(epsilon, ratio) and
    imag_transform(epsilon, ratio); subclassing RBFKernel is not required.

    Raises
    ------
    InvalidInputError
        If the name is unknown or the object lacks part of the interface
    """
    if rbf_kernel is None:
        return SquaredExponentialKernel()
    if isinstance(rbf_kernel, str):
        return get_kernel(rbf_kernel)

    missing = [attr for attr in KERNEL_INTERFACE
               if not callable(getattr(rbf_kernel, attr, None))]
    if not callable(rbf_kernel):
        missing.insert(0, '__call__')
    if missing:
        raise InvalidInputError(
            f"rbf_kernel must be a kernel object, a kernel name or None; "
            f"{type(rbf_kernel).__name__} lacks {', '.join(missing)}"
        )
    return rbf_kernel
