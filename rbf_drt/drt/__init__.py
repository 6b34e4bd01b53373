"""
DRT (Distribution of Relaxation Times) analysis module.
"""

from .core import (
    compute_DRT,
    run_drt,
    compute_drt_batch,
    DRTResult,
)
from .kernels import (
    RBFKernel,
    SquaredExponentialKernel,
    ExponentialKernel,
    Matern32Kernel,
    Matern52Kernel,
    InverseQuadraticKernel,
    KERNELS,
    get_kernel,
)
from .shape_factor import calculate_shape_factor
from .matrices import WeightLayout, build_real_matrix, build_imag_matrix
from .objectives import (
    DRTMethod,
    objective,
    joint_objective,
    objective_gradient,
    joint_objective_gradient,
    build_objective,
)
from .optimizer import minimize_box_constrained, OptimizationResult
from .interpolation import output_frequencies, drt_interpolation
from .peaks import get_peak_inds, estimate_peak_resistance

__all__ = [
    # Main functions
    'compute_DRT',
    'run_drt',
    'compute_drt_batch',
    'DRTResult',
    # Kernels
    'RBFKernel',
    'SquaredExponentialKernel',
    'ExponentialKernel',
    'Matern32Kernel',
    'Matern52Kernel',
    'InverseQuadraticKernel',
    'KERNELS',
    'get_kernel',
    # Pipeline stages
    'calculate_shape_factor',
    'WeightLayout',
    'build_real_matrix',
    'build_imag_matrix',
    'DRTMethod',
    'objective',
    'joint_objective',
    'objective_gradient',
    'joint_objective_gradient',
    'build_objective',
    'minimize_box_constrained',
    'OptimizationResult',
    'output_frequencies',
    'drt_interpolation',
    'get_peak_inds',
    'estimate_peak_resistance',
]
