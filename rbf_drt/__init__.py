"""
RBF-DRT
=======

Distribution of Relaxation Times (DRT) from electrochemical impedance
spectroscopy data, using radial basis function discretization with
Tikhonov regularization and non-negative weights.

Modules:
- drt: Kernels, forward matrices, optimization, interpolation, peaks
- io: CSV data loading and synthetic data generation
- visualization: DRT plots
- cli: Command-line interface components

Version is imported from rbf_drt.version (single source of truth).
"""

from .version import __version__, __version_info__, get_version_string

# Exceptions
from .exceptions import (
    DRTError,
    InvalidInputError,
    ConvergenceError,
    NumericalError,
)

# DRT Analysis
from .drt import (
    compute_DRT,
    run_drt,
    compute_drt_batch,
    DRTResult,
    DRTMethod,
    RBFKernel,
    SquaredExponentialKernel,
    get_kernel,
    calculate_shape_factor,
    build_real_matrix,
    build_imag_matrix,
    objective,
    joint_objective,
    drt_interpolation,
    get_peak_inds,
)

# I/O
from .io import (
    load_csv_data,
    generate_voigt_data,
)

# Visualization
from .visualization import plot_drt

__all__ = [
    # Version info
    '__version__',
    '__version_info__',
    'get_version_string',
    # Exceptions
    'DRTError',
    'InvalidInputError',
    'ConvergenceError',
    'NumericalError',
    # DRT
    'compute_DRT',
    'run_drt',
    'compute_drt_batch',
    'DRTResult',
    'DRTMethod',
    'RBFKernel',
    'SquaredExponentialKernel',
    'get_kernel',
    'calculate_shape_factor',
    'build_real_matrix',
    'build_imag_matrix',
    'objective',
    'joint_objective',
    'drt_interpolation',
    'get_peak_inds',
    # I/O
    'load_csv_data',
    'generate_voigt_data',
    # Visualization
    'plot_drt',
]
