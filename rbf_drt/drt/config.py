"""
Configuration constants for RBF-DRT computation.

Default values of all run-time options plus the fixed numerical settings
of the pipeline. Library functions take the defaults as keyword
arguments, the CLI exposes them as flags.

References
----------
.. [1] T. H. Wan, M. Saccoccio, C. Chen, F. Ciucci, Electrochim. Acta 184
       (2015) 483-499, "Influence of the discretization methods on the
       distribution of relaxation times deconvolution"
.. [2] M. Saccoccio et al., Electrochim. Acta 147 (2014) 470-482
"""

# =============================================================================
# Pipeline Defaults
# =============================================================================

DEFAULT_METHOD = 'im'
"""
Which part of the impedance is fitted: 'im', 're' or 're_im'.

The imaginary part does not depend on R_inf, which makes 'im' the most
robust choice for data with an uncertain high-frequency intercept.
"""

DEFAULT_WIDTH_COEFF = 0.10
"""
RBF width coefficient.

The shape factor is epsilon = width_coeff * FWHM / d(ln tau), so smaller
values give wider basis functions and a smoother DRT [1].
"""

DEFAULT_LAMBDA = 1e-2
"""
Tikhonov (ridge) regularization parameter.

lambda = 0 turns the problem into plain least squares, which is unstable
for this ill-posed inversion.
"""

DEFAULT_PEAK_STRICTNESS = 0.01
"""
Minimum relative peak height (1% of the highest detected peak).

Peaks at or below this fraction are treated as numerical ripples.
"""

# =============================================================================
# Optimization
# =============================================================================

WEIGHT_INITIAL_VALUE = 0.05
"""Initial value of every weight (strictly inside the box)."""

WEIGHT_UPPER_BOUND = 1e8
"""Upper bound of every weight [Ohm]."""

OPTIMIZER_MAX_ITER = 15000
"""Iteration budget of the L-BFGS-B solver."""

STATIONARITY_TOLERANCE = 1e-4
"""
Relative projected-gradient norm accepted as a stationary point.

Used only when L-BFGS-B stops without reporting convergence, e.g. on a
line search that can no longer make progress at machine precision.
"""

# =============================================================================
# Grids and Matrices
# =============================================================================

MIN_FREQUENCIES = 3
"""Minimum number of measured frequencies."""

OUTPUT_POINTS_PER_INPUT = 10
"""Output grid has this many points per measured frequency."""

GRID_EXTENSION_DECADES = 1
"""Output tau grid extends this many decades beyond the measured range."""

QUAD_RTOL = 1e-9
"""Relative tolerance of the numerical kernel transforms."""

TOEPLITZ_RTOL = 1e-6
"""Relative tolerance on d(ln f) for treating a frequency set as log-uniform."""
