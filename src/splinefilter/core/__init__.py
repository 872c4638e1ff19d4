"""
Numerical core of the smoothing spline.

Building a ``Domain`` chooses the node grid for the sample abscissas and
factors the banded normal equations once; ``fit`` then solves for the
coefficients of any y vector sampled at those abscissas.
"""

from .banded import lu_factor_banded, lu_solve_banded
from .basis import BOUNDARY_CONDITIONS, basis, basis_derivative, beta
from .config import SplineConfig, export_default_spline_config
from .domain import Domain, make_domain
from .errors import FactorizationError, SetupError, SolveError, SplineError
from .grid import GridSpec, setup_grid
from .matrices import alpha, calculate_q, calculate_p, q_delta
from .spline import FittedSpline, fit

__all__ = [
    # Configuration
    "SplineConfig",
    "export_default_spline_config",
    # Domain and fitting
    "Domain",
    "make_domain",
    "FittedSpline",
    "fit",
    # Building blocks
    "GridSpec",
    "setup_grid",
    "BOUNDARY_CONDITIONS",
    "basis",
    "basis_derivative",
    "beta",
    "alpha",
    "q_delta",
    "calculate_q",
    "calculate_p",
    "lu_factor_banded",
    "lu_solve_banded",
    # Errors
    "SplineError",
    "SetupError",
    "FactorizationError",
    "SolveError",
]
