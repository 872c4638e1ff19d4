"""
splinefilter: smoothing cubic B-splines with a cutoff wavelength.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("splinefilter")
except PackageNotFoundError:
    # Package is not installed, use fallback (for development)
    __version__ = "0.1.0"  # Sync with pyproject.toml manually for development

from .core.config import SplineConfig
from .core.domain import Domain, make_domain
from .core.errors import FactorizationError, SetupError, SolveError, SplineError
from .core.spline import FittedSpline, fit
from .smoothing.smoother import SmoothingResult, SplineSmoother

__all__ = [
    "SplineConfig",
    "Domain",
    "make_domain",
    "FittedSpline",
    "fit",
    "SplineSmoother",
    "SmoothingResult",
    "SplineError",
    "SetupError",
    "FactorizationError",
    "SolveError",
]
