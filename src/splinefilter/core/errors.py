"""
Exception types raised by the spline fitting core.
"""


class SplineError(Exception):
    """Base class for failures of the smoothing spline engine."""


class SetupError(SplineError):
    """
    The sample domain cannot support the requested cutoff wavelength.

    Raised when the wavelength exceeds the span of the sample abscissas, or
    when the node-grid search runs out of samples before finding a valid
    interval count.
    """


class FactorizationError(SplineError):
    """A zero pivot was met while factoring or solving the banded system."""


class SolveError(FactorizationError):
    """Solving for spline coefficients against a factored domain failed."""
