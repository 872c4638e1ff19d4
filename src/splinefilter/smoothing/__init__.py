"""
Smoothing of sampled signals on top of the spline core.

Main Classes
------------
SplineSmoother : Orchestrates domain setup, fitting and assessment
SmoothingResult : Container for the fitted curve and its statistics
SmoothingMetrics : Residual statistics

Main Functions
--------------
smooth_csv : Convenience function for one-line smoothing of a CSV file
load_samples_csv : Read (x, y) samples from CSV

Examples
--------
>>> from splinefilter.smoothing import SplineSmoother
>>> from splinefilter import SplineConfig
>>> result = SplineSmoother(SplineConfig(wavelength=5.0)).smooth(x, y)
>>> result.save_all("output/")
"""

from .data_loader import load_samples_csv
from .smoother import SmoothingResult, SplineSmoother, smooth_csv
from .validation import SmoothingMetrics, assess_fit

__all__ = [
    "SplineSmoother",
    "SmoothingResult",
    "SmoothingMetrics",
    "smooth_csv",
    "load_samples_csv",
    "assess_fit",
]
