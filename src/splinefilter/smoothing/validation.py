"""
Quality assessment of a smoothing fit.

The residuals between the samples and the fitted curve measure how much of
the input variation was removed. For a well-chosen cutoff wavelength they
should look like noise.
"""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class SmoothingMetrics:
    """
    Container for smoothing fit statistics.

    Attributes
    ----------
    residuals : np.ndarray
        Raw residuals (y - f(x)), shape (NX,).
    rms : float
        Root mean square of the residuals.
    residual_mean : float
        Mean of the residuals.
    residual_std : float
        Standard deviation of the residuals.
    max_residual : float
        Maximum absolute residual.
    """

    residuals: np.ndarray
    rms: float
    residual_mean: float
    residual_std: float
    max_residual: float

    def to_dict(self) -> dict:
        """Scalar statistics, for serialization."""
        return {
            "rms": self.rms,
            "residual_mean": self.residual_mean,
            "residual_std": self.residual_std,
            "max_residual": self.max_residual,
        }


def compute_residuals(y: np.ndarray, y_model: np.ndarray) -> np.ndarray:
    """
    Compute raw residuals between samples and fitted curve.

    Raises
    ------
    ValueError
        If the shapes differ.
    """
    if y.shape != y_model.shape:
        raise ValueError(f"y shape {y.shape} inconsistent with model shape {y_model.shape}")
    return y - y_model


def assess_fit(y: np.ndarray, y_model: np.ndarray) -> SmoothingMetrics:
    """
    Summarize the residuals of a fit.

    Parameters
    ----------
    y : np.ndarray
        Sample values, shape (NX,).
    y_model : np.ndarray
        Fitted curve evaluated at the sample abscissas, shape (NX,).

    Returns
    -------
    SmoothingMetrics
        Residual statistics.
    """
    residuals = compute_residuals(np.asarray(y, dtype=np.float64), np.asarray(y_model, dtype=np.float64))

    metrics = SmoothingMetrics(
        residuals=residuals,
        rms=float(np.sqrt(np.mean(residuals**2))),
        residual_mean=float(np.mean(residuals)),
        residual_std=float(np.std(residuals)),
        max_residual=float(np.max(np.abs(residuals))),
    )

    logger.info(f"Fit residuals: rms={metrics.rms:.4g}, max={metrics.max_residual:.4g}")

    return metrics
