"""
Orchestrator for smoothing sampled signals.

This module provides the high-level SplineSmoother class that coordinates
data loading, domain setup, fitting and residual assessment, and the result
container that writes the smoothed curve and run metadata to disk.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import yaml

from ..core.config import SplineConfig
from ..core.domain import Domain, make_domain
from ..core.spline import FittedSpline, fit
from .data_loader import load_samples_csv
from .validation import SmoothingMetrics, assess_fit

logger = logging.getLogger(__name__)


@dataclass
class SmoothingResult:
    """
    Complete result of smoothing one sampled signal.

    Attributes
    ----------
    x : np.ndarray
        Sample abscissas.
    y : np.ndarray
        Sample values.
    spline : FittedSpline
        Fitted spline; its domain holds the grid and factorization.
    nodes : np.ndarray
        Node abscissas, shape (M + 1,).
    curve : np.ndarray
        Smoothed curve at the nodes, shape (M + 1,).
    metrics : SmoothingMetrics
        Residuals at the samples.
    smoothing_date : str
        ISO format timestamp of the run.
    """

    x: np.ndarray
    y: np.ndarray
    spline: FittedSpline
    nodes: np.ndarray
    curve: np.ndarray
    metrics: SmoothingMetrics
    smoothing_date: str

    @property
    def domain(self) -> Domain:
        """Domain the spline was fit over."""
        return self.spline.domain

    @property
    def smoothed(self) -> np.ndarray:
        """Smoothed curve evaluated at the sample abscissas."""
        return self.y - self.metrics.residuals

    def to_csv(self, output_dir: Path, filename: str = "smoothed_curve.csv") -> Path:
        """
        Save the smoothed curve at the nodes to CSV.

        Parameters
        ----------
        output_dir : Path
            Output directory.
        filename : str
            Output filename.

        Returns
        -------
        Path
            Path to written CSV file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        filepath = output_dir / filename

        df = pd.DataFrame({
            "node": np.arange(len(self.nodes)),
            "x": self.nodes,
            "y": self.curve,
            "coefficient": self.spline.coefficients,
        })
        df.to_csv(filepath, index=False)
        logger.info(f"Saved smoothed curve to {filepath}")

        return filepath

    def to_yaml(self, output_dir: Path, filename: str = "smoothing_metadata.yaml") -> Path:
        """
        Save grid, regularization and residual statistics to YAML.

        Parameters
        ----------
        output_dir : Path
            Output directory.
        filename : str
            Output filename.

        Returns
        -------
        Path
            Path to written YAML file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        filepath = output_dir / filename

        domain = self.domain
        metadata = {
            "smoothing_date": self.smoothing_date,
            "n_samples": int(domain.NX),
            "xmin": float(domain.xmin),
            "xmax": float(domain.xmax),
            "wavelength": float(domain.wavelength),
            "alpha": float(domain.alpha),
            "node_intervals": int(domain.M),
            "node_spacing": float(domain.DX),
        }
        metadata.update(self.metrics.to_dict())

        with open(filepath, "w") as f:
            yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved smoothing metadata to {filepath}")

        return filepath

    def save_all(self, output_dir: Path) -> Tuple[Path, Path]:
        """
        Save both curve CSV and metadata YAML.

        Returns
        -------
        csv_path : Path
            Path to curve CSV file.
        yaml_path : Path
            Path to metadata YAML file.
        """
        csv_path = self.to_csv(output_dir)
        yaml_path = self.to_yaml(output_dir)
        return csv_path, yaml_path


class SplineSmoother:
    """
    Main class for smoothing sampled signals with a cutoff wavelength.

    Parameters
    ----------
    config : SplineConfig, optional
        Configuration. If None, uses default SplineConfig.

    Examples
    --------
    >>> smoother = SplineSmoother(SplineConfig(wavelength=5.0))
    >>> result = smoother.smooth_from_csv("samples.csv")
    >>> result.save_all("output/")
    """

    def __init__(self, config: Optional[SplineConfig] = None):
        self.config = config if config is not None else SplineConfig()
        logger.info("Initialized SplineSmoother")
        logger.info(f"  Default wavelength: {self.config.wavelength}")

    def _resolve_wavelength(self, wavelength: Optional[float]) -> float:
        if wavelength is None:
            wavelength = self.config.wavelength
        if wavelength is None:
            raise ValueError("No cutoff wavelength given and none set in the configuration")
        return wavelength

    def build_domain(self, x: Sequence[float], wavelength: Optional[float] = None) -> Domain:
        """Set up and factor the domain for ``x``; reusable across y vectors."""
        return make_domain(x, self._resolve_wavelength(wavelength), self.config)

    def smooth(
        self,
        x: Sequence[float],
        y: Sequence[float],
        wavelength: Optional[float] = None,
        domain: Optional[Domain] = None,
    ) -> SmoothingResult:
        """
        Smooth one signal.

        Parameters
        ----------
        x : Sequence[float]
            Sample abscissas.
        y : Sequence[float]
            Sample values.
        wavelength : float, optional
            Cutoff wavelength; defaults to ``config.wavelength``.
        domain : Domain, optional
            Previously built domain for the same ``x``; skips setup.

        Returns
        -------
        SmoothingResult
            Fitted spline, node curve and residual statistics.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        if domain is None:
            domain = self.build_domain(x, wavelength)
        elif domain.NX != x.size or not np.array_equal(domain.X, x):
            raise ValueError("Domain was built from different abscissas")

        spline = fit(domain, y)
        metrics = assess_fit(y, spline.evaluate(x))

        return SmoothingResult(
            x=x,
            y=y,
            spline=spline,
            nodes=domain.nodes(),
            curve=spline.curve(),
            metrics=metrics,
            smoothing_date=datetime.now().isoformat(),
        )

    def smooth_from_csv(self, csv_path: Path, wavelength: Optional[float] = None) -> SmoothingResult:
        """
        Smooth the signal stored in a CSV file.

        Columns are taken from ``config.x_column`` and ``config.y_column``.
        """
        logger.info(f"Starting smoothing of {csv_path}")
        x, y = load_samples_csv(csv_path, self.config.x_column, self.config.y_column)
        return self.smooth(x, y, wavelength)


def smooth_csv(
    csv_path: Path,
    wavelength: Optional[float] = None,
    config: Optional[SplineConfig] = None,
    output_dir: Optional[Path] = None,
) -> SmoothingResult:
    """
    Convenience function to smooth a CSV signal with optional auto-save.

    Parameters
    ----------
    csv_path : Path
        Path to the samples CSV.
    wavelength : float, optional
        Cutoff wavelength; defaults to the configuration's.
    config : SplineConfig, optional
        Configuration. If None, uses default SplineConfig.
    output_dir : Path, optional
        If provided, saves results to this directory.

    Returns
    -------
    SmoothingResult
        Smoothing result.
    """
    smoother = SplineSmoother(config)
    result = smoother.smooth_from_csv(csv_path, wavelength)

    if output_dir is not None:
        result.save_all(output_dir)

    return result
