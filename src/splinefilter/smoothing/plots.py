"""
Visualization functions for smoothing diagnostics.
"""

import logging
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.gridspec import GridSpec

from .smoother import SmoothingResult

logger = logging.getLogger(__name__)


def plot_smoothing_result(
    result: SmoothingResult,
    ax: Optional[plt.Axes] = None,
    show_nodes: bool = True,
    samples_per_interval: int = 8,
) -> plt.Axes:
    """
    Plot the samples with the fitted curve on top.

    Parameters
    ----------
    result : SmoothingResult
        Smoothing result.
    ax : plt.Axes, optional
        Axes to plot on. If None, creates new figure.
    show_nodes : bool
        Mark the curve values at the nodes.
    samples_per_interval : int
        Evaluation points per node interval for the drawn curve.

    Returns
    -------
    plt.Axes
        Axes object with plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))

    domain = result.domain
    x_dense = np.linspace(domain.xmin, domain.xmax, domain.M * samples_per_interval + 1)

    ax.plot(result.x, result.y, '.', markersize=3, alpha=0.5, label="Samples", zorder=1)
    ax.plot(x_dense, result.spline.evaluate(x_dense), 'k-', linewidth=1.5, label="Smoothed", zorder=2)
    if show_nodes:
        ax.plot(result.nodes, result.curve, 'o', markersize=3, color='tab:red', label="Nodes", zorder=3)

    ax.set_xlabel("x", fontsize=12)
    ax.set_ylabel("y", fontsize=12)
    ax.set_title(
        f"Cutoff wavelength {domain.wavelength:.3g}: M={domain.M}, DX={domain.DX:.3g}, "
        f"rms={result.metrics.rms:.3g}",
        fontsize=11,
    )
    ax.legend(loc='best', fontsize=10)
    ax.grid(alpha=0.3)

    return ax


def plot_residuals(result: SmoothingResult, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """
    Plot residuals against the sample abscissas.

    Parameters
    ----------
    result : SmoothingResult
        Smoothing result.
    ax : plt.Axes, optional
        Axes to plot on. If None, creates new figure.

    Returns
    -------
    plt.Axes
        Axes object with plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 3))

    metrics = result.metrics
    ax.axhline(0.0, color='gray', linewidth=1)
    ax.plot(result.x, metrics.residuals, '.', markersize=3)
    ax.set_xlabel("x", fontsize=12)
    ax.set_ylabel("Residual", fontsize=12)
    ax.set_title(f"Mean={metrics.residual_mean:.2g}, Std={metrics.residual_std:.2g}", fontsize=11)
    ax.grid(alpha=0.3)

    return ax


def save_diagnostic_plot(result: SmoothingResult, filepath: Path, figsize: tuple = (10, 8)) -> Path:
    """
    Save the fit and its residuals as a two-panel figure.

    Parameters
    ----------
    result : SmoothingResult
        Smoothing result.
    filepath : Path
        Output image path.
    figsize : tuple
        Figure size (width, height) in inches.

    Returns
    -------
    Path
        Path to the saved figure.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=figsize)
    gs = GridSpec(2, 1, figure=fig, height_ratios=[3, 1], hspace=0.35)
    plot_smoothing_result(result, ax=fig.add_subplot(gs[0]))
    plot_residuals(result, ax=fig.add_subplot(gs[1]))

    fig.savefig(filepath, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Saved diagnostic plot to {filepath}")

    return filepath
