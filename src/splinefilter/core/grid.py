"""
Node-grid sizing for the smoothing spline.

Given the sample abscissas and a cutoff wavelength, choose the number of
node intervals M and the node spacing DX. The search is a deterministic walk:
grow the interval count one step at a time until the wavelength is resolved
by enough intervals, then keep refining while the grid is still coarse
relative to the wavelength or the samples, backing off one step as soon as a
bound is crossed. Downstream matrix sizes depend on M, so the step sequence
is fixed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import SplineConfig
from .errors import SetupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSpec:
    """
    Node grid chosen for a sample domain.

    Attributes
    ----------
    xmin : float
        Smallest sample abscissa, location of node 0.
    xmax : float
        Largest sample abscissa, location of node M.
    M : int
        Number of node intervals (M + 1 nodes).
    DX : float
        Node spacing, (xmax - xmin) / M.
    """

    xmin: float
    xmax: float
    M: int
    DX: float

    @property
    def span(self) -> float:
        """Width of the sample domain."""
        return self.xmax - self.xmin


def _ratio(ni: int, span: float, wavelength: float, nx: int) -> Tuple[float, float, float]:
    """
    Spacing and resolution ratios for a candidate interval count.

    Returns
    -------
    deltax : float
        Node spacing for ``ni`` intervals.
    ratiof : float
        Node intervals per cutoff wavelength.
    ratiod : float
        Samples per node.
    """
    deltax = span / ni
    ratiof = wavelength / deltax
    ratiod = float(nx) / float(ni + 1)
    return deltax, ratiof, ratiod


def setup_grid(
    xs: Sequence[float], wavelength: float, config: Optional[SplineConfig] = None
) -> GridSpec:
    """
    Choose the node grid for a set of sample abscissas.

    Parameters
    ----------
    xs : Sequence[float]
        Sample abscissas, in any order.
    wavelength : float
        Cutoff wavelength, in the units of ``xs``.
    config : SplineConfig, optional
        Grid-search constants. Defaults to ``SplineConfig()``.

    Returns
    -------
    GridSpec
        The chosen interval count and spacing.

    Raises
    ------
    SetupError
        If the wavelength exceeds the sample span, or the samples are too
        sparse to support any candidate grid.
    """
    if config is None:
        config = SplineConfig()

    x = np.asarray(xs, dtype=np.float64)
    nx = x.size
    xmin = float(np.min(x))
    xmax = float(np.max(x))
    span = xmax - xmin

    if wavelength > span:
        raise SetupError(
            f"Cutoff wavelength {wavelength} exceeds the sample domain span {span} "
            f"([{xmin}, {xmax}])"
        )

    ni = config.initial_intervals
    deltax, ratiof, ratiod = _ratio(ni, span, wavelength, nx)
    if ratiod < 1.0:
        raise SetupError(f"{nx} samples cannot support {ni} node intervals")

    # Grow until the wavelength is resolved by the minimum number of intervals
    while ratiof < config.min_intervals_per_wavelength:
        ni += 1
        deltax, ratiof, ratiod = _ratio(ni, span, wavelength, nx)
        if ratiod < 1.0:
            raise SetupError(
                f"{nx} samples cannot resolve wavelength {wavelength} over span {span}: "
                f"ran out of samples at {ni} node intervals"
            )

    # Refine towards the target resolution while samples remain dense
    while True:
        ni += 1
        deltax, ratiof, ratiod = _ratio(ni, span, wavelength, nx)
        if ratiod < 1.0 or ratiof > config.max_intervals_per_wavelength:
            ni -= 1
            deltax, ratiof, ratiod = _ratio(ni, span, wavelength, nx)
            break
        if not (ratiof < config.target_intervals_per_wavelength or ratiod > config.max_points_per_node):
            break

    logger.info(f"Using M={ni} node intervals of length DX={deltax:.6g} ({ratiof:.2f} per wavelength)")

    return GridSpec(xmin=xmin, xmax=xmax, M=ni, DX=deltax)
