"""
Fitted smoothing spline.

A ``FittedSpline`` holds the coefficient vector solved for one y vector
against a shared, already factored ``Domain``. The domain must outlive the
spline; the spline never modifies it.
"""

import logging
from typing import Sequence

import numpy as np

from .banded import lu_solve_banded
from .basis import ArrayLike
from .domain import Domain
from .errors import FactorizationError, SolveError
from .matrices import build_rhs

logger = logging.getLogger(__name__)


class FittedSpline:
    """
    Smoothing spline through y data over a domain.

    Parameters
    ----------
    domain : Domain
        Factored domain built from the abscissas of ``y``.
    y : Sequence[float]
        Sample values aligned with ``domain.X``.

    Raises
    ------
    ValueError
        If ``y`` does not match the domain's samples.
    SolveError
        If solving for the coefficients fails.
    """

    def __init__(self, domain: Domain, y: Sequence[float]):
        Y = np.asarray(y, dtype=np.float64)
        if Y.shape != (domain.NX,):
            raise ValueError(f"y shape {Y.shape} inconsistent with {domain.NX} domain samples")
        if not np.all(np.isfinite(Y)):
            raise ValueError("y contains non-finite values")

        self.domain = domain
        self._curve = None

        B = build_rhs(domain.grid, domain.X, Y, domain.BC)

        try:
            A = lu_solve_banded(domain.lu, domain.piv, B)
        except FactorizationError as e:
            raise SolveError(f"Solving for spline coefficients failed: {e}") from e

        A.setflags(write=False)
        self._A = A

    def __repr__(self) -> str:
        """String representation of FittedSpline."""
        return f"FittedSpline(M={self.domain.M}, xmin={self.domain.xmin:.6g}, xmax={self.domain.xmax:.6g})"

    @property
    def coefficients(self) -> np.ndarray:
        """Copy of the coefficient vector, shape (M + 1,)."""
        return self._A.copy()

    def coefficient(self, n: int) -> float:
        """Coefficient of node ``n``, or 0.0 outside 0..M."""
        if 0 <= n <= self.domain.M:
            return float(self._A[n])
        return 0.0

    def _support(self, x: float) -> range:
        # Kernels reach two intervals; nodes 0, 1, M-1, M also carry the
        # exterior kernels, which reach three intervals beyond the domain.
        if not np.isfinite(x):
            raise ValueError(f"Cannot evaluate spline at non-finite x={x}")
        domain = self.domain
        m0 = min(max(int(np.floor((x - domain.xmin) / domain.DX)), 0), domain.M)
        return range(max(0, m0 - 2), min(domain.M, m0 + 3) + 1)

    def evaluate(self, x: ArrayLike) -> ArrayLike:
        """
        Value of the spline at ``x``.

        Parameters
        ----------
        x : float or np.ndarray
            Evaluation point(s).

        Returns
        -------
        float or np.ndarray
            Sum over nodes of coefficient times basis function.

        Raises
        ------
        ValueError
            If ``x`` is not finite.
        """
        domain = self.domain
        if np.ndim(x) == 0:
            y = 0.0
            for i in self._support(float(x)):
                y += self._A[i] * domain.basis(i, float(x))
            return float(y)

        x = np.asarray(x, dtype=np.float64)
        if not np.all(np.isfinite(x)):
            raise ValueError("x contains non-finite values")
        y = np.zeros_like(x)
        for i in range(domain.M + 1):
            y += self._A[i] * domain.basis(i, x)
        return y

    def slope(self, x: ArrayLike) -> ArrayLike:
        """First derivative of the spline at ``x``."""
        domain = self.domain
        if np.ndim(x) == 0:
            d = 0.0
            for i in self._support(float(x)):
                d += self._A[i] * domain.basis_derivative(i, float(x))
            return float(d)

        x = np.asarray(x, dtype=np.float64)
        if not np.all(np.isfinite(x)):
            raise ValueError("x contains non-finite values")
        d = np.zeros_like(x)
        for i in range(domain.M + 1):
            d += self._A[i] * domain.basis_derivative(i, x)
        return d

    def curve(self) -> np.ndarray:
        """
        The spline sampled at every node, ``evaluate(xmin + n * DX)``.

        Computed on first use and cached; the returned array is read-only and
        its length is the node count.
        """
        if self._curve is None:
            domain = self.domain
            curve = np.array([self.evaluate(domain.xmin + n * domain.DX) for n in range(domain.M + 1)])
            curve.setflags(write=False)
            self._curve = curve
        return self._curve


def fit(domain: Domain, y: Sequence[float]) -> FittedSpline:
    """
    Fit a smoothing spline to ``y`` over a factored domain.

    Parameters
    ----------
    domain : Domain
        Domain built from the abscissas of ``y``.
    y : Sequence[float]
        Sample values, same length as the domain's abscissas.

    Returns
    -------
    FittedSpline
        Spline with solved coefficients.

    Raises
    ------
    SolveError
        If the solve reports a singular factorization.
    """
    return FittedSpline(domain, y)
