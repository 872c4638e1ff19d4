"""
Sample domain of a smoothing spline.

A ``Domain`` is built once from the sample abscissas and a cutoff wavelength.
It chooses the node grid, assembles the system matrix Q + P and factors it.
After construction it is effectively frozen: any number of y vectors sampled
at the same abscissas can be fit against it, each reusing the cached
factorization.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np
import scipy.sparse as sp

from .basis import BC_ZERO_FIRST_DERIVATIVE, ArrayLike, basis, basis_derivative, beta
from .config import SplineConfig
from .grid import GridSpec, setup_grid
from .matrices import BANDWIDTH, add_p, alpha, calculate_q, factor, to_sparse

logger = logging.getLogger(__name__)

# Q + P is printed at debug level below this many node intervals
_DUMP_MATRIX_BELOW = 30


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class Domain:
    """
    Node grid and factored normal equations for a set of sample abscissas.

    Attributes
    ----------
    xmin, xmax : float
        Bounds of the sample abscissas.
    M : int
        Number of node intervals (M + 1 nodes).
    DX : float
        Node spacing.
    wavelength : float
        Cutoff wavelength.
    alpha : float
        Regularization weight derived from the wavelength.
    K : int
        Derivative order of the roughness penalty (always 1).
    BC : int
        Boundary condition row (always zero first derivative).
    NX : int
        Number of samples.

    Raises
    ------
    ValueError
        If the abscissas or the wavelength are malformed.
    SetupError
        If the wavelength is incompatible with the samples.
    FactorizationError
        If the assembled system matrix is singular.
    """

    K = 1
    BC = BC_ZERO_FIRST_DERIVATIVE

    def __init__(self, x: Sequence[float], wavelength: float, config: Optional[SplineConfig] = None):
        X = np.array(x, dtype=np.float64, copy=True)
        if X.ndim != 1:
            raise ValueError(f"x must be one-dimensional, got shape {X.shape}")
        if X.size < 2:
            raise ValueError(f"Need at least 2 samples, got {X.size}")
        if not np.all(np.isfinite(X)):
            raise ValueError("x contains non-finite values")
        if not np.isfinite(wavelength) or wavelength <= 0:
            raise ValueError(f"wavelength must be positive and finite, got {wavelength}")

        self._X = _readonly(X)
        self.NX = X.size
        self.wavelength = float(wavelength)
        self._nodes = None

        # The grid search determines the number of nodes
        self._grid = setup_grid(self._X, self.wavelength, config)
        self.xmin = self._grid.xmin
        self.xmax = self._grid.xmax
        self.M = self._grid.M
        self.DX = self._grid.DX

        self.alpha = alpha(self.wavelength, self.K)
        logger.info(f"Alpha: {self.alpha:.6g}")

        logger.info("Calculating Q...")
        Q = calculate_q(self._grid, self.alpha, self.BC)

        logger.info("Calculating P...")
        add_p(Q, self._grid, self._X, self.BC)
        if self.M < _DUMP_MATRIX_BELOW:
            logger.debug(f"Array Q after addition of P:\n{np.array2string(Q, precision=3)}")
        self._Q = _readonly(Q)

        lu, piv = factor(self._Q)
        self._lu = _readonly(lu)
        self._piv = _readonly(piv)

    def __repr__(self) -> str:
        """String representation of Domain."""
        return (
            f"Domain(NX={self.NX}, xmin={self.xmin:.6g}, xmax={self.xmax:.6g}, "
            f"M={self.M}, DX={self.DX:.6g}, wavelength={self.wavelength:.6g})"
        )

    @property
    def grid(self) -> GridSpec:
        """Node grid."""
        return self._grid

    @property
    def X(self) -> np.ndarray:
        """Sample abscissas (read-only)."""
        return self._X

    @property
    def Q(self) -> np.ndarray:
        """System matrix, penalty plus data fit (read-only)."""
        return self._Q

    @property
    def lu(self) -> np.ndarray:
        """Combined banded LU factors of ``Q`` (read-only)."""
        return self._lu

    @property
    def piv(self) -> np.ndarray:
        """Row interchanges of the factorization (read-only)."""
        return self._piv

    def system_matrix(self, sparse: bool = False) -> Union[np.ndarray, sp.csr_matrix]:
        """
        System matrix Q + P, optionally as a banded CSR matrix.

        Parameters
        ----------
        sparse : bool
            Return a ``scipy.sparse.csr_matrix`` holding only the band.

        Returns
        -------
        np.ndarray or sp.csr_matrix
            The system matrix.
        """
        if sparse:
            return to_sparse(self._Q, BANDWIDTH)
        return self._Q

    def nodes(self) -> np.ndarray:
        """
        Node abscissas xmin + i * DX for i = 0..M.

        Computed on first use and cached; the array is read-only and its
        length is the node count.
        """
        if self._nodes is None:
            self._nodes = _readonly(self.xmin + np.arange(self.M + 1) * self.DX)
        return self._nodes

    def beta(self, m: int) -> float:
        """Boundary reflection weight of node ``m``."""
        return beta(self._grid, m, self.BC)

    def basis(self, m: int, x: ArrayLike) -> ArrayLike:
        """Boundary-constrained basis function of node ``m`` evaluated at ``x``."""
        return basis(self._grid, m, x, self.BC)

    def basis_derivative(self, m: int, x: ArrayLike) -> ArrayLike:
        """x-derivative of the basis function of node ``m`` at ``x``."""
        return basis_derivative(self._grid, m, x, self.BC)

    def apply(self, y: Sequence[float]) -> "FittedSpline":
        """
        Fit a spline to ``y`` sampled at this domain's abscissas.

        Equivalent to ``fit(self, y)``.
        """
        from .spline import fit

        return fit(self, y)


def make_domain(x: Sequence[float], wavelength: float, config: Optional[SplineConfig] = None) -> Domain:
    """
    Establish the node grid and factored system for a set of abscissas.

    Parameters
    ----------
    x : Sequence[float]
        Sample abscissas, in any order. The count is ``len(x)``.
    wavelength : float
        Cutoff wavelength. Must not exceed ``max(x) - min(x)``.
    config : SplineConfig, optional
        Grid-search constants.

    Returns
    -------
    Domain
        Ready for fitting.

    Raises
    ------
    SetupError
        If the wavelength exceeds the sample span or no grid fits the samples.
    FactorizationError
        If the system matrix is singular.
    """
    return Domain(x, wavelength, config)
