"""
Assembly of the smoothing spline normal equations.

This module builds the matrices of the linear system (Q + P) a = b whose
solution a holds the spline coefficients:
- Q: Roughness penalty, the integral of products of basis first derivatives
  over the node domain, scaled by DX * alpha
- P: Data-fit matrix, products of basis functions summed over the samples
- b: Right-hand side, basis functions weighted by the sample values

Every matrix entry couples two basis functions, so entries more than three
nodes apart vanish and Q + P has bandwidth 3 by construction. The penalty is
hardcoded for the first-derivative constraint (K = 1).
"""

import logging
import math
from typing import Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from .banded import lu_factor_banded
from .basis import BC_ZERO_FIRST_DERIVATIVE, basis, beta, reflected_node
from .grid import GridSpec

logger = logging.getLogger(__name__)

# Nonzero diagonals on each side of the main diagonal
BANDWIDTH = 3

# Products of the first derivatives of two normalized kernels d nodes apart
# (row d, 0 <= d <= 3), integrated over each unit interval of the first
# kernel's support, -2..-1, -1..0, 0..1, 1..2 (columns).
Q_PARTS = (
    (0.11250, 0.63750, 0.63750, 0.11250),
    (0.00000, 0.13125, -0.54375, 0.13125),
    (0.00000, 0.00000, -0.22500, -0.22500),
    (0.00000, 0.00000, 0.00000, -0.01875),
)

# Row sums of Q_PARTS: the full integral for nodes away from the edges
Q_INTERIOR = (1.5, -0.28125, -0.450, -0.01875)


def alpha(wavelength: float, K: int = 1) -> float:
    """
    Regularization weight for a cutoff wavelength.

    Parameters
    ----------
    wavelength : float
        Cutoff wavelength.
    K : int
        Order of the derivative in the roughness penalty: 1, 2 or 3.

    Returns
    -------
    float
        (wavelength / 2 pi) ** (2 K).
    """
    if K not in (1, 2, 3):
        raise ValueError(f"Derivative order K must be 1, 2 or 3, got {K}")

    a = wavelength / (2.0 * math.pi)
    a *= a
    if K == 2:
        a = a * a
    elif K == 3:
        a = a * a * a
    return a


def q_delta(grid: GridSpec, alpha_value: float, m1: int, m2: int) -> float:
    """
    Penalty integral between the kernels of nodes ``m1`` and ``m2``.

    The integral is restricted to the node domain, intervals 0..M-1, so
    kernels near the edges contribute less than ``Q_INTERIOR``. Either index
    may be a virtual exterior node (-1 or M + 1).

    Returns
    -------
    float
        Integral scaled by DX * alpha; 0 for nodes more than 3 apart.
    """
    if m1 > m2:
        m1, m2 = m2, m1

    d = m2 - m1
    if d > BANDWIDTH:
        return 0.0

    q = 0.0
    for m in range(max(m1 - 2, 0), min(m1 + 2, grid.M)):
        q += Q_PARTS[d][m - m1 + 2]
    return q * grid.DX * alpha_value


def _boundary_correction(
    grid: GridSpec, alpha_value: float, i: int, j: int, bc: int
) -> float:
    """Extra penalty between nodes i and j from their reflected exterior kernels."""
    bi = beta(grid, i, bc)
    bj = beta(grid, j, bc)

    q = 0.0
    if bj != 0.0:
        q += bj * q_delta(grid, alpha_value, i, reflected_node(grid, j))
    if bi != 0.0:
        q += bi * q_delta(grid, alpha_value, reflected_node(grid, i), j)
    if bi != 0.0 and bj != 0.0:
        q += bi * bj * q_delta(grid, alpha_value, reflected_node(grid, i), reflected_node(grid, j))
    return q


def calculate_q(grid: GridSpec, alpha_value: float, bc: int = BC_ZERO_FIRST_DERIVATIVE) -> np.ndarray:
    """
    Build the roughness penalty matrix Q.

    Parameters
    ----------
    grid : GridSpec
        Node grid, M + 1 nodes.
    alpha_value : float
        Regularization weight from :func:`alpha`.
    bc : int
        Boundary condition row used for the corner corrections.

    Returns
    -------
    np.ndarray
        Symmetric matrix, shape (M + 1, M + 1), bandwidth 3.
    """
    M = grid.M
    Q = np.zeros((M + 1, M + 1), dtype=np.float64)

    # Raw kernel integrals without the boundary constraints
    for i in range(M + 1):
        Q[i, i] = q_delta(grid, alpha_value, i, i)
        for j in range(1, BANDWIDTH + 1):
            if i + j > M:
                break
            Q[i, i + j] = Q[i + j, i] = q_delta(grid, alpha_value, i, i + j)

    # Boundary constraints on the upper-left and lower-right corner blocks.
    # Both corners come from the same integral, mirrored about the domain.
    for block in (range(0, BANDWIDTH + 1), range(M - BANDWIDTH, M + 1)):
        for i in block:
            for j in block:
                if j < i:
                    continue
                correction = _boundary_correction(grid, alpha_value, i, j, bc)
                if correction == 0.0:
                    continue
                Q[i, j] += correction
                Q[j, i] = Q[i, j]

    logger.debug(f"Q diagonal (interior): {Q_INTERIOR[0] * grid.DX * alpha_value:.4g}")
    return Q


def calculate_p(
    grid: GridSpec, xs: Sequence[float], bc: int = BC_ZERO_FIRST_DERIVATIVE
) -> np.ndarray:
    """
    Build the data-fit matrix P from the sample abscissas.

    For each sample only the basis functions of the five nodes around its
    interval can be nonzero, so only those products are accumulated.

    Parameters
    ----------
    grid : GridSpec
        Node grid.
    xs : Sequence[float]
        Sample abscissas.
    bc : int
        Boundary condition row.

    Returns
    -------
    np.ndarray
        Symmetric matrix, shape (M + 1, M + 1), bandwidth 3.
    """
    M = grid.M
    DX = grid.DX
    P = np.zeros((M + 1, M + 1), dtype=np.float64)

    for x in np.asarray(xs, dtype=np.float64):
        x = float(x)
        m0 = min(max(int((x - grid.xmin) / DX), 0), M)
        nodes = range(max(0, m0 - 2), min(M, m0 + 2) + 1)
        values = [basis(grid, m, x, bc) for m in nodes]

        for a, m in enumerate(nodes):
            pm = values[a]
            P[m, m] += pm * pm * DX
            for b in range(a + 1, len(values)):
                n = nodes[b]
                if n - m > BANDWIDTH:
                    break
                s = pm * values[b] * DX
                P[m, n] += s
                P[n, m] += s

    return P


def add_p(
    Q: np.ndarray, grid: GridSpec, xs: Sequence[float], bc: int = BC_ZERO_FIRST_DERIVATIVE
) -> np.ndarray:
    """
    Add the data-fit matrix for ``xs`` into ``Q`` in place.

    Returns
    -------
    np.ndarray
        ``Q`` after the addition, now the full system matrix.
    """
    Q += calculate_p(grid, xs, bc)
    return Q


def build_rhs(
    grid: GridSpec, xs: np.ndarray, ys: np.ndarray, bc: int = BC_ZERO_FIRST_DERIVATIVE
) -> np.ndarray:
    """
    Right-hand side b[m] = DX * sum_j y[j] * basis(m, x[j]).

    Parameters
    ----------
    grid : GridSpec
        Node grid.
    xs : np.ndarray
        Sample abscissas, shape (NX,).
    ys : np.ndarray
        Sample values, shape (NX,).
    bc : int
        Boundary condition row.

    Returns
    -------
    np.ndarray
        Vector of shape (M + 1,).
    """
    B = np.empty(grid.M + 1, dtype=np.float64)
    for m in range(grid.M + 1):
        B[m] = np.dot(ys, basis(grid, m, xs, bc)) * grid.DX
    return B


def factor(Q: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Banded LU factorization of a copy of the system matrix.

    Returns
    -------
    lu : np.ndarray
        Combined L/U factors.
    piv : np.ndarray
        Row interchanges.

    Raises
    ------
    FactorizationError
        If the system matrix is singular.
    """
    logger.info(f"Beginning LU factoring of {Q.shape[0]}x{Q.shape[1]} system matrix...")
    lu, piv = lu_factor_banded(np.array(Q, dtype=np.float64, copy=True), BANDWIDTH)
    logger.info("Done.")
    return lu, piv


def to_sparse(matrix: np.ndarray, bands: int = BANDWIDTH) -> sp.csr_matrix:
    """
    Keep the diagonals within ``bands`` of the main diagonal, in CSR format.

    Parameters
    ----------
    matrix : np.ndarray
        Square matrix.
    bands : int
        Diagonals kept on each side.

    Returns
    -------
    sp.csr_matrix
        Banded copy of ``matrix``.
    """
    n = matrix.shape[0]
    offsets = [k for k in range(-bands, bands + 1) if abs(k) < n]
    diagonals = [np.diagonal(matrix, k) for k in offsets]
    banded = sp.diags(diagonals, offsets, shape=matrix.shape, format="csr")

    n_nonzero = banded.nnz
    sparsity = 1.0 - (n_nonzero / float(n * n))
    logger.debug(f"Banded matrix: {n_nonzero:,} stored entries ({sparsity:.2%} sparse)")
    return banded
