"""
LU factorization and solve for banded square matrices.

The routines operate on an ordinary dense ``np.ndarray`` but restrict the
pivot search and the elimination work to a fixed window around the diagonal.
This is only valid when the matrix is known to be banded: every entry more
than ``bands`` positions below the diagonal is zero, and (for the symmetric
systems produced by the spline assembly) the same holds above it. Partial
pivoting inside the band can widen the upper factor to ``2 * bands``
super-diagonals, never more, so the update window below covers every nonzero
of the eliminated row.
"""

import logging
from typing import Tuple

import numpy as np

from .errors import FactorizationError

logger = logging.getLogger(__name__)


def lu_factor_banded(a: np.ndarray, bands: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Factor a banded square matrix in place as ``P A = L U``.

    Parameters
    ----------
    a : np.ndarray
        Square matrix, shape (N, N). Overwritten with the combined factors:
        the strict lower triangle holds the unit lower factor L, the upper
        triangle holds U.
    bands : int
        Number of nonzero diagonals below the main diagonal.

    Returns
    -------
    lu : np.ndarray
        The factored matrix (same object as ``a``).
    piv : np.ndarray
        Row interchanges, shape (N,). Row ``j`` was swapped with ``piv[j]``
        at elimination step ``j``.

    Raises
    ------
    ValueError
        If ``a`` is not square or ``bands`` is negative.
    FactorizationError
        If an exactly zero pivot is found (singular matrix).
    """
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Banded LU needs a square matrix, got shape {a.shape}")
    if bands < 0:
        raise ValueError(f"bands must be non-negative, got {bands}")

    n = a.shape[0]
    piv = np.zeros(n, dtype=np.intp)

    for j in range(n):
        # Pivot search limited to the band below the diagonal
        last_row = min(j + bands, n - 1)
        jp = j + int(np.argmax(np.abs(a[j : last_row + 1, j])))
        piv[j] = jp

        if a[jp, j] == 0.0:
            raise FactorizationError(f"Zero pivot in column {j} of {n}x{n} banded matrix")

        if jp != j:
            # Full-width swap; the trailing update reads the whole row
            a[[j, jp], :] = a[[jp, j], :]

        if j < n - 1:
            a[j + 1 : last_row + 1, j] /= a[j, j]

            last_col = min(j + 2 * bands, n - 1)
            a[j + 1 : last_row + 1, j + 1 : last_col + 1] -= np.outer(
                a[j + 1 : last_row + 1, j], a[j, j + 1 : last_col + 1]
            )

    return a, piv


def lu_solve_banded(lu: np.ndarray, piv: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Solve ``A x = b`` using factors from :func:`lu_factor_banded`.

    Parameters
    ----------
    lu : np.ndarray
        Combined L/U factors, shape (N, N).
    piv : np.ndarray
        Row interchanges, shape (N,).
    b : np.ndarray
        Right-hand side, shape (N,). Overwritten with the solution.

    Returns
    -------
    np.ndarray
        The solution vector (same object as ``b``).

    Raises
    ------
    ValueError
        If the shapes of the factors and the right-hand side disagree.
    FactorizationError
        If U has a zero on its diagonal.
    """
    n = lu.shape[0]
    if b.shape != (n,):
        raise ValueError(f"b shape {b.shape} inconsistent with LU shape {lu.shape}")
    if piv.shape != (n,):
        raise ValueError(f"piv shape {piv.shape} inconsistent with LU shape {lu.shape}")

    diagonal = np.diagonal(lu)
    if np.any(diagonal == 0.0):
        raise FactorizationError("Cannot solve with a singular LU factorization")

    for j in range(n):
        jp = piv[j]
        if jp != j:
            b[j], b[jp] = b[jp], b[j]

    # Forward substitution, unit lower factor
    for i in range(1, n):
        b[i] -= np.dot(lu[i, :i], b[:i])

    # Back substitution, upper factor
    for i in range(n - 1, -1, -1):
        b[i] = (b[i] - np.dot(lu[i, i + 1 :], b[i + 1 :])) / lu[i, i]

    return b
