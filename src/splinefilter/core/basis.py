"""
Cubic B-spline basis functions with boundary reflection.

Each node m of the grid carries the compact cubic kernel

    phi(z) = (2 - z)^3 / 4 - max(1 - z, 0)^3,   z = |x - x_m| / DX < 2

which peaks at 1 on its node and vanishes two node intervals away. Near the
domain edges the boundary condition is imposed by adding a multiple of the
kernel centered on a virtual exterior node, index -1 below the domain and
M + 1 above it. Those two indices have no storage anywhere; they exist only
as arguments to the kernel.

Functions accept a scalar ``x`` (returning a float) or an array (evaluated
elementwise).
"""

from typing import Union

import numpy as np

from .grid import GridSpec

ArrayLike = Union[float, np.ndarray]

# Rows of BOUNDARY_CONDITIONS
BC_ZERO_VALUE = 0
BC_ZERO_FIRST_DERIVATIVE = 1
BC_ZERO_SECOND_DERIVATIVE = 2

# Reflection weights for nodes 0, 1, M-1, M.
BOUNDARY_CONDITIONS = (
    (-4.0, -1.0, -1.0, -4.0),
    (0.0, 1.0, 1.0, 0.0),
    (2.0, -1.0, -1.0, 2.0),
)

# Kernel value on its own node
KERNEL_PEAK = 1.0


def beta(grid: GridSpec, m: int, bc: int = BC_ZERO_FIRST_DERIVATIVE) -> float:
    """
    Reflection weight of node ``m`` for boundary condition row ``bc``.

    Parameters
    ----------
    grid : GridSpec
        Node grid.
    m : int
        Node index, 0 <= m <= M.
    bc : int
        Row of ``BOUNDARY_CONDITIONS``.

    Returns
    -------
    float
        0 for interior nodes, otherwise the tabulated weight.
    """
    M = grid.M
    if 1 < m < M - 1:
        return 0.0
    if m >= M - 1:
        m -= M - 3
    if not 0 <= bc <= 2 or not 0 <= m <= 3:
        raise ValueError(f"No boundary weight for node position {m} and condition {bc}")
    return BOUNDARY_CONDITIONS[bc][m]


def reflected_node(grid: GridSpec, m: int) -> int:
    """Virtual exterior node reflected into node ``m`` (-1 or M + 1), or ``m`` if interior."""
    if m in (0, 1):
        return -1
    if m in (grid.M - 1, grid.M):
        return grid.M + 1
    return m


def _kernel(z: ArrayLike) -> ArrayLike:
    if np.ndim(z) == 0:
        y = 0.0
        if z < 2.0:
            t = 2.0 - z
            y = 0.25 * t * t * t
            t -= 1.0
            if t > 0.0:
                y -= t * t * t
        return y

    t = 2.0 - z
    u = t - 1.0
    y = np.where(z < 2.0, 0.25 * t * t * t, 0.0)
    return y - np.where(u > 0.0, u * u * u, 0.0)


def _kernel_slope(z: ArrayLike) -> ArrayLike:
    """d(phi)/dz for normalized distance z >= 0."""
    if np.ndim(z) == 0:
        d = 0.0
        if z < 2.0:
            t = 2.0 - z
            d = -0.75 * t * t
            t -= 1.0
            if t > 0.0:
                d += 3.0 * t * t
        return d

    t = 2.0 - z
    u = t - 1.0
    d = np.where(z < 2.0, -0.75 * t * t, 0.0)
    return d + np.where(u > 0.0, 3.0 * u * u, 0.0)


def raw_basis(grid: GridSpec, m: int, x: ArrayLike) -> ArrayLike:
    """Unconstrained kernel centered on node ``m`` (may be a virtual node)."""
    xm = grid.xmin + m * grid.DX
    if np.ndim(x) == 0:
        return _kernel(abs((x - xm) / grid.DX))
    return _kernel(np.abs((np.asarray(x, dtype=np.float64) - xm) / grid.DX))


def basis(grid: GridSpec, m: int, x: ArrayLike, bc: int = BC_ZERO_FIRST_DERIVATIVE) -> ArrayLike:
    """
    Evaluate the boundary-constrained basis function of node ``m`` at ``x``.

    Parameters
    ----------
    grid : GridSpec
        Node grid.
    m : int
        Node index. -1 and M + 1 evaluate the bare virtual kernels.
    x : float or np.ndarray
        Evaluation point(s).
    bc : int
        Row of ``BOUNDARY_CONDITIONS``.

    Returns
    -------
    float or np.ndarray
        Basis value(s).
    """
    y = raw_basis(grid, m, x)

    # Boundary conditions, if any, are an additional addend
    if m == 0 or m == 1:
        y = y + beta(grid, m, bc) * raw_basis(grid, -1, x)
    elif m == grid.M - 1 or m == grid.M:
        y = y + beta(grid, m, bc) * raw_basis(grid, grid.M + 1, x)

    return y


def raw_basis_derivative(grid: GridSpec, m: int, x: ArrayLike) -> ArrayLike:
    """x-derivative of the unconstrained kernel centered on node ``m``."""
    xm = grid.xmin + m * grid.DX
    if np.ndim(x) == 0:
        s = (x - xm) / grid.DX
        return float(np.sign(s)) * _kernel_slope(abs(s)) / grid.DX
    s = (np.asarray(x, dtype=np.float64) - xm) / grid.DX
    return np.sign(s) * _kernel_slope(np.abs(s)) / grid.DX


def basis_derivative(grid: GridSpec, m: int, x: ArrayLike, bc: int = BC_ZERO_FIRST_DERIVATIVE) -> ArrayLike:
    """
    x-derivative of the boundary-constrained basis function of node ``m``.

    Same index conventions as :func:`basis`.
    """
    d = raw_basis_derivative(grid, m, x)

    if m == 0 or m == 1:
        d = d + beta(grid, m, bc) * raw_basis_derivative(grid, -1, x)
    elif m == grid.M - 1 or m == grid.M:
        d = d + beta(grid, m, bc) * raw_basis_derivative(grid, grid.M + 1, x)

    return d
