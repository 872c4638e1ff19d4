"""
Tests for the cubic B-spline basis functions.
"""

import numpy as np
import pytest

from splinefilter.core.basis import (
    BC_ZERO_SECOND_DERIVATIVE,
    BC_ZERO_VALUE,
    BOUNDARY_CONDITIONS,
    KERNEL_PEAK,
    basis,
    basis_derivative,
    beta,
    raw_basis,
)
from splinefilter.core.grid import GridSpec


@pytest.fixture
def grid():
    """Ten unit intervals on [0, 10]."""
    return GridSpec(xmin=0.0, xmax=10.0, M=10, DX=1.0)


@pytest.fixture
def wide_grid():
    """Twelve intervals of 0.5 starting at -2."""
    return GridSpec(xmin=-2.0, xmax=4.0, M=12, DX=0.5)


class TestKernel:
    """Tests for the kernel shape."""

    @pytest.mark.parametrize("m", [2, 4, 5, 8])
    def test_interior_peak(self, grid, m):
        """Test that an interior basis function peaks at 1 on its node."""
        assert basis(grid, m, float(m)) == KERNEL_PEAK

    def test_interior_matches_raw_kernel(self, grid):
        """Test that interior basis functions have no boundary addend."""
        x = np.linspace(0.0, 10.0, 101)
        np.testing.assert_array_equal(basis(grid, 5, x), raw_basis(grid, 5, x))

    def test_compact_support(self, grid):
        """Test that the kernel vanishes two intervals from its node."""
        assert basis(grid, 5, 3.0) == 0.0
        assert basis(grid, 5, 7.0) == 0.0
        assert basis(grid, 5, 2.5) == 0.0
        assert basis(grid, 5, 3.01) > 0.0

    def test_breakpoint_values(self, grid):
        """Test kernel values at one interval and halfway points."""
        assert basis(grid, 5, 4.0) == pytest.approx(0.25)
        assert basis(grid, 5, 6.0) == pytest.approx(0.25)
        assert basis(grid, 5, 5.5) == pytest.approx(0.25 * 1.5**3 - 0.5**3)

    def test_continuous_at_breakpoint(self, grid):
        """Test value and slope continuity across z = 1."""
        eps = 1e-7
        assert basis(grid, 5, 6.0 - eps) == pytest.approx(basis(grid, 5, 6.0 + eps), abs=1e-6)
        assert basis_derivative(grid, 5, 6.0 - eps) == pytest.approx(
            basis_derivative(grid, 5, 6.0 + eps), abs=1e-6
        )

    def test_scales_with_spacing(self, wide_grid):
        """Test that distance is measured in node intervals."""
        assert basis(wide_grid, 4, 0.0) == KERNEL_PEAK
        assert basis(wide_grid, 4, 0.5) == pytest.approx(0.25)
        assert basis(wide_grid, 4, 1.0) == 0.0

    def test_array_matches_scalar(self, wide_grid):
        """Test that array evaluation agrees with scalar evaluation."""
        x = np.linspace(-2.0, 4.0, 37)
        for m in (0, 1, 6, 11, 12):
            expected = [basis(wide_grid, m, float(xi)) for xi in x]
            np.testing.assert_allclose(basis(wide_grid, m, x), expected, atol=1e-15)


class TestBoundary:
    """Tests for the boundary reflection."""

    def test_beta_zero_first_derivative(self, grid):
        """Test reflection weights of the clamped boundary condition."""
        assert [beta(grid, m) for m in (0, 1, 9, 10)] == [0.0, 1.0, 1.0, 0.0]

    def test_beta_interior(self, grid):
        """Test that interior nodes have no reflection."""
        assert all(beta(grid, m) == 0.0 for m in range(2, 9))

    def test_beta_other_rows(self, grid):
        """Test that other table rows are selected by position."""
        assert [beta(grid, m, BC_ZERO_VALUE) for m in (0, 1, 9, 10)] == list(BOUNDARY_CONDITIONS[0])
        assert [beta(grid, m, BC_ZERO_SECOND_DERIVATIVE) for m in (0, 1, 9, 10)] == [2.0, -1.0, -1.0, 2.0]

    def test_node_one_reflects_exterior_kernel(self, grid):
        """Test that node 1 picks up the kernel of virtual node -1."""
        assert basis(grid, 1, 0.0) == pytest.approx(0.5)
        assert basis(grid, 1, 0.5) == pytest.approx(raw_basis(grid, 1, 0.5) + raw_basis(grid, -1, 0.5))

    def test_high_boundary_mirrors_low(self, grid):
        """Test that the edges are mirror images."""
        x = np.linspace(0.0, 3.0, 31)
        np.testing.assert_allclose(basis(grid, 1, x), basis(grid, 9, 10.0 - x), atol=1e-12)
        np.testing.assert_allclose(basis(grid, 0, x), basis(grid, 10, 10.0 - x), atol=1e-12)

    def test_virtual_nodes_have_no_reflection(self, grid):
        """Test that the exterior kernels are evaluated bare."""
        x = np.linspace(-3.0, 1.0, 9)
        np.testing.assert_array_equal(basis(grid, -1, x), raw_basis(grid, -1, x))
        assert basis(grid, 11, 10.0) == pytest.approx(0.25)

    @pytest.mark.parametrize("m", [0, 1, 2, 3])
    def test_zero_slope_at_low_edge(self, grid, m):
        """Test that every basis function is flat at xmin."""
        assert basis_derivative(grid, m, 0.0) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("m", [7, 8, 9, 10])
    def test_zero_slope_at_high_edge(self, grid, m):
        """Test that every basis function is flat at xmax."""
        assert basis_derivative(grid, m, 10.0) == pytest.approx(0.0, abs=1e-12)


class TestBasisDerivative:
    """Tests for basis_derivative."""

    @pytest.mark.parametrize("m,x", [(5, 4.3), (5, 5.8), (1, 0.4), (9, 9.7), (3, 1.2)])
    def test_matches_finite_difference(self, grid, m, x):
        """Test the analytic slope against a central difference."""
        h = 1e-6
        numeric = (basis(grid, m, x + h) - basis(grid, m, x - h)) / (2 * h)
        assert basis_derivative(grid, m, x) == pytest.approx(numeric, rel=1e-5, abs=1e-8)

    def test_zero_at_peak(self, grid):
        """Test that an interior kernel is flat on its node."""
        assert basis_derivative(grid, 5, 5.0) == 0.0
