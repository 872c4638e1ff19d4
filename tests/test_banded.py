"""
Tests for the banded LU factorization and solve.
"""

import numpy as np
import pytest
import scipy.linalg

from splinefilter.core.banded import lu_factor_banded, lu_solve_banded
from splinefilter.core.errors import FactorizationError


def random_banded(n, bands, seed=0):
    """Random square matrix with zeros beyond ``bands`` of the diagonal."""
    rng = np.random.default_rng(seed)
    a = rng.standard_normal((n, n))
    rows, cols = np.indices((n, n))
    a[np.abs(rows - cols) > bands] = 0.0
    return a


class TestLuFactorBanded:
    """Tests for lu_factor_banded."""

    def test_reconstructs_permuted_matrix(self):
        """Test that L @ U equals A with the recorded row swaps applied."""
        a = random_banded(12, 3, seed=1)
        lu, piv = lu_factor_banded(a.copy(), 3)

        permuted = a.copy()
        for j, jp in enumerate(piv):
            permuted[[j, jp], :] = permuted[[jp, j], :]

        L = np.tril(lu, -1) + np.eye(12)
        U = np.triu(lu)
        np.testing.assert_allclose(L @ U, permuted, atol=1e-12)

    def test_pivots_stay_within_band(self):
        """Test that no pivot row lies more than ``bands`` below the diagonal."""
        a = random_banded(15, 3, seed=2)
        _, piv = lu_factor_banded(a.copy(), 3)
        offsets = piv - np.arange(15)
        assert np.all(offsets >= 0)
        assert np.all(offsets <= 3)

    def test_zero_diagonal_needs_pivoting(self):
        """Test that a zero on the diagonal is handled by a row swap."""
        a = np.array([[0.0, 1.0], [1.0, 0.0]])
        lu, piv = lu_factor_banded(a.copy(), 1)
        assert piv[0] == 1

        x = lu_solve_banded(lu, piv, np.array([2.0, 3.0]))
        np.testing.assert_allclose(x, [3.0, 2.0])

    def test_factors_in_place(self):
        """Test that the input array holds the factors afterwards."""
        a = random_banded(6, 2, seed=3)
        lu, _ = lu_factor_banded(a, 2)
        assert lu is a

    def test_singular_matrix_raises(self):
        """Test that an all-zero column is reported, not truncated."""
        a = random_banded(8, 3, seed=4)
        a[:, 5] = 0.0
        with pytest.raises(FactorizationError, match="Zero pivot"):
            lu_factor_banded(a, 3)

    def test_rejects_non_square(self):
        """Test that a non-square matrix is rejected."""
        with pytest.raises(ValueError, match="square"):
            lu_factor_banded(np.zeros((3, 4)), 1)


class TestLuSolveBanded:
    """Tests for lu_solve_banded."""

    @pytest.mark.parametrize("n,bands", [(5, 1), (12, 3), (40, 3)])
    def test_matches_dense_solver(self, n, bands):
        """Test agreement with scipy's dense solver."""
        a = random_banded(n, bands, seed=n)
        b = np.arange(1.0, n + 1.0)

        lu, piv = lu_factor_banded(a.copy(), bands)
        x = lu_solve_banded(lu, piv, b.copy())

        np.testing.assert_allclose(x, scipy.linalg.solve(a, b), rtol=1e-8, atol=1e-10)

    def test_symmetric_band_matrix(self):
        """Test a symmetric positive definite band matrix like the spline system."""
        n = 20
        a = np.zeros((n, n))
        for k, value in enumerate([4.0, -1.0, 0.5, -0.1]):
            a += np.diag(np.full(n - k, value), k)
            if k:
                a += np.diag(np.full(n - k, value), -k)
        b = np.sin(np.arange(n))

        lu, piv = lu_factor_banded(a.copy(), 3)
        x = lu_solve_banded(lu, piv, b.copy())

        np.testing.assert_allclose(a @ x, b, atol=1e-12)

    def test_zero_rhs_gives_zero_solution(self):
        """Test that a zero right-hand side solves to exactly zero."""
        a = random_banded(10, 3, seed=5)
        lu, piv = lu_factor_banded(a.copy(), 3)
        x = lu_solve_banded(lu, piv, np.zeros(10))
        assert np.all(x == 0.0)

    def test_singular_factors_raise(self):
        """Test that a zero on U's diagonal is reported."""
        lu = np.eye(4)
        lu[2, 2] = 0.0
        with pytest.raises(FactorizationError):
            lu_solve_banded(lu, np.arange(4), np.ones(4))

    def test_shape_mismatch(self):
        """Test that a right-hand side of the wrong length is rejected."""
        lu, piv = lu_factor_banded(np.eye(4), 1)
        with pytest.raises(ValueError, match="inconsistent"):
            lu_solve_banded(lu, piv, np.ones(3))
