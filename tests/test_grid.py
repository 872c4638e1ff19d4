"""
Tests for the node-grid search.
"""

import numpy as np
import pytest

from splinefilter.core.config import SplineConfig
from splinefilter.core.errors import SetupError
from splinefilter.core.grid import setup_grid


class TestSetupGrid:
    """Tests for setup_grid."""

    def test_ten_unit_samples(self):
        """Test x = 0..9 with wavelength 4."""
        grid = setup_grid(np.arange(10.0), 4.0)
        assert grid.M == 9
        assert grid.DX == 1.0
        assert grid.xmin == 0.0
        assert grid.xmax == 9.0

    def test_unsorted_input(self):
        """Test that the bounds come from min/max, not the ends of the array."""
        x = np.array([5.0, 0.0, 9.0, 3.0, 1.0, 8.0, 2.0, 7.0, 4.0, 6.0])
        grid = setup_grid(x, 4.0)
        assert grid.xmin == 0.0
        assert grid.xmax == 9.0
        assert grid.M == 9

    def test_exact_partition(self):
        """Test that M intervals of DX cover the domain."""
        x = np.sort(np.random.default_rng(0).uniform(-3.0, 17.0, 300))
        grid = setup_grid(x, 1.5)
        assert grid.M * grid.DX == pytest.approx(grid.xmax - grid.xmin)

    def test_refines_until_samples_run_thin(self):
        """Test refinement stops once there are at most 2 samples per node."""
        grid = setup_grid(np.linspace(0.0, 100.0, 1001), 2.0)
        assert grid.M == 500
        assert grid.DX == pytest.approx(0.2)

    def test_refinement_ceiling(self):
        """Test that refinement backs off before 15 intervals per wavelength."""
        grid = setup_grid(np.linspace(0.0, 10.0, 1001), 9.5)
        assert grid.M == 15
        assert 9.5 / grid.DX <= 15.0

    def test_deterministic(self):
        """Test that identical inputs give identical grids."""
        x = np.random.default_rng(3).uniform(0.0, 50.0, 200)
        assert setup_grid(x, 3.0) == setup_grid(x.copy(), 3.0)

    def test_wavelength_exceeds_span(self):
        """Test that a wavelength longer than the domain is rejected."""
        with pytest.raises(SetupError, match="exceeds"):
            setup_grid(np.arange(10.0), 9.5)

    def test_too_few_samples(self):
        """Test that fewer samples than initial nodes is rejected."""
        with pytest.raises(SetupError):
            setup_grid(np.arange(5.0), 2.0)

    def test_cannot_resolve_wavelength(self):
        """Test that growth failing for lack of samples is rejected."""
        with pytest.raises(SetupError, match="ran out of samples"):
            setup_grid(np.linspace(0.0, 100.0, 20), 1.0)

    def test_config_initial_intervals(self):
        """Test that the search starts from the configured interval count."""
        config = SplineConfig(initial_intervals=12)
        grid = setup_grid(np.arange(13.0), 4.0, config)
        assert grid.M == 12
