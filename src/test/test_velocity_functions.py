"""
Test analytic velocity models and the model registry.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from solvers.advection import (
    BowerModel,
    DoubleGyreModel,
    VELOCITY_MODELS,
    get_velocity_model,
)


def divergence(model, x, y, t, h):
    """Central-difference divergence of a velocity model."""
    du = (model(x + h, y, t)[0] - model(x - h, y, t)[0]) / (2 * h)
    dv = (model(x, y + h, t)[1] - model(x, y - h, t)[1]) / (2 * h)
    return du + dv


class TestDoubleGyre:
    """Test the time-periodic double gyre."""

    def test_steady_limit(self):
        model = DoubleGyreModel(epsilon=0.0, amplitude=0.1)
        x, y = 0.3, 0.2
        u, v = model(x, y, 7.0)

        assert u == pytest.approx(-np.pi * 0.1 * np.sin(np.pi * x) * np.cos(np.pi * y))
        assert v == pytest.approx(np.pi * 0.1 * np.cos(np.pi * x) * np.sin(np.pi * y))

    def test_walls_impermeable(self):
        model = DoubleGyreModel()
        xs = np.linspace(0, 2, 11)
        ys = np.linspace(0, 1, 11)

        for t in (0.0, 2.5, 7.5):
            assert np.allclose(model(xs, np.zeros_like(xs), t)[1], 0.0)
            assert np.allclose(model(xs, np.ones_like(xs), t)[1], 0.0)
            assert np.allclose(model(np.zeros_like(ys), ys, t)[0], 0.0)
            assert np.allclose(model(2 * np.ones_like(ys), ys, t)[0], 0.0)

    def test_divergence_free(self):
        model = DoubleGyreModel()
        XX, YY = np.meshgrid(np.linspace(0.1, 1.9, 7), np.linspace(0.1, 0.9, 5), indexing="ij")
        np.testing.assert_allclose(divergence(model, XX, YY, 3.3, 1e-5), 0.0, atol=1e-6)

    def test_broadcasts_over_grid(self):
        XX, YY = np.meshgrid(np.linspace(0, 2, 4), np.linspace(0, 1, 3), indexing="ij")
        u, v = DoubleGyreModel()(XX, YY, 1.0)
        assert u.shape == (4, 3)
        assert v.shape == (4, 3)


class TestBower:
    """Test the Bower meandering jet."""

    def test_steady(self):
        model = BowerModel()
        np.testing.assert_array_equal(model(120.0, 15.0, 0.0), model(120.0, 15.0, 50.0))

    def test_jet_core_speed(self):
        # at a meander crest the jet centre moves at scale - phase_speed
        model = BowerModel()
        u, v = model(100.0, 50.0)
        assert u == pytest.approx(50.0 - 10.0)
        assert v == pytest.approx(0.0, abs=1e-12)

    def test_far_field_moves_with_frame(self):
        u, v = BowerModel()(0.0, 2000.0)
        assert u == pytest.approx(-10.0)
        assert v == pytest.approx(0.0, abs=1e-9)

    def test_divergence_free(self):
        model = BowerModel()
        XX, YY = np.meshgrid(np.linspace(0, 400, 9), np.linspace(-80, 80, 7), indexing="ij")
        np.testing.assert_allclose(divergence(model, XX, YY, 0.0, 1e-3), 0.0, atol=1e-5)


class TestRegistry:
    """Test model lookup and parameter vectors."""

    def test_registered_names(self):
        assert set(VELOCITY_MODELS) == {"double_gyre", "bower"}

    def test_defaults(self):
        model = get_velocity_model("double_gyre")
        assert isinstance(model, DoubleGyreModel)
        assert model.parameters == (0.1, 0.1, np.pi / 5)

    def test_from_parameters(self):
        model = get_velocity_model("bower", [10, 20, 300, 5, 30])
        assert isinstance(model, BowerModel)
        assert model.wavelength == 300.0
        assert model.parameters == (10.0, 20.0, 300.0, 5.0, 30.0)

    def test_wrong_parameter_count(self):
        with pytest.raises(ValueError):
            DoubleGyreModel.from_parameters([0.1, 0.1])

    def test_unknown_model(self):
        with pytest.raises(ValueError):
            get_velocity_model("taylor_green")
