"""
Test the particle advection engine with analytic velocity.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import FieldNotSetError
from solvers.advection import (
    ContinuousFlowField,
    Direction,
    DoubleGyreModel,
    resolve_velocity_function,
)
from postprocessing import FTLE


def strain(x, y, t):
    """Steady hyperbolic strain u = x, v = -y."""
    return np.asarray(x, dtype=float), -np.asarray(y, dtype=float)


def make_double_gyre(nx=10, ny=10, steps=50, delta=0.1, **kwargs):
    flow = ContinuousFlowField(nx, ny, "double_gyre", **kwargs)
    flow.initial_position.set_uniform(0, 2, 0, 1)
    flow.set_delta(delta)
    flow.set_step(steps)
    return flow


class TestDirection:
    """Test Direction values."""

    def test_sign(self):
        assert Direction.FORWARD.sign == 1.0
        assert Direction.BACKWARD.sign == -1.0
        assert Direction("backward") is Direction.BACKWARD


class TestConfiguration:
    """Test integration parameters and their validation."""

    def test_fields_not_set_before_run(self):
        flow = make_double_gyre()
        with pytest.raises(FieldNotSetError):
            flow.current_position
        with pytest.raises(FieldNotSetError):
            flow.current_velocity
        with pytest.raises(FieldNotSetError):
            flow.trajectory

    def test_delta_must_be_positive(self):
        flow = make_double_gyre()
        with pytest.raises(ValueError):
            flow.set_delta(0.0)
        with pytest.raises(ValueError):
            flow.set_delta(-0.1)

    def test_step_must_be_non_negative(self):
        with pytest.raises(ValueError):
            make_double_gyre().set_step(-1)

    def test_run_without_delta(self):
        flow = ContinuousFlowField(3, 3, strain)
        flow.initial_position.set_uniform(0, 1, 0, 1)
        with pytest.raises(ValueError):
            flow.run()

    def test_signed_delta(self):
        flow = make_double_gyre(delta=0.2)
        assert flow.signed_delta == 0.2
        flow.set_direction("backward")
        assert flow.direction is Direction.BACKWARD
        assert flow.signed_delta == -0.2

    def test_resolve_velocity_function(self):
        assert isinstance(resolve_velocity_function("double_gyre"), DoubleGyreModel)
        model = resolve_velocity_function(DoubleGyreModel, [0.2, 0.1, 1.0])
        assert model.epsilon == 0.2
        assert resolve_velocity_function(strain) is strain

        with pytest.raises(ValueError):
            resolve_velocity_function(strain, [1.0])
        with pytest.raises(TypeError):
            resolve_velocity_function(42)


class TestContinuousRun:
    """Test runs through analytic velocity."""

    def test_double_gyre_ftle_finite(self):
        flow = make_double_gyre().run()
        ftle = FTLE(flow).calculate()

        assert ftle.values.shape == (10, 10)
        assert np.all(np.isfinite(ftle.values))

    def test_time_advances(self):
        flow = make_double_gyre(steps=50, delta=0.1).run()
        assert flow.time == pytest.approx(5.0)
        assert flow.current_position.time == pytest.approx(5.0)

        flow.set_direction(Direction.BACKWARD)
        flow.set_initial_time(5.0)
        flow.run()
        assert flow.time == pytest.approx(0.0, abs=1e-12)

    def test_initial_position_untouched(self):
        flow = make_double_gyre()
        before = flow.initial_position.data.copy()
        flow.run()

        np.testing.assert_array_equal(flow.initial_position.data, before)
        assert not np.allclose(flow.current_position.data, before)

    def test_runs_are_independent(self):
        flow = make_double_gyre()
        first = flow.run().current_position.data.copy()
        second = flow.run().current_position.data
        np.testing.assert_array_equal(first, second)

    def test_zero_steps(self):
        flow = make_double_gyre(steps=0).run()
        np.testing.assert_array_equal(flow.current_position.data, flow.initial_position.data)
        assert flow.time == 0.0

    def test_euler_steps_exact(self):
        flow = ContinuousFlowField(4, 3, strain)
        flow.initial_position.set_uniform(-1, 1, -1, 1)
        flow.set_delta(0.1)
        flow.set_step(5)
        flow.run()

        x0, y0 = flow.initial_position.x, flow.initial_position.y
        np.testing.assert_array_almost_equal(flow.current_position.x, x0 * 1.1**5)
        np.testing.assert_array_almost_equal(flow.current_position.y, y0 * 0.9**5)

        # velocity of the last step, at the positions before it
        np.testing.assert_array_almost_equal(flow.current_velocity.vx, x0 * 1.1**4)

    def test_no_out_of_bound_tracking(self):
        flow = ContinuousFlowField(3, 3, strain)
        flow.initial_position.set_uniform(-1, 1, -1, 1)
        flow.set_delta(1.0)
        flow.set_step(3)
        flow.run()

        assert not flow.current_position.tracks_out_of_bound
        assert flow.current_position.x.max() == pytest.approx(8.0)

    def test_trajectory(self):
        flow = make_double_gyre(steps=20, record_trajectory=True).run()
        trajectory = flow.trajectory

        assert trajectory.shape == (21, 10, 10, 2)
        np.testing.assert_array_equal(trajectory[0], flow.initial_position.data)
        np.testing.assert_array_equal(trajectory[-1], flow.current_position.data)


class TestRoundTrip:
    """Forward then backward advection through a steady field."""

    @pytest.mark.parametrize("model", ["steady_gyre", "bower"])
    def test_returns_to_start(self, model):
        if model == "steady_gyre":
            forward = ContinuousFlowField(8, 6, DoubleGyreModel(epsilon=0.0))
            forward.initial_position.set_uniform(0.1, 1.9, 0.1, 0.9)
            delta, steps, tol = 0.01, 50, 1e-2
        else:
            forward = ContinuousFlowField(8, 6, "bower")
            forward.initial_position.set_uniform(0, 400, -60, 60)
            delta, steps, tol = 0.001, 200, 1e-1

        forward.set_delta(delta)
        forward.set_step(steps)
        forward.run()

        backward = ContinuousFlowField(8, 6, forward.function)
        backward.initial_position.set_all(forward.current_position.data)
        backward.set_direction(Direction.BACKWARD)
        backward.set_initial_time(forward.time)
        backward.set_delta(delta)
        backward.set_step(steps)
        backward.run()

        np.testing.assert_allclose(backward.current_position.data,
                                   forward.initial_position.data, atol=tol)
        assert backward.time == pytest.approx(0.0, abs=1e-9)
