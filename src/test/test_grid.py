"""
Test grid primitives: fields, positions, Euler update, out-of-bound tracking.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import DimensionError, FieldNotSetError
from core.grid import Field, Position, Velocity, shifted_neighbours


def constant_velocity(position, vx, vy):
    velocity = Velocity(position.nx, position.ny, position)
    velocity.data[..., 0] = vx
    velocity.data[..., 1] = vy
    return velocity


class TestField:
    """Test the generic field container."""

    def test_creation(self):
        field = Field(4, 3)
        assert field.shape == (4, 3)
        assert field.size == 2
        assert field.data.shape == (4, 3, 2)
        assert field.time == 0.0
        assert np.all(field.data == 0.0)

    def test_empty_grid_rejected(self):
        with pytest.raises(DimensionError):
            Field(0, 3)

    def test_set_and_get(self):
        field = Field(2, 2)
        field.set_value(1, 0, (3.0, -1.0))
        assert field.get(1, 0) == (3.0, -1.0)
        assert field.get(0, 0) == (0.0, 0.0)

    def test_set_all_shape_check(self):
        field = Field(3, 2)
        field.set_all(np.ones((3, 2, 2)))
        assert np.all(field.data == 1.0)

        with pytest.raises(DimensionError):
            field.set_all(np.ones((2, 3, 2)))

    def test_set_all_single_component(self):
        field = Field(3, 2, size=1)
        field.set_all(np.arange(6.0).reshape(3, 2))
        assert field.get(2, 1) == (5.0,)

    def test_get_nearby_interior_and_boundary(self):
        field = Field(3, 3, size=1)
        field.set_all(np.arange(9.0).reshape(3, 3))

        x_prev, x_next, y_prev, y_next = field.get_nearby(1, 1)
        assert (x_prev[0], x_next[0], y_prev[0], y_next[0]) == (1.0, 7.0, 3.0, 5.0)

        # corner substitutes itself for the missing neighbours
        x_prev, x_next, y_prev, y_next = field.get_nearby(0, 0)
        assert (x_prev[0], x_next[0], y_prev[0], y_next[0]) == (0.0, 3.0, 0.0, 1.0)

    def test_shifted_neighbours_match_get_nearby(self):
        field = Field(4, 5)
        field.set_all(np.random.default_rng(0).random((4, 5, 2)))
        shifted = shifted_neighbours(field.data)

        for i in range(4):
            for j in range(5):
                for k, value in enumerate(field.get_nearby(i, j)):
                    np.testing.assert_array_equal(shifted[k][i, j], value)


class TestPosition:
    """Test grid construction on Position."""

    def test_set_uniform(self):
        pos = Position(5, 3)
        pos.set_uniform(0.0, 2.0, -1.0, 1.0)

        np.testing.assert_array_almost_equal(pos.x[:, 0], [0.0, 0.5, 1.0, 1.5, 2.0])
        np.testing.assert_array_almost_equal(pos.y[0, :], [-1.0, 0.0, 1.0])
        assert pos.get(4, 2) == (2.0, 1.0)
        assert pos.extent == (0.0, 2.0, -1.0, 1.0)

    def test_set_axes_length_check(self):
        pos = Position(3, 2)
        with pytest.raises(DimensionError):
            pos.set_axes([0.0, 1.0], [0.0, 1.0])

    def test_range_before_axes(self):
        pos = Position(3, 2)
        assert not pos.has_axes
        with pytest.raises(FieldNotSetError):
            pos.get_range(0)
        with pytest.raises(ValueError):
            Position(3, 2).get_range(2)

    def test_copy_from(self):
        src = Position(3, 2, time=4.0)
        src.set_uniform(0, 1, 0, 1)
        dst = Position(3, 2)
        dst.copy_from(src)

        np.testing.assert_array_equal(dst.data, src.data)
        np.testing.assert_array_equal(dst.get_range(0), src.get_range(0))
        assert dst.time == 4.0

        # copies are independent
        dst.data += 1.0
        assert src.get(0, 0) == (0.0, 0.0)


class TestUpdate:
    """Test the explicit Euler step."""

    def test_forward_step(self):
        pos = Position(3, 3)
        pos.set_uniform(0, 1, 0, 1)
        before = pos.data.copy()

        pos.update(constant_velocity(pos, 2.0, -1.0), 0.25)

        np.testing.assert_array_almost_equal(pos.x, before[..., 0] + 0.5)
        np.testing.assert_array_almost_equal(pos.y, before[..., 1] - 0.25)

    def test_backward_step_reverses_forward(self):
        pos = Position(3, 3)
        pos.set_uniform(0, 1, 0, 1)
        before = pos.data.copy()
        velocity = constant_velocity(pos, 0.3, 0.7)

        pos.update(velocity, 0.1)
        pos.update(velocity, -0.1)

        np.testing.assert_array_almost_equal(pos.data, before)

    def test_shape_mismatch(self):
        pos = Position(3, 3)
        other = Position(2, 2)
        with pytest.raises(DimensionError):
            pos.update(constant_velocity(other, 1.0, 0.0), 0.1)

    def test_velocity_requires_matching_position(self):
        with pytest.raises(DimensionError):
            Velocity(3, 3, Position(2, 2))


class TestOutOfBound:
    """Test out-of-bound flags."""

    def test_no_tracking(self):
        pos = Position(2, 2)
        pos.set_uniform(0, 1, 0, 1)
        pos.set_bound(0, 1, 0, 1)

        pos.update(constant_velocity(pos, 5.0, 0.0), 1.0)

        # positions still move, nothing is flagged
        assert not pos.tracks_out_of_bound
        assert not pos.out_of_bound.any()
        np.testing.assert_array_almost_equal(pos.x[:, 0], [5.0, 6.0])

    def test_flags_are_sticky(self):
        pos = Position(3, 1)
        pos.set_axes([0.0, 0.5, 1.0], [0.5])
        pos.initialize_out_of_bound()
        pos.set_bound(0, 1, 0, 1)

        velocity = constant_velocity(pos, 0.0, 0.0)
        velocity.data[2, 0, 0] = 0.5

        pos.update(velocity, 1.0)
        assert pos.is_out_of_bound(2, 0)
        assert not pos.is_out_of_bound(0, 0)

        # moving back inside does not clear the flag
        pos.update(velocity, -1.0)
        assert pos.get(2, 0) == (1.0, 0.5)
        assert pos.is_out_of_bound(2, 0)

    def test_points_on_bound_are_inside(self):
        pos = Position(2, 2)
        pos.set_uniform(0, 1, 0, 1)
        pos.initialize_out_of_bound()
        pos.set_bound(0, 1, 0, 1)

        pos.update(constant_velocity(pos, 0.0, 0.0), 1.0)
        assert not pos.out_of_bound.any()

    def test_reinitialize_clears(self):
        pos = Position(2, 2)
        pos.set_uniform(0, 1, 0, 1)
        pos.initialize_out_of_bound()
        pos.set_bound(0, 1, 0, 1)
        pos.update(constant_velocity(pos, 2.0, 0.0), 1.0)
        assert pos.out_of_bound.all()

        pos.initialize_out_of_bound()
        assert not pos.out_of_bound.any()
