"""
Velocity fields sampled at the nodes of a position field.
"""

from __future__ import annotations
from typing import Callable, Tuple
import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import RegularGridInterpolator

from ..errors import DimensionError
from .field import Field
from .position import Position

VelocityFunction = Callable[[NDArray, NDArray, float], Tuple[NDArray, NDArray]]


class Velocity(Field):
    """
    Velocity samples tied to the Position whose nodes they belong to.

    The position is not owned; it is the grid that ``interpolate_from``
    evaluates at.
    """

    def __init__(self, nx: int, ny: int, position: Position, time: float = 0.0):
        if position.shape != (nx, ny):
            raise DimensionError(
                f"Velocity shape ({nx}, {ny}) does not match position shape {position.shape}"
            )
        super().__init__(nx, ny, size=2, time=time)
        self._position = position

    @property
    def position(self) -> Position:
        return self._position

    @property
    def vx(self) -> NDArray:
        return self.data[..., 0]

    @property
    def vy(self) -> NDArray:
        return self.data[..., 1]

    def interpolate_from(self, reference: Velocity) -> None:
        """
        Bilinearly interpolate a reference velocity onto this field's positions.

        The reference must live on a Cartesian grid with strictly increasing
        axes. Particles flagged out of bound keep their previous value.
        Points on or beyond the last axis node use the outermost cell, so
        positions outside the reference domain are linearly extrapolated
        rather than rejected.
        """
        ref_pos = reference.position
        interpolator = RegularGridInterpolator(
            (ref_pos.get_range(0), ref_pos.get_range(1)),
            reference.data,
            method="linear",
            bounds_error=False,
            fill_value=None,
        )

        inside = ~self._position.out_of_bound
        if not inside.any():
            return
        self.data[inside] = interpolator(self._position.data[inside])


class ContinuousVelocity(Velocity):
    """
    Velocity evaluated from an analytic function at the position's nodes.

    The function has signature ``f(x, y, t) -> (vx, vy)`` and is called once
    with the full coordinate arrays, so it must broadcast over numpy arrays.
    """

    def __init__(self, position: Position, function: VelocityFunction, time: float = 0.0):
        nx, ny = position.shape
        super().__init__(nx, ny, position, time=time)
        self._function = function
        self.evaluate()

    @property
    def function(self) -> VelocityFunction:
        return self._function

    def evaluate(self) -> None:
        """Recompute every sample at the current positions and time."""
        vx, vy = self._function(self._position.x, self._position.y, self.time)
        self.data[..., 0] = vx
        self.data[..., 1] = vy
