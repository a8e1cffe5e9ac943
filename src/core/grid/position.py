"""
Particle position field.

A Position holds one (x, y) coordinate per grid node. When the grid was
built from two axes (a Cartesian tensor product) the axes are kept so the
field can serve as the reference grid for bilinear interpolation.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from ..errors import DimensionError, FieldNotSetError
from .field import Field

if TYPE_CHECKING:
    from .velocity import Velocity


class Position(Field):
    """
    Coordinates of an nx×ny set of particles.

    Out-of-bound tracking is off until ``initialize_out_of_bound`` is
    called. Once on, every ``update`` flags particles that leave the
    bounding box; a flag never resets until tracking is re-initialized.
    """

    def __init__(self, nx: int, ny: int, time: float = 0.0):
        super().__init__(nx, ny, size=2, time=time)
        self._xrange: Optional[NDArray] = None
        self._yrange: Optional[NDArray] = None
        self._out_of_bound: Optional[NDArray] = None
        self._bound: Optional[Tuple[float, float, float, float]] = None

    # -------------------------------------------------------------------------
    # Grid construction
    # -------------------------------------------------------------------------

    def set_axes(self, xrange: Sequence[float], yrange: Sequence[float]) -> None:
        """Fill the field with the tensor product of two axes."""
        xrange = np.asarray(xrange, dtype=np.float64)
        yrange = np.asarray(yrange, dtype=np.float64)
        if xrange.shape != (self.nx,) or yrange.shape != (self.ny,):
            raise DimensionError(
                f"Axis lengths ({xrange.size}, {yrange.size}) do not match grid {self.shape}"
            )

        XX, YY = np.meshgrid(xrange, yrange, indexing="ij")
        self.data[..., 0] = XX
        self.data[..., 1] = YY

        self._xrange = xrange
        self._yrange = yrange

    def set_uniform(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        """Fill the field with evenly spaced axes including both end points."""
        self.set_axes(np.linspace(xmin, xmax, self.nx), np.linspace(ymin, ymax, self.ny))

    def copy_from(self, other: Position) -> None:
        """Copy coordinates, axes and time stamp from another position field."""
        self.set_all(other.data)
        self._xrange = None if other._xrange is None else other._xrange.copy()
        self._yrange = None if other._yrange is None else other._yrange.copy()
        self.update_time(other.time)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def x(self) -> NDArray:
        return self.data[..., 0]

    @property
    def y(self) -> NDArray:
        return self.data[..., 1]

    @property
    def has_axes(self) -> bool:
        return self._xrange is not None and self._yrange is not None

    def get_range(self, axis: int) -> NDArray:
        """Defining axis of the grid (0 = x, 1 = y)."""
        if axis not in (0, 1):
            raise ValueError(f"axis must be 0 or 1, got {axis}")
        if not self.has_axes:
            raise FieldNotSetError("Grid axes not set; use set_axes() or set_uniform()")
        return self._xrange if axis == 0 else self._yrange

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(xmin, xmax, ymin, ymax) of the defining axes."""
        xs, ys = self.get_range(0), self.get_range(1)
        return (float(xs[0]), float(xs[-1]), float(ys[0]), float(ys[-1]))

    # -------------------------------------------------------------------------
    # Advection
    # -------------------------------------------------------------------------

    def update(self, velocity: Velocity, delta: float) -> None:
        """
        Explicit Euler step: position += velocity * delta.

        ``delta`` is signed; a negative step integrates backward in time.
        """
        if velocity.shape != self.shape:
            raise DimensionError(
                f"Velocity shape {velocity.shape} does not match position shape {self.shape}"
            )

        self.data += velocity.data * delta

        if self._out_of_bound is not None and self._bound is not None:
            xmin, xmax, ymin, ymax = self._bound
            x, y = self.x, self.y
            outside = (x < xmin) | (x > xmax) | (y < ymin) | (y > ymax)
            self._out_of_bound |= outside

    # -------------------------------------------------------------------------
    # Out-of-bound tracking
    # -------------------------------------------------------------------------

    def initialize_out_of_bound(self) -> None:
        """Start out-of-bound tracking with every flag cleared."""
        self._out_of_bound = np.zeros(self.shape, dtype=bool)

    def set_bound(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        self._bound = (float(xmin), float(xmax), float(ymin), float(ymax))

    @property
    def bound(self) -> Optional[Tuple[float, float, float, float]]:
        return self._bound

    @property
    def tracks_out_of_bound(self) -> bool:
        return self._out_of_bound is not None

    def is_out_of_bound(self, i: int, j: int) -> bool:
        if self._out_of_bound is None:
            return False
        return bool(self._out_of_bound[i, j])

    @property
    def out_of_bound(self) -> NDArray:
        """Boolean mask of flagged particles (all False when tracking is off)."""
        if self._out_of_bound is None:
            return np.zeros(self.shape, dtype=bool)
        return self._out_of_bound.copy()
