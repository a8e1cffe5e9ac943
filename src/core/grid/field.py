"""
Structured grid field primitive.

A field stores a fixed-size vector at every node of an nx×ny structured
grid together with a time stamp. Values are kept in a single ndarray of
shape (nx, ny, size), indexed row-major with i (x index) outer and
j (y index) inner, which is also the record order of the text format.
"""

from __future__ import annotations
from pathlib import Path
from typing import Tuple, Union
import numpy as np
from numpy.typing import NDArray

from ..errors import DimensionError


def shifted_neighbours(data: NDArray) -> Tuple[NDArray, NDArray, NDArray, NDArray]:
    """
    Axis neighbours of every node of a gridded array.

    Returns arrays (x_prev, x_next, y_prev, y_next) with the same shape as
    ``data`` where entry (i, j) holds the value at (i-1, j), (i+1, j),
    (i, j-1) and (i, j+1). At a grid boundary the node itself is
    substituted, giving a one-sided difference.
    """
    x_prev = np.concatenate([data[:1], data[:-1]], axis=0)
    x_next = np.concatenate([data[1:], data[-1:]], axis=0)
    y_prev = np.concatenate([data[:, :1], data[:, :-1]], axis=1)
    y_next = np.concatenate([data[:, 1:], data[:, -1:]], axis=1)
    return x_prev, x_next, y_prev, y_next


class Field:
    """
    A 2D structured field of fixed-size vectors.

    Attributes:
        data: Values, shape (nx, ny, size)
        time: Time stamp of the field
    """

    def __init__(self, nx: int, ny: int, size: int = 2, time: float = 0.0):
        if nx < 1 or ny < 1:
            raise DimensionError(f"Grid must have at least one node per axis, got ({nx}, {ny})")
        self._nx = int(nx)
        self._ny = int(ny)
        self._size = int(size)
        self.data: NDArray = np.zeros((self._nx, self._ny, self._size), dtype=np.float64)
        self.time = float(time)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._nx, self._ny)

    @property
    def nx(self) -> int:
        return self._nx

    @property
    def ny(self) -> int:
        return self._ny

    @property
    def size(self) -> int:
        """Number of components stored per node."""
        return self._size

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self, i: int, j: int) -> Tuple[float, ...]:
        """Components at node (i, j)."""
        return tuple(float(v) for v in self.data[i, j])

    def get_nearby(self, i: int, j: int) -> Tuple[NDArray, NDArray, NDArray, NDArray]:
        """
        Values at (i-1, j), (i+1, j), (i, j-1), (i, j+1), clamped at the boundary.

        Single-node form of ``shifted_neighbours``, which FTLE uses for the
        whole grid at once.
        """
        x_prev = self.data[i - 1, j] if i != 0 else self.data[i, j]
        x_next = self.data[i + 1, j] if i != self._nx - 1 else self.data[i, j]
        y_prev = self.data[i, j - 1] if j != 0 else self.data[i, j]
        y_next = self.data[i, j + 1] if j != self._ny - 1 else self.data[i, j]
        return x_prev, x_next, y_prev, y_next

    def set_value(self, i: int, j: int, value) -> None:
        self.data[i, j] = value

    def set_all(self, data: NDArray) -> None:
        """
        Replace all values.

        Args:
            data: Array of shape (nx, ny, size); (nx, ny) is accepted for
                single-component fields.
        """
        data = np.asarray(data, dtype=np.float64)
        if self._size == 1 and data.shape == self.shape:
            data = data[..., np.newaxis]
        if data.shape != self.data.shape:
            raise DimensionError(
                f"Data shape {data.shape} does not match field shape {self.data.shape}"
            )
        self.data[...] = data

    def update_time(self, time: float) -> None:
        self.time = float(time)

    # -------------------------------------------------------------------------
    # File I/O
    # -------------------------------------------------------------------------

    def read_from_file(self, file_name: Union[str, Path]) -> None:
        """Load values and time stamp from a plain-text field file."""
        from ..io.field_io import read_field
        read_field(self, file_name)

    def write_to_file(self, file_name: Union[str, Path]) -> None:
        """Write values and time stamp to a plain-text field file."""
        from ..io.field_io import write_field
        write_field(self, file_name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, size={self._size}, time={self.time:.4g})"
