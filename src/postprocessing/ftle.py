"""
Finite-time Lyapunov exponent (FTLE) field.

Given the flow map of a completed advection run (initial positions x0 at
t0, final positions x at t), the deformation gradient F = dx/dx0 is
estimated with central differences on the particle grid (one-sided at
the boundary). The FTLE is

    sigma = ln(lambda_max(C)) / (2 (t - t0)),    C = F^T F

where C is the right Cauchy-Green tensor. Ridges of the forward field mark
repelling LCS, ridges of the backward field attracting LCS.
"""

from __future__ import annotations
import logging
import time as _time
from multiprocessing import Pool
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from core.errors import DimensionError
from core.grid import Field, shifted_neighbours
from solvers.advection import Direction, FlowField
from .fields import ScalarField

logger = logging.getLogger(__name__)


def _ftle_from_neighbours(args) -> NDArray:
    """
    FTLE for a block of nodes from their axis neighbours.

    Must be module-level for multiprocessing pickling.

    Args:
        args: Tuple of (initial_neighbours, current_neighbours, dt) where
            each neighbours entry is (x_prev, x_next, y_prev, y_next),
            arrays of shape (rows, ny, 2)
    """
    (x0_prev, x0_next, y0_prev, y0_next), (x_prev, x_next, y_prev, y_next), dt = args

    with np.errstate(divide="ignore", invalid="ignore"):
        dx0 = x0_next[..., 0] - x0_prev[..., 0]
        dy0 = y0_next[..., 1] - y0_prev[..., 1]

        # deformation gradient
        f00 = (x_next[..., 0] - x_prev[..., 0]) / dx0
        f01 = (y_next[..., 0] - y_prev[..., 0]) / dy0
        f10 = (x_next[..., 1] - x_prev[..., 1]) / dx0
        f11 = (y_next[..., 1] - y_prev[..., 1]) / dy0

        # Cauchy-Green tensor C = F^T F (symmetric)
        c00 = f00 * f00 + f10 * f10
        c01 = f00 * f01 + f10 * f11
        c11 = f01 * f01 + f11 * f11

        # largest eigenvalue of a symmetric 2x2 matrix
        half_trace = 0.5 * (c00 + c11)
        radius = np.sqrt((0.5 * (c00 - c11))**2 + c01**2)
        lambda_max = half_trace + radius

        return 0.5 * np.log(lambda_max) / dt


def compute_ftle(initial: NDArray, current: NDArray, dt: float, num_cores: int = 1) -> NDArray:
    """
    FTLE of a flow map given as two (nx, ny, 2) position arrays.

    Rows are independent, so with ``num_cores > 1`` they are split into
    blocks computed in a process pool.

    Returns:
        (nx, ny) array of FTLE values. Degenerate cells yield NaN/Inf.
    """
    if initial.shape != current.shape:
        raise DimensionError(f"Position shapes differ: {initial.shape} vs {current.shape}")
    if dt == 0:
        raise ValueError("Integration time t - t0 must be non-zero")

    initial_nb = shifted_neighbours(initial)
    current_nb = shifted_neighbours(current)
    nx = initial.shape[0]

    if num_cores <= 1 or nx < 2:
        return _ftle_from_neighbours((initial_nb, current_nb, dt))

    tasks = []
    for rows in np.array_split(np.arange(nx), min(num_cores, nx)):
        block = slice(rows[0], rows[-1] + 1)
        tasks.append((tuple(a[block] for a in initial_nb),
                      tuple(a[block] for a in current_nb),
                      dt))

    with Pool(processes=num_cores) as pool:
        results = pool.map(_ftle_from_neighbours, tasks)

    return np.concatenate(results, axis=0)


class FTLE(Field):
    """
    FTLE field attached to a flow field.

    The integration window is captured at construction: t0 from the
    initial position and t from the flow field's current time. Construct
    it after a run; a later run in the opposite direction over the same
    window can reuse the object, so both fields share the same positive
    time span. With ``absolute_time=True`` the field is normalised by
    |t - t0|, so a field built after a backward run is positive as well.

    Usage:
        flow.run()
        ftle = FTLE(flow)
        ftle.calculate()
        ftle.write_to_file("ftle_pos.txt")
    """

    def __init__(self, flow_field: FlowField, absolute_time: bool = False):
        nx, ny = flow_field.shape
        super().__init__(nx, ny, size=1, time=flow_field.time)
        self._flow_field = flow_field
        self._initial_time = flow_field.initial_position.time
        self._absolute_time = absolute_time
        self._direction: Optional[Direction] = None

    @property
    def flow_field(self) -> FlowField:
        return self._flow_field

    @property
    def initial_time(self) -> float:
        return self._initial_time

    @property
    def integration_time(self) -> float:
        """t - t0 used for normalisation (its magnitude with absolute_time)."""
        dt = self.time - self._initial_time
        return abs(dt) if self._absolute_time else dt

    @property
    def direction(self) -> Optional[Direction]:
        """Direction of the run the values were calculated from."""
        return self._direction

    @property
    def values(self) -> NDArray:
        """FTLE values, shape (nx, ny)."""
        return self.data[..., 0]

    def get(self, i: int, j: int) -> float:
        return float(self.data[i, j, 0])

    def calculate(self, num_cores: int = 1) -> FTLE:
        """
        Compute the field from the flow field's initial and current positions.

        Args:
            num_cores: Number of processes for the row loop

        Returns:
            self
        """
        start = _time.perf_counter()
        direction = self._flow_field.direction
        logger.info("%s FTLE calculation begins", direction.value.capitalize())

        initial = self._flow_field.initial_position
        current = self._flow_field.current_position
        if current.shape != self.shape:
            raise DimensionError(f"Current position shape {current.shape} does not match FTLE shape {self.shape}")

        self.data[..., 0] = compute_ftle(initial.data, current.data, self.integration_time, num_cores)
        self._direction = direction

        logger.info("%s FTLE calculation ends (execution time: %.4gs)",
                    direction.value.capitalize(), _time.perf_counter() - start)
        return self

    def to_scalar_field(self) -> ScalarField:
        """Copy of the values with the initial particle grid as coordinates."""
        initial = self._flow_field.initial_position
        name = "ftle" if self._direction is None else f"ftle_{self._direction.value}"
        return ScalarField(
            data=self.values.copy(),
            name=name,
            XX=initial.x.copy(),
            YY=initial.y.copy(),
            time=self.time,
        )
