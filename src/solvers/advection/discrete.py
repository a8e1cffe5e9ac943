"""
Flow field driven by discretely sampled velocity snapshots.

Snapshots are plain-text velocity files on a fixed Cartesian data grid,
one per data time, named ``prefix + int(time) + suffix``. Two snapshots
bracketing the current time are held in memory. Each step they are
interpolated linearly in time, then bilinearly in space onto the
particle positions.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple
import numpy as np

from core.errors import DataRangeError, FieldNotSetError
from core.grid import Position, Velocity, interpolate_fields
from core.io.field_io import read_field, velocity_file_name
from .flow_field import FlowField

logger = logging.getLogger(__name__)

# Relative tolerance (in data intervals) for matching times to snapshot times
TIME_TOLERANCE = 1e-9


class DiscreteFlowField(FlowField):
    """
    Advect particles through velocity data read from snapshot files.

    The data grid may differ from the particle grid. Particles that leave
    the data grid are flagged out of bound and keep their last velocity.

    Usage:
        flow = DiscreteFlowField(1000, 500, 100, 50)
        flow.data_position.set_uniform(0, 2, 0, 1)
        flow.initial_position.set_uniform(0, 2, 0, 1)
        flow.set_velocity_file_name_prefix("data/double_gyre_")
        flow.set_data_delta(1)
        flow.set_data_time_range(0, 20)
        flow.set_delta(0.1)
        flow.set_step(200)
        flow.run()

    Stepping past the end of the data time range raises DataRangeError.
    """

    def __init__(self,
                 nx: int,
                 ny: int,
                 data_nx: Optional[int] = None,
                 data_ny: Optional[int] = None,
                 num_workers: int = 2,
                 record_trajectory: bool = False):
        super().__init__(nx, ny, record_trajectory=record_trajectory)
        data_nx = nx if data_nx is None else data_nx
        data_ny = ny if data_ny is None else data_ny

        self._data_position = Position(data_nx, data_ny)
        self._previous_data_velocity = Velocity(data_nx, data_ny, self._data_position)
        self._next_data_velocity = Velocity(data_nx, data_ny, self._data_position)
        self._current_data_velocity = Velocity(data_nx, data_ny, self._data_position)

        self._data_delta: Optional[float] = None
        self._data_time_range: Optional[Tuple[float, float]] = None
        self._anchor_index = 0
        self._prefix = ""
        self._suffix = ".txt"
        self.num_workers = num_workers

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def data_position(self) -> Position:
        return self._data_position

    @property
    def previous_data_velocity(self) -> Velocity:
        return self._previous_data_velocity

    @property
    def next_data_velocity(self) -> Velocity:
        return self._next_data_velocity

    @property
    def current_data_velocity(self) -> Velocity:
        """Temporal interpolation of the bracketing snapshots at the current time."""
        return self._current_data_velocity

    @property
    def data_delta(self) -> Optional[float]:
        return self._data_delta

    def set_velocity_file_name_prefix(self, prefix: str) -> None:
        self._prefix = str(prefix)

    def set_velocity_file_name_suffix(self, suffix: str) -> None:
        self._suffix = str(suffix)

    def velocity_file_name(self, time: float) -> str:
        return velocity_file_name(self._prefix, time, self._suffix)

    def set_data_delta(self, delta: float) -> None:
        if not delta > 0:
            raise ValueError(f"Data interval must be positive, got {delta}")
        self._data_delta = float(delta)

    def set_data_time_range(self, t1: float, t2: float) -> None:
        """Time span covered by the snapshot files; the order of t1, t2 is irrelevant."""
        self._data_time_range = (float(min(t1, t2)), float(max(t1, t2)))

    @property
    def begin_data_time(self) -> float:
        """Data time the integration direction starts from."""
        lo, hi = self._require_time_range()
        return lo if self._direction.sign > 0 else hi

    @property
    def end_data_time(self) -> float:
        """Data time the integration direction runs towards."""
        lo, hi = self._require_time_range()
        return hi if self._direction.sign > 0 else lo

    def _require_time_range(self) -> Tuple[float, float]:
        if self._data_time_range is None:
            raise ValueError("Data time range not set; call set_data_time_range() first")
        return self._data_time_range

    # -------------------------------------------------------------------------
    # Bracket management
    # -------------------------------------------------------------------------

    @property
    def _last_anchor_index(self) -> int:
        lo, hi = self._require_time_range()
        return int(np.floor((hi - lo) / self._data_delta + TIME_TOLERANCE)) - 1

    def _anchor_index_at(self, time: float) -> int:
        """Index of the last snapshot at or before ``time`` along the direction."""
        offset = self._direction.sign * (time - self.begin_data_time) / self._data_delta
        if offset < -TIME_TOLERANCE:
            raise DataRangeError(
                f"Time {time:g} is before the velocity data range starting at {self.begin_data_time:g}"
            )
        if self._direction.sign * (time - self.end_data_time) / self._data_delta > TIME_TOLERANCE:
            raise DataRangeError(
                f"Time {time:g} is past the end of the velocity data at {self.end_data_time:g}"
            )
        index = int(np.floor(offset + TIME_TOLERANCE))
        return min(max(index, 0), self._last_anchor_index)

    def _read_data_velocity(self, velocity: Velocity) -> None:
        expected_time = velocity.time
        file_name = self.velocity_file_name(expected_time)
        read_field(velocity, file_name)
        velocity.update_time(expected_time)
        logger.info("Read velocity data at time = %g from %s", expected_time, file_name)

    def _load_bracket(self, index: int) -> None:
        """Load the snapshots at anchor ``index`` and the one after it."""
        signed_data_delta = self._direction.sign * self._data_delta
        previous_time = self.begin_data_time + index * signed_data_delta
        self._previous_data_velocity.update_time(previous_time)
        self._next_data_velocity.update_time(previous_time + signed_data_delta)

        buffers = (self._previous_data_velocity, self._next_data_velocity)
        if self.num_workers > 1:
            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                futures = [executor.submit(self._read_data_velocity, v) for v in buffers]
                for future in futures:
                    future.result()
        else:
            for v in buffers:
                self._read_data_velocity(v)

        self._anchor_index = index

    # -------------------------------------------------------------------------
    # FlowField hooks
    # -------------------------------------------------------------------------

    def _prepare_run(self) -> None:
        if self._data_delta is None:
            raise ValueError("Data interval not set; call set_data_delta() first")
        if not self._data_position.has_axes:
            raise FieldNotSetError("Data grid axes not set; use data_position.set_uniform() or set_axes()")
        if self._last_anchor_index < 0:
            raise DataRangeError("Velocity data range must span at least two snapshots")

        position = self.current_position
        position.initialize_out_of_bound()
        xmin, xmax, ymin, ymax = self._data_position.extent
        position.set_bound(xmin, xmax, ymin, ymax)

        self._current_velocity = Velocity(self._nx, self._ny, position, self._time)

        self._load_bracket(self._anchor_index_at(self._initial_time))

    def _compute_velocity(self, signed_delta: float) -> Velocity:
        index = self._anchor_index_at(self._time)
        if index > self._anchor_index:
            logger.info("Advancing velocity data bracket at time = %g", self._time)
            self._load_bracket(index)

        interpolate_fields(self._previous_data_velocity.time,
                           self._next_data_velocity.time,
                           self._previous_data_velocity,
                           self._next_data_velocity,
                           self._time,
                           self._current_data_velocity)

        velocity = self.current_velocity
        velocity.interpolate_from(self._current_data_velocity)
        velocity.update_time(self._time)
        return velocity
