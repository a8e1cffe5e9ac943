"""
Particle advection engine.

A FlowField owns a fixed initial position field and, once ``run`` has been
called, a current position/velocity pair. Each step synthesizes a velocity
at the current particle positions and applies an explicit Euler update
with a signed time step. How the velocity is synthesized is left to the
two concrete variants:

- ContinuousFlowField: evaluates an analytic function every step
- DiscreteFlowField: interpolates stored velocity snapshots in time and space
"""

from __future__ import annotations
import logging
import time as _time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from core.errors import FieldNotSetError
from core.grid import Position, Velocity

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Integration direction."""
    FORWARD = "forward"    # repelling structures
    BACKWARD = "backward"  # attracting structures

    @property
    def sign(self) -> float:
        return 1.0 if self is Direction.FORWARD else -1.0


class FlowField(ABC):
    """
    Base class for particle advection over an nx×ny grid of particles.

    Usage:
        flow = ContinuousFlowField(200, 100, DoubleGyreModel())
        flow.initial_position.set_uniform(0, 2, 0, 1)
        flow.set_delta(0.1)
        flow.set_step(200)
        flow.run()

        flow.set_direction(Direction.BACKWARD)
        flow.set_initial_time(20)
        flow.run()
    """

    def __init__(self, nx: int, ny: int, record_trajectory: bool = False):
        self._nx = int(nx)
        self._ny = int(ny)
        self._delta: Optional[float] = None
        self._step = 0
        self._direction = Direction.FORWARD
        self._initial_time = 0.0
        self._time = 0.0

        self._initial_position = Position(nx, ny)
        self._current_position: Optional[Position] = None
        self._current_velocity: Optional[Velocity] = None

        self.record_trajectory = record_trajectory
        self._trajectory: Optional[NDArray] = None

    # -------------------------------------------------------------------------
    # Variant hooks
    # -------------------------------------------------------------------------

    def _prepare_run(self) -> None:
        """Called at run start, after the current position has been reset."""
        pass

    @abstractmethod
    def _compute_velocity(self, signed_delta: float) -> Velocity:
        """Velocity at the current positions and time; stored as the current velocity."""
        pass

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._nx, self._ny)

    @property
    def initial_position(self) -> Position:
        return self._initial_position

    @property
    def current_position(self) -> Position:
        if self._current_position is None:
            raise FieldNotSetError("current position not set; call run() first")
        return self._current_position

    @property
    def current_velocity(self) -> Velocity:
        if self._current_velocity is None:
            raise FieldNotSetError("current velocity not set; call run() first")
        return self._current_velocity

    @property
    def trajectory(self) -> NDArray:
        """Positions after every step, shape (steps + 1, nx, ny, 2)."""
        if self._trajectory is None:
            raise FieldNotSetError("trajectory not recorded; set record_trajectory=True and run()")
        return self._trajectory

    # -------------------------------------------------------------------------
    # Integration parameters
    # -------------------------------------------------------------------------

    @property
    def time(self) -> float:
        return self._time

    @property
    def initial_time(self) -> float:
        return self._initial_time

    @property
    def delta(self) -> Optional[float]:
        return self._delta

    @property
    def step(self) -> int:
        return self._step

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def signed_delta(self) -> float:
        if self._delta is None:
            raise ValueError("Time step not set; call set_delta() first")
        return self._direction.sign * self._delta

    def set_delta(self, delta: float) -> None:
        if not delta > 0:
            raise ValueError(f"Time step must be positive, got {delta}")
        self._delta = float(delta)

    def set_step(self, step: int) -> None:
        if step < 0:
            raise ValueError(f"Step count must be non-negative, got {step}")
        self._step = int(step)

    def set_direction(self, direction: Union[Direction, str]) -> None:
        self._direction = Direction(direction)

    def set_initial_time(self, time: float) -> None:
        self._initial_time = float(time)
        self._initial_position.update_time(time)
        self._update_time(time)

    def _update_time(self, time: float) -> None:
        self._time = float(time)
        if self._current_position is not None:
            self._current_position.update_time(self._time)
        if self._current_velocity is not None:
            self._current_velocity.update_time(self._time)

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------

    def run(self) -> FlowField:
        """
        Advect the initial positions for the configured number of steps.

        The current position and velocity are rebuilt from the initial
        position at every call, so repeated runs are independent.

        Returns:
            self
        """
        signed_delta = self.signed_delta

        self._current_velocity = None
        self._current_position = Position(self._nx, self._ny)
        self._current_position.copy_from(self._initial_position)
        self._update_time(self._initial_time)
        self._prepare_run()

        self._trajectory = None
        if self.record_trajectory:
            self._trajectory = np.empty((self._step + 1, self._nx, self._ny, 2))
            self._trajectory[0] = self._current_position.data

        logger.info("Particle advection begins: %s, t0 = %g, %d steps of %g",
                    self._direction.value, self._initial_time, self._step, self._delta)
        start = _time.perf_counter()

        for i in range(self._step):
            step_start = _time.perf_counter()
            logger.debug("Step %d (time = %g) begins", i, self._time)

            velocity = self._compute_velocity(signed_delta)
            self._current_position.update(velocity, signed_delta)
            self._update_time(self._time + signed_delta)

            if self._trajectory is not None:
                self._trajectory[i + 1] = self._current_position.data

            logger.debug("Step %d (time = %g) ends in %.4fs", i, self._time,
                         _time.perf_counter() - step_start)

        logger.info("Particle advection ends at t = %g (%.3fs)", self._time,
                    _time.perf_counter() - start)
        return self

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(shape={self.shape}, direction={self._direction.value}, "
                f"delta={self._delta}, step={self._step}, t={self._time:.4g})")
