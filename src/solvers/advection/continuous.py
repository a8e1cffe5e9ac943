"""
Flow field driven by an analytic velocity function.
"""

from __future__ import annotations
from typing import Optional, Sequence, Union

from core.grid import ContinuousVelocity, VelocityFunction
from .flow_field import FlowField
from .velocity_functions import get_velocity_model


def resolve_velocity_function(function: Union[str, type, VelocityFunction],
                              parameters: Optional[Sequence[float]] = None) -> VelocityFunction:
    """
    Turn a model name, model class or callable into a velocity function.

    Parameters are only accepted together with a name or a class exposing
    ``from_parameters``.
    """
    if isinstance(function, str):
        return get_velocity_model(function, parameters)

    if isinstance(function, type):
        if parameters is None:
            return function()
        if not hasattr(function, "from_parameters"):
            raise ValueError(f"{function.__name__} cannot be built from a parameter vector")
        return function.from_parameters(parameters)

    if parameters is not None:
        raise ValueError("parameters can only be given with a model name or model class")
    if not callable(function):
        raise TypeError(f"Velocity function must be callable, got {type(function).__name__}")
    return function


class ContinuousFlowField(FlowField):
    """
    Advect particles through an analytic velocity field.

    The velocity is evaluated exactly at the current particle positions
    every step; no out-of-bound tracking is done.

    Args:
        nx, ny: Particle grid shape
        function: Callable f(x, y, t) -> (vx, vy), a model class, or a
            registered model name such as "double_gyre"
        parameters: Optional model parameter vector
    """

    def __init__(self,
                 nx: int,
                 ny: int,
                 function: Union[str, type, VelocityFunction],
                 parameters: Optional[Sequence[float]] = None,
                 record_trajectory: bool = False):
        super().__init__(nx, ny, record_trajectory=record_trajectory)
        self._function = resolve_velocity_function(function, parameters)

    @property
    def function(self) -> VelocityFunction:
        return self._function

    def _compute_velocity(self, signed_delta: float) -> ContinuousVelocity:
        velocity = ContinuousVelocity(self.current_position, self._function, self._time)
        self._current_velocity = velocity
        return velocity
