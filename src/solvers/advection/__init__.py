"""Particle advection: flow-field engine, analytic and discrete velocity sources."""

from .flow_field import Direction, FlowField
from .continuous import ContinuousFlowField, resolve_velocity_function
from .discrete import DiscreteFlowField
from .velocity_functions import (
    BowerModel,
    DoubleGyreModel,
    VELOCITY_MODELS,
    get_velocity_model,
)

__all__ = [
    "Direction",
    "FlowField",
    "ContinuousFlowField",
    "DiscreteFlowField",
    "resolve_velocity_function",
    "BowerModel",
    "DoubleGyreModel",
    "VELOCITY_MODELS",
    "get_velocity_model",
]
