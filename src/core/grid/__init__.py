"""Structured grid fields: generic field, positions, velocities, interpolation."""

from .field import Field, shifted_neighbours
from .position import Position
from .velocity import Velocity, ContinuousVelocity, VelocityFunction
from .interpolation import interpolate_fields

__all__ = [
    "Field",
    "shifted_neighbours",
    "Position",
    "Velocity",
    "ContinuousVelocity",
    "VelocityFunction",
    "interpolate_fields",
]
