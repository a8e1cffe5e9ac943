"""Visualization module for FTLE fields."""

from .plotters import ContourPlotter

__all__ = [
    'ContourPlotter',
]
