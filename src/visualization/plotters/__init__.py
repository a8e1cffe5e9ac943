"""
Plotter modules for different visualization types.
"""

from .contours import ContourPlotter

__all__ = ['ContourPlotter']
