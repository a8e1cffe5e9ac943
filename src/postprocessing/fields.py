"""
Field data containers for post-processing results.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray


@dataclass
class ScalarField:
    """
    A 2D scalar field (e.g. FTLE) with the grid it lives on.

    Attributes:
        data: 2D array of values (nx, ny), i along x
        name: Field name (e.g. "ftle_forward")
        units: Physical units
        XX: X-coordinate meshgrid, same shape as data
        YY: Y-coordinate meshgrid, same shape as data
        time: Time stamp of the field
    """
    data: NDArray
    name: str
    units: str = ""
    XX: Optional[NDArray] = None
    YY: Optional[NDArray] = None
    time: float = 0.0

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    @property
    def min(self) -> float:
        return float(np.nanmin(self.data))

    @property
    def max(self) -> float:
        return float(np.nanmax(self.data))

    @property
    def finite_fraction(self) -> float:
        """Fraction of values that are neither NaN nor infinite."""
        return float(np.isfinite(self.data).mean())

    def __repr__(self) -> str:
        return f"ScalarField({self.name}, shape={self.shape}, range=[{self.min:.4g}, {self.max:.4g}] {self.units})"
