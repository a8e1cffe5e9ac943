"""
Post-processing module.

Derives diagnostic fields from completed advection runs.

Key classes:
- FTLE: Finite-time Lyapunov exponent field of a flow field
- ScalarField: Plain result container used for plotting
"""

from .fields import ScalarField
from .ftle import FTLE, compute_ftle

__all__ = [
    "ScalarField",
    "FTLE",
    "compute_ftle",
]
