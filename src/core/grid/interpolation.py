"""
Linear interpolation in time between two field snapshots.
"""

from __future__ import annotations
from typing import TypeVar

from ..errors import DimensionError
from .field import Field

F = TypeVar("F", bound=Field)


def interpolate_fields(x1: float, x2: float, f1: Field, f2: Field, xm: float, result: F) -> F:
    """
    Write the linear interpolation of two snapshots at ``xm`` into ``result``.

    f(xm) = f1 + (xm - x1) / (x2 - x1) * (f2 - f1), applied to every
    component. Values outside [x1, x2] are extrapolated. When x1 == x2 the
    first snapshot is copied unchanged.

    Returns:
        ``result``
    """
    if f1.data.shape != f2.data.shape or f1.data.shape != result.data.shape:
        raise DimensionError(
            f"Cannot interpolate fields of shapes {f1.data.shape}, {f2.data.shape} "
            f"into {result.data.shape}"
        )

    if x1 == x2:
        result.data[...] = f1.data
    else:
        # weighted form keeps both end points exact
        w = (xm - x1) / (x2 - x1)
        result.data[...] = (1.0 - w) * f1.data + w * f2.data

    result.update_time(xm)
    return result
