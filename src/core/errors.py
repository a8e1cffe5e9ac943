"""
Exception types raised by the grid, I/O and advection layers.
"""


class DimensionError(ValueError):
    """Raised when a field shape does not match the expected grid shape."""
    pass


class FieldFormatError(ValueError):
    """Raised when a field file cannot be parsed."""
    pass


class FieldNotSetError(RuntimeError):
    """Raised when a field is queried before it has been computed."""
    pass


class DataRangeError(RuntimeError):
    """Raised when integration leaves the time range covered by the velocity data."""
    pass
