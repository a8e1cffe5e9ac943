"""
Plain-text field files.

Layout (whitespace separated, one value per line when written):

    nx
    ny
    time
    v(0,0)[0]
    v(0,0)[1]
    v(0,1)[0]
    ...

Records are row-major with i outer and j inner; each record lists the
node's components in order (x then y for vector fields).
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union
import numpy as np

from ..errors import DimensionError, FieldFormatError

if TYPE_CHECKING:
    from ..grid import Field, Position, VelocityFunction

logger = logging.getLogger(__name__)


def velocity_file_name(prefix: str, time: float, suffix: str = ".txt") -> str:
    """Snapshot file name for a data time: prefix + int(time) + suffix."""
    return f"{prefix}{int(time)}{suffix}"


def read_field(field: Field, file_name: Union[str, Path]) -> Field:
    """
    Read a field file into an existing field.

    The header shape must match the field; the time stamp is taken from
    the file as is.

    Raises:
        FileNotFoundError: file does not exist
        DimensionError: header shape differs from the field shape
        FieldFormatError: header or records cannot be parsed, or the record
            count differs from the header
    """
    path = Path(file_name)
    if not path.is_file():
        raise FileNotFoundError(f"Field file not found: {path}")

    with open(path, "r") as f:
        tokens = f.read().split()

    if len(tokens) < 3:
        raise FieldFormatError(f"{path}: missing header (nx, ny, time)")

    try:
        nx, ny = int(tokens[0]), int(tokens[1])
        time = float(tokens[2])
    except ValueError as e:
        raise FieldFormatError(f"{path}: invalid header: {e}") from e

    if (nx, ny) != field.shape:
        raise DimensionError(f"{path}: sizes do not match, file has ({nx}, {ny}), field has {field.shape}")

    expected = nx * ny * field.size
    values = tokens[3:]
    if len(values) != expected:
        raise FieldFormatError(f"{path}: expected {expected} values, found {len(values)}")

    try:
        data = np.array(values, dtype=np.float64)
    except ValueError as e:
        raise FieldFormatError(f"{path}: invalid value: {e}") from e

    field.set_all(data.reshape(nx, ny, field.size))
    field.update_time(time)
    return field


def write_field(field: Field, file_name: Union[str, Path]) -> Path:
    """Write a field to a text file, creating parent directories as needed."""
    path = Path(file_name)
    path.parent.mkdir(parents=True, exist_ok=True)

    nx, ny = field.shape
    with open(path, "w") as f:
        f.write(f"{nx}\n{ny}\n{field.time!r}\n")
        np.savetxt(f, field.data.reshape(-1), fmt="%.17g")

    return path


def write_velocity_snapshots(position: Position,
                             function: VelocityFunction,
                             times: Iterable[float],
                             prefix: str,
                             suffix: str = ".txt",
                             directory: Optional[Union[str, Path]] = None) -> List[Path]:
    """
    Sample an analytic velocity on a grid at several times and write one
    snapshot file per time.

    Args:
        position: Grid to sample on
        function: Velocity function f(x, y, t) -> (vx, vy)
        times: Snapshot times
        prefix: File name prefix (may include a directory part)
        suffix: File name suffix
        directory: Optional directory the names are resolved against

    Returns:
        Paths of the written files
    """
    from ..grid import ContinuousVelocity

    base = Path(directory) if directory is not None else Path(".")
    velocity = ContinuousVelocity(position, function)
    paths = []

    for t in times:
        velocity.update_time(t)
        velocity.evaluate()
        paths.append(write_field(velocity, base / velocity_file_name(prefix, t, suffix)))

    logger.info("Wrote %d velocity snapshots with prefix '%s' to %s", len(paths), prefix, base)
    return paths
