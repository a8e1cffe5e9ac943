"""IO utilities: field files, velocity snapshots, case loader."""

from .field_io import read_field, write_field, write_velocity_snapshots, velocity_file_name
from .case_loader import CaseLoader
from .case import Case

__all__ = [
    "read_field",
    "write_field",
    "write_velocity_snapshots",
    "velocity_file_name",
    "CaseLoader",
    "Case",
]
