"""
Case class - unified container for all case data.

Provides clean access to:
- Flow field (particle grid + velocity source)
- Integration settings
- FTLE and output settings
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Tuple

from ..config.schemas import CaseConfig, DirectionType

if TYPE_CHECKING:
    from postprocessing.ftle import FTLE
    from solvers.advection import FlowField


@dataclass
class Case:
    """
    Unified container for an advection case.

    Provides direct attribute access to commonly used values:
        case.name
        case.flow_field
        case.directions
        case.resolution
        case.output_dir

    Usage:
        from core.io import CaseLoader

        case = CaseLoader.load_case('cases/double_gyre')
        for direction in case.directions:
            ftle = case.run(direction)
    """

    flow_field: FlowField
    config: CaseConfig
    case_dir: Path

    @property
    def name(self) -> str:
        """Case name."""
        return self.config.name

    @property
    def description(self) -> str:
        """Case description."""
        return self.config.description

    @property
    def directions(self) -> List[DirectionType]:
        """Configured run directions, in order."""
        return list(self.config.integration.directions)

    @property
    def resolution(self) -> Tuple[int, int]:
        """Particle grid (nx, ny)."""
        return (self.config.grid.nx, self.config.grid.ny)

    @property
    def output_dir(self) -> Path:
        """Output directory, resolved against the case directory."""
        directory = Path(self.config.output.directory)
        if not directory.is_absolute():
            directory = self.case_dir / directory
        return directory

    def run(self, direction: DirectionType | str) -> FTLE:
        """
        Advect in one direction and compute the FTLE field of the result.

        Both directions are normalised by the window length |t - t0|, so
        forward and backward fields are positive stretching rates.

        Args:
            direction: "forward" or "backward"

        Returns:
            Calculated FTLE field
        """
        from postprocessing.ftle import FTLE

        direction = DirectionType(direction)
        self.flow_field.set_direction(direction.value)
        self.flow_field.set_initial_time(self.config.integration.start_time(direction))
        self.flow_field.run()

        ftle = FTLE(self.flow_field, absolute_time=True)
        return ftle.calculate(num_cores=self.config.ftle.num_cores)

    def __repr__(self) -> str:
        return f"Case('{self.name}', grid={self.resolution}, velocity={self.config.velocity.kind})"
