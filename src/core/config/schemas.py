"""
Pydantic schemas for case file validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Tuple, Optional, Literal
from enum import Enum


class DirectionType(str, Enum):
    """Valid integration directions."""
    FORWARD = "forward"
    BACKWARD = "backward"


class GridConfig(BaseModel):
    """Uniform Cartesian grid."""
    model_config = ConfigDict(extra="forbid")

    nx: int = Field(..., ge=2, description="Number of nodes along x")
    ny: int = Field(..., ge=2, description="Number of nodes along y")
    x_range: Tuple[float, float] = Field(..., description="(xmin, xmax)")
    y_range: Tuple[float, float] = Field(..., description="(ymin, ymax)")

    @field_validator('x_range', 'y_range')
    @classmethod
    def check_increasing(cls, v):
        """Axes must be strictly increasing."""
        if not v[1] > v[0]:
            raise ValueError(f"range must be increasing, got {v}")
        return v


class IntegrationConfig(BaseModel):
    """Time integration settings."""
    model_config = ConfigDict(extra="forbid")

    delta: float = Field(..., gt=0, description="Integration time step")
    steps: int = Field(..., ge=0, description="Number of steps per run")
    initial_time: float = Field(default=0.0, description="Start time of forward runs")
    directions: List[DirectionType] = Field(
        default=[DirectionType.FORWARD],
        min_length=1,
        description="Runs to perform, in order"
    )
    backward_initial_time: Optional[float] = Field(
        default=None,
        description="Start time of backward runs (default: initial_time + steps*delta)"
    )

    def start_time(self, direction: DirectionType) -> float:
        """Initial time for a run in the given direction."""
        if direction == DirectionType.BACKWARD:
            if self.backward_initial_time is not None:
                return self.backward_initial_time
            return self.initial_time + self.steps * self.delta
        return self.initial_time


class VelocityConfig(BaseModel):
    """Velocity source: analytic model or discrete snapshot files."""
    model_config = ConfigDict(extra="forbid")

    kind: Literal["analytic", "discrete"] = Field(..., description="Velocity source type")

    # analytic
    model: Optional[str] = Field(default=None, description="Registered analytic model name")
    parameters: Optional[List[float]] = Field(default=None, description="Model parameter vector")

    # discrete
    data_grid: Optional[GridConfig] = Field(default=None, description="Grid of the snapshot data")
    directory: str = Field(default=".", description="Snapshot directory (relative to the case file)")
    prefix: str = Field(default="", description="Snapshot file name prefix")
    suffix: str = Field(default=".txt", description="Snapshot file name suffix")
    data_delta: Optional[float] = Field(default=None, gt=0, description="Time between snapshots")
    time_range: Optional[Tuple[float, float]] = Field(default=None, description="Time span covered by the snapshots")
    num_workers: int = Field(default=2, ge=1, description="Threads used to load a snapshot pair")

    @model_validator(mode='after')
    def check_kind_fields(self):
        """Ensure the fields required by the chosen kind are present."""
        if self.kind == "analytic":
            if not self.model:
                raise ValueError("analytic velocity requires 'model'")
        else:
            missing = [name for name in ("data_delta", "time_range") if getattr(self, name) is None]
            if missing:
                raise ValueError(f"discrete velocity requires {missing}")
        return self


class FTLEConfig(BaseModel):
    """FTLE calculation settings."""
    model_config = ConfigDict(extra="forbid")

    num_cores: int = Field(default=1, ge=1, description="Processes for the FTLE row loop")


class OutputConfig(BaseModel):
    """Output configuration."""
    model_config = ConfigDict(extra="forbid")

    directory: str = Field(
        default="./results",
        description="Output directory path"
    )
    write_text: bool = Field(
        default=True,
        description="Write FTLE fields in the plain-text field format"
    )
    plot: bool = Field(
        default=True,
        description="Save FTLE contour plots"
    )
    levels: int = Field(default=50, gt=0, description="Contour levels")
    cmap: str = Field(default="viridis", description="Matplotlib colormap")


class CaseConfig(BaseModel):
    """Top-level case configuration."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(..., description="Case name")
    description: str = Field(default="", description="Case description")

    grid: GridConfig = Field(..., description="Particle grid")
    integration: IntegrationConfig = Field(..., description="Integration settings")
    velocity: VelocityConfig = Field(..., description="Velocity source")

    ftle: FTLEConfig = Field(
        default_factory=FTLEConfig,
        description="FTLE settings"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Output settings"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Check name is not empty."""
        if not v or not v.strip():
            raise ValueError("Case name cannot be empty")
        return v.strip()
