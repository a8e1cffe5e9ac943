"""
YAML case file loader with validation.
"""

from pathlib import Path
from typing import TYPE_CHECKING
import yaml

from ..config.schemas import CaseConfig, GridConfig
from .case import Case

if TYPE_CHECKING:
    from solvers.advection import FlowField


class CaseLoader:
    """Load and validate advection cases from YAML files."""

    @staticmethod
    def load(filepath: str | Path) -> tuple["FlowField", CaseConfig]:
        """
        Load case file and create the flow field it describes.

        Args:
            filepath: Path to YAML case file

        Returns:
            Tuple of (FlowField object, validated config)

        Note:
            Consider using load_case() instead for cleaner access.
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Case file not found: {filepath}")

        # Load YAML
        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f)

        # Validate with Pydantic
        config = CaseConfig(**raw_config)

        flow_field = CaseLoader.build_flow_field(config, base_path=filepath.parent)

        return flow_field, config

    @staticmethod
    def build_flow_field(config: CaseConfig, base_path: Path = Path(".")) -> "FlowField":
        """
        Build a flow field from validated config.

        The flow field is left at its first configured direction and start
        time; the caller switches direction between runs.

        Args:
            config: Validated case config
            base_path: Base directory for resolving relative snapshot paths

        Returns:
            FlowField object (continuous or discrete)
        """
        from solvers.advection import ContinuousFlowField, DiscreteFlowField

        grid = config.grid
        vel = config.velocity

        if vel.kind == "analytic":
            flow_field = ContinuousFlowField(grid.nx, grid.ny, vel.model, vel.parameters)
        else:
            data_grid = vel.data_grid if vel.data_grid is not None else grid
            flow_field = DiscreteFlowField(grid.nx, grid.ny, data_grid.nx, data_grid.ny,
                                           num_workers=vel.num_workers)
            _apply_grid(flow_field.data_position, data_grid)

            directory = Path(vel.directory)
            if not directory.is_absolute():
                directory = base_path / directory
            flow_field.set_velocity_file_name_prefix(str(directory / vel.prefix))
            flow_field.set_velocity_file_name_suffix(vel.suffix)
            flow_field.set_data_delta(vel.data_delta)
            flow_field.set_data_time_range(*vel.time_range)

        _apply_grid(flow_field.initial_position, grid)

        integration = config.integration
        first = integration.directions[0]
        flow_field.set_direction(first.value)
        flow_field.set_initial_time(integration.start_time(first))
        flow_field.set_delta(integration.delta)
        flow_field.set_step(integration.steps)

        return flow_field

    @staticmethod
    def validate(filepath: str | Path) -> bool:
        """
        Validate case file without building the flow field.

        Args:
            filepath: Path to YAML case file

        Returns:
            True if valid, raises ValidationError otherwise
        """
        filepath = Path(filepath)

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f)

        # This will raise ValidationError if invalid
        CaseConfig(**raw_config)

        return True

    @staticmethod
    def load_case(case_dir: str | Path) -> Case:
        """
        Load a case directory and return a Case object.

        This is the recommended way to load cases:
            case = CaseLoader.load_case('cases/double_gyre')
            print(case.name, case.directions)
            case.flow_field.run()

        Args:
            case_dir: Path to case directory (containing case.yaml)

        Returns:
            Case object with flow field, config and helper properties
        """
        case_dir = Path(case_dir)
        case_file = case_dir / "case.yaml"

        if not case_file.exists():
            raise FileNotFoundError(f"No case.yaml found in {case_dir}")

        flow_field, config = CaseLoader.load(case_file)

        return Case(
            flow_field=flow_field,
            config=config,
            case_dir=case_dir
        )


def _apply_grid(position, grid: GridConfig) -> None:
    position.set_uniform(grid.x_range[0], grid.x_range[1], grid.y_range[0], grid.y_range[1])
