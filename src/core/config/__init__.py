"""Configuration schemas for case files."""

from .schemas import (
    DirectionType,
    GridConfig,
    IntegrationConfig,
    VelocityConfig,
    FTLEConfig,
    OutputConfig,
    CaseConfig,
)

__all__ = [
    "DirectionType",
    "GridConfig",
    "IntegrationConfig",
    "VelocityConfig",
    "FTLEConfig",
    "OutputConfig",
    "CaseConfig",
]
