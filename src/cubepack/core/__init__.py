"""
Core modules for cubepack.

This package contains the fundamental components:
- Coordinate type and the tagged enums returned by checks
- Configuration management
- Registry for target-area footprint builders
"""

from cubepack.core.base import (
    REQUIRED_HEIGHT,
    Vec3,
    DifficultyLevel,
    PlacementValidity,
    ValidationErrorKind,
    GenerationStatus,
    FillState,
)

from cubepack.core.config import Config, DifficultyProfile, GeneratorConfig, SolverConfig, LoggingConfig, load_config, create_default_config, validate_config

from cubepack.core.registry import register_target_shape, get_target_shape_builder, TARGET_SHAPE_REGISTRY

__all__ = [
    "REQUIRED_HEIGHT",
    "Vec3",
    "DifficultyLevel",
    "PlacementValidity",
    "ValidationErrorKind",
    "GenerationStatus",
    "FillState",
    "Config",
    "DifficultyProfile",
    "GeneratorConfig",
    "SolverConfig",
    "LoggingConfig",
    "load_config",
    "create_default_config",
    "validate_config",
    "register_target_shape",
    "get_target_shape_builder",
    "TARGET_SHAPE_REGISTRY",
]
