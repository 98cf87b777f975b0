"""
Configuration management for cubepack.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects for the generator, the solver, logging
and the per-difficulty profiles.
"""

import os
import warnings
import yaml
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path

from cubepack.core.base import DifficultyLevel
from cubepack.core.registry import TARGET_SHAPE_REGISTRY


@dataclass
class DifficultyProfile:
    """Generation parameters of one difficulty tier."""
    min_pieces: int
    max_pieces: int
    target_blocks: int
    time_limit: float
    min_solutions: int = 1
    max_solutions: int = 1
    score_multiplier: float = 1.0
    display_name: str = ""
    display_color: str = "white"

    def __post_init__(self):
        if not isinstance(self.min_pieces, int) or self.min_pieces <= 0:
            raise ValueError("min_pieces must be a positive integer")
        if not isinstance(self.max_pieces, int) or self.max_pieces < self.min_pieces:
            raise ValueError("max_pieces must be an integer no smaller than min_pieces")
        if not isinstance(self.target_blocks, int) or self.target_blocks <= 0:
            raise ValueError("target_blocks must be a positive integer")
        if not isinstance(self.time_limit, (float, int)) or self.time_limit <= 0:
            raise ValueError("time_limit must be a positive number")
        if self.max_solutions < self.min_solutions:
            raise ValueError("max_solutions must be no smaller than min_solutions")
        if self.target_blocks % 2:
            warnings.warn(
                f"target_blocks={self.target_blocks} is odd; greedy selections that hit it "
                f"exactly can never fill a two-layer footprint."
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SolverConfig:
    """Configuration for the backtracking solver."""
    max_nodes: int = 200000
    board_margin: int = 2
    prune_regions: bool = True

    def __post_init__(self):
        if not isinstance(self.max_nodes, int) or self.max_nodes <= 0:
            raise ValueError("max_nodes must be a positive integer")
        if not isinstance(self.board_margin, int) or self.board_margin < 0:
            raise ValueError("board_margin must be a non-negative integer")


@dataclass
class GeneratorConfig:
    """Configuration for the puzzle generator retry loop."""
    max_attempts: int = 100
    seed: Optional[int] = None
    fallback_to_unverified: bool = False
    rounds_per_tier: int = 2
    shaped_difficulties: List[str] = field(default_factory=lambda: ["hard", "expert"])
    shapes: List[str] = field(default_factory=lambda: ["rectangle", "l_shape", "t_shape"])

    def __post_init__(self):
        if not isinstance(self.max_attempts, int) or self.max_attempts <= 0:
            raise ValueError("max_attempts must be a positive integer")
        if not isinstance(self.rounds_per_tier, int) or self.rounds_per_tier <= 0:
            raise ValueError("rounds_per_tier must be a positive integer")
        for name in self.shaped_difficulties:
            # Raises ValueError for unknown tiers
            DifficultyLevel(name)
        if not self.shapes:
            raise ValueError("shapes must list at least one target shape")
        if self.max_attempts > 1000:
            warnings.warn(
                f"max_attempts={self.max_attempts} is very large. "
                f"Unsolvable profiles will take a long time to exhaust."
            )


@dataclass
class LoggingConfig:
    """Configuration for logging and generation logs."""
    level: str = "INFO"
    log_dir: str = "logs"
    results_csv_path: str = "generation_results.csv"

    def __post_init__(self):
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a logging level name, got '{self.level}'")
        self.level = self.level.upper()


@dataclass
class Config:
    """Main configuration object."""
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    difficulties: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        generator = GeneratorConfig(**data.get("generator", {}))
        solver = SolverConfig(**data.get("solver", {}))
        logging_config = LoggingConfig(**data.get("logging", {}))

        difficulties = data.get("difficulties", {}) or {}
        known = {f.name for f in fields(DifficultyProfile)}
        for name, overrides in difficulties.items():
            DifficultyLevel(name)
            unknown = set(overrides or {}) - known
            if unknown:
                raise ValueError(f"Unknown fields for difficulty '{name}': {sorted(unknown)}")

        return cls(
            generator=generator,
            solver=solver,
            logging=logging_config,
            difficulties={name: dict(overrides or {}) for name, overrides in difficulties.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            "generator": asdict(self.generator),
            "solver": asdict(self.solver),
            "logging": asdict(self.logging),
            "difficulties": {k: dict(v) for k, v in self.difficulties.items()},
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If fields are missing or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "config.yaml") -> Config:
    """
    Create a default configuration file.

    The file lists every difficulty profile explicitly so it can be edited in
    place.

    Args:
        output_path: Path where to save the default config

    Returns:
        Default Config object
    """
    from cubepack.generation.difficulty import DEFAULT_PROFILES

    config = Config(
        difficulties={
            level.value: profile.to_dict() for level, profile in DEFAULT_PROFILES.items()
        }
    )

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    # Importing the target module registers the built-in shapes
    import cubepack.game.target_area  # noqa: F401
    from cubepack.generation.difficulty import resolve_profiles

    issues = []

    for shape in config.generator.shapes:
        if shape not in TARGET_SHAPE_REGISTRY:
            issues.append(f"ERROR: Unknown target shape '{shape}'")

    try:
        profiles = resolve_profiles(config.difficulties)
    except (TypeError, ValueError) as e:
        issues.append(f"ERROR: Invalid difficulty profile: {e}")
        profiles = {}

    for level, profile in profiles.items():
        if profile.max_pieces > 8:
            issues.append(
                f"ERROR: {level.value} max_pieces={profile.max_pieces} exceeds the catalog size"
            )
        if profile.target_blocks > profile.max_pieces * 4:
            issues.append(
                f"WARNING: {level.value} target_blocks={profile.target_blocks} "
                f"is unreachable with {profile.max_pieces} pieces"
            )
        if profile.target_blocks % 2:
            issues.append(f"WARNING: {level.value} target_blocks should be even")

    if config.solver.max_nodes < 1000:
        issues.append("WARNING: solver max_nodes is very small; most searches will be cut off")

    if config.logging.log_dir and os.path.exists(config.logging.log_dir) \
            and not os.path.isdir(config.logging.log_dir):
        issues.append(f"ERROR: log_dir exists and is not a directory: {config.logging.log_dir}")

    return issues
