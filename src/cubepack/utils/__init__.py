"""Utility modules for cubepack."""

from cubepack.utils.logger import GenerationLogger, save_results_to_csv, setup_logging
from cubepack.utils.display import (
    SurveyProgress,
    StatusDisplay,
    LiveLogger,
    format_target_area,
    format_solution_layers,
)

__all__ = [
    "GenerationLogger",
    "save_results_to_csv",
    "setup_logging",
    "SurveyProgress",
    "StatusDisplay",
    "LiveLogger",
    "format_target_area",
    "format_solution_layers",
]
