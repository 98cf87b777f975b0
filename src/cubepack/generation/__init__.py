"""Level generation: difficulty profiles, the solver and the generator."""

from cubepack.generation.difficulty import (
    DEFAULT_PROFILES,
    AdaptiveDifficultyState,
    resolve_profiles,
    get_profile,
    difficulty_for_round,
    legacy_time_limit,
    legacy_piece_count,
)
from cubepack.generation.solver import BacktrackingSolver, PiecePlacement, SolveStats, solution_grid, verify_solution
from cubepack.generation.generator import PuzzleGenerator, LevelDescriptor, GenerationResult

__all__ = [
    "DEFAULT_PROFILES",
    "AdaptiveDifficultyState",
    "resolve_profiles",
    "get_profile",
    "difficulty_for_round",
    "legacy_time_limit",
    "legacy_piece_count",
    "BacktrackingSolver",
    "PiecePlacement",
    "SolveStats",
    "solution_grid",
    "verify_solution",
    "PuzzleGenerator",
    "LevelDescriptor",
    "GenerationResult",
]
