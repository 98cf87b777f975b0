"""
Difficulty profiles and adaptive difficulty tracking.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

from cubepack.core.base import DifficultyLevel
from cubepack.core.config import DifficultyProfile


ADAPTIVE_SUCCESS_THRESHOLD = 3
ADAPTIVE_FAILURE_THRESHOLD = 2

# No 3x2, 4x2 or 5x2 footprint tiles with distinct catalog pieces, so easy and medium get 1-deep strips.
# Distinct catalog pieces never tile a 3x2, 4x2 or 5x2 footprint, so easy and medium targets come out as one-deep strips.
DEFAULT_PROFILES: Dict[DifficultyLevel, DifficultyProfile] = {
    DifficultyLevel.EASY: DifficultyProfile(
        min_pieces=3, max_pieces=3, target_blocks=10, time_limit=90.0,
        min_solutions=1, max_solutions=4, score_multiplier=1.0,
        display_name="Easy", display_color="green",
    ),
    DifficultyLevel.MEDIUM: DifficultyProfile(
        min_pieces=3, max_pieces=4, target_blocks=14, time_limit=75.0,
        min_solutions=1, max_solutions=3, score_multiplier=1.5,
        display_name="Medium", display_color="yellow",
    ),
    DifficultyLevel.HARD: DifficultyProfile(
        min_pieces=4, max_pieces=5, target_blocks=18, time_limit=60.0,
        min_solutions=1, max_solutions=2, score_multiplier=2.0,
        display_name="Hard", display_color="blue",
    ),
    DifficultyLevel.EXPERT: DifficultyProfile(
        min_pieces=5, max_pieces=6, target_blocks=22, time_limit=45.0,
        min_solutions=1, max_solutions=1, score_multiplier=2.5,
        display_name="Expert", display_color="red",
    ),
}


def resolve_profiles(overrides: Optional[Mapping[str, Mapping[str, Any]]] = None
                     ) -> Dict[DifficultyLevel, DifficultyProfile]:
    """Default profiles with per-field overrides keyed by difficulty name."""
    profiles = dict(DEFAULT_PROFILES)
    for name, fields in (overrides or {}).items():
        level = DifficultyLevel(name)
        profiles[level] = replace(profiles[level], **dict(fields))
    return profiles


def get_profile(level: DifficultyLevel,
                profiles: Optional[Mapping[DifficultyLevel, DifficultyProfile]] = None
                ) -> DifficultyProfile:
    return (profiles or {}).get(level, DEFAULT_PROFILES[level])


def difficulty_for_round(round_number: int, rounds_per_tier: int = 2) -> DifficultyLevel:
    """Rounds 1..n map onto the tiers in blocks of `rounds_per_tier`."""
    return DifficultyLevel.from_int(1 + (max(round_number, 1) - 1) // rounds_per_tier)


def legacy_time_limit(level_number: int) -> float:
    """Time limit of the fixed level progression: 60 s plus 5 s per level."""
    return 60.0 + level_number * 5


def legacy_piece_count(level_number: int) -> int:
    """Piece count of the fixed level progression, capped at 6."""
    return min(3 + level_number // 2, 6)


@dataclass(frozen=True)
class AdaptiveDifficultyState:
    """
    Immutable streak tracker recommending a difficulty tier.

    Three consecutive successes recommend the next tier, two consecutive
    failures the previous one. A tier change resets the streak.
    """
    consecutive_successes: int = 0
    consecutive_failures: int = 0
    recommended_level: DifficultyLevel = DifficultyLevel.EASY

    @property
    def should_increase_difficulty(self) -> bool:
        return self.consecutive_successes >= ADAPTIVE_SUCCESS_THRESHOLD

    @property
    def should_decrease_difficulty(self) -> bool:
        return self.consecutive_failures >= ADAPTIVE_FAILURE_THRESHOLD

    def record_success(self) -> "AdaptiveDifficultyState":
        successes = self.consecutive_successes + 1
        level = self.recommended_level
        if successes >= ADAPTIVE_SUCCESS_THRESHOLD and level is not DifficultyLevel.EXPERT:
            level = DifficultyLevel.from_int(level.to_int() + 1)
            successes = 0
        return AdaptiveDifficultyState(successes, 0, level)

    def record_failure(self) -> "AdaptiveDifficultyState":
        failures = self.consecutive_failures + 1
        level = self.recommended_level
        if failures >= ADAPTIVE_FAILURE_THRESHOLD and level is not DifficultyLevel.EASY:
            level = DifficultyLevel.from_int(level.to_int() - 1)
            failures = 0
        return AdaptiveDifficultyState(0, failures, level)

    def reset(self) -> "AdaptiveDifficultyState":
        return AdaptiveDifficultyState(recommended_level=self.recommended_level)
