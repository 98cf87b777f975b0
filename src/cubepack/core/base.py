"""
Base value types and enumerations shared across cubepack.

This module defines the coordinate type used for blocks and grid cells, the
tagged values returned by placement checks, and the derived fill state of a
target area.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum


REQUIRED_HEIGHT = 2


@dataclass(frozen=True, order=True)
class Vec3:
    """Integer 3D coordinate, ordered by (x, y, z)."""
    x: int
    y: int
    z: int

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    @staticmethod
    def from_list(lst: Sequence[int]) -> "Vec3":
        return Vec3(int(lst[0]), int(lst[1]), int(lst[2]))


def to_vec3_list(points) -> List[Vec3]:
    """Accept Vec3 objects or (x, y, z) sequences and return Vec3 objects."""
    return [p if isinstance(p, Vec3) else Vec3.from_list(p) for p in points]


class DifficultyLevel(Enum):
    """Difficulty tiers for generated puzzles."""
    EASY: str = "easy"
    MEDIUM: str = "medium"
    HARD: str = "hard"
    EXPERT: str = "expert"

    def to_int(self) -> int:
        return _DIFFICULTY_ORDER.index(self) + 1

    @classmethod
    def from_int(cls, value: int) -> "DifficultyLevel":
        """Map 1..4 onto the tiers, clamping anything outside that range."""
        index = max(1, min(int(value), len(_DIFFICULTY_ORDER))) - 1
        return _DIFFICULTY_ORDER[index]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_DIFFICULTY_ORDER = [
    DifficultyLevel.EASY,
    DifficultyLevel.MEDIUM,
    DifficultyLevel.HARD,
    DifficultyLevel.EXPERT,
]


class PlacementValidity(Enum):
    """First failing reason of a proposed piece placement."""
    VALID = "Valid"
    OUT_OF_BOUNDS = "OutOfBounds"
    HEIGHT_EXCEEDED = "HeightExceeded"
    OUTSIDE_TARGET = "OutsideTarget"
    COLLISION = "Collision"


class ValidationErrorKind(Enum):
    """Kinds of issues recorded while validating a grid against a target."""
    NONE = "None"
    INCOMPLETE_FILL = "IncompleteFill"
    EXCEEDS_HEIGHT = "ExceedsHeight"
    OUT_OF_BOUNDS = "OutOfBounds"
    COLLISION = "Collision"

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES.get(self, "Unknown validation error")


_DEFAULT_MESSAGES = {
    ValidationErrorKind.INCOMPLETE_FILL: "Cell not filled to required height",
    ValidationErrorKind.EXCEEDS_HEIGHT: "Block exceeds maximum height",
    ValidationErrorKind.OUT_OF_BOUNDS: "Block placed outside target area",
    ValidationErrorKind.COLLISION: "Block collision detected",
}


class GenerationStatus(Enum):
    """Outcome tag of a generation request."""
    SOLVED = "solved"
    EXHAUSTED_RETRIES = "exhausted_retries"


@dataclass(frozen=True)
class FillState:
    """
    Per-layer fill counts of a target area.

    `overflow` counts filled cells above the second layer in target columns;
    a state with overflow is never complete.
    """
    layer0_filled: int
    layer1_filled: int
    target_per_layer: int
    overflow: int = 0

    @property
    def total_filled(self) -> int:
        return self.layer0_filled + self.layer1_filled

    @property
    def total_target(self) -> int:
        return self.target_per_layer * REQUIRED_HEIGHT

    @property
    def layer0_progress(self) -> float:
        if self.target_per_layer <= 0:
            return 0.0
        return self.layer0_filled / self.target_per_layer

    @property
    def layer1_progress(self) -> float:
        if self.target_per_layer <= 0:
            return 0.0
        return self.layer1_filled / self.target_per_layer

    @property
    def total_progress(self) -> float:
        if self.total_target <= 0:
            return 0.0
        return self.total_filled / self.total_target

    @property
    def is_complete(self) -> bool:
        return (
            self.target_per_layer > 0
            and self.layer0_filled == self.target_per_layer
            and self.layer1_filled == self.target_per_layer
            and self.overflow == 0
        )

    def to_dict(self):
        return {
            "layer0_filled": self.layer0_filled,
            "layer1_filled": self.layer1_filled,
            "target_per_layer": self.target_per_layer,
            "overflow": self.overflow,
            "total_progress": self.total_progress,
            "is_complete": self.is_complete,
        }
