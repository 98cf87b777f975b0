"""
Placement and solution validation.

All functions are pure: they read an occupancy grid (a numpy bool array
indexed [x, y, z]) and a target area and never modify either. Problems are
reported as data, a PlacementValidity tag or a ValidationResult.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np

from cubepack.core.base import (
    REQUIRED_HEIGHT,
    FillState,
    PlacementValidity,
    ValidationErrorKind,
    Vec3,
    to_vec3_list,
)
from cubepack.game.target_area import TargetArea


@dataclass(frozen=True)
class ValidationIssue:
    """A single recorded problem."""
    kind: ValidationErrorKind
    position: Vec3
    message: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "position": list(self.position.to_tuple()),
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Accumulated validation issues; valid iff empty."""
    errors: List[ValidationIssue] = field(default_factory=list)

    def add_error(self, kind: ValidationErrorKind, position: Vec3,
                  message: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(kind, position, message or kind.default_message))

    def merge(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_solved(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def has_error(self, kind: ValidationErrorKind) -> bool:
        return any(e.kind == kind for e in self.errors)

    def get_errors(self, kind: ValidationErrorKind) -> List[ValidationIssue]:
        return [e for e in self.errors if e.kind == kind]

    def count_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for e in self.errors:
            counts[e.kind.value] = counts.get(e.kind.value, 0) + 1
        return counts

    def clear(self) -> None:
        self.errors.clear()

    def to_dict(self) -> Dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "errors": [e.to_dict() for e in self.errors],
        }


def _block_validity(cell: Vec3, grid: Optional[np.ndarray],
                    target: Optional[TargetArea]) -> PlacementValidity:
    # A missing grid has no cells.
    if grid is None:
        return PlacementValidity.OUT_OF_BOUNDS
    width, height, depth = grid.shape
    if not (0 <= cell.x < width and 0 <= cell.z < depth) or cell.y < 0:
        return PlacementValidity.OUT_OF_BOUNDS
    if cell.y >= REQUIRED_HEIGHT:
        return PlacementValidity.HEIGHT_EXCEEDED
    if target is None or not target.contains(cell.x, cell.z):
        return PlacementValidity.OUTSIDE_TARGET
    if cell.y >= height:
        return PlacementValidity.OUT_OF_BOUNDS
    if grid[cell.x, cell.y, cell.z]:
        return PlacementValidity.COLLISION
    return PlacementValidity.VALID


def world_cells(blocks: Iterable[Vec3], position: Vec3) -> List[Vec3]:
    """Translate local block offsets to world cells."""
    if not isinstance(position, Vec3):
        position = Vec3.from_list(position)
    return [position + b for b in to_vec3_list(blocks)]


def validate_placement(blocks: Iterable[Vec3], position: Vec3,
                       grid: Optional[np.ndarray],
                       target: Optional[TargetArea]) -> PlacementValidity:
    """
    First failing reason for placing `blocks` at `position`.

    Blocks are checked in order; for each block the checks run as grid
    bounds, height, target membership, then occupancy. Without a grid
    every block is out of bounds.
    """
    for cell in world_cells(blocks, position):
        validity = _block_validity(cell, grid, target)
        if validity is not PlacementValidity.VALID:
            return validity
    return PlacementValidity.VALID


def can_place_piece(blocks: Iterable[Vec3], position: Vec3,
                    grid: Optional[np.ndarray],
                    target: Optional[TargetArea]) -> bool:
    return validate_placement(blocks, position, grid, target) is PlacementValidity.VALID


_VALIDITY_TO_KIND = {
    PlacementValidity.OUT_OF_BOUNDS: ValidationErrorKind.OUT_OF_BOUNDS,
    PlacementValidity.OUTSIDE_TARGET: ValidationErrorKind.OUT_OF_BOUNDS,
    PlacementValidity.HEIGHT_EXCEEDED: ValidationErrorKind.EXCEEDS_HEIGHT,
    PlacementValidity.COLLISION: ValidationErrorKind.COLLISION,
}


def collect_placement_errors(blocks: Iterable[Vec3], position: Vec3,
                             grid: Optional[np.ndarray],
                             target: Optional[TargetArea]) -> ValidationResult:
    """Every failing block of a proposed placement, for targeted feedback."""
    result = ValidationResult()
    for cell in world_cells(blocks, position):
        validity = _block_validity(cell, grid, target)
        if validity is not PlacementValidity.VALID:
            result.add_error(_VALIDITY_TO_KIND[validity], cell)
    return result


def validate_solution(grid: Optional[np.ndarray],
                      target: Optional[TargetArea]) -> ValidationResult:
    """
    Check that every target column is filled exactly to the required height.

    Args:
        grid: Occupancy grid indexed [x, y, z]
        target: Target area to check against

    Returns:
        ValidationResult; solved iff it holds no errors
    """
    result = ValidationResult()

    if target is None:
        result.add_error(ValidationErrorKind.OUT_OF_BOUNDS, Vec3(0, 0, 0), "No target area defined")
        return result

    if grid is None:
        for cell in target.get_all_cells():
            result.add_error(ValidationErrorKind.INCOMPLETE_FILL, cell)
        return result

    width, height, depth = grid.shape
    for x, z in target.get_column_positions():
        if not (0 <= x < width and 0 <= z < depth):
            result.add_error(ValidationErrorKind.OUT_OF_BOUNDS, Vec3(x, 0, z),
                             "Target column lies outside the grid")
            continue
        for y in range(REQUIRED_HEIGHT):
            if y >= height or not grid[x, y, z]:
                result.add_error(ValidationErrorKind.INCOMPLETE_FILL, Vec3(x, y, z))
        for y in range(REQUIRED_HEIGHT, height):
            if grid[x, y, z]:
                result.add_error(ValidationErrorKind.EXCEEDS_HEIGHT, Vec3(x, y, z))

    return result


def check_no_protrusion(grid: Optional[np.ndarray],
                        target: Optional[TargetArea]) -> ValidationResult:
    """Filled cells whose column is not part of the target."""
    result = ValidationResult()
    if grid is None:
        return result
    if target is None:
        result.add_error(ValidationErrorKind.OUT_OF_BOUNDS, Vec3(0, 0, 0), "No target area defined")
        return result
    for x, y, z in zip(*np.nonzero(grid)):
        if not target.contains(int(x), int(z)):
            result.add_error(ValidationErrorKind.OUT_OF_BOUNDS, Vec3(int(x), int(y), int(z)))
    return result


def calculate_fill_state(grid: Optional[np.ndarray],
                         target: Optional[TargetArea]) -> FillState:
    if target is None:
        return FillState(0, 0, 0)
    return target.calculate_fill_state(grid)


def is_area_completely_filled(grid: Optional[np.ndarray],
                              target: Optional[TargetArea]) -> bool:
    return validate_solution(grid, target).is_solved
