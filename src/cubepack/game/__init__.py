"""Puzzle geometry: rotations, pieces, target areas, validation and the board."""

from cubepack.game.rotation import (
    ROTATION_MATRICES,
    generate_24_rotations,
    get_rotation_matrix,
    apply_rotation,
    rotate_piece,
    normalize_points,
    points_to_signature,
    get_unique_rotations,
    get_canonical_form,
    find_inverse_rotation,
)
from cubepack.game.catalog import PieceDefinition, PieceCatalog, STANDARD_PIECES, STANDARD_CATALOG
from cubepack.game.target_area import TargetArea
from cubepack.game.validator import (
    ValidationIssue,
    ValidationResult,
    can_place_piece,
    validate_placement,
    validate_solution,
    check_no_protrusion,
    collect_placement_errors,
    calculate_fill_state,
    is_area_completely_filled,
)
from cubepack.game.board import PuzzleBoard, PlacedPiece

__all__ = [
    "ROTATION_MATRICES",
    "generate_24_rotations",
    "get_rotation_matrix",
    "apply_rotation",
    "rotate_piece",
    "normalize_points",
    "points_to_signature",
    "get_unique_rotations",
    "get_canonical_form",
    "find_inverse_rotation",
    "PieceDefinition",
    "PieceCatalog",
    "STANDARD_PIECES",
    "STANDARD_CATALOG",
    "TargetArea",
    "ValidationIssue",
    "ValidationResult",
    "can_place_piece",
    "validate_placement",
    "validate_solution",
    "check_no_protrusion",
    "collect_placement_errors",
    "calculate_fill_state",
    "is_area_completely_filled",
    "PuzzleBoard",
    "PlacedPiece",
]
