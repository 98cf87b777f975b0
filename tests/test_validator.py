"""Tests for placement and solution validation."""
import numpy as np
import pytest

from cubepack.core.base import PlacementValidity, ValidationErrorKind, Vec3
from cubepack.game.rotation import get_unique_rotations, rotate_piece
from cubepack.game.target_area import TargetArea
from cubepack.game.validator import (
    ValidationResult,
    calculate_fill_state,
    can_place_piece,
    check_no_protrusion,
    collect_placement_errors,
    is_area_completely_filled,
    validate_placement,
    validate_solution,
)


class TestValidatePlacement:
    """First failing reason of a placement."""

    def test_valid_on_empty_grid(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        assert validate_placement(line3.blocks, Vec3(0, 0, 0), grid, rect_3x2) is PlacementValidity.VALID
        assert can_place_piece(line3.blocks, Vec3(0, 0, 0), grid, rect_3x2)

    def test_height_exceeded_above_second_layer(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        result = validate_placement(line3.blocks, Vec3(0, 2, 0), grid, rect_3x2)
        assert result is PlacementValidity.HEIGHT_EXCEEDED

    def test_height_exceeded_on_tall_grid(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2, height=4)
        result = validate_placement(line3.blocks, Vec3(0, 2, 1), grid, rect_3x2)
        assert result is PlacementValidity.HEIGHT_EXCEEDED

    def test_outside_target_column(self, line3, empty_grid):
        target = TargetArea.l_shaped(3, 2, 1, 1)
        grid = empty_grid(3, 2)
        result = validate_placement(line3.blocks, Vec3(0, 0, 1), grid, target)
        assert result is PlacementValidity.OUTSIDE_TARGET

    def test_out_of_grid_bounds(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        assert validate_placement(line3.blocks, Vec3(1, 0, 0), grid, rect_3x2) is PlacementValidity.OUT_OF_BOUNDS
        assert validate_placement(line3.blocks, Vec3(0, -1, 0), grid, rect_3x2) is PlacementValidity.OUT_OF_BOUNDS

    def test_collision(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        grid[1, 0, 0] = True
        assert validate_placement(line3.blocks, Vec3(0, 0, 0), grid, rect_3x2) is PlacementValidity.COLLISION
        assert validate_placement(line3.blocks, Vec3(0, 1, 0), grid, rect_3x2) is PlacementValidity.VALID

    def test_missing_target_rejects(self, line3, empty_grid):
        grid = empty_grid(3, 2)
        assert validate_placement(line3.blocks, Vec3(0, 0, 0), grid, None) is PlacementValidity.OUTSIDE_TARGET
        assert not can_place_piece(line3.blocks, Vec3(0, 0, 0), grid, None)

    def test_missing_grid_is_out_of_bounds(self, line3, rect_3x2):
        """Without a grid no cell exists, including ones below the floor."""
        for position in (Vec3(0, -1, 0), Vec3(0, 0, 0)):
            assert validate_placement(line3.blocks, position, None, rect_3x2) is PlacementValidity.OUT_OF_BOUNDS
            assert not can_place_piece(line3.blocks, position, None, rect_3x2)
        errors = collect_placement_errors(line3.blocks, Vec3(0, -1, 0), None, rect_3x2)
        assert errors.error_count == 3
        assert all(e.kind is ValidationErrorKind.OUT_OF_BOUNDS for e in errors.errors)

    def test_accepts_tuple_position(self, line3, rect_3x2, empty_grid):
        assert can_place_piece(line3.blocks, (0, 1, 1), empty_grid(3, 2), rect_3x2)

    def test_does_not_modify_grid(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        validate_placement(line3.blocks, Vec3(0, 0, 0), grid, rect_3x2)
        assert not grid.any()

    def test_can_place_agrees_with_validate(self, catalog, empty_grid):
        target = TargetArea.l_shaped(3, 2, 1, 1)
        grid = empty_grid(3, 2)
        grid[0, 0, 0] = True
        piece = catalog.get_by_name("T-Shape")
        for rot in get_unique_rotations(piece.blocks):
            blocks = rotate_piece(piece.blocks, rot)
            for x in range(-1, 4):
                for y in range(-1, 3):
                    for z in range(-1, 3):
                        position = Vec3(x, y, z)
                        expected = validate_placement(blocks, position, grid, target) is PlacementValidity.VALID
                        assert can_place_piece(blocks, position, grid, target) == expected


class TestCollectPlacementErrors:
    """Per-block feedback for a placement."""

    def test_reports_each_failing_block(self, line3, rect_3x2, empty_grid):
        grid = empty_grid(3, 2)
        result = collect_placement_errors(line3.blocks, Vec3(1, 0, 0), grid, rect_3x2)
        assert result.error_count == 1
        assert result.errors[0].position == Vec3(3, 0, 0)
        assert result.errors[0].kind is ValidationErrorKind.OUT_OF_BOUNDS

    def test_clean_placement_has_no_errors(self, line3, rect_3x2, empty_grid):
        result = collect_placement_errors(line3.blocks, Vec3(0, 0, 0), empty_grid(3, 2), rect_3x2)
        assert result.is_valid


class TestValidateSolution:
    """Whole-grid solution checks."""

    def test_full_grid_is_solved(self, rect_3x2):
        grid = np.ones((3, 2, 2), dtype=bool)
        result = validate_solution(grid, rect_3x2)
        assert result.is_solved
        assert is_area_completely_filled(grid, rect_3x2)

    def test_single_missing_top_cell(self, rect_3x2):
        grid = np.ones((3, 2, 2), dtype=bool)
        grid[1, 1, 1] = False
        result = validate_solution(grid, rect_3x2)
        assert not result.is_solved
        assert result.error_count == 1
        issue = result.errors[0]
        assert issue.kind is ValidationErrorKind.INCOMPLETE_FILL
        assert issue.position == Vec3(1, 1, 1)
        assert issue.message == ValidationErrorKind.INCOMPLETE_FILL.default_message

    def test_cells_above_required_height(self, rect_3x2):
        grid = np.ones((3, 3, 2), dtype=bool)
        result = validate_solution(grid, rect_3x2)
        assert result.get_errors(ValidationErrorKind.EXCEEDS_HEIGHT)
        assert result.count_by_kind() == {"ExceedsHeight": 6}

    def test_missing_target(self):
        result = validate_solution(np.ones((3, 2, 2), dtype=bool), None)
        assert result.error_count == 1
        assert result.errors[0].kind is ValidationErrorKind.OUT_OF_BOUNDS
        assert result.errors[0].message == "No target area defined"

    def test_missing_grid(self, rect_3x2):
        result = validate_solution(None, rect_3x2)
        assert result.error_count == rect_3x2.total_cells
        assert not result.has_error(ValidationErrorKind.OUT_OF_BOUNDS)

    def test_target_column_outside_grid(self):
        target = TargetArea.rectangular(4, 2)
        grid = np.ones((3, 2, 2), dtype=bool)
        result = validate_solution(grid, target)
        assert result.count_by_kind() == {"OutOfBounds": 2}

    def test_empty_grid_lists_every_cell(self, rect_3x2, empty_grid):
        result = validate_solution(empty_grid(3, 2), rect_3x2)
        positions = {e.position for e in result.errors}
        assert positions == set(rect_3x2.get_all_cells())


class TestAuxiliaryChecks:
    """Protrusion, fill state and result bookkeeping."""

    def test_protrusion_outside_l_shape(self, empty_grid):
        target = TargetArea.l_shaped(3, 2, 1, 1)
        grid = empty_grid(3, 2)
        grid[0, 0, 0] = True
        grid[2, 1, 1] = True
        result = check_no_protrusion(grid, target)
        assert result.error_count == 1
        assert result.errors[0].position == Vec3(2, 1, 1)

    def test_fill_state_without_target(self, empty_grid):
        state = calculate_fill_state(empty_grid(3, 2), None)
        assert state.total_target == 0
        assert not state.is_complete

    def test_result_merge_and_clear(self):
        first = ValidationResult()
        first.add_error(ValidationErrorKind.COLLISION, Vec3(0, 0, 0))
        second = ValidationResult()
        second.add_error(ValidationErrorKind.INCOMPLETE_FILL, Vec3(1, 0, 0), "custom")
        first.merge(second)
        assert first.error_count == 2
        assert first.errors[1].message == "custom"
        assert first.to_dict()["errors"][0]["kind"] == "Collision"
        first.clear()
        assert first.is_valid

    @pytest.mark.parametrize("kind", [
        ValidationErrorKind.INCOMPLETE_FILL,
        ValidationErrorKind.EXCEEDS_HEIGHT,
        ValidationErrorKind.OUT_OF_BOUNDS,
        ValidationErrorKind.COLLISION,
    ])
    def test_default_messages(self, kind):
        assert kind.default_message != "Unknown validation error"
