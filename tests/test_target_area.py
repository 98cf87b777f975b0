"""Tests for TargetArea and the registered footprint builders."""
import random

import numpy as np
import pytest

from cubepack.core.base import Vec3
from cubepack.core.registry import TARGET_SHAPE_REGISTRY, get_target_shape_builder
from cubepack.game.target_area import (
    TargetArea,
    build_l_shape,
    build_rectangle,
    build_t_shape,
)


class TestConstruction:
    """Shape constructors."""

    def test_rectangular(self, rect_3x2):
        assert rect_3x2.footprint_size == 6
        assert rect_3x2.total_cells == 12
        assert (rect_3x2.width, rect_3x2.depth) == (3, 2)
        assert (rect_3x2.min_x, rect_3x2.min_z) == (0, 0)

    def test_rectangular_rejects_non_positive(self):
        with pytest.raises(ValueError):
            TargetArea.rectangular(0, 2)

    def test_l_shaped_cuts_far_corner(self):
        area = TargetArea.l_shaped(3, 3, 1, 1)
        assert area.footprint_size == 8
        assert not area.contains(2, 2)
        assert area.contains(0, 0)
        assert area.contains(2, 1)
        assert (area.width, area.depth) == (3, 3)

    def test_l_shaped_rejects_cut_as_large_as_rectangle(self):
        with pytest.raises(ValueError):
            TargetArea.l_shaped(3, 3, 3, 1)

    def test_t_shaped_stem_is_centred(self):
        area = TargetArea.t_shaped(3, 1, 1, 2)
        assert area.footprint_size == 5
        assert (area.width, area.depth) == (3, 3)
        assert area.contains(1, 1) and area.contains(1, 2)
        assert not area.contains(0, 1)
        assert not area.contains(2, 2)

    def test_t_shaped_rejects_wide_stem(self):
        with pytest.raises(ValueError):
            TargetArea.t_shaped(2, 1, 3, 1)

    def test_from_mask_indexed_x_then_z(self):
        area = TargetArea.from_mask([[1, 0], [1, 1]])
        assert set(area.get_column_positions()) == {(0, 0), (1, 0), (1, 1)}

    def test_from_mask_rejects_3d(self):
        with pytest.raises(ValueError):
            TargetArea.from_mask(np.ones((2, 2, 2)))

    def test_to_mask_round_trip(self):
        area = TargetArea.l_shaped(4, 3, 2, 1)
        assert TargetArea.from_mask(area.to_mask()) == area

    def test_offset_columns_keep_bounds(self):
        area = TargetArea.from_columns([(5, 7), (6, 7), (6, 8)])
        assert (area.min_x, area.min_z) == (5, 7)
        assert (area.width, area.depth) == (2, 2)


class TestMutation:
    """Bounds are recomputed after every change."""

    def test_add_and_remove_columns(self):
        area = TargetArea()
        assert area.footprint_size == 0
        assert area.width == 0
        area.add_column(2, 3)
        assert (area.min_x, area.min_z, area.width, area.depth) == (2, 3, 1, 1)
        area.add_column(0, 0)
        assert (area.min_x, area.min_z, area.width, area.depth) == (0, 0, 3, 4)
        area.remove_column(2, 3)
        assert (area.width, area.depth) == (1, 1)

    def test_clear(self, rect_3x2):
        rect_3x2.clear()
        assert rect_3x2.footprint_size == 0
        assert rect_3x2.total_cells == 0
        assert rect_3x2.width == 0

    def test_copy_is_independent(self, rect_3x2):
        clone = rect_3x2.copy()
        clone.remove_column(0, 0)
        assert rect_3x2.footprint_size == 6
        assert clone.footprint_size == 5


class TestQueries:
    """Membership and enumeration."""

    def test_contains_cell_limits_height(self, rect_3x2):
        assert rect_3x2.contains_cell(0, 1, 0)
        assert not rect_3x2.contains_cell(0, 2, 0)
        assert not rect_3x2.contains_cell(0, -1, 0)
        assert not rect_3x2.contains_cell(3, 0, 0)

    def test_in_operator(self, rect_3x2):
        assert Vec3(1, 0, 1) in rect_3x2
        assert (1, 1, 1) in rect_3x2
        assert (2, 1) in rect_3x2
        assert (2, 2) not in rect_3x2

    def test_enumeration_is_restartable(self, rect_3x2):
        first = list(rect_3x2.get_all_cells())
        assert first == list(rect_3x2.get_all_cells())
        assert len(first) == rect_3x2.total_cells
        assert len(set(first)) == len(first)

    def test_layer_cells(self, rect_3x2):
        top = list(rect_3x2.get_layer_cells(1))
        assert len(top) == 6
        assert all(c.y == 1 for c in top)
        assert list(rect_3x2.get_layer_cells(2)) == []

    @pytest.mark.parametrize("area", [
        TargetArea.rectangular(5, 1),
        TargetArea.rectangular(4, 3),
        TargetArea.l_shaped(5, 4, 2, 3),
        TargetArea.t_shaped(5, 2, 3, 3),
        TargetArea(),
    ])
    def test_total_cells_is_twice_footprint(self, area):
        assert area.total_cells == area.footprint_size * 2
        assert len(area) == area.footprint_size

    def test_fill_state(self):
        area = TargetArea.rectangular(2, 1)
        grid = np.zeros((2, 2, 1), dtype=bool)
        grid[:, 0, :] = True
        state = area.calculate_fill_state(grid)
        assert (state.layer0_filled, state.layer1_filled, state.target_per_layer) == (2, 0, 2)
        assert state.layer0_progress == 1.0
        assert state.total_progress == 0.5
        assert not state.is_complete

        grid[:, 1, :] = True
        assert area.calculate_fill_state(grid).is_complete

    def test_fill_state_counts_cells_above_top_layer(self, empty_grid):
        """A filled column that also rises past layer 1 is not complete."""
        area = TargetArea.rectangular(2, 1)
        grid = empty_grid(2, 1, height=4)
        grid[:, :2, :] = True
        state = area.calculate_fill_state(grid)
        assert state.overflow == 0
        assert state.is_complete

        grid[0, 3, 0] = True
        grid[1, 2, 0] = True
        state = area.calculate_fill_state(grid)
        assert (state.layer0_filled, state.layer1_filled, state.overflow) == (2, 2, 2)
        assert state.total_progress == 1.0
        assert not state.is_complete
        assert state.to_dict()["overflow"] == 2

    def test_fill_state_ignores_cells_outside_target(self, empty_grid):
        area = TargetArea.l_shaped(2, 2, 1, 1)
        grid = empty_grid(2, 2, height=3)
        grid[1, 2, 1] = True
        assert area.calculate_fill_state(grid).overflow == 0

    def test_fill_state_without_grid(self, rect_3x2):
        state = rect_3x2.calculate_fill_state(None)
        assert state.total_filled == 0
        assert state.total_target == 12


class TestShapeBuilders:
    """Footprint builders used by the generator."""

    def test_builders_registered(self):
        assert {"rectangle", "l_shape", "t_shape"} <= set(TARGET_SHAPE_REGISTRY)
        assert get_target_shape_builder("rectangle") is build_rectangle

    def test_unknown_builder(self):
        with pytest.raises(KeyError):
            get_target_shape_builder("hexagon")

    @pytest.mark.parametrize("size,expected", [
        (6, (3, 2)),
        (9, (3, 3)),
        (8, (4, 2)),
        (5, (5, 1)),
        (7, (7, 1)),
    ])
    def test_rectangle_dimensions(self, size, expected):
        area = build_rectangle(size, random.Random(0))
        assert (area.width, area.depth) == expected

    def test_rectangle_rejects_empty(self):
        assert build_rectangle(0, random.Random(0)) is None

    @pytest.mark.parametrize("builder", [build_rectangle, build_l_shape, build_t_shape])
    @pytest.mark.parametrize("size", range(5, 12))
    def test_builders_preserve_footprint(self, builder, size):
        rng = random.Random(size)
        area = builder(size, rng)
        if area is not None:
            assert area.footprint_size == size

    def test_shaped_builders_give_up_on_tiny_sizes(self):
        rng = random.Random(0)
        assert build_l_shape(2, rng) is None
        assert build_t_shape(3, rng) is None

    def test_t_shape_found_for_nine(self):
        area = build_t_shape(9, random.Random(1))
        assert area is not None
        assert area.footprint_size == 9
