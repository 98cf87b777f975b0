"""
Target area model: the footprint of columns that must be filled to exactly
two layers.

Also registers the footprint builders the generator picks from. Each builder
takes the required number of columns and a random source and returns a
TargetArea with exactly that many columns, or None when the shape can not
produce it.
"""

import random
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from cubepack.core.base import REQUIRED_HEIGHT, FillState, Vec3
from cubepack.core.registry import register_target_shape

Column = Tuple[int, int]


class TargetArea:
    """A set of (x, z) columns, each to be filled at y=0 and y=1."""

    REQUIRED_HEIGHT = REQUIRED_HEIGHT

    def __init__(self, columns: Iterable[Column] = ()):
        self._columns: Set[Column] = set()
        self._min_x = 0
        self._min_z = 0
        self._width = 0
        self._depth = 0
        for x, z in columns:
            self._columns.add((int(x), int(z)))
        self._recalculate_bounds()

    # Construction

    @classmethod
    def rectangular(cls, width: int, depth: int) -> "TargetArea":
        if width <= 0 or depth <= 0:
            raise ValueError("width and depth must be positive integers")
        return cls((x, z) for x in range(width) for z in range(depth))

    @classmethod
    def l_shaped(cls, width: int, depth: int, cut_width: int, cut_depth: int) -> "TargetArea":
        """Rectangle with the corner at (width-1, depth-1) cut away."""
        if width <= 0 or depth <= 0:
            raise ValueError("width and depth must be positive integers")
        if not (0 < cut_width < width and 0 < cut_depth < depth):
            raise ValueError("cut must be smaller than the rectangle on both axes")
        area = cls.rectangular(width, depth)
        for x in range(width - cut_width, width):
            for z in range(depth - cut_depth, depth):
                area._columns.discard((x, z))
        area._recalculate_bounds()
        return area

    @classmethod
    def t_shaped(cls, top_width: int, top_depth: int,
                 stem_width: int, stem_depth: int) -> "TargetArea":
        """Bar along x at the top, stem centred on it and extending in +z."""
        if min(top_width, top_depth, stem_width, stem_depth) <= 0:
            raise ValueError("all T-shape dimensions must be positive integers")
        if stem_width > top_width:
            raise ValueError("stem_width must not exceed top_width")
        stem_x = (top_width - stem_width) // 2
        columns = [(x, z) for x in range(top_width) for z in range(top_depth)]
        columns += [
            (x, z)
            for x in range(stem_x, stem_x + stem_width)
            for z in range(top_depth, top_depth + stem_depth)
        ]
        return cls(columns)

    @classmethod
    def from_mask(cls, mask) -> "TargetArea":
        """Columns from a 2D truthy mask indexed [x][z]."""
        array = np.asarray(mask, dtype=bool)
        if array.ndim != 2:
            raise ValueError(f"mask must be two-dimensional, got shape {array.shape}")
        return cls((int(x), int(z)) for x, z in zip(*np.nonzero(array)))

    @classmethod
    def from_columns(cls, columns: Iterable[Column]) -> "TargetArea":
        return cls(columns)

    # Mutation (construction time only)

    def add_column(self, x: int, z: int) -> None:
        self._columns.add((int(x), int(z)))
        self._recalculate_bounds()

    def remove_column(self, x: int, z: int) -> None:
        self._columns.discard((int(x), int(z)))
        self._recalculate_bounds()

    def clear(self) -> None:
        self._columns.clear()
        self._recalculate_bounds()

    def _recalculate_bounds(self) -> None:
        if not self._columns:
            self._min_x = self._min_z = 0
            self._width = self._depth = 0
            return
        xs = [x for x, _ in self._columns]
        zs = [z for _, z in self._columns]
        self._min_x, self._min_z = min(xs), min(zs)
        self._width = max(xs) - self._min_x + 1
        self._depth = max(zs) - self._min_z + 1

    # Queries

    @property
    def footprint_size(self) -> int:
        return len(self._columns)

    @property
    def total_cells(self) -> int:
        return len(self._columns) * REQUIRED_HEIGHT

    @property
    def width(self) -> int:
        return self._width

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def min_x(self) -> int:
        return self._min_x

    @property
    def min_z(self) -> int:
        return self._min_z

    def contains(self, x: int, z: int) -> bool:
        return (x, z) in self._columns

    def contains_cell(self, x: int, y: int, z: int) -> bool:
        return 0 <= y < REQUIRED_HEIGHT and (x, z) in self._columns

    def __contains__(self, item) -> bool:
        if isinstance(item, Vec3):
            return self.contains_cell(item.x, item.y, item.z)
        if len(item) == 3:
            return self.contains_cell(*item)
        return self.contains(*item)

    def __len__(self) -> int:
        return len(self._columns)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TargetArea):
            return NotImplemented
        return self._columns == other._columns

    def __repr__(self) -> str:
        return f"TargetArea(columns={self.footprint_size}, width={self.width}, depth={self.depth})"

    def get_column_positions(self) -> Iterator[Column]:
        yield from sorted(self._columns)

    def get_all_cells(self) -> Iterator[Vec3]:
        for x, z in sorted(self._columns):
            for y in range(REQUIRED_HEIGHT):
                yield Vec3(x, y, z)

    def get_layer_cells(self, layer: int) -> Iterator[Vec3]:
        if not 0 <= layer < REQUIRED_HEIGHT:
            return
        for x, z in sorted(self._columns):
            yield Vec3(x, layer, z)

    def copy(self) -> "TargetArea":
        return TargetArea(self._columns)

    def to_mask(self) -> np.ndarray:
        """Boolean mask over the bounding box, indexed [x - min_x, z - min_z]."""
        mask = np.zeros((self._width, self._depth), dtype=bool)
        for x, z in self._columns:
            mask[x - self._min_x, z - self._min_z] = True
        return mask

    def calculate_fill_state(self, grid: Optional[np.ndarray]) -> FillState:
        """Count filled target cells per layer, and above the top layer, in an occupancy grid."""
        filled = [0] * REQUIRED_HEIGHT
        overflow = 0
        if grid is not None:
            width, height, depth = grid.shape
            for x, z in self._columns:
                if not (0 <= x < width and 0 <= z < depth):
                    continue
                for y in range(min(REQUIRED_HEIGHT, height)):
                    if grid[x, y, z]:
                        filled[y] += 1
                overflow += int(np.count_nonzero(grid[x, REQUIRED_HEIGHT:, z]))
        return FillState(filled[0], filled[1], self.total_cells // REQUIRED_HEIGHT, overflow)

    def to_dict(self):
        return {
            "columns": [list(c) for c in sorted(self._columns)],
            "width": self.width,
            "depth": self.depth,
            "footprint_size": self.footprint_size,
            "total_cells": self.total_cells,
        }


@register_target_shape("rectangle")
def build_rectangle(footprint_size: int, rng: random.Random) -> Optional[TargetArea]:
    """Rectangle of depth 2, 3 or 4, or a one-deep strip if none divides."""
    if footprint_size <= 0:
        return None
    for depth in (2, 3, 4):
        if footprint_size % depth == 0:
            return TargetArea.rectangular(footprint_size // depth, depth)
    return TargetArea.rectangular(footprint_size, 1)


@register_target_shape("l_shape")
def build_l_shape(footprint_size: int, rng: random.Random) -> Optional[TargetArea]:
    candidates: List[Tuple[int, int, int, int]] = []
    for width in range(2, 7):
        for depth in range(2, 5):
            for cut_width in range(1, width):
                for cut_depth in range(1, depth):
                    if width * depth - cut_width * cut_depth == footprint_size:
                        candidates.append((width, depth, cut_width, cut_depth))
    if not candidates:
        return None
    return TargetArea.l_shaped(*rng.choice(candidates))


@register_target_shape("t_shape")
def build_t_shape(footprint_size: int, rng: random.Random) -> Optional[TargetArea]:
    candidates: List[Tuple[int, int, int, int]] = []
    for top_width in range(3, 7):
        for top_depth in (1, 2):
            for stem_width in range(1, top_width - 1):
                # Centred stems only
                if (top_width - stem_width) % 2:
                    continue
                for stem_depth in range(1, 4):
                    if top_width * top_depth + stem_width * stem_depth == footprint_size:
                        candidates.append((top_width, top_depth, stem_width, stem_depth))
    if not candidates:
        return None
    return TargetArea.t_shaped(*rng.choice(candidates))
