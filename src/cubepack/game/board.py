"""
Occupancy grid with piece bookkeeping.

The solver uses the low-level place_cells/remove_cells pair on a scratch
board; gameplay collaborators use place_piece/remove_piece, which validate
against the target area first.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from cubepack.core.base import REQUIRED_HEIGHT, FillState, PlacementValidity, Vec3
from cubepack.game import validator
from cubepack.game.target_area import TargetArea


@dataclass(frozen=True)
class PlacedPiece:
    """A piece committed to the board."""
    piece_id: str
    position: Vec3
    cells: Tuple[Vec3, ...]


class PuzzleBoard:
    """Boolean occupancy grid of shape (width, height, depth)."""

    def __init__(self, width: int, depth: int, height: int = REQUIRED_HEIGHT,
                 target: Optional[TargetArea] = None):
        if width <= 0 or depth <= 0 or height <= 0:
            raise ValueError("board dimensions must be positive integers")
        self.grid = np.zeros((width, height, depth), dtype=bool)
        self.target = target
        self.placed: Dict[str, PlacedPiece] = {}

    @classmethod
    def for_target(cls, target: TargetArea, height: int = REQUIRED_HEIGHT) -> "PuzzleBoard":
        """Board covering the target's bounding box from the origin."""
        return cls(target.min_x + target.width, target.min_z + target.depth, height, target)

    @property
    def width(self) -> int:
        return self.grid.shape[0]

    @property
    def height(self) -> int:
        return self.grid.shape[1]

    @property
    def depth(self) -> int:
        return self.grid.shape[2]

    @property
    def size(self) -> Tuple[int, int, int]:
        return self.grid.shape

    @property
    def placed_piece_ids(self) -> List[str]:
        return list(self.placed)

    def is_occupied(self, x: int, y: int, z: int) -> bool:
        return bool(self.grid[x, y, z])

    def occupied_count(self) -> int:
        return int(self.grid.sum())

    # Low-level, unchecked

    def place_cells(self, cells: Iterable[Vec3]) -> None:
        for c in cells:
            self.grid[c.x, c.y, c.z] = True

    def remove_cells(self, cells: Iterable[Vec3]) -> None:
        for c in cells:
            self.grid[c.x, c.y, c.z] = False

    # Gameplay

    def validate_placement(self, blocks: Sequence[Vec3], position: Vec3) -> PlacementValidity:
        return validator.validate_placement(blocks, position, self.grid, self.target)

    def place_piece(self, piece_id: str, blocks: Sequence[Vec3],
                    position: Vec3) -> PlacementValidity:
        """
        Validate and commit a piece.

        A piece id that is already on the board is reported as a collision.
        Nothing is committed unless the result is VALID.
        """
        if piece_id in self.placed:
            return PlacementValidity.COLLISION
        validity = self.validate_placement(blocks, position)
        if validity is not PlacementValidity.VALID:
            return validity
        if not isinstance(position, Vec3):
            position = Vec3.from_list(position)
        cells = tuple(validator.world_cells(blocks, position))
        self.place_cells(cells)
        self.placed[piece_id] = PlacedPiece(piece_id, position, cells)
        return validity

    def remove_piece(self, piece_id: str) -> bool:
        placed = self.placed.pop(piece_id, None)
        if placed is None:
            return False
        self.remove_cells(placed.cells)
        return True

    def clear(self) -> None:
        self.grid[:] = False
        self.placed.clear()

    def fill_state(self) -> FillState:
        return validator.calculate_fill_state(self.grid, self.target)

    def is_solved(self) -> bool:
        return validator.validate_solution(self.grid, self.target).is_solved

    def copy_grid(self) -> np.ndarray:
        return self.grid.copy()
