"""
Backtracking exact-fill solver.

Pieces are placed one at a time, in the given order, into a padded scratch
board. For each piece every distinct orientation is anchored on every target
cell, with the orientation's first block on that cell, so every placement
that lies inside the target is tried. A search succeeds when all pieces are
placed and every target cell is occupied.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from cubepack.core.base import REQUIRED_HEIGHT, Vec3
from cubepack.core.config import SolverConfig
from cubepack.game import validator
from cubepack.game.board import PuzzleBoard
from cubepack.game.catalog import PieceDefinition
from cubepack.game.rotation import ROTATION_MATRICES, get_unique_rotations, rotate_piece
from cubepack.game.target_area import TargetArea

logger = logging.getLogger(__name__)

_NEIGHBOURS = ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1))


@dataclass(frozen=True)
class PiecePlacement:
    """Where one piece sits in a solution."""
    piece_id: str
    rotation_index: int
    position: Vec3
    cells: Tuple[Vec3, ...]

    def to_dict(self) -> Dict[str, object]:
        return {
            "piece_id": self.piece_id,
            "rotation_index": self.rotation_index,
            "position": list(self.position.to_tuple()),
            "cells": [list(c.to_tuple()) for c in self.cells],
        }


@dataclass
class SolveStats:
    """Counters from the most recent search."""
    nodes_visited: int = 0
    placements_tried: int = 0
    pruned: int = 0
    budget_exhausted: bool = False
    elapsed: float = 0.0


class _BudgetExhausted(Exception):
    pass


class BacktrackingSolver:
    """Depth-first search for one tiling of a target area."""

    def __init__(self, config: Optional[SolverConfig] = None,
                 rotations: Sequence[np.ndarray] = ROTATION_MATRICES):
        self.config = config or SolverConfig()
        self.rotations = rotations
        self.last_stats = SolveStats()

    def orientations(self, piece: PieceDefinition) -> List[Tuple[int, List[Vec3]]]:
        """Distinct normalized orientations of a piece, keyed by rotation index."""
        return [
            (index, rotate_piece(piece.blocks, index, self.rotations))
            for index in get_unique_rotations(piece.blocks, self.rotations)
        ]

    def can_solve(self, pieces: Sequence[PieceDefinition],
                  target: Optional[TargetArea]) -> bool:
        return self.solve(pieces, target) is not None

    def solve(self, pieces: Sequence[PieceDefinition],
              target: Optional[TargetArea]) -> Optional[List[PiecePlacement]]:
        """
        Find one tiling of `target` by all of `pieces`.

        Args:
            pieces: Pieces to place, tried in this order
            target: Target area to fill to two layers

        Returns:
            One placement per piece in target coordinates, or None when no
            tiling exists or the node budget ran out (see last_stats)
        """
        stats = SolveStats()
        self.last_stats = stats
        start = time.perf_counter()

        if target is None or target.footprint_size == 0 or not pieces:
            return None
        if sum(p.block_count for p in pieces) != target.total_cells:
            return None

        margin = self.config.board_margin
        offset = Vec3(margin - target.min_x, 0, margin - target.min_z)
        scratch_target = TargetArea(
            (x + offset.x, z + offset.z) for x, z in target.get_column_positions()
        )
        board = PuzzleBoard(target.width + 2 * margin, target.depth + 2 * margin,
                            REQUIRED_HEIGHT, scratch_target)

        search = _Search(
            pieces=list(pieces),
            orientations=[self.orientations(p) for p in pieces],
            board=board,
            anchors=list(scratch_target.get_all_cells()),
            config=self.config,
            stats=stats,
        )
        try:
            found = search.run(0)
        except _BudgetExhausted:
            stats.budget_exhausted = True
            found = False
            logger.warning(
                "Solver budget of %d nodes exhausted for %d pieces on %d columns",
                self.config.max_nodes, len(pieces), target.footprint_size,
            )
        stats.elapsed = time.perf_counter() - start

        if not found:
            return None
        return [
            PiecePlacement(p.piece_id, p.rotation_index, p.position - offset,
                           tuple(c - offset for c in p.cells))
            for p in search.placements
        ]


class _Search:
    """Mutable state of one solve call."""

    def __init__(self, pieces, orientations, board, anchors, config, stats):
        self.pieces = pieces
        self.orientations = orientations
        self.board = board
        self.target = board.target
        self.anchors = anchors
        self.config = config
        self.stats = stats
        self.placements: List[PiecePlacement] = []
        # Subset sums of the block counts still to place, per recursion depth
        self.reachable = [
            _subset_sums([p.block_count for p in pieces[i:]]) for i in range(len(pieces) + 1)
        ]

    def run(self, index: int) -> bool:
        if index == len(self.pieces):
            return validator.is_area_completely_filled(self.board.grid, self.target)

        piece = self.pieces[index]
        for rotation_index, blocks in self.orientations[index]:
            first = blocks[0]
            for anchor in self.anchors:
                self.stats.nodes_visited += 1
                if self.stats.nodes_visited > self.config.max_nodes:
                    raise _BudgetExhausted()

                position = anchor - first
                if not validator.can_place_piece(blocks, position, self.board.grid, self.target):
                    continue

                cells = tuple(validator.world_cells(blocks, position))
                self.board.place_cells(cells)
                self.placements.append(PiecePlacement(piece.id, rotation_index, position, cells))
                self.stats.placements_tried += 1

                if self._worth_descending(index + 1) and self.run(index + 1):
                    return True

                self.placements.pop()
                self.board.remove_cells(cells)
        return False

    def _worth_descending(self, next_index: int) -> bool:
        if not self.config.prune_regions or next_index == len(self.pieces):
            return True
        reachable = self.reachable[next_index]
        for size in _empty_region_sizes(self.board.grid, self.target):
            if size not in reachable:
                self.stats.pruned += 1
                return False
        return True


def _subset_sums(sizes: Sequence[int]) -> Set[int]:
    sums = {0}
    for size in sizes:
        sums |= {s + size for s in sums}
    sums.discard(0)
    return sums


def _empty_region_sizes(grid: np.ndarray, target: TargetArea) -> List[int]:
    """Sizes of the face-connected regions of empty target cells."""
    empty = {c for c in target.get_all_cells() if not grid[c.x, c.y, c.z]}
    sizes = []
    while empty:
        stack = [empty.pop()]
        size = 1
        while stack:
            cell = stack.pop()
            for dx, dy, dz in _NEIGHBOURS:
                neighbour = Vec3(cell.x + dx, cell.y + dy, cell.z + dz)
                if neighbour in empty:
                    empty.discard(neighbour)
                    stack.append(neighbour)
                    size += 1
        sizes.append(size)
    return sizes


def solution_grid(target: TargetArea, placements: Sequence[PiecePlacement],
                  height: int = REQUIRED_HEIGHT) -> np.ndarray:
    """Occupancy grid over the target's board with every placement applied."""
    board = PuzzleBoard.for_target(target, height)
    for placement in placements:
        board.place_cells(placement.cells)
    return board.grid


def verify_solution(pieces: Sequence[PieceDefinition], target: TargetArea,
                    placements: Sequence[PiecePlacement]) -> bool:
    """
    Independently check a solution: one placement per piece, matching shapes,
    no overlaps and a completely filled target.
    """
    if sorted(p.id for p in pieces) != sorted(p.piece_id for p in placements):
        return False
    by_id = {p.id: p for p in pieces}
    board = PuzzleBoard.for_target(target)
    for placement in placements:
        expected = rotate_piece(by_id[placement.piece_id].blocks, placement.rotation_index)
        if rotate_piece(placement.cells, 0) != expected:
            return False
        offsets = [c - placement.position for c in placement.cells]
        if not validator.can_place_piece(offsets, placement.position, board.grid, target):
            return False
        board.place_cells(placement.cells)
    return board.is_solved()
