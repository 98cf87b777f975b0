"""
Standard polycube piece catalog.

Pieces are immutable and shared; a level refers to them by id.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from cubepack.core.base import Vec3, to_vec3_list


@dataclass(frozen=True)
class PieceDefinition:
    """A named polycube shape in its unrotated local frame."""
    id: str
    name: str
    blocks: Tuple[Vec3, ...]
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    symmetry_group: int = 0

    def __post_init__(self):
        # Accept lists of tuples from callers and configuration
        object.__setattr__(self, "blocks", tuple(to_vec3_list(self.blocks)))
        object.__setattr__(self, "color", tuple(float(c) for c in self.color))
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if not self.blocks:
            raise ValueError(f"Piece '{self.id}' must have at least one block")
        if len(set(self.blocks)) != len(self.blocks):
            raise ValueError(f"Piece '{self.id}' has duplicate blocks")
        if not _is_face_connected(self.blocks):
            raise ValueError(f"Piece '{self.id}' blocks are not face-connected")
        if len(self.color) != 3:
            raise ValueError("color must be an RGB triple")

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "blocks": [list(b.to_tuple()) for b in self.blocks],
            "color": list(self.color),
            "symmetry_group": self.symmetry_group,
        }


def _is_face_connected(blocks: Sequence[Vec3]) -> bool:
    remaining = set(blocks)
    stack = [blocks[0]]
    remaining.discard(blocks[0])
    while stack:
        current = stack.pop()
        for dx, dy, dz in ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)):
            neighbour = Vec3(current.x + dx, current.y + dy, current.z + dz)
            if neighbour in remaining:
                remaining.discard(neighbour)
                stack.append(neighbour)
    return not remaining


STANDARD_PIECES: Tuple[PieceDefinition, ...] = (
    PieceDefinition("1", "Small-L", [(0, 0, 0), (1, 0, 0), (0, 0, 1)], (1.0, 0.2, 0.2), 1),
    PieceDefinition("2", "Line-3", [(0, 0, 0), (1, 0, 0), (2, 0, 0)], (0.2, 0.4, 1.0), 2),
    PieceDefinition("3", "Corner-3D", [(0, 0, 0), (1, 0, 0), (0, 1, 0)], (0.2, 0.8, 0.2), 3),
    PieceDefinition("4", "T-Shape", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (1, 0, 1)], (1.0, 1.0, 0.2), 4),
    PieceDefinition("5", "L-Shape", [(0, 0, 0), (0, 0, 1), (0, 0, 2), (1, 0, 2)], (0.6, 0.2, 0.8), 5),
    PieceDefinition("6", "Z-Shape", [(0, 0, 0), (1, 0, 0), (1, 0, 1), (2, 0, 1)], (1.0, 0.5, 0.1), 6),
    PieceDefinition("7", "Stairs-3D", [(0, 0, 0), (1, 0, 0), (1, 1, 0), (2, 1, 0)], (0.2, 0.9, 0.9), 7),
    PieceDefinition("8", "Tower", [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)], (0.6, 0.4, 0.2), 8),
)


class PieceCatalog:
    """Read-only collection of piece definitions with lookup filters."""

    def __init__(self, pieces: Sequence[PieceDefinition]):
        self._pieces = tuple(pieces)
        ids = [p.id for p in self._pieces]
        if len(set(ids)) != len(ids):
            raise ValueError("Piece ids in a catalog must be unique")

    @property
    def pieces(self) -> Tuple[PieceDefinition, ...]:
        return self._pieces

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[PieceDefinition]:
        return iter(self._pieces)

    def get_by_block_count(self, block_count: int) -> List[PieceDefinition]:
        return [p for p in self._pieces if p.block_count == block_count]

    def get_three_block_pieces(self) -> List[PieceDefinition]:
        return self.get_by_block_count(3)

    def get_four_block_pieces(self) -> List[PieceDefinition]:
        return self.get_by_block_count(4)

    def get_by_id(self, piece_id: str) -> Optional[PieceDefinition]:
        for piece in self._pieces:
            if piece.id == piece_id:
                return piece
        return None

    def get_by_name(self, name: str) -> Optional[PieceDefinition]:
        wanted = name.lower()
        for piece in self._pieces:
            if piece.name.lower() == wanted:
                return piece
        return None


STANDARD_CATALOG = PieceCatalog(STANDARD_PIECES)
