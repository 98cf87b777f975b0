"""
cubepack: generator and verifier for two-layer polycube packing puzzles

Picks a set of pieces from a fixed catalog, builds a footprint whose two
layers hold exactly their blocks, and proves by backtracking search that the
pieces tile it.

Example Usage:
```python
from cubepack import PuzzleGenerator, DifficultyLevel

generator = PuzzleGenerator()
result = generator.generate_solvable_puzzle(DifficultyLevel.EASY, round_number=1)
if result.is_solved:
    level = result.level
    print(level.board_size, [p.name for p in level.pieces])
```

Command-line Usage:
```bash
cubepack generate --difficulty medium --show-solution
cubepack survey --count 20 --output survey.csv
```
"""

from cubepack.core.base import (
    Vec3,
    DifficultyLevel,
    PlacementValidity,
    ValidationErrorKind,
    GenerationStatus,
    FillState,
)
from cubepack.core.config import Config, load_config, validate_config
from cubepack.game.catalog import PieceDefinition, PieceCatalog, STANDARD_CATALOG
from cubepack.game.target_area import TargetArea
from cubepack.game.board import PuzzleBoard
from cubepack.game.validator import (
    ValidationResult,
    can_place_piece,
    validate_placement,
    validate_solution,
    calculate_fill_state,
    is_area_completely_filled,
)
from cubepack.generation.solver import BacktrackingSolver
from cubepack.generation.generator import PuzzleGenerator, LevelDescriptor, GenerationResult
from cubepack.generation.difficulty import AdaptiveDifficultyState

__version__ = "0.1.0"

__all__ = [
    "Vec3",
    "DifficultyLevel",
    "PlacementValidity",
    "ValidationErrorKind",
    "GenerationStatus",
    "FillState",
    "Config",
    "load_config",
    "validate_config",
    "PieceDefinition",
    "PieceCatalog",
    "STANDARD_CATALOG",
    "TargetArea",
    "PuzzleBoard",
    "ValidationResult",
    "can_place_piece",
    "validate_placement",
    "validate_solution",
    "calculate_fill_state",
    "is_area_completely_filled",
    "BacktrackingSolver",
    "PuzzleGenerator",
    "LevelDescriptor",
    "GenerationResult",
    "AdaptiveDifficultyState",
]
