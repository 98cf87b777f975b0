"""
Puzzle generator.

Each attempt selects pieces for a difficulty profile, builds a footprint
holding exactly their blocks in two layers, and asks the solver for a
tiling. Attempts repeat until one is solved or the attempt budget runs out;
the outcome is reported as a GenerationResult tagged SOLVED or
EXHAUSTED_RETRIES.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cubepack.core.base import REQUIRED_HEIGHT, DifficultyLevel, GenerationStatus
from cubepack.core.config import Config, DifficultyProfile, GeneratorConfig
from cubepack.core.registry import TARGET_SHAPE_REGISTRY
from cubepack.game.catalog import STANDARD_CATALOG, PieceCatalog, PieceDefinition
from cubepack.game.target_area import TargetArea, build_rectangle
from cubepack.generation.difficulty import difficulty_for_round, resolve_profiles
from cubepack.generation.solver import BacktrackingSolver, PiecePlacement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelDescriptor:
    """A playable puzzle instance."""
    round_number: int
    difficulty: DifficultyLevel
    time_limit: float
    pieces: Tuple[PieceDefinition, ...]
    board_size: Tuple[int, int, int]
    target_area: TargetArea
    verified: bool = False
    solution: Optional[Tuple[PiecePlacement, ...]] = None

    @property
    def total_blocks(self) -> int:
        return sum(p.block_count for p in self.pieces)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "difficulty": self.difficulty.value,
            "time_limit": self.time_limit,
            "pieces": [p.to_dict() for p in self.pieces],
            "board_size": list(self.board_size),
            "target_area": self.target_area.to_dict(),
            "verified": self.verified,
            "solution": [s.to_dict() for s in self.solution] if self.solution else None,
        }


@dataclass
class GenerationResult:
    """Outcome of a generation request."""
    status: GenerationStatus
    difficulty: DifficultyLevel
    round_number: int
    attempts: int
    level: Optional[LevelDescriptor] = None
    last_attempt: Optional[LevelDescriptor] = None
    elapsed: float = 0.0
    rejections: Dict[str, int] = field(default_factory=dict)

    @property
    def is_solved(self) -> bool:
        return self.status is GenerationStatus.SOLVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "difficulty": self.difficulty.value,
            "round_number": self.round_number,
            "attempts": self.attempts,
            "elapsed": self.elapsed,
            "rejections": dict(self.rejections),
            "level": self.level.to_dict() if self.level else None,
        }


class PuzzleGenerator:
    """Generates levels that are proven solvable."""

    def __init__(self,
                 catalog: PieceCatalog = STANDARD_CATALOG,
                 profiles: Optional[Mapping[DifficultyLevel, DifficultyProfile]] = None,
                 solver: Optional[BacktrackingSolver] = None,
                 config: Optional[GeneratorConfig] = None,
                 rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.profiles = {**resolve_profiles(), **(profiles or {})}
        self.solver = solver or BacktrackingSolver()
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random(self.config.seed)

    @classmethod
    def from_config(cls, config: Config, catalog: PieceCatalog = STANDARD_CATALOG,
                    seed: Optional[int] = None) -> "PuzzleGenerator":
        generator_config = config.generator
        return cls(
            catalog=catalog,
            profiles=resolve_profiles(config.difficulties),
            solver=BacktrackingSolver(config.solver),
            config=generator_config,
            rng=random.Random(seed if seed is not None else generator_config.seed),
        )

    def generate_level(self, round_number: int) -> GenerationResult:
        """Generate a level whose difficulty follows the round number."""
        difficulty = difficulty_for_round(round_number, self.config.rounds_per_tier)
        return self.generate_solvable_puzzle(difficulty, round_number)

    def generate_solvable_puzzle(self, difficulty: DifficultyLevel,
                                 round_number: int = 1) -> GenerationResult:
        """
        Retry select, build and solve until one attempt is solved.

        Args:
            difficulty: Difficulty tier to generate for
            round_number: Round number recorded in the level

        Returns:
            GenerationResult; SOLVED carries a verified level with its
            solution, EXHAUSTED_RETRIES carries the last unverified attempt
        """
        profile = self.profiles[difficulty]
        start = time.perf_counter()
        rejections: Dict[str, int] = {}
        last_attempt = None

        for attempt in range(1, self.config.max_attempts + 1):
            pieces = self.select_pieces(profile)
            total_blocks = sum(p.block_count for p in pieces)

            if len(pieces) < profile.min_pieces:
                self._reject(rejections, "too_few_pieces", attempt)
                continue
            if total_blocks % REQUIRED_HEIGHT:
                self._reject(rejections, "odd_block_total", attempt)
                continue

            target = self.build_target_area(total_blocks // REQUIRED_HEIGHT, difficulty)
            if target.total_cells != total_blocks:
                self._reject(rejections, "size_mismatch", attempt)
                continue

            descriptor = self._describe(round_number, difficulty, profile, pieces, target)
            last_attempt = descriptor

            solution = self.solver.solve(pieces, target)
            if solution is None:
                reason = "solver_budget" if self.solver.last_stats.budget_exhausted else "unsolvable"
                self._reject(rejections, reason, attempt)
                continue

            level = self._describe(round_number, difficulty, profile, pieces, target,
                                   verified=True, solution=tuple(solution))
            elapsed = time.perf_counter() - start
            logger.info(
                "Generated %s level for round %d in %d attempt(s): %d pieces, %d columns",
                difficulty.value, round_number, attempt, len(pieces), target.footprint_size,
            )
            return GenerationResult(GenerationStatus.SOLVED, difficulty, round_number, attempt,
                                    level=level, last_attempt=level, elapsed=elapsed,
                                    rejections=rejections)

        elapsed = time.perf_counter() - start
        logger.warning(
            "No solvable %s level found in %d attempts (%s)",
            difficulty.value, self.config.max_attempts, rejections,
        )
        fallback = last_attempt if self.config.fallback_to_unverified else None
        return GenerationResult(GenerationStatus.EXHAUSTED_RETRIES, difficulty, round_number,
                                self.config.max_attempts, level=fallback,
                                last_attempt=last_attempt, elapsed=elapsed,
                                rejections=rejections)

    def select_pieces(self, profile: DifficultyProfile) -> List[PieceDefinition]:
        """
        Greedy selection toward the profile's block total.

        A shuffled pass accepts pieces that keep within the total and the
        piece cap; if the total is missed, one unused piece that closes the
        gap exactly is added.
        """
        candidates = list(self.catalog)
        self.rng.shuffle(candidates)

        selected: List[PieceDefinition] = []
        total = 0
        for piece in candidates:
            if len(selected) >= profile.max_pieces:
                break
            if total + piece.block_count <= profile.target_blocks:
                selected.append(piece)
                total += piece.block_count

        if total < profile.target_blocks and len(selected) < profile.max_pieces:
            gap = profile.target_blocks - total
            for piece in candidates:
                if piece not in selected and piece.block_count == gap:
                    selected.append(piece)
                    break

        return selected

    def choose_shape(self, difficulty: DifficultyLevel) -> str:
        if difficulty.value in self.config.shaped_difficulties:
            return self.rng.choice(self.config.shapes)
        return "rectangle"

    def build_target_area(self, footprint_size: int, difficulty: DifficultyLevel) -> TargetArea:
        shape = self.choose_shape(difficulty)
        builder = TARGET_SHAPE_REGISTRY.get(shape, build_rectangle)
        target = builder(footprint_size, self.rng)
        if target is None or target.footprint_size != footprint_size:
            logger.debug("Shape %s can not hold %d columns, using a rectangle", shape, footprint_size)
            target = build_rectangle(footprint_size, self.rng)
        return target

    @staticmethod
    def _describe(round_number, difficulty, profile, pieces, target,
                  verified=False, solution=None) -> LevelDescriptor:
        return LevelDescriptor(
            round_number=round_number,
            difficulty=difficulty,
            time_limit=float(profile.time_limit),
            pieces=tuple(pieces),
            board_size=(target.width, REQUIRED_HEIGHT, target.depth),
            target_area=target,
            verified=verified,
            solution=solution,
        )

    @staticmethod
    def _reject(rejections: Dict[str, int], reason: str, attempt: int) -> None:
        rejections[reason] = rejections.get(reason, 0) + 1
        logger.debug("Attempt %d rejected: %s", attempt, reason)
