"""Batch generation survey: how reliably each difficulty produces solvable levels."""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from cubepack.core.base import DifficultyLevel
from cubepack.core.config import Config
from cubepack.generation.generator import GenerationResult, PuzzleGenerator
from cubepack.utils.display import SurveyProgress
from cubepack.utils.logger import GenerationLogger

logger = logging.getLogger(__name__)


@dataclass
class SurveyRecord:
    difficulty: str
    round_number: int
    solved: bool
    attempts: int
    elapsed: float
    pieces: int
    blocks: int
    columns: int
    shape_width: int
    shape_depth: int

    @classmethod
    def from_result(cls, result: GenerationResult) -> "SurveyRecord":
        level = result.level if result.is_solved else None
        return cls(
            difficulty=result.difficulty.value,
            round_number=result.round_number,
            solved=result.is_solved,
            attempts=result.attempts,
            elapsed=result.elapsed,
            pieces=len(level.pieces) if level else 0,
            blocks=level.total_blocks if level else 0,
            columns=level.target_area.footprint_size if level else 0,
            shape_width=level.target_area.width if level else 0,
            shape_depth=level.target_area.depth if level else 0,
        )


class SurveyRunner:
    """Runs repeated generation requests and summarizes them."""

    def __init__(self, config: Optional[Config] = None, seed: Optional[int] = None,
                 generation_logger: Optional[GenerationLogger] = None):
        self.config = config or Config()
        self.generator = PuzzleGenerator.from_config(self.config, seed=seed)
        self.generation_logger = generation_logger
        self.records: List[SurveyRecord] = []

    def run(self, difficulties: Iterable[DifficultyLevel], count: int,
            show_progress: bool = False) -> List[SurveyRecord]:
        difficulties = list(difficulties)
        total = len(difficulties) * count
        progress = SurveyProgress(total) if show_progress else None
        index = 0

        for difficulty in difficulties:
            for round_number in range(1, count + 1):
                result = self.generator.generate_solvable_puzzle(difficulty, round_number)
                self.records.append(SurveyRecord.from_result(result))
                index += 1
                if self.generation_logger is not None:
                    self.generation_logger.log_generation(index, result.to_dict())
                if progress is not None:
                    progress.advance(result.is_solved, difficulty.value)

        if progress is not None:
            progress.close()
        logger.info("Survey finished: %d requests", len(self.records))
        return self.records

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(r) for r in self.records])

    def summarize(self) -> pd.DataFrame:
        return summarize_records(self.records)


def summarize_records(records: List[SurveyRecord]) -> pd.DataFrame:
    """
    Per-difficulty success rate and cost.

    Columns: requests, solved, success_rate, mean_attempts, mean_elapsed,
    mean_columns (over solved levels only).
    """
    columns = ["difficulty", "requests", "solved", "success_rate",
               "mean_attempts", "mean_elapsed", "mean_columns"]
    if not records:
        return pd.DataFrame(columns=columns)

    rows: List[Dict[str, Any]] = []
    df = pd.DataFrame([asdict(r) for r in records])
    for difficulty, group in df.groupby("difficulty", sort=False):
        solved = group[group["solved"]]
        rows.append({
            "difficulty": difficulty,
            "requests": int(len(group)),
            "solved": int(len(solved)),
            "success_rate": float(len(solved) / len(group)),
            "mean_attempts": float(np.mean(group["attempts"])),
            "mean_elapsed": float(np.mean(group["elapsed"])),
            "mean_columns": float(np.mean(solved["columns"])) if len(solved) else 0.0,
        })
    return pd.DataFrame(rows, columns=columns)
