"""
Console output for the cubepack CLI: status lines, report sections, survey
progress and ASCII maps of footprints and solutions.
"""

import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from cubepack.core.base import REQUIRED_HEIGHT


_ICONS = {
    "info": "ℹ️",
    "success": "✅",
    "warning": "⚠️",
    "error": "❌",
}


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, seconds = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {seconds:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return f"{'✅' if value else '❌'} {value}"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


class SurveyProgress:
    """Single-line progress bar over a batch of generation requests."""

    BAR_WIDTH = 24

    def __init__(self, total: int):
        self.total = max(total, 1)
        self.done = 0
        self.solved = 0
        self.started = time.perf_counter()

    def advance(self, solved: bool, label: str = ""):
        self.done += 1
        self.solved += int(solved)

        filled = int(self.BAR_WIDTH * min(self.done / self.total, 1.0))
        bar = "█" * filled + "░" * (self.BAR_WIDTH - filled)
        elapsed = time.perf_counter() - self.started
        remaining = elapsed / self.done * max(self.total - self.done, 0)

        line = (f"\r⏳ [{bar}] {self.done}/{self.total}, {self.solved} solved"
                f" | {format_duration(elapsed)} elapsed, ~{format_duration(remaining)} left")
        if label:
            line += f" | {label}"
        print(line, end="", flush=True)

    def close(self):
        icon = _ICONS["success"] if self.solved == self.done else _ICONS["warning"]
        elapsed = format_duration(time.perf_counter() - self.started)
        print(f"\n{icon} {self.solved}/{self.done} requests solved in {elapsed}")


class StatusDisplay:
    """Headers, sections and key/value tables for CLI reports."""

    HEADER_WIDTH = 72
    RULE_WIDTH = 60

    @classmethod
    def print_header(cls, title: str):
        rule = "=" * cls.HEADER_WIDTH
        print(f"\n{rule}\n{title.center(cls.HEADER_WIDTH)}\n{rule}")

    @classmethod
    def print_section(cls, title: str):
        print(f"\n📋 {title}\n{'-' * cls.RULE_WIDTH}")

    @classmethod
    def print_table(cls, rows: Dict[str, Any], title: str):
        cls.print_section(title)
        width = max((len(key) for key in rows), default=0)
        for key, value in rows.items():
            print(f"  {key.ljust(width)}  {_format_value(value)}")

    @staticmethod
    def print_block(text: str):
        for line in text.splitlines():
            print(f"  {line}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        stamp = datetime.now().strftime("%H:%M:%S")
        print(f"{_ICONS.get(status, _ICONS['info'])} {stamp}  {message}")


class LiveLogger:
    """Status lines for a command; quiet mode keeps only errors."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def _emit(self, message: str, status: str):
        if self.verbose or status == "error":
            StatusDisplay.print_status(message, status)

    def log_info(self, message: str):
        self._emit(message, "info")

    def log_warning(self, message: str):
        self._emit(message, "warning")

    def log_error(self, message: str):
        self._emit(message, "error")

    def log_result(self, message: str, success: bool = True):
        self._emit(message, "success" if success else "error")


def format_target_area(target) -> str:
    """Top-down map of the footprint: '#' for target columns, '.' otherwise."""
    if target is None or target.footprint_size == 0:
        return "(empty target)"
    rows = []
    for z in range(target.min_z, target.min_z + target.depth):
        rows.append("".join(
            "#" if target.contains(x, z) else "."
            for x in range(target.min_x, target.min_x + target.width)
        ))
    return "\n".join(rows)


def format_solution_layers(target, placements: Optional[Sequence] = None) -> str:
    """
    One top-down map per layer. Cells show the id of the piece covering them,
    '.' for empty target cells and a blank outside the target.
    """
    if target is None or target.footprint_size == 0:
        return "(empty target)"
    owner = {}
    for placement in placements or ():
        for cell in placement.cells:
            owner[cell.to_tuple()] = placement.piece_id

    blocks: List[str] = []
    for y in range(REQUIRED_HEIGHT):
        lines = [f"layer {y}:"]
        for z in range(target.min_z, target.min_z + target.depth):
            line = []
            for x in range(target.min_x, target.min_x + target.width):
                if not target.contains(x, z):
                    line.append(" ")
                else:
                    line.append(str(owner.get((x, y, z), "."))[-1])
            lines.append("".join(line))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
