"""
Shared test fixtures for cubepack tests.
"""
import numpy as np
import pytest

from cubepack.core.base import REQUIRED_HEIGHT
from cubepack.game.catalog import STANDARD_CATALOG, PieceDefinition
from cubepack.game.target_area import TargetArea


@pytest.fixture
def catalog():
    return STANDARD_CATALOG


@pytest.fixture
def line3(catalog):
    return catalog.get_by_name("Line-3")


@pytest.fixture
def line3_copies(line3):
    """Four distinct pieces sharing the Line-3 shape."""
    return [
        PieceDefinition(f"line-{i}", f"Line-3 #{i}", line3.blocks, line3.color)
        for i in range(4)
    ]


@pytest.fixture
def rect_3x2():
    """A 3 wide, 2 deep rectangle: 6 columns, 12 cells."""
    return TargetArea.rectangular(3, 2)


@pytest.fixture
def empty_grid():
    """Factory for an empty occupancy grid indexed [x, y, z]."""
    def make(width, depth, height=REQUIRED_HEIGHT):
        return np.zeros((width, height, depth), dtype=bool)
    return make
