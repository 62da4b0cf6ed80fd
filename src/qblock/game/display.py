from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .grid import GameGrid
from .pieces import Shape

FILLED = "█"
BLANK = "·"


def _rows(matrix: np.ndarray) -> str:
    return "\n".join("".join(FILLED if cell else BLANK for cell in row) for row in matrix)


def format_grid(grid: Union[GameGrid, np.ndarray]) -> str:
    cells = grid.cells if isinstance(grid, GameGrid) else grid
    return _rows(cells)


def format_shape(shape: Union[Shape, np.ndarray]) -> str:
    matrix = shape.matrix if isinstance(shape, Shape) else shape
    return _rows(matrix)


def format_pool(pool: Sequence[Shape]) -> str:
    """Pool shapes side by side, top-aligned, separated by two spaces."""
    if not pool:
        return ""
    height = max(s.height for s in pool)
    lines = []
    for y in range(height):
        parts = []
        for s in pool:
            if y < s.height:
                parts.append("".join(FILLED if c else BLANK for c in s.matrix[y]))
            else:
                parts.append(" " * s.width)
        lines.append("  ".join(parts).rstrip())
    return "\n".join(lines)
