from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import PlacementError
from .pieces import Color, MatrixLike, Shape, as_matrix

logger = logging.getLogger(__name__)

GRID_SIZE = 8
EMPTY = 0

Coordinate = Tuple[int, int]
Placeable = Union[Shape, MatrixLike]


def _occupancy(shape: Placeable) -> np.ndarray:
    if isinstance(shape, Shape):
        return shape.matrix
    return as_matrix(shape)


@dataclass(frozen=True)
class ClearResult:
    grid: "GameGrid"
    lines_cleared: int
    rows: Tuple[int, ...] = ()
    columns: Tuple[int, ...] = ()

    @property
    def cells_cleared(self) -> int:
        size = self.grid.size
        return len(self.rows) * size + len(self.columns) * size - len(self.rows) * len(self.columns)


class GameGrid:
    """Immutable N x N board.

    Cells hold 0 for empty or a `Color` value. The backing array is read-only;
    `apply_placement` and `clear_completed_lines` return new grids and leave
    the receiver untouched.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: np.ndarray) -> None:
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1] or cells.shape[0] == 0:
            raise ValueError(f"grid must be a non-empty square matrix, got shape {cells.shape}")
        arr = cells.astype(np.int8, copy=True)
        arr.setflags(write=False)
        self._cells = arr

    @classmethod
    def empty(cls, size: int = GRID_SIZE) -> "GameGrid":
        return cls(np.zeros((int(size), int(size)), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "GameGrid":
        return cls(np.array([list(r) for r in rows], dtype=np.int8))

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def size(self) -> int:
        return int(self._cells.shape[0])

    def occupancy(self) -> np.ndarray:
        return (self._cells != EMPTY).astype(np.int8)

    def filled_count(self) -> int:
        return int(np.count_nonzero(self._cells))

    def color_at(self, x: int, y: int) -> Optional[Color]:
        value = int(self._cells[y, x])
        return None if value == EMPTY else Color(value)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_empty(self, x: int, y: int) -> bool:
        return self._cells[y, x] == EMPTY

    def can_place(self, shape: Placeable, origin_x: int, origin_y: int) -> bool:
        return self._violation(_occupancy(shape), origin_x, origin_y) is None

    def _violation(self, matrix: np.ndarray, origin_x: int, origin_y: int) -> Optional[str]:
        h, w = matrix.shape
        for dy in range(h):
            for dx in range(w):
                if not matrix[dy, dx]:
                    continue
                x, y = origin_x + dx, origin_y + dy
                if not self.is_inside(x, y):
                    return f"cell ({x}, {y}) is outside the grid"
                if self._cells[y, x] != EMPTY:
                    return f"cell ({x}, {y}) is occupied"
        return None

    def apply_placement(self, shape: Placeable, origin_x: int, origin_y: int) -> "GameGrid":
        """Return a new grid with `shape` stamped at the origin.

        Bare matrices are stamped with `Color.CYAN`.
        """
        matrix = _occupancy(shape)
        reason = self._violation(matrix, origin_x, origin_y)
        if reason is not None:
            raise PlacementError(origin_x, origin_y, reason)
        color = shape.color if isinstance(shape, Shape) else Color.CYAN
        h, w = matrix.shape
        cells = self._cells.copy()
        window = cells[origin_y : origin_y + h, origin_x : origin_x + w]
        window[matrix != 0] = int(color)
        return GameGrid(cells)

    def complete_rows(self) -> List[int]:
        return [int(r) for r in np.flatnonzero(np.all(self._cells != EMPTY, axis=1))]

    def complete_columns(self) -> List[int]:
        return [int(c) for c in np.flatnonzero(np.all(self._cells != EMPTY, axis=0))]

    def clear_completed_lines(self) -> ClearResult:
        """Clear every full row and column of the current grid in one pass."""
        rows = self.complete_rows()
        cols = self.complete_columns()
        if not rows and not cols:
            return ClearResult(grid=self, lines_cleared=0)
        cells = self._cells.copy()
        cells[rows, :] = EMPTY
        cells[:, cols] = EMPTY
        lines = len(rows) + len(cols)
        logger.debug("cleared rows=%s cols=%s (%d lines)", rows, cols, lines)
        return ClearResult(grid=GameGrid(cells), lines_cleared=lines, rows=tuple(rows), columns=tuple(cols))

    def valid_origins(self, shape: Placeable) -> List[Coordinate]:
        """Every (x, y) origin where the shape fits."""
        matrix = _occupancy(shape)
        h, w = matrix.shape
        origins: List[Coordinate] = []
        for y in range(self.size - h + 1):
            for x in range(self.size - w + 1):
                if self._violation(matrix, x, y) is None:
                    origins.append((x, y))
        return origins

    def fits_anywhere(self, shape: Placeable) -> bool:
        matrix = _occupancy(shape)
        h, w = matrix.shape
        for y in range(self.size - h + 1):
            for x in range(self.size - w + 1):
                if self._violation(matrix, x, y) is None:
                    return True
        return False

    def copy_cells(self) -> np.ndarray:
        return self._cells.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash(self._cells.tobytes())

    def __repr__(self) -> str:
        return f"GameGrid(size={self.size}, filled={self.filled_count()})"


def can_place(grid: GameGrid, shape: Placeable, origin_x: int, origin_y: int) -> bool:
    return grid.can_place(shape, origin_x, origin_y)


def apply_placement(grid: GameGrid, shape: Placeable, origin_x: int, origin_y: int) -> GameGrid:
    return grid.apply_placement(shape, origin_x, origin_y)


def clear_completed_lines(grid: GameGrid) -> ClearResult:
    return grid.clear_completed_lines()

