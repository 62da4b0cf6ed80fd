from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Sequence, Tuple, Union

import numpy as np

from .errors import MalformedShapeError


class Color(IntEnum):
    """Palette colors. The integer value is the token stored in grid cells."""

    CYAN = 1
    VIOLET = 2
    ROSE = 3
    EMERALD = 4
    AMBER = 5

    @property
    def hex(self) -> str:
        return _HEX[self]

    @property
    def rgb(self) -> Tuple[int, int, int]:
        h = self.hex.lstrip("#")
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


_HEX = {
    Color.CYAN: "#06b6d4",
    Color.VIOLET: "#8b5cf6",
    Color.ROSE: "#f43f5e",
    Color.EMERALD: "#10b981",
    Color.AMBER: "#f59e0b",
}


Matrix = np.ndarray
MatrixLike = Union[np.ndarray, Sequence[Sequence[int]]]


def as_matrix(matrix: MatrixLike) -> Matrix:
    """Validate an occupancy matrix and return a read-only int8 copy."""
    if not isinstance(matrix, np.ndarray):
        rows = [list(row) for row in matrix]
        if not rows or any(len(row) == 0 for row in rows):
            raise MalformedShapeError("occupancy matrix is empty")
        if len({len(row) for row in rows}) != 1:
            raise MalformedShapeError("occupancy matrix rows have different lengths")
        matrix = np.array(rows)
    if matrix.ndim != 2 or matrix.size == 0:
        raise MalformedShapeError(f"occupancy matrix must be a non-empty 2D array, got shape {matrix.shape}")
    if not np.isin(matrix, (0, 1)).all():
        raise MalformedShapeError("occupancy matrix entries must be 0 or 1")
    if not matrix.any():
        raise MalformedShapeError("occupancy matrix has no filled cell")
    out = matrix.astype(np.int8, copy=True)
    out.setflags(write=False)
    return out


def rotate(matrix: MatrixLike) -> Matrix:
    """Rotate an occupancy matrix 90 degrees clockwise.

    An (h, w) input gives a (w, h) output. The input is never modified.
    """
    m = as_matrix(matrix)
    out = np.rot90(m, 1, axes=(1, 0)).copy()
    out.setflags(write=False)
    return out


def unique_rotations(matrix: MatrixLike) -> List[Matrix]:
    """All distinct rotations of `matrix`, starting with the matrix itself."""
    rotations: List[Matrix] = []
    current = as_matrix(matrix)
    for _ in range(4):
        if not any(np.array_equal(current, existing) for existing in rotations):
            rotations.append(current)
        current = rotate(current)
    return rotations


@dataclass(frozen=True, eq=False)
class Shape:
    """A polyomino offered to the player.

    `shape_id` only identifies the instance for the host's list tracking; it
    survives rotation but plays no part in placement or clearing.
    """

    matrix: Matrix
    color: Color = Color.CYAN
    shape_id: str = field(default="")

    def __post_init__(self) -> None:
        object.__setattr__(self, "matrix", as_matrix(self.matrix))
        object.__setattr__(self, "color", Color(self.color))

    @property
    def cell_count(self) -> int:
        return int(self.matrix.sum())

    @property
    def height(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self.matrix.shape[1])

    def rotated(self) -> "Shape":
        return Shape(rotate(self.matrix), self.color, self.shape_id)

    def offsets(self) -> List[Tuple[int, int]]:
        """(dx, dy) of every filled cell, row by row."""
        ys, xs = np.nonzero(self.matrix)
        return [(int(dx), int(dy)) for dy, dx in zip(ys, xs)]

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.offsets()]

    def same_cells(self, other: "Shape") -> bool:
        return np.array_equal(self.matrix, other.matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.same_cells(other) and self.color == other.color and self.shape_id == other.shape_id

    def __hash__(self) -> int:
        return hash((self.matrix.shape, self.matrix.tobytes(), int(self.color), self.shape_id))


def filled_cell_count(shape: Union[Shape, MatrixLike]) -> int:
    if isinstance(shape, Shape):
        return shape.cell_count
    return int(as_matrix(shape).sum())
