# tests/test_pieces.py
from __future__ import annotations

import numpy as np
import pytest

from qblock.game import SHAPE_TEMPLATES, Color, MalformedShapeError, Shape, rotate, unique_rotations
from qblock.game.pieces import as_matrix


def test_rotate_is_clockwise() -> None:
    l_shape = [[1, 0], [1, 0], [1, 1]]
    assert rotate(l_shape).tolist() == [[1, 1, 1], [1, 0, 0]]
    assert rotate([[1, 1, 1, 1]]).tolist() == [[1], [1], [1], [1]]


@pytest.mark.parametrize("template", SHAPE_TEMPLATES)
def test_four_rotations_are_identity(template) -> None:
    original = as_matrix(template)
    current = original
    for _ in range(4):
        nxt = rotate(current)
        assert nxt.shape == (current.shape[1], current.shape[0])
        current = nxt
    assert np.array_equal(current, original)


def test_rotate_does_not_mutate_input() -> None:
    src = np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8)
    snapshot = src.copy()
    rotate(src)
    assert np.array_equal(src, snapshot)
    as_list = [[1, 1, 0], [0, 1, 1]]
    rotate(as_list)
    assert as_list == [[1, 1, 0], [0, 1, 1]]


@pytest.mark.parametrize(
    "matrix,count",
    [
        ([[1]], 1),
        ([[1, 1], [1, 1]], 1),
        ([[1, 1, 1]], 2),
        ([[1, 1, 0], [0, 1, 1]], 2),
        ([[1, 1, 1], [0, 1, 0]], 4),
        ([[1, 0], [1, 0], [1, 1]], 4),
    ],
)
def test_unique_rotations_dedupes(matrix, count: int) -> None:
    rotations = unique_rotations(matrix)
    assert len(rotations) == count
    assert np.array_equal(rotations[0], np.array(matrix))


@pytest.mark.parametrize(
    "bad",
    [
        [],
        [[]],
        [[1, 0], [1]],
        [[0, 0], [0, 0]],
        [[2, 1]],
        np.ones(3, dtype=np.int8),
    ],
)
def test_malformed_shapes_are_rejected(bad) -> None:
    with pytest.raises(MalformedShapeError):
        Shape(bad)


def test_malformed_shape_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        rotate([[0]])


def test_shape_rotation_keeps_identity_and_color() -> None:
    shape = Shape([[1, 1, 1], [1, 0, 0]], Color.AMBER, "abc123xyz")
    turned = shape.rotated()
    assert turned.shape_id == "abc123xyz"
    assert turned.color is Color.AMBER
    assert (turned.height, turned.width) == (3, 2)
    assert turned.cell_count == shape.cell_count
    assert shape.matrix.tolist() == [[1, 1, 1], [1, 0, 0]]


def test_shape_matrix_is_read_only() -> None:
    shape = Shape([[1, 1]])
    with pytest.raises(ValueError):
        shape.matrix[0, 0] = 0


def test_shape_cells_at() -> None:
    shape = Shape([[0, 1, 0], [1, 1, 1]])
    assert shape.cells_at(2, 5) == [(3, 5), (2, 6), (3, 6), (4, 6)]


def test_color_hex_and_rgb() -> None:
    assert Color.CYAN.hex == "#06b6d4"
    assert Color.CYAN.rgb == (6, 182, 212)
    assert len(Color) == 5
