# tests/test_moves.py
from __future__ import annotations

import numpy as np
import pytest

from qblock.game import GameGrid, Shape, has_legal_move, is_game_over, legal_moves

DOT = Shape([[1]])
DOMINO = Shape([[1, 1]])
L_SHAPE = Shape([[1, 0], [1, 0], [1, 1]])


def _full_except(*holes: tuple[int, int]) -> GameGrid:
    cells = np.ones((8, 8), dtype=np.int8)
    for x, y in holes:
        cells[y, x] = 0
    return GameGrid(cells)


def test_single_hole_blocks_multi_cell_shapes() -> None:
    grid = _full_except((4, 2))
    assert is_game_over(grid, [DOMINO, L_SHAPE], None)


def test_single_hole_fits_a_dot() -> None:
    grid = _full_except((4, 2))
    assert not is_game_over(grid, [DOMINO, DOT], None)


def test_held_piece_counts_as_candidate() -> None:
    grid = _full_except((4, 2))
    assert not is_game_over(grid, [DOMINO, L_SHAPE], DOT)
    assert is_game_over(grid, [DOMINO], L_SHAPE)


def test_rotations_are_considered() -> None:
    grid = _full_except((3, 3), (3, 4))
    assert not grid.fits_anywhere(DOMINO)
    assert not is_game_over(grid, [DOMINO])
    moves = list(legal_moves(grid, [DOMINO]))
    assert len(moves) == 1
    assert moves[0].rotation == 1
    assert (moves[0].origin_x, moves[0].origin_y) == (3, 3)


def test_empty_grid_is_never_over() -> None:
    square = Shape([[1, 1, 1], [1, 1, 1], [1, 1, 1]])
    assert not is_game_over(GameGrid.empty(), [square])


def test_empty_candidate_set_is_rejected() -> None:
    with pytest.raises(ValueError):
        is_game_over(GameGrid.empty(), [], None)


def test_legal_moves_enumerates_all_rotations() -> None:
    # horizontal: 7 * 8 origins, vertical: 8 * 7 origins
    assert len(list(legal_moves(GameGrid.empty(), [DOMINO]))) == 112
    assert has_legal_move(GameGrid.empty(), [DOMINO])
