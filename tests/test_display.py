# tests/test_display.py
from __future__ import annotations

from qblock.game import GameGrid, Shape, format_grid, format_pool, format_shape


def test_format_shape() -> None:
    assert format_shape(Shape([[1, 1, 1], [0, 1, 0]])) == "███\n·█·"


def test_format_grid() -> None:
    grid = GameGrid.empty().apply_placement(Shape([[1, 1]]), 6, 7)
    lines = format_grid(grid).split("\n")
    assert len(lines) == 8
    assert lines[0] == "········"
    assert lines[7] == "······██"


def test_format_pool_side_by_side() -> None:
    pool = [Shape([[1]]), Shape([[1], [1]]), Shape([[1, 1]])]
    assert format_pool(pool) == "█  █  ██\n   █"
    assert format_pool([]) == ""
