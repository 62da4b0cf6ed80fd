from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .grid import GameGrid
from .pieces import Shape, unique_rotations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    candidate_index: int
    rotation: int  # index into unique_rotations(candidate)
    origin_x: int
    origin_y: int


def candidate_shapes(pool: Sequence[Shape], hold: Optional[Shape]) -> List[Shape]:
    """Pool shapes, then the hold piece if present.

    The held piece always counts: it can be swapped back into play at any
    time, whether or not the hold slot is occupied.
    """
    candidates = list(pool)
    if hold is not None:
        candidates.append(hold)
    return candidates


def legal_moves(grid: GameGrid, candidates: Sequence[Shape]) -> Iterator[Move]:
    for idx, shape in enumerate(candidates):
        for r, matrix in enumerate(unique_rotations(shape.matrix)):
            for x, y in grid.valid_origins(matrix):
                yield Move(idx, r, x, y)


def has_legal_move(grid: GameGrid, candidates: Sequence[Shape]) -> bool:
    for shape in candidates:
        for matrix in unique_rotations(shape.matrix):
            if grid.fits_anywhere(matrix):
                return True
    return False


def is_game_over(grid: GameGrid, pool: Sequence[Shape], hold: Optional[Shape] = None) -> bool:
    """True when no pool or held shape fits anywhere in any rotation.

    Raises ValueError when there is nothing to evaluate.
    """
    candidates = candidate_shapes(pool, hold)
    if not candidates:
        raise ValueError("is_game_over needs at least one candidate shape")
    over = not has_legal_move(grid, candidates)
    if over:
        logger.debug("no legal move for %d candidates on %r", len(candidates), grid)
    return over
