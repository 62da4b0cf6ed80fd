"""Game module for qblock.

Exports the puzzle engine and the session built on it:
- GameGrid: immutable board with placement and row/column clearing
- Shape, Color, rotate: polyomino values and clockwise rotation
- ShapeCatalog: seeded random draws from the shape templates
- ScoringRules: points, combo and key economy
- is_game_over: legal-move search over pool and hold
- BlockudokuGame: a play session (pool, hold, score, keys, combo)
"""

from .catalog import PIECES_PER_SET, SHAPE_TEMPLATES, ShapeCatalog
from .core import HOLD, BlockudokuGame, GameConfig, PlacementOutcome, RotationOutcome
from .display import format_grid, format_pool, format_shape
from .errors import BlockPuzzleError, MalformedShapeError, PlacementError
from .grid import GRID_SIZE, ClearResult, GameGrid, apply_placement, can_place, clear_completed_lines
from .moves import Move, candidate_shapes, has_legal_move, is_game_over, legal_moves
from .pieces import Color, Shape, filled_cell_count, rotate, unique_rotations
from .rules import ScoringRules, TurnScore

__all__ = [
    "GRID_SIZE",
    "PIECES_PER_SET",
    "SHAPE_TEMPLATES",
    "HOLD",
    "GameGrid",
    "ClearResult",
    "can_place",
    "apply_placement",
    "clear_completed_lines",
    "Shape",
    "Color",
    "rotate",
    "unique_rotations",
    "filled_cell_count",
    "ShapeCatalog",
    "ScoringRules",
    "TurnScore",
    "Move",
    "candidate_shapes",
    "legal_moves",
    "has_legal_move",
    "is_game_over",
    "BlockudokuGame",
    "GameConfig",
    "PlacementOutcome",
    "RotationOutcome",
    "BlockPuzzleError",
    "MalformedShapeError",
    "PlacementError",
    "format_grid",
    "format_shape",
    "format_pool",
]
