from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .catalog import PIECES_PER_SET, ShapeCatalog
from .grid import GRID_SIZE, GameGrid
from .moves import candidate_shapes, is_game_over
from .pieces import Shape
from .rules import ScoringRules

logger = logging.getLogger(__name__)

HOLD = "hold"

Source = Union[int, str]


@dataclass
class GameConfig:
    grid_size: int = GRID_SIZE
    pieces_per_set: int = PIECES_PER_SET
    max_episode_steps: int = 10000
    random_seed: Optional[int] = None


@dataclass(frozen=True)
class PlacementOutcome:
    accepted: bool
    grid: Optional[GameGrid] = None
    lines_cleared: int = 0
    points: int = 0
    keys_earned: int = 0
    game_over: bool = False
    reason: str = ""


@dataclass(frozen=True)
class RotationOutcome:
    accepted: bool
    shape: Optional[Shape] = None
    keys_spent: int = 0
    reason: str = ""


class BlockudokuGame:
    """One play session over the pure engine.

    State changes are copy-on-write: an accepted request replaces `grid`,
    `pool` and `hold_piece` with new values instead of editing them.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[ShapeCatalog] = None,
        high_score: int = 0,
    ) -> None:
        self.config = config or GameConfig()
        if self.config.pieces_per_set < 1:
            raise ValueError(f"pieces_per_set must be >= 1, got {self.config.pieces_per_set}")
        self.rules = rules or ScoringRules()
        if catalog is not None and self.config.random_seed is not None:
            raise ValueError("pass either a catalog or config.random_seed, not both")
        self.catalog = catalog or ShapeCatalog(seed=self.config.random_seed)
        self.high_score = int(high_score)

        self.grid = GameGrid.empty(self.config.grid_size)
        self.pool: List[Shape] = []
        self.hold_piece: Optional[Shape] = None
        self.score = 0
        self.keys = 0
        self.combo = 1
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.step_count = 0
        self.game_over = False

        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.catalog.reseed(seed)
        self.grid = GameGrid.empty(self.config.grid_size)
        self.pool = []
        self.hold_piece = None
        self.score = 0
        self.keys = self.rules.starting_keys
        self.combo = 1
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.step_count = 0
        self.game_over = False
        self.replenish()

    # Pool and hold

    def replenish(self) -> List[Shape]:
        """Draw a fresh batch into the empty pool."""
        if self.pool:
            raise RuntimeError(f"pool still holds {len(self.pool)} shapes; it is only refilled when empty")
        self.pool = self.catalog.draw_batch(self.config.pieces_per_set)
        logger.debug("pool refilled with %d shapes", len(self.pool))
        self.evaluate_game_over()
        return list(self.pool)

    @staticmethod
    def _normalize(source: Source) -> Optional[Source]:
        """HOLD, a plain int pool index (numpy integers included), or None."""
        if isinstance(source, str):
            return HOLD if source == HOLD else None
        if isinstance(source, numbers.Integral) and not isinstance(source, (bool, np.bool_)):
            return int(source)
        return None

    def shape_at(self, source: Source) -> Optional[Shape]:
        source = self._normalize(source)
        if source == HOLD:
            return self.hold_piece
        if source is not None and 0 <= source < len(self.pool):
            return self.pool[source]
        return None

    def hold(self, pool_index: int) -> bool:
        """Move a pool shape into the hold slot, swapping out any held shape."""
        if self.game_over:
            return False
        pool_index = self._normalize(pool_index)
        shape = self.shape_at(pool_index)
        if shape is None or pool_index == HOLD:
            return False
        previous = self.hold_piece
        self.hold_piece = shape
        if previous is not None:
            self.pool = [previous if i == pool_index else s for i, s in enumerate(self.pool)]
            logger.debug("swapped pool[%d] %s with held %s", pool_index, shape.shape_id, previous.shape_id)
        else:
            self.pool = [s for i, s in enumerate(self.pool) if i != pool_index]
            logger.debug("moved pool[%d] %s to hold", pool_index, shape.shape_id)
            if not self.pool:
                self.replenish()
                return True
        self.evaluate_game_over()
        return True

    # Turn

    def place(self, source: Source, origin_x: int, origin_y: int) -> PlacementOutcome:
        if self.game_over:
            return PlacementOutcome(accepted=False, game_over=True, reason="game_over")
        source = self._normalize(source)
        shape = self.shape_at(source)
        if shape is None:
            return PlacementOutcome(accepted=False, reason="empty_source")
        if not self.grid.can_place(shape, origin_x, origin_y):
            return PlacementOutcome(accepted=False, reason="invalid_placement")

        placed = self.grid.apply_placement(shape, origin_x, origin_y)
        cleared = placed.clear_completed_lines()
        turn = self.rules.score_turn(shape, cleared.lines_cleared, self.combo)

        self.grid = cleared.grid
        self.score += turn.total
        self.high_score = max(self.high_score, self.score)
        self.keys += turn.keys_earned
        self.combo = turn.next_combo
        self.total_lines_cleared += cleared.lines_cleared
        self.total_pieces_placed += 1
        self.step_count += 1
        logger.debug(
            "placed %s at (%d, %d): lines=%d points=%d combo=%d",
            shape.shape_id, origin_x, origin_y, cleared.lines_cleared, turn.total, self.combo,
        )

        if source == HOLD:
            self.hold_piece = None
        else:
            self.pool = [s for i, s in enumerate(self.pool) if i != source]

        if not self.pool:
            self.replenish()
        else:
            self.evaluate_game_over()

        return PlacementOutcome(
            accepted=True,
            grid=self.grid,
            lines_cleared=cleared.lines_cleared,
            points=turn.total,
            keys_earned=turn.keys_earned,
            game_over=self.game_over,
        )

    def rotate(self, source: Source) -> RotationOutcome:
        """Rotate a pool or held shape clockwise for `rules.rotation_cost` keys."""
        if self.game_over:
            return RotationOutcome(accepted=False, reason="game_over")
        source = self._normalize(source)
        shape = self.shape_at(source)
        if shape is None:
            return RotationOutcome(accepted=False, reason="empty_source")
        if not self.rules.can_afford_rotation(self.keys):
            return RotationOutcome(accepted=False, reason="insufficient_keys")

        rotated = shape.rotated()
        if source == HOLD:
            self.hold_piece = rotated
        else:
            self.pool = [rotated if i == source else s for i, s in enumerate(self.pool)]
        self.keys -= self.rules.rotation_cost
        logger.debug("rotated %s, keys left %d", shape.shape_id, self.keys)
        return RotationOutcome(accepted=True, shape=rotated, keys_spent=self.rules.rotation_cost)

    # Queries

    def evaluate_game_over(self) -> bool:
        candidates = candidate_shapes(self.pool, self.hold_piece)
        if not candidates:
            return self.game_over
        if is_game_over(self.grid, self.pool, self.hold_piece):
            if not self.game_over:
                logger.info(
                    "game over: score=%d lines=%d pieces=%d",
                    self.score, self.total_lines_cleared, self.total_pieces_placed,
                )
            self.game_over = True
        return self.game_over

    def sources(self) -> List[Source]:
        out: List[Source] = list(range(len(self.pool)))
        if self.hold_piece is not None:
            out.append(HOLD)
        return out

    def valid_placements(self) -> List[Tuple[Source, int, int]]:
        """(source, x, y) for every placement accepted in the current state."""
        placements: List[Tuple[Source, int, int]] = []
        for source in self.sources():
            shape = self.shape_at(source)
            if shape is None:
                continue
            for x, y in self.grid.valid_origins(shape):
                placements.append((source, x, y))
        return placements

    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.copy_cells(),
            "pool": [s.matrix.copy() for s in self.pool],
            "hold": None if self.hold_piece is None else self.hold_piece.matrix.copy(),
            "score": self.score,
            "high_score": self.high_score,
            "keys": self.keys,
            "combo": self.combo,
            "total_lines_cleared": self.total_lines_cleared,
            "total_pieces_placed": self.total_pieces_placed,
            "step_count": self.step_count,
            "game_over": self.game_over,
        }

    def get_game_stats(self) -> Dict[str, Any]:
        return {
            "final_score": self.score,
            "high_score": self.high_score,
            "pieces_placed": self.total_pieces_placed,
            "lines_cleared": self.total_lines_cleared,
            "keys": self.keys,
            "final_fill_ratio": self.grid.filled_count() / float(self.grid.size ** 2),
            "avg_score_per_piece": self.score / max(1, self.total_pieces_placed),
        }
