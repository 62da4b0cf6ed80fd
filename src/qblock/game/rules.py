from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .pieces import MatrixLike, Shape, filled_cell_count


@dataclass(frozen=True)
class TurnScore:
    placement_points: int
    line_points: int
    next_combo: int
    keys_earned: int

    @property
    def total(self) -> int:
        return self.placement_points + self.line_points


@dataclass
class ScoringRules:
    """Points, combo and key economy.

    `line_clear_scores[i]` is the base reward for clearing i+1 lines in one
    turn; every line past the table adds `extra_line_score`. The base reward
    is multiplied by the combo in effect for the turn.
    """

    points_per_cell: int = 10
    line_clear_scores: Tuple[int, ...] = (100, 300, 600, 1000)
    extra_line_score: int = 500
    rotation_cost: int = 2
    starting_keys: int = 3

    def __post_init__(self) -> None:
        scores = tuple(int(s) for s in self.line_clear_scores)
        if not scores:
            raise ValueError("line_clear_scores must not be empty")
        if any(s < 0 for s in scores) or any(b < a for a, b in zip(scores, scores[1:])):
            raise ValueError(f"line_clear_scores must be non-negative and non-decreasing, got {scores}")
        if self.extra_line_score < 0 or self.rotation_cost < 0 or self.starting_keys < 0:
            raise ValueError("extra_line_score, rotation_cost and starting_keys must be non-negative")
        self.line_clear_scores = scores

    def placement_score(self, shape: Union[Shape, MatrixLike]) -> int:
        return filled_cell_count(shape) * self.points_per_cell

    def base_line_score(self, lines: int) -> int:
        if lines <= 0:
            return 0
        table = self.line_clear_scores
        if lines <= len(table):
            return table[lines - 1]
        return table[-1] + (lines - len(table)) * self.extra_line_score

    def line_clear_score(self, lines: int, combo: int) -> int:
        if combo < 1:
            raise ValueError(f"combo must be >= 1, got {combo}")
        return self.base_line_score(lines) * combo

    def next_combo(self, combo: int, lines: int) -> int:
        return combo + 1 if lines >= 1 else 1

    def keys_for_lines(self, lines: int) -> int:
        return lines if lines >= 1 else 0

    def can_afford_rotation(self, keys: int) -> bool:
        return keys >= self.rotation_cost

    def score_turn(self, shape: Union[Shape, MatrixLike], lines: int, combo: int) -> TurnScore:
        return TurnScore(
            placement_points=self.placement_score(shape),
            line_points=self.line_clear_score(lines, combo),
            next_combo=self.next_combo(combo, lines),
            keys_earned=self.keys_for_lines(lines),
        )
