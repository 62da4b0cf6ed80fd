from __future__ import annotations


class BlockPuzzleError(Exception):
    """Base class for engine errors."""


class MalformedShapeError(BlockPuzzleError, ValueError):
    """Occupancy matrix is empty, ragged, non-binary or has no filled cell."""


class PlacementError(BlockPuzzleError):
    """A placement was applied without passing `can_place` first."""

    def __init__(self, origin_x: int, origin_y: int, reason: str) -> None:
        super().__init__(f"cannot place shape at ({origin_x}, {origin_y}): {reason}")
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.reason = reason
