from __future__ import annotations

import logging
import random
import string
from typing import List, Optional, Sequence, Tuple

from .pieces import Color, Shape, as_matrix

logger = logging.getLogger(__name__)

PIECES_PER_SET = 3

Template = Tuple[Tuple[int, ...], ...]

SHAPE_TEMPLATES: Tuple[Template, ...] = (
    # Dot
    ((1,),),
    # Line 2
    ((1, 1),),
    ((1,), (1,)),
    # Line 3
    ((1, 1, 1),),
    ((1,), (1,), (1,)),
    # Line 4
    ((1, 1, 1, 1),),
    ((1,), (1,), (1,), (1,)),
    # Squares
    ((1, 1), (1, 1)),
    ((1, 1, 1), (1, 1, 1), (1, 1, 1)),
    # L
    ((1, 0), (1, 0), (1, 1)),
    ((0, 1), (0, 1), (1, 1)),
    ((1, 1, 1), (1, 0, 0)),
    # T
    ((1, 1, 1), (0, 1, 0)),
    ((0, 1, 0), (1, 1, 1)),
    # Z / S
    ((1, 1, 0), (0, 1, 1)),
    ((0, 1, 1), (1, 1, 0)),
)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9


class ShapeCatalog:
    """Draws random shapes from a fixed template set.

    All randomness comes from the injected `random.Random`, so two catalogs
    built with the same seed produce the same shapes, colors and ids.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        templates: Sequence[Template] = SHAPE_TEMPLATES,
        colors: Sequence[Color] = tuple(Color),
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")
        if not templates:
            raise ValueError("ShapeCatalog requires at least one template")
        if not colors:
            raise ValueError("ShapeCatalog requires at least one color")
        self.rng = rng if rng is not None else random.Random(seed)
        # Malformed templates fail here rather than at draw time.
        self.templates = tuple(as_matrix(t) for t in templates)
        self.colors = tuple(Color(c) for c in colors)

    def reseed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def _new_id(self) -> str:
        return "".join(self.rng.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))

    def draw(self) -> Shape:
        matrix = self.rng.choice(self.templates)
        color = self.rng.choice(self.colors)
        return Shape(matrix, color, self._new_id())

    def draw_batch(self, n: int = PIECES_PER_SET) -> List[Shape]:
        if n < 0:
            raise ValueError(f"batch size must be non-negative, got {n}")
        batch = [self.draw() for _ in range(n)]
        logger.debug("drew batch: %s", [s.shape_id for s in batch])
        return batch
