"""Gymnasium environments for qblock."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .blockudoku_env import BlockudokuEnv, compute_action_mask
from .wrappers import FlattenDiscreteActionWrapper

ENV_ID = "Blockudoku-8x8-v0"

register(
    id=ENV_ID,
    entry_point="qblock.env.blockudoku_env:BlockudokuEnv",
)

__all__ = ["ENV_ID", "BlockudokuEnv", "FlattenDiscreteActionWrapper", "compute_action_mask"]
