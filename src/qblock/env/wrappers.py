from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .blockudoku_env import compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (slot, y, x) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: slot, y, x (C-order flattening).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        slots, size_y, size_x = map(int, env.action_space.nvec)
        assert size_x == size_y, "Expected square grid"
        self.slots = slots
        self.size = size_x
        self.n = int(slots * self.size * self.size)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        x = idx % self.size
        idx //= self.size
        y = idx % self.size
        slot = idx // self.size
        return int(slot), int(y), int(x)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.env.unwrapped.game).reshape(-1)
