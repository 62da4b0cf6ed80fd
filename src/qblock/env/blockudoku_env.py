from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from qblock.game import HOLD, BlockudokuGame, GameConfig, ScoringRules
from qblock.game.core import Source

MAX_SHAPE_DIM = 4
_COUNTER_HIGH = np.iinfo(np.int32).max
_EMPTY_RGB = (30, 30, 36)


def slot_to_source(game: BlockudokuGame, slot: int) -> Source:
    """Action slots 0..k-1 address the pool, slot k addresses the hold."""
    return HOLD if slot == game.config.pieces_per_set else slot


def compute_action_mask(game: BlockudokuGame) -> np.ndarray:
    size = game.config.grid_size
    k = game.config.pieces_per_set
    mask = np.zeros((k + 1, size, size), dtype=np.bool_)
    if game.game_over:
        return mask
    for source, x, y in game.valid_placements():
        slot = k if source == HOLD else int(source)
        mask[slot, y, x] = True
    return mask


class BlockudokuEnv(gym.Env):
    """Placement environment over a `BlockudokuGame`.

    Action (slot, y, x): place pool slot 0..k-1, or the held shape with slot
    k, with its top-left cell at (x, y). Invalid actions are penalized and
    leave the game untouched. Rotation and hold are not part of the action
    space; `info["action_mask"]` marks every legal placement, and the episode
    terminates as soon as that mask is empty.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        reward_scale: float = 0.01,
        invalid_action_penalty: float = -0.1,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = BlockudokuGame(config, rules)
        self.render_mode = render_mode
        self.reward_scale = float(reward_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        size = self.game.config.grid_size
        k = self.game.config.pieces_per_set

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k + 1, MAX_SHAPE_DIM, MAX_SHAPE_DIM), dtype=np.int8),
                "keys": spaces.Box(low=0, high=_COUNTER_HIGH, shape=(1,), dtype=np.int32),
                "combo": spaces.Box(low=1, high=_COUNTER_HIGH, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.MultiDiscrete((k + 1, size, size))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.pieces_per_set
        pieces = np.zeros((k + 1, MAX_SHAPE_DIM, MAX_SHAPE_DIM), dtype=np.int8)
        for slot in range(k + 1):
            shape = self.game.shape_at(slot_to_source(self.game, slot))
            if shape is None:
                continue
            h, w = min(shape.height, MAX_SHAPE_DIM), min(shape.width, MAX_SHAPE_DIM)
            pieces[slot, :h, :w] = shape.matrix[:h, :w]
        return {
            "grid": self.game.grid.occupancy(),
            "pieces": pieces,
            "keys": np.array([self.game.keys], dtype=np.int32),
            "combo": np.array([self.game.combo], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared": self.game.total_lines_cleared,
            "combo": self.game.combo,
            "keys": self.game.keys,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, y, x = map(int, action)
        outcome = self.game.place(slot_to_source(self.game, slot), x, y)
        self._steps += 1

        if outcome.accepted:
            reward = self.reward_scale * float(outcome.points)
        else:
            reward = self.invalid_action_penalty

        info = self._get_info()
        # Rotation and hold are outside the action space, so a state the game
        # still considers playable can have no legal action here.
        if self.game.game_over:
            info["terminal_reason"] = "game_over"
        elif not info["action_mask"].any():
            info["terminal_reason"] = "no_legal_placement"
        else:
            info["terminal_reason"] = None
        terminated = info["terminal_reason"] is not None
        truncated = not terminated and self._steps >= self.game.config.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        info["accepted"] = outcome.accepted
        info["engine_score_delta"] = outcome.points
        info["lines_cleared_step"] = outcome.lines_cleared
        return self._get_obs(), float(reward), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            cells = self.game.grid.cells
            cell = 12
            h, w = cells.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = self.game.grid.color_at(x, y)
                    rgb = color.rgb if color is not None else _EMPTY_RGB
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = rgb
            return img
        # human rendering belongs to the host UI
        return None

    def close(self) -> None:
        pass
