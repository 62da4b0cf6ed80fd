# tests/test_env.py
from __future__ import annotations

import gymnasium as gym
import numpy as np

from qblock.env import ENV_ID, BlockudokuEnv, FlattenDiscreteActionWrapper
from qblock.game import GameConfig, GameGrid, Shape
from qblock.rl.random_agent import main, run_random


def test_reset_observation_matches_space() -> None:
    env = gym.make(ENV_ID)
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["grid"].sum() == 0
    assert obs["keys"][0] == 3
    assert info["action_mask"].shape == (4, 8, 8)
    # hold slot starts empty
    assert not info["action_mask"][3].any()
    assert info["action_mask"][:3].any()
    env.close()


def test_legal_step_scores_and_masks_update() -> None:
    env = BlockudokuEnv()
    obs, info = env.reset(seed=1)
    slot, y, x = np.argwhere(info["action_mask"])[0]
    obs, reward, terminated, truncated, info = env.step((slot, y, x))
    assert info["accepted"]
    assert reward > 0
    assert info["engine_score_delta"] == env.game.score
    assert obs["grid"].sum() == env.game.grid.filled_count()
    assert not truncated


def test_invalid_step_is_penalized() -> None:
    env = BlockudokuEnv(invalid_action_penalty=-0.5)
    obs, info = env.reset(seed=2)
    obs, reward, terminated, truncated, info = env.step((3, 0, 0))
    assert not info["accepted"]
    assert reward == -0.5
    assert env.game.score == 0
    assert not terminated


def test_truncation_after_max_steps() -> None:
    env = BlockudokuEnv(config=GameConfig(max_episode_steps=2))
    env.reset(seed=3)
    env.step((3, 0, 0))
    _, _, terminated, truncated, _ = env.step((3, 0, 0))
    assert truncated and not terminated


def test_render_rgb_array() -> None:
    env = BlockudokuEnv(render_mode="rgb_array")
    env.reset(seed=4)
    img = env.render()
    assert img.shape == (96, 96, 3)
    assert img.dtype == np.uint8


def test_flatten_wrapper_round_trip() -> None:
    env = FlattenDiscreteActionWrapper(BlockudokuEnv())
    _, info = env.reset(seed=5)
    assert env.action_space.n == 4 * 8 * 8
    mask = env.get_action_mask()
    assert mask.shape == (256,)
    assert np.array_equal(mask, info["action_mask"].reshape(-1))
    idx = 2 * 64 + 5 * 8 + 6
    assert env.action(idx).tolist() == [2, 5, 6]


def test_random_agent_plays_to_the_end() -> None:
    results = run_random(episodes=2, seed=0)
    assert len(results) == 2
    for result in results:
        assert result["terminated"] == 1.0
        assert result["truncated"] == 0.0
        assert result["score"] >= 10
        assert result["steps"] >= 1


def test_random_agent_cli() -> None:
    main(["--episodes", "1", "--seed", "3", "--no-rich", "--log-level", "warning"])


def test_episode_ends_when_only_rotations_would_fit() -> None:
    env = BlockudokuEnv()
    env.reset(seed=6)
    cells = np.ones((8, 8), dtype=np.int8)
    cells[3, 3] = 0
    cells[4, 3] = 0
    game = env.unwrapped.game
    game.grid = GameGrid(cells)
    game.pool = [Shape([[1, 1]], shape_id=f"d{i}") for i in range(3)]
    game.keys = 0

    _, _, terminated, truncated, info = env.step((0, 0, 0))
    assert not info["action_mask"].any()
    assert terminated and not truncated
    assert info["terminal_reason"] == "no_legal_placement"
    # the game itself still counts the rotated domino as a move
    assert not game.evaluate_game_over()
    assert game.rotate(0).reason == "insufficient_keys"


def test_legal_step_reports_no_terminal_reason() -> None:
    env = BlockudokuEnv()
    _, info = env.reset(seed=7)
    slot, y, x = np.argwhere(info["action_mask"])[0]
    _, _, terminated, _, info = env.step((slot, y, x))
    assert not terminated
    assert info["terminal_reason"] is None
