from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import numpy as np
import gymnasium as gym

from qblock.env import ENV_ID
from qblock.game import format_grid
from qblock.utils import setup_logger

logger = logging.getLogger(__name__)


def run_episode(env: gym.Env, rng: np.random.Generator, seed: Optional[int] = None) -> Dict[str, float]:
    """Play one episode choosing uniformly among legal placements."""
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    steps = 0
    terminated = truncated = False
    while not (terminated or truncated):
        legal = np.argwhere(info["action_mask"])
        if legal.size == 0:
            raise RuntimeError(f"no legal action in a non-terminal state after {steps} steps")
        action = legal[int(rng.integers(0, len(legal)))]
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        steps += 1
    game = env.unwrapped.game
    logger.debug("final grid:\n%s", format_grid(game.grid))
    return {
        "reward": total_reward,
        "steps": float(steps),
        "score": float(game.score),
        "lines": float(game.total_lines_cleared),
        "terminated": float(terminated),
        "truncated": float(truncated),
    }


def run_random(episodes: int = 5, seed: Optional[int] = None) -> List[Dict[str, float]]:
    env = gym.make(ENV_ID)
    rng = np.random.default_rng(seed)
    results: List[Dict[str, float]] = []
    try:
        for ep in range(episodes):
            ep_seed = None if seed is None else seed + ep
            result = run_episode(env, rng, seed=ep_seed)
            logger.info(
                "episode %d: score=%d lines=%d steps=%d",
                ep, int(result["score"]), int(result["lines"]), int(result["steps"]),
            )
            results.append(result)
    finally:
        env.close()
    if results:
        logger.info("mean score over %d episodes: %.1f", len(results), float(np.mean([r["score"] for r in results])))
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Blockudoku with a uniform random placement agent")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="info")
    p.add_argument("--no-rich", action="store_true", help="Plain log output instead of rich")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logger(name="qblock", use_rich=not args.no_rich, level=args.log_level)
    run_random(episodes=args.episodes, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
