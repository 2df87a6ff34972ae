#!/usr/bin/env python3
"""
Watch a random policy play MenuMines.

Usage:
    python demo.py [--games N] [--delay SECONDS] [--daily]
"""
import argparse
import os
import time

import numpy as np

from src.menumines import BoardConfig, today_seed
from src.menumines.environment import MinesweeperEnv


def random_reveal(env: MinesweeperEnv, rng: np.random.Generator) -> int:
    """Pick a uniformly random reveal among the hidden cells."""
    cells = env.config.rows * env.config.cols
    hidden = np.flatnonzero(env.get_action_mask()[:cells])
    return int(rng.choice(hidden))


def show(env: MinesweeperEnv, title: str, status: str) -> None:
    os.system("cls" if os.name == "nt" else "clear")
    print(title)
    print(env.render())
    print(status)


def play_game(
    env: MinesweeperEnv,
    rng: np.random.Generator,
    delay: float,
    board_seed=None,
) -> bool:
    """
    Play one game to the end, redrawing after every move.

    Returns:
        True if the policy cleared the board.
    """
    options = {"board_seed": board_seed} if board_seed is not None else None
    _, info = env.reset(options=options)
    title = f"Board {info['seed']} ({info['total_safe']} safe cells)"
    show(env, title, "Starting...")

    total_reward = 0.0
    terminated = False
    while not terminated:
        time.sleep(delay)
        action = random_reveal(env, rng)
        _, reward, terminated, _, info = env.step(action)
        total_reward += reward
        row, col = divmod(action, env.config.cols)
        show(
            env,
            title,
            f"Move {info['steps']}: ({row}, {col}) | "
            f"revealed {info['revealed']}/{info['total_safe']} | "
            f"reward {total_reward:+.1f}",
        )

    return info["game_state"] == "WON"


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch a random MenuMines policy")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--delay", type=float, default=0.3, help="Seconds per move")
    parser.add_argument("--size", type=int, default=9, help="Board size (NxN)")
    parser.add_argument("--mines", type=int, default=15, help="Number of mines")
    parser.add_argument(
        "--daily", action="store_true", help="Replay today's daily board every game"
    )
    args = parser.parse_args()

    env = MinesweeperEnv(
        config=BoardConfig(args.size, args.size, args.mines), render_mode="ansi"
    )
    rng = np.random.default_rng()
    board_seed = today_seed() if args.daily else None

    results = []
    for _ in range(args.games):
        results.append(play_game(env, rng, args.delay, board_seed))
        print("Cleared!" if results[-1] else "Boom.")
        time.sleep(1.0)

    wins = sum(results)
    print(f"\n{wins}/{args.games} boards cleared")


if __name__ == "__main__":
    main()
