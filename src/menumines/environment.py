"""
Gymnasium environment wrapper for MenuMines.

Exposes the session's abstract action set (reveal, flag, reset) through
the standard RL interface so agents and scripts can drive the engine.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, DAILY, GameStatus
from .cell import FLAGGED_CODE, EXPLODED_CODE
from .session import PuzzleType, Session


# ============================================================================
# MenuMines Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment over a :class:`Session`.

    Observation:
        The board snapshot, a 2D int8 array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine, 10 = exploded mine

    Actions:
        Discrete action space of size 2 * rows * cols.
        Action i < rows * cols reveals cell (i // cols, i % cols);
        the second half toggles the flag on the same cells.

    Rewards:
        - +1 for a reveal that uncovers cells
        - +10 for winning the game
        - -10 for hitting a mine
        - 0 for toggling a flag
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Board configuration (default: 9x9 with 15 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or DAILY
        self.session = Session(Board(seed=0, config=self.config))
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=FLAGGED_CODE,
            high=EXPLODED_CODE,
            shape=(self.config.rows, self.config.cols),
            dtype=np.int8,
        )
        self._cell_count = self.config.rows * self.config.cols
        self.action_space = spaces.Discrete(2 * self._cell_count)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Seed for the environment's random generator.
            options: ``{"board_seed": n}`` plays a specific board;
                otherwise the board seed is drawn from the generator.

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        options = options or {}

        board_seed = options.get("board_seed")
        if board_seed is None:
            board_seed = int(self.np_random.integers(1, 2**62))
            puzzle_type = PuzzleType.RANDOM
        else:
            puzzle_type = PuzzleType.DAILY

        self.session = Session(
            Board(seed=int(board_seed), config=self.config),
            puzzle_type=puzzle_type,
            relocation_rng=random.Random(int(self.np_random.integers(2**31))),
        )
        self._steps = 0

        return self.session.board.snapshot(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action.

        Args:
            action: Reveal or flag action index.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        is_flag, row, col = self._decode_action(action)
        self._steps += 1

        if is_flag:
            reward = 0.0 if self.session.toggle_flag(row, col) else -0.1
        else:
            reward = self._reveal_reward(row, col)

        observation = self.session.board.snapshot()
        terminated = self.session.is_over
        return observation, reward, terminated, False, self._get_info()

    def _decode_action(self, action: int) -> Tuple[bool, int, int]:
        """Convert flat action index to (is_flag, row, col)."""
        action = int(action)
        is_flag = action >= self._cell_count
        index = action % self._cell_count
        return is_flag, index // self.config.cols, index % self.config.cols

    def _reveal_reward(self, row: int, col: int) -> float:
        result = self.session.reveal(row, col)
        if self.session.status == GameStatus.WON:
            return 10.0
        if result.is_mine:
            return -10.0
        if result.cells_revealed == 0:
            return -0.1
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        board = self.session.board
        return {
            "steps": self._steps,
            "seed": self.session.seed,
            "revealed": board.revealed_count,
            "total_safe": self._cell_count - self.config.mine_count,
            "flag_count": self.session.flag_count,
            "game_state": self.session.status.name,
            "valid_actions": len(board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_ansi(self.session)
        if self.render_mode == "human":
            print(render_ansi(self.session))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that can change the board.

        Returns:
            Boolean array where True = hidden cell to reveal or flag,
            or flagged cell to unflag.
        """
        snapshot = self.session.board.snapshot().flatten()
        if self.session.is_over:
            return np.zeros(self.action_space.n, dtype=bool)
        reveal_mask = snapshot == -1
        flag_mask = (snapshot == -1) | (snapshot == FLAGGED_CODE)
        return np.concatenate([reveal_mask, flag_mask])


# ============================================================================
# Text Rendering
# ============================================================================

def render_ansi(session: Session, show_selection: bool = False) -> str:
    """Render a session's board as ASCII text."""
    lines = []
    obs = session.board.snapshot()
    selected = session.selection if show_selection else None

    for row in range(obs.shape[0]):
        row_str = ""
        for col in range(obs.shape[1]):
            val = obs[row, col]
            if val == -1:
                symbol = "."
            elif val == FLAGGED_CODE:
                symbol = "F"
            elif val == EXPLODED_CODE:
                symbol = "X"
            elif val == 9:
                symbol = "*"
            elif val == 0:
                symbol = " "
            else:
                symbol = str(val)
            if (row, col) == selected:
                row_str += f"[{symbol}]"
            else:
                row_str += f" {symbol} "
        lines.append(row_str.rstrip())

    return "\n".join(lines)
