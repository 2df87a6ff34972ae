"""
Unit tests for MinesweeperEnv.

Tests the Gymnasium interface over a session: spaces, rewards,
termination, action masks and text rendering.
"""
import numpy as np
import pytest
from menumines import BoardConfig, GameStatus, MinesweeperEnv, Session
from menumines.environment import render_ansi


@pytest.fixture
def env() -> MinesweeperEnv:
    """Environment on the 2024-03-15 daily board."""
    env = MinesweeperEnv()
    env.reset(seed=0, options={"board_seed": 20240315})
    return env


@pytest.fixture
def tiny_env(make_board) -> MinesweeperEnv:
    """2x2 environment with a single mine in the top-left corner."""
    env = MinesweeperEnv(config=BoardConfig(2, 2, 1), render_mode="ansi")
    env.reset(seed=0)
    env.session = Session(make_board("*.", ".."))
    return env


# ============================================================================
# Space Tests
# ============================================================================

class TestSpaces:
    """Test observation and action spaces."""

    def test_action_space_has_reveal_and_flag(self, env) -> None:
        assert env.action_space.n == 2 * 81

    def test_reset_observation(self, env) -> None:
        obs, info = env.reset(seed=0, options={"board_seed": 20240315})
        assert obs.shape == (9, 9)
        assert obs.dtype == np.int8
        assert np.all(obs == -1)
        assert env.observation_space.contains(obs)
        assert info["seed"] == 20240315
        assert info["game_state"] == "NOT_STARTED"
        assert info["total_safe"] == 66

    def test_seeded_reset_is_reproducible(self) -> None:
        first, second = MinesweeperEnv(), MinesweeperEnv()
        _, info_a = first.reset(seed=7)
        _, info_b = second.reset(seed=7)
        assert info_a["seed"] == info_b["seed"]
        assert first.session.board == second.session.board


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test rewards and termination."""

    def test_safe_reveal_reward(self, env) -> None:
        obs, reward, terminated, truncated, info = env.step(0)
        assert reward == 1.0
        assert not terminated and not truncated
        assert obs[0, 0] == 1
        assert info["steps"] == 1
        assert info["game_state"] == "PLAYING"

    def test_repeat_reveal_is_penalized(self, env) -> None:
        env.step(0)
        _, reward, _, _, _ = env.step(0)
        assert reward == -0.1

    def test_flag_action(self, env) -> None:
        obs, reward, _, _, info = env.step(81 + 4)
        assert reward == 0.0
        assert obs[0, 4] == -2
        assert info["flag_count"] == 1

    def test_flag_on_revealed_cell_is_penalized(self, env) -> None:
        env.step(0)
        _, reward, _, _, _ = env.step(81)
        assert reward == -0.1

    def test_mine_terminates(self, env) -> None:
        env.step(0)
        obs, reward, terminated, _, _ = env.step(1 * 9 + 1)
        assert reward == -10.0
        assert terminated
        assert obs[1, 1] == 10
        assert env.session.status == GameStatus.LOST

    def test_win_terminates(self, tiny_env) -> None:
        assert tiny_env.step(1)[1] == 1.0
        assert tiny_env.step(2)[1] == 1.0
        _, reward, terminated, _, _ = tiny_env.step(3)
        assert reward == 10.0
        assert terminated


# ============================================================================
# Action Mask Tests
# ============================================================================

class TestActionMask:
    """Test valid action masks."""

    def test_initial_mask(self, env) -> None:
        mask = env.get_action_mask()
        assert mask.shape == (162,)
        assert mask.all()

    def test_flagged_cell_can_only_be_unflagged(self, env) -> None:
        env.step(81)
        mask = env.get_action_mask()
        assert not mask[0]
        assert mask[81]

    def test_mask_empty_after_game_over(self, env) -> None:
        env.step(0)
        env.step(10)
        assert not env.get_action_mask().any()


# ============================================================================
# Render Tests
# ============================================================================

class TestRender:
    """Test text rendering."""

    def test_render_hidden_board(self, tiny_env) -> None:
        assert tiny_env.render() == " .  .\n .  ."

    def test_render_after_loss(self, tiny_env) -> None:
        tiny_env.step(3)
        tiny_env.step(0)
        assert tiny_env.render().splitlines()[0] == " X  ."

    def test_render_selection(self, tiny_env) -> None:
        assert render_ansi(tiny_env.session, show_selection=True).startswith("[.]")
