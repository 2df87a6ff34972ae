"""
MenuMines game engine.

Provides the deterministic daily Minesweeper core: seeded boards,
game sessions, daily seeds, persistence, statistics and share text.
"""
from .random_source import LinearCongruentialRandom
from .cell import Cell, CellState
from .board import (
    Board,
    BoardConfig,
    GameStatus,
    InvalidConfiguration,
    RevealResult,
    DAILY,
    CLASSIC,
)
from .daily import seed_from_date, date_from_seed, today_seed, random_seed, daily_board
from .timer import GameTimer
from .session import Direction, GameResult, PuzzleType, Session, new_session
from .stats import StatsStore
from .persistence import GameSnapshot, SnapshotStore, save_session, restore_session
from .share import share_text, summary_text
from .environment import MinesweeperEnv

__all__ = [
    "LinearCongruentialRandom",
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "GameStatus",
    "InvalidConfiguration",
    "RevealResult",
    "DAILY",
    "CLASSIC",
    "seed_from_date",
    "date_from_seed",
    "today_seed",
    "random_seed",
    "daily_board",
    "GameTimer",
    "Direction",
    "GameResult",
    "PuzzleType",
    "Session",
    "new_session",
    "StatsStore",
    "GameSnapshot",
    "SnapshotStore",
    "save_session",
    "restore_session",
    "share_text",
    "summary_text",
    "MinesweeperEnv",
]
