"""
Session persistence for MenuMines.

Snapshots carry everything needed to resume a game exactly and are
stored as JSON. Unreadable snapshots are logged, removed and treated as
missing so a corrupt file never blocks starting a game.
"""
import json
import logging
import random
import time
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .board import Board, BoardConfig, DAILY, GameStatus
from .cell import Cell
from .daily import random_seed, today_seed
from .session import CompletionCallback, PuzzleType, Session
from .stats import StatsStore
from .timer import Clock


logger = logging.getLogger(__name__)


# ============================================================================
# Game Snapshot
# ============================================================================

@dataclass
class GameSnapshot:
    """
    Everything needed to resume a session.

    Attributes:
        seed: Seed the board was generated from.
        cells: Full cell grid, including mines and explosion marks.
        status: Game status at save time.
        elapsed_time: Seconds played.
        flag_count: Flag count reported by the session.
        selected_row: Keyboard cursor row.
        selected_col: Keyboard cursor column.
        puzzle_type: Daily or random puzzle.
    """

    seed: int
    cells: List[List[Cell]]
    status: GameStatus
    elapsed_time: float
    flag_count: int
    selected_row: int = 0
    selected_col: int = 0
    puzzle_type: PuzzleType = PuzzleType.DAILY

    @classmethod
    def from_session(cls, session: Session) -> "GameSnapshot":
        """Capture a session's current state."""
        row, col = session.selection
        return cls(
            seed=session.seed,
            cells=[
                [replace(cell) for cell in board_row]
                for board_row in session.board.cells
            ],
            status=session.status,
            elapsed_time=session.elapsed_time,
            flag_count=session.flag_count,
            selected_row=row,
            selected_col=col,
            puzzle_type=session.puzzle_type,
        )

    def to_session(
        self,
        clock: Clock = time.monotonic,
        on_complete: Optional[CompletionCallback] = None,
        relocation_rng: Optional[random.Random] = None,
    ) -> Session:
        """
        Rebuild the saved session.

        The flag count is taken from the board itself; a stored count
        that disagrees is logged.
        """
        board = Board.from_cells(
            [[replace(cell) for cell in row] for row in self.cells],
            seed=self.seed,
        )
        actual_flags = board.flag_count
        if actual_flags != self.flag_count:
            logger.warning(
                "Flag count mismatch in snapshot for seed %d: stored %d, actual %d",
                self.seed, self.flag_count, actual_flags,
            )
        return Session.restored(
            board,
            status=self.status,
            elapsed_time=self.elapsed_time,
            flag_count=actual_flags,
            selection=(self.selected_row, self.selected_col),
            puzzle_type=self.puzzle_type,
            clock=clock,
            on_complete=on_complete,
            relocation_rng=relocation_rng,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "seed": self.seed,
            "rows": len(self.cells),
            "cols": len(self.cells[0]) if self.cells else 0,
            "cells": [[cell.to_dict() for cell in row] for row in self.cells],
            "status": self.status.value,
            "elapsed_time": self.elapsed_time,
            "flag_count": self.flag_count,
            "selected_row": self.selected_row,
            "selected_col": self.selected_col,
            "puzzle_type": self.puzzle_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSnapshot":
        """
        Rebuild a snapshot from :meth:`to_dict` output.

        Raises:
            KeyError, TypeError, ValueError: If the payload is malformed
                or describes an impossible board (``InvalidConfiguration``).
        """
        cells = [[Cell.from_dict(cell) for cell in row] for row in data["cells"]]
        rows, cols = int(data["rows"]), int(data["cols"])
        if len(cells) != rows or any(len(row) != cols for row in cells):
            raise ValueError(f"Expected a {rows}x{cols} cell grid")
        BoardConfig(rows, cols, sum(cell.has_mine for row in cells for cell in row))
        return cls(
            seed=int(data["seed"]),
            cells=cells,
            status=GameStatus(data["status"]),
            elapsed_time=float(data["elapsed_time"]),
            flag_count=int(data["flag_count"]),
            selected_row=int(data.get("selected_row", 0)),
            selected_col=int(data.get("selected_col", 0)),
            puzzle_type=PuzzleType(data.get("puzzle_type", PuzzleType.DAILY.value)),
        )


# ============================================================================
# Snapshot Store
# ============================================================================

class SnapshotStore:
    """JSON file holding at most one saved snapshot."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def save(self, snapshot: GameSnapshot) -> bool:
        """
        Write the snapshot to disk.

        Returns:
            True if the file was written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
        except OSError as error:
            logger.warning(
                "Failed to save snapshot for seed %d: %s", snapshot.seed, error
            )
            return False
        return True

    def load_any_day(self) -> Optional[GameSnapshot]:
        """Load the saved snapshot regardless of its day."""
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                return GameSnapshot.from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError) as error:
            logger.warning("Discarding unreadable snapshot %s: %s", self.path, error)
            self.clear()
            return None

    def load(self, seed: int) -> Optional[GameSnapshot]:
        """Load the snapshot only if it belongs to ``seed``; else clear it."""
        snapshot = self.load_any_day()
        if snapshot is None:
            return None
        if snapshot.seed != seed:
            self.clear()
            return None
        return snapshot

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


# ============================================================================
# Save / Restore Coordination
# ============================================================================

def save_session(session: Session, store: SnapshotStore) -> bool:
    """
    Persist a daily session that has started.

    Random puzzles and untouched boards are not saved.

    Returns:
        True if a snapshot was written.
    """
    if session.status == GameStatus.NOT_STARTED:
        return False
    if session.puzzle_type != PuzzleType.DAILY:
        return False
    return store.save(GameSnapshot.from_session(session))


def restore_session(
    snapshots: SnapshotStore,
    stats: StatsStore,
    now: Union[date, datetime, None] = None,
    continuous_play: bool = False,
    config: BoardConfig = DAILY,
    clock: Clock = time.monotonic,
    on_complete: Optional[CompletionCallback] = None,
) -> Session:
    """
    Pick the session to show when the game opens.

    With continuous play off, the saved game is restored: today's
    snapshot as-is, a previous day's only while still in progress.
    A finished daily puzzle without a snapshot is rebuilt from its
    recorded result. With continuous play on, play starts fresh: a
    random puzzle once today's daily is done, else today's daily.
    """
    seed = today_seed(now)
    session_options = {"clock": clock, "on_complete": on_complete}

    if continuous_play:
        snapshots.clear()
        if stats.is_daily_complete(seed):
            return Session(
                Board(seed=random_seed(), config=config),
                puzzle_type=PuzzleType.RANDOM,
                **session_options,
            )
        return Session(Board(seed=seed, config=config), **session_options)

    snapshot = snapshots.load_any_day()
    if snapshot is not None:
        if snapshot.seed == seed or snapshot.status == GameStatus.PLAYING:
            return snapshot.to_session(**session_options)
        snapshots.clear()

    board = Board(seed=seed, config=config)
    result = stats.daily_result(seed)
    if result is not None:
        if not result.won:
            board.reveal_all_mines()
        return Session.restored(
            board,
            status=GameStatus.WON if result.won else GameStatus.LOST,
            elapsed_time=result.elapsed_time,
            flag_count=result.flag_count,
            **session_options,
        )

    return Session(board, **session_options)
