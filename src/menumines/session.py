"""
Game session for MenuMines.

Wraps a single board with the game status, timer, keyboard selection
and first-click safety. Every command re-evaluates win/lose after it
mutates the board.
"""
import logging
import random
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .board import Board, BoardConfig, GameStatus, Position, RevealResult
from .daily import today_seed
from .share import share_text, summary_text
from .timer import Clock, GameTimer


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class PuzzleType(Enum):
    """Daily puzzles are date-seeded; random ones come from continuous play."""

    DAILY = "daily"
    RANDOM = "random"


class Direction(Enum):
    """Keyboard navigation directions."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


# ============================================================================
# Game Result
# ============================================================================

@dataclass(frozen=True)
class GameResult:
    """
    Outcome of a single completed game.

    Attributes:
        won: Whether the player won.
        elapsed_time: Seconds played.
        daily_seed: Seed of the played board.
        completed_at: UTC time of completion.
        puzzle_type: Daily or random puzzle.
        flag_count: Flags on the board when the game ended.
    """

    won: bool
    elapsed_time: float
    daily_seed: int
    completed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    puzzle_type: PuzzleType = PuzzleType.DAILY
    flag_count: int = 0


CompletionCallback = Callable[[GameResult], None]


# ============================================================================
# Session Class
# ============================================================================

class Session:
    """
    State machine around one board.

    Status only moves forward (not started -> playing -> won/lost);
    ``reset`` replaces the board, status, timer and selection wholesale.
    Out-of-bounds coordinates and commands on a finished game are
    no-ops.
    """

    def __init__(
        self,
        board: Board,
        puzzle_type: PuzzleType = PuzzleType.DAILY,
        clock: Clock = time.monotonic,
        on_complete: Optional[CompletionCallback] = None,
        relocation_rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize a fresh session.

        Args:
            board: The board to play; the session takes ownership.
            puzzle_type: Whether this is a daily or random puzzle.
            clock: Monotonic time source for the timer.
            on_complete: Called once with the result when a game ends.
            relocation_rng: Source for first-click relocation; defaults
                to system randomness.
        """
        self.puzzle_type = puzzle_type
        self.on_complete = on_complete
        self._clock = clock
        self._relocation_rng = relocation_rng
        self._start(board)

    def _start(self, board: Board) -> None:
        self._board = board
        self._status = GameStatus.NOT_STARTED
        self._timer = GameTimer(self._clock)
        self._flag_count = board.flag_count
        self._selected_row = 0
        self._selected_col = 0
        self._first_click_taken = False
        self._is_paused = False

    @classmethod
    def restored(
        cls,
        board: Board,
        status: GameStatus,
        elapsed_time: float = 0.0,
        flag_count: Optional[int] = None,
        selection: Position = (0, 0),
        puzzle_type: PuzzleType = PuzzleType.DAILY,
        clock: Clock = time.monotonic,
        on_complete: Optional[CompletionCallback] = None,
        relocation_rng: Optional[random.Random] = None,
    ) -> "Session":
        """
        Rebuild a session in a previously reached state.

        A restored game in progress comes back paused; the caller
        resumes it. ``flag_count`` defaults to the flags on the board.
        """
        session = cls(
            board,
            puzzle_type=puzzle_type,
            clock=clock,
            on_complete=on_complete,
            relocation_rng=relocation_rng,
        )
        session._status = status
        session._timer = GameTimer(clock, elapsed=elapsed_time)
        if flag_count is not None:
            session._flag_count = flag_count
        session._selected_row, session._selected_col = session._clamp(*selection)
        session._first_click_taken = (
            status != GameStatus.NOT_STARTED or board.revealed_count > 0
        )
        session._is_paused = status == GameStatus.PLAYING
        return session

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def board(self) -> Board:
        return self._board

    @property
    def seed(self) -> int:
        return self._board.seed

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def elapsed_time(self) -> float:
        return self._timer.elapsed

    @property
    def flag_count(self) -> int:
        return self._flag_count

    @property
    def selection(self) -> Position:
        return self._selected_row, self._selected_col

    @property
    def first_click_taken(self) -> bool:
        return self._first_click_taken

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def is_over(self) -> bool:
        return self._status.is_over

    @property
    def correctly_flagged_count(self) -> int:
        """Flags that sit on actual mines."""
        return sum(
            cell.is_flagged and cell.has_mine
            for row in self._board.cells
            for cell in row
        )

    # ========================================================================
    # Commands
    # ========================================================================

    def reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal a cell.

        Clicking a revealed number is a chord reveal. The first reveal
        of the session never hits a mine: a mine under it is moved
        elsewhere before revealing.

        Returns:
            The board's result, or ``safe(0)`` when nothing happened.
        """
        if self.is_over:
            return RevealResult.safe(0)
        cell = self._board.get_cell(row, col)
        if cell is None:
            return RevealResult.safe(0)

        if cell.is_revealed and cell.adjacent_mines > 0:
            return self.chord_reveal(row, col)
        if not cell.is_hidden:
            return RevealResult.safe(0)

        if not self._first_click_taken:
            self._first_click_taken = True
            if cell.has_mine:
                self._board.relocate_mine(row, col, rng=self._relocation_rng)
                logger.debug("Relocated mine from first click at (%d, %d)", row, col)

        result = self._board.reveal(row, col)
        self._apply_result(result)
        return result

    def chord_reveal(self, row: int, col: int) -> RevealResult:
        """Chord reveal around a satisfied number cell."""
        if self.is_over:
            return RevealResult.safe(0)
        result = self._board.chord_reveal(row, col)
        self._apply_result(result)
        return result

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell and keep the flag count in step.

        Returns:
            True if the flag was toggled.
        """
        if self.is_over:
            return False
        cell = self._board.get_cell(row, col)
        if cell is None or not self._board.toggle_flag(row, col):
            return False

        if cell.is_flagged:
            self._flag_count += 1
        elif self._flag_count > 0:
            self._flag_count -= 1
        else:
            logger.warning(
                "Refusing to decrement flag count below zero at (%d, %d), seed %d",
                row, col, self.seed,
            )
        return True

    def reset(
        self,
        seed: Optional[int] = None,
        puzzle_type: Optional[PuzzleType] = None,
        config: Optional[BoardConfig] = None,
    ) -> None:
        """
        Start over on a brand-new board.

        Args:
            seed: Seed of the new board; defaults to the current seed.
            puzzle_type: New puzzle type; defaults to the current one.
            config: New board configuration; defaults to the current one.
        """
        self._timer.stop()
        if puzzle_type is not None:
            self.puzzle_type = puzzle_type
        board = Board(
            seed=self.seed if seed is None else seed,
            config=config or self._board.config,
        )
        self._start(board)

    def pause_timer(self) -> None:
        """Pause the timer, e.g. when the game is hidden."""
        self._timer.pause()
        if self._status == GameStatus.PLAYING:
            self._is_paused = True

    def resume_timer(self) -> None:
        """Resume the timer of a game in progress."""
        if self._status != GameStatus.PLAYING:
            return
        self._is_paused = False
        self._timer.resume()

    def move_selection(self, direction: Direction) -> Position:
        """Move the keyboard cursor one cell, clamped to the board."""
        delta_row, delta_col = direction.value
        self._selected_row, self._selected_col = self._clamp(
            self._selected_row + delta_row, self._selected_col + delta_col
        )
        return self.selection

    def reveal_selected(self) -> RevealResult:
        return self.reveal(self._selected_row, self._selected_col)

    def toggle_flag_selected(self) -> bool:
        return self.toggle_flag(self._selected_row, self._selected_col)

    def chord_reveal_selected(self) -> RevealResult:
        return self.chord_reveal(self._selected_row, self._selected_col)

    def check_for_daily_rollover(
        self, now: Union[date, datetime, None] = None
    ) -> bool:
        """
        Move a daily session onto today's puzzle when the day changed.

        A game in progress keeps its board until it ends. Random
        puzzles are not tied to a date and never roll over.

        Returns:
            True if the session rolled over.
        """
        if self.puzzle_type != PuzzleType.DAILY:
            return False
        seed = today_seed(now)
        if self.seed == seed or self._status == GameStatus.PLAYING:
            return False
        logger.info("Rolling over from puzzle %d to %d", self.seed, seed)
        self.reset(seed=seed)
        return True

    def share_text(self, when: Union[date, datetime, None] = None) -> Optional[str]:
        """Share text for a finished game, or None while unresolved."""
        return share_text(
            self._status,
            self._board,
            self.elapsed_time,
            self.correctly_flagged_count,
            when,
        )

    def summary_text(self) -> Optional[str]:
        return summary_text(self._status, self.elapsed_time)

    # ========================================================================
    # Internals
    # ========================================================================

    def _clamp(self, row: int, col: int) -> Tuple[int, int]:
        return (
            min(max(row, 0), self._board.rows - 1),
            min(max(col, 0), self._board.cols - 1),
        )

    def _apply_result(self, result: RevealResult) -> None:
        """Update status and timer after the board changed."""
        if result.is_mine:
            self._board.mark_exploded(*result.mine_position)
            self._board.reveal_all_mines()
            self._finish(won=False)
            return

        if result.cells_revealed == 0:
            return
        if self._status == GameStatus.NOT_STARTED:
            self._status = GameStatus.PLAYING
            self._timer.start()
        if self._board.is_cleared():
            self._finish(won=True)

    def _finish(self, won: bool) -> None:
        self._status = GameStatus.WON if won else GameStatus.LOST
        self._timer.stop()
        self._is_paused = False
        if self.on_complete is None:
            return
        self.on_complete(
            GameResult(
                won=won,
                elapsed_time=self.elapsed_time,
                daily_seed=self.seed,
                puzzle_type=self.puzzle_type,
                flag_count=self._flag_count,
            )
        )


def new_session(
    seed: int,
    rows: int,
    cols: int,
    mine_count: int,
    **kwargs,
) -> Session:
    """
    Create a session on a freshly generated board.

    Raises:
        InvalidConfiguration: If the mines cannot fit on the board.
    """
    board = Board(seed=seed, config=BoardConfig(rows, cols, mine_count))
    return Session(board, **kwargs)
