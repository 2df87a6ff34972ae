"""
Share text for completed MenuMines games.

The grid is a difficulty heat map: every cell, mine or not, is colored by
its adjacent mine count, so the text never gives away mine positions.
"""
from datetime import date, datetime, timezone
from typing import List, Optional, Union

from .board import Board, GameStatus
from .daily import utc_date


SAFE_EMOJI = "\U0001F7E9"    # green square
EASY_EMOJI = "\U0001F7E1"    # yellow circle
MEDIUM_EMOJI = "\U0001F7E0"  # orange circle
DANGER_EMOJI = "\U0001F534"  # red circle
FLAG_EMOJI = "\U0001F6A9"


def format_elapsed(elapsed_time: float) -> str:
    """Format seconds as ``m:ss``."""
    total = int(elapsed_time)
    return f"{total // 60}:{total % 60:02d}"


def difficulty_emoji(adjacent_mines: int) -> str:
    """Heat-map emoji for an adjacent mine count."""
    if adjacent_mines == 0:
        return SAFE_EMOJI
    if adjacent_mines <= 2:
        return EASY_EMOJI
    if adjacent_mines <= 4:
        return MEDIUM_EMOJI
    return DANGER_EMOJI


def _format_header(when: Union[date, datetime, None]) -> str:
    when = utc_date(when if when is not None else datetime.now(timezone.utc))
    return f"MenuMines {when:%b} {when.day}, {when.year}"


def _difficulty_grid(board: Board) -> List[str]:
    return [
        "".join(
            difficulty_emoji(board.adjacent_mine_count(row, col))
            for col in range(board.cols)
        )
        for row in range(board.rows)
    ]


def share_text(
    status: GameStatus,
    board: Board,
    elapsed_time: float,
    marked_mines: int,
    when: Union[date, datetime, None] = None,
) -> Optional[str]:
    """
    Build Wordle-style share text for a finished game.

    Args:
        status: Game status; only won and lost games can be shared.
        board: The played board.
        elapsed_time: Seconds played.
        marked_mines: Flags that sit on actual mines.
        when: Date for the header, read in UTC; defaults to now.

    Returns:
        Header, result line and heat-map rows joined by newlines, or
        None if the game is not finished.
    """
    if not status.is_over:
        return None

    verb = "Solved in" if status == GameStatus.WON else "Failed at"
    result_line = (
        f"{verb} {format_elapsed(elapsed_time)} "
        f"{FLAG_EMOJI} {marked_mines}/{board.config.mine_count}"
    )
    lines = [_format_header(when), result_line]
    lines.extend(_difficulty_grid(board))
    return "\n".join(lines)


def summary_text(status: GameStatus, elapsed_time: float) -> Optional[str]:
    """One-line outcome, e.g. "Solved in 42 seconds"."""
    seconds = int(elapsed_time)
    unit = "second" if seconds == 1 else "seconds"
    if status == GameStatus.WON:
        return f"Solved in {seconds} {unit}"
    if status == GameStatus.LOST:
        return f"Lost after {seconds} {unit}"
    return None
