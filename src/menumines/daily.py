"""
Daily puzzle seeds for MenuMines.

Every player gets the same board on the same UTC calendar day. The seed
is the date written as ``YYYYMMDD``; random (continuous play) puzzles use
negative seeds so they can never collide with a daily one.
"""
import random
from datetime import date, datetime, timezone
from typing import Optional, Union

from .board import Board, BoardConfig, DAILY


DateLike = Union[date, datetime]

MAX_SEED = (1 << 63) - 1


def utc_date(value: DateLike) -> date:
    """
    Calendar date of ``value`` in UTC.

    Naive datetimes are local time, as everywhere else in Python, and
    are converted like aware ones. Plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).date()
    return value


def seed_from_date(value: DateLike) -> int:
    """
    Compute the daily seed for a date.

    Example: 2024-03-15 -> 20240315. Datetimes are converted to UTC
    first (naive ones are read as local time), so the same instant gives
    the same seed in any timezone.

    Args:
        value: A datetime instant, or a calendar date.

    Returns:
        ``year * 10000 + month * 100 + day`` of the UTC calendar date.
    """
    day = utc_date(value)
    return day.year * 10000 + day.month * 100 + day.day


def date_from_seed(seed: int) -> Optional[date]:
    """Inverse of :func:`seed_from_date`; None for non-daily seeds."""
    if seed <= 0:
        return None
    try:
        return date(seed // 10000, seed // 100 % 100, seed % 100)
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_seed(now: Optional[DateLike] = None) -> int:
    """Seed of today's daily puzzle (or of ``now`` when given)."""
    return seed_from_date(now if now is not None else utc_now())


def random_seed(rng: Optional[random.Random] = None) -> int:
    """Draw a negative seed for a random puzzle."""
    rng = rng or random.SystemRandom()
    return -rng.randint(1, MAX_SEED)


def daily_board(
    now: Optional[DateLike] = None, config: BoardConfig = DAILY
) -> Board:
    """Build the daily board for today (or for ``now``)."""
    return Board(seed=today_seed(now), config=config)
