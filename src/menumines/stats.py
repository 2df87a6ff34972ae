"""
Game statistics for MenuMines.

Stores raw game results in a JSON file and derives win rate, times and
daily streaks from them on demand.
"""
import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .daily import date_from_seed
from .session import GameResult, PuzzleType


logger = logging.getLogger(__name__)


# ============================================================================
# Result Serialization
# ============================================================================

def result_to_dict(result: GameResult) -> Dict[str, Any]:
    """Convert a result to a JSON-friendly dictionary."""
    return {
        "won": result.won,
        "elapsed_time": result.elapsed_time,
        "daily_seed": result.daily_seed,
        "completed_at": result.completed_at.isoformat(),
        "puzzle_type": result.puzzle_type.value,
        "flag_count": result.flag_count,
    }


def result_from_dict(data: Dict[str, Any]) -> GameResult:
    """Rebuild a result; older records without a puzzle type are daily."""
    return GameResult(
        won=bool(data["won"]),
        elapsed_time=float(data["elapsed_time"]),
        daily_seed=int(data["daily_seed"]),
        completed_at=datetime.fromisoformat(data["completed_at"]),
        puzzle_type=PuzzleType(data.get("puzzle_type", PuzzleType.DAILY.value)),
        flag_count=int(data.get("flag_count", 0)),
    )


def _percent(part: int, whole: int) -> Optional[int]:
    if whole == 0:
        return None
    return round(part / whole * 100)


# ============================================================================
# Stats Store
# ============================================================================

class StatsStore:
    """
    Persistent list of completed games, newest first.

    Daily results are kept once per seed; random puzzles are always
    recorded. A ``path`` of None keeps results in memory only.
    """

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        results: Optional[List[GameResult]] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.results: List[GameResult] = list(results or [])
        if results is None:
            self._load()

    # ========================================================================
    # Recording
    # ========================================================================

    def record(self, result: GameResult) -> bool:
        """
        Record a result and persist it.

        Returns:
            False if a daily result for the same seed already exists.
        """
        if result.puzzle_type == PuzzleType.DAILY and self.daily_result(
            result.daily_seed
        ) is not None:
            return False
        self.results.insert(0, result)
        self._save()
        return True

    def reset(self) -> None:
        """Clear all statistics."""
        self.results = []
        if self.path is not None and self.path.exists():
            self.path.unlink()

    # ========================================================================
    # Overall Metrics
    # ========================================================================

    @property
    def games_played(self) -> int:
        return len(self.results)

    @property
    def wins(self) -> int:
        return sum(result.won for result in self.results)

    @property
    def win_rate(self) -> Optional[int]:
        """Win percentage (0-100), or None before any game."""
        return _percent(self.wins, self.games_played)

    @property
    def best_time(self) -> Optional[float]:
        times = [result.elapsed_time for result in self.results if result.won]
        return min(times) if times else None

    @property
    def average_time(self) -> Optional[float]:
        times = [result.elapsed_time for result in self.results if result.won]
        return sum(times) / len(times) if times else None

    @property
    def tracked_since(self) -> Optional[datetime]:
        if not self.results:
            return None
        return min(result.completed_at for result in self.results)

    # ========================================================================
    # Daily Metrics
    # ========================================================================

    @property
    def daily_results(self) -> List[GameResult]:
        return [r for r in self.results if r.puzzle_type == PuzzleType.DAILY]

    @property
    def daily_games_played(self) -> int:
        return len(self.daily_results)

    @property
    def daily_wins(self) -> int:
        return sum(result.won for result in self.daily_results)

    @property
    def daily_win_rate(self) -> Optional[int]:
        return _percent(self.daily_wins, self.daily_games_played)

    def daily_result(self, seed: int) -> Optional[GameResult]:
        """The recorded daily result for a seed, if any."""
        for result in self.daily_results:
            if result.daily_seed == seed:
                return result
        return None

    def is_daily_complete(self, seed: int) -> bool:
        return self.daily_result(seed) is not None

    @property
    def current_streak(self) -> int:
        """Consecutive UTC days, ending at the latest completed daily."""
        days = self._completion_days()
        if not days:
            return 0
        streak = 1
        for previous, current in zip(reversed(days[:-1]), reversed(days[1:])):
            if current - previous != timedelta(days=1):
                break
            streak += 1
        return streak

    @property
    def longest_streak(self) -> int:
        """Longest run of consecutive UTC days with a completed daily."""
        days = self._completion_days()
        if not days:
            return 0
        longest = current = 1
        for previous, day in zip(days, days[1:]):
            current = current + 1 if day - previous == timedelta(days=1) else 1
            longest = max(longest, current)
        return longest

    def _completion_days(self) -> List[date]:
        days = {date_from_seed(result.daily_seed) for result in self.daily_results}
        days.discard(None)
        return sorted(days)

    # ========================================================================
    # Persistence
    # ========================================================================

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path) as f:
                self.results = [result_from_dict(item) for item in json.load(f)]
        except (OSError, ValueError, KeyError, TypeError) as error:
            logger.warning("Failed to load stats from %s: %s", self.path, error)
            self.results = []

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump([result_to_dict(r) for r in self.results], f, indent=2)
        except OSError as error:
            logger.warning("Failed to save stats to %s: %s", self.path, error)
