"""
Pytest configuration and shared fixtures.
"""
import random
import pytest
import sys
from pathlib import Path
from typing import Callable

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from menumines import Board, BoardConfig, Cell, Session, StatsStore, SnapshotStore


# ============================================================================
# Helpers
# ============================================================================

class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def board_from_layout(*rows: str, seed: int = 0) -> Board:
    """Build a board from rows of '*' (mine) and '.' (empty)."""
    cells = [[Cell(has_mine=char == "*") for char in row] for row in rows]
    return Board.from_cells(cells, seed=seed)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def make_board() -> Callable[..., Board]:
    """Factory building boards from ASCII layouts."""
    return board_from_layout


@pytest.fixture
def daily_board() -> Board:
    """The canonical 9x9 board with 15 mines for seed 20240315."""
    return Board(seed=20240315, config=BoardConfig(9, 9, 15))


@pytest.fixture
def corner_mine_board() -> Board:
    """A 5x5 board with a single mine in the bottom-right corner."""
    return board_from_layout(
        ".....",
        ".....",
        ".....",
        ".....",
        "....*",
    )


@pytest.fixture
def chord_board() -> Board:
    """
    A 3x3 board with mines in the top corners.

    The center and the top-middle cell both show 2.
    """
    return board_from_layout(
        "*.*",
        "...",
        "...",
    )


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return board_from_layout(*["....."] * 5)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """A controllable clock for timer tests."""
    return FakeClock()


@pytest.fixture
def session_factory(clock: FakeClock) -> Callable[..., Session]:
    """Build sessions on the fake clock with seeded relocation."""
    def factory(board: Board, **kwargs) -> Session:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("relocation_rng", random.Random(1234))
        return Session(board, **kwargs)

    return factory


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def snapshot_store(tmp_path: Path) -> SnapshotStore:
    """Snapshot store in a temporary directory."""
    return SnapshotStore(tmp_path / "snapshot.json")


@pytest.fixture
def stats_store(tmp_path: Path) -> StatsStore:
    """Stats store in a temporary directory."""
    return StatsStore(tmp_path / "stats.json")
