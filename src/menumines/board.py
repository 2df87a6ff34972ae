"""
Board module for MenuMines.

Implements the game board: seeded mine placement, flood-fill reveal,
flagging, chord reveal and first-click mine relocation.
"""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState
from .random_source import LinearCongruentialRandom


Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of a game."""

    NOT_STARTED = "not_started"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_over(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


# ============================================================================
# Configuration
# ============================================================================

class InvalidConfiguration(ValueError):
    """Raised when a board cannot be built with the requested settings."""


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a MenuMines board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mine_count: Total mines to place.
    """

    rows: int = 9
    cols: int = 9
    mine_count: int = 15

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise InvalidConfiguration("Board dimensions must be positive")
        if self.mine_count < 0:
            raise InvalidConfiguration("Number of mines cannot be negative")
        max_mines = self.rows * self.cols - 1
        if self.mine_count > max_mines:
            raise InvalidConfiguration(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.rows * self.cols


# Preset configurations
DAILY = BoardConfig(9, 9, 15)
CLASSIC = BoardConfig(8, 8, 10)


# ============================================================================
# Reveal Result
# ============================================================================

@dataclass(frozen=True)
class RevealResult:
    """
    Outcome of a reveal or chord reveal.

    Attributes:
        cells_revealed: Cells that went from unrevealed to revealed.
        is_mine: Whether a mine was hit.
        mine_position: Position of the mine that was hit, if any.
    """

    cells_revealed: int = 0
    is_mine: bool = False
    mine_position: Optional[Position] = None

    @classmethod
    def safe(cls, cells_revealed: int = 0) -> "RevealResult":
        return cls(cells_revealed=cells_revealed)

    @classmethod
    def mine(cls, position: Position) -> "RevealResult":
        return cls(is_mine=True, mine_position=position)

    @property
    def is_safe(self) -> bool:
        return not self.is_mine


# ============================================================================
# Board Class
# ============================================================================

_system_random = random.SystemRandom()


@dataclass
class Board:
    """
    MenuMines game board.

    Mines are placed once at construction from ``seed``; afterwards the
    board only changes through reveal, flag, relocation and explosion
    marking. Adjacent counts are computed on demand.
    """

    seed: int = 0
    config: BoardConfig = field(default_factory=lambda: DAILY)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Build the grid unless one was supplied."""
        if not self._grid:
            self._init_grid()
            self._place_mines()

    @classmethod
    def from_cells(cls, cells: List[List[Cell]], seed: int = 0) -> "Board":
        """
        Rebuild a board from an existing cell grid.

        The configuration is derived from the grid's shape and mines.

        Raises:
            InvalidConfiguration: If the grid is empty, ragged, or holds
                an impossible number of mines.
        """
        if not cells or not cells[0]:
            raise InvalidConfiguration("Board must have at least one cell")
        cols = len(cells[0])
        if any(len(row) != cols for row in cells):
            raise InvalidConfiguration(f"Each row must have {cols} columns")
        mine_count = sum(cell.has_mine for row in cells for cell in row)
        config = BoardConfig(len(cells), cols, mine_count)
        return cls(seed=seed, config=config, _grid=[list(row) for row in cells])

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.config.cols)]
            for _ in range(self.config.rows)
        ]

    def _place_mines(self) -> None:
        """Place mines by rejection sampling from the seeded source."""
        rng = LinearCongruentialRandom(self.seed)
        total_cells = self.config.total_cells
        placed = 0
        while placed < self.config.mine_count:
            index = rng.next_int(total_cells)
            cell = self._grid[index // self.config.cols][index % self.config.cols]
            if not cell.has_mine:
                cell.has_mine = True
                placed += 1

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighboring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for in-bounds neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.rows and 0 <= col < self.config.cols

    def adjacent_mine_count(self, row: int, col: int) -> int:
        """Count mines adjacent to a position."""
        return sum(
            1 for r, c in self._get_neighbors(row, col)
            if self._grid[r][c].has_mine
        )

    def adjacent_flag_count(self, row: int, col: int) -> int:
        """Count flagged cells adjacent to a position."""
        return sum(
            1 for r, c in self._get_neighbors(row, col)
            if self._grid[r][c].is_flagged
        )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal a cell, cascading through zero-count neighbors.

        Flagged, revealed and out-of-bounds targets are left alone.
        A mined target is revealed but never cascades; the cascade
        itself never reveals mines.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            ``RevealResult.mine`` if the target holds a mine, otherwise
            ``RevealResult.safe`` with the number of cells revealed.
        """
        if not self._is_valid_position(row, col):
            return RevealResult.safe(0)
        target = self._grid[row][col]
        if not target.is_hidden:
            return RevealResult.safe(0)

        if target.has_mine:
            target.reveal()
            return RevealResult.mine((row, col))

        stack = [(row, col)]
        cells_revealed = 0
        while stack:
            r, c = stack.pop()
            cell = self._grid[r][c]
            if not cell.is_hidden or cell.has_mine:
                continue
            count = self.adjacent_mine_count(r, c)
            cell.reveal(count)
            cells_revealed += 1
            if count == 0:
                stack.extend(
                    (nr, nc) for nr, nc in self._get_neighbors(r, c)
                    if self._grid[nr][nc].is_hidden
                )

        return RevealResult.safe(cells_revealed)

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell.

        Returns:
            True if flag was toggled, False otherwise.
        """
        if not self._is_valid_position(row, col):
            return False
        return self._grid[row][col].toggle_flag()

    def chord_reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal all hidden neighbors of a satisfied number cell.

        Only acts when the target is revealed with a non-zero count and
        exactly that many neighbors are flagged. Stops at the first
        neighbor that turns out to be a mine.

        Returns:
            ``RevealResult.mine`` for the first mine hit, otherwise the
            total cells revealed by all neighbor reveals.
        """
        if not self._is_valid_position(row, col):
            return RevealResult.safe(0)
        cell = self._grid[row][col]
        if not cell.is_revealed or cell.has_mine or cell.adjacent_mines == 0:
            return RevealResult.safe(0)
        if self.adjacent_flag_count(row, col) != cell.adjacent_mines:
            return RevealResult.safe(0)

        total = 0
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if not self._grid[neighbor_row][neighbor_col].is_hidden:
                continue
            result = self.reveal(neighbor_row, neighbor_col)
            if result.is_mine:
                return result
            total += result.cells_revealed
        return RevealResult.safe(total)

    def relocate_mine(
        self, row: int, col: int, rng: Optional[random.Random] = None
    ) -> bool:
        """
        Move the mine at a position to a random mine-free cell.

        The destination is chosen uniformly among cells without a mine,
        excluding the origin. It keeps its visible state.

        Args:
            row: Row of the mine to move.
            col: Column of the mine to move.
            rng: Source for the destination; defaults to system
                randomness, independent of the board seed.

        Returns:
            True if a mine was moved.
        """
        if not self._is_valid_position(row, col):
            return False
        origin = self._grid[row][col]
        if not origin.has_mine:
            return False

        candidates = [
            (r, c)
            for r in range(self.config.rows)
            for c in range(self.config.cols)
            if not self._grid[r][c].has_mine and (r, c) != (row, col)
        ]
        if not candidates:
            return False

        rng = rng or _system_random
        target_row, target_col = candidates[rng.randrange(len(candidates))]
        origin.has_mine = False
        self._grid[target_row][target_col].has_mine = True
        return True

    def mark_exploded(self, row: int, col: int) -> None:
        """Mark the cell as the mine that ended the game."""
        if self._is_valid_position(row, col):
            self._grid[row][col].is_exploded = True

    def reveal_all_mines(self) -> None:
        """Reveal every mine except flagged ones, after a loss."""
        for row in self._grid:
            for cell in row:
                if cell.has_mine and not cell.is_exploded and cell.is_hidden:
                    cell.reveal()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def cells(self) -> List[List[Cell]]:
        """The underlying grid; mutate only through board methods."""
        return self._grid

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._grid[row][col]

    @property
    def mine_count(self) -> int:
        """Number of mines currently on the board."""
        return sum(cell.has_mine for row in self._grid for cell in row)

    @property
    def flag_count(self) -> int:
        """Number of flagged cells."""
        return sum(cell.is_flagged for row in self._grid for cell in row)

    @property
    def revealed_count(self) -> int:
        """Number of revealed cells."""
        return sum(cell.is_revealed for row in self._grid for cell in row)

    def mine_positions(self) -> List[Position]:
        """Positions of all mines, in row-major order."""
        return [
            (r, c)
            for r in range(self.config.rows)
            for c in range(self.config.cols)
            if self._grid[r][c].has_mine
        ]

    def is_cleared(self) -> bool:
        """Check if every non-mine cell is revealed."""
        return all(
            cell.is_revealed
            for row in self._grid
            for cell in row
            if not cell.has_mine
        )

    def snapshot(self) -> np.ndarray:
        """
        Get a read-only view of the visible board.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
                10 = exploded mine
        """
        obs = np.zeros((self.config.rows, self.config.cols), dtype=np.int8)
        for row in range(self.config.rows):
            for col in range(self.config.cols):
                obs[row, col] = self._grid[row][col].to_observation()
        obs.flags.writeable = False
        return obs

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can still be revealed.

        Returns:
            List of (row, col) positions that are hidden.
        """
        return [
            (row, col)
            for row in range(self.config.rows)
            for col in range(self.config.cols)
            if self._grid[row][col].state == CellState.HIDDEN
        ]
