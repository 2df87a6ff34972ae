"""
Cell module for MenuMines.

Represents individual positions on the board: whether they hold a
mine, their visible state (hidden/flagged/revealed), and whether they
are the mine that ended the game.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visible states of a cell."""

    HIDDEN = "hidden"
    FLAGGED = "flagged"
    REVEALED = "revealed"


HIDDEN_CODE = -1
FLAGGED_CODE = -2
MINE_CODE = 9
EXPLODED_CODE = 10


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        has_mine: Whether this cell contains a mine.
        state: Current visible state (hidden, flagged or revealed).
        adjacent_mines: Mine count shown once revealed (0-8).
        is_exploded: True only for the mine that ended the game.
    """

    has_mine: bool = False
    state: CellState = CellState.HIDDEN
    adjacent_mines: int = 0
    is_exploded: bool = False

    def reveal(self, adjacent_mines: int = 0) -> bool:
        """
        Reveal this cell with the given neighbor count.

        Returns:
            True if cell was revealed, False if already revealed or
            flagged.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        self.adjacent_mines = adjacent_mines
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to its snapshot code.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine
            10: The mine that exploded
        """
        if self.state == CellState.HIDDEN:
            return HIDDEN_CODE
        if self.state == CellState.FLAGGED:
            return FLAGGED_CODE
        if self.has_mine:
            return EXPLODED_CODE if self.is_exploded else MINE_CODE
        return self.adjacent_mines

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "state": self.state.value,
            "adjacent_mines": self.adjacent_mines,
            "has_mine": self.has_mine,
            "is_exploded": self.is_exploded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        """Rebuild a cell from :meth:`to_dict` output."""
        adjacent_mines = int(data.get("adjacent_mines", 0))
        if not 0 <= adjacent_mines <= 8:
            raise ValueError(f"Invalid adjacent mine count: {adjacent_mines}")
        return cls(
            has_mine=bool(data["has_mine"]),
            state=CellState(data["state"]),
            adjacent_mines=adjacent_mines,
            is_exploded=bool(data.get("is_exploded", False)),
        )
