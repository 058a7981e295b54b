"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their reveal state,
player marker (flag / question mark) and content (mine/number).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

MINE_SENTINEL = -1


class Marker(Enum):
    """Player markers on an unrevealed cell."""

    NONE = auto()
    FLAG = auto()
    QUESTION = auto()


# Right-click cycle: unmarked -> flagged -> question -> unmarked
_NEXT_MARKER = {
    Marker.NONE: Marker.FLAG,
    Marker.FLAG: Marker.QUESTION,
    Marker.QUESTION: Marker.NONE,
}


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        id: Linear index in the board (y * width + x).
        x: Column of the cell.
        y: Row of the cell.
        is_mine: Whether this cell contains a mine.
        is_revealed: Whether the cell has been uncovered. Never reset.
        marker: Flag / question mark placed by the player.
        adjacent: Count of mines in neighboring cells (0-8), or -1 when
            the cell itself is a mine.
    """

    id: int = 0
    x: int = 0
    y: int = 0
    is_mine: bool = False
    is_revealed: bool = False
    marker: Marker = Marker.NONE
    adjacent: int = 0

    def reveal(self) -> bool:
        """
        Reveal this cell.

        A question mark is cleared on reveal; a flag blocks it.

        Returns:
            True if cell was successfully revealed, False if already
            revealed or flagged.
        """
        if self.is_revealed or self.marker == Marker.FLAG:
            return False
        self.is_revealed = True
        self.marker = Marker.NONE
        return True

    def cycle_marker(self) -> bool:
        """
        Advance the marker one step in the flag cycle.

        Returns:
            True if the marker changed, False if cell is revealed.
        """
        if self.is_revealed:
            return False
        self.marker = _NEXT_MARKER[self.marker]
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is unrevealed with no marker."""
        return not self.is_revealed and self.marker == Marker.NONE

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.marker == Marker.FLAG

    @property
    def is_question(self) -> bool:
        """Check if cell carries a question mark."""
        return self.marker == Marker.QUESTION

    def to_observation(self) -> int:
        """
        Convert cell to a compact integer code for rendering.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Question-marked cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.is_revealed:
            return 9 if self.is_mine else self.adjacent
        if self.marker == Marker.FLAG:
            return -2
        if self.marker == Marker.QUESTION:
            return -3
        return -1
