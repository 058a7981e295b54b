"""
Board module for Minesweeper game.

Implements the game board with deferred mine placement, flood-fill
revealing, chording, mine growth and game state management.

Cells are addressed by their linear index ``y * width + x``. Every
command returns whether the board changed; invalid commands (out of
range, game over, revealed target) are no-ops that return False.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell, MINE_SENTINEL

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place on the first reveal.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.width * self.height
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.width * self.height


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Manages the row-major cell sequence, mine placement, revealing logic,
    mine growth and win/lose conditions.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    seed: Optional[int] = None
    _cells: List[Cell] = field(default_factory=list, repr=False)
    _game_state: GameState = GameState.PLAYING
    _first_click_done: bool = False
    _mine_count: int = 0
    _rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._rng = np.random.default_rng(self.seed)
        self._init_grid()

    @classmethod
    def from_mines(
        cls,
        width: int,
        height: int,
        mines: Iterable[int],
        seed: Optional[int] = None,
    ) -> "Board":
        """
        Build a board with a fixed mine layout, first click already done.

        Args:
            width: Number of columns.
            height: Number of rows.
            mines: Indices of the mined cells.
            seed: Seed for later mine growth.

        Raises:
            ValueError: If a mine index is outside the board.
        """
        mine_set = set(mines)
        total_cells = width * height
        outside = sorted(i for i in mine_set if not 0 <= i < total_cells)
        if outside:
            raise ValueError(f"Mine indices outside the board: {outside}")
        board = cls(BoardConfig(width, height, len(mine_set)), seed=seed)
        for index in mine_set:
            board._cells[index].is_mine = True
        board._calculate_adjacent_mines()
        board._first_click_done = True
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create an empty, mine-less cell sequence."""
        self._cells = [
            Cell(id=index, x=index % self.width, y=index // self.width)
            for index in range(self.config.total_cells)
        ]
        self._game_state = GameState.PLAYING
        self._first_click_done = False
        self._mine_count = self.config.num_mines

    def _place_mines(self, safe: Set[int]) -> None:
        """
        Place mines uniformly at random outside the safe set.

        Args:
            safe: Indices that must stay mine-free.
        """
        eligible = np.array(
            [index for index in range(len(self._cells)) if index not in safe],
            dtype=np.int64,
        )
        count = min(self._mine_count, len(eligible))
        if count < self._mine_count:
            logger.warning(
                "Only %d cells available for %d mines; placing %d",
                len(eligible), self._mine_count, count,
            )
            self._mine_count = count

        if count:
            chosen = self._rng.choice(eligible, size=count, replace=False)
            for index in chosen:
                self._cells[int(index)].is_mine = True
        logger.debug("Placed %d mines avoiding %d safe cells", count, len(safe))

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for cell in self._cells:
            if cell.is_mine:
                cell.adjacent = MINE_SENTINEL
            else:
                cell.adjacent = self._count_adjacent_mines(cell.id)

    def _count_adjacent_mines(self, index: int) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(1 for n in self.neighbors(index) if self._cells[n].is_mine)

    # ========================================================================
    # Index Utilities (Low-level)
    # ========================================================================

    def index_of(self, x: int, y: int) -> int:
        """Convert (x, y) coordinates to a linear index."""
        return y * self.width + x

    def coords(self, index: int) -> Tuple[int, int]:
        """Convert a linear index to (x, y) coordinates."""
        return index % self.width, index // self.width

    def is_valid_index(self, index: int) -> bool:
        """Check if index addresses a cell on the board."""
        return 0 <= index < len(self._cells)

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, index: int) -> List[int]:
        """
        Get indices of the valid 8-neighborhood of a cell.

        Args:
            index: Linear index of center cell.

        Returns:
            List of neighbor indices in row-major order.
        """
        cx, cy = self.coords(index)
        result = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                nx, ny = cx + dx, cy + dy
                if self._is_valid_position(nx, ny):
                    result.append(self.index_of(nx, ny))
        return result

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, index: int) -> bool:
        """
        Reveal the cell at the given index.

        On the first reveal, mines are placed avoiding this cell and its
        neighbors. Zero cells flood-fill outward; a mine loses the game.

        Args:
            index: Linear index to reveal.

        Returns:
            True if the board changed, False otherwise.
        """
        if self._game_state != GameState.PLAYING:
            return False
        if not self.is_valid_index(index):
            return False

        placed = False
        if not self._first_click_done:
            self._handle_first_click(index)
            placed = True

        cell = self._cells[index]
        if cell.is_revealed or cell.is_flagged:
            return placed

        if cell.is_mine:
            self._lose(index)
            return True

        self._flood_fill(index)
        self._check_win_condition()
        return True

    def _handle_first_click(self, index: int) -> None:
        """Handle first click: place mines and calculate counts."""
        safe = {index, *self.neighbors(index)}
        self._place_mines(safe)
        self._calculate_adjacent_mines()
        self._first_click_done = True

    def _flood_fill(self, start: int) -> int:
        """
        Breadth-first reveal from a safe cell.

        Flags and mines are boundaries; only zero cells expand.

        Returns:
            Number of cells revealed.
        """
        queue = deque([start])
        visited: Set[int] = set()
        revealed = 0

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)

            cell = self._cells[current]
            if not cell.reveal():
                continue
            revealed += 1

            if cell.adjacent != 0:
                continue
            for n in self.neighbors(current):
                neighbor = self._cells[n]
                if n in visited or neighbor.is_revealed:
                    continue
                if neighbor.is_flagged or neighbor.is_mine:
                    continue
                queue.append(n)

        logger.debug("Flood fill from %d revealed %d cells", start, revealed)
        return revealed

    def _lose(self, index: int) -> None:
        """Reveal the detonated mine and disclose every other mine."""
        self._cells[index].is_revealed = True
        self._game_state = GameState.LOST
        for cell in self._cells:
            if cell.is_mine:
                cell.is_revealed = True
        logger.info("Mine hit at %d; game lost", index)

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are revealed."""
        if self._game_state != GameState.PLAYING:
            return
        safe_total = len(self._cells) - self._mine_count
        if self.revealed_safe_count == safe_total:
            self._game_state = GameState.WON
            logger.info("All %d safe cells revealed; game won", safe_total)

    def toggle_flag(self, index: int) -> bool:
        """
        Cycle the marker of a cell: unmarked, flag, question, unmarked.

        Args:
            index: Linear index.

        Returns:
            True if the marker changed, False otherwise.
        """
        if self._game_state != GameState.PLAYING:
            return False
        if not self.is_valid_index(index):
            return False
        return self._cells[index].cycle_marker()

    def chord(self, index: int) -> bool:
        """
        Chord action: reveal all unflagged neighbors if flag count matches.

        Args:
            index: Linear index of a revealed numbered cell.

        Returns:
            True if any neighbor was revealed, False otherwise.
        """
        if not self._can_chord(index):
            return False

        revealed_any = False
        for n in self.neighbors(index):
            if self._game_state != GameState.PLAYING:
                break
            neighbor = self._cells[n]
            if neighbor.is_flagged or neighbor.is_revealed:
                continue
            revealed_any = self.reveal(n) or revealed_any

        return revealed_any

    def _can_chord(self, index: int) -> bool:
        """Check if chord action is valid."""
        if self._game_state != GameState.PLAYING:
            return False
        if not self.is_valid_index(index):
            return False
        cell = self._cells[index]
        if not cell.is_revealed or cell.adjacent <= 0:
            return False
        return self._count_adjacent_flags(index) == cell.adjacent

    def _count_adjacent_flags(self, index: int) -> int:
        """Count flagged cells adjacent to index."""
        return sum(1 for n in self.neighbors(index) if self._cells[n].is_flagged)

    def grow_mine(self) -> Optional[int]:
        """
        Turn one random unrevealed safe cell into a mine.

        Neighbor counts are bumped in place, so numbers already on
        display change. Does nothing before mines are placed or after
        the game is over.

        Returns:
            Index of the new mine, or None if nothing grew.
        """
        if self._game_state != GameState.PLAYING or not self._first_click_done:
            return None

        candidates = [
            cell.id for cell in self._cells
            if not cell.is_mine and not cell.is_revealed
        ]
        if not candidates:
            return None

        index = int(self._rng.choice(candidates))
        cell = self._cells[index]
        cell.is_mine = True
        cell.adjacent = MINE_SENTINEL
        for n in self.neighbors(index):
            if not self._cells[n].is_mine:
                self._cells[n].adjacent += 1
        self._mine_count += 1
        logger.debug("Mine grew at %d; %d mines live", index, self._mine_count)

        self._check_win_condition()
        return index

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.config.width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.config.height

    @property
    def cells(self) -> List[Cell]:
        """Row-major cell sequence."""
        return self._cells

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_game_over(self) -> bool:
        """Check if game has ended, won or lost."""
        return self._game_state != GameState.PLAYING

    @property
    def is_win(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def first_click_done(self) -> bool:
        """Whether mines have been placed."""
        return self._first_click_done

    @property
    def mine_count(self) -> int:
        """Live mine count, including grown mines."""
        return self._mine_count

    @property
    def initial_mine_count(self) -> int:
        """Mine count the board was configured with."""
        return self.config.num_mines

    @property
    def flags_placed(self) -> int:
        """Number of flagged cells."""
        return sum(1 for cell in self._cells if cell.is_flagged)

    @property
    def mines_remaining(self) -> int:
        """Mines not yet accounted for by flags, never negative."""
        return max(self._mine_count - self.flags_placed, 0)

    @property
    def revealed_safe_count(self) -> int:
        """Number of revealed non-mine cells."""
        return sum(
            1 for cell in self._cells if cell.is_revealed and not cell.is_mine
        )

    def get_cell(self, index: int) -> Optional[Cell]:
        """Get cell at index, or None if invalid."""
        if not self.is_valid_index(index):
            return None
        return self._cells[index]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy grid.

        Returns:
            2D int8 array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                -3 = question mark
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.fromiter(
            (cell.to_observation() for cell in self._cells),
            dtype=np.int8,
            count=len(self._cells),
        )
        return obs.reshape(self.height, self.width)

    def get_valid_actions(self) -> List[int]:
        """
        Get list of cells that can be revealed.

        Returns:
            Indices of unrevealed, unflagged cells.
        """
        return [
            cell.id for cell in self._cells
            if not cell.is_revealed and not cell.is_flagged
        ]

    def reset(self) -> None:
        """Reset board to initial state for new game."""
        self._init_grid()
