"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sweeper import Board, BoardConfig, Cell, GameSession, TerrainConfig


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(seed=1234)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


@pytest.fixture
def corner_mine_board() -> Board:
    """
    5x5 board with a single mine in the top-left corner.

        * 1 . . .
        1 1 . . .
        . . . . .
    """
    return Board.from_mines(5, 5, [0], seed=7)


@pytest.fixture
def chord_board() -> Board:
    """
    3x3 board with mines at indices 0 and 2; center shows 2.

        * 2 *
        1 2 1
        0 0 0
    """
    return Board.from_mines(3, 3, [0, 2], seed=7)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True, adjacent=-1)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def fast_terrain() -> TerrainConfig:
    """Terrain timing fast enough for tests."""
    return TerrainConfig(
        tick_seconds=0.01, tiers=((20, 0.05), (50, 0.04)), fallback_seconds=0.03
    )


@pytest.fixture
def session() -> GameSession:
    """Create a beginner session with a fixed seed."""
    return GameSession(BoardConfig(9, 9, 10), seed=42)
