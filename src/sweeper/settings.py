"""
Difficulty presets and validated custom game settings.

The board engine trusts its inputs; these helpers are where a front-end
clamps player-chosen values before starting a game.
"""
from dataclasses import dataclass
from enum import Enum

from .board import BoardConfig, BEGINNER, INTERMEDIATE, EXPERT


MIN_SIDE = 5
MAX_WIDTH = 50
MAX_HEIGHT = 30


@dataclass
class CustomSettings:
    """
    Player-chosen board for the custom difficulty.

    Values are clamped into range on creation: dimensions to 5-50 columns
    and 5-30 rows, mines to 5%-40% of the cells, growth delay to a range that
    scales with board size.
    """

    width: int = 10
    height: int = 10
    mine_count: int = 10
    growth_delay: float = 10.0

    def __post_init__(self) -> None:
        """Clamp values after initialization."""
        self.width = min(max(self.width, MIN_SIDE), MAX_WIDTH)
        self.height = min(max(self.height, MIN_SIDE), MAX_HEIGHT)
        self.mine_count = min(max(self.mine_count, self.min_mines), self.max_mines)
        self.growth_delay = min(
            max(self.growth_delay, self.min_growth_delay), self.max_growth_delay
        )

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def min_mines(self) -> int:
        return int(self.total_cells * 0.05)

    @property
    def max_mines(self) -> int:
        return int(self.total_cells * 0.4)

    @property
    def min_growth_delay(self) -> float:
        return max(2.0, float(self.total_cells // 50))

    @property
    def max_growth_delay(self) -> float:
        return min(60.0, float(self.total_cells // 4))

    @property
    def config(self) -> BoardConfig:
        return BoardConfig(self.width, self.height, self.mine_count)


class Difficulty(Enum):
    """Named difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"
    CUSTOM = "custom"

    @property
    def config(self) -> BoardConfig:
        """Board configuration for this level."""
        if self is Difficulty.CUSTOM:
            return CustomSettings().config
        return _PRESETS[self]


_PRESETS = {
    Difficulty.BEGINNER: BEGINNER,
    Difficulty.INTERMEDIATE: INTERMEDIATE,
    Difficulty.EXPERT: EXPERT,
}
