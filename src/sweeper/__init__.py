"""
Minesweeper game module.

Provides the board engine, terrain-mode growth scheduling and the game
session surface consumed by front-ends.
"""
from .cell import Cell, Marker
from .board import Board, BoardConfig, GameState, BEGINNER, INTERMEDIATE, EXPERT
from .growth import GrowthState, TerrainConfig, growth_interval
from .session import GameSession
from .settings import CustomSettings, Difficulty
from .environment import MinesweeperEnv, render_ansi

__all__ = [
    "Cell",
    "Marker",
    "Board",
    "BoardConfig",
    "GameState",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "GrowthState",
    "TerrainConfig",
    "growth_interval",
    "GameSession",
    "CustomSettings",
    "Difficulty",
    "MinesweeperEnv",
    "render_ansi",
]
