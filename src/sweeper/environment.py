"""
Gymnasium environment wrapper for Minesweeper.

Drives a Board headlessly through the standard Env interface. Terrain
mode is step-driven here: a mine grows every ``growth_steps`` actions
instead of on a wall-clock timer.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig


ACTION_REVEAL = 0
ACTION_FLAG = 1
ACTION_CHORD = 2
NUM_ACTION_KINDS = 3

_SYMBOLS = {-1: ".", -2: "F", -3: "?", 9: "*", 0: " "}


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - -3 = question-marked cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete space of size 3 * width * height. Action a acts on cell
        a % cells with kind a // cells: reveal, flag cycle or chord.

    Rewards:
        - +1 for a command that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a no-op command
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        growth_steps: Optional[int] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
            growth_steps: Grow a mine every this many steps once mines
                are placed; None disables growth.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode
        self.growth_steps = growth_steps

        self.observation_space = spaces.Box(
            low=-3,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(
            NUM_ACTION_KINDS * self.config.total_cells
        )

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        board_seed = int(self.np_random.integers(0, 2**32))
        self.board = Board(self.config, seed=board_seed)
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded (kind, cell) action.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, index = self.decode_action(action)
        self._steps += 1

        reward = self._apply(kind, index)

        if self._should_grow():
            self.board.grow_mine()
            if self.board.is_win:
                reward = 10.0

        observation = self.board.get_observation()
        terminated = self.board.is_game_over
        return observation, reward, terminated, False, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int]:
        """Split an action into (kind, cell index)."""
        kind, index = divmod(int(action), self.config.total_cells)
        return kind, index

    def encode_action(self, kind: int, index: int) -> int:
        """Combine an action kind and cell index."""
        return kind * self.config.total_cells + index

    def _apply(self, kind: int, index: int) -> float:
        """Run one board command and score it."""
        if kind == ACTION_REVEAL:
            changed = self.board.reveal(index)
        elif kind == ACTION_FLAG:
            changed = self.board.toggle_flag(index)
        else:
            changed = self.board.chord(index)

        if not changed:
            return -0.1
        if self.board.is_win:
            return 10.0
        if self.board.is_lost:
            return -10.0
        return 1.0

    def _should_grow(self) -> bool:
        if not self.growth_steps or not self.board.is_playing:
            return False
        return self.board.first_click_done and self._steps % self.growth_steps == 0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.revealed_safe_count,
            "mine_count": self.board.mine_count,
            "mines_remaining": self.board.mines_remaining,
            "game_state": self.board.game_state.name,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_ansi(self.board)
        if self.render_mode == "human":
            print(render_ansi(self.board))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of reveal actions that can change the board.

        Returns:
            Boolean array over the full action space.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for index in self.board.get_valid_actions():
            mask[self.encode_action(ACTION_REVEAL, index)] = True
        return mask


def render_ansi(board: Board) -> str:
    """Render a board as ASCII, one row per line."""
    obs = board.get_observation()
    lines = []
    for row in obs:
        lines.append(" ".join(_SYMBOLS.get(int(val), str(int(val))) for val in row))
    return "\n".join(lines)
