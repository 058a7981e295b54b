"""
Game session: the command/query surface a front-end drives.

A session owns the current board, the terrain-mode growth timers, the
elapsed-time clock and the list of observers. Every command and timer
callback runs on the asyncio event loop of the caller, which serializes
all board mutation; the timers are plain tasks that are cancelled before
any board is replaced or frozen.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

import numpy as np

from .board import Board, BoardConfig
from .cell import Cell
from .growth import DEFAULT_TERRAIN, GrowthState, TerrainConfig, growth_interval
from .settings import CustomSettings, Difficulty

logger = logging.getLogger(__name__)

Observer = Callable[["GameSession"], None]


class GameSession:
    """
    One player's game: board plus terrain mode and presentation state.

    Commands return whether anything changed and never raise for bad
    indices. Observers are called after every change, including changes
    made by the growth timers.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        *,
        terrain: TerrainConfig = DEFAULT_TERRAIN,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the session with an empty board.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            terrain: Growth timing.
            seed: Seed for reproducible boards.
            clock: Monotonic time source for the elapsed clock.
        """
        self.config = config or BoardConfig()
        self.terrain = terrain
        self.growth = GrowthState()
        self.flag_mode = False

        self._rng = np.random.default_rng(seed)
        self._clock = clock
        self._started_at: Optional[float] = None
        self._ended_at: Optional[float] = None
        self._observers: List[Observer] = []
        self._growth_task: Optional[asyncio.Task] = None
        self._countdown_task: Optional[asyncio.Task] = None

        self.board = self._make_board()

    # ========================================================================
    # Observers
    # ========================================================================

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callback run after each state change.

        Returns:
            A function that removes the callback again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        # Observers never abort a command or a timer task
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception:
                logger.exception("Observer %r failed", observer)

    # ========================================================================
    # Game Lifecycle
    # ========================================================================

    def _make_board(self) -> Board:
        return Board(self.config, seed=int(self._rng.integers(0, 2**32)))

    def new_game(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        mines: Optional[int] = None,
    ) -> None:
        """
        Replace the board with a fresh, mine-less one.

        Omitted arguments keep their previous values. Growth timers are
        stopped before the board is replaced; terrain mode itself stays
        as it was.

        Raises:
            ValueError: If the resulting configuration is invalid.
        """
        config = BoardConfig(
            width if width is not None else self.config.width,
            height if height is not None else self.config.height,
            mines if mines is not None else self.config.num_mines,
        )
        self._stop_growth()
        self.growth.clear()

        self.config = config
        self.board = self._make_board()
        self.flag_mode = False
        self._started_at = None
        self._ended_at = None
        logger.info(
            "New game %dx%d with %d mines",
            config.width, config.height, config.num_mines,
        )
        self._notify()

    def apply_settings(
        self,
        difficulty: Difficulty,
        custom: Optional[CustomSettings] = None,
    ) -> None:
        """
        Start a new game at a difficulty level.

        A custom level takes its board and growth delay from ``custom``.
        A preset level clears any growth delay and turns terrain mode off.
        """
        if difficulty is Difficulty.CUSTOM:
            custom = custom or CustomSettings()
            self.set_growth_delay_override(custom.growth_delay)
            self.new_game(custom.width, custom.height, custom.mine_count)
            return

        config = difficulty.config
        self.set_growth_delay_override(None)
        self.set_terrain_mode_enabled(False)
        self.new_game(config.width, config.height, config.num_mines)

    def close(self) -> None:
        """Stop any running timers."""
        self._stop_growth()

    # ========================================================================
    # Commands
    # ========================================================================

    def reveal(self, index: int) -> bool:
        """Reveal a cell and lazily start terrain growth."""
        changed = self.board.reveal(index)
        if changed and self._started_at is None:
            self._started_at = self._clock()
        self.start_growth_if_needed()
        return self._after_command(changed)

    def toggle_flag(self, index: int) -> bool:
        """Cycle a cell's marker: unmarked, flag, question."""
        return self._after_command(self.board.toggle_flag(index))

    def chord(self, index: int) -> bool:
        """Reveal the neighbors of a satisfied numbered cell."""
        return self._after_command(self.board.chord(index))

    def primary_action(self, index: int) -> bool:
        """
        Left-click semantics.

        A revealed cell is chorded, flag mode toggles a flag, and
        anything else is revealed.
        """
        cell = self.board.get_cell(index)
        if cell is None:
            return False
        if cell.is_revealed:
            return self.chord(index)
        if self.flag_mode:
            return self.toggle_flag(index)
        return self.reveal(index)

    def set_terrain_mode_enabled(self, enabled: bool) -> None:
        """
        Turn the growing minefield on or off.

        Turning it on does not start growth; the next reveal does.
        Turning it off stops both timers and clears the countdown.
        """
        if enabled == self.growth.enabled:
            return
        self.growth.enabled = enabled
        if not enabled:
            self._stop_growth()
        logger.info("Terrain mode %s", "enabled" if enabled else "disabled")
        self._notify()

    def set_growth_delay_override(self, seconds: Optional[float]) -> None:
        """
        Fix the growth interval, or pass None to use the tiers again.

        Takes effect from the next growth event.

        Raises:
            ValueError: If seconds is not positive.
        """
        if seconds is not None and seconds <= 0:
            raise ValueError("Growth delay must be positive")
        self.growth.delay_override = seconds

    def start_growth_if_needed(self) -> bool:
        """
        Start the growth and countdown timers once per board.

        Requires terrain mode, a live game with mines placed and a
        running event loop.

        Returns:
            True if the timers were started by this call.
        """
        if not self.growth.enabled or self.growth.started:
            return False
        if self.board.is_game_over or not self.board.first_click_done:
            return False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; mine growth not started")
            return False

        interval = self._current_interval()
        self.growth.started = True
        self.growth.countdown = int(interval)
        self._growth_task = loop.create_task(self._growth_loop(interval))
        self._countdown_task = loop.create_task(self._countdown_loop())
        logger.debug("Mine growth started, first interval %.1fs", interval)
        return True

    def _after_command(self, changed: bool) -> bool:
        if self.board.is_game_over:
            self._stop_growth()
            if self._ended_at is None and self._started_at is not None:
                self._ended_at = self._clock()
        if changed:
            self._notify()
        return changed

    # ========================================================================
    # Growth Timers
    # ========================================================================

    def _current_interval(self) -> float:
        return growth_interval(
            self.board.mine_count, self.growth.delay_override, self.terrain
        )

    def _stop_growth(self) -> None:
        for task in (self._growth_task, self._countdown_task):
            if task is not None:
                task.cancel()
        self._growth_task = None
        self._countdown_task = None
        self.growth.stop()

    async def _growth_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            interval = self._grow()

    async def _countdown_loop(self) -> None:
        # Display only; never touches the board
        while True:
            await asyncio.sleep(self.terrain.tick_seconds)
            if self.growth.countdown:
                self.growth.countdown -= 1
                self._notify()

    def _grow(self) -> float:
        """Apply one growth event and return the next interval."""
        index = self.board.grow_mine()
        interval = self._current_interval()
        if index is not None:
            self.growth.last_growth_at = datetime.now(timezone.utc)
        if self.growth.enabled:
            self.growth.countdown = int(interval)
        self._after_command(index is not None)
        return interval

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def cells(self) -> List[Cell]:
        return self.board.cells

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    @property
    def is_game_over(self) -> bool:
        return self.board.is_game_over

    @property
    def is_win(self) -> bool:
        return self.board.is_win

    @property
    def mine_count(self) -> int:
        return self.board.mine_count

    @property
    def mines_remaining(self) -> int:
        return self.board.mines_remaining

    @property
    def flags_placed(self) -> int:
        return self.board.flags_placed

    @property
    def terrain_mode_enabled(self) -> bool:
        return self.growth.enabled

    @property
    def growth_running(self) -> bool:
        """Whether the growth timers are currently scheduled."""
        return self._growth_task is not None

    @property
    def growth_countdown(self) -> Optional[int]:
        return self.growth.countdown

    @property
    def last_growth_at(self) -> Optional[datetime]:
        return self.growth.last_growth_at

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since the first reveal, frozen once the game ends."""
        if self._started_at is None:
            return 0.0
        end = self._ended_at if self._ended_at is not None else self._clock()
        return end - self._started_at
