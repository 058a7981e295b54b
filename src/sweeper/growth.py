"""
Mine growth ("growing minefield") configuration and state.

The growth interval shrinks as the live mine count rises. After each
growth event the next wait and the visible countdown both use the tier
of the new, already-incremented mine count.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class TerrainConfig:
    """
    Timing for mine growth.

    Attributes:
        tick_seconds: Period of the display countdown.
        tiers: (mine_count_below, seconds) pairs, checked in order.
        fallback_seconds: Interval once every tier is exceeded.
    """

    tick_seconds: float = 1.0
    tiers: Tuple[Tuple[int, float], ...] = ((20, 30.0), (50, 20.0))
    fallback_seconds: float = 10.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.tick_seconds <= 0:
            raise ValueError("Tick period must be positive")
        if self.fallback_seconds <= 0 or any(s <= 0 for _, s in self.tiers):
            raise ValueError("Growth intervals must be positive")

    def interval_for(self, mine_count: int) -> float:
        """Tiered growth interval for a live mine count."""
        for limit, seconds in self.tiers:
            if mine_count < limit:
                return seconds
        return self.fallback_seconds


DEFAULT_TERRAIN = TerrainConfig()


def growth_interval(
    mine_count: int,
    override: Optional[float] = None,
    config: TerrainConfig = DEFAULT_TERRAIN,
) -> float:
    """
    Seconds between growth events.

    Args:
        mine_count: Live mine count.
        override: Explicit delay; wins over the tiers when set.
        config: Tier table.
    """
    if override is not None:
        return override
    return config.interval_for(mine_count)


# ============================================================================
# Growth State
# ============================================================================

@dataclass
class GrowthState:
    """
    Board-scoped growth bookkeeping owned by a session.

    Attributes:
        enabled: Whether terrain mode is on.
        delay_override: Explicit growth delay in seconds, if any.
        countdown: Whole seconds until the next growth, for display.
        last_growth_at: When the last mine grew (UTC).
        started: Start guard; timers run only once per board.
    """

    enabled: bool = False
    delay_override: Optional[float] = None
    countdown: Optional[int] = None
    last_growth_at: Optional[datetime] = None
    started: bool = False

    def stop(self) -> None:
        """Clear the running-timer part of the state."""
        self.countdown = None
        self.started = False

    def clear(self) -> None:
        """Forget everything tied to the current board."""
        self.stop()
        self.last_growth_at = None
