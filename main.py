#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty LEVEL] [--terrain] [--growth-delay S]
    python main.py simulate [--games N] [--seed S]
"""
import argparse
import asyncio
import logging
from typing import Optional

import numpy as np

from src.sweeper.board import BoardConfig
from src.sweeper.environment import MinesweeperEnv, render_ansi
from src.sweeper.session import GameSession
from src.sweeper.settings import CustomSettings, Difficulty

PLAY_HELP = (
    "Commands: r X Y (reveal/chord), f X Y (flag cycle), c X Y (chord), "
    "n (new game), t (toggle growing minefield), q (quit)"
)


def resolve_custom(args: argparse.Namespace) -> CustomSettings:
    """Clamp the custom board flags."""
    extra = {}
    if getattr(args, "growth_delay", None) is not None:
        extra["growth_delay"] = args.growth_delay
    return CustomSettings(
        width=args.width, height=args.height, mine_count=args.mines, **extra
    )


def resolve_config(args: argparse.Namespace) -> BoardConfig:
    """Build the board configuration from difficulty or custom sizes."""
    difficulty = Difficulty(args.difficulty)
    if difficulty is not Difficulty.CUSTOM:
        return difficulty.config
    return resolve_custom(args).config


def print_status(session: GameSession) -> None:
    """Print the board and the counters under it."""
    print(render_ansi(session.board))
    status = f"Mines left: {session.mines_remaining} | Time: {session.elapsed_seconds:.0f}s"
    if session.terrain_mode_enabled and session.growth_countdown is not None:
        status += f" | Next mine in {session.growth_countdown}s"
    print(status)
    if session.is_win:
        print("*** WIN! ***")
    elif session.is_game_over:
        print("*** LOST (hit mine) ***")


def run_command(session: GameSession, line: str) -> Optional[bool]:
    """
    Apply one typed command to the session.

    Returns:
        False to quit, True if the board should be redrawn, None otherwise.
    """
    parts = line.split()
    if not parts:
        return None
    verb = parts[0].lower()

    if verb == "q":
        return False
    if verb == "n":
        session.new_game()
        return True
    if verb == "t":
        session.set_terrain_mode_enabled(not session.terrain_mode_enabled)
        state = "on" if session.terrain_mode_enabled else "off"
        print(f"Growing minefield {state}")
        return True

    if verb not in ("r", "f", "c") or len(parts) != 3:
        print(PLAY_HELP)
        return None
    try:
        x, y = int(parts[1]), int(parts[2])
    except ValueError:
        print(PLAY_HELP)
        return None
    if not (0 <= x < session.width and 0 <= y < session.height):
        print(f"Out of range: board is {session.width}x{session.height}")
        return None

    index = session.board.index_of(x, y)
    if verb == "r":
        session.primary_action(index)
    elif verb == "f":
        session.toggle_flag(index)
    else:
        session.chord(index)
    return True


async def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    difficulty = Difficulty(args.difficulty)
    session = GameSession(seed=args.seed)
    if difficulty is Difficulty.CUSTOM:
        session.apply_settings(difficulty, resolve_custom(args))
    else:
        session.apply_settings(difficulty)
        if args.growth_delay is not None:
            session.set_growth_delay_override(args.growth_delay)
    session.set_terrain_mode_enabled(args.terrain)

    last_growth = [None]

    def announce_growth(s: GameSession) -> None:
        if s.last_growth_at is not None and s.last_growth_at != last_growth[0]:
            last_growth[0] = s.last_growth_at
            print(f"\nA mine grew! {s.mine_count} mines on the board.")

    session.subscribe(announce_growth)
    print(PLAY_HELP)
    print_status(session)

    loop = asyncio.get_running_loop()
    try:
        while True:
            try:
                line = await loop.run_in_executor(None, input, "> ")
            except EOFError:
                break
            result = run_command(session, line)
            if result is False:
                break
            if result:
                print_status(session)
    finally:
        session.close()


def simulate(args: argparse.Namespace) -> None:
    """Play random games headlessly and report the win rate."""
    config = resolve_config(args)
    env = MinesweeperEnv(config=config, growth_steps=args.growth_steps)
    rng = np.random.default_rng(args.seed)

    wins = 0
    total_steps = 0
    for game in range(args.games):
        env.reset(seed=None if args.seed is None else args.seed + game)
        done = False
        info = {}
        while not done:
            valid = np.flatnonzero(env.get_action_mask())
            action = int(rng.choice(valid))
            _, _, done, _, info = env.step(action)
        total_steps += info["steps"]
        if info["game_state"] == "WON":
            wins += 1

    print(f"Simulated {args.games} games on {config.width}x{config.height} "
          f"with {config.num_mines} mines")
    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg steps: {total_steps / args.games:.1f}")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    """Board selection flags shared by all commands."""
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.BEGINNER.value,
        help="Preset board (custom uses --width/--height/--mines)",
    )
    parser.add_argument("--width", type=int, default=10, help="Custom width")
    parser.add_argument("--height", type=int, default=10, help="Custom height")
    parser.add_argument("--mines", type=int, default=10, help="Custom mine count")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper - headless board engine with a growing minefield"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)
    play_parser.add_argument(
        "--terrain", action="store_true", help="Enable the growing minefield"
    )
    play_parser.add_argument(
        "--growth-delay", type=float, default=None,
        help="Seconds between mine growth (default: tiered by mine count)",
    )

    # Simulate command
    sim_parser = subparsers.add_parser(
        "simulate", help="Play random games headlessly"
    )
    add_board_arguments(sim_parser)
    sim_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )
    sim_parser.add_argument(
        "--growth-steps", type=int, default=None,
        help="Grow a mine every N moves",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "play":
        asyncio.run(play(args))
    elif args.command == "simulate":
        simulate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
