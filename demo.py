#!/usr/bin/env python3
"""Watch random moves play out on a growing minefield."""
import asyncio
import os

import numpy as np

from src.sweeper.board import BoardConfig
from src.sweeper.environment import render_ansi
from src.sweeper.session import GameSession


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


async def demo(delay: float = 0.3, games: int = 3, size: int = 9, mines: int = 10,
               growth_delay: float = 1.0):
    """Run demo games on a live session with terrain mode on."""
    session = GameSession(BoardConfig(width=size, height=size, num_mines=mines))
    session.set_growth_delay_override(growth_delay)
    session.set_terrain_mode_enabled(True)
    rng = np.random.default_rng()

    print(f"Board: {size}x{size} with {mines} mines, a new mine every {growth_delay}s")
    await asyncio.sleep(2)

    wins = 0

    for game in range(games):
        session.new_game()
        step = 0

        while not session.is_game_over:
            candidates = session.board.get_valid_actions()
            index = int(rng.choice(candidates))
            session.reveal(index)
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins} | Mines: {session.mine_count}")
            print(f"Last move: {session.board.coords(index)}\n")
            print(render_ansi(session.board))

            await asyncio.sleep(delay)

        if session.is_win:
            wins += 1
            print(f"\n*** WIN! ***")
        else:
            print(f"\n*** LOST (hit mine) ***")

        await asyncio.sleep(1.0)  # Pause between games

    session.close()
    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=3, help="Number of games")
    parser.add_argument("--size", type=int, default=9, help="Board size (NxN)")
    parser.add_argument("--mines", type=int, default=10, help="Number of mines")
    parser.add_argument("--growth-delay", type=float, default=1.0, help="Seconds between mine growth")
    args = parser.parse_args()

    asyncio.run(demo(delay=args.delay, games=args.games, size=args.size,
                     mines=args.mines, growth_delay=args.growth_delay))
