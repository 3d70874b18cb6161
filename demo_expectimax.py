#!/usr/bin/env python3
"""
Expectimax 2048 agent demo: plays repeated games and reports statistics
"""

import argparse
import logging
import time

from agent2048.config import WEIGHT_PRESETS, SearchConfig
from agent2048.expectimax import ExpectimaxAgent
from agent2048.game import Game2048
from agent2048.timer_utils import Timer, format_runtime

MILESTONES = (2048, 4096, 8192)


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="2048 Expectimax agent: play games and report win statistics",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--games", "-g", type=int, default=1, help="Number of games to play")
    parser.add_argument("--depth", "-d", type=int, default=4, help="Search depth in layers (move + spawn = 2)")
    parser.add_argument("--preset", "-P", choices=sorted(WEIGHT_PRESETS), default='gradient',
                        help="Position weight preset")
    parser.add_argument("--workers", "-p", type=int, default=1,
                        help="Threads used to score the four top-level moves")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Seed for the game's tile spawns")
    parser.add_argument("--max-moves", "-m", type=int, default=0, help="Stop a game after this many moves (0 = no limit)")
    parser.add_argument("--time-limit", "-t", type=float, default=0.0,
                        help="Do not start new games after this many seconds (0 = no limit)")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress board display")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log search scores for every move")
    return parser.parse_args(argv)


def print_board(board):
    """Print the board in a nice format"""
    n = len(board)
    print("┌" + "┬".join(["──────"] * n) + "┐")
    for i, row in enumerate(board):
        print("│" + "│".join(f"{val:6}" if val else "      " for val in row) + "│")
        if i < n - 1:
            print("├" + "┼".join(["──────"] * n) + "┤")
    print("└" + "┴".join(["──────"] * n) + "┘")


def play_game(game, agent, max_moves=0, quiet=True):
    """Play one game to the end; returns (score, moves, highest tile, mean move time)."""
    with Timer() as clock:
        while max_moves <= 0 or game.move_count < max_moves:
            move = agent.get_move(game)
            clock.lap()
            if move is None:
                break
            if not game.move(move):
                # The agent only returns legal moves, so the engines disagree
                print(f"❌ Bad move {move.name}")
                break
            if not quiet:
                print(f"\n{move.symbol} {move.name}  Score: {game.score}  Moves: {game.move_count}")
                print_board(game.board.tolist())
    return game.score, game.move_count, game.max_tile(), clock.mean_lap()


def main(argv=None):
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SearchConfig.from_preset(args.preset, depth_limit=args.depth, workers=args.workers)
    agent = ExpectimaxAgent(config)

    print("🚀 2048 Expectimax Agent")
    print("=" * 50)
    print(f"🔍 Search Depth: {config.depth_limit}")
    print(f"⚖️  Weight Preset: {args.preset}")
    print(f"🖥️  Workers: {config.workers}")
    print(f"🎮 Games: {args.games}")

    milestones = {tile: 0 for tile in MILESTONES}
    scores = []
    start = time.time()

    with Timer("Total runtime"):
        try:
            for game_idx in range(args.games):
                if args.time_limit > 0 and time.time() - start > args.time_limit:
                    print(f"⏰ Time limit reached after {game_idx} games")
                    break
                seed = None if args.seed is None else args.seed + game_idx
                game = Game2048(seed=seed)
                score, moves, top, mean_move = play_game(game, agent, args.max_moves, args.quiet)
                scores.append(score)
                for tile in MILESTONES:
                    if top >= tile:
                        milestones[tile] += 1
                print(f"Game {game_idx + 1}: {score} in {moves} moves "
                      f"(highest tile {top}, {mean_move:.3f}s per move)")
        except KeyboardInterrupt:
            print("\nInterrupted, summarising finished games.")

    print("\n" + "=" * 50)
    if not scores:
        print("No games finished.")
        return
    print(f"🏁 {len(scores)} games played in {format_runtime(time.time() - start)}")
    print("  ".join(f"{tile}: {count}" for tile, count in milestones.items()))
    print(f"📊 Average Score: {sum(scores) / len(scores):.1f}  Max Score: {max(scores)}")


if __name__ == "__main__":
    main()
