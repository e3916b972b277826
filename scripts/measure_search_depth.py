#!/usr/bin/env python3
"""Measure game tree size and shape for different search depths."""

import argparse
import sys
import time
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tictactoe.core.state import Player, Position
from tictactoe.ai.tree import build_tree, tree_stats
from tictactoe.ai.minimax import best_move


def main():
    parser = argparse.ArgumentParser(description='Measure minimax tree statistics')
    parser.add_argument('--board', type=str, default='.........',
                        help="Start position, 9 chars of X/O/. in row-major order")
    parser.add_argument('--player', type=str, default=None,
                        help='Player to move (default: inferred, X first)')
    parser.add_argument('--depths', type=str, default='1,2,4,6,8,9',
                        help='Comma-separated depths to measure')
    args = parser.parse_args()

    position = Position.from_string(args.board)
    player = Player.parse(args.player) if args.player else position.side_to_move()
    depths = [int(d) for d in args.depths.split(',') if d.strip()]

    print("Position:")
    print(position)
    print(f"{player} to move")

    for depth in depths:
        start = time.time()
        root = build_tree(position, player, depth)
        try:
            result = best_move(root)
            stats = tree_stats(root)
        finally:
            root.release()
        elapsed = time.time() - start

        print(f"\n=== depth {depth} ===")
        print(f"Total nodes: {stats['total_nodes']} ({elapsed:.2f}s)")
        print(f"Best move: {result.cell} (status={result.status.value}, score={result.score})")
        print("Nodes by depth:    ", end="")
        for d in range(stats['max_depth'] + 1):
            print(f"d{d}={stats['nodes_by_depth'].get(d, 0)} ", end="")
        print()
        print("Terminal by depth: ", end="")
        for d in range(stats['max_depth'] + 1):
            print(f"d{d}={stats['terminal_by_depth'].get(d, 0)} ", end="")
        print()
        frontier = sum(stats['frontier_by_depth'].values())
        print(f"Frontier leaves: {frontier}")


if __name__ == '__main__':
    main()
