#!/usr/bin/env python3
"""
Terminal-based tic-tac-toe client.

Play against another person or against the minimax player.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tictactoe.core.state import Player, Position
from tictactoe.core.moves import apply_move, parse_cell
from tictactoe.core.errors import IllegalMove, InvalidCellIndex, SearchAborted
from tictactoe.ai.minimax import (
    DEFAULT_DEPTH, MinimaxSearch, SearchConfig, analyze, best_move, principal_variation
)

logger = logging.getLogger(__name__)

HUMAN = 'human'
COMPUTER = 'computer'


def print_board(position: Position) -> None:
    """Print the board next to the cell numbering."""
    marks = position.cells()
    print()
    for row in range(3):
        cells = marks[row * 3:(row + 1) * 3]
        legend = range(row * 3 + 1, row * 3 + 4)
        print(" " + " | ".join(cells) + "      " + " | ".join(str(n) for n in legend))
        if row < 2:
            print("---+---+---    ---+---+---")
    print()


def read_int(prompt: str, input_fn: Callable[[str], str] = input) -> Optional[int]:
    """Read one integer; None for anything else (including end of input)."""
    try:
        text = input_fn(prompt)
    except EOFError:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_user_move(position: Position, player: Player, input_str: str):
    """Parse user input into a new position, a command, or None for a bad move."""
    input_str = input_str.strip().lower()

    if input_str in ['q', 'quit', 'exit']:
        return 'quit'
    if input_str in ['h', 'help', '?']:
        return 'help'

    try:
        return apply_move(position, player, parse_cell(input_str))
    except InvalidCellIndex:
        print(f"Invalid position: {input_str!r}. Enter a number from 1 to 9.")
    except IllegalMove as e:
        print(f"Illegal Move! {e}.")
    return None


def human_turn(
    position: Position,
    player: Player,
    input_fn: Callable[[str], str] = input,
) -> Optional[Position]:
    """Prompt until a legal move is entered. None means the player quit."""
    while True:
        try:
            user_input = input_fn("Enter the position to play at (1-9) >> ")
        except EOFError:
            return None

        result = parse_user_move(position, player, user_input)
        if result == 'quit':
            return None
        if result == 'help':
            print("Enter a cell number 1-9 (see the numbered grid), 'q' to quit")
            continue
        if result is not None:
            return result


def computer_turn(position: Position, player: Player, search: MinimaxSearch) -> Position:
    """Search and play the best move for player."""
    print(f"Computer ({player}) thinking (depth {search.config.depth})...")
    root = search.search(position, player)
    try:
        result = best_move(root)
        if not result.has_move:
            raise SearchAborted(f"Search returned no move ({result.status.value})")

        print("Computer analysis:")
        for m in analyze(root, top_k=3):
            print(f"  cell {m['cell']}: score={m['score']:+.2f}")
        line = principal_variation(root)
        if line:
            print("  expected line: " + " ".join(str(move) for move in line))
    finally:
        root.release()

    logger.info("Computer %s plays %d (score %.2f, %d nodes)",
                player, result.cell, result.score, search.last_stats.get('nodes', 0))
    print(f"Playing {player} at {result.cell}.")
    return apply_move(position, player, result.cell)


def play_game(
    controllers: dict[Player, str],
    first: Player = Player.X,
    search: Optional[MinimaxSearch] = None,
    input_fn: Callable[[str], str] = input,
) -> Position:
    """
    Run one game until it ends or a human quits.

    controllers maps each player to HUMAN or COMPUTER. Returns the final
    position.
    """
    search = search or MinimaxSearch()
    position = Position.empty()
    player = first

    print("Beginning Game...")
    while True:
        print(f"Player Turn : {player}")
        print("The board is currently >>")
        print_board(position)

        if controllers[player] == HUMAN:
            next_position = human_turn(position, player, input_fn)
            if next_position is None:
                print("Thanks for playing!")
                return position
        else:
            next_position = computer_turn(position, player, search)
        position = next_position

        if position.has_won(player):
            print_board(position)
            print(f"Player {player} wins!")
            return position
        if position.is_draw():
            print_board(position)
            print("Game drawn.")
            return position

        player = player.opponent


def run_session(
    args: argparse.Namespace,
    input_fn: Callable[[str], str] = input,
) -> Optional[Position]:
    """Menu flow: choose the mode, then who moves first, then play."""
    print("Welcome to Tic Tac Toe!")

    mode = args.mode
    if mode is None:
        print("Press 1 to play against another person.")
        print("Press 2 to play against the computer.")
        mode = read_int("> ", input_fn)

    if mode == 1:
        return play_game({Player.X: HUMAN, Player.O: HUMAN}, Player.X, input_fn=input_fn)

    if mode != 2:
        print("This option is incorrect! Try Again.")
        return None

    first_choice = args.first
    if first_choice is None:
        print("1 - X first, 2 - O first")
        first_choice = read_int("> ", input_fn)
    if first_choice not in (1, 2):
        print("That isn't a valid answer! exiting..")
        return None
    first = Player.parse(str(first_choice))

    human = first.opponent if args.computer_first else first
    controllers = {human: HUMAN, human.opponent: COMPUTER}
    print(f"You are {human}. The computer plays {human.opponent}.")

    search = MinimaxSearch(SearchConfig(depth=args.depth, max_nodes=args.max_nodes))
    return play_game(controllers, first, search, input_fn=input_fn)


def search_depth(text: str) -> int:
    """argparse type for --depth: an integer of at least 1."""
    try:
        depth = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"search depth must be an integer, got {text!r}") from None
    if depth < 1:
        raise argparse.ArgumentTypeError(f"search depth must be at least 1, got {depth}")
    return depth


def default_depth() -> int:
    """Search depth from TICTACTOE_SEARCH_DEPTH, else the built-in default."""
    value = os.environ.get("TICTACTOE_SEARCH_DEPTH")
    if value is None:
        return DEFAULT_DEPTH
    try:
        return search_depth(value)
    except argparse.ArgumentTypeError as e:
        logger.warning("Ignoring TICTACTOE_SEARCH_DEPTH=%r: %s", value, e)
        return DEFAULT_DEPTH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Tic Tac Toe Terminal Client')
    parser.add_argument('--mode', type=int, choices=[1, 2],
                        help='1 = against another person, 2 = against the computer')
    parser.add_argument('--first', type=int, choices=[1, 2],
                        help='Computer mode: 1 = X moves first, 2 = O moves first')
    parser.add_argument('--computer-first', action='store_true',
                        help='Let the computer take the side that moves first')
    parser.add_argument('--depth', type=search_depth, default=default_depth(),
                        help=f'Minimax search depth (default: {DEFAULT_DEPTH})')
    parser.add_argument('--max-nodes', type=int, default=None,
                        help='Abort a search whose tree grows past this many nodes')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_session(args, input)
    except SearchAborted as e:
        logger.error("Search failed: %s", e)
        print(f"The computer could not finish its search: {e}")
        return 1
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == '__main__':
    sys.exit(main())
