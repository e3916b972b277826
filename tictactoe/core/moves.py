"""
Move application for tic-tac-toe.

apply_move is the only gate through which a position changes; every
Position it returns is valid.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .bitboard import NUM_CELLS, encode_cell, verify_cell
from .errors import IllegalMove, InvalidCellIndex, InvariantViolation
from .state import Player, Position, is_valid


@dataclass(frozen=True)
class Move:
    """A mark placed by player on cell."""
    player: Player
    cell: int

    def __str__(self) -> str:
        return f"{self.player.label}@{self.cell}"


def apply_move(position: Position, player: Player, cell: int) -> Position:
    """
    Return the position after player marks cell.

    Raises:
        InvalidCellIndex: cell is not in 1..9
        IllegalMove: cell is held by either player
    """
    verify_cell(cell)
    mask = encode_cell(player, cell)

    # Setting a bit we already hold changes nothing, so the overlap test
    # below cannot catch it
    if position.bits & mask:
        raise IllegalMove(cell, player)

    candidate = position.bits | mask
    if not is_valid(candidate):
        raise IllegalMove(cell, player.opponent)

    result = Position(candidate)
    if not result.is_valid():
        raise InvariantViolation(f"apply_move produced an invalid board: {candidate:#08x}")
    return result


def try_apply_move(position: Position, player: Player, cell: int) -> Optional[Position]:
    """Like apply_move, but returns None for an occupied cell."""
    mask = encode_cell(player, cell)
    if position.bits & mask:
        return None
    candidate = position.bits | mask
    if not is_valid(candidate):
        return None
    return Position(candidate)


def get_legal_moves(position: Position) -> list[int]:
    """Cells that can still be played, in cell order."""
    return position.empty_cells()


def parse_cell(text: object) -> int:
    """Parse typed input into a cell index."""
    try:
        cell = int(str(text).strip())
    except ValueError:
        raise InvalidCellIndex(text) from None
    if not 1 <= cell <= NUM_CELLS:
        raise InvalidCellIndex(cell)
    return cell
