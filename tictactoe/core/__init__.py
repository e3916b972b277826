"""Core game logic: bitboards, state, and move application."""

from .bitboard import *
from .errors import (
    TicTacToeError, InvalidPlayer, InvalidCellIndex, IllegalMove,
    SearchAborted, NoMoveAvailable, InvariantViolation,
)
from .state import Player, Outcome, Position, is_valid, has_won, is_draw, outcome
from .moves import Move, apply_move, try_apply_move, get_legal_moves, parse_cell
