"""Exception types raised by the engine."""

from __future__ import annotations
from typing import Optional


class TicTacToeError(Exception):
    """Base class for every engine error."""


class InvalidPlayer(TicTacToeError, ValueError):
    """A value that is neither X nor O was used as a player."""


class InvalidCellIndex(TicTacToeError, ValueError):
    """Cell index outside 1..9."""

    def __init__(self, cell: object):
        super().__init__(f"Cell index must be an integer in 1..9, got {cell!r}")
        self.cell = cell


class IllegalMove(TicTacToeError, ValueError):
    """The target cell is already occupied."""

    def __init__(self, cell: int, occupant: Optional[object] = None):
        who = f" by {occupant}" if occupant is not None else ""
        super().__init__(f"Cell {cell} is already occupied{who}")
        self.cell = cell
        self.occupant = occupant


class SearchAborted(TicTacToeError, RuntimeError):
    """The game tree could not be built completely."""


class NoMoveAvailable(TicTacToeError, RuntimeError):
    """The search root is terminal or at the frontier, so there is nothing to play."""


class InvariantViolation(TicTacToeError, AssertionError):
    """Internal defect: a state the engine should never produce."""
