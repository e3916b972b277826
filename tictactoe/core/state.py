"""
Game state representation for tic-tac-toe.

A Position is an immutable wrapper around a single bitboard integer (see
bitboard.py for the layout). The module-level predicates work on raw
integers so they can check candidate boards before a Position exists.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .bitboard import (
    ROWS, COLS, NUM_CELLS, PLAYER_SHIFT, CELL_MASK, VALID_MASK,
    X_INDEX, O_INDEX, WIN_MASKS,
    encode_cell, is_occupied as _is_occupied, player_mask, occupied_mask,
    iter_cells, popcount,
)
from .errors import IllegalMove, InvalidPlayer, InvariantViolation


class Player(Enum):
    """The two sides. X conventionally moves first."""
    X = "X"
    O = "O"

    @property
    def index(self) -> int:
        """Row of this player in the bitboard tables."""
        return X_INDEX if self is Player.X else O_INDEX

    @property
    def label(self) -> str:
        return self.value

    @property
    def opponent(self) -> Player:
        return Player.O if self is Player.X else Player.X

    @classmethod
    def parse(cls, text: object) -> Player:
        """
        Parse external input into a Player.

        Accepts the marks ("x", "O") and the menu numbers ("1" = X, "2" = O).
        """
        if isinstance(text, Player):
            return text
        key = str(text).strip().upper()
        if key in ("X", "1"):
            return cls.X
        if key in ("O", "2"):
            return cls.O
        raise InvalidPlayer(f"Not a player: {text!r}")

    def __str__(self) -> str:
        return self.value


class Outcome(Enum):
    """Result of a position from one player's point of view."""
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"
    ONGOING = "ongoing"

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.ONGOING

    @property
    def score(self) -> Optional[int]:
        """Numeric value: +1 win, 0 draw, -1 loss, None while the game goes on."""
        return _OUTCOME_SCORES[self]


_OUTCOME_SCORES = {
    Outcome.WIN: 1,
    Outcome.DRAW: 0,
    Outcome.LOSS: -1,
    Outcome.ONGOING: None,
}


def _check_player(player: Player) -> Player:
    if not isinstance(player, Player):
        raise InvalidPlayer(f"Not a player: {player!r}")
    return player


# ---------------------------------------------------------------------------
# Predicates over raw bitboards
# ---------------------------------------------------------------------------

def is_valid(bits: int) -> bool:
    """True iff no cell is claimed by both players and no stray bits are set."""
    if bits & ~VALID_MASK:
        return False
    return not (bits & (bits >> PLAYER_SHIFT))


def has_won(bits: int, player: Player) -> bool:
    """True iff one of player's 8 lines is completely set."""
    for mask in WIN_MASKS[_check_player(player).index]:
        if bits & mask == mask:
            return True
    return False


def is_draw(bits: int) -> bool:
    """
    True iff all 9 cells are taken.

    Does not look at wins; callers check has_won for both players first.
    """
    return occupied_mask(bits) == CELL_MASK


def outcome(bits: int, player: Player) -> Outcome:
    """
    Evaluate bits for player.

    Priority order: player won -> WIN, full board -> DRAW, opponent won -> LOSS.
    """
    player = _check_player(player)
    won = has_won(bits, player)
    lost = has_won(bits, player.opponent)
    if won and lost:
        raise InvariantViolation(f"Both players have a completed line: {bits:#08x}")
    if won:
        return Outcome.WIN
    if is_draw(bits):
        return Outcome.DRAW
    if lost:
        return Outcome.LOSS
    return Outcome.ONGOING


@dataclass(frozen=True)
class Position:
    """
    Immutable board snapshot.

    Attributes:
        bits: Packed occupancy of both players (X in bits 12-20, O in bits 0-8)
    """
    bits: int = 0

    def __post_init__(self):
        if not is_valid(self.bits):
            raise InvariantViolation(f"Invalid board encoding: {self.bits:#08x}")

    @classmethod
    def empty(cls) -> Position:
        """The empty board."""
        return cls()

    @classmethod
    def from_cells(cls, x: Iterable[int] = (), o: Iterable[int] = ()) -> Position:
        """Build a position from the cells held by each player."""
        bits = 0
        for player, cells in ((Player.X, x), (Player.O, o)):
            for cell in cells:
                mask = encode_cell(player, cell)
                if bits & mask:
                    raise IllegalMove(cell, player)
                if _is_occupied(bits, player.opponent, cell):
                    raise IllegalMove(cell, player.opponent)
                bits |= mask
        return cls(bits)

    @classmethod
    def from_string(cls, s: str) -> Position:
        """
        Parse a 9-character board, row-major.

        'X'/'x' and 'O'/'o' are marks; '.', '-', '_' and ' ' are empty.
        Row separators ('/' or newlines) are ignored.
        """
        chars = [c for c in s if c not in "/\n\r|"]
        if len(chars) != NUM_CELLS:
            raise ValueError(f"Board string must describe {NUM_CELLS} cells: {s!r}")
        x_cells, o_cells = [], []
        for cell, c in enumerate(chars, start=1):
            if c in "xX":
                x_cells.append(cell)
            elif c in "oO":
                o_cells.append(cell)
            elif c not in ".-_ ":
                raise ValueError(f"Invalid board character {c!r} in {s!r}")
        return cls.from_cells(x=x_cells, o=o_cells)

    # Oracle ---------------------------------------------------------------

    def is_valid(self) -> bool:
        return is_valid(self.bits)

    def is_occupied(self, player: Player, cell: int) -> bool:
        """Check if player holds cell."""
        return _is_occupied(self.bits, _check_player(player), cell)

    def has_won(self, player: Player) -> bool:
        return has_won(self.bits, player)

    def is_draw(self) -> bool:
        return is_draw(self.bits)

    def outcome(self, player: Player) -> Outcome:
        return outcome(self.bits, player)

    def winner(self) -> Optional[Player]:
        """Return the player with a completed line, or None."""
        for player in Player:
            if self.has_won(player):
                return player
        return None

    def is_terminal(self) -> bool:
        """Check if game is over."""
        return self.outcome(Player.X).is_terminal

    # Queries --------------------------------------------------------------

    def occupant(self, cell: int) -> Optional[Player]:
        """Return who holds cell, or None if it is empty."""
        for player in Player:
            if _is_occupied(self.bits, player, cell):
                return player
        return None

    def empty_cells(self) -> list[int]:
        """Cells held by nobody, in cell order."""
        return list(iter_cells(~occupied_mask(self.bits) & CELL_MASK))

    def cells_of(self, player: Player) -> list[int]:
        """Cells held by player, in cell order."""
        return list(iter_cells(player_mask(self.bits, _check_player(player))))

    @property
    def num_moves(self) -> int:
        """Number of marks on the board."""
        return popcount(self.bits)

    def side_to_move(self, first: Player = Player.X) -> Player:
        """Infer side to move, assuming `first` opened the game."""
        first_count = len(self.cells_of(first))
        second_count = len(self.cells_of(first.opponent))
        return first if first_count == second_count else first.opponent

    def cells(self) -> list[str]:
        """Marks of all 9 cells for rendering ('X', 'O' or '.')."""
        marks = []
        for cell in range(1, NUM_CELLS + 1):
            who = self.occupant(cell)
            marks.append(who.label if who is not None else ".")
        return marks

    def __str__(self) -> str:
        marks = self.cells()
        rows = [" ".join(marks[r * COLS:(r + 1) * COLS]) for r in range(ROWS)]
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Position({''.join(self.cells())!r})"
