"""
Bitboard utilities for tic-tac-toe.

Both players live in one integer. Player O owns bits 0-8, player X owns
bits 12-20 (O's range shifted left by PLAYER_SHIFT), bits 9-11 stay clear:

  bits 20..12 : X on cells 1..9
  bits  8..0  : O on cells 1..9

Cells are numbered 1-9 in row-major order:

   1 | 2 | 3
  ---+---+---
   4 | 5 | 6
  ---+---+---
   7 | 8 | 9

Cell c maps to bit (9 - c) inside a player's range, so the top-left cell is
the highest bit of each range.
"""

from __future__ import annotations
from typing import Iterator

from .errors import InvalidCellIndex, InvalidPlayer

# Board dimensions
ROWS = 3
COLS = 3
NUM_CELLS = ROWS * COLS  # 9
NUM_PLAYERS = 2

# Offset between the two players' bit ranges
PLAYER_SHIFT = 12

# One player's 9-bit range
CELL_MASK = (1 << NUM_CELLS) - 1  # 0x1FF

# Every bit a valid position may use
VALID_MASK = CELL_MASK | (CELL_MASK << PLAYER_SHIFT)

# Player indices into the tables below
X_INDEX = 0
O_INDEX = 1

# Winning lines as cell triples
WIN_LINES = [
    (1, 2, 3), (4, 5, 6), (7, 8, 9),  # rows
    (1, 4, 7), (2, 5, 8), (3, 6, 9),  # columns
    (1, 5, 9), (3, 5, 7),             # diagonals
]

# Precomputed tables (initialized at module load)
CELL_BITS: list[list[int]] = [[0] * NUM_CELLS for _ in range(NUM_PLAYERS)]  # [player][cell - 1]
WIN_MASKS: list[list[int]] = [[0] * len(WIN_LINES) for _ in range(NUM_PLAYERS)]  # [player][line]


def bit(offset: int) -> int:
    """Return a mask with a single bit set at offset."""
    return 1 << offset


def popcount(bb: int) -> int:
    """Count number of set bits."""
    return bin(bb).count('1')


def verify_cell(cell: int) -> int:
    """Range-check a cell index and return its zero-based offset."""
    if isinstance(cell, bool) or not isinstance(cell, int):
        raise InvalidCellIndex(cell)
    if not 1 <= cell <= NUM_CELLS:
        raise InvalidCellIndex(cell)
    return cell - 1


def verify_player_index(index: int) -> int:
    """Range-check a player index (0 = X, 1 = O)."""
    if isinstance(index, bool) or not isinstance(index, int) or index not in (X_INDEX, O_INDEX):
        raise InvalidPlayer(f"Invalid player index: {index!r}")
    return index


def _player_index(player) -> int:
    # Accept Player members (anything with an .index) or raw indices
    return verify_player_index(getattr(player, 'index', player))


def cell_bit(cell: int) -> int:
    """Bit for a cell inside the low (O) range."""
    return bit(NUM_CELLS - 1 - verify_cell(cell))


def encode_cell(player, cell: int) -> int:
    """
    Return the single-bit pattern for (player, cell).

    The 18 patterns are pairwise disjoint: O uses bits 0-8 and X the same
    bits shifted by PLAYER_SHIFT.
    """
    return CELL_BITS[_player_index(player)][verify_cell(cell)]


def is_occupied(bits: int, player, cell: int) -> bool:
    """Check if player holds cell in bits."""
    return bool(bits & encode_cell(player, cell))


def player_mask(bits: int, player) -> int:
    """Return the 9-bit occupancy of one player, aligned to the low range."""
    index = _player_index(player)
    if index == X_INDEX:
        return (bits >> PLAYER_SHIFT) & CELL_MASK
    return bits & CELL_MASK


def occupied_mask(bits: int) -> int:
    """9-bit mask of cells held by either player."""
    return (bits | (bits >> PLAYER_SHIFT)) & CELL_MASK


def iter_cells(mask: int) -> Iterator[int]:
    """Iterate over the cell indices set in a 9-bit mask, in cell order."""
    for cell in range(1, NUM_CELLS + 1):
        if mask & cell_bit(cell):
            yield cell


def mask_from_cells(cells) -> int:
    """Build a 9-bit mask from an iterable of cell indices."""
    mask = 0
    for cell in cells:
        mask |= cell_bit(cell)
    return mask


def print_bitboard(bits: int, label: str = "") -> None:
    """Print both players' ranges of a raw board in readable format."""
    if label:
        print(f"{label}:")
    x_mask = player_mask(bits, X_INDEX)
    o_mask = player_mask(bits, O_INDEX)
    for row in range(ROWS):
        line = ""
        for col in range(COLS):
            cell = row * COLS + col + 1
            x = bool(x_mask & cell_bit(cell))
            o = bool(o_mask & cell_bit(cell))
            line += " #" if x and o else " X" if x else " O" if o else " ."
        print(line)


def _init_cell_bits() -> None:
    """Precompute the single-bit pattern of every (player, cell) pair."""
    for cell in range(1, NUM_CELLS + 1):
        low = cell_bit(cell)
        CELL_BITS[O_INDEX][cell - 1] = low
        CELL_BITS[X_INDEX][cell - 1] = low << PLAYER_SHIFT


def _init_win_masks() -> None:
    """Precompute winning patterns for both players."""
    for i, line in enumerate(WIN_LINES):
        low = mask_from_cells(line)
        WIN_MASKS[O_INDEX][i] = low
        WIN_MASKS[X_INDEX][i] = low << PLAYER_SHIFT


# Initialize lookup tables at module load
_init_cell_bits()
_init_win_masks()
