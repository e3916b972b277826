"""Tests for bitboard utilities."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tictactoe.core.bitboard import (
    NUM_CELLS, PLAYER_SHIFT, CELL_MASK, CELL_BITS, WIN_MASKS, WIN_LINES,
    X_INDEX, O_INDEX,
    bit, popcount, verify_cell, verify_player_index, encode_cell, is_occupied, player_mask,
    occupied_mask, iter_cells, mask_from_cells, print_bitboard,
)
from tictactoe.core.errors import InvalidCellIndex, InvalidPlayer
from tictactoe.core.state import Player


class TestBitOperations:
    def test_bit(self):
        assert bit(0) == 1
        assert bit(3) == 8
        assert bit(20) == 1 << 20

    def test_popcount(self):
        assert popcount(0) == 0
        assert popcount(0b1011) == 3
        assert popcount(CELL_MASK) == 9

    def test_iter_cells(self):
        # Cell 1 is the high bit of the range, cell 9 the low bit
        assert list(iter_cells(0b100000001)) == [1, 9]
        assert list(iter_cells(CELL_MASK)) == list(range(1, 10))
        assert list(iter_cells(0)) == []

    def test_mask_from_cells_roundtrip(self):
        for line in WIN_LINES:
            assert tuple(iter_cells(mask_from_cells(line))) == line


class TestCellVerification:
    def test_valid_range(self):
        for cell in range(1, 10):
            assert verify_cell(cell) == cell - 1

    @pytest.mark.parametrize("cell", [0, 10, -1, 100])
    def test_out_of_range(self, cell):
        with pytest.raises(InvalidCellIndex):
            verify_cell(cell)

    @pytest.mark.parametrize("cell", [True, 1.0, "1", None])
    def test_non_integer(self, cell):
        with pytest.raises(InvalidCellIndex):
            verify_cell(cell)


class TestEncodeCell:
    def test_matches_packed_layout(self):
        # X occupies bits 12-20, O bits 0-8, cell 1 highest
        assert encode_cell(Player.X, 1) == 0x00100000
        assert encode_cell(Player.X, 9) == 0x00001000
        assert encode_cell(Player.O, 1) == 0x00000100
        assert encode_cell(Player.O, 9) == 0x00000001

    def test_eighteen_disjoint_patterns(self):
        patterns = [encode_cell(p, c) for p in Player for c in range(1, NUM_CELLS + 1)]
        assert len(patterns) == 18
        for pattern in patterns:
            assert popcount(pattern) == 1
        combined = 0
        for pattern in patterns:
            assert combined & pattern == 0
            combined |= pattern
        assert popcount(combined) == 18

    def test_disjoint_from_opponent(self):
        for player in Player:
            mine = [encode_cell(player, c) for c in range(1, 10)]
            theirs = [encode_cell(player.opponent, c) for c in range(1, 10)]
            assert not set(mine) & set(theirs)

    def test_ranges_align_by_shift(self):
        for cell in range(1, 10):
            assert encode_cell(Player.X, cell) == encode_cell(Player.O, cell) << PLAYER_SHIFT

    def test_accepts_raw_indices(self):
        assert encode_cell(X_INDEX, 5) == encode_cell(Player.X, 5)
        assert encode_cell(O_INDEX, 5) == encode_cell(Player.O, 5)

    @pytest.mark.parametrize("player", [2, -1, "X", None, True, 0.0, 1.0])
    def test_invalid_player(self, player):
        with pytest.raises(InvalidPlayer):
            encode_cell(player, 1)

    @pytest.mark.parametrize("index", [0.0, 1.0, "0", False])
    def test_non_integer_player_index(self, index):
        with pytest.raises(InvalidPlayer):
            verify_player_index(index)

    def test_invalid_cell(self):
        with pytest.raises(InvalidCellIndex):
            encode_cell(Player.X, 0)
        with pytest.raises(InvalidCellIndex):
            encode_cell(Player.O, 10)

    def test_table_matches_function(self):
        for player in Player:
            for cell in range(1, 10):
                assert CELL_BITS[player.index][cell - 1] == encode_cell(player, cell)


class TestOccupancy:
    def test_is_occupied(self):
        bits = encode_cell(Player.X, 1) | encode_cell(Player.O, 5)
        assert is_occupied(bits, Player.X, 1)
        assert is_occupied(bits, Player.O, 5)
        assert not is_occupied(bits, Player.O, 1)
        assert not is_occupied(bits, Player.X, 5)
        assert not is_occupied(bits, Player.X, 9)

    def test_player_mask(self):
        bits = encode_cell(Player.X, 1) | encode_cell(Player.O, 9)
        assert list(iter_cells(player_mask(bits, Player.X))) == [1]
        assert list(iter_cells(player_mask(bits, Player.O))) == [9]

    def test_occupied_mask(self):
        bits = encode_cell(Player.X, 2) | encode_cell(Player.O, 3)
        assert list(iter_cells(occupied_mask(bits))) == [2, 3]


class TestWinMasks:
    def test_masks_match_packed_layout(self):
        expected_x = {0x00111000, 0x00054000, 0x001C0000, 0x00038000,
                      0x00007000, 0x00124000, 0x00092000, 0x00049000}
        expected_o = {0x00000111, 0x00000054, 0x000001C0, 0x00000038,
                      0x00000007, 0x00000124, 0x00000092, 0x00000049}
        assert set(WIN_MASKS[X_INDEX]) == expected_x
        assert set(WIN_MASKS[O_INDEX]) == expected_o

    def test_each_mask_has_three_cells(self):
        for masks in WIN_MASKS:
            assert len(masks) == 8
            for mask in masks:
                assert popcount(mask) == 3


class TestPrintBitboard:
    def test_print(self, capsys):
        bits = encode_cell(Player.X, 1) | encode_cell(Player.O, 9)
        print_bitboard(bits, label="board")
        out = capsys.readouterr().out.splitlines()
        assert out == ["board:", " X . .", " . . .", " . . O"]

    def test_print_marks_overlap(self, capsys):
        bits = encode_cell(Player.X, 5) | encode_cell(Player.O, 5)
        print_bitboard(bits)
        out = capsys.readouterr().out.splitlines()
        assert out[1] == " . # ."
