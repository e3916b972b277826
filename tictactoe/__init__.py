"""
Bitboard tic-tac-toe engine.

Position encoding, move validation, terminal detection and a
depth-bounded minimax player.
"""

__version__ = "0.1.0"
