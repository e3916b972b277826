"""
Static evaluators for frontier positions.

The tree asks an evaluator for a score only at non-terminal nodes where the
depth bound stops expansion. Scores are from the given player's point of
view and stay strictly inside (-1, 1) so they never outrank a real result.
"""

from __future__ import annotations
from typing import Protocol

from ..core.bitboard import WIN_LINES
from ..core.state import Player, Position


class Evaluator(Protocol):
    """Protocol for position evaluators."""
    def evaluate(self, position: Position, player: Player) -> float:
        """Return an estimate in (-1, 1) for player."""
        ...


class NeutralEvaluator:
    """
    Scores every frontier position as 0.

    This is the default: a position the search cannot see through counts as
    a draw.
    """

    def __init__(self):
        self.total_evals = 0

    def evaluate(self, position: Position, player: Player) -> float:
        self.total_evals += 1
        return 0.0


class OpenLinesEvaluator:
    """
    Counts marks on lines that are still open.

    A line held only by player adds its mark count, a line held only by the
    opponent subtracts it. The sum is scaled into (-1, 1).
    """

    # Largest possible |sum| on a non-terminal board is 2 per line
    SCALE = 2 * len(WIN_LINES) + 1

    def __init__(self):
        self.total_evals = 0

    def evaluate(self, position: Position, player: Player) -> float:
        self.total_evals += 1
        mine = set(position.cells_of(player))
        theirs = set(position.cells_of(player.opponent))

        total = 0
        for line in WIN_LINES:
            m = sum(1 for c in line if c in mine)
            t = sum(1 for c in line if c in theirs)
            if m and not t:
                total += m
            elif t and not m:
                total -= t
        return total / self.SCALE
