"""
Minimax search for tic-tac-toe.

Plain depth-bounded minimax over a fully expanded game tree: no pruning,
no transposition table. Scores are always from the root player's point of
view; maximizer and minimizer levels alternate below the root.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import time
import numpy as np

from ..core.errors import InvariantViolation, NoMoveAvailable
from ..core.moves import Move, apply_move
from ..core.state import Player, Position
from .evaluator import Evaluator, NeutralEvaluator
from .tree import Node, build_tree

logger = logging.getLogger(__name__)

# Full-game lookahead from any position with at least one mark on the board
DEFAULT_DEPTH = 8


class SearchStatus(Enum):
    MOVE = "move"           # A cell was selected
    TERMINAL = "terminal"   # Root position is already decided
    NO_MOVE = "no_move"     # Root was not expanded (depth 0), nothing to select


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a search: a tagged result, never a sentinel cell."""
    status: SearchStatus
    cell: Optional[int] = None
    score: Optional[float] = None

    @property
    def has_move(self) -> bool:
        return self.status is SearchStatus.MOVE


@dataclass
class SearchConfig:
    """Configuration for minimax search."""
    depth: int = DEFAULT_DEPTH              # Plies to look ahead
    max_nodes: Optional[int] = None         # Abort when the tree grows past this
    evaluator: Evaluator = field(default_factory=NeutralEvaluator)  # Frontier scoring


def evaluate(node: Node) -> float:
    """
    Minimax value of node.

    Leaves return their stored score. Inner nodes store and return the max
    (maximizer) or min (minimizer) over their children.
    """
    if node.children is None:
        if node.score is None:
            raise InvariantViolation(f"Leaf at depth {node.depth} was never scored")
        return node.score

    if not node.children:
        raise InvariantViolation(f"Expanded node at depth {node.depth} has no children")

    scores = [evaluate(child) for child in node.children]
    node.score = max(scores) if node.is_maximizer else min(scores)
    return node.score


def best_move(root: Node) -> SearchResult:
    """
    Pick the best child of root.

    Ties go to the first child in cell order.
    """
    if root.is_terminal:
        return SearchResult(SearchStatus.TERMINAL, score=root.score)
    if not root.children:
        return SearchResult(SearchStatus.NO_MOVE, score=root.score)

    # Inner nodes only carry a score once evaluate() has visited them
    scores = np.array(
        [child.score if child.score is not None else evaluate(child) for child in root.children],
        dtype=np.float64,
    )
    # argmax/argmin return the first occurrence
    index = int(np.argmax(scores)) if root.is_maximizer else int(np.argmin(scores))
    root.score = float(scores[index])

    best = root.children[index]
    return SearchResult(SearchStatus.MOVE, cell=best.cell, score=root.score)


def principal_variation(root: Node) -> list[Move]:
    """Follow the best child from root down to a leaf. Call after evaluate."""
    line = []
    node = root
    while node.children:
        pick = max if node.is_maximizer else min
        target = pick(child.score for child in node.children)
        node = next(child for child in node.children if child.score == target)
        line.append(node.move)
    return line


def analyze(root: Node, top_k: int = 9) -> list[dict]:
    """
    Summarize evaluated root children.

    Returns list of moves with scores, best first for the root player.
    """
    moves = []
    for child in root.children or []:
        moves.append({
            'cell': child.cell,
            'score': child.score,
            'terminal': child.is_terminal,
            'outcome': child.outcome.value,
        })

    sign = -1 if root.is_maximizer else 1
    moves.sort(key=lambda m: (sign * (m['score'] if m['score'] is not None else 0.0), m['cell']))
    return moves[:top_k]


class MinimaxSearch:
    """
    Depth-bounded minimax search.

    search() hands the caller an evaluated tree that the caller must
    release; get_best_move() builds, evaluates and releases in one call.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()
        self.last_stats: dict = {}

    def search(self, position: Position, player: Player) -> Node:
        """Build and evaluate the tree for player to move in position."""
        start_time = time.time()
        root = build_tree(
            position,
            player,
            self.config.depth,
            evaluator=self.config.evaluator,
            max_nodes=self.config.max_nodes,
        )
        try:
            if root.children:
                evaluate(root)
        except BaseException:
            root.release()
            raise

        elapsed = time.time() - start_time
        self.last_stats = {
            'nodes': root.count_nodes(),
            'depth': self.config.depth,
            'elapsed_time': elapsed,
        }
        logger.debug("Search for %s: %d nodes in %.3fs", player, self.last_stats['nodes'], elapsed)
        return root

    def select_move(self, root: Node) -> int:
        """Return the best cell at root, or raise NoMoveAvailable."""
        result = best_move(root)
        if not result.has_move:
            raise NoMoveAvailable(f"No move to select ({result.status.value})")
        return result.cell

    def get_best_move(self, position: Position, player: Player) -> SearchResult:
        """Convenience method: search, pick a move, release the tree."""
        root = self.search(position, player)
        try:
            result = best_move(root)
        finally:
            root.release()
        logger.debug("Best move for %s: %s", player, result)
        return result


def play_move(
    position: Position,
    player: Player,
    depth: int = DEFAULT_DEPTH,
    evaluator: Optional[Evaluator] = None,
) -> tuple[Position, SearchResult]:
    """
    Play a single move for player using minimax.

    Returns (new_position, result). If the result carries no move the
    position is returned unchanged.
    """
    config = SearchConfig(depth=depth)
    if evaluator is not None:
        config.evaluator = evaluator
    result = MinimaxSearch(config).get_best_move(position, player)
    if not result.has_move:
        return position, result
    return apply_move(position, player, result.cell), result
