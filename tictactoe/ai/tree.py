"""
Depth-bounded game tree for minimax search.

Every node exclusively owns its children. A tree is built eagerly by
build_tree and torn down as a unit with Node.release().
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator, Optional
import logging

from ..core.bitboard import NUM_CELLS
from ..core.errors import SearchAborted
from ..core.moves import Move, try_apply_move
from ..core.state import Outcome, Player, Position
from .evaluator import Evaluator, NeutralEvaluator

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """A node in the game tree."""
    position: Position
    to_move: Player                  # Player who moves next from here
    move: Optional[Move] = None      # Move that produced this node (None at root)
    is_maximizer: bool = True        # Root maximizes for the searching player
    depth: int = 0                   # Plies below the root

    # Score from the root searcher's perspective (None = unevaluated)
    score: Optional[float] = None
    # Terminal result for the player who just moved
    outcome: Outcome = Outcome.ONGOING

    # None for terminal and frontier nodes, a list for expanded nodes
    children: Optional[list[Node]] = None

    @property
    def mover(self) -> Player:
        """Player whose move produced this position."""
        return self.to_move.opponent

    @property
    def searcher(self) -> Player:
        """Player the scores in this tree are measured for."""
        return self.to_move if self.is_maximizer else self.to_move.opponent

    @property
    def is_terminal(self) -> bool:
        return self.outcome.is_terminal

    @property
    def is_frontier(self) -> bool:
        """Leaf cut off by the depth bound rather than by the game ending."""
        return self.children is None and not self.is_terminal

    @property
    def cell(self) -> Optional[int]:
        return self.move.cell if self.move is not None else None

    def iter_nodes(self) -> Iterator[Node]:
        """Pre-order traversal of the subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def count_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def release(self) -> None:
        """Tear down the whole subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.children:
                stack.extend(node.children)
            node.children = None


class NodeBudget:
    """Counts allocated nodes and aborts once max_nodes is exceeded."""

    def __init__(self, max_nodes: Optional[int] = None):
        self.max_nodes = max_nodes
        self.allocated = 0

    def allocate(self) -> None:
        self.allocated += 1
        if self.max_nodes is not None and self.allocated > self.max_nodes:
            raise SearchAborted(f"Game tree exceeds {self.max_nodes} nodes")


def _terminal_score(node: Node, result: Outcome) -> float:
    # result is for node.mover; the mover is the searcher at minimizer nodes
    value = result.score
    return float(value if not node.is_maximizer else -value)


def expand(
    node: Node,
    remaining_depth: int,
    evaluator: Optional[Evaluator] = None,
    budget: Optional[NodeBudget] = None,
) -> None:
    """
    Expand node recursively.

    Terminal nodes get their result as score and no children. Nodes reached
    with no remaining depth are frontier nodes scored by the evaluator.
    Everything else gets one child per legal cell, in cell order.
    """
    evaluator = evaluator or NeutralEvaluator()

    result = node.position.outcome(node.mover)
    if result.is_terminal:
        node.outcome = result
        node.score = _terminal_score(node, result)
        node.children = None
        return

    if remaining_depth <= 0:
        node.children = None
        node.score = evaluator.evaluate(node.position, node.searcher)
        return

    children = []
    node.children = children
    for cell in range(1, NUM_CELLS + 1):
        child_position = try_apply_move(node.position, node.to_move, cell)
        if child_position is None:
            continue
        if budget is not None:
            budget.allocate()
        child = Node(
            position=child_position,
            to_move=node.to_move.opponent,
            move=Move(node.to_move, cell),
            is_maximizer=not node.is_maximizer,
            depth=node.depth + 1,
        )
        children.append(child)
        expand(child, remaining_depth - 1, evaluator, budget)


def build_tree(
    position: Position,
    to_move: Player,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    max_nodes: Optional[int] = None,
) -> Node:
    """
    Build the game tree rooted at position with to_move about to play.

    The caller owns the returned root and must release() it. If the tree
    cannot be completed, whatever was built is released and SearchAborted
    is raised.
    """
    root = Node(position=position, to_move=to_move)
    budget = NodeBudget(max_nodes)
    budget.allocate()

    try:
        expand(root, depth, evaluator, budget)
    except SearchAborted:
        root.release()
        logger.warning("Tree expansion aborted after %d nodes", budget.allocated)
        raise
    except (MemoryError, RecursionError) as e:
        root.release()
        logger.warning("Tree expansion failed after %d nodes: %r", budget.allocated, e)
        raise SearchAborted(f"Game tree expansion failed: {e!r}") from e

    logger.debug("Built tree: depth=%d nodes=%d", depth, budget.allocated)
    return root


def tree_stats(root: Node) -> dict:
    """Measure tree statistics."""
    nodes_by_depth = defaultdict(int)
    terminal_by_depth = defaultdict(int)
    frontier_by_depth = defaultdict(int)

    for node in root.iter_nodes():
        nodes_by_depth[node.depth] += 1
        if node.is_terminal:
            terminal_by_depth[node.depth] += 1
        elif node.is_frontier:
            frontier_by_depth[node.depth] += 1

    return {
        'max_depth': max(nodes_by_depth) if nodes_by_depth else 0,
        'total_nodes': sum(nodes_by_depth.values()),
        'nodes_by_depth': dict(nodes_by_depth),
        'terminal_by_depth': dict(terminal_by_depth),
        'frontier_by_depth': dict(frontier_by_depth),
    }
