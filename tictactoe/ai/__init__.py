"""AI components: game tree, minimax search, and frontier evaluators."""

from .tree import Node, build_tree, expand, tree_stats
from .minimax import MinimaxSearch, SearchConfig, SearchResult, SearchStatus, best_move
from .evaluator import NeutralEvaluator, OpenLinesEvaluator
