"""
Monte Carlo Tree Search モジュール

1手読みのMCTS実装とランダムプレイアウトを提供
"""

from .mcts import MCTS, SearchResult, truncated_mean
from .node import NodeStore, SearchNode, ROOT_ID, NO_PARENT
from .parallel import RolloutPool
from .rollout import rollout, run_rollouts

__all__ = [
    "MCTS",
    "SearchResult",
    "truncated_mean",
    "NodeStore",
    "SearchNode",
    "ROOT_ID",
    "NO_PARENT",
    "RolloutPool",
    "rollout",
    "run_rollouts",
]
