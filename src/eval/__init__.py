"""
対戦・評価モジュール

人間 / ランダム / MCTS プレイヤーと対戦管理を提供
"""

from .players import (
    Player,
    RandomPlayer,
    HumanPlayer,
    MCTSPlayer,
)
from .arena import Arena, MatchResult, evaluate_player

__all__ = [
    "Player",
    "RandomPlayer",
    "HumanPlayer",
    "MCTSPlayer",
    "Arena",
    "MatchResult",
    "evaluate_player",
]
