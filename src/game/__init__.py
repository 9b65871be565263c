"""
ゲームモジュール

囲碁（簡易版）の盤面・取りのルール・例外を提供
"""

from .board import GoBoard, EMPTY, BLACK, WHITE, opponent_of
from .errors import (
    NO_LEGAL_MOVE,
    GoError,
    InvalidCoordinate,
    OccupiedCell,
    RolloutDeadlock,
    NodeStoreOverflow,
)

__all__ = [
    "GoBoard",
    "EMPTY",
    "BLACK",
    "WHITE",
    "opponent_of",
    "NO_LEGAL_MOVE",
    "GoError",
    "InvalidCoordinate",
    "OccupiedCell",
    "RolloutDeadlock",
    "NodeStoreOverflow",
]
