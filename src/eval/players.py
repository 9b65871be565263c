"""
プレイヤークラス

- HumanPlayer: 標準入力から着手（黒）
- RandomPlayer: 空きマスからランダムに着手
- MCTSPlayer: 1手読みMCTSで着手（白・機械）
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

import numpy as np

from src.config import GameConfig
from src.game.board import GoBoard
from src.mcts.mcts import MCTS, SearchResult
from src.mcts.parallel import RolloutPool

Move = Tuple[int, int]


class Player(ABC):
    """
    プレイヤーの基底クラス
    """

    def __init__(self, name: str):
        """
        Args:
            name: プレイヤー名
        """
        self.name = name

    @abstractmethod
    def get_action(self, board: GoBoard, level: int) -> Optional[Move]:
        """
        着手を選択

        Args:
            board: 現在の盤面
            level: これまでに置かれた石の数

        Returns:
            (row, col)。打てる場所がない場合は None
        """
        pass

    def on_rejected(self, move: Move, error: Exception):
        """着手が拒否されたときの通知（必要に応じてオーバーライド）"""
        pass

    def reset(self):
        """ゲーム開始時の初期化（必要に応じてオーバーライド）"""
        pass


class RandomPlayer(Player):
    """
    ランダムプレイヤー

    空きマスの中から一様に選択
    """

    def __init__(self, name: str = "Random", seed: Optional[int] = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(self, board: GoBoard, level: int) -> Optional[Move]:
        """ランダムに着手を選択"""
        empty = board.empty_cells()

        if len(empty) == 0:
            return None

        index = int(empty[self.rng.integers(len(empty))])
        return divmod(index, board.size)


class HumanPlayer(Player):
    """
    人間プレイヤー（CLI用）

    標準入力から "row col" または "row,col" を受け付ける
    """

    def __init__(
        self,
        name: str = "Human",
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        super().__init__(name)
        self.input_fn = input_fn
        self.output_fn = output_fn

    @staticmethod
    def parse_move(text: str) -> Move:
        """
        入力文字列を (row, col) に変換

        Raises:
            ValueError: 整数2つとして解釈できない
        """
        parts = text.replace(",", " ").split()
        if len(parts) != 2:
            raise ValueError(f"Expected two integers, got {text!r}")
        return int(parts[0]), int(parts[1])

    def get_action(self, board: GoBoard, level: int) -> Optional[Move]:
        """標準入力から着手を受け付ける"""
        if board.is_full():
            return None

        while True:
            try:
                text = self.input_fn("Move (p) - row and column: ").strip()
            except EOFError:
                # 標準入力が閉じられた
                return None

            try:
                return self.parse_move(text)
            except ValueError:
                self.output_fn("入力エラー。もう一度入力してください。")

    def on_rejected(self, move: Move, error: Exception):
        self.output_fn(f"無効な着手です: {error}")


class MCTSPlayer(Player):
    """
    MCTSベースの機械プレイヤー（白）
    """

    def __init__(self, mcts: MCTS, name: str = "MCTS"):
        """
        Args:
            mcts: 探索エンジン
            name: プレイヤー名
        """
        super().__init__(name)
        self.mcts = mcts
        self.last_result: Optional[SearchResult] = None

    def search(self, board: GoBoard, level: int) -> SearchResult:
        """探索して結果（着手後の盤面を含む）を返す"""
        self.last_result = self.mcts.search(board, level)
        return self.last_result

    def get_action(self, board: GoBoard, level: int) -> Optional[Move]:
        """MCTSで最良の手を選択"""
        result = self.search(board, level)
        if not result.has_move:
            return None
        return result.row, result.col

    def reset(self):
        self.last_result = None

    def close(self):
        """ロールアウト用のワーカープールを終了"""
        self.mcts.pool.close()

    @classmethod
    def from_config(cls, config: GameConfig, name: Optional[str] = None) -> "MCTSPlayer":
        """
        設定からMCTSPlayerを作成

        Args:
            config: ゲーム設定
            name: プレイヤー名

        Returns:
            MCTSPlayer: インスタンス
        """
        pool = RolloutPool(
            num_workers=config.num_workers,
            executor=config.executor,
            chunk_size=config.chunk_size,
        )
        mcts = MCTS(
            num_simulations=config.num_simulations,
            pool=pool,
            seed=config.seed,
        )

        if name is None:
            name = f"MCTS-{config.num_simulations}sim"

        return cls(mcts=mcts, name=name)
