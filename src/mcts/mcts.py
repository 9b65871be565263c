"""
モンテカルロ木探索 (Monte Carlo Tree Search)

1手読みのMCTS実装:
- ルート局面の空きマスすべてに白（機械）の石を置いた子ノードを展開
- 各子ノードからランダムプレイアウトを一定回数行い、平均スコアで評価
- 平均スコアが最大の子ノードを選択

木はルートとその子だけで、手番ごとに作り直す。
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from src.game.board import GoBoard, WHITE
from src.game.errors import NO_LEGAL_MOVE
from .node import NodeStore, ROOT_ID
from .parallel import RolloutPool


def truncated_mean(total: int, count: int) -> int:
    """整数平均（0方向への切り捨て）"""
    if count <= 0:
        raise ValueError(f"count must be positive: {count}")
    quotient = abs(total) // count
    return quotient if total >= 0 else -quotient


@dataclass
class SearchResult:
    """
    1回の探索結果

    Attributes:
        best_id: 選ばれた子ノードのid（合法手なしなら NO_LEGAL_MOVE）
        row, col: 選ばれた着手（合法手なしなら -1）
        board: 着手後の盤面（合法手なしなら None）
        average: 選ばれた子ノードの平均スコア
        averages: {子ノードid: 平均スコア}
        elapsed: 探索時間（秒）
    """
    best_id: int
    row: int = -1
    col: int = -1
    board: Optional[GoBoard] = None
    average: Optional[int] = None
    averages: Dict[int, int] = field(default_factory=dict)
    elapsed: float = 0.0

    @property
    def has_move(self) -> bool:
        return self.best_id != NO_LEGAL_MOVE


class MCTS:
    """
    1手読みモンテカルロ木探索

    探索の流れ:
    1. Selection: ルート（id=0）を選択
    2. Expansion: 空きマスを行優先で列挙し、白石を置いた子ノードを作成
    3. Simulation: 各子ノードでプレイアウトを num_simulations 回行い平均
    4. Best child: 平均スコアが最大の子ノード（同点なら先に展開したもの）
    """

    def __init__(
        self,
        num_simulations: int = 100,
        pool: Optional[RolloutPool] = None,
        seed: Optional[int] = None,
        color: int = WHITE,
    ):
        """
        Args:
            num_simulations (int): 子ノードあたりのプレイアウト回数
            pool (RolloutPool, optional): 並列実行用プール（None なら逐次）
            seed (int, optional): 乱数シード（None なら毎回異なる結果）
            color (int): 探索する側の石の色
        """
        if num_simulations < 1:
            raise ValueError(f"num_simulations must be positive: {num_simulations}")

        self.num_simulations = num_simulations
        self.pool = pool if pool is not None else RolloutPool(num_workers=1)
        self.color = color
        self._seed_sequence = np.random.SeedSequence(seed)
        self._last_averages: Dict[int, int] = {}

    def expand(self, store: NodeStore) -> List[int]:
        """
        ルートの全空きマスに子ノードを展開

        Returns:
            List[int]: 作成した子ノードのid（行優先順）
        """
        root = store[ROOT_ID]
        size = root.board.size

        child_ids = []
        for index in root.board.empty_cells():
            row, col = divmod(int(index), size)
            child_ids.append(store.create_child(ROOT_ID, self.color, row, col))

        return child_ids

    def simulate(self, store: NodeStore, child_ids: List[int]) -> Dict[int, int]:
        """
        各子ノードの平均プレイアウトスコアを計算

        Returns:
            Dict[int, int]: {子ノードid: 平均スコア}
        """
        jobs = [(store[i].board, store[i].level) for i in child_ids]
        seed_sequence = self._seed_sequence.spawn(1)[0]
        totals = self.pool.evaluate(jobs, self.num_simulations, seed_sequence)

        return {
            child_id: truncated_mean(total, self.num_simulations)
            for child_id, total in zip(child_ids, totals)
        }

    def select_best_move(self, store: NodeStore) -> int:
        """
        ストアのルート（id=0）から探索し、最良の子ノードidを返す

        Args:
            store (NodeStore): create_root 済みのノードストア

        Returns:
            int: 最良の子ノードid（合法手がなければ NO_LEGAL_MOVE）
        """
        child_ids = self.expand(store)
        if len(child_ids) == 0:
            return NO_LEGAL_MOVE

        averages = self.simulate(store, child_ids)
        self._last_averages = averages

        best_id = NO_LEGAL_MOVE
        best_average = None
        for child_id in child_ids:
            average = averages[child_id]
            # 厳密な > 比較: 同点なら先に展開した子を維持
            if best_average is None or average > best_average:
                best_average = average
                best_id = child_id

        return best_id

    def search(self, board: GoBoard, level: int = 0) -> SearchResult:
        """
        盤面を受け取り、最良手を打った新しい盤面を返す

        ノードストアは呼び出しごとに作成され、呼び出し後は破棄される。

        Args:
            board: 現在の局面（変更されない）
            level: これまでに置かれた石の数

        Returns:
            SearchResult: 探索結果
        """
        start_time = time.perf_counter()

        store = NodeStore(board.size)
        store.create_root(board, level)
        self._last_averages = {}

        best_id = self.select_best_move(store)
        elapsed = time.perf_counter() - start_time

        if best_id == NO_LEGAL_MOVE:
            return SearchResult(best_id=NO_LEGAL_MOVE, elapsed=elapsed)

        best = store[best_id]
        return SearchResult(
            best_id=best_id,
            row=best.row,
            col=best.col,
            board=best.board,
            average=self._last_averages[best_id],
            averages=dict(self._last_averages),
            elapsed=elapsed,
        )
