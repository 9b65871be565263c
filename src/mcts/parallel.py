"""
並列ロールアウト

子ノードごと・シミュレーションごとのプレイアウトは互いに独立なので、
(子ノード, シミュレーション区間) の組をワーカーに分配し、
部分和を最後にまとめる（fork-join）。

- 各タスクは自分の盤面コピーと自分の乱数生成器だけを使う
- 共有される可変状態はなく、ロックは不要
"""

import math
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.game.board import GoBoard
from .rollout import run_rollouts

EXECUTOR_TYPES = ("thread", "process")


def _rollout_task(board: GoBoard, level: int, count: int, seed) -> int:
    """ワーカー側で実行されるタスク（ProcessPool用にモジュールレベルで定義）"""
    rng = np.random.default_rng(seed)
    return run_rollouts(board, level, count, rng)


class RolloutPool:
    """
    ロールアウトのワーカープール

    num_workers <= 1 の場合はプールを作らず、呼び出し元スレッドで逐次実行する。
    """

    def __init__(
        self,
        num_workers: int = 1,
        executor: str = "thread",
        chunk_size: Optional[int] = None,
    ):
        """
        Args:
            num_workers (int): ワーカー数
            executor (str): "thread" または "process"
            chunk_size (int, optional): 1タスクあたりのシミュレーション数
                （None なら num_simulations をワーカー数で等分）
        """
        if executor not in EXECUTOR_TYPES:
            raise ValueError(
                f"Unknown executor type: {executor} (expected one of {EXECUTOR_TYPES})"
            )
        if chunk_size is not None and chunk_size < 1:
            raise ValueError(f"chunk_size must be positive: {chunk_size}")

        self.num_workers = max(1, num_workers)
        self.executor_type = executor
        self.chunk_size = chunk_size
        self._executor: Optional[Executor] = None

    @property
    def is_parallel(self) -> bool:
        return self.num_workers > 1

    def _get_executor(self) -> Executor:
        if self._executor is None:
            if self.executor_type == "process":
                self._executor = ProcessPoolExecutor(max_workers=self.num_workers)
            else:
                self._executor = ThreadPoolExecutor(max_workers=self.num_workers)
        return self._executor

    def close(self):
        """ワーカープールを終了する"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _split(self, num_simulations: int) -> List[int]:
        """シミュレーション回数をタスク単位に分割"""
        chunk = self.chunk_size or math.ceil(num_simulations / self.num_workers)
        chunk = max(1, chunk)

        counts = []
        remaining = num_simulations
        while remaining > 0:
            counts.append(min(chunk, remaining))
            remaining -= counts[-1]
        return counts

    def evaluate(
        self,
        jobs: Sequence[Tuple[GoBoard, int]],
        num_simulations: int,
        seed_sequence: np.random.SeedSequence,
    ) -> List[int]:
        """
        各局面について num_simulations 回プレイアウトし、スコア合計を返す

        Args:
            jobs: [(盤面, level), ...]
            num_simulations: 局面ごとのプレイアウト回数
            seed_sequence: タスクごとの乱数シードを派生させる元

        Returns:
            List[int]: jobs と同じ順序のスコア合計
        """
        totals = [0] * len(jobs)
        if len(jobs) == 0 or num_simulations <= 0:
            return totals

        if not self.is_parallel:
            rng = np.random.default_rng(seed_sequence)
            for i, (board, level) in enumerate(jobs):
                totals[i] = run_rollouts(board, level, num_simulations, rng)
            return totals

        counts = self._split(num_simulations)
        seeds = seed_sequence.spawn(len(jobs) * len(counts))
        executor = self._get_executor()

        futures = []
        for i, (board, level) in enumerate(jobs):
            for j, count in enumerate(counts):
                seed = seeds[i * len(counts) + j]
                futures.append(
                    (i, executor.submit(_rollout_task, board, level, count, seed))
                )

        # 全タスクの完了を待って集約
        for i, future in futures:
            totals[i] += future.result()

        return totals
