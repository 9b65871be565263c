"""ロールアウトとMCTS探索のベンチマーク

空の盤面からのランダムプレイアウト速度（rollouts/sec）と、
1手あたりのMCTS探索時間を計測する。

使用方法:
    python benchmark.py [--board-size N] [--workers W] [--executor thread|process]
"""

import argparse
import time

import numpy as np

from src.game.board import GoBoard
from src.mcts.mcts import MCTS
from src.mcts.parallel import RolloutPool
from src.mcts.rollout import rollout


def benchmark_rollouts(board_size: int, num_rollouts: int = 1000) -> None:
    """ロールアウト単体の速度

    Args:
        board_size: 盤面の一辺
        num_rollouts: ロールアウト回数
    """
    print(f"=== ロールアウト ベンチマーク ({board_size}x{board_size}) ===")
    print(f"回数: {num_rollouts:,}")

    board = GoBoard(board_size)
    rng = np.random.default_rng(0)

    # ウォームアップ
    for _ in range(10):
        rollout(board, 0, rng)

    scores = []
    start_time = time.perf_counter()
    for _ in range(num_rollouts):
        scores.append(rollout(board, 0, rng))
    elapsed_time = time.perf_counter() - start_time

    print(f"経過時間:     {elapsed_time:.2f} 秒")
    print(f"速度:         {num_rollouts / elapsed_time:,.0f} rollouts/sec")
    print(f"平均スコア:   {np.mean(scores):.2f} (std {np.std(scores):.2f})")
    print()


def benchmark_search(
    board_size: int,
    num_simulations: int,
    num_workers: int,
    executor: str,
) -> None:
    """空の盤面からの1手探索の時間

    Args:
        board_size: 盤面の一辺
        num_simulations: 子ノードあたりのプレイアウト回数
        num_workers: ワーカー数
        executor: "thread" または "process"
    """
    print(f"=== MCTS 探索ベンチマーク ({board_size}x{board_size}) ===")
    print(f"シミュレーション: {num_simulations} / 子ノード")
    print(f"ワーカー:         {num_workers} ({executor})")

    with RolloutPool(num_workers=num_workers, executor=executor) as pool:
        mcts = MCTS(num_simulations=num_simulations, pool=pool, seed=0)
        result = mcts.search(GoBoard(board_size), level=0)

    print(f"選択ノード:   {result.best_id} -> ({result.row}, {result.col})")
    print(f"平均スコア:   {result.average}")
    print(f"探索時間:     {result.elapsed:.2f} 秒")
    print()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rollout / MCTS benchmark")
    parser.add_argument("--board-size", type=int, default=9)
    parser.add_argument("--rollouts", type=int, default=1000)
    parser.add_argument("--simulations", type=int, default=100)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--executor", choices=["thread", "process"], default="thread")
    args = parser.parse_args()

    benchmark_rollouts(args.board_size, args.rollouts)
    benchmark_search(args.board_size, args.simulations, args.workers, args.executor)
