"""
ランダムプレイアウト（ロールアウト）

指定局面から終局（手数上限 N² - level）まで一様ランダムに着手し、
最終スコアを返す。MCTSの各子ノードの評価に使う。
"""

from typing import Optional

import numpy as np

from src.game.board import GoBoard, BLACK, opponent_of
from src.game.errors import RolloutDeadlock


def rollout(
    board: GoBoard,
    level: int,
    rng: Optional[np.random.Generator] = None,
    strict: bool = False,
) -> int:
    """
    1回のランダムプレイアウト

    手番は実際の手番に関係なく常に黒から始まり、交互に進む。
    各手は空きマスを列挙してから一様に1つ選ぶ。

    Args:
        board: 開始局面（変更されない）
        level: 開始局面までに置かれた石の数
        rng: 乱数生成器（None なら新規作成）
        strict: True の場合、手数が残っているのに空きマスがなければ
            RolloutDeadlock を送出する

    Returns:
        int: 最終局面のスコア（白石数 - 黒石数）
    """
    if rng is None:
        rng = np.random.default_rng()

    sim_board = board.copy()
    size = sim_board.size
    color = BLACK
    num_moves = sim_board.num_cells - level

    for _ in range(num_moves):
        empty = sim_board.empty_cells()
        if len(empty) == 0:
            # 盤面が埋まった時点で打ち切り
            if strict:
                raise RolloutDeadlock(
                    f"No empty cell left with {num_moves} half-moves budgeted"
                )
            break

        index = int(empty[rng.integers(len(empty))])
        sim_board.try_move(color, index // size, index % size)

        color = opponent_of(color)

    return sim_board.compute_score()


def run_rollouts(
    board: GoBoard,
    level: int,
    count: int,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """
    同じ局面から count 回プレイアウトし、スコアの合計を返す

    Args:
        board: 開始局面
        level: 開始局面までに置かれた石の数
        count: プレイアウト回数
        rng: 乱数生成器

    Returns:
        int: スコア合計
    """
    if rng is None:
        rng = np.random.default_rng()

    total = 0
    for _ in range(count):
        total += rollout(board, level, rng)
    return total
