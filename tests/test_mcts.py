"""
MCTSのテストケース

- NodeStore の基本機能テスト
- MCTS探索ロジックのテスト
- 並列ロールアウトのテスト
"""

import numpy as np
import pytest

from src.game.board import GoBoard, EMPTY, BLACK, WHITE
from src.game.errors import NO_LEGAL_MOVE, NodeStoreOverflow
from src.mcts.mcts import MCTS, truncated_mean
from src.mcts.node import NodeStore, ROOT_ID, NO_PARENT
from src.mcts.parallel import RolloutPool


class TestNodeStore:
    """NodeStoreの基本機能テスト"""

    def test_create_root(self):
        """ルートがid=0で作成され、盤面がコピーされること"""
        board = GoBoard(3)
        store = NodeStore(3)

        root = store.create_root(board, level=2)

        assert root.node_id == ROOT_ID
        assert root.parent == NO_PARENT
        assert root.is_root()
        assert root.level == 2
        assert len(store) == 1

        board.apply_move(BLACK, 0, 0)
        assert root.board.get(0, 0) == EMPTY

    def test_create_child(self):
        """子ノードが連番idで作成され、親に登録されること"""
        store = NodeStore(3)
        store.create_root(GoBoard(3), level=1)

        first = store.create_child(ROOT_ID, WHITE, 0, 0)
        second = store.create_child(ROOT_ID, WHITE, 2, 2)

        assert (first, second) == (1, 2)
        assert store.root.children == [1, 2]

        child = store[second]
        assert child.parent == ROOT_ID
        assert (child.color, child.row, child.col) == (WHITE, 2, 2)
        assert child.level == 2
        assert child.score == 1
        assert store.get_parent(second) is store.root
        assert store.get_parent(ROOT_ID) is None

    def test_child_boards_are_independent(self):
        """子ノードの盤面は親・兄弟と共有されないこと"""
        store = NodeStore(3)
        store.create_root(GoBoard(3))

        first = store.create_child(ROOT_ID, WHITE, 0, 0)
        second = store.create_child(ROOT_ID, WHITE, 1, 1)

        assert store.root.board.get(0, 0) == EMPTY
        assert store[first].board.get(1, 1) == EMPTY
        assert store[second].board.get(0, 0) == EMPTY

    def test_capacity_overflow(self):
        """子ノードが N² を超えると NodeStoreOverflow になること"""
        store = NodeStore(1)
        store.create_root(GoBoard(1))

        # 1x1 の子ノードは1つまで
        assert store.create_child(ROOT_ID, WHITE, 0, 0) == 1

        with pytest.raises(NodeStoreOverflow):
            store.create_child(ROOT_ID, WHITE, 0, 0)

    def test_expand_empty_board_fills_store(self):
        """空の盤面では N² 個の子ノードを展開できること"""
        store = NodeStore(3)
        store.create_root(GoBoard(3))

        child_ids = MCTS(num_simulations=1).expand(store)

        assert len(child_ids) == 9
        assert len(store) == 3 * 3 + 1
        assert store.root.children == list(range(1, 10))

    def test_size_mismatch(self):
        """盤面サイズが異なる場合は拒否されること"""
        store = NodeStore(3)

        with pytest.raises(ValueError):
            store.create_root(GoBoard(4))


class TestTruncatedMean:
    """整数平均のテスト"""

    @pytest.mark.parametrize("total, count, expected", [
        (7, 2, 3),
        (-7, 2, -3),
        (-1, 100, 0),
        (300, 100, 3),
        (0, 5, 0),
    ])
    def test_truncates_toward_zero(self, total, count, expected):
        assert truncated_mean(total, count) == expected

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            truncated_mean(1, 0)


class TestMCTS:
    """MCTS探索ロジックのテスト"""

    def test_select_best_move_on_empty_board(self):
        """空の盤面で、ルートの子ノードが選ばれること"""
        store = NodeStore(3)
        store.create_root(GoBoard(3), level=0)
        mcts = MCTS(num_simulations=10, seed=0)

        best_id = mcts.select_best_move(store)

        assert best_id != NO_LEGAL_MOVE
        assert len(store) == 10
        best = store[best_id]
        assert best.parent == ROOT_ID
        assert 0 <= best.row < 3 and 0 <= best.col < 3
        assert best.color == WHITE
        assert best.level == 1

    def test_expansion_in_row_major_order(self):
        """空きマスが行優先で展開されること"""
        board = GoBoard(3)
        board.apply_move(BLACK, 0, 1)
        board.apply_move(BLACK, 1, 1)
        store = NodeStore(3)
        store.create_root(board, level=2)

        child_ids = MCTS(num_simulations=1).expand(store)

        moves = [(store[i].row, store[i].col) for i in child_ids]
        assert child_ids == list(range(1, 8))
        assert moves == [(0, 0), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1), (2, 2)]

    def test_full_board_returns_no_legal_move(self):
        """盤面が埋まっていれば NO_LEGAL_MOVE を返すこと"""
        board = GoBoard.from_string("pb\nbp")
        store = NodeStore(2)
        store.create_root(board, level=4)
        mcts = MCTS(num_simulations=5)

        assert mcts.select_best_move(store) == NO_LEGAL_MOVE

        result = mcts.search(board, level=4)
        assert not result.has_move
        assert result.best_id == NO_LEGAL_MOVE
        assert result.board is None

    def test_ties_keep_first_child(self):
        """平均が同点なら先に展開した子ノードが選ばれること"""
        # 子ノードの level が N² になり、プレイアウトは現在のスコアを返すだけ
        mcts = MCTS(num_simulations=3, seed=0)

        result = mcts.search(GoBoard(3), level=8)

        assert set(result.averages.values()) == {1}
        assert result.best_id == 1
        assert (result.row, result.col) == (0, 0)

    def test_prefers_capturing_move(self):
        """スコアが高くなる（取りのある）子ノードが選ばれること"""
        board = GoBoard(3)
        board.apply_move(BLACK, 0, 0)
        board.apply_move(WHITE, 0, 1)
        mcts = MCTS(num_simulations=3, seed=0)

        result = mcts.search(board, level=8)

        assert (result.row, result.col) == (1, 0)
        assert result.average == 2
        assert result.board.get(0, 0) == EMPTY

    def test_search_does_not_mutate_board(self):
        """探索で入力の盤面が変わらないこと"""
        board = GoBoard(3)
        board.apply_move(BLACK, 1, 1)
        before = board.copy()

        result = MCTS(num_simulations=5, seed=1).search(board, level=1)

        assert board == before
        assert result.board is not board
        assert result.board.get(result.row, result.col) == WHITE

    def test_same_seed_same_result(self):
        """同じシードなら同じ手が選ばれること"""
        board = GoBoard(4)

        result1 = MCTS(num_simulations=10, seed=42).search(board)
        result2 = MCTS(num_simulations=10, seed=42).search(board)

        assert result1.best_id == result2.best_id
        assert result1.averages == result2.averages

    def test_search_on_single_cell_board(self):
        """1x1 の空の盤面でも子ノードが選ばれること"""
        result = MCTS(num_simulations=2, seed=0).search(GoBoard(1))

        assert result.best_id == 1
        assert (result.row, result.col) == (0, 0)
        # 盤端に囲まれるので自殺手として取り除かれる
        assert result.board.get(0, 0) == EMPTY
        assert result.average == 0

    def test_invalid_num_simulations(self):
        with pytest.raises(ValueError):
            MCTS(num_simulations=0)


class TestRolloutPool:
    """並列ロールアウトのテスト"""

    def test_split(self):
        """シミュレーション回数がタスクに分割されること"""
        pool = RolloutPool(num_workers=3)
        counts = pool._split(100)

        assert sum(counts) == 100
        assert counts == [34, 34, 32]

        assert RolloutPool(num_workers=2, chunk_size=10)._split(25) == [10, 10, 5]

    def test_invalid_executor(self):
        with pytest.raises(ValueError):
            RolloutPool(num_workers=2, executor="gpu")

    @pytest.mark.parametrize("executor", ["thread", "process"])
    def test_parallel_totals(self, executor):
        """並列実行でも局面ごとの合計が正しく集約されること"""
        board_a = GoBoard(2)
        board_a.apply_move(WHITE, 0, 0)
        board_b = GoBoard(2)
        board_b.apply_move(BLACK, 1, 1)

        # level=4 なので各プレイアウトは現在のスコアを返す
        jobs = [(board_a, 4), (board_b, 4)]

        with RolloutPool(num_workers=2, executor=executor) as pool:
            totals = pool.evaluate(jobs, 10, np.random.SeedSequence(0))

        assert totals == [10, -10]

    def test_parallel_search_is_reproducible(self):
        """並列探索でも同じシードなら同じ結果になること"""
        board = GoBoard(3)

        with RolloutPool(num_workers=2) as pool:
            result1 = MCTS(num_simulations=8, pool=pool, seed=3).search(board)
            result2 = MCTS(num_simulations=8, pool=pool, seed=3).search(board)

        assert result1.best_id == result2.best_id
        assert result1.averages == result2.averages

    def test_empty_jobs(self):
        pool = RolloutPool(num_workers=2)
        assert pool.evaluate([], 10, np.random.SeedSequence(0)) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
