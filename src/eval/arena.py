"""
対戦管理システム (Arena)

黒（人間・ランダム等）と白（MCTS）を対戦させ、結果を記録する。

ゲームの進行:
- 総手数は N² 。取りが発生しても手数は戻らない
- 黒が着手 → 手数が残っていれば白がMCTSで着手 → 繰り返し
- 白に打てる場所がなければ（NO_LEGAL_MOVE）その時点で終局
- 最終スコア（白石数 - 黒石数）を機械のスコアとする
"""

from dataclasses import dataclass
from typing import List, Optional
import time

from src.game.board import GoBoard, BLACK
from src.game.errors import GoError, InvalidCoordinate, OccupiedCell
from .players import Player, MCTSPlayer, Move


@dataclass
class MatchResult:
    """
    対戦結果

    Attributes:
        black_name: 黒番プレイヤーの名前
        machine_name: 白番（機械）プレイヤーの名前
        machine_score: 終局時のスコア（白石数 - 黒石数）
        black_stones: 終局時の黒石数
        white_stones: 終局時の白石数
        num_moves: 総着手数
        ended_early: 手数上限より前に打つ場所がなくなったか
        duration: 対戦時間（秒）
        search_time: MCTS探索時間の合計（秒）
    """
    black_name: str
    machine_name: str
    machine_score: int
    black_stones: int
    white_stones: int
    num_moves: int
    ended_early: bool
    duration: float
    search_time: float

    @property
    def winner(self) -> int:
        """1: 機械の勝ち, -1: 黒の勝ち, 0: 引き分け"""
        if self.machine_score > 0:
            return 1
        if self.machine_score < 0:
            return -1
        return 0

    def __str__(self) -> str:
        """結果の文字列表現"""
        if self.winner == 1:
            result = f"{self.machine_name} wins"
        elif self.winner == -1:
            result = f"{self.black_name} wins"
        else:
            result = "Draw"

        return (
            f"{result} | "
            f"Machine score: {self.machine_score} "
            f"(b: {self.white_stones}, p: {self.black_stones}) | "
            f"Moves: {self.num_moves} | "
            f"Time: {self.duration:.2f}s (search {self.search_time:.2f}s)"
        )


class Arena:
    """
    対戦管理システム
    """

    def __init__(self, board_size: int = 19, max_retries: int = 10, verbose: bool = True):
        """
        Args:
            board_size: 盤面の一辺
            max_retries: 黒の不正な着手を再要求する上限
            verbose: 詳細な出力を行うか
        """
        self.board_size = board_size
        self.max_retries = max_retries
        self.verbose = verbose

    def _request_move(self, player: Player, board: GoBoard, level: int) -> Optional[Move]:
        """
        黒の着手を受け取り盤面に反映する

        拒否された着手（盤面外・占有済み）は max_retries 回まで再要求する。

        Returns:
            反映した着手。打てる場所がなければ None
        """
        for _ in range(self.max_retries):
            move = player.get_action(board, level)
            if move is None:
                return None

            try:
                board.apply_move(BLACK, *move)
            except (InvalidCoordinate, OccupiedCell) as e:
                player.on_rejected(move, e)
                continue
            return move

        raise GoError(
            f"{player.name} exceeded {self.max_retries} rejected moves"
        )

    def play_game(self, black_player: Player, machine: MCTSPlayer) -> MatchResult:
        """
        1ゲームを実行

        Args:
            black_player: 黒番プレイヤー
            machine: 白番（機械）プレイヤー

        Returns:
            MatchResult: 対戦結果
        """
        board = GoBoard(self.board_size)
        total_moves = board.num_cells

        black_player.reset()
        machine.reset()

        moves = 0
        ended_early = False
        search_time = 0.0
        start_time = time.time()

        if self.verbose:
            print(board.render())

        while moves + 1 <= total_moves:
            move = self._request_move(black_player, board, moves)
            if move is None:
                ended_early = True
                break
            moves += 1

            if self.verbose:
                print(f"{black_player.name} (p): {move[0]} {move[1]}")
                print(board.render())

            if moves + 1 > total_moves:
                break

            if self.verbose:
                print("Running MCTS...")
            result = machine.search(board, moves)
            search_time += result.elapsed

            if not result.has_move:
                ended_early = True
                break

            board = result.board
            moves += 1

            if self.verbose:
                print(f"MCTS result: node {result.best_id}. Time: {result.elapsed:.3f} s.")
                print(f"{machine.name} (b): {result.row} {result.col}")
                print(board.render())

        duration = time.time() - start_time
        black_stones, white_stones = board.stone_counts()

        match_result = MatchResult(
            black_name=black_player.name,
            machine_name=machine.name,
            machine_score=board.compute_score(),
            black_stones=black_stones,
            white_stones=white_stones,
            num_moves=moves,
            ended_early=ended_early,
            duration=duration,
            search_time=search_time,
        )

        if self.verbose:
            print(f"\nGame over - machine score (b): {match_result.machine_score}")
            print(f"{match_result}\n")

        return match_result

    def play_matches(
        self,
        black_player: Player,
        machine: MCTSPlayer,
        num_games: int = 10,
    ) -> List[MatchResult]:
        """
        複数ゲームを実行

        Args:
            black_player: 黒番プレイヤー
            machine: 白番（機械）プレイヤー
            num_games: ゲーム数

        Returns:
            List[MatchResult]: 対戦結果のリスト
        """
        results = []

        for game_idx in range(num_games):
            if self.verbose:
                print(f"=== Game {game_idx + 1}/{num_games} ===")

            results.append(self.play_game(black_player, machine))

        if self.verbose:
            self._print_summary(results, machine.name, black_player.name)

        return results

    def _print_summary(self, results: List[MatchResult], machine_name: str, black_name: str):
        """対戦結果のサマリーを表示"""
        print("\n" + "=" * 70)
        print("Match Summary")
        print("=" * 70)

        total_games = len(results)
        machine_wins = sum(1 for r in results if r.winner == 1)
        black_wins = sum(1 for r in results if r.winner == -1)
        draws = total_games - machine_wins - black_wins

        avg_score = sum(r.machine_score for r in results) / total_games if total_games > 0 else 0
        avg_duration = sum(r.duration for r in results) / total_games if total_games > 0 else 0

        print(f"\nTotal Games: {total_games}")
        print(f"{machine_name}: {machine_wins} wins")
        print(f"{black_name}: {black_wins} wins")
        print(f"Draws: {draws}")
        print(f"\nAverage Machine Score: {avg_score:.1f}")
        print(f"Average Duration: {avg_duration:.2f}s")
        print("=" * 70 + "\n")


def evaluate_player(
    machine: MCTSPlayer,
    opponent: Player,
    num_games: int = 10,
    board_size: int = 19,
    verbose: bool = True,
) -> dict:
    """
    機械プレイヤーを評価

    Args:
        machine: 評価対象の機械プレイヤー（白）
        opponent: 対戦相手（黒）
        num_games: ゲーム数
        board_size: 盤面の一辺
        verbose: 詳細な出力

    Returns:
        dict: 評価結果
            - win_rate: 勝率
            - avg_score: 平均スコア
            - avg_moves: 平均手数
            - results: 対戦結果リスト
    """
    arena = Arena(board_size=board_size, verbose=verbose)
    results = arena.play_matches(opponent, machine, num_games=num_games)

    machine_wins = sum(1 for r in results if r.winner == 1)
    win_rate = machine_wins / num_games if num_games > 0 else 0

    avg_score = sum(r.machine_score for r in results) / num_games if num_games > 0 else 0
    avg_moves = sum(r.num_moves for r in results) / num_games if num_games > 0 else 0

    return {
        "win_rate": win_rate,
        "avg_score": avg_score,
        "avg_moves": avg_moves,
        "results": results,
    }
