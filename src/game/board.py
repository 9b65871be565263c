"""
囲碁（簡易版）の盤面

ルール:
- N×N の交点に黒（人間）と白（機械）が交互に石を置く
- 縦横4方向を囲まれた「1子のみ」を取る（連の取りは行わない）
- 着手した石自身が囲まれている場合は自殺手として取り除く
- スコア = 白石の数 - 黒石の数（機械=白の視点）
"""

from typing import List, Tuple

import numpy as np

from .errors import InvalidCoordinate, OccupiedCell

EMPTY = 0
BLACK = 1
WHITE = -1

# 表示・シリアライズ用の文字
# p: 黒（人間）, b: 白（機械）
CELL_CHARS = {EMPTY: "-", BLACK: "p", WHITE: "b"}
CHAR_CELLS = {char: cell for cell, char in CELL_CHARS.items()}

# 上・下・左・右
NEIGHBOR_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0))


def opponent_of(color: int) -> int:
    """相手の色を返す"""
    return -color


class GoBoard:
    """
    N×N の盤面

    Attributes:
        size (int): 盤面の一辺
        cells (np.ndarray): (size, size) の int8 配列。EMPTY / BLACK / WHITE のみ
        score (int): 白石数 - 黒石数（着手ごとに再計算される）
    """

    def __init__(self, size: int = 19):
        """
        Args:
            size (int): 盤面の一辺（1以上）
        """
        if size < 1:
            raise ValueError(f"Board size must be positive: {size}")

        self.size = size
        self.cells = np.full((size, size), EMPTY, dtype=np.int8)
        self.score = 0

    @property
    def num_cells(self) -> int:
        """交点の総数 (N²)"""
        return self.size * self.size

    def copy(self) -> "GoBoard":
        """盤面の独立したコピーを返す"""
        board = GoBoard.__new__(GoBoard)
        board.size = self.size
        board.cells = self.cells.copy()
        board.score = self.score
        return board

    def reset(self):
        """空の盤面に戻す"""
        self.cells.fill(EMPTY)
        self.score = 0

    def in_bounds(self, row: int, col: int) -> bool:
        """座標が盤面内かどうか"""
        return 0 <= row < self.size and 0 <= col < self.size

    def check_coordinate(self, row: int, col: int):
        """盤面外の座標なら InvalidCoordinate を送出"""
        if not self.in_bounds(row, col):
            raise InvalidCoordinate(row, col, self.size)

    def get(self, row: int, col: int) -> int:
        """指定座標の状態を返す"""
        self.check_coordinate(row, col)
        return int(self.cells[row, col])

    def is_empty(self, row: int, col: int) -> bool:
        return self.get(row, col) == EMPTY

    def apply_move(self, color: int, row: int, col: int):
        """
        石を置き、取りと自殺手を処理する

        処理順:
        1. 石を置く
        2. 隣接する相手の1子が4方向囲まれていれば取る
        3. 置いた石自身が4方向囲まれていれば取り除く（自殺手）
        4. スコアを再計算

        盤端は「囲まれている」とみなす。

        Args:
            color (int): BLACK または WHITE
            row (int): 行 [0, size)
            col (int): 列 [0, size)

        Raises:
            ValueError: color が BLACK / WHITE 以外
            InvalidCoordinate: 盤面外の座標
            OccupiedCell: 既に石がある（盤面は変更されない）
        """
        if color not in (BLACK, WHITE):
            raise ValueError(f"Invalid color: {color}")
        self.check_coordinate(row, col)
        if self.cells[row, col] != EMPTY:
            raise OccupiedCell(row, col)

        self._place(color, row, col)

    def try_move(self, color: int, row: int, col: int) -> bool:
        """
        着手を試みる（占有済みなら何もせず False）

        Returns:
            bool: 石を置けた場合 True
        """
        try:
            self.apply_move(color, row, col)
        except OccupiedCell:
            return False
        return True

    def _place(self, color: int, row: int, col: int):
        """検証済みの着手を盤面に反映する"""
        opponent = opponent_of(color)
        self.cells[row, col] = color

        # 隣接する相手の石を1子ずつ判定（連は辿らない）
        for dr, dc in NEIGHBOR_OFFSETS:
            r, c = row + dr, col + dc
            if not self.in_bounds(r, c) or self.cells[r, c] != opponent:
                continue
            if self._is_surrounded(r, c, color):
                self.cells[r, c] = EMPTY

        # 自殺手の判定は取りの後
        if self._is_surrounded(row, col, opponent):
            self.cells[row, col] = EMPTY

        self.compute_score()

    def _is_surrounded(self, row: int, col: int, by_color: int) -> bool:
        """4方向すべてが by_color の石または盤端かどうか"""
        for dr, dc in NEIGHBOR_OFFSETS:
            r, c = row + dr, col + dc
            if self.in_bounds(r, c) and self.cells[r, c] != by_color:
                return False
        return True

    def compute_score(self) -> int:
        """
        スコアを全走査で再計算する

        Returns:
            int: 白石数 - 黒石数
        """
        black, white = self.stone_counts()
        self.score = white - black
        return self.score

    def stone_counts(self) -> Tuple[int, int]:
        """
        Returns:
            (黒石数, 白石数)
        """
        black = int(np.count_nonzero(self.cells == BLACK))
        white = int(np.count_nonzero(self.cells == WHITE))
        return black, white

    def empty_cells(self) -> np.ndarray:
        """空きマスの一次元インデックス（行優先）"""
        return np.flatnonzero(self.cells == EMPTY)

    def is_full(self) -> bool:
        return not np.any(self.cells == EMPTY)

    def to_string(self) -> str:
        """盤面を1行1列の文字列に変換（'-', 'p', 'b'）"""
        return "\n".join(
            "".join(CELL_CHARS[int(cell)] for cell in row) for row in self.cells
        )

    @classmethod
    def from_string(cls, text: str) -> "GoBoard":
        """
        to_string() / render() 形式の文字列から盤面を復元する

        Raises:
            ValueError: 正方形でない、または不明な文字を含む
        """
        rows: List[str] = [
            line.replace(" ", "") for line in text.strip().splitlines() if line.strip()
        ]
        size = len(rows)
        if size == 0 or any(len(row) != size for row in rows):
            raise ValueError("Board text must describe a square grid")

        board = cls(size)
        for r, row in enumerate(rows):
            for c, char in enumerate(row):
                if char not in CHAR_CELLS:
                    raise ValueError(f"Unknown cell character {char!r} at ({r}, {c})")
                board.cells[r, c] = CHAR_CELLS[char]

        board.compute_score()
        return board

    def render(self) -> str:
        """コンソール表示用（セルを空白区切り）"""
        return "\n".join(
            " ".join(CELL_CHARS[int(cell)] for cell in row) for row in self.cells
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, GoBoard):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.cells, other.cells)

    def __repr__(self) -> str:
        black, white = self.stone_counts()
        return f"GoBoard(size={self.size}, black={black}, white={white}, score={self.score})"
