"""
探索木のノードとノードストア

1手読みのMCTSで使用する。木はルート（id=0）とその子だけからなり、
ノードはすべて1つのストア（配列）に格納され、整数idで参照される。
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.game.board import GoBoard, EMPTY
from src.game.errors import NodeStoreOverflow

ROOT_ID = 0
NO_PARENT = -1


@dataclass
class SearchNode:
    """
    探索木のノード

    Attributes:
        node_id: ストア内のid
        board: 盤面（親・兄弟とは共有しない独立コピー）
        parent: 親ノードのid（ルートは -1）
        children: 子ノードのidリスト（作成順）
        color: このノードを生んだ着手の色（ルートでは無意味）
        row, col: このノードを生んだ着手の座標（ルートでは無意味）
        level: 初期盤面から置かれた石の数
        score: 盤面スコアのキャッシュ
    """
    node_id: int
    board: GoBoard
    parent: int = NO_PARENT
    children: List[int] = field(default_factory=list)
    color: int = EMPTY
    row: int = 0
    col: int = 0
    level: int = 0
    score: int = 0

    def is_root(self) -> bool:
        return self.parent == NO_PARENT

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        return (f"SearchNode(id={self.node_id}, parent={self.parent}, "
                f"move=({self.row}, {self.col}), level={self.level}, "
                f"score={self.score}, children={len(self.children)})")


class NodeStore:
    """
    ノードのアリーナ

    子の容量は N² （空の盤面では全交点が子になる）。ルートを含め最大 N²+1 ノード。
    1回の展開ごとに作り直す。
    """

    def __init__(self, size: int):
        """
        Args:
            size (int): 盤面の一辺
        """
        self.size = size
        self.capacity = size * size
        self.nodes: List[SearchNode] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node_id: int) -> SearchNode:
        return self.nodes[node_id]

    @property
    def root(self) -> SearchNode:
        return self.nodes[ROOT_ID]

    def clear(self):
        """全ノードを破棄"""
        self.nodes.clear()

    def create_root(self, board: GoBoard, level: int = 0) -> SearchNode:
        """
        ストアを空にし、盤面のコピーをルート（id=0）として登録する

        Args:
            board: 現在の局面（コピーされる）
            level: これまでに置かれた石の数
        """
        if board.size != self.size:
            raise ValueError(
                f"Board size {board.size} does not match store size {self.size}"
            )

        self.clear()
        root_board = board.copy()
        root = SearchNode(
            node_id=ROOT_ID,
            board=root_board,
            level=level,
            score=root_board.compute_score(),
        )
        self.nodes.append(root)
        return root

    def create_child(self, parent_id: int, color: int, row: int, col: int) -> int:
        """
        親の盤面をコピーして着手し、子ノードを追加する

        Args:
            parent_id: 親ノードのid
            color: 置く石の色
            row, col: 着手座標

        Returns:
            int: 子ノードのid（1から連番）

        Raises:
            NodeStoreOverflow: 容量超過
            InvalidCoordinate / OccupiedCell: 着手が不正
        """
        # ルート（id=0）は容量に数えない
        if len(self.nodes) - 1 >= self.capacity:
            raise NodeStoreOverflow(
                f"Node store is full (capacity={self.capacity} children)"
            )

        parent = self.nodes[parent_id]
        board = parent.board.copy()
        board.apply_move(color, row, col)

        child_id = len(self.nodes)
        child = SearchNode(
            node_id=child_id,
            board=board,
            parent=parent_id,
            color=color,
            row=row,
            col=col,
            level=parent.level + 1,
            score=board.score,
        )
        self.nodes.append(child)
        parent.children.append(child_id)

        return child_id

    def get_parent(self, node_id: int) -> Optional[SearchNode]:
        """親ノードを返す（ルートは None）"""
        parent = self.nodes[node_id].parent
        if parent == NO_PARENT:
            return None
        return self.nodes[parent]
