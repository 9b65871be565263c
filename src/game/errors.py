"""
ゲーム関連の例外定義

コア（盤面・探索）は例外を送出し、シェル側（CLI / Arena）で捕捉して
再入力を促す。
"""

# MCTSで合法手が存在しない場合の戻り値
NO_LEGAL_MOVE = -1


class GoError(Exception):
    """囲碁（簡易版）モジュールの基底例外"""


class InvalidCoordinate(GoError):
    """盤面外の座標が指定された"""

    def __init__(self, row: int, col: int, size: int):
        self.row = row
        self.col = col
        self.size = size
        super().__init__(
            f"Invalid coordinate ({row}, {col}): must be within [0, {size})"
        )


class OccupiedCell(GoError):
    """既に石が置かれている場所に着手しようとした"""

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        super().__init__(f"Cell ({row}, {col}) is already occupied")


class RolloutDeadlock(GoError):
    """プレイアウト中に空きマスがなくなった（strictモードのみ送出）"""


class NodeStoreOverflow(GoError):
    """ノードストアの容量を超えて子ノードを作成しようとした"""
