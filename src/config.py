"""
設定ファイルの読み込み

YAML の設定を GameConfig に変換する。CLI 引数による上書きは main.py で行う。
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

import yaml

from src.mcts.parallel import EXECUTOR_TYPES


@dataclass
class GameConfig:
    """
    ゲーム・探索の設定

    Attributes:
        board_size: 盤面の一辺 N
        num_simulations: 子ノードあたりのプレイアウト回数
        num_workers: ロールアウトの並列ワーカー数
        executor: "thread" または "process"
        chunk_size: 1タスクあたりのプレイアウト回数（None なら等分）
        max_retries: 不正な着手を再入力させる上限
        seed: 乱数シード
    """
    board_size: int = 19
    num_simulations: int = 100
    num_workers: int = 1
    executor: str = "thread"
    chunk_size: Optional[int] = None
    max_retries: int = 10
    seed: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        """値の範囲を検証"""
        if self.board_size < 1:
            raise ValueError(f"board_size must be positive: {self.board_size}")
        if self.num_simulations < 1:
            raise ValueError(f"num_simulations must be positive: {self.num_simulations}")
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be positive: {self.num_workers}")
        if self.executor not in EXECUTOR_TYPES:
            raise ValueError(
                f"executor must be one of {EXECUTOR_TYPES}: {self.executor}"
            )
        if self.chunk_size is not None and self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive: {self.chunk_size}")
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be positive: {self.max_retries}")

    @property
    def total_moves(self) -> int:
        """1ゲームの総手数 (N²)"""
        return self.board_size * self.board_size

    @classmethod
    def from_dict(cls, config: dict) -> "GameConfig":
        """
        セクション分けされた設定辞書から作成

        Args:
            config: yaml.safe_load の結果
        """
        config = config or {}
        game = config.get('game', {}) or {}
        mcts = config.get('mcts', {}) or {}
        play = config.get('play', {}) or {}
        system = config.get('system', {}) or {}

        return cls(
            board_size=game.get('board_size', 19),
            num_simulations=mcts.get('num_simulations', 100),
            num_workers=mcts.get('num_workers', 1),
            executor=mcts.get('executor', 'thread'),
            chunk_size=mcts.get('chunk_size'),
            max_retries=play.get('max_retries', 10),
            seed=system.get('seed'),
        )

    def to_dict(self) -> dict:
        """from_dict と同じセクション構造の辞書に変換"""
        values = asdict(self)
        return {
            'game': {'board_size': values['board_size']},
            'mcts': {
                'num_simulations': values['num_simulations'],
                'num_workers': values['num_workers'],
                'executor': values['executor'],
                'chunk_size': values['chunk_size'],
            },
            'play': {'max_retries': values['max_retries']},
            'system': {'seed': values['seed']},
        }


def load_config(config_path: str) -> GameConfig:
    """
    YAML設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス

    Returns:
        GameConfig: 設定
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    return GameConfig.from_dict(config)


def save_config(config: GameConfig, config_path: str):
    """設定をYAMLファイルに保存"""
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False, allow_unicode=True)
