"""CLIのテスト"""

from pathlib import Path

import pytest
import yaml

import main
from src.config import load_config

DEFAULT_CONFIG = str(Path(__file__).resolve().parent.parent / "configs" / "default.yaml")


class TestConfigCommand:
    """config サブコマンドのテスト"""

    def test_dump_to_stdout(self, capsys):
        """CLI引数で上書きした設定がYAMLで出力されること"""
        main.main(["config", "--config", DEFAULT_CONFIG, "--board-size", "7", "--seed", "3"])

        dumped = yaml.safe_load(capsys.readouterr().out)
        assert dumped['game']['board_size'] == 7
        assert dumped['mcts']['num_simulations'] == 100
        assert dumped['system']['seed'] == 3

    def test_save_to_file(self, tmp_path):
        """--output で指定したファイルに保存され、読み戻せること"""
        output = tmp_path / "effective.yaml"

        main.main([
            "config", "--config", DEFAULT_CONFIG,
            "--simulations", "20", "--workers", "2", "--executor", "process",
            "--output", str(output),
        ])

        config = load_config(str(output))
        assert config.num_simulations == 20
        assert config.num_workers == 2
        assert config.executor == "process"
        assert config.board_size == 19

    def test_invalid_override(self):
        """不正な上書き値は ValueError になること"""
        with pytest.raises(ValueError):
            main.main(["config", "--config", DEFAULT_CONFIG, "--board-size", "0"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
