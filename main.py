"""
囲碁（簡易版）MCTS - CLIエントリポイント

対戦・評価用のコマンドラインインターフェース
"""

import argparse
import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import yaml

from src.config import GameConfig, load_config, save_config
from src.eval.arena import Arena, evaluate_player
from src.eval.players import HumanPlayer, MCTSPlayer, RandomPlayer


def build_config(args) -> GameConfig:
    """
    設定ファイルを読み込み、CLI引数で上書きする

    Args:
        args: argparseの引数

    Returns:
        GameConfig: 設定
    """
    config = load_config(args.config)

    overrides = {}
    for key in ('board_size', 'num_simulations', 'num_workers', 'executor', 'seed'):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    if overrides:
        config = replace(config, **overrides)
    return config


def print_header(config: GameConfig):
    """ゲーム設定を表示"""
    print("GameTree - Go (adapted) - MCTS (Monte Carlo Tree Search)")
    print(f"Board {config.board_size} x {config.board_size}.")
    print(f"Total moves: {config.total_moves}.")
    print(f"{config.num_simulations} simulations per expanded node.")
    if config.num_workers > 1:
        print(f"Rollout workers: {config.num_workers} ({config.executor})")
    print()


def play_command(args):
    """
    対戦コマンド（人間 vs 機械）

    Args:
        args: argparseの引数
    """
    config = build_config(args)
    print_header(config)

    human = HumanPlayer()
    machine = MCTSPlayer.from_config(config)
    arena = Arena(
        board_size=config.board_size,
        max_retries=config.max_retries,
        verbose=True,
    )

    print("STARTING THE GAME:")
    try:
        arena.play_game(human, machine)
    finally:
        machine.close()


def eval_command(args):
    """
    評価コマンド（ランダム vs 機械）

    Args:
        args: argparseの引数
    """
    config = build_config(args)

    print("=" * 70)
    print("MCTS Evaluation")
    print("=" * 70)
    print(f"Board: {config.board_size} x {config.board_size}")
    print(f"Games: {args.games}")
    print(f"MCTS simulations: {config.num_simulations}")

    machine = MCTSPlayer.from_config(config)
    opponent = RandomPlayer(name="Random", seed=config.seed)

    try:
        eval_result = evaluate_player(
            machine=machine,
            opponent=opponent,
            num_games=args.games,
            board_size=config.board_size,
            verbose=args.verbose,
        )
    finally:
        machine.close()

    print(f"\nResult vs {opponent.name}:")
    print(f"  Win Rate: {eval_result['win_rate'] * 100:.1f}%")
    print(f"  Avg Score: {eval_result['avg_score']:.1f}")
    print(f"  Avg Moves: {eval_result['avg_moves']:.1f}")

    if args.save_results:
        output_dir = Path("data/eval")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        result_file = output_dir / f"eval_{timestamp}.json"

        eval_data = {
            "timestamp": datetime.now().isoformat(),
            "config": config.to_dict(),
            "games": args.games,
            "win_rate": eval_result["win_rate"],
            "avg_score": eval_result["avg_score"],
            "avg_moves": eval_result["avg_moves"],
        }

        with open(result_file, "w") as f:
            json.dump(eval_data, f, indent=2)

        print(f"\nResults saved to: {result_file}")

    print("\n" + "=" * 70)


def config_command(args):
    """
    設定表示コマンド

    設定ファイルとCLI引数を合成した設定をYAMLで出力する

    Args:
        args: argparseの引数
    """
    config = build_config(args)

    if args.output:
        save_config(config, args.output)
        print(f"Config saved to: {args.output}")
    else:
        print(yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True), end="")


def add_common_arguments(parser: argparse.ArgumentParser):
    """設定ファイルと上書き用の共通引数"""
    parser.add_argument(
        '--config',
        type=str,
        default='configs/default.yaml',
        help='Path to config file (default: configs/default.yaml)'
    )
    parser.add_argument('--board-size', dest='board_size', type=int, help='Board size N')
    parser.add_argument(
        '--simulations',
        dest='num_simulations',
        type=int,
        help='Rollouts per expanded node'
    )
    parser.add_argument(
        '--workers',
        dest='num_workers',
        type=int,
        help='Number of rollout workers'
    )
    parser.add_argument(
        '--executor',
        choices=['thread', 'process'],
        help='Rollout worker type'
    )
    parser.add_argument('--seed', type=int, help='Random seed')


def main(argv=None):
    """メインエントリポイント"""
    parser = argparse.ArgumentParser(description="Go (adapted) MCTS - CLI")

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Play コマンド
    play_parser = subparsers.add_parser('play', help='Play against the machine')
    add_common_arguments(play_parser)
    play_parser.set_defaults(func=play_command)

    # Eval コマンド
    eval_parser = subparsers.add_parser('eval', help='Evaluate MCTS against a random player')
    add_common_arguments(eval_parser)
    eval_parser.add_argument(
        '--games',
        type=int,
        default=10,
        help='Number of games (default: 10)'
    )
    eval_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed game progress'
    )
    eval_parser.add_argument(
        '--save-results',
        action='store_true',
        help='Save evaluation results to JSON file'
    )
    eval_parser.set_defaults(func=eval_command)

    # Config コマンド
    config_parser = subparsers.add_parser('config', help='Show the effective config as YAML')
    add_common_arguments(config_parser)
    config_parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Write the config to this YAML file instead of stdout'
    )
    config_parser.set_defaults(func=config_command)

    args = parser.parse_args(argv)

    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
