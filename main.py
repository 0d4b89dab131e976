"""
Tic-Tac-Toe - Main Application

Fletアプリのエントリーポイント。

実行方法:
    # GUIで対局
    python main.py

    # テキストモードで対局（マス番号1〜9を入力、r でリスタート、q で終了）
    python main.py --text

オプション:
    --text          テキストモードで起動
    --cell-size     マスの大きさ（ピクセル）
    --log-level     ログレベル (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import logging
from typing import Callable, Optional

import flet as ft

from game_core import BOARD_SIZE, Game
from turn_adapter import TurnAdapter
from ui.game_view import GameConfig, GameView

logger = logging.getLogger(__name__)

SIDE_MARKS = {"RED": "R", "BLUE": "B"}


def parse_args(argv: Optional[list[str]] = None):
    """コマンドライン引数をパース"""
    parser = argparse.ArgumentParser(
        description="Tic-Tac-Toe - two players on a 3x3 grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Cells are numbered 1-9 row by row:

   1 | 2 | 3
   4 | 5 | 6
   7 | 8 | 9

Examples:
  python main.py                 # Start the GUI
  python main.py --text          # Play in the terminal
        """
    )

    parser.add_argument(
        "--text", "-t",
        action="store_true",
        help="Play in the terminal instead of the GUI"
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=90,
        help="Square size in pixels (default: 90)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    return parser.parse_args(argv)


def create_config_from_args(args) -> GameConfig:
    """コマンドライン引数からGameConfigを作成"""
    return GameConfig(
        cell_size=args.cell_size,
        text_mode=args.text,
        log_level=args.log_level,
    )


def setup_logging(level: str) -> None:
    """ログ出力を設定"""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def render_board(game: Game) -> str:
    """盤面をテキストで描画（空きマスは番号を表示）"""
    lines = []
    for row in range(BOARD_SIZE):
        marks = []
        for col in range(BOARD_SIZE):
            cell = row * BOARD_SIZE + col + 1
            owner = game.owner_of(cell)
            marks.append(SIDE_MARKS[owner.name] if owner else str(cell))
        lines.append(" " + " | ".join(marks))
    return "\n---+---+---\n".join(lines)


def run_text_mode(
    adapter: TurnAdapter,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """
    テキストモードの対局ループ

    EOF または "q" で終了します。

    Args:
        adapter: 対局に使うアダプタ
        read: 入力関数（テスト用に差し替え可能）
        write: 出力関数（テスト用に差し替え可能）
    """
    write(render_board(adapter.game))
    while True:
        try:
            text = read(f"{adapter.status_message()} > ").strip()
        except EOFError:
            break

        if text.lower() == "q":
            break
        if text.lower() == "r":
            adapter.restart()
            write(render_board(adapter.game))
            continue

        result = adapter.select_text(text)
        if not result.ok:
            write(result.message)
            continue

        write(render_board(adapter.game))
        if adapter.game.is_over():
            write(adapter.status_message())
            write("Enter r to restart or q to quit.")


def main(page: ft.Page, config: Optional[GameConfig] = None) -> None:
    """Fletアプリのメイン関数"""
    config = config or GameConfig()

    # ページ設定
    page.title = config.title
    page.window.width = config.window_width
    page.window.height = config.window_height
    page.theme_mode = ft.ThemeMode.LIGHT
    page.padding = 0

    page.views.clear()
    page.views.append(GameView(page, config))
    page.update()


# グローバル変数で初期設定を保持（ft.runのコールバックに渡すため）
_initial_config: Optional[GameConfig] = None


def _main_wrapper(page: ft.Page) -> None:
    """ft.run用のラッパー"""
    main(page, _initial_config)


def cli(argv: Optional[list[str]] = None) -> None:
    """コンソールスクリプトのエントリーポイント"""
    global _initial_config

    args = parse_args(argv)
    _initial_config = create_config_from_args(args)
    setup_logging(_initial_config.log_level)

    if _initial_config.text_mode:
        run_text_mode(TurnAdapter(Game()))
    else:
        logger.info("Starting GUI")
        ft.run(_main_wrapper)


if __name__ == "__main__":
    cli()
