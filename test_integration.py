"""
Tic-Tac-Toe - Integration Tests

テキストモードの対局ループを通して、入力からエンジン、表示までを検証します。
"""

import pytest

from game_core import Game
from main import create_config_from_args, parse_args, render_board, run_text_mode
from turn_adapter import TurnAdapter


def run_script(inputs, adapter=None):
    """入力の列でテキストモードを実行し、出力を返す"""
    adapter = adapter or TurnAdapter(Game())
    lines = iter(inputs)
    output: list[str] = []

    def read(prompt: str) -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    run_text_mode(adapter, read=read, write=output.append)
    return adapter, output


class TestRenderBoard:
    """render_boardのテスト"""

    def test_empty_board(self):
        """空きマスは番号を表示"""
        assert render_board(Game()) == (
            " 1 | 2 | 3\n---+---+---\n 4 | 5 | 6\n---+---+---\n 7 | 8 | 9"
        )

    def test_captured_cells(self):
        """確保済みのマスは陣営の記号"""
        game = Game()
        game.take_turn(1)
        game.take_turn(5)
        rendered = render_board(game)
        assert rendered.startswith(" R | 2 | 3")
        assert " 4 | B | 6" in rendered


class TestTextMode:
    """テキストモードのテスト"""

    def test_red_wins(self):
        """赤が上の行で勝つ"""
        adapter, output = run_script(["1", "4", "2", "5", "3"])

        assert "CONGRATZ RED WON" in output
        assert adapter.game.winner() is adapter.game.players[0]

    def test_invalid_inputs_are_reported(self):
        """不正な入力はメッセージを出して続行する"""
        adapter, output = run_script(["1", "1", "0", "abc", "2"])

        assert "INVALID MOVE" in output
        assert output.count("INVALID CELL") == 2
        assert adapter.game.turn_number == 2

    def test_game_over_then_restart(self):
        """終了後の着手は拒否され、rで最初からやり直せる"""
        moves = ["1", "4", "2", "5", "3"]
        adapter, output = run_script(moves + ["9", "r"] + moves)

        assert "GAME ALREADY OVER" in output
        assert output.count("CONGRATZ RED WON") == 2

    def test_tie(self, tie_sequence):
        """引き分けの表示"""
        adapter, output = run_script([str(cell) for cell in tie_sequence])

        assert "GAME IS TIED" in output
        assert adapter.game.is_tied() is True

    def test_quit(self):
        """qで終了する"""
        adapter, _ = run_script(["5", "q", "1"])
        assert adapter.game.turn_number == 1


class TestArgs:
    """コマンドライン引数のテスト"""

    def test_defaults(self):
        """デフォルトはGUI"""
        config = create_config_from_args(parse_args([]))
        assert config.text_mode is False
        assert config.cell_size == 90
        assert config.log_level == "WARNING"

    def test_text_mode(self):
        """--textでテキストモード"""
        config = create_config_from_args(
            parse_args(["--text", "--cell-size", "60", "--log-level", "DEBUG"])
        )
        assert config.text_mode is True
        assert config.cell_size == 60
        assert config.log_level == "DEBUG"

    def test_bad_log_level(self):
        """不明なログレベルはエラー"""
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "LOUD"])
