"""
Tic-Tac-Toe - Turn Adapter

入力イベント（「マスNが選ばれた」）を Game.take_turn(N) に変換し、
結果をUIが描画できる TurnResult として返すコマンドディスパッチ層です。

GUI（ui/）とテキストモード（main.py --text）の両方がこのクラスを使います。
エンジンの例外はここで TurnOutcome に変換され、UI側には漏れません。

使用例:
    adapter = TurnAdapter(Game())

    result = adapter.select_cell(5)
    if not result.ok:
        show_error(result.message)
    label.text = adapter.status_message()
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import logging

from game_core import (
    CELL_COUNT, Game, GameOverError, GameStatus, InvalidCellError,
    InvalidMoveError, Move, Player,
)

logger = logging.getLogger(__name__)


class TurnOutcome(Enum):
    """着手リクエストの結果"""
    OK = auto()
    GAME_OVER = auto()      # 終了後の着手
    INVALID_MOVE = auto()   # 確保済みのマス
    INVALID_CELL = auto()   # 範囲外のマス番号


@dataclass(frozen=True)
class TurnResult:
    """1回の着手リクエストの結果"""
    outcome: TurnOutcome
    cell: Optional[int]
    status: GameStatus
    message: str
    player: Optional[Player] = None   # 着手したプレイヤー（OKの時のみ）
    move: Optional[Move] = None

    @property
    def ok(self) -> bool:
        """着手が受け付けられたか"""
        return self.outcome == TurnOutcome.OK


def parse_cell(text: str) -> int:
    """
    テキスト入力をマス番号に変換

    Raises:
        InvalidCellError: 数字でない、または1〜9の範囲外の場合
    """
    try:
        cell = int(text.strip())
    except ValueError:
        raise InvalidCellError(f"not a cell number: {text!r}") from None
    if not 1 <= cell <= CELL_COUNT:
        raise InvalidCellError(f"cell must be in 1..{CELL_COUNT}, got {cell}")
    return cell


class TurnAdapter:
    """
    GameとUIの間のアダプタ

    Gameは作り直さずに保持し続けるので、
    UIコンポーネントは同じGameへの参照を持ち続けられます。
    """

    def __init__(self, game: Optional[Game] = None) -> None:
        self._game = game or Game()

    @property
    def game(self) -> Game:
        """対局中のゲーム"""
        return self._game

    def select_cell(self, cell: int) -> TurnResult:
        """
        マスが選択された時に呼ぶ

        Args:
            cell: 選択されたマス番号

        Returns:
            TurnResult（拒否された場合もエラーを送出せずに返す）
        """
        player = self._game.current_player()
        try:
            move = self._game.take_turn(cell)
        except GameOverError:
            logger.info("GAME ALREADY OVER: cell %s rejected", cell)
            return self._rejected(TurnOutcome.GAME_OVER, cell, "GAME ALREADY OVER")
        except InvalidMoveError:
            logger.info("INVALID MOVE: cell %s is already captured", cell)
            return self._rejected(TurnOutcome.INVALID_MOVE, cell, "INVALID MOVE")
        except InvalidCellError:
            logger.info("INVALID CELL: %r", cell)
            return self._rejected(TurnOutcome.INVALID_CELL, cell, "INVALID CELL")

        return TurnResult(
            outcome=TurnOutcome.OK,
            cell=cell,
            status=self._game.status,
            message=self.status_message(),
            player=player,
            move=move,
        )

    def select_text(self, text: str) -> TurnResult:
        """テキスト入力（"5" など）からマスを選択"""
        try:
            cell = parse_cell(text)
        except InvalidCellError:
            logger.info("INVALID CELL: %r", text)
            return self._rejected(TurnOutcome.INVALID_CELL, None, "INVALID CELL")
        return self.select_cell(cell)

    def restart(self) -> None:
        """ゲームをリスタート"""
        self._game.restart()

    def status_message(self) -> str:
        """
        現在の状態の表示用テキスト

        Returns:
            "GAME IS TIED" / "CONGRATZ RED WON" / "RED'S TURN" のいずれか
        """
        if self._game.is_tied():
            return "GAME IS TIED"
        winner = self._game.winner()
        if winner is not None:
            return f"CONGRATZ {winner.name} WON"
        return f"{self._game.current_player().name}'S TURN"

    def _rejected(self, outcome: TurnOutcome, cell: Optional[int], message: str) -> TurnResult:
        return TurnResult(
            outcome=outcome,
            cell=cell,
            status=self._game.status,
            message=message,
        )
