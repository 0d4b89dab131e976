"""
Tic-Tac-Toe - Core Game Logic

3x3の三目並べのルールエンジンを提供します。
手番管理、着手の合法性チェック、勝敗・引き分けの判定のみを担当し、
描画や入力の割り当ては ui / turn_adapter 側に任せます。

アーキテクチャ:
- 勝ちライン関数: マスを通る縦・横・斜めのラインを返す純粋関数
- Move: 1手の不変な記録（マス、陣営、手数）
- Player: 着手履歴を持ち、確保したマスと勝利判定を導出
- Game: 2人の手番を管理し、勝者・引き分け・終了を問い合わせで返す

マス番号は1〜9（行優先）:

    1 | 2 | 3
    4 | 5 | 6
    7 | 8 | 9
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE
CELLS = range(1, CELL_COUNT + 1)

MAIN_DIAGONAL = frozenset({1, 5, 9})
ANTI_DIAGONAL = frozenset({3, 5, 7})


class Side(Enum):
    """対戦する2つの陣営（赤が先手）"""
    RED = auto()
    BLUE = auto()

    def opponent(self) -> "Side":
        """相手の陣営を返す"""
        return Side.BLUE if self == Side.RED else Side.RED


class GameStatus(Enum):
    """ゲームの状態を表す列挙型（Gameから導出され、保存はされない）"""
    IN_PROGRESS = auto()  # 進行中
    RED_WIN = auto()      # 赤の勝利
    BLUE_WIN = auto()     # 青の勝利
    TIED = auto()         # 引き分け（9マス全て埋まった）


# ----------------------
# エラー
# ----------------------

class GameError(Exception):
    """エンジンが着手を拒否したときの基底例外"""


class GameOverError(GameError):
    """勝敗・引き分けが決まった後に着手しようとした"""


class InvalidMoveError(GameError):
    """どちらかの陣営が既に確保したマスに着手しようとした"""


class InvalidCellError(GameError, ValueError):
    """1〜9の範囲外のマス番号"""


class GameStateError(GameError):
    """内部状態の矛盾（両陣営が同時に勝利しているなど）"""


# ----------------------
# 勝ちライン
# ----------------------

def _check_cell(cell: int) -> None:
    if isinstance(cell, bool) or not isinstance(cell, int) or cell not in CELLS:
        raise InvalidCellError(f"cell must be in 1..{CELL_COUNT}, got {cell!r}")


def vertical_line(cell: int) -> frozenset[int]:
    """
    cellを含む縦の列を返す

    cell % 3 で列を分類します（1: 左, 2: 中, 0: 右）。
    """
    _check_cell(cell)
    column = (cell - 1) % BOARD_SIZE + 1
    return frozenset(range(column, CELL_COUNT + 1, BOARD_SIZE))


def horizontal_line(cell: int) -> frozenset[int]:
    """cellを含む横の行を返す"""
    _check_cell(cell)
    first = (cell - 1) // BOARD_SIZE * BOARD_SIZE + 1
    return frozenset(range(first, first + BOARD_SIZE))


def diagonal_lines(cell: int) -> list[frozenset[int]]:
    """
    cellを通る斜めのラインを全て返す

    中央(5)は両方の斜めに乗っているので2本、角は1本、辺は0本です。

    Args:
        cell: マス番号（1〜9）

    Returns:
        斜めラインのリスト（左上→右下が先）
    """
    _check_cell(cell)
    return [line for line in (MAIN_DIAGONAL, ANTI_DIAGONAL) if cell in line]


def all_winning_lines(cell: int) -> list[frozenset[int]]:
    """
    cellを通る勝ちラインを全て返す

    縦・横は常に1本ずつ、斜めは0〜2本です。

    Returns:
        勝ちラインのリスト（縦、横、斜めの順）
    """
    return [vertical_line(cell), horizontal_line(cell), *diagonal_lines(cell)]


# 盤面上の8本の勝ちライン
WINNING_LINES: tuple[frozenset[int], ...] = (
    *(horizontal_line(cell) for cell in (1, 4, 7)),
    *(vertical_line(cell) for cell in (1, 2, 3)),
    MAIN_DIAGONAL,
    ANTI_DIAGONAL,
)


# ----------------------
# Move / Player
# ----------------------

@dataclass(frozen=True)
class Move:
    """
    1手の記録（不変）

    Playerオブジェクトではなく陣営(Side)を持つので、
    ハッシュ可能でPlayerのリセットとも独立しています。
    """
    cell: int          # 着手したマス（1〜9）
    side: Side         # 着手した陣営
    turn_number: int   # 着手時のGame.turn_number（0から開始）

    def __post_init__(self) -> None:
        _check_cell(self.cell)

    def is_invalid_for(self, game: "Game") -> bool:
        """
        このマスがどちらかの陣営に既に確保されているか

        手番や終了状態はチェックしません（Player.attempt_moveが先に確認します）。
        """
        return self.cell in game.occupied_cells()

    def winning_lines(self) -> list[frozenset[int]]:
        """この手のマスを通る勝ちライン"""
        return all_winning_lines(self.cell)


class Player:
    """
    1つの陣営のプレイヤー

    着手履歴を唯一の状態として持ち、確保したマスと勝利判定は
    履歴から毎回導出します。リスタート時は作り直さずにreset()で履歴を消します。
    """

    def __init__(self, side: Side) -> None:
        self._side = side
        self._moves: list[Move] = []

    def __repr__(self) -> str:
        return f"Player({self._side.name}, moves={[m.cell for m in self._moves]})"

    @property
    def side(self) -> Side:
        """プレイヤーの陣営"""
        return self._side

    @property
    def name(self) -> str:
        """表示名（"RED" / "BLUE"）"""
        return self._side.name

    @property
    def moves(self) -> tuple[Move, ...]:
        """着手履歴のコピー"""
        return tuple(self._moves)

    def captured_cells(self) -> frozenset[int]:
        """このプレイヤーが確保したマスの集合"""
        return frozenset(move.cell for move in self._moves)

    def attempt_move(self, cell: int, game: "Game") -> Move:
        """
        指定マスへの着手を試みる

        成功した場合のみ履歴に追加します。

        Args:
            cell: 着手するマス
            game: 対局中のゲーム

        Returns:
            追加されたMove

        Raises:
            GameOverError: ゲームが既に終了している場合
            InvalidCellError: マス番号が範囲外の場合
            InvalidMoveError: マスが既にどちらかに確保されている場合
        """
        if game.is_over():
            raise GameOverError("game is already over")

        move = Move(cell, self._side, game.turn_number)
        if move.is_invalid_for(game):
            raise InvalidMoveError(f"cell {cell} is already captured")

        self._moves.append(move)
        return move

    def recent_move(self) -> Optional[Move]:
        """最後の着手（まだ打っていなければNone）"""
        return self._moves[-1] if self._moves else None

    def winning_line(self) -> Optional[frozenset[int]]:
        """
        最後の着手で完成した勝ちラインを返す

        最後の着手を通るラインだけを調べるので、
        勝ちはそれが完成した手番でのみ検出されます。
        """
        recent = self.recent_move()
        if recent is None:
            return None

        captured = self.captured_cells()
        for line in recent.winning_lines():
            if line <= captured:
                return line
        return None

    def has_recent_winning_move(self) -> bool:
        """最後の着手で勝ちラインが完成したか"""
        return self.winning_line() is not None

    def reset(self) -> None:
        """着手履歴をクリア（陣営はそのまま）"""
        self._moves.clear()


# ----------------------
# イベント
# ----------------------

@dataclass
class GameEvent:
    """
    ゲームイベントを表すデータクラス

    Observerに通知されるイベント情報を格納します。
    event_type は "MOVE_PLAYED", "GAME_OVER", "GAME_RESET" のいずれかです。
    """
    event_type: str
    move: Optional[Move] = None
    status: Optional[GameStatus] = None
    message: str = ""


GameEventCallback = Callable[[GameEvent], None]


# ----------------------
# Game
# ----------------------

class Game:
    """
    対局を管理するクラス

    責務:
    - 2人のプレイヤーの手番管理（turn_number の偶奇で決まる）
    - 着手をプレイヤーに委譲し、成功時のみ手番を進める
    - 勝者・引き分け・終了の問い合わせ（毎回計算し、キャッシュしない）
    - Observerパターンによる状態変化の通知

    スレッドセーフではありません。並行して使う場合は
    1つのGameへのアクセスを呼び出し側で直列化してください。
    """

    def __init__(self) -> None:
        self._players: tuple[Player, Player] = (Player(Side.RED), Player(Side.BLUE))
        self._turn_number = 0
        self._listeners: list[GameEventCallback] = []

    def __repr__(self) -> str:
        return f"Game(turn_number={self._turn_number}, status={self.status.name})"

    @property
    def players(self) -> tuple[Player, Player]:
        """2人のプレイヤー（先手, 後手）"""
        return self._players

    @property
    def turn_number(self) -> int:
        """受け付けた着手の数（リスタートで0に戻る）"""
        return self._turn_number

    def player_for(self, side: Side) -> Player:
        """陣営に対応するプレイヤー"""
        for player in self._players:
            if player.side == side:
                return player
        raise KeyError(side)

    def current_player(self) -> Player:
        """現在の手番のプレイヤー"""
        return self._players[self._turn_number % len(self._players)]

    def occupied_cells(self) -> frozenset[int]:
        """両陣営が確保したマスの集合"""
        return self._players[0].captured_cells() | self._players[1].captured_cells()

    def available_cells(self) -> list[int]:
        """まだ空いているマス（昇順）"""
        occupied = self.occupied_cells()
        return [cell for cell in CELLS if cell not in occupied]

    def owner_of(self, cell: int) -> Optional[Player]:
        """マスを確保しているプレイヤー（空ならNone）"""
        _check_cell(cell)
        for player in self._players:
            if cell in player.captured_cells():
                return player
        return None

    def total_moves(self) -> int:
        """両陣営の着手数の合計"""
        return sum(len(player.moves) for player in self._players)

    def winner(self) -> Optional[Player]:
        """
        最後の着手で勝ちラインを完成させたプレイヤー

        Raises:
            GameStateError: 2人とも勝利条件を満たしている場合（通常の対局では起こらない）
        """
        winners = [p for p in self._players if p.has_recent_winning_move()]
        if len(winners) > 1:
            raise GameStateError("both players satisfy the win condition")
        return winners[0] if winners else None

    def is_won(self) -> bool:
        """どちらかが勝利しているか"""
        return any(player.has_recent_winning_move() for player in self._players)

    def is_tied(self) -> bool:
        """勝者がいないまま9マス埋まったか"""
        return not self.is_won() and self.total_moves() >= CELL_COUNT

    def is_over(self) -> bool:
        """ゲームが終了しているか"""
        return self.is_tied() or self.is_won()

    @property
    def status(self) -> GameStatus:
        """現在の状態"""
        winner = self.winner()
        if winner is not None:
            return GameStatus.RED_WIN if winner.side == Side.RED else GameStatus.BLUE_WIN
        if self.is_tied():
            return GameStatus.TIED
        return GameStatus.IN_PROGRESS

    def add_listener(self, callback: GameEventCallback) -> None:
        """
        イベントリスナーを登録（Observerパターン）

        登録されたコールバックは、以下のイベント発生時に呼ばれます:
        - MOVE_PLAYED: 着手が受け付けられた時
        - GAME_OVER: その着手で勝敗・引き分けが決まった時
        - GAME_RESET: restart() された時
        """
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: GameEventCallback) -> bool:
        """
        イベントリスナーを解除

        Returns:
            解除できたらTrue、存在しなければFalse
        """
        if callback in self._listeners:
            self._listeners.remove(callback)
            return True
        return False

    def _notify_listeners(self, event: GameEvent) -> None:
        """全リスナーにイベントを通知"""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # リスナーの例外がゲームロジックに影響しないようにする
                logger.exception("Listener error on %s", event.event_type)

    def take_turn(self, cell: int) -> Move:
        """
        現在の手番のプレイヤーが指定マスに着手する

        この関数がUIやアダプタから呼ばれる主要なインターフェースです。
        失敗した場合はturn_numberも履歴も変化しません。

        Args:
            cell: マス番号（1〜9）

        Returns:
            受け付けられたMove

        Raises:
            GameOverError: ゲームが既に終了している場合（他のチェックより先）
            InvalidCellError: マス番号が範囲外の場合
            InvalidMoveError: マスが既に確保されている場合
        """
        player = self.current_player()
        move = player.attempt_move(cell, self)
        self._turn_number += 1
        logger.debug("%s captured cell %d (turn %d)", player.name, cell, move.turn_number)

        status = self.status
        self._notify_listeners(GameEvent(
            event_type="MOVE_PLAYED",
            move=move,
            status=status,
            message=f"{player.name} played at {cell}",
        ))

        if status != GameStatus.IN_PROGRESS:
            logger.debug("Game over: %s", status.name)
            self._notify_listeners(GameEvent(
                event_type="GAME_OVER",
                move=move,
                status=status,
                message=f"Game over: {status.name}",
            ))

        return move

    def restart(self) -> None:
        """
        ゲームを初期状態に戻す

        プレイヤーは作り直さずにリセットするので、
        外部から保持されている参照はそのまま使えます。
        """
        for player in self._players:
            player.reset()
        self._turn_number = 0

        self._notify_listeners(GameEvent(
            event_type="GAME_RESET",
            status=GameStatus.IN_PROGRESS,
            message="Game has been restarted",
        ))
