"""
Tic-Tac-Toe - Game View

ゲーム画面（盤面、手番表示、勝者ラベル、リセットボタン）を提供します。
"""

import flet as ft
from dataclasses import dataclass
import logging
from typing import Optional

from turn_adapter import TurnAdapter, TurnResult
from ui.board_component import BoardComponent

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """アプリ設定"""
    title: str = "Tic-Tac-Toe"
    cell_size: int = 90
    window_width: int = 420
    window_height: int = 560
    text_mode: bool = False
    log_level: str = "WARNING"


class GameView(ft.View):
    """
    ゲーム画面

    TurnAdapterを通してGameを操作し、結果をラベルに表示します。
    リセットしてもGameとBoardComponentは作り直しません。
    """

    def __init__(
        self,
        page: ft.Page,
        config: GameConfig,
        adapter: Optional[TurnAdapter] = None,
    ):
        super().__init__(route="/")
        self._page = page
        self._config = config
        self._adapter = adapter or TurnAdapter()

        # UI要素
        self._board_component: BoardComponent = None  # type: ignore
        self._turn_text: ft.Text = None  # type: ignore
        self._winner_text: ft.Text = None  # type: ignore
        self._error_text: ft.Text = None  # type: ignore

        self._build_ui()

    @property
    def adapter(self) -> TurnAdapter:
        return self._adapter

    def _build_ui(self) -> None:
        """UIを構築"""
        title = ft.Text(
            self._config.title,
            size=24,
            weight=ft.FontWeight.BOLD,
        )

        self._board_component = BoardComponent(
            adapter=self._adapter,
            on_result=self._on_turn_result,
            cell_size=self._config.cell_size,
        )

        self._turn_text = ft.Text(
            self._adapter.status_message(),
            size=18,
            weight=ft.FontWeight.BOLD,
        )

        # 勝者ラベル（初期は非表示）
        self._winner_text = ft.Text(
            "",
            size=22,
            weight=ft.FontWeight.BOLD,
            visible=False,
        )

        self._error_text = ft.Text(
            "",
            size=14,
            color=ft.Colors.GREY_600,
        )

        reset_button = ft.ElevatedButton(
            content=ft.Row(
                [
                    ft.Icon(ft.Icons.REFRESH, size=18),
                    ft.Text("Reset"),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=5,
            ),
            on_click=self._on_reset_click,
        )

        content = ft.Container(
            content=ft.Column(
                controls=[
                    title,
                    ft.Divider(),
                    self._board_component,
                    ft.Container(height=10),
                    self._turn_text,
                    self._winner_text,
                    self._error_text,
                    ft.Container(height=20),
                    reset_button,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=20,
            expand=True,
        )

        self.controls = [content]

    def _on_turn_result(self, result: TurnResult) -> None:
        """着手結果を表示に反映"""
        self._error_text.value = "" if result.ok else result.message
        self._update_labels()

    def _update_labels(self) -> None:
        """手番表示と勝者ラベルを更新"""
        game = self._adapter.game
        message = self._adapter.status_message()

        if game.is_over():
            self._winner_text.value = message
            self._winner_text.visible = True
            self._turn_text.value = "Game Over"
        else:
            self._winner_text.visible = False
            self._turn_text.value = message

        self._safe_update()

    def _on_reset_click(self, e: ft.ControlEvent) -> None:
        """リセットボタンクリックハンドラ"""
        self._adapter.restart()
        self._error_text.value = ""
        self._update_labels()

    def _safe_update(self) -> None:
        """ページを安全に更新（セッション破棄済みの場合は無視）"""
        if self._page:
            try:
                self._page.update()
            except RuntimeError:
                logger.debug("Page update skipped: session closed")
