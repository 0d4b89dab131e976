"""
Tic-Tac-Toe - Board Component

3x3の盤面表示とタップ操作を提供するFletコンポーネント。
"""

import flet as ft
from typing import Callable, Optional

from game_core import BOARD_SIZE, Game, GameEvent, Side
from turn_adapter import TurnAdapter, TurnResult

EMPTY_COLOR = "#D3D3D3"   # lightGray
SIDE_COLORS = {
    Side.RED: "#E53935",
    Side.BLUE: "#1E88E5",
}
WIN_BORDER_COLOR = "#FFD54F"


class BoardComponent(ft.Container):
    """
    盤面表示コンポーネント

    マスのタップをTurnAdapterに渡し、Gameのイベントを受けて色を更新します。
    盤面の状態は持たず、表示のたびにGameへ問い合わせます。
    """

    def __init__(
        self,
        adapter: TurnAdapter,
        on_result: Optional[Callable[[TurnResult], None]] = None,
        cell_size: int = 90,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._adapter = adapter
        self._on_result = on_result
        self._cell_size = cell_size
        self._cells: dict[int, ft.Container] = {}

        self._build_board()
        self.game.add_listener(self._on_game_event)

    @property
    def game(self) -> Game:
        """表示中のゲーム"""
        return self._adapter.game

    def _build_board(self) -> None:
        """盤面UIを構築"""
        rows = []
        self._cells = {}

        for row in range(BOARD_SIZE):
            row_cells = []
            for col in range(BOARD_SIZE):
                cell = row * BOARD_SIZE + col + 1
                container = self._create_cell(cell)
                self._cells[cell] = container
                row_cells.append(container)

            rows.append(ft.Row(
                controls=row_cells,
                spacing=4,
                alignment=ft.MainAxisAlignment.CENTER
            ))

        self.content = ft.Column(
            controls=rows,
            spacing=4,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER
        )
        self.padding = 4
        self.border_radius = 5

    def _create_cell(self, cell: int) -> ft.Container:
        """1つのマスを作成"""
        return ft.Container(
            width=self._cell_size,
            height=self._cell_size,
            bgcolor=EMPTY_COLOR,
            border_radius=3,
            alignment=ft.Alignment(0, 0),
            on_click=lambda e, cell=cell: self._handle_click(cell),
        )

    def _handle_click(self, cell: int) -> None:
        """マスのタップハンドラ"""
        result = self._adapter.select_cell(cell)
        if self._on_result:
            self._on_result(result)

    def _on_game_event(self, event: GameEvent) -> None:
        """ゲームイベントハンドラ"""
        if event.event_type in ["MOVE_PLAYED", "GAME_RESET"]:
            self.refresh_board()

    def cell_color(self, cell: int) -> str:
        """マスの表示色（空なら灰色、確保済みなら陣営の色）"""
        owner = self.game.owner_of(cell)
        if owner is None:
            return EMPTY_COLOR
        return SIDE_COLORS[owner.side]

    def refresh_board(self) -> None:
        """盤面表示を更新"""
        winner = self.game.winner()
        winning_line = winner.winning_line() if winner else frozenset()

        for cell, container in self._cells.items():
            container.bgcolor = self.cell_color(cell)
            # 完成したラインをハイライト
            if cell in winning_line:
                container.border = ft.border.all(4, WIN_BORDER_COLOR)
            else:
                container.border = None

        try:
            if self.page:
                self.update()
        except RuntimeError:
            # ページに追加される前は描画しない
            return

    def detach(self) -> None:
        """Gameのリスナーを解除"""
        self.game.remove_listener(self._on_game_event)
