"""
Tic-Tac-Toe - UI Module

Fletを使用したGUIコンポーネントを提供します。

コンポーネント:
- BoardComponent: 3x3盤面の表示コンポーネント
- GameView: ゲーム画面
"""

from ui.board_component import BoardComponent
from ui.game_view import GameConfig, GameView

__all__ = ["BoardComponent", "GameConfig", "GameView"]
