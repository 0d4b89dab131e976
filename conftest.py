"""
Pytest configuration and shared fixtures
"""

import pytest

from game_core import Game
from turn_adapter import TurnAdapter


@pytest.fixture
def game() -> Game:
    """初期状態のゲーム"""
    return Game()


@pytest.fixture
def adapter(game: Game) -> TurnAdapter:
    """gameフィクスチャを操作するアダプタ"""
    return TurnAdapter(game)


@pytest.fixture
def tie_sequence() -> list[int]:
    """
    どちらも勝ちラインを完成させずに9マス埋まる手順

    赤: 1, 3, 4, 8, 9 / 青: 2, 5, 6, 7
    """
    return [1, 2, 3, 5, 4, 6, 8, 7, 9]
