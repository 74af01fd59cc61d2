"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.core.shared_types import Color
from src.rules.board import Board
from src.rules.session import Player


@pytest.fixture
def white_player() -> Player:
    return Player("player_white", Color.WHITE)


@pytest.fixture
def black_player() -> Player:
    return Player("player_black", Color.BLACK)


@pytest.fixture
def board_factory_for() -> Callable[..., Callable[[], Board]]:
    """Call the inner function with a piece placement (and side to move) to get a board factory for a session"""

    def _factory(fen: str, side_to_move: Color = Color.WHITE) -> Callable[[], Board]:
        return lambda: Board.from_fen(fen, side_to_move=side_to_move)

    return _factory
