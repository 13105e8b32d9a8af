"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Iterator

import pytest
from loguru import logger

from src.engine.board import Board
from src.engine.game import Game


@pytest.fixture
def starting_board() -> Board:
    return Board.starting_position()


@pytest.fixture
def new_game() -> Game:
    return Game.new_game()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect everything logged through loguru while the test runs"""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
