"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chesscore.core.notation import STARTING_FEN, position_from_fen
from chesscore.core.position import Position
from chesscore.game.state import GameState


@pytest.fixture
def start_position() -> Position:
    """Fresh standard starting position."""
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def game() -> GameState:
    """Game set up at the standard starting position."""
    state = GameState()
    state.setup()
    return state
