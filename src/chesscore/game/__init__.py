"""Game layer: configuration, undo/redo history and the playable game state.

Quick start::

    from chesscore.game import GameState

    game = GameState()
    game.setup()
    game.play_san("e4")
    game.play_uci("e7e5")
    game.undo()
"""

from chesscore.game.history import History, HistoryEntry
from chesscore.game.settings import GameSettings
from chesscore.game.state import GameEvents, GameState, MoveRecord

__all__ = [
    "GameEvents",
    "GameSettings",
    "GameState",
    "History",
    "HistoryEntry",
    "MoveRecord",
]
