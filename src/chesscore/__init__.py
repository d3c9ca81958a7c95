"""chesscore: chess rules, move notation and undoable game history."""

__version__ = "0.1.0"
