"""Error taxonomy for bad FEN text, malformed moves and illegal moves.

Every error derives from :class:`ChessError`, itself a :class:`ValueError`,
so callers can catch a whole family at once.
"""

from __future__ import annotations

from enum import StrEnum


class FenErrorReason(StrEnum):
    """Why a FEN string was rejected."""

    FIELD_COUNT = "field-count"
    RANK_COUNT = "rank-count"
    RANK_WIDTH = "rank-width"
    PIECE_CHAR = "piece-char"
    KING_COUNT = "king-count"
    SIDE = "side-to-move"
    CASTLING = "castling"
    EN_PASSANT = "en-passant"
    CLOCK = "clock"
    PAWN_RANK = "pawn-rank"
    PIECE_COUNT = "piece-count"
    OPPONENT_IN_CHECK = "opponent-in-check"


class MoveParseErrorReason(StrEnum):
    """Why a UCI / SAN move string could not be read."""

    LENGTH = "length"
    SQUARE = "square"
    PROMOTION = "promotion"
    SYNTAX = "syntax"
    AMBIGUOUS = "ambiguous"


class ChessError(ValueError):
    """Base class for recoverable input errors."""


class FenError(ChessError):
    """Malformed or inconsistent FEN."""

    def __init__(self, reason: FenErrorReason, message: str) -> None:
        super().__init__(f"Invalid FEN {reason}: {message}")
        self.reason = reason


class MoveParseError(ChessError):
    """Move text that is not well-formed notation."""

    def __init__(self, reason: MoveParseErrorReason, text: str) -> None:
        super().__init__(f"Cannot parse move {text!r} ({reason})")
        self.reason = reason
        self.text = text


class IllegalMoveError(ChessError):
    """Well-formed move that is not legal in the current position."""

    def __init__(self, text: str, detail: str = "") -> None:
        message = f"Illegal move: {text}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.text = text
