"""Notation package: FEN / SAN / UCI parsing and serialization."""

from chesscore.core.notation.fen import (
    STARTING_FEN,
    chess960_start_fen,
    position_from_fen,
    position_to_fen,
    validate_position,
)
from chesscore.core.notation.san import check_suffix, move_to_san, parse_san
from chesscore.core.notation.uci import UciMoveCache, move_to_uci, parse_uci

__all__ = [
    "STARTING_FEN",
    "chess960_start_fen",
    "position_from_fen",
    "position_to_fen",
    "validate_position",
    "check_suffix",
    "move_to_san",
    "parse_san",
    "UciMoveCache",
    "move_to_uci",
    "parse_uci",
]
