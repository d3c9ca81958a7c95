"""Rules of chess: board model, legal moves, notation and end-of-game checks.

Example::

    from chesscore.core import Rules, parse_san, position_from_fen, STARTING_FEN

    position = position_from_fen(STARTING_FEN)
    for san in ("f3", "e5", "g4", "Qh4"):
        Rules.apply_move(position, parse_san(position, san))
    assert Rules.outcome(position).result_token == "0-1"
"""

from chesscore.core.board import Board
from chesscore.core.enums import (
    CastlingRights,
    Color,
    GameStatus,
    MoveKind,
    PieceType,
)
from chesscore.core.errors import (
    ChessError,
    FenError,
    FenErrorReason,
    IllegalMoveError,
    MoveParseError,
    MoveParseErrorReason,
)
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.notation import (
    STARTING_FEN,
    UciMoveCache,
    chess960_start_fen,
    check_suffix,
    move_to_san,
    move_to_uci,
    parse_san,
    parse_uci,
    position_from_fen,
    position_to_fen,
    validate_position,
)
from chesscore.core.perft import divide, perft
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.promotion import (
    AutoQueenProvider,
    FixedPromotionProvider,
    IPromotionProvider,
    PromotionRequest,
)
from chesscore.core.rules import GameOutcome, Rules
from chesscore.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameStatus",
    "MoveKind",
    "PieceType",
    # Errors
    "ChessError",
    "FenError",
    "FenErrorReason",
    "IllegalMoveError",
    "MoveParseError",
    "MoveParseErrorReason",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "GameOutcome",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Promotion
    "AutoQueenProvider",
    "FixedPromotionProvider",
    "IPromotionProvider",
    "PromotionRequest",
    # Perft
    "divide",
    "perft",
    # Notation
    "STARTING_FEN",
    "UciMoveCache",
    "chess960_start_fen",
    "check_suffix",
    "move_to_san",
    "move_to_uci",
    "parse_san",
    "parse_uci",
    "position_from_fen",
    "position_to_fen",
    "validate_position",
]
