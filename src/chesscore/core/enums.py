"""Enumerations shared by the board, move and rules layers."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """The two sides; the value doubles as a table index."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def back_rank(self) -> int:
        """Rank index the side's pieces start on."""
        return 0 if self == Color.WHITE else 7

    @property
    def pawn_direction(self) -> int:
        return 1 if self == Color.WHITE else -1

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Piece kinds, numbered from 1 so that 0 can mean an empty cell in tables."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveKind(IntEnum):
    """How a move relocates pieces beyond the from/to pair."""

    NORMAL = 0
    CASTLING = 1
    EN_PASSANT = 2
    PROMOTION = 3


class CastlingRights(IntFlag):
    """Castling rights still held, one bit per side and wing."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def of(cls, color: Color, kingside: bool) -> CastlingRights:
        """The single right for *color* on the given wing."""
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH

    @property
    def index(self) -> int:
        """Slot of a single right in per-right tables (WK, WQ, BK, BQ)."""
        return int(self).bit_length() - 1

    @property
    def color(self) -> Color:
        return Color.WHITE if self & CastlingRights.WHITE_BOTH else Color.BLACK

    @property
    def is_kingside(self) -> bool:
        kingside = CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_KINGSIDE
        return bool(self & kingside)


# Single rights in table order.
SINGLE_RIGHTS: tuple[CastlingRights, ...] = (
    CastlingRights.WHITE_KINGSIDE,
    CastlingRights.WHITE_QUEENSIDE,
    CastlingRights.BLACK_KINGSIDE,
    CastlingRights.BLACK_QUEENSIDE,
)


class GameStatus(IntEnum):
    """Outcome classification returned by the rules layer."""

    IN_PROGRESS = 0
    CHECKMATE = 1
    STALEMATE = 2
    INSUFFICIENT_MATERIAL = 3
    FIFTY_MOVE_RULE = 4
    THREEFOLD_REPETITION = 5

    @property
    def is_draw(self) -> bool:
        return self not in (GameStatus.IN_PROGRESS, GameStatus.CHECKMATE)
