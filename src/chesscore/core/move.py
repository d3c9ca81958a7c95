"""A single ply, with everything needed to play it on a board."""

from __future__ import annotations

from dataclasses import dataclass

from chesscore.core.enums import MoveKind, PieceType
from chesscore.core.piece import Piece
from chesscore.core.types import Square, file_of, make_square, rank_of, square_name

# Lower-case suffix letters of UCI promotions.
PROMOTION_TYPES: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}
PROMOTION_CHARS: dict[PieceType, str] = {
    ptype: char for char, ptype in PROMOTION_TYPES.items()
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object describing a single ply.

    Equality compares every field, so a queen promotion and a knight
    promotion between the same squares are different moves.  For castling
    ``from_sq``/``to_sq`` are the king's squares and the rook's endpoints are
    carried in ``rook_from``/``rook_to``.
    """

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured: Piece | None = None
    kind: MoveKind = MoveKind.NORMAL
    promotion: PieceType | None = None
    rook_from: Square | None = None
    rook_to: Square | None = None

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castling(self) -> bool:
        return self.kind == MoveKind.CASTLING

    @property
    def is_kingside_castle(self) -> bool:
        return (
            self.kind == MoveKind.CASTLING
            and self.rook_from is not None
            and file_of(self.rook_from) > file_of(self.from_sq)
        )

    @property
    def is_double_pawn_push(self) -> bool:
        return (
            self.piece.piece_type == PieceType.PAWN
            and abs(rank_of(self.to_sq) - rank_of(self.from_sq)) == 2
        )

    @property
    def capture_square(self) -> Square | None:
        """Square the captured piece is removed from."""
        if self.kind == MoveKind.EN_PASSANT:
            return make_square(file_of(self.to_sq), rank_of(self.from_sq))
        if self.captured is None:
            return None
        return self.to_sq

    @property
    def touched_squares(self) -> tuple[Square, ...]:
        """Every square whose content changes when the move is played."""
        squares = [self.from_sq, self.to_sq]
        if self.kind == MoveKind.EN_PASSANT:
            assert self.capture_square is not None
            squares.append(self.capture_square)
        elif self.kind == MoveKind.CASTLING:
            assert self.rook_from is not None and self.rook_to is not None
            squares.extend((self.rook_from, self.rook_to))
        return tuple(dict.fromkeys(squares))

    # ── Text ─────────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return self.uci

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation (king-destination form for castling)."""
        suffix = "" if self.promotion is None else PROMOTION_CHARS[self.promotion]
        return square_name(self.from_sq) + square_name(self.to_sq) + suffix
