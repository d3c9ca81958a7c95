"""Position: board plus the state FEN carries, hashed incrementally."""

from __future__ import annotations

from collections import Counter

from chesscore.core import zobrist
from chesscore.core.board import Board
from chesscore.core.enums import SINGLE_RIGHTS, CastlingRights, Color, PieceType
from chesscore.core.move import Move
from chesscore.core.types import Square, make_square

# Rook file per single right, in WK, WQ, BK, BQ order.
STANDARD_CASTLING_FILES: tuple[int, int, int, int] = (7, 0, 7, 0)


class Position:
    """Everything needed to continue a game from here.

    Besides the FEN fields a position counts the hashes of the positions
    reached since the last capture or pawn move (``repetition_count`` reads
    them), and ``castling_files`` records which rook each castling right
    belongs to so Chess960 set-ups castle with the right one.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "castling_files",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "chess960",
        "_hash",
        "_ply",
        "_seen",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        castling_files: tuple[int, int, int, int] = STANDARD_CASTLING_FILES,
        chess960: bool = False,
    ) -> None:
        self.board = Board.initial() if board is None else board
        self.side_to_move = side_to_move
        self.castling = castling
        self.castling_files = castling_files
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.chess960 = chess960
        self._hash = zobrist.full_hash(
            self.board, side_to_move, castling, en_passant
        )
        self._ply = 0
        self._seen: Counter[int] = Counter((self._hash,))

    # ── Playing moves ────────────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Play *move* without checking it.

        Callers that need validation go through :meth:`Rules.apply_move`.
        """
        board = self.board
        touched = move.touched_squares
        key = self._hash
        for sq in touched:
            if (before := board[sq]) is not None:
                key ^= zobrist.piece_key(before, sq)
        board.apply_move(move)
        for sq in touched:
            if (after := board[sq]) is not None:
                key ^= zobrist.piece_key(after, sq)

        mover = move.piece
        old_castling, old_ep = self.castling, self.en_passant
        self.castling = self._castling_after(move)
        self.en_passant = (
            (move.from_sq + move.to_sq) // 2 if move.is_double_pawn_push else None
        )
        if self.castling != old_castling:
            key ^= zobrist.castling_key(old_castling)
            key ^= zobrist.castling_key(self.castling)
        if old_ep is not None:
            key ^= zobrist.en_passant_key(old_ep)
        if self.en_passant is not None:
            key ^= zobrist.en_passant_key(self.en_passant)

        if mover.piece_type == PieceType.PAWN or move.is_capture:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if mover.color == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = mover.color.opposite
        key ^= zobrist.side_to_move_key()

        self._hash = key
        self._ply += 1
        if self.halfmove_clock == 0:
            # Nothing before a capture or pawn move can occur again.
            self._seen = Counter((key,))
        else:
            self._seen[key] += 1

    def _castling_after(self, move: Move) -> CastlingRights:
        rights = self.castling
        if not rights:
            return rights
        if move.piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(move.piece.color)
        # A rook leaving its home square, or being captured there.
        for right in SINGLE_RIGHTS:
            if rights & right and self.castling_rook_square(right) in (
                move.from_sq,
                move.to_sq,
            ):
                rights &= ~right
        return rights

    # ── Castling geometry ────────────────────────────────────────────────

    def castling_rook_square(self, right: CastlingRights) -> Square:
        """Home square of the rook that *right* castles with."""
        return make_square(self.castling_files[right.index], right.color.back_rank)

    def has_castling_right(self, right: CastlingRights) -> bool:
        return bool(self.castling & right)

    # ── Hashing and repetition ───────────────────────────────────────────

    @property
    def zobrist_hash(self) -> int:
        return self._hash

    def repetition_count(self) -> int:
        """Occurrences of the current hash since the last irreversible move."""
        return self._seen[self._hash]

    @property
    def ply_count(self) -> int:
        """Half-moves made since this position (or its ancestor) was built."""
        return self._ply

    def copy(self) -> Position:
        """Deep copy; the repetition record comes along."""
        clone = Position.__new__(Position)
        clone.board = self.board.copy()
        clone.side_to_move = self.side_to_move
        clone.castling = self.castling
        clone.castling_files = self.castling_files
        clone.en_passant = self.en_passant
        clone.halfmove_clock = self.halfmove_clock
        clone.fullmove_number = self.fullmove_number
        clone.chess960 = self.chess960
        clone._hash = self._hash
        clone._ply = self._ply
        clone._seen = self._seen.copy()
        return clone

    def __repr__(self) -> str:
        return (
            f"Position(side_to_move={self.side_to_move}, "
            f"castling={self.castling!r}, ply={self.ply_count})"
        )
