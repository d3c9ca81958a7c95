"""Board: the 64 cells plus per-piece occupancy bitboards."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from chesscore.core.enums import Color, MoveKind, PieceType
from chesscore.core.piece import Piece
from chesscore.core.types import Square, is_on_board, make_square

if TYPE_CHECKING:
    from chesscore.core.move import Move

STANDARD_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Squares of the set bits, lowest first."""
    while bitboard:
        low = bitboard & -bitboard
        yield low.bit_length() - 1
        bitboard ^= low


def _slot(color: Color, piece_type: PieceType) -> int:
    return int(color) * 6 + int(piece_type) - 1


class Board:
    """Mutable 8x8 board.

    Every cell holds a :class:`Piece` or ``None``.  Writes through
    ``board[sq] = piece`` keep twelve per-piece bitboards and two per-colour
    occupancy masks in step, which is what the move generator scans.
    """

    __slots__ = ("_cells", "_bitboards", "_occupied")

    def __init__(self) -> None:
        self._cells: list[Piece | None] = [None] * 64
        self._bitboards: list[int] = [0] * 12  # indexed by _slot()
        self._occupied: list[int] = [0, 0]  # indexed by Color

    # -- Cell access ---------------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._cells[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        previous = self._cells[sq]
        if previous == piece:
            return
        bit = 1 << sq
        if previous is not None:
            self._bitboards[_slot(previous.color, previous.piece_type)] ^= bit
            self._occupied[previous.color] ^= bit
        if piece is not None:
            self._bitboards[_slot(piece.color, piece.piece_type)] |= bit
            self._occupied[piece.color] |= bit
        self._cells[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._cells[sq] is None

    def piece_at(self, file: int, rank: int) -> Piece | None:
        """Cell (file, rank); coordinates off the board read as empty."""
        if is_on_board(file, rank):
            return self._cells[make_square(file, rank)]
        return None

    def set_piece_at(self, file: int, rank: int, piece: Piece | None) -> bool:
        """Write cell (file, rank); returns False and changes nothing off-board."""
        if not is_on_board(file, rank):
            return False
        self[make_square(file, rank)] = piece
        return True

    # -- Occupancy queries ---------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._bitboards[_slot(color, piece_type)]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return list(iter_bits(self.pieces_bitboard(color, piece_type)))

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.pieces_bitboard(color, piece_type) != 0

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self.pieces_bitboard(color, piece_type).bit_count()

    def all_pieces_bitboard(self, color: Color) -> int:
        return self._occupied[color]

    def all_pieces(self, color: Color) -> list[Square]:
        return list(iter_bits(self._occupied[color]))

    def king_count(self, color: Color) -> int:
        return self.count(color, PieceType.KING)

    def king_square(self, color: Color) -> Square:
        """Square of *color*'s king (the lowest one if several are present)."""
        kings = self.pieces_bitboard(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return next(iter_bits(kings))

    # -- Mutation ------------------------------------------------------------

    def apply_move(self, move: Move) -> None:
        """Relocate the pieces of *move*; no legality checks."""
        mover = move.piece
        self[move.from_sq] = None

        if move.kind == MoveKind.CASTLING:
            assert move.rook_from is not None and move.rook_to is not None
            # Clear the rook first: in Chess960 the king may land on its square.
            self[move.rook_from] = None
            self[move.rook_to] = Piece(mover.color, PieceType.ROOK)
            self[move.to_sq] = mover
            return

        if move.kind == MoveKind.EN_PASSANT:
            victim_sq = move.capture_square
            assert victim_sq is not None
            self[victim_sq] = None

        if move.promotion is not None:
            self[move.to_sq] = Piece(mover.color, move.promotion)
        else:
            self[move.to_sq] = mover

    def copy(self) -> Board:
        clone = Board.__new__(Board)
        clone._cells = self._cells.copy()
        clone._bitboards = self._bitboards.copy()
        clone._occupied = self._occupied.copy()
        return clone

    def clear(self) -> None:
        self._cells = [None] * 64
        self._bitboards = [0] * 12
        self._occupied = [0, 0]

    # -- Construction --------------------------------------------------------

    @classmethod
    def initial(cls, back_rank: Sequence[PieceType] = STANDARD_BACK_RANK) -> Board:
        """Pawns on ranks 2 and 7, *back_rank* (a to h) mirrored on ranks 1 and 8."""
        if len(back_rank) != 8:
            raise ValueError(f"Back rank must list 8 pieces, got {len(back_rank)}")
        board = cls()
        for color in Color:
            home = color.back_rank
            pawn_rank = home + color.pawn_direction
            for file, piece_type in enumerate(back_rank):
                board[make_square(file, home)] = Piece(color, piece_type)
                board[make_square(file, pawn_rank)] = Piece(color, PieceType.PAWN)
        return board

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Board):
            return self._cells == other._cells
        return NotImplemented

    def __repr__(self) -> str:
        lines = []
        for rank in reversed(range(8)):
            cells = self._cells[rank * 8 : rank * 8 + 8]
            lines.append(f"{rank + 1} " + " ".join(str(p) if p else "." for p in cells))
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
