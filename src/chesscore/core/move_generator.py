"""Move generation and attack detection.

Pseudo-legal moves are produced per piece from precomputed step tables and
sliding rays; a candidate is legal when playing it on a scratch copy of the
board leaves the mover's king unattacked.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from chesscore.core.board import Board, iter_bits
from chesscore.core.enums import (
    SINGLE_RIGHTS,
    CastlingRights,
    Color,
    MoveKind,
    PieceType,
)
from chesscore.core.move import Move
from chesscore.core.piece import Piece
from chesscore.core.types import Square, file_of, is_on_board, make_square, rank_of

if TYPE_CHECKING:
    from chesscore.core.position import Position

Direction = tuple[int, int]

KNIGHT_JUMPS: tuple[Direction, ...] = tuple(
    (df, dr) for df in (-2, -1, 1, 2) for dr in (-2, -1, 1, 2) if abs(df) != abs(dr)
)
KING_STEPS: tuple[Direction, ...] = tuple(
    (df, dr) for df in (-1, 0, 1) for dr in (-1, 0, 1) if df or dr
)
DIAGONALS: tuple[Direction, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ORTHOGONALS: tuple[Direction, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

# Queen first: the order promotions are listed in.
PROMOTION_PIECES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# (king file, rook file) after castling.
_KINGSIDE_TARGETS = (6, 5)
_QUEENSIDE_TARGETS = (2, 3)


# -- Lookup tables ----------------------------------------------------------


def _walk(sq: Square, direction: Direction, limit: int = 7) -> tuple[Square, ...]:
    """Squares reached from *sq* stepping along *direction*, nearest first."""
    df, dr = direction
    file, rank = file_of(sq), rank_of(sq)
    path: list[Square] = []
    for _ in range(limit):
        file += df
        rank += dr
        if not is_on_board(file, rank):
            break
        path.append(make_square(file, rank))
    return tuple(path)


def _step_table(directions: Iterable[Direction]) -> tuple[tuple[Square, ...], ...]:
    directions = tuple(directions)
    return tuple(
        tuple(target for d in directions for target in _walk(sq, d, limit=1))
        for sq in range(64)
    )


def _ray_table(
    directions: Iterable[Direction],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    directions = tuple(directions)
    return tuple(
        tuple(ray for d in directions if (ray := _walk(sq, d))) for sq in range(64)
    )


def _mask(squares: Iterable[Square]) -> int:
    bits = 0
    for sq in squares:
        bits |= 1 << sq
    return bits


_KNIGHT_TARGETS = _step_table(KNIGHT_JUMPS)
_KING_TARGETS = _step_table(KING_STEPS)
# [color][sq] -> squares a pawn of that colour on sq captures towards.
_PAWN_CAPTURES = (
    _step_table(((-1, 1), (1, 1))),
    _step_table(((-1, -1), (1, -1))),
)

_KNIGHT_MASKS = tuple(_mask(t) for t in _KNIGHT_TARGETS)
_KING_MASKS = tuple(_mask(t) for t in _KING_TARGETS)
# [color][sq] -> where a pawn of that colour must stand to attack sq.  This
# is exactly where an opposite-coloured pawn on sq would capture.
_PAWN_ATTACKERS = (
    tuple(_mask(t) for t in _PAWN_CAPTURES[Color.BLACK]),
    tuple(_mask(t) for t in _PAWN_CAPTURES[Color.WHITE]),
)

_DIAGONAL_RAYS = _ray_table(DIAGONALS)
_ORTHOGONAL_RAYS = _ray_table(ORTHOGONALS)
_SLIDER_RAYS = {
    PieceType.BISHOP: _DIAGONAL_RAYS,
    PieceType.ROOK: _ORTHOGONAL_RAYS,
    PieceType.QUEEN: tuple(d + o for d, o in zip(_DIAGONAL_RAYS, _ORTHOGONAL_RAYS)),
}


# -- Attack primitives ------------------------------------------------------


def _slider_hits(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    kinds: tuple[PieceType, PieceType],
) -> bool:
    for ray in rays:
        for sq in ray:
            piece = board[sq]
            if piece is not None:
                if piece.color == by_color and piece.piece_type in kinds:
                    return True
                break
    return False


def square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Whether any piece of *by_color* attacks *sq* on *board*."""
    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_MASKS[sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.PAWN) & _PAWN_ATTACKERS[by_color][sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.KING) & _KING_MASKS[sq]:
        return True

    queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
    if (queens or board.pieces_bitboard(by_color, PieceType.BISHOP)) and _slider_hits(
        board, _DIAGONAL_RAYS[sq], by_color, (PieceType.BISHOP, PieceType.QUEEN)
    ):
        return True
    return bool(
        queens or board.pieces_bitboard(by_color, PieceType.ROOK)
    ) and _slider_hits(
        board, _ORTHOGONAL_RAYS[sq], by_color, (PieceType.ROOK, PieceType.QUEEN)
    )


def piece_attacks(board: Board, sq: Square, piece: Piece) -> Iterator[Square]:
    """Squares attacked by *piece* standing on *sq*.

    A sliding ray ends on the first occupied square, included whatever its
    colour: defended pieces count as attacked.
    """
    if not piece.is_slider:
        if piece.piece_type == PieceType.PAWN:
            yield from _PAWN_CAPTURES[piece.color][sq]
        elif piece.piece_type == PieceType.KNIGHT:
            yield from _KNIGHT_TARGETS[sq]
        else:
            yield from _KING_TARGETS[sq]
        return
    for ray in _SLIDER_RAYS[piece.piece_type][sq]:
        for target in ray:
            yield target
            if board[target] is not None:
                break


def _capturable(target: Piece, mover: Color) -> bool:
    """Enemy pieces may be taken, kings never."""
    return target.color != mover and target.piece_type != PieceType.KING


class MoveGenerator:
    """Move lists and attack queries for one :class:`Position`.

    The generator only reads the position; legality tests run on board
    copies.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Move lists -----------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """Every legal move for the side to move, in a stable order."""
        mover = self._pos.side_to_move
        return [
            m for m in self.generate_pseudo_legal_moves() if self._is_safe(m, mover)
        ]

    def legal_moves_from(self, sq: Square) -> list[Move]:
        return [m for m in self.generate_legal_moves() if m.from_sq == sq]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """Moves that obey piece movement but may leave the king in check."""
        color = self._pos.side_to_move
        board = self._board
        moves: list[Move] = []

        for sq in iter_bits(board.pieces_bitboard(color, PieceType.PAWN)):
            self._pawn_moves(sq, color, moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.KNIGHT)):
            self._step_moves(sq, Piece(color, PieceType.KNIGHT), _KNIGHT_TARGETS, moves)
        for ptype in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN):
            for sq in iter_bits(board.pieces_bitboard(color, ptype)):
                self._slide_moves(sq, Piece(color, ptype), moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.KING)):
            self._step_moves(sq, Piece(color, PieceType.KING), _KING_TARGETS, moves)
            self._castling_moves(sq, color, moves)
        return moves

    # -- Attack queries -------------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        return square_attacked(
            self._board, self._board.king_square(color), color.opposite
        )

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return square_attacked(self._board, sq, by_color)

    def attacked_squares(self, by_color: Color) -> set[Square]:
        """Every square some piece of *by_color* attacks."""
        attacked: set[Square] = set()
        for sq, piece in self._pieces_of(by_color):
            attacked.update(piece_attacks(self._board, sq, piece))
        return attacked

    def attackers_of(self, sq: Square, by_color: Color) -> list[Square]:
        """Squares of the *by_color* pieces attacking *sq*, ascending."""
        return [
            from_sq
            for from_sq, piece in self._pieces_of(by_color)
            if sq in piece_attacks(self._board, from_sq, piece)
        ]

    # -- Internals ------------------------------------------------------------

    def _pieces_of(self, color: Color) -> Iterator[tuple[Square, Piece]]:
        board = self._board
        for sq in board.all_pieces(color):
            piece = board[sq]
            assert piece is not None
            yield sq, piece

    def _is_safe(self, move: Move, mover: Color) -> bool:
        scratch = self._board.copy()
        scratch.apply_move(move)
        return not square_attacked(scratch, scratch.king_square(mover), mover.opposite)

    def _pawn_moves(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        pawn = Piece(color, PieceType.PAWN)
        forward = 8 * color.pawn_direction
        home_rank = color.back_rank + color.pawn_direction
        promoting = rank_of(sq) == (7 - color.back_rank) - color.pawn_direction

        ahead = sq + forward
        if board.is_empty(ahead):
            self._push_pawn(Move(sq, ahead, pawn), promoting, moves)
            if rank_of(sq) == home_rank and board.is_empty(ahead + forward):
                moves.append(Move(sq, ahead + forward, pawn))

        for target_sq in _PAWN_CAPTURES[color][sq]:
            target = board[target_sq]
            if target is None:
                if target_sq == self._pos.en_passant:
                    victim = board[make_square(file_of(target_sq), rank_of(sq))]
                    if victim == Piece(color.opposite, PieceType.PAWN):
                        moves.append(
                            Move(sq, target_sq, pawn, victim, MoveKind.EN_PASSANT)
                        )
            elif _capturable(target, color):
                self._push_pawn(Move(sq, target_sq, pawn, target), promoting, moves)

    @staticmethod
    def _push_pawn(move: Move, promoting: bool, moves: list[Move]) -> None:
        if not promoting:
            moves.append(move)
            return
        moves.extend(
            Move(
                move.from_sq,
                move.to_sq,
                move.piece,
                move.captured,
                MoveKind.PROMOTION,
                ptype,
            )
            for ptype in PROMOTION_PIECES
        )

    def _step_moves(
        self,
        sq: Square,
        piece: Piece,
        table: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for target_sq in table[sq]:
            target = board[target_sq]
            if target is None or _capturable(target, piece.color):
                moves.append(Move(sq, target_sq, piece, target))

    def _slide_moves(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        for ray in _SLIDER_RAYS[piece.piece_type][sq]:
            for target_sq in ray:
                target = board[target_sq]
                if target is not None:
                    if _capturable(target, piece.color):
                        moves.append(Move(sq, target_sq, piece, target))
                    break
                moves.append(Move(sq, target_sq, piece))

    def _castling_moves(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        pos = self._pos
        rank = color.back_rank
        if not pos.castling & CastlingRights.both(color) or rank_of(king_sq) != rank:
            return
        if self.is_in_check(color):
            return

        board = self._board
        king_file = file_of(king_sq)
        own_rook = Piece(color, PieceType.ROOK)
        for right in SINGLE_RIGHTS:
            if right.color != color or not pos.castling & right:
                continue
            rook_sq = pos.castling_rook_square(right)
            rook_file = file_of(rook_sq)
            if board[rook_sq] != own_rook:
                continue
            if (rook_file > king_file) != right.is_kingside:
                continue

            king_to, rook_to = (
                _KINGSIDE_TARGETS if right.is_kingside else _QUEENSIDE_TARGETS
            )
            # Both pieces' paths must be clear of everything but the two of them.
            span = range(
                min(king_file, rook_file, king_to, rook_to),
                max(king_file, rook_file, king_to, rook_to) + 1,
            )
            if any(
                f not in (king_file, rook_file) and board.piece_at(f, rank) is not None
                for f in span
            ):
                continue
            lo, hi = sorted((king_file, king_to))
            if any(
                square_attacked(board, make_square(f, rank), color.opposite)
                for f in range(lo, hi + 1)
            ):
                continue

            moves.append(
                Move(
                    king_sq,
                    make_square(king_to, rank),
                    Piece(color, PieceType.KING),
                    kind=MoveKind.CASTLING,
                    rook_from=rook_sq,
                    rook_to=make_square(rook_to, rank),
                )
            )
