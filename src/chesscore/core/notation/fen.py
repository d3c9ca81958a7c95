"""FEN parsing and serialization (standard chess and Chess960)."""

from __future__ import annotations

from itertools import groupby

from chesscore.core.board import Board
from chesscore.core.enums import SINGLE_RIGHTS, CastlingRights, Color, PieceType
from chesscore.core.errors import FenError, FenErrorReason
from chesscore.core.move_generator import square_attacked
from chesscore.core.piece import Piece
from chesscore.core.position import STANDARD_CASTLING_FILES, Position
from chesscore.core.types import (
    FILE_NAMES,
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
STANDARD_CHESS960_INDEX = 518

_MAX_PAWNS = 8
_MAX_PIECES = 16

_SIDES = {"w": Color.WHITE, "b": Color.BLACK}
# Rank an en-passant target sits on, keyed by the side about to capture.
_EP_RANK = {Color.WHITE: 5, Color.BLACK: 2}

# Knight placements over the five squares left after bishops and queen.
_KNIGHT_PATTERNS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (0, 2),
    (0, 3),
    (0, 4),
    (1, 2),
    (1, 3),
    (1, 4),
    (2, 3),
    (2, 4),
    (3, 4),
)


def position_from_fen(fen: str, *, chess960: bool | None = None) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Castling letters ``KQkq`` pick the outermost rook on that wing; Shredder
    style file letters (``HAha``) name the rook file directly.  With
    ``chess960=None`` the variant is inferred from the castling setup.

    Raises :class:`FenError` on the first problem found.
    """
    fields = fen.split()
    if len(fields) != 6:
        raise FenError(
            FenErrorReason.FIELD_COUNT, f"expected 6 fields, got {len(fields)}"
        )
    placement, side_field, castling_field, ep_field, half_field, full_field = fields

    board = _parse_placement(placement)
    _require_one_king_each(board)

    side = _SIDES.get(side_field)
    if side is None:
        raise FenError(FenErrorReason.SIDE, f"expected 'w' or 'b', got {side_field!r}")

    castling, castling_files, uses_file_letters = _parse_castling(board, castling_field)
    ep = _parse_en_passant(ep_field, side)

    try:
        halfmove, fullmove = int(half_field), int(full_field)
    except ValueError:
        raise FenError(
            FenErrorReason.CLOCK, f"non-numeric clocks {half_field!r} {full_field!r}"
        ) from None
    if halfmove < 0:
        raise FenError(FenErrorReason.CLOCK, f"halfmove clock {halfmove} < 0")
    if fullmove < 1:
        raise FenError(FenErrorReason.CLOCK, f"fullmove number {fullmove} < 1")

    if chess960 is None:
        chess960 = uses_file_letters or _needs_chess960(board, castling, castling_files)

    position = Position(
        board, side, castling, ep, halfmove, fullmove, castling_files, chess960
    )
    validate_position(position)
    return position


def validate_position(position: Position) -> None:
    """Sanity checks on material and checks; raises :class:`FenError`.

    Exactly one king per side, no pawns on the back ranks, at most eight
    pawns and sixteen pieces per side, and the side not to move must not
    be in check.
    """
    board = position.board
    _require_one_king_each(board)

    for sq in (*range(0, 8), *range(56, 64)):
        piece = board[sq]
        if piece is not None and piece.piece_type == PieceType.PAWN:
            raise FenError(FenErrorReason.PAWN_RANK, f"pawn on {square_name(sq)}")

    for color in Color:
        pawns = board.count(color, PieceType.PAWN)
        if pawns > _MAX_PAWNS:
            raise FenError(FenErrorReason.PIECE_COUNT, f"{color} has {pawns} pawns")
        total = board.all_pieces_bitboard(color).bit_count()
        if total > _MAX_PIECES:
            raise FenError(FenErrorReason.PIECE_COUNT, f"{color} has {total} pieces")

    waiting = position.side_to_move.opposite
    if square_attacked(board, board.king_square(waiting), position.side_to_move):
        raise FenError(
            FenErrorReason.OPPONENT_IN_CHECK,
            f"{waiting} is in check but it is {position.side_to_move} to move",
        )


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN.

    Castling rights come out in a normalised order (white kingside, white
    queenside, black kingside, black queenside), using ``KQkq`` whenever the
    letter would resolve to the recorded rook and the file letter otherwise.
    """
    castling = "".join(
        _castling_char(pos, right) for right in SINGLE_RIGHTS if pos.castling & right
    )
    ep = "-" if pos.en_passant is None else square_name(pos.en_passant)
    side = "w" if pos.side_to_move == Color.WHITE else "b"
    return " ".join(
        (
            _placement_text(pos.board),
            side,
            castling or "-",
            ep,
            str(pos.halfmove_clock),
            str(pos.fullmove_number),
        )
    )


def chess960_start_fen(index: int) -> str:
    """Start position number *index* (0-959) in Scharnagl numbering.

    Index 518 is the standard chess set-up.
    """
    if not 0 <= index < 960:
        raise ValueError(f"Chess960 index must be in 0..959, got {index}")

    back_rank: list[PieceType | None] = [None] * 8
    n = index
    back_rank[2 * (n % 4) + 1] = PieceType.BISHOP  # light square
    n //= 4
    back_rank[2 * (n % 4)] = PieceType.BISHOP  # dark square
    n //= 4
    _place_on_free(back_rank, n % 6, PieceType.QUEEN)
    n //= 6
    first, second = _KNIGHT_PATTERNS[n]
    free = [f for f in range(8) if back_rank[f] is None]
    back_rank[free[first]] = PieceType.KNIGHT
    back_rank[free[second]] = PieceType.KNIGHT
    for ptype in (PieceType.ROOK, PieceType.KING, PieceType.ROOK):
        _place_on_free(back_rank, 0, ptype)

    pieces = [ptype for ptype in back_rank if ptype is not None]
    queen_rook = pieces.index(PieceType.ROOK)
    king_rook = 7 - pieces[::-1].index(PieceType.ROOK)
    position = Position(
        Board.initial(pieces),
        castling_files=(king_rook, queen_rook, king_rook, queen_rook),
        chess960=index != STANDARD_CHESS960_INDEX,
    )
    return position_to_fen(position)


# -- Helpers ----------------------------------------------------------------


def _parse_placement(placement: str) -> Board:
    rows = placement.split("/")
    if len(rows) != 8:
        raise FenError(FenErrorReason.RANK_COUNT, f"expected 8 ranks, got {len(rows)}")
    board = Board()
    for rank, text in zip(range(7, -1, -1), rows):
        for file, piece in enumerate(_parse_rank(text, rank)):
            if piece is not None:
                board[make_square(file, rank)] = piece
    return board


def _parse_rank(text: str, rank: int) -> list[Piece | None]:
    """Expand one FEN rank into its eight cells, a to h."""
    cells: list[Piece | None] = []
    for ch in text:
        if ch in "12345678":
            cells.extend([None] * int(ch))
            continue
        try:
            cells.append(Piece.from_char(ch))
        except ValueError:
            raise FenError(
                FenErrorReason.PIECE_CHAR, f"bad character {ch!r} in rank {rank + 1}"
            ) from None
    if len(cells) != 8:
        raise FenError(
            FenErrorReason.RANK_WIDTH,
            f"rank {rank + 1} spans {len(cells)} files, expected 8",
        )
    return cells


def _placement_text(board: Board) -> str:
    rows = []
    for rank in range(7, -1, -1):
        row = ""
        cells = (board.piece_at(file, rank) for file in range(8))
        for occupied, run in groupby(cells, key=lambda piece: piece is not None):
            run_cells = list(run)
            row += "".join(map(str, run_cells)) if occupied else str(len(run_cells))
        rows.append(row)
    return "/".join(rows)


def _require_one_king_each(board: Board) -> None:
    for color in Color:
        kings = board.king_count(color)
        if kings != 1:
            raise FenError(
                FenErrorReason.KING_COUNT, f"{color} has {kings} kings, expected 1"
            )


def _parse_en_passant(field: str, side: Color) -> Square | None:
    if field == "-":
        return None
    try:
        ep = parse_square(field)
    except ValueError:
        raise FenError(FenErrorReason.EN_PASSANT, f"bad square {field!r}") from None
    if rank_of(ep) != _EP_RANK[side]:
        raise FenError(
            FenErrorReason.EN_PASSANT,
            f"{field!r} is not a target square for {side} to move",
        )
    return ep


def _outermost_rook_file(board: Board, color: Color, kingside: bool) -> int:
    """File ``K``/``Q`` resolves to: the outermost rook on that wing."""
    rank = color.back_rank
    king_file = file_of(board.king_square(color))
    rook = Piece(color, PieceType.ROOK)
    files = range(7, king_file, -1) if kingside else range(0, king_file)
    for file in files:
        if board.piece_at(file, rank) == rook:
            return file
    return 7 if kingside else 0


def _parse_castling(
    board: Board, castling_part: str
) -> tuple[CastlingRights, tuple[int, int, int, int], bool]:
    castling = CastlingRights.NONE
    files = list(STANDARD_CASTLING_FILES)
    uses_file_letters = False
    if castling_part == "-":
        return castling, STANDARD_CASTLING_FILES, uses_file_letters

    for ch in castling_part:
        color = Color.WHITE if ch.isupper() else Color.BLACK
        king_sq = board.king_square(color)
        if rank_of(king_sq) != color.back_rank:
            raise FenError(
                FenErrorReason.CASTLING,
                f"{ch!r} given but the {color} king is off its back rank",
            )
        king_file = file_of(king_sq)
        lower = ch.lower()
        if lower in ("k", "q"):
            kingside = lower == "k"
            rook_file = _outermost_rook_file(board, color, kingside)
        elif lower in FILE_NAMES:
            uses_file_letters = True
            rook_file = FILE_NAMES.index(lower)
            if rook_file == king_file:
                raise FenError(
                    FenErrorReason.CASTLING, f"{ch!r} names the king's own file"
                )
            kingside = rook_file > king_file
        else:
            raise FenError(
                FenErrorReason.CASTLING, f"bad character {ch!r} in {castling_part!r}"
            )

        right = CastlingRights.of(color, kingside)
        if castling & right:
            raise FenError(
                FenErrorReason.CASTLING, f"duplicate right in {castling_part!r}"
            )
        castling |= right
        files[right.index] = rook_file

    return castling, (files[0], files[1], files[2], files[3]), uses_file_letters


def _needs_chess960(
    board: Board, castling: CastlingRights, castling_files: tuple[int, int, int, int]
) -> bool:
    for right in SINGLE_RIGHTS:
        if not castling & right:
            continue
        if file_of(board.king_square(right.color)) != 4:
            return True
        if castling_files[right.index] != STANDARD_CASTLING_FILES[right.index]:
            return True
    return False


def _castling_char(pos: Position, right: CastlingRights) -> str:
    color = right.color
    rook_file = pos.castling_files[right.index]
    if pos.board.king_count(color) == 1 and rook_file == _outermost_rook_file(
        pos.board, color, right.is_kingside
    ):
        char = "k" if right.is_kingside else "q"
    else:
        char = FILE_NAMES[rook_file]
    return char.upper() if color == Color.WHITE else char


def _place_on_free(
    back_rank: list[PieceType | None], nth: int, ptype: PieceType
) -> None:
    free = [f for f in range(8) if back_rank[f] is None]
    back_rank[free[nth]] = ptype
