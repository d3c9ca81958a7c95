"""Standard Algebraic Notation: writing moves for people and reading them back."""

from __future__ import annotations

import re
from collections.abc import Sequence

from chesscore.core.enums import PieceType
from chesscore.core.errors import IllegalMoveError, MoveParseError, MoveParseErrorReason
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import (
    FILE_NAMES,
    Square,
    file_of,
    parse_square,
    rank_of,
    square_name,
)

_SAN_PIECE: dict[str, PieceType] = {
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?"
    r"(?P<file>[a-h])?(?P<rank>[1-8])?"
    r"(?P<capture>x)?"
    r"(?P<to>[a-h][1-8])"
    r"(?:=?(?P<promotion>[NBRQ]))?$"
)
_KINGSIDE_TOKENS = frozenset({"O-O", "0-0"})
_QUEENSIDE_TOKENS = frozenset({"O-O-O", "0-0-0"})


def move_to_san(
    position: Position, move: Move, legal_moves: Sequence[Move] | None = None
) -> str:
    """Convert a legal *move* to SAN given the *position* before the move.

    No check or mate suffix is added; see :func:`check_suffix`.
    """
    if move.is_castling:
        return "O-O" if move.is_kingside_castle else "O-O-O"

    ptype = move.piece.piece_type
    san = ""
    if ptype == PieceType.PAWN:
        if move.is_capture:
            san += FILE_NAMES[file_of(move.from_sq)]
    else:
        san += move.piece.letter

        if legal_moves is None:
            legal_moves = MoveGenerator(position).generate_legal_moves()
        rivals = [
            m.from_sq
            for m in legal_moves
            if m.piece == move.piece
            and m.to_sq == move.to_sq
            and m.from_sq != move.from_sq
            and not m.is_castling
        ]
        san += _disambiguator(move.from_sq, rivals)

    if move.is_capture:
        san += "x"

    san += square_name(move.to_sq)

    if move.promotion is not None:
        san += "=" + Piece(move.piece.color, move.promotion).letter

    return san


def check_suffix(position: Position, move: Move) -> str:
    """``"#"`` if *move* mates, ``"+"`` if it checks, else ``""``."""
    after = position.copy()
    after.make_move(move)
    gen = MoveGenerator(after)
    if not gen.is_in_check(after.side_to_move):
        return ""
    return "#" if not gen.generate_legal_moves() else "+"


def parse_san(
    position: Position, san: str, legal_moves: Sequence[Move] | None = None
) -> Move:
    """Parse a SAN string into the matching legal :class:`Move`.

    Raises :class:`MoveParseError` for malformed or ambiguous text and
    :class:`IllegalMoveError` when no legal move fits.
    """
    if legal_moves is None:
        legal_moves = MoveGenerator(position).generate_legal_moves()

    clean = san.strip().rstrip("+#!?")

    # Castling
    if clean in _KINGSIDE_TOKENS or clean in _QUEENSIDE_TOKENS:
        kingside = clean in _KINGSIDE_TOKENS
        for m in legal_moves:
            if m.is_castling and m.is_kingside_castle == kingside:
                return m
        raise IllegalMoveError(san, "castling not available")

    match = _SAN_RE.match(clean)
    if match is None:
        raise MoveParseError(MoveParseErrorReason.SYNTAX, san)

    piece_letter = match.group("piece")
    piece_type = _SAN_PIECE[piece_letter] if piece_letter else PieceType.PAWN
    promotion_letter = match.group("promotion")
    promotion = _SAN_PIECE[promotion_letter] if promotion_letter else None
    if promotion is not None and piece_type != PieceType.PAWN:
        raise MoveParseError(MoveParseErrorReason.SYNTAX, san)

    to_sq = parse_square(match.group("to"))
    from_file = FILE_NAMES.index(match.group("file")) if match.group("file") else None
    from_rank = int(match.group("rank")) - 1 if match.group("rank") else None

    def fits(m: Move) -> bool:
        return (
            not m.is_castling
            and m.piece.piece_type == piece_type
            and m.to_sq == to_sq
            and (promotion is None or m.promotion == promotion)
            and (from_file is None or file_of(m.from_sq) == from_file)
            and (from_rank is None or rank_of(m.from_sq) == from_rank)
        )

    candidates = [m for m in legal_moves if fits(m)]
    if not candidates:
        raise IllegalMoveError(san)
    if len(candidates) > 1:
        raise MoveParseError(MoveParseErrorReason.AMBIGUOUS, san)
    return candidates[0]


def _disambiguator(from_sq: Square, rivals: Sequence[Square]) -> str:
    """Shortest origin hint that tells *from_sq* apart from *rivals*."""
    if not rivals:
        return ""
    file_text, rank_text = square_name(from_sq)
    if all(file_of(sq) != file_of(from_sq) for sq in rivals):
        return file_text
    if all(rank_of(sq) != rank_of(from_sq) for sq in rivals):
        return rank_text
    return file_text + rank_text
