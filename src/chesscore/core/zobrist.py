"""Zobrist keys for position hashing.

Keys come from a fixed splitmix64 stream, so hashes are identical across
runs and processes.  Layout of the stream: 768 piece/square keys (colour,
piece type, square), one side-to-move key, 16 castling-mask keys and 8
en-passant file keys.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chesscore.core.enums import CastlingRights, Color
from chesscore.core.types import Square, file_of

if TYPE_CHECKING:
    from chesscore.core.board import Board
    from chesscore.core.piece import Piece

_MASK_64: Final = (1 << 64) - 1
_GOLDEN_GAMMA: Final = 0x9E3779B97F4A7C15
_SEED: Final = 0x5EED_C4E5_5C0D_E001

_PIECE_SLOTS: Final = 2 * 6 * 64
_SIDE_SLOT: Final = _PIECE_SLOTS
_CASTLING_BASE: Final = _SIDE_SLOT + 1
_EN_PASSANT_BASE: Final = _CASTLING_BASE + 16
_KEY_COUNT: Final = _EN_PASSANT_BASE + 8


def _splitmix64_stream(seed: int, count: int) -> tuple[int, ...]:
    keys: list[int] = []
    state = seed
    for _ in range(count):
        state = (state + _GOLDEN_GAMMA) & _MASK_64
        z = state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
        keys.append(z ^ (z >> 31))
    return tuple(keys)


_KEYS: Final = _splitmix64_stream(_SEED, _KEY_COUNT)


def piece_key(piece: Piece, sq: Square) -> int:
    slot = (int(piece.color) * 6 + int(piece.piece_type) - 1) * 64 + sq
    return _KEYS[slot]


def side_to_move_key() -> int:
    """Folded in whenever Black is to move."""
    return _KEYS[_SIDE_SLOT]


def castling_key(castling: CastlingRights) -> int:
    return _KEYS[_CASTLING_BASE + (int(castling) & 0xF)]


def en_passant_key(ep_square: Square) -> int:
    """Only the file of the target square is hashed."""
    return _KEYS[_EN_PASSANT_BASE + file_of(ep_square)]


def full_hash(
    board: Board,
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """Hash a position from scratch; incremental updates must agree with it."""
    key = castling_key(castling)
    if side_to_move == Color.BLACK:
        key ^= side_to_move_key()
    if en_passant is not None:
        key ^= en_passant_key(en_passant)
    for color in Color:
        for sq in board.all_pieces(color):
            piece = board[sq]
            assert piece is not None
            key ^= piece_key(piece, sq)
    return key
