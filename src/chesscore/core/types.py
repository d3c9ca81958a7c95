"""Square indexing.

Squares are plain ints, rank-major from White's side:
a1=0, b1=1, ..., h1=7, a2=8, ..., h8=63.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"

SQUARE_NAMES: tuple[str, ...] = tuple(f + r for r in RANK_NAMES for f in FILE_NAMES)
_SQUARE_BY_NAME: dict[str, Square] = {name: sq for sq, name in enumerate(SQUARE_NAMES)}


def file_of(sq: Square) -> int:
    return sq & 7


def rank_of(sq: Square) -> int:
    return sq >> 3


def make_square(file: int, rank: int) -> Square:
    return (rank << 3) | file


def is_on_board(file: int, rank: int) -> bool:
    """True when (file, rank) addresses one of the 64 cells."""
    return 0 <= file < 8 and 0 <= rank < 8


def is_valid_square(sq: int) -> bool:
    return 0 <= sq < 64


def square_name(sq: Square) -> str:
    """``0`` -> ``'a1'``, ``63`` -> ``'h8'``."""
    return SQUARE_NAMES[sq]


def parse_square(name: str) -> Square:
    """``'e4'`` -> ``28``; anything else raises :class:`ValueError`."""
    try:
        return _SQUARE_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Invalid square name: {name!r}") from None


def is_light_square(sq: Square) -> bool:
    # a1 is a dark square.
    return bool((file_of(sq) ^ rank_of(sq)) & 1)


# fmt: off
(
    A1, B1, C1, D1, E1, F1, G1, H1,
    A2, B2, C2, D2, E2, F2, G2, H2,
    A3, B3, C3, D3, E3, F3, G3, H3,
    A4, B4, C4, D4, E4, F4, G4, H4,
    A5, B5, C5, D5, E5, F5, G5, H5,
    A6, B6, C6, D6, E6, F6, G6, H6,
    A7, B7, C7, D7, E7, F7, G7, H7,
    A8, B8, C8, D8, E8, F8, G8, H8,
) = range(64)
# fmt: on
