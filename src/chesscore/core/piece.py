"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chesscore.core.enums import Color, PieceType

# Indexed by ``PieceType - 1``.
_LETTERS = "pnbrqk"


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured piece; FEN letters are upper case for White."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        letter = _LETTERS[self.piece_type - 1]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """``'N'`` -> white knight, ``'q'`` -> black queen."""
        index = _LETTERS.find(char.lower()) if len(char) == 1 else -1
        if index < 0:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, PieceType(index + 1))

    @property
    def letter(self) -> str:
        """Colour-independent upper-case letter, as used in SAN."""
        return _LETTERS[self.piece_type - 1].upper()

    @property
    def is_slider(self) -> bool:
        return self.piece_type in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)
