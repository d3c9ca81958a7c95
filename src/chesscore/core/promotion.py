"""Promotion-choice collaborator.

When a pawn reaches the last rank without an explicit piece (a bare UCI
``e7e8`` or a user dragging a pawn), the core asks a provider which piece
to promote to.  UIs implement :class:`IPromotionProvider` with a dialog;
headless callers use :class:`AutoQueenProvider`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from chesscore.core.enums import Color, PieceType
from chesscore.core.move import PROMOTION_CHARS, PROMOTION_TYPES
from chesscore.core.types import Square


@dataclass(frozen=True, slots=True)
class PromotionRequest:
    """A pawn move onto the last rank that still needs a piece."""

    from_sq: Square
    to_sq: Square
    color: Color


class IPromotionProvider(ABC):
    """Interface for whoever picks the promotion piece."""

    @abstractmethod
    def choose_promotion(self, request: PromotionRequest) -> str:
        """Return one of ``q``, ``r``, ``b``, ``n`` (either case)."""


class AutoQueenProvider(IPromotionProvider):
    """Always promotes to a queen."""

    def choose_promotion(self, request: PromotionRequest) -> str:
        return PROMOTION_CHARS[PieceType.QUEEN]


class FixedPromotionProvider(IPromotionProvider):
    """Always answers with the same piece letter."""

    __slots__ = ("_char",)

    def __init__(self, char: str) -> None:
        if char.lower() not in PROMOTION_TYPES:
            raise ValueError(f"Invalid promotion piece: {char!r}")
        self._char = char.lower()

    def choose_promotion(self, request: PromotionRequest) -> str:
        return self._char
