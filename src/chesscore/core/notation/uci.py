"""UCI long-algebraic move text (``e2e4``, ``e7e8q``)."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import islice

from chesscore.core.errors import IllegalMoveError, MoveParseError, MoveParseErrorReason
from chesscore.core.move import PROMOTION_TYPES, Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.position import Position
from chesscore.core.promotion import (
    AutoQueenProvider,
    IPromotionProvider,
    PromotionRequest,
)
from chesscore.core.types import parse_square, square_name

DEFAULT_CACHE_SIZE = 256

_DEFAULT_PROMOTION = AutoQueenProvider()


def move_to_uci(move: Move, *, chess960: bool = False) -> str:
    """UCI text for *move*.

    With ``chess960`` castling is written king-to-rook (``e1h1``), otherwise
    as the king's own destination (``e1g1``).
    """
    if chess960 and move.is_castling:
        assert move.rook_from is not None
        return f"{square_name(move.from_sq)}{square_name(move.rook_from)}"
    return move.uci


class UciMoveCache:
    """Bounded memo of parsed moves keyed by ``(position hash, text)``.

    When full, the oldest quarter of the entries is dropped in one go.
    """

    __slots__ = ("_max_size", "_entries", "hits", "misses")

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"Cache size must be >= 1, got {max_size}")
        self._max_size = max_size
        self._entries: dict[tuple[int, str], Move] = {}
        self.hits = 0
        self.misses = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: int, text: str) -> Move | None:
        move = self._entries.get((key, text))
        if move is None:
            self.misses += 1
        else:
            self.hits += 1
        return move

    def put(self, key: int, text: str, move: Move) -> None:
        if (key, text) not in self._entries and len(self._entries) >= self._max_size:
            self._evict()
        self._entries[(key, text)] = move

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def _evict(self) -> None:
        batch = max(1, self._max_size // 4)
        for stale in list(islice(self._entries, batch)):
            del self._entries[stale]

    def __len__(self) -> int:
        return len(self._entries)


def parse_uci(
    position: Position,
    text: str,
    *,
    legal_moves: Sequence[Move] | None = None,
    promotion: IPromotionProvider | None = None,
    cache: UciMoveCache | None = None,
) -> Move:
    """Resolve UCI *text* to the matching legal :class:`Move`.

    Castling is accepted both as the king's destination (``e1g1``) and as
    king-to-rook (``e1h1``).  A promotion given without a piece letter asks
    *promotion* for one (queen by default).

    Raises :class:`MoveParseError` on malformed text and
    :class:`IllegalMoveError` when no legal move matches.
    """
    text = text.strip()
    if len(text) not in (4, 5):
        raise MoveParseError(MoveParseErrorReason.LENGTH, text)
    try:
        from_sq = parse_square(text[0:2].lower())
        to_sq = parse_square(text[2:4].lower())
    except ValueError:
        raise MoveParseError(MoveParseErrorReason.SQUARE, text) from None
    promo_char = text[4].lower() if len(text) == 5 else None
    if promo_char is not None and promo_char not in PROMOTION_TYPES:
        raise MoveParseError(MoveParseErrorReason.PROMOTION, text)

    normalized = text.lower()
    key = position.zobrist_hash
    if cache is not None:
        cached = cache.get(key, normalized)
        if cached is not None and (legal_moves is None or cached in legal_moves):
            return cached

    if legal_moves is None:
        legal_moves = MoveGenerator(position).generate_legal_moves()

    ordinary = [
        m
        for m in legal_moves
        if m.from_sq == from_sq and m.to_sq == to_sq and not m.is_castling
    ]
    castles = [
        m
        for m in legal_moves
        if m.is_castling and m.from_sq == from_sq and to_sq in (m.to_sq, m.rook_from)
    ]
    candidates = ordinary or castles
    if not candidates:
        raise IllegalMoveError(text)

    asked_provider = False
    if candidates[0].promotion is not None:
        if promo_char is None:
            provider = promotion if promotion is not None else _DEFAULT_PROMOTION
            request = PromotionRequest(from_sq, to_sq, position.side_to_move)
            promo_char = provider.choose_promotion(request).lower()
            asked_provider = True
            if promo_char not in PROMOTION_TYPES:
                raise MoveParseError(MoveParseErrorReason.PROMOTION, text + promo_char)
        wanted = PROMOTION_TYPES[promo_char]
        candidates = [m for m in candidates if m.promotion == wanted]
    elif promo_char is not None:
        raise IllegalMoveError(text, "only a pawn reaching the last rank promotes")

    if not candidates:
        raise IllegalMoveError(text)
    move = candidates[0]
    if cache is not None and not asked_provider:
        cache.put(key, normalized, move)
    return move
