"""A playable game: current position, outcome tracking and undo/redo.

Observers register plain callables on :class:`GameEvents`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chesscore.core.errors import IllegalMoveError
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.notation import (
    STARTING_FEN,
    UciMoveCache,
    chess960_start_fen,
    check_suffix,
    move_to_san,
    parse_san,
    parse_uci,
    position_from_fen,
    position_to_fen,
)
from chesscore.core.position import Position
from chesscore.core.promotion import IPromotionProvider
from chesscore.core.rules import GameOutcome, Rules
from chesscore.game.history import History, HistoryEntry
from chesscore.game.settings import GameSettings

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """What the caller learns about a move once it has been played."""

    move: Move
    san: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


# ── Observers ────────────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, "GameState"], None]
GameOverCallback = Callable[[GameOutcome], None]
HistoryCallback = Callable[[int, int], None]  # cursor, entry count


@dataclass
class GameEvents:
    """Handler lists, called in registration order."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_history_changed: list[HistoryCallback] = field(default_factory=list)


# ── State ────────────────────────────────────────────────────────────────────


class GameState:
    """Manages one game: current position, outcome and undo/redo.

    Undo and redo restore recorded snapshots; nothing is replayed.  Once
    the game is over further moves are refused until an undo or a new
    :meth:`setup`.
    """

    __slots__ = (
        "settings",
        "events",
        "_position",
        "_history",
        "_outcome",
        "_promotion",
        "_uci_cache",
        "_start_fen",
    )

    def __init__(
        self,
        settings: GameSettings | None = None,
        promotion: IPromotionProvider | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GameSettings()
        self.events = GameEvents()
        self._history = History(self.settings.history_capacity)
        self._promotion = promotion
        self._uci_cache = UciMoveCache(self.settings.uci_cache_size)
        self._position = position_from_fen(STARTING_FEN)
        self._start_fen = STARTING_FEN
        self._outcome = GameOutcome()
        self._history.reset(self._position)

    # ── Starting a game ──────────────────────────────────────────────────

    def setup(self, fen: str | None = None, *, chess960: bool | None = None) -> None:
        """Initialise (or reset) the game.

        Without *fen* the configured start position is used (the Chess960
        layout ``settings.chess960_index`` when ``settings.chess960`` is on).
        """
        if fen is None:
            if self.settings.chess960:
                fen = chess960_start_fen(self.settings.chess960_index)
                chess960 = True
            else:
                fen = STARTING_FEN
        position = position_from_fen(fen, chess960=chess960)

        self._position = position
        self._start_fen = position_to_fen(position)
        self._uci_cache.clear()
        self._history.reset(position)
        self._outcome = Rules.outcome(position)
        _LOGGER.info("New game from %s", self._start_fen)
        self._emit_history_changed()
        if self._outcome.is_over:
            self._emit_game_over()

    # ── Playing moves ────────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Play a legal *move* and return its record.

        Raises :class:`IllegalMoveError` (leaving the game untouched) when
        the move is not legal or the game is already over.
        """
        legal = self._moves_for(move.uci)
        if move not in legal:
            _LOGGER.debug("Rejected illegal move %s", move.uci)
            raise IllegalMoveError(move.uci, "not legal in this position")
        return self._play(move, legal)

    def play_uci(
        self, text: str, promotion: IPromotionProvider | None = None
    ) -> MoveRecord:
        """Parse UCI *text* against the current position and play it."""
        legal = self._moves_for(text)
        move = parse_uci(
            self._position,
            text,
            legal_moves=legal,
            promotion=promotion if promotion is not None else self._promotion,
            cache=self._uci_cache,
        )
        return self._play(move, legal)

    def play_san(self, text: str) -> MoveRecord:
        """Parse SAN *text* against the current position and play it."""
        legal = self._moves_for(text)
        move = parse_san(self._position, text, legal)
        return self._play(move, legal)

    def _moves_for(self, text: str) -> list[Move]:
        if self._outcome.is_over:
            _LOGGER.debug("Rejected %s: game is over", text)
            raise IllegalMoveError(text, "game is over")
        return self.legal_moves()

    def _play(self, move: Move, legal: list[Move]) -> MoveRecord:
        san = move_to_san(self._position, move, legal)
        suffix = check_suffix(self._position, move)
        if self.settings.annotate_checks:
            san += suffix

        self._position.make_move(move)
        entry = self._history.record(self._position, move, san)
        self._outcome = Rules.outcome(self._position)

        record = MoveRecord(
            move=move,
            san=san,
            fen_after=entry.fen,
            was_check=bool(suffix),
            was_capture=move.is_capture,
        )
        _LOGGER.debug("Played %s (%s)", san, move.uci)

        for handler in self.events.on_move:
            handler(record, self)
        self._emit_history_changed()
        if self._outcome.is_over:
            _LOGGER.info(
                "Game over: %s %s", self._outcome.status.name, self._outcome.result_token
            )
            self._emit_game_over()
        return record

    # ── Undo / redo ──────────────────────────────────────────────────────

    def undo(self) -> HistoryEntry | None:
        """Step back one ply. Returns the restored entry, or None at the start."""
        return self._restore(self._history.undo(), "Undo")

    def redo(self) -> HistoryEntry | None:
        """Step forward one ply. Returns the restored entry, or None at the end."""
        return self._restore(self._history.redo(), "Redo")

    def _restore(self, entry: HistoryEntry | None, action: str) -> HistoryEntry | None:
        if entry is None:
            _LOGGER.debug("%s unavailable at cursor %d", action, self._history.cursor)
            return None
        self._position = entry.position()
        self._outcome = Rules.outcome(self._position)
        _LOGGER.debug("%s -> %s", action, entry.fen)
        self._emit_history_changed()
        return entry

    # ── Read-only views ──────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def history(self) -> History:
        return self._history

    @property
    def outcome(self) -> GameOutcome:
        return self._outcome

    @property
    def is_game_over(self) -> bool:
        return self._outcome.is_over

    @property
    def start_fen(self) -> str:
        return self._start_fen

    @property
    def fen(self) -> str:
        return position_to_fen(self._position)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def legal_moves(self) -> list[Move]:
        """Every legal move for the side to move."""
        return MoveGenerator(self._position).generate_legal_moves()

    def move_records(self) -> list[MoveRecord]:
        """Records of the moves leading to the current position."""
        records: list[MoveRecord] = []
        for entry in self._history.entries():
            if entry.move is None:
                continue
            records.append(
                MoveRecord(
                    move=entry.move,
                    san=entry.san,
                    fen_after=entry.fen,
                    was_check=Rules.is_in_check(entry.position()),
                    was_capture=entry.move.is_capture,
                )
            )
        return records

    # ── Notification ─────────────────────────────────────────────────────

    def _emit_history_changed(self) -> None:
        for handler in self.events.on_history_changed:
            handler(self._history.cursor, len(self._history))

    def _emit_game_over(self) -> None:
        for handler in self.events.on_game_over:
            handler(self._outcome)
