"""Bridge to an external UCI engine treated as a move oracle.

The engine only proposes; every answer is resolved against the legal
moves of the position, so the core stays the authority on legality.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from chesscore.core.errors import ChessError
from chesscore.core.notation import parse_uci, position_to_fen

if TYPE_CHECKING:
    from chesscore.core.move import Move
    from chesscore.core.position import Position
    from chesscore.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

_NULL_MOVES = frozenset({"", "(none)", "0000"})


@dataclass(slots=True, frozen=True)
class AnalysisOptions:
    """Search constraints passed to the engine for one request."""

    depth: int | None = None
    movetime_ms: int | None = 1000


@dataclass(slots=True, frozen=True)
class BestMoveResult:
    """Engine answer for one position, moves in UCI text."""

    best_move: str | None
    ponder: str | None = None
    score_cp: int | None = None
    mate_in: int | None = None
    depth: int = 0


class IEngine(Protocol):
    """Protocol for an external engine process."""

    def analyze(self, fen: str, options: AnalysisOptions) -> BestMoveResult: ...


class EngineBridge:
    """Turns engine answers into legal :class:`Move` values."""

    __slots__ = ("_engine", "options")

    def __init__(self, engine: IEngine, options: AnalysisOptions | None = None) -> None:
        self._engine = engine
        self.options = options if options is not None else AnalysisOptions()

    def analyze(self, position: Position) -> BestMoveResult:
        return self._engine.analyze(position_to_fen(position), self.options)

    def best_move(self, position: Position) -> Move | None:
        """Engine's choice resolved to a legal move, or None.

        None is returned when the engine has no move or answers with one
        that is not legal here.
        """
        result = self.analyze(position)
        text = (result.best_move or "").strip()
        if text in _NULL_MOVES:
            _LOGGER.debug("Engine returned no move for %s", position_to_fen(position))
            return None
        try:
            return parse_uci(position, text)
        except ChessError as exc:
            _LOGGER.warning("Engine proposed unusable move %r: %s", text, exc)
            return None

    def play(self, state: GameState) -> MoveRecord | None:
        """Ask for a move in *state*'s position and play it."""
        if state.is_game_over:
            return None
        move = self.best_move(state.position)
        if move is None:
            return None
        return state.apply_move(move)
