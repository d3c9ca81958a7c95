"""Game-ending conditions and checked move application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chesscore.core.board import Board
from chesscore.core.enums import Color, GameStatus, PieceType
from chesscore.core.errors import IllegalMoveError
from chesscore.core.move_generator import MoveGenerator, square_attacked
from chesscore.core.types import is_light_square

if TYPE_CHECKING:
    from chesscore.core.move import Move
    from chesscore.core.position import Position


_HEAVY_OR_PAWN = (PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN)


@dataclass(frozen=True, slots=True)
class GameOutcome:
    """Termination verdict for a position; ``winner`` is set only on mate."""

    status: GameStatus = GameStatus.IN_PROGRESS
    winner: Color | None = None

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    @property
    def result_token(self) -> str:
        """PGN-style result: ``1-0``, ``0-1``, ``1/2-1/2`` or ``*``."""
        if self.status == GameStatus.IN_PROGRESS:
            return "*"
        if self.winner == Color.WHITE:
            return "1-0"
        if self.winner == Color.BLACK:
            return "0-1"
        return "1/2-1/2"


def _check_and_mobility(position: Position) -> tuple[bool, bool]:
    """(side to move is in check, side to move has a legal move)."""
    gen = MoveGenerator(position)
    in_check = gen.is_in_check(position.side_to_move)
    return in_check, bool(gen.generate_legal_moves())


class Rules:
    """Namespace of rule queries; nothing here keeps state between calls."""

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        side = position.side_to_move if color is None else color
        return MoveGenerator(position).is_in_check(side)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        in_check, can_move = _check_and_mobility(position)
        return in_check and not can_move

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        in_check, can_move = _check_and_mobility(position)
        return not in_check and not can_move

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Neither side can ever deliver mate.

        Holds for bare kings, a single minor piece overall, or any number
        of bishops that all stand on squares of one colour.
        """
        board = position.board
        for color in Color:
            for ptype in _HEAVY_OR_PAWN:
                if board.has_piece(color, ptype):
                    return False

        knights = board.count(Color.WHITE, PieceType.KNIGHT) + board.count(
            Color.BLACK, PieceType.KNIGHT
        )
        bishops = board.pieces(Color.WHITE, PieceType.BISHOP) + board.pieces(
            Color.BLACK, PieceType.BISHOP
        )
        if knights + len(bishops) <= 1:
            return True
        if knights:
            return False
        return len({is_light_square(sq) for sq in bishops}) == 1

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        """A hundred half-moves without a capture or pawn move."""
        return position.halfmove_clock >= 100

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() > 2

    @staticmethod
    def outcome(position: Position) -> GameOutcome:
        """Classify *position*: mate and stalemate first, then the draw rules."""
        in_check, can_move = _check_and_mobility(position)
        if not can_move:
            if in_check:
                return GameOutcome(GameStatus.CHECKMATE, position.side_to_move.opposite)
            return GameOutcome(GameStatus.STALEMATE)

        if Rules.is_insufficient_material(position):
            return GameOutcome(GameStatus.INSUFFICIENT_MATERIAL)
        if Rules.is_fifty_move_rule(position):
            return GameOutcome(GameStatus.FIFTY_MOVE_RULE)
        if Rules.is_threefold_repetition(position):
            return GameOutcome(GameStatus.THREEFOLD_REPETITION)
        return GameOutcome()

    # -- Move validation ----------------------------------------------------

    @staticmethod
    def validate_move(position: Position, move: Move) -> bool:
        """Whether *move* (every field) is one of the legal moves."""
        if move.piece.color != position.side_to_move:
            return False
        return move in MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def apply_move(position: Position, move: Move) -> None:
        """Play a legal *move* on *position*.

        Raises :class:`IllegalMoveError` and leaves *position* untouched
        when the move is not legal.
        """
        if not Rules.validate_move(position, move):
            raise IllegalMoveError(move.uci, "not legal in this position")
        position.make_move(move)

    @staticmethod
    def gives_check(position: Position, move: Move) -> bool:
        """Would playing *move* leave the opponent's king attacked?"""
        scratch: Board = position.board.copy()
        scratch.apply_move(move)
        opponent = move.piece.color.opposite
        return square_attacked(scratch, scratch.king_square(opponent), move.piece.color)
