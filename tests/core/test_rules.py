"""Tests for Rules: checkmate, stalemate, draw detection, move application."""

import pytest

from chesscore.core.enums import Color, GameStatus, MoveKind, PieceType
from chesscore.core.errors import IllegalMoveError
from chesscore.core.move import Move
from chesscore.core.notation import (
    STARTING_FEN,
    parse_san,
    parse_uci,
    position_from_fen,
    position_to_fen,
)
from chesscore.core.piece import Piece
from chesscore.core.rules import GameOutcome, Rules
from chesscore.core.types import E1, E2, E4, E5, parse_square

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
SCHOLARS_MATE = "r1bqkb1r/pppp1Qpp/2n2n2/4p3/2B1P3/8/PPPP1PPP/RNB1K1NR b KQkq - 0 4"
STALEMATE = "7k/8/5KQ1/8/8/8/8/8 b - - 0 1"
BACK_RANK_MATE = "R2k4/8/3K4/8/8/8/8/8 b - - 0 1"

# (fen, side to move in check, checkmate, stalemate)
CLASSIFICATION = [
    pytest.param(STARTING_FEN, False, False, False, id="start"),
    pytest.param(FOOLS_MATE, True, True, False, id="fools-mate"),
    pytest.param(SCHOLARS_MATE, True, True, False, id="scholars-mate"),
    pytest.param(BACK_RANK_MATE, True, True, False, id="back-rank-mate"),
    pytest.param(
        "4k3/8/8/8/8/8/8/r3K3 w - - 0 1", True, False, False, id="check-with-escape"
    ),
    pytest.param(STALEMATE, False, False, True, id="stalemate"),
    pytest.param("7k/8/5K2/8/8/8/8/8 b - - 0 1", False, False, False, id="free-king"),
]


@pytest.mark.parametrize(("fen", "check", "mate", "stalemate"), CLASSIFICATION)
def test_classification(fen: str, check: bool, mate: bool, stalemate: bool) -> None:
    pos = position_from_fen(fen)
    assert Rules.is_in_check(pos) is check
    assert Rules.is_checkmate(pos) is mate
    assert Rules.is_stalemate(pos) is stalemate


class TestDecisiveOutcomes:
    def test_check_query_for_other_side(self) -> None:
        assert not Rules.is_in_check(position_from_fen(FOOLS_MATE), Color.BLACK)

    def test_black_mates(self) -> None:
        outcome = Rules.outcome(position_from_fen(FOOLS_MATE))
        assert outcome == GameOutcome(GameStatus.CHECKMATE, Color.BLACK)
        assert outcome.result_token == "0-1"

    def test_white_mates(self) -> None:
        for fen in (SCHOLARS_MATE, BACK_RANK_MATE):
            outcome = Rules.outcome(position_from_fen(fen))
            assert outcome.winner == Color.WHITE
            assert outcome.result_token == "1-0"

    def test_stalemate_has_no_winner(self) -> None:
        outcome = Rules.outcome(position_from_fen(STALEMATE))
        assert outcome.status == GameStatus.STALEMATE
        assert outcome.winner is None
        assert outcome.result_token == "1/2-1/2"


class TestInsufficientMaterial:
    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4K3/8/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3B4/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3N4/8 w - - 0 1",
            "8/8/4k3/3n4/8/4K3/8/8 w - - 0 1",
            # Bishops on c1 and f8 are both on dark squares.
            "5b2/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
            "5b2/8/8/4k3/8/8/8/B1B1K3 w - - 0 1",
        ],
    )
    def test_dead_positions(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert Rules.is_insufficient_material(pos)
        assert Rules.outcome(pos).status == GameStatus.INSUFFICIENT_MATERIAL

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4K3/3R4/8 w - - 0 1",
            "8/8/4k3/8/4P3/4K3/8/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3Q4/8 w - - 0 1",
            # Opposite-coloured bishops.
            "2b5/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
            "8/8/8/4k3/8/8/8/3NKN2 w - - 0 1",
            "8/8/8/4k3/8/8/8/3NKB2 w - - 0 1",
        ],
    )
    def test_mating_material(self, fen: str) -> None:
        assert not Rules.is_insufficient_material(position_from_fen(fen))


class TestFiftyMoveRule:
    @pytest.mark.parametrize(
        ("halfmove", "expected"), [(0, False), (99, False), (100, True)]
    )
    def test_threshold(self, halfmove: int, expected: bool) -> None:
        pos = position_from_fen(f"8/8/4k3/8/8/4K3/3R4/8 w - - {halfmove} 60")
        assert Rules.is_fifty_move_rule(pos) is expected

    def test_reported_as_outcome(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/3R4/8 w - - 100 51")
        assert Rules.outcome(pos).status == GameStatus.FIFTY_MOVE_RULE

    def test_checkmate_beats_fifty_move_rule(self) -> None:
        pos = position_from_fen(BACK_RANK_MATE.replace("0 1", "100 80"))
        assert Rules.outcome(pos).status == GameStatus.CHECKMATE


class TestRepetition:
    def test_threefold_repetition_detected(self) -> None:
        pos = position_from_fen("4k2n/8/8/8/8/8/8/4K2N w - - 0 1")
        assert not Rules.is_threefold_repetition(pos)

        for _ in range(2):
            for text in ("h1f2", "h8f7", "f2h1", "f7h8"):
                Rules.apply_move(pos, parse_uci(pos, text))

        assert Rules.is_threefold_repetition(pos)
        assert Rules.outcome(pos).status == GameStatus.THREEFOLD_REPETITION

    def test_two_occurrences_are_not_enough(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        for text in ("g1f3", "g8f6", "f3g1", "f6g8"):
            Rules.apply_move(pos, parse_uci(pos, text))
        assert not Rules.is_threefold_repetition(pos)
        assert not Rules.outcome(pos).is_over


class TestApplyMove:
    def test_legal_move_applied(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        Rules.apply_move(pos, parse_uci(pos, "e2e4"))
        assert pos.board[E4] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.side_to_move == Color.BLACK

    def test_illegal_move_raises_and_leaves_position(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        bogus = Move(E2, E5, Piece(Color.WHITE, PieceType.PAWN))
        with pytest.raises(IllegalMoveError, match="e2e5"):
            Rules.apply_move(pos, bogus)
        assert position_to_fen(pos) == STARTING_FEN
        assert pos.ply_count == 0

    def test_move_into_check_rejected(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4r3/4K3 w - - 0 1")
        fen = position_to_fen(pos)
        # Kd2 stays on the rook's rank.
        bad = Move(E1, parse_square("d2"), Piece(Color.WHITE, PieceType.KING))
        with pytest.raises(IllegalMoveError):
            Rules.apply_move(pos, bad)
        assert position_to_fen(pos) == fen

    def test_validate_compares_every_field(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        legal = parse_uci(pos, "e2e4")
        assert Rules.validate_move(pos, legal)
        wrong_kind = Move(E2, E4, legal.piece, kind=MoveKind.EN_PASSANT)
        assert not Rules.validate_move(pos, wrong_kind)
        wrong_piece = Move(E2, E4, Piece(Color.WHITE, PieceType.QUEEN))
        assert not Rules.validate_move(pos, wrong_piece)

    def test_wrong_side_rejected(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        black_move = Move(
            parse_square("e7"), parse_square("e5"), Piece(Color.BLACK, PieceType.PAWN)
        )
        assert not Rules.validate_move(pos, black_move)


class TestGivesCheck:
    def test_queen_check(self) -> None:
        pos = position_from_fen(
            "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"
        )
        assert Rules.gives_check(pos, parse_san(pos, "Qh4"))
        assert not Rules.gives_check(pos, parse_san(pos, "Nc6"))

    def test_discovered_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/4N3/8/8/4RK2 w - - 0 1")
        assert Rules.gives_check(pos, parse_uci(pos, "e4c5"))

    def test_does_not_mutate(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        Rules.gives_check(pos, parse_uci(pos, "e2e4"))
        assert position_to_fen(pos) == STARTING_FEN


class TestGameOutcome:
    def test_in_progress_at_start(self) -> None:
        outcome = Rules.outcome(position_from_fen(STARTING_FEN))
        assert outcome == GameOutcome()
        assert not outcome.is_over
        assert outcome.result_token == "*"

    def test_black_win_token(self) -> None:
        assert GameOutcome(GameStatus.CHECKMATE, Color.BLACK).result_token == "0-1"

    def test_draw_statuses(self) -> None:
        assert GameStatus.STALEMATE.is_draw
        assert GameStatus.THREEFOLD_REPETITION.is_draw
        assert not GameStatus.CHECKMATE.is_draw
