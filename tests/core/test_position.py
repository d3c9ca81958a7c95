"""Tests for Position: move application, bookkeeping and hashing."""

from chesscore.core import zobrist
from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.notation import (
    STARTING_FEN,
    parse_uci,
    position_from_fen,
    position_to_fen,
)
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import D5, E1, E3, E4, G1, H1, parse_square

CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"


def play(pos: Position, *moves: str) -> Position:
    for text in moves:
        pos.make_move(parse_uci(pos, text))
    return pos


class TestMakeMove:
    def test_double_push_hands_over_with_target(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "e2e4")
        assert (pos.side_to_move, pos.en_passant) == (Color.BLACK, E3)
        assert pos.board[E4] == Piece(Color.WHITE, PieceType.PAWN)

    def test_en_passant_replaced_then_cleared(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "e2e4", "d7d5")
        assert pos.en_passant == parse_square("d6")
        play(pos, "g1f3")
        assert pos.en_passant is None

    def test_capture(self) -> None:
        fen = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2"
        pos = play(position_from_fen(fen), "e4d5")
        assert pos.board[D5] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.board[E4] is None
        assert pos.board.count(Color.BLACK, PieceType.PAWN) == 7

    def test_clocks(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "g1f3")
        assert pos.halfmove_clock == 1
        assert pos.fullmove_number == 1
        play(pos, "g8f6")
        assert pos.halfmove_clock == 2
        assert pos.fullmove_number == 2
        play(pos, "e2e4")
        assert pos.halfmove_clock == 0

    def test_capture_resets_halfmove_clock(self) -> None:
        pos = position_from_fen("4k3/8/8/3p4/8/4N3/8/4K3 w - - 7 30")
        play(pos, "e3d5")
        assert pos.halfmove_clock == 0

    def test_ply_count(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "e2e4", "e7e5", "g1f3")
        assert pos.ply_count == 3


class TestCastlingBookkeeping:
    def test_king_step_drops_both_own_rights(self) -> None:
        pos = play(position_from_fen(CASTLING_FEN), "e1f1")
        assert pos.castling == CastlingRights.BLACK_BOTH

    def test_rook_step_drops_its_wing_only(self) -> None:
        pos = play(position_from_fen(CASTLING_FEN), "a1b1")
        assert pos.castling == CastlingRights.ALL & ~CastlingRights.WHITE_QUEENSIDE
        assert pos.has_castling_right(CastlingRights.WHITE_KINGSIDE)

    def test_rook_captured_on_home_square(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        play(pos, "a1a8")
        assert position_to_fen(pos) == "R3k2r/8/8/8/8/8/8/4K2R b Kk - 0 1"

    def test_castling_kingside(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        play(pos, "e1g1")
        assert pos.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[parse_square("f1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[H1] is None
        assert pos.board[E1] is None
        assert position_to_fen(pos) == "r3k2r/8/8/8/8/8/8/R4RK1 b kq - 1 1"

    def test_castling_queenside(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
        play(pos, "e8c8")
        assert position_to_fen(pos) == "2kr3r/8/8/8/8/8/8/R3K2R w KQ - 1 2"


class TestZobrist:
    def test_incremental_matches_fresh(self) -> None:
        pos = play(
            position_from_fen(CASTLING_FEN), "e1g1", "e8c8", "a2a4", "h7h5"
        )
        fresh = position_from_fen(position_to_fen(pos))
        assert pos.zobrist_hash == fresh.zobrist_hash

    def test_capture_keeps_hash_in_step(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "e2e4", "d7d5", "e4d5", "d8d5")
        expected = zobrist.full_hash(
            pos.board, pos.side_to_move, pos.castling, pos.en_passant
        )
        assert pos.zobrist_hash == expected

    def test_transposition_same_hash(self) -> None:
        a = play(position_from_fen(STARTING_FEN), "g1f3", "g8f6", "b1c3")
        b = play(position_from_fen(STARTING_FEN), "b1c3", "g8f6", "g1f3")
        assert a.zobrist_hash == b.zobrist_hash

    def test_side_to_move_changes_hash(self) -> None:
        white = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        black = position_from_fen("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
        assert white.zobrist_hash != black.zobrist_hash

    def test_castling_rights_change_hash(self) -> None:
        full = position_from_fen(CASTLING_FEN)
        partial = position_from_fen(CASTLING_FEN.replace("KQkq", "Kkq"))
        assert full.zobrist_hash != partial.zobrist_hash

    def test_en_passant_file_changes_hash(self) -> None:
        with_ep = position_from_fen(
            "rnbqkbnr/pppp1ppp/8/4p3/8/8/PPPPPPPP/RNBQKBNR w KQkq e6 0 2"
        )
        without_ep = position_from_fen(
            "rnbqkbnr/pppp1ppp/8/4p3/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 2"
        )
        assert with_ep.zobrist_hash != without_ep.zobrist_hash


class TestCopyAndRepetition:
    def test_copy_is_independent(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        clone = pos.copy()
        play(clone, "e2e4")
        assert position_to_fen(pos) == STARTING_FEN
        assert pos.ply_count == 0
        assert clone.ply_count == 1

    def test_copy_keeps_repetition_record(self) -> None:
        pos = play(
            position_from_fen(STARTING_FEN), "g1f3", "g8f6", "f3g1", "f6g8"
        )
        assert pos.repetition_count() == 2
        assert pos.copy().repetition_count() == 2

    def test_repetition_counts_returns(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.repetition_count() == 1
        for _ in range(2):
            play(pos, "g1f3", "g8f6", "f3g1", "f6g8")
        assert pos.repetition_count() == 3

    def test_default_constructor_is_start_position(self) -> None:
        assert position_to_fen(Position()) == STARTING_FEN

    def test_pawn_move_restarts_repetition_record(self) -> None:
        pos = play(position_from_fen(STARTING_FEN), "g1f3", "g8f6", "f3g1", "f6g8")
        assert pos.repetition_count() == 2
        play(pos, "e2e4")
        assert pos.repetition_count() == 1
        assert len(pos._seen) == 1
        play(pos, "g8f6", "g1f3", "f6g8", "f3g1")
        # The start position is gone for good; only the post-e4 one recurs.
        assert pos.repetition_count() == 2
        assert pos.ply_count == 9

    def test_capture_restarts_repetition_record(self) -> None:
        pos = position_from_fen("4k3/8/8/3p4/8/4N3/8/4K3 w - - 7 30")
        play(pos, "e3d5")
        assert pos.repetition_count() == 1
        assert len(pos._seen) == 1
        assert pos.copy().repetition_count() == 1
