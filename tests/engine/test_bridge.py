"""Tests for the external engine bridge, using a scripted fake engine."""

import logging

import pytest

from chesscore.core.enums import PieceType
from chesscore.core.notation import STARTING_FEN, position_from_fen
from chesscore.engine.bridge import AnalysisOptions, BestMoveResult, EngineBridge
from chesscore.game.state import GameState


class _ScriptedEngine:
    """Answers every request with the next scripted move text."""

    def __init__(self, *answers: str | None) -> None:
        self._answers = list(answers)
        self.requests: list[tuple[str, AnalysisOptions]] = []

    def analyze(self, fen: str, options: AnalysisOptions) -> BestMoveResult:
        self.requests.append((fen, options))
        return BestMoveResult(best_move=self._answers.pop(0), depth=12)


class TestEngineBridge:
    def test_sends_fen_and_options(self) -> None:
        engine = _ScriptedEngine("e2e4")
        options = AnalysisOptions(depth=8, movetime_ms=None)
        bridge = EngineBridge(engine, options)
        bridge.best_move(position_from_fen(STARTING_FEN))
        assert engine.requests == [(STARTING_FEN, options)]

    def test_resolves_legal_move(self) -> None:
        bridge = EngineBridge(_ScriptedEngine("g1f3"))
        move = bridge.best_move(position_from_fen(STARTING_FEN))
        assert move is not None
        assert move.uci == "g1f3"
        assert move.piece.piece_type == PieceType.KNIGHT

    def test_illegal_answer_is_rejected_with_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="chesscore.engine.bridge")
        bridge = EngineBridge(_ScriptedEngine("e2e5"))
        assert bridge.best_move(position_from_fen(STARTING_FEN)) is None
        assert "e2e5" in caplog.text

    @pytest.mark.parametrize("answer", [None, "(none)", "0000"])
    def test_no_move(self, answer: str | None) -> None:
        bridge = EngineBridge(_ScriptedEngine(answer))
        assert bridge.best_move(position_from_fen(STARTING_FEN)) is None

    def test_chess960_castling_answer(self) -> None:
        bridge = EngineBridge(_ScriptedEngine("b1h1"))
        move = bridge.best_move(position_from_fen("6k1/8/8/8/8/8/8/RK5R w KQ - 0 1"))
        assert move is not None
        assert move.is_castling
        assert move.uci == "b1g1"

    def test_play_into_game(self) -> None:
        game = GameState()
        game.setup()
        bridge = EngineBridge(_ScriptedEngine("e2e4", "e7e5"))
        first = bridge.play(game)
        second = bridge.play(game)
        assert first is not None and first.san == "e4"
        assert second is not None and second.san == "e5"
        assert len(game.move_records()) == 2

    def test_play_skips_finished_game(self) -> None:
        game = GameState()
        game.setup("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        engine = _ScriptedEngine("h8g8")
        assert EngineBridge(engine).play(game) is None
        assert engine.requests == []
