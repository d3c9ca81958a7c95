"""Perft node counting for move-generator verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesscore.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chesscore.core.position import Position


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth*.

    Every child is played on its own copy, so *position* is never mutated
    and independent callers may share it.
    """
    if depth < 0:
        raise ValueError(f"Perft depth must be >= 0, got {depth}")
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        child = position.copy()
        child.make_move(move)
        nodes += perft(child, depth - 1)
    return nodes


def divide(position: Position, depth: int) -> dict[str, int]:
    """Per-root-move node counts keyed by UCI text."""
    if depth < 1:
        raise ValueError(f"Divide depth must be >= 1, got {depth}")
    counts: dict[str, int] = {}
    for move in MoveGenerator(position).generate_legal_moves():
        child = position.copy()
        child.make_move(move)
        counts[move.uci] = perft(child, depth - 1)
    return counts
