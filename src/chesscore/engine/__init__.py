"""External engine collaborator: protocol and bridge."""

from chesscore.engine.bridge import (
    AnalysisOptions,
    BestMoveResult,
    EngineBridge,
    IEngine,
)

__all__ = [
    "AnalysisOptions",
    "BestMoveResult",
    "EngineBridge",
    "IEngine",
]
