"""Game-level configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GameSettings:
    """All tunable settings of a :class:`GameState`."""

    # History
    history_capacity: int = 500  # snapshots kept before the oldest are evicted

    # Variant used by ``setup()`` when no FEN is given
    chess960: bool = False
    chess960_index: int = 518  # 518 = standard start position

    # Notation
    uci_cache_size: int = 256
    annotate_checks: bool = True  # append "+" / "#" to recorded SAN

    def __post_init__(self) -> None:
        if self.history_capacity < 2:
            raise ValueError(
                f"history_capacity must be >= 2, got {self.history_capacity}"
            )
        if not 0 <= self.chess960_index < 960:
            raise ValueError(
                f"chess960_index must be in 0..959, got {self.chess960_index}"
            )
        if self.uci_cache_size < 1:
            raise ValueError(f"uci_cache_size must be >= 1, got {self.uci_cache_size}")
