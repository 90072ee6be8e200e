"""Level configuration consumed when an engine is created."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from match3.components.piece import PieceKind
from match3.components.tile_color import ColorType
from match3.constants import (
    FILL_TIME,
    GRID_X_DIM,
    GRID_Y_DIM,
    MAX_CASCADE_ROUNDS,
    MAX_SETTLE_STEPS,
    MIN_GRID_DIM,
    NUM_COLORS,
)


@dataclass(slots=True)
class PiecePosition:
    """Forced tile placement applied before the first fill.

    Entries with coordinates outside the board or a kind that is not a PieceKind are
    skipped by the grid rather than rejected.
    """
    kind: PieceKind
    x: int
    y: int
    color: Optional[ColorType] = None


@dataclass(slots=True)
class EngineConfig:
    """Board setup for one engine.

    ``fill_time`` is the seconds per settle step a presentation host should wait between
    replaying steps. The engine itself never sleeps, so resolved boards do not depend on it.
    """
    x_dim: int = GRID_X_DIM
    y_dim: int = GRID_Y_DIM
    initial_pieces: List[PiecePosition] = field(default_factory=list)
    fill_time: float = FILL_TIME
    num_colors: int = NUM_COLORS
    max_cascade_rounds: int = MAX_CASCADE_ROUNDS
    max_settle_steps: int = MAX_SETTLE_STEPS

    def __post_init__(self) -> None:
        if self.x_dim < MIN_GRID_DIM or self.y_dim < MIN_GRID_DIM:
            raise ValueError(
                f"Board must be at least {MIN_GRID_DIM}x{MIN_GRID_DIM}, got {self.x_dim}x{self.y_dim}"
            )
        if self.num_colors < 1:
            raise ValueError("num_colors must be at least 1")
        if self.max_cascade_rounds < 1 or self.max_settle_steps < 1:
            raise ValueError("Loop caps must be positive")
