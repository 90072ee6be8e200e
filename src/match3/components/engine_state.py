"""Cascade bookkeeping shared by the swap controller and the gravity engine."""
from dataclasses import dataclass
from enum import Enum, auto


class EnginePhase(Enum):
    IDLE = auto()
    SWAPPING = auto()
    RESOLVING = auto()
    FILLING = auto()
    GAME_OVER = auto()


@dataclass(slots=True)
class EngineState:
    """Singleton component holding the controller phase and cascade flags."""
    phase: EnginePhase = EnginePhase.IDLE
    game_over: bool = False
    needs_refill: bool = False
    cascade_depth: int = 0
    # Flips after every settle step that moved something to alternate column scan order.
    inverse: bool = False
