from __future__ import annotations

import random
from typing import Optional, Tuple

from esper import World

from match3.components.engine_state import EnginePhase
from match3.components.piece import PieceKind
from match3.components.tile_color import ColorType
from match3.config import EngineConfig
from match3.events.bus import EventBus
from match3.events.log import EventLog
from match3.systems.clear_ops import ClearSystem
from match3.systems.gravity import GravityEngine
from match3.systems.grid import GridState
from match3.systems.match import MatchDetector
from match3.systems.match_resolution import ClearResolver
from match3.systems.special_effects import SpecialEffectRules
from match3.systems.state_utils import get_or_create_engine_state, get_or_create_swap_gesture
from match3.systems.swap import LevelListener, SwapController

Position = Tuple[int, int]


def create_world(rng: random.Random | None = None) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    get_or_create_engine_state(world)
    get_or_create_swap_gesture(world)
    return world


class Match3Engine:
    """Wires the board systems together around one world and event bus.

    The engine is the single owner of its GridState; every mutation goes through the
    swap controller, the clear system or the gravity engine.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        level: Optional[LevelListener] = None,
        record_events: bool = True,
        fill: bool = True,
    ):
        self.config = config or EngineConfig()
        self.event_bus = event_bus or EventBus()
        self.log: Optional[EventLog] = EventLog(self.event_bus) if record_events else None
        self.world = create_world(rng)
        self.state = get_or_create_engine_state(self.world)
        self.gesture = get_or_create_swap_gesture(self.world)
        self.grid = GridState(
            self.world,
            self.event_bus,
            self.config.x_dim,
            self.config.y_dim,
            self.config.initial_pieces,
            num_colors=self.config.num_colors,
        )
        self.detector = MatchDetector(self.grid)
        self.clears = ClearSystem(self.grid, self.event_bus)
        self.effects = SpecialEffectRules(self.grid, self.detector, self.clears, self.event_bus)
        self.resolver = ClearResolver(self.grid, self.detector, self.clears, self.gesture, self.event_bus)
        self.gravity = GravityEngine(self.grid, self.state, max_settle_steps=self.config.max_settle_steps)
        self.controller = SwapController(
            self.world,
            self.event_bus,
            self.grid,
            self.detector,
            self.clears,
            self.effects,
            self.resolver,
            self.gravity,
            level=level,
            max_cascade_rounds=self.config.max_cascade_rounds,
        )
        if fill:
            self.controller.initial_fill()

    # Level/score collaborator surface
    def game_over(self) -> None:
        self.controller.game_over()

    @property
    def is_game_over(self) -> bool:
        return self.controller.is_game_over

    @property
    def phase(self) -> EnginePhase:
        return self.controller.phase

    # Input collaborator surface
    def press(self, x: int, y: int) -> bool:
        return self.controller.press(x, y)

    def enter(self, x: int, y: int) -> bool:
        return self.controller.enter(x, y)

    def release(self) -> bool:
        return self.controller.release()

    def swap(self, src: Position, dst: Position) -> bool:
        return self.controller.request_swap(src, dst)

    # Board setup helpers for hosts and tests
    def place(self, x: int, y: int, kind: PieceKind, color: ColorType | None = None) -> int:
        """Overwrite one cell directly. Only valid while the engine is idle."""
        self._require_idle("place tiles")
        return self.grid.spawn(x, y, kind, color)

    def settle(self) -> int:
        """Run the fill/resolve loop from the current board (e.g. after manual placement)."""
        self._require_idle("settle")
        return self.controller.initial_fill()

    def _require_idle(self, action: str) -> None:
        if self.controller.is_game_over:
            raise RuntimeError(f"Cannot {action} after game over")
        if self.controller.is_busy:
            raise RuntimeError(f"Cannot {action} while a swap or cascade is in progress")


def create_engine(
    config: EngineConfig | None = None,
    *,
    event_bus: EventBus | None = None,
    rng: random.Random | None = None,
    level: Optional[LevelListener] = None,
    fill: bool = True,
) -> Match3Engine:
    return Match3Engine(config, event_bus=event_bus, rng=rng, level=level, fill=fill)
