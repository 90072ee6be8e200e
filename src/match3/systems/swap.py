from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple

from esper import World

from match3.components.engine_state import EnginePhase
from match3.components.piece import PieceKind, is_movable
from match3.errors import CascadeLimitError
from match3.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GAME_OVER,
    EVENT_MOVE_MADE,
    EVENT_STATE_CHANGED,
    EVENT_SWAP_COMMITTED,
    EVENT_SWAP_REVERTED,
    EVENT_SWAP_STARTED,
    EVENT_TILE_ENTER,
    EVENT_TILE_PRESS,
    EVENT_TILE_RELEASE,
)
from match3.systems.clear_ops import ClearSystem
from match3.systems.gravity import GravityEngine
from match3.systems.grid import GridState
from match3.systems.match import MatchDetector
from match3.systems.match_resolution import ClearResolver
from match3.systems.special_effects import SpecialEffectRules
from match3.systems.state_utils import get_or_create_engine_state, get_or_create_swap_gesture

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

_ALWAYS_VALID = (PieceKind.RAINBOW, PieceKind.COLOR_CHANGER)


class LevelListener(Protocol):
    def on_move(self) -> None: ...


class SwapController:
    """Turns press/enter/release input into swaps and drives the cascade to a fixed point.

    Flow:
      - IDLE -> SWAPPING on a release over two orthogonally adjacent movable tiles.
      - SWAPPING -> IDLE when neither tile matches at its landing cell and neither is a
        Rainbow or ColorChanger; the matrix is restored.
      - SWAPPING -> RESOLVING on a valid swap: swap effects, then one resolve pass.
      - RESOLVING -> FILLING, and FILLING -> RESOLVING while resolve passes keep clearing.
      - FILLING -> IDLE once a settle and resolve round clears nothing.
    Requests while busy, after game over or over non-adjacent cells change nothing and
    emit nothing.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        grid: GridState,
        detector: MatchDetector,
        clears: ClearSystem,
        effects: SpecialEffectRules,
        resolver: ClearResolver,
        gravity: GravityEngine,
        *,
        level: Optional[LevelListener] = None,
        max_cascade_rounds: int,
    ):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.detector = detector
        self.clears = clears
        self.effects = effects
        self.resolver = resolver
        self.gravity = gravity
        self.level = level
        self.max_cascade_rounds = max_cascade_rounds
        self.state = get_or_create_engine_state(world)
        self.gesture = get_or_create_swap_gesture(world)
        self.event_bus.subscribe(EVENT_TILE_PRESS, self.on_tile_press)
        self.event_bus.subscribe(EVENT_TILE_ENTER, self.on_tile_enter)
        self.event_bus.subscribe(EVENT_TILE_RELEASE, self.on_tile_release)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def phase(self) -> EnginePhase:
        return self.state.phase

    @property
    def is_busy(self) -> bool:
        return self.state.phase is not EnginePhase.IDLE

    @property
    def is_game_over(self) -> bool:
        return self.state.game_over

    def _set_phase(self, phase: EnginePhase) -> None:
        previous = self.state.phase
        if previous is phase:
            return
        self.state.phase = phase
        self.event_bus.emit(EVENT_STATE_CHANGED, previous=previous, current=phase)

    def _accepting(self) -> bool:
        return not self.state.game_over and not self.is_busy

    def game_over(self) -> None:
        """Stop accepting swaps. A cascade already running is allowed to finish."""
        if self.state.game_over:
            return
        self.state.game_over = True
        logger.info("Game over")
        self.event_bus.emit(EVENT_GAME_OVER)
        if not self.is_busy:
            self._set_phase(EnginePhase.GAME_OVER)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def on_tile_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        self.press(x, y)

    def on_tile_enter(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        self.enter(x, y)

    def on_tile_release(self, sender, **kwargs):
        self.release()

    def press(self, x: int, y: int) -> bool:
        if not self._accepting() or not self.grid.is_in_bounds(x, y):
            return False
        self.gesture.pressed = self.grid.index_of(x, y)
        return True

    def enter(self, x: int, y: int) -> bool:
        if not self._accepting() or not self.grid.is_in_bounds(x, y):
            return False
        self.gesture.entered = self.grid.index_of(x, y)
        return True

    def release(self) -> bool:
        """Evaluate the current gesture. Returns True when a swap was committed."""
        if not self._accepting() or not self.gesture.complete:
            return False
        src = self.grid.coords_of(self.gesture.pressed)
        dst = self.grid.coords_of(self.gesture.entered)
        if not self.is_adjacent(src, dst):
            return False
        return self._swap(src, dst)

    def request_swap(self, src: Position, dst: Position) -> bool:
        """Press ``src``, enter ``dst`` and release in one call."""
        if not self._accepting():
            return False
        if not (self.grid.is_in_bounds(*src) and self.grid.is_in_bounds(*dst)):
            return False
        self.press(*src)
        self.enter(*dst)
        return self.release()

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ax, ay = a
        bx, by = b
        return (abs(ax - bx) == 1 and ay == by) or (abs(ay - by) == 1 and ax == bx)

    # ------------------------------------------------------------------
    # Swap
    # ------------------------------------------------------------------
    def _swap(self, src: Position, dst: Position) -> bool:
        tile_a = self.grid.get(*src)
        tile_b = self.grid.get(*dst)
        kind_a = self.grid.kind(tile_a)
        kind_b = self.grid.kind(tile_b)
        if not is_movable(kind_a) or not is_movable(kind_b):
            return False

        self._set_phase(EnginePhase.SWAPPING)
        self.event_bus.emit(EVENT_SWAP_STARTED, src=src, dst=dst)
        # Positions stay at their old values while the matrix holds the tentative swap.
        self.grid.swap_cells(src, dst)
        match_a = self.detector.find_match(tile_a, *dst)
        match_b = self.detector.find_match(tile_b, *src)
        valid = (
            match_a is not None
            or match_b is not None
            or kind_a in _ALWAYS_VALID
            or kind_b in _ALWAYS_VALID
        )
        if not valid:
            self.grid.swap_cells(src, dst)
            self.gesture.reset()
            logger.debug("Swap %s <-> %s reverted", src, dst)
            self.event_bus.emit(EVENT_SWAP_REVERTED, src=src, dst=dst)
            self._set_phase(EnginePhase.IDLE)
            return False

        self.grid.commit_position(*src)
        self.grid.commit_position(*dst)
        # The gesture follows the tiles to their landing cells for promotion placement.
        self.gesture.pressed, self.gesture.entered = self.gesture.entered, self.gesture.pressed
        logger.debug("Swap %s <-> %s committed", src, dst)
        self.event_bus.emit(EVENT_SWAP_COMMITTED, src=src, dst=dst)

        self._set_phase(EnginePhase.RESOLVING)
        self.effects.apply_swap_effects(tile_a, tile_b)
        self.state.needs_refill = self.resolver.resolve_all_matches()
        self.gesture.reset()

        self.event_bus.emit(EVENT_MOVE_MADE, src=src, dst=dst)
        if self.level is not None:
            self.level.on_move()
        self.run_cascade()
        return True

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------
    def run_cascade(self) -> int:
        """Settle and resolve until a round clears nothing. Returns the number of rounds."""
        depth = 0
        needs_refill = True
        while needs_refill:
            depth += 1
            if depth > self.max_cascade_rounds:
                raise CascadeLimitError(f"Cascade did not stop within {self.max_cascade_rounds} rounds")
            self._set_phase(EnginePhase.FILLING)
            steps = self.gravity.settle()
            needs_refill = self.resolver.resolve_all_matches()
            self.state.needs_refill = needs_refill
            self.state.cascade_depth = depth
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, settle_steps=steps, cleared=needs_refill)
            if needs_refill:
                self._set_phase(EnginePhase.RESOLVING)
        logger.debug("Cascade finished after %d rounds", depth)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)
        self._set_phase(EnginePhase.GAME_OVER if self.state.game_over else EnginePhase.IDLE)
        return depth

    def initial_fill(self) -> int:
        """Fill the freshly created board from the top and resolve any matches it lands."""
        self._set_phase(EnginePhase.FILLING)
        return self.run_cascade()

    def clear_match_at(self, x: int, y: int) -> bool:
        """Clear the match running through (x, y), if any, and cascade.

        This bypasses swapping entirely, for boosters and hint tooling.
        """
        if not self._accepting():
            return False
        entity = self.grid.get(x, y)
        match = self.detector.find_match(entity, x, y)
        if match is None:
            return False
        self._set_phase(EnginePhase.RESOLVING)
        for mx, my in match.positions:
            self.clears.clear(mx, my)
        self.clears.flush()
        self.run_cascade()
        return True
