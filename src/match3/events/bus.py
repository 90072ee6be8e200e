from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of unreferenced systems connected.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT
# ============================================================================
EVENT_TILE_PRESS = "tile_press"        # payload: x, y
EVENT_TILE_ENTER = "tile_enter"        # payload: x, y
EVENT_TILE_RELEASE = "tile_release"    # payload: None


# ============================================================================
# BOARD CHANGES (presentation replays these in emission order)
# ============================================================================
EVENT_TILE_SPAWNED = "tile_spawned"              # payload: x, y, kind=PieceKind, color=ColorType|None
EVENT_TILE_MOVED = "tile_moved"                  # payload: from_x, from_y, to_x, to_y
EVENT_TILE_CLEARED = "tile_cleared"              # payload: x, y, kind=PieceKind
EVENT_TILE_RECOLORED = "tile_recolored"          # payload: x, y, color=ColorType
EVENT_SPECIAL_ACTIVATED = "special_activated"    # payload: x, y, kind=PieceKind


# ============================================================================
# SWAP & CASCADE
# ============================================================================
EVENT_SWAP_STARTED = "swap_started"          # payload: src=(x,y), dst=(x,y)
EVENT_SWAP_COMMITTED = "swap_committed"      # payload: src=(x,y), dst=(x,y)
EVENT_SWAP_REVERTED = "swap_reverted"        # payload: src=(x,y), dst=(x,y)
EVENT_MATCH_FOUND = "match_found"            # payload: positions=[(x,y),...], size=int, horizontal=bool
EVENT_CASCADE_STEP = "cascade_step"          # payload: depth=int, settle_steps=int, cleared=bool
EVENT_CASCADE_COMPLETE = "cascade_complete"  # payload: depth=int


# ============================================================================
# GAME FLOW
# ============================================================================
EVENT_STATE_CHANGED = "state_changed"    # payload: previous=EnginePhase, current=EnginePhase
EVENT_MOVE_MADE = "move_made"            # payload: src=(x,y), dst=(x,y)
EVENT_GAME_OVER = "game_over"            # payload: None


BOARD_EVENTS = (
    EVENT_TILE_SPAWNED,
    EVENT_TILE_MOVED,
    EVENT_TILE_CLEARED,
    EVENT_TILE_RECOLORED,
    EVENT_SPECIAL_ACTIVATED,
)

ENGINE_EVENTS = BOARD_EVENTS + (
    EVENT_SWAP_STARTED,
    EVENT_SWAP_COMMITTED,
    EVENT_SWAP_REVERTED,
    EVENT_MATCH_FOUND,
    EVENT_CASCADE_STEP,
    EVENT_CASCADE_COMPLETE,
    EVENT_STATE_CHANGED,
    EVENT_MOVE_MADE,
    EVENT_GAME_OVER,
)
