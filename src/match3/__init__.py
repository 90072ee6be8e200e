"""Headless match-three engine: match detection, special tiles, gravity and cascades.

Modules:
- components/: tile and board dataclasses stored on esper entities
- systems/: grid, matching, clearing, special effects, gravity, swap controller
- events/: blinker event bus and the ordered event log
- world.py: engine assembly
"""
from match3.components.engine_state import EnginePhase
from match3.components.piece import PieceKind
from match3.components.tile_color import ColorType
from match3.config import EngineConfig, PiecePosition
from match3.errors import CascadeLimitError, GridIndexError, Match3Error
from match3.events.bus import EventBus
from match3.world import Match3Engine, create_engine, create_world

__version__ = "0.1.0"

__all__ = [
    "CascadeLimitError",
    "ColorType",
    "EngineConfig",
    "EnginePhase",
    "EventBus",
    "GridIndexError",
    "Match3Engine",
    "Match3Error",
    "PieceKind",
    "PiecePosition",
    "create_engine",
    "create_world",
]
