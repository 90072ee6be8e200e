from __future__ import annotations

import logging
from typing import List, Tuple

from match3.components.clearable import Clearable
from match3.components.piece import PieceKind, is_colored
from match3.components.tile_color import ColorType
from match3.events.bus import EventBus, EVENT_SPECIAL_ACTIVATED, EVENT_TILE_CLEARED
from match3.systems.grid import GridState

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class ClearSystem:
    """Clear primitive plus the row, column, color and cross helpers built on it.

    A cleared tile stays in its cell, flagged as being cleared, until ``flush`` swaps
    in an Empty tile. The resolver and the swap controller flush before anything else
    reads those cells.
    """

    def __init__(self, grid: GridState, event_bus: EventBus):
        self.grid = grid
        self.event_bus = event_bus
        self._pending: List[Tuple[int, int, int]] = []

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def clear(self, x: int, y: int) -> bool:
        entity = self.grid.get(x, y)
        if not self._claim(entity, x, y):
            return False
        self._trigger_effect(entity, x, y)
        self._clear_obstacles(x, y)
        return True

    def _claim(self, entity: int, x: int, y: int) -> bool:
        clearable = self.grid.world.try_component(entity, Clearable)
        if clearable is None or clearable.being_cleared:
            return False
        clearable.being_cleared = True
        self._pending.append((x, y, entity))
        self.event_bus.emit(EVENT_TILE_CLEARED, x=x, y=y, kind=self.grid.kind(entity))
        return True

    def _trigger_effect(self, entity: int, x: int, y: int) -> None:
        kind = self.grid.kind(entity)
        if kind is PieceKind.ROW_CLEAR:
            self.event_bus.emit(EVENT_SPECIAL_ACTIVATED, x=x, y=y, kind=kind)
            self.clear_row(y)
        elif kind is PieceKind.COLUMN_CLEAR:
            self.event_bus.emit(EVENT_SPECIAL_ACTIVATED, x=x, y=y, kind=kind)
            self.clear_column(x)
        elif kind in (
            PieceKind.EMPTY,
            PieceKind.NORMAL,
            PieceKind.BUBBLE,
            PieceKind.RAINBOW,
            PieceKind.COLOR_CHANGER,
        ):
            # Rainbow and ColorChanger only act through swap pairing.
            pass
        else:
            raise ValueError(f"No clear effect defined for {kind!r}")

    def _clear_obstacles(self, x: int, y: int) -> None:
        for dx, dy in _NEIGHBOURS:
            nx, ny = x + dx, y + dy
            if not self.grid.is_in_bounds(nx, ny):
                continue
            neighbour = self.grid.get(nx, ny)
            if self.grid.kind(neighbour) is not PieceKind.BUBBLE:
                continue
            # Obstacles are claimed without spreading to their own neighbours.
            self._claim(neighbour, nx, ny)

    def flush(self) -> int:
        """Replace every cleared tile that still occupies its cell with an Empty tile."""
        pending, self._pending = self._pending, []
        replaced = 0
        for x, y, entity in pending:
            if self.grid.get(x, y) != entity:
                continue
            self.grid.spawn(x, y, PieceKind.EMPTY)
            replaced += 1
        if replaced:
            logger.debug("Flushed %d cleared cells", replaced)
        return replaced

    def clear_row(self, y: int) -> bool:
        cleared = False
        for x in range(self.grid.x_dim):
            cleared = self.clear(x, y) or cleared
        return cleared

    def clear_column(self, x: int) -> bool:
        cleared = False
        for y in range(self.grid.y_dim):
            cleared = self.clear(x, y) or cleared
        return cleared

    def clear_color(self, color: ColorType) -> bool:
        """Clear every colored tile of ``color``; ANY clears every colored tile."""
        cleared = False
        for x in range(self.grid.x_dim):
            for y in range(self.grid.y_dim):
                entity = self.grid.get(x, y)
                if not is_colored(self.grid.kind(entity)):
                    continue
                if color is ColorType.ANY or self.grid.color(entity) == color:
                    cleared = self.clear(x, y) or cleared
        return cleared

    def clear_cross(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        cleared = self.clear_row(y1)
        cleared = self.clear_row(y2) or cleared
        cleared = self.clear_column(x1) or cleared
        cleared = self.clear_column(x2) or cleared
        return cleared
