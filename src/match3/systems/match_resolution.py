from __future__ import annotations

import logging
from typing import Optional, Tuple

from match3.components.piece import PieceKind, is_clearable, is_colored
from match3.components.swap_gesture import SwapGesture
from match3.constants import LINE_CLEAR_MATCH_SIZE, RAINBOW_MATCH_SIZE
from match3.events.bus import EventBus, EVENT_MATCH_FOUND
from match3.systems.clear_ops import ClearSystem
from match3.systems.grid import GridState
from match3.systems.match import Match, MatchDetector

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def promotion_for(match: Match) -> Optional[PieceKind]:
    """Special kind earned by a match, or None for a plain clear.

    A horizontal four promotes to ColumnClear and a vertical four to RowClear.
    """
    if len(match) == LINE_CLEAR_MATCH_SIZE:
        return PieceKind.COLUMN_CLEAR if match.is_horizontal_primary else PieceKind.ROW_CLEAR
    if len(match) == RAINBOW_MATCH_SIZE:
        return PieceKind.RAINBOW
    return None


class ClearResolver:
    """Scans the board for matches, clears them and spawns promoted special tiles."""

    def __init__(
        self,
        grid: GridState,
        detector: MatchDetector,
        clears: ClearSystem,
        gesture: SwapGesture,
        event_bus: EventBus,
    ):
        self.grid = grid
        self.detector = detector
        self.clears = clears
        self.gesture = gesture
        self.event_bus = event_bus

    def resolve_all_matches(self) -> bool:
        """One row-major resolve pass. Returns True when at least one tile was cleared."""
        self.clears.flush()
        needs_refill = False
        # Tiles promoted during this pass are not scanned again until the next one.
        promoted = set()
        for y in range(self.grid.y_dim):
            for x in range(self.grid.x_dim):
                entity = self.grid.get(x, y)
                if entity in promoted:
                    continue
                if not is_clearable(self.grid.kind(entity)) or self.grid.is_being_cleared(entity):
                    continue
                match = self.detector.find_match(entity, x, y)
                if match is None:
                    continue
                special_kind = promotion_for(match)
                special_at = self._promotion_cell(x, y)
                self.event_bus.emit(
                    EVENT_MATCH_FOUND,
                    positions=list(match.positions),
                    size=len(match),
                    horizontal=match.is_horizontal_primary,
                )
                for mx, my in match.positions:
                    if self.clears.clear(mx, my):
                        needs_refill = True
                if special_kind is not None:
                    promoted.add(self._promote(special_kind, special_at, match))
        self.clears.flush()
        return needs_refill

    def _promotion_cell(self, x: int, y: int) -> Position:
        """Cell that receives a promoted tile for a match scanned from (x, y).

        While a gesture is active the reward lands on a gesture tile: the entered
        tile's cell when the scanned tile is the pressed one, the pressed tile's cell
        otherwise. Cascade matches land on the scanned cell.
        """
        scanned = self.grid.index_of(x, y)
        moving = self.gesture.entered if self.gesture.pressed == scanned else self.gesture.pressed
        if moving is None:
            return x, y
        return self.grid.coords_of(moving)

    def _promote(self, kind: PieceKind, cell: Position, match: Match) -> int:
        origin = match.tiles[0]
        color = self.grid.color(origin) if is_colored(self.grid.kind(origin)) else None
        logger.debug("Promoting %d-match to %s at %s", len(match), kind.name, cell)
        return self.grid.spawn(cell[0], cell[1], kind, color)
