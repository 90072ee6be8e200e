from __future__ import annotations

import logging
from typing import Tuple

from match3.components.piece import PieceKind, is_colored
from match3.events.bus import EventBus, EVENT_SPECIAL_ACTIVATED
from match3.systems.clear_ops import ClearSystem
from match3.systems.grid import GridState
from match3.systems.match import MatchDetector

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class SpecialEffectRules:
    """Swap-time interaction table for special tiles.

    Rules are checked in order and the first of Rainbow, ColorChanger or line-special
    activation wins. The pairwise line-special combo is checked afterwards on its own
    and may stack with the line-special activation.
    """

    def __init__(self, grid: GridState, detector: MatchDetector, clears: ClearSystem, event_bus: EventBus):
        self.grid = grid
        self.detector = detector
        self.clears = clears
        self.event_bus = event_bus

    def apply_swap_effects(self, a: int, b: int) -> None:
        """Run the interaction table for two committed tiles, ``a`` and ``b``."""
        kind_a, kind_b = self.grid.kind(a), self.grid.kind(b)
        pos_a, pos_b = self.grid.position(a), self.grid.position(b)
        line_match = (
            self.detector.find_match(a, *pos_a) is not None
            or self.detector.find_match(b, *pos_b) is not None
        )

        if kind_a is PieceKind.RAINBOW and is_colored(kind_b):
            self._rainbow(a, b)
        elif kind_b is PieceKind.RAINBOW and is_colored(kind_a):
            self._rainbow(b, a)
        elif kind_a is PieceKind.COLOR_CHANGER and is_colored(kind_b):
            self._color_changer(a, b)
        elif kind_b is PieceKind.COLOR_CHANGER and is_colored(kind_a):
            self._color_changer(b, a)
        elif line_match:
            self._line_special(kind_a, pos_a)
            self._line_special(kind_b, pos_b)

        self._combo(kind_a, pos_a, kind_b, pos_b)

    def _rainbow(self, rainbow: int, other: int) -> None:
        x, y = self.grid.position(rainbow)
        color = self.grid.color(other)
        logger.debug("Rainbow at (%d, %d) clears %s", x, y, color)
        self.event_bus.emit(EVENT_SPECIAL_ACTIVATED, x=x, y=y, kind=PieceKind.RAINBOW)
        self.clears.clear_color(color)
        self.clears.clear(x, y)

    def _color_changer(self, changer: int, other: int) -> None:
        changer_x, changer_y = self.grid.position(changer)
        signature = self.grid.color(changer)
        target_color = self.grid.color(other)
        target_kind = self.grid.kind(other)
        logger.debug(
            "ColorChanger at (%d, %d) turns %s and %s into %s %s",
            changer_x, changer_y, signature, target_color, target_kind.name, target_color,
        )
        self.event_bus.emit(EVENT_SPECIAL_ACTIVATED, x=changer_x, y=changer_y, kind=PieceKind.COLOR_CHANGER)
        for x in range(self.grid.x_dim):
            for y in range(self.grid.y_dim):
                entity = self.grid.get(x, y)
                if not is_colored(self.grid.kind(entity)) or self.grid.is_being_cleared(entity):
                    continue
                if self.grid.color(entity) not in (signature, target_color):
                    continue
                if target_kind is PieceKind.NORMAL:
                    self.grid.set_color(entity, target_color)
                else:
                    self.grid.spawn(x, y, target_kind, target_color)
                    self.clears.clear(x, y)
        self.clears.clear(changer_x, changer_y)

    def _line_special(self, kind: PieceKind, position: Position) -> None:
        x, y = position
        if kind is PieceKind.ROW_CLEAR:
            self.clears.clear_row(y)
            self.clears.clear(x, y)
        elif kind is PieceKind.COLUMN_CLEAR:
            self.clears.clear_column(x)
            self.clears.clear(x, y)

    def _combo(self, kind_a: PieceKind, pos_a: Position, kind_b: PieceKind, pos_b: Position) -> None:
        kinds = {kind_a, kind_b}
        (ax, ay), (bx, by) = pos_a, pos_b
        if kinds == {PieceKind.ROW_CLEAR, PieceKind.COLUMN_CLEAR}:
            self.clears.clear_cross(ax, ay, bx, by)
        elif kind_a is PieceKind.ROW_CLEAR and kind_b is PieceKind.ROW_CLEAR:
            self.clears.clear_row(ay)
            self.clears.clear_row(by)
        elif kind_a is PieceKind.COLUMN_CLEAR and kind_b is PieceKind.COLUMN_CLEAR:
            self.clears.clear_column(ax)
            self.clears.clear_column(bx)
        else:
            return
        self.clears.clear(ax, ay)
        self.clears.clear(bx, by)
