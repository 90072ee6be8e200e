from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from match3.components.piece import is_colored
from match3.components.tile_color import ColorType
from match3.constants import MIN_MATCH_SIZE, RAINBOW_MATCH_SIZE
from match3.systems.grid import GridState

Position = Tuple[int, int]


@dataclass(slots=True)
class Match:
    """Tiles of one qualifying run, in detection order.

    ``is_horizontal_primary`` is True when the horizontal scan produced the match,
    which includes every plus-shaped match whatever its real orientation.
    """
    tiles: List[int] = field(default_factory=list)
    positions: List[Position] = field(default_factory=list)
    is_horizontal_primary: bool = False

    def add(self, entity: int, position: Position) -> None:
        self.tiles.append(entity)
        self.positions.append(position)

    def extend(self, other: "Match") -> None:
        self.tiles.extend(other.tiles)
        self.positions.extend(other.positions)

    def __len__(self) -> int:
        return len(self.tiles)


class MatchDetector:
    """Finds the maximal match through a tile placed at a given cell.

    The scan order is fixed: horizontal first (with the plus-shape short circuit and a
    single L/T branch), vertical only when no horizontal run of three exists.
    """

    def __init__(self, grid: GridState):
        self.grid = grid

    def find_match(self, entity: int, at_x: int, at_y: int) -> Optional[Match]:
        kind = self.grid.kind(entity)
        if not is_colored(kind):
            return None
        color = self.grid.color(entity)
        if color is None:
            return None

        horizontal = self._line(entity, color, at_x, at_y, dx=1, dy=0)
        if len(horizontal) == RAINBOW_MATCH_SIZE:
            plus = self._plus_shape(horizontal, color)
            if plus is not None:
                return plus
        if len(horizontal) >= MIN_MATCH_SIZE:
            horizontal.is_horizontal_primary = True
            self._extend_perpendicular(horizontal, color, dx=0, dy=1)
            return horizontal

        vertical = self._line(entity, color, at_x, at_y, dx=0, dy=1)
        if len(vertical) >= MIN_MATCH_SIZE:
            vertical.is_horizontal_primary = False
            self._extend_perpendicular(vertical, color, dx=1, dy=0)
            return vertical
        return None

    def _line(self, entity: int, color: ColorType, x: int, y: int, *, dx: int, dy: int) -> Match:
        """Origin first, then same-colored tiles in the negative direction, then the positive one."""
        run = Match()
        run.add(entity, (x, y))
        for step in (-1, 1):
            for cell_entity, cell in self._walk(color, x, y, dx * step, dy * step):
                run.add(cell_entity, cell)
        return run

    def _walk(self, color: ColorType, x: int, y: int, dx: int, dy: int):
        cx, cy = x + dx, y + dy
        while self.grid.is_in_bounds(cx, cy):
            cell_entity = self.grid.get(cx, cy)
            if not self._same_color(cell_entity, color):
                break
            yield cell_entity, (cx, cy)
            cx += dx
            cy += dy

    def _same_color(self, entity: int, color: ColorType) -> bool:
        # Tiles claimed by a clear keep their color until the next flush.
        if not is_colored(self.grid.kind(entity)):
            return False
        return self.grid.color(entity) == color

    def _plus_shape(self, horizontal: Match, color: ColorType) -> Optional[Match]:
        xs = sorted(x for x, _ in horizontal.positions)
        middle_x = xs[len(xs) // 2]
        row = horizontal.positions[0][1]
        for dy in (-1, 1):
            y = row + dy
            if not self.grid.is_in_bounds(middle_x, y):
                continue
            cell_entity = self.grid.get(middle_x, y)
            if self._same_color(cell_entity, color):
                plus = Match(is_horizontal_primary=True)
                plus.extend(horizontal)
                plus.add(cell_entity, (middle_x, y))
                return plus
        return None

    def _extend_perpendicular(self, primary: Match, color: ColorType, *, dx: int, dy: int) -> None:
        """Union the first perpendicular run of two or more extra tiles, then stop."""
        for x, y in list(primary.positions):
            branch = Match()
            for step in (-1, 1):
                for cell_entity, cell in self._walk(color, x, y, dx * step, dy * step):
                    branch.add(cell_entity, cell)
            if len(branch) >= 2:
                primary.extend(branch)
                return
