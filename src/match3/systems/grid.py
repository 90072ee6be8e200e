from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from esper import World

from match3.components.board import Board
from match3.components.clearable import Clearable
from match3.components.grid_position import GridPosition
from match3.components.piece import Piece, PieceKind, is_clearable, is_colored
from match3.components.tile_color import ColorType, TileColor, palette
from match3.config import PiecePosition
from match3.constants import NUM_COLORS
from match3.errors import GridIndexError
from match3.events.bus import (
    EventBus,
    EVENT_TILE_MOVED,
    EVENT_TILE_RECOLORED,
    EVENT_TILE_SPAWNED,
)

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class TileView:
    """Read-only snapshot of one cell."""
    kind: PieceKind
    color: Optional[ColorType]
    x: int
    y: int
    being_cleared: bool = False


class GridState:
    """Owns the tile arena and every primitive that places or removes a tile entity.

    Each cell holds exactly one tile entity; an empty cell holds a tile of kind EMPTY.
    Only ``spawn`` and ``move`` change which entity occupies a cell, apart from the
    matrix-only exchange the swap controller uses while it validates a swap.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        x_dim: int,
        y_dim: int,
        initial_pieces: Iterable[PiecePosition] = (),
        *,
        num_colors: int = NUM_COLORS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.colors = palette(num_colors)
        self.board_entity = self.world.create_entity(Board(x_dim=x_dim, y_dim=y_dim))
        self.board: Board = self.world.component_for_entity(self.board_entity, Board)
        self.board.cells = [-1] * (x_dim * y_dim)
        self._populate(initial_pieces)

    @property
    def x_dim(self) -> int:
        return self.board.x_dim

    @property
    def y_dim(self) -> int:
        return self.board.y_dim

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def _populate(self, initial_pieces: Iterable[PiecePosition]) -> None:
        for placement in initial_pieces:
            kind = getattr(placement, "kind", None)
            x = getattr(placement, "x", None)
            y = getattr(placement, "y", None)
            if not isinstance(kind, PieceKind) or not isinstance(x, int) or not isinstance(y, int):
                logger.warning("Skipping malformed initial piece %r", placement)
                continue
            if not self.is_in_bounds(x, y):
                logger.warning("Skipping initial piece %s outside the board at (%d, %d)", kind.name, x, y)
                continue
            color = getattr(placement, "color", None)
            if color is None and is_colored(kind):
                color = ColorType.ANY if kind is PieceKind.RAINBOW else self.random_color()
            self.spawn(x, y, kind, color)
        for index, entity in enumerate(self.board.cells):
            if entity == -1:
                x, y = self.board.coords(index)
                self.spawn(x, y, PieceKind.EMPTY)

    def random_color(self) -> ColorType:
        return self.world.random.choice(self.colors)

    def _create_tile(self, x: int, y: int, kind: PieceKind, color: Optional[ColorType]) -> int:
        components = [Piece(kind=kind), GridPosition(x=x, y=y)]
        if is_colored(kind):
            components.append(TileColor(color=color if color is not None else ColorType.ANY))
        if is_clearable(kind):
            components.append(Clearable())
        return self.world.create_entity(*components)

    def _destroy(self, entity: int) -> None:
        if entity != -1 and self.world.entity_exists(entity):
            self.world.delete_entity(entity, immediate=True)

    def spawn(self, x: int, y: int, kind: PieceKind, color: Optional[ColorType] = None) -> int:
        """Replace the tile in (x, y) with a freshly created tile of ``kind``."""
        index = self._index(x, y)
        self._destroy(self.board.cells[index])
        entity = self._create_tile(x, y, kind, color)
        self.board.cells[index] = entity
        logger.debug("Spawned %s at (%d, %d)", kind.name, x, y)
        self.event_bus.emit(EVENT_TILE_SPAWNED, x=x, y=y, kind=kind, color=self.color(entity))
        return entity

    def spawn_from_above(self, x: int, kind: PieceKind, color: Optional[ColorType] = None) -> int:
        """Spawn a tile into row 0 that logically enters from the row above the board."""
        index = self._index(x, 0)
        self._destroy(self.board.cells[index])
        entity = self._create_tile(x, 0, kind, color)
        self.board.cells[index] = entity
        self.event_bus.emit(EVENT_TILE_SPAWNED, x=x, y=-1, kind=kind, color=self.color(entity))
        self.event_bus.emit(EVENT_TILE_MOVED, from_x=x, from_y=-1, to_x=x, to_y=0)
        return entity

    def move(self, from_x: int, from_y: int, to_x: int, to_y: int) -> int:
        """Relocate the tile in the source cell onto the target cell.

        The target's tile is destroyed and the source cell receives a new Empty tile.
        """
        src_index = self._index(from_x, from_y)
        dst_index = self._index(to_x, to_y)
        entity = self.board.cells[src_index]
        self._destroy(self.board.cells[dst_index])
        self.set(to_x, to_y, entity)
        self.board.cells[src_index] = -1
        self.event_bus.emit(EVENT_TILE_MOVED, from_x=from_x, from_y=from_y, to_x=to_x, to_y=to_y)
        self.spawn(from_x, from_y, PieceKind.EMPTY)
        return entity

    def get(self, x: int, y: int) -> int:
        return self.board.cells[self._index(x, y)]

    def set(self, x: int, y: int, entity: int) -> None:
        self.board.cells[self._index(x, y)] = entity
        position = self.world.component_for_entity(entity, GridPosition)
        position.x = x
        position.y = y

    def swap_cells(self, a: Position, b: Position) -> None:
        """Exchange the entities of two cells without touching their GridPosition."""
        ia = self._index(*a)
        ib = self._index(*b)
        self.board.cells[ia], self.board.cells[ib] = self.board.cells[ib], self.board.cells[ia]

    def commit_position(self, x: int, y: int) -> None:
        """Write the cell coordinates back into the tile that now occupies it."""
        self.set(x, y, self.get(x, y))

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------
    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.board.x_dim and 0 <= y < self.board.y_dim

    def _index(self, x: int, y: int) -> int:
        if not self.is_in_bounds(x, y):
            raise GridIndexError(x, y, self.board.x_dim, self.board.y_dim)
        return self.board.index(x, y)

    def index_of(self, x: int, y: int) -> int:
        return self._index(x, y)

    def coords_of(self, index: int) -> Position:
        return self.board.coords(index)

    # ------------------------------------------------------------------
    # Tile accessors
    # ------------------------------------------------------------------
    def kind(self, entity: int) -> PieceKind:
        return self.world.component_for_entity(entity, Piece).kind

    def color(self, entity: int) -> Optional[ColorType]:
        tile_color = self.world.try_component(entity, TileColor)
        return tile_color.color if tile_color is not None else None

    def set_color(self, entity: int, color: ColorType) -> None:
        tile_color = self.world.component_for_entity(entity, TileColor)
        tile_color.color = color
        position = self.position(entity)
        self.event_bus.emit(EVENT_TILE_RECOLORED, x=position[0], y=position[1], color=color)

    def position(self, entity: int) -> Position:
        position = self.world.component_for_entity(entity, GridPosition)
        return position.x, position.y

    def is_being_cleared(self, entity: int) -> bool:
        clearable = self.world.try_component(entity, Clearable)
        return clearable is not None and clearable.being_cleared

    def kind_at(self, x: int, y: int) -> PieceKind:
        return self.kind(self.get(x, y))

    def color_at(self, x: int, y: int) -> Optional[ColorType]:
        return self.color(self.get(x, y))

    def tile_view(self, x: int, y: int) -> TileView:
        entity = self.get(x, y)
        position = self.world.component_for_entity(entity, GridPosition)
        return TileView(
            kind=self.kind(entity),
            color=self.color(entity),
            x=position.x,
            y=position.y,
            being_cleared=self.is_being_cleared(entity),
        )

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (x, y, entity) in row-major order."""
        for index, entity in enumerate(self.board.cells):
            x, y = self.board.coords(index)
            yield x, y, entity

    def snapshot(self) -> Tuple[TileView, ...]:
        return tuple(self.tile_view(x, y) for x, y, _ in self.cells())

    def positions_of(self, kind: PieceKind) -> List[Position]:
        return [(x, y) for x, y, entity in self.cells() if self.kind(entity) is kind]
