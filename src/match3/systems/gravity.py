from __future__ import annotations

import logging

from match3.components.engine_state import EngineState
from match3.components.piece import PieceKind, is_movable
from match3.errors import CascadeLimitError
from match3.systems.grid import GridState

logger = logging.getLogger(__name__)


class GravityEngine:
    """Moves tiles one cell toward the bottom per settle step and refills row 0.

    Row 0 is the top of the board. A tile falls straight when the cell below is Empty,
    otherwise it may slide diagonally into an Empty cell whose column is capped by an
    obstacle, so nothing else would ever fall into it.
    """

    def __init__(self, grid: GridState, state: EngineState, *, max_settle_steps: int):
        self.grid = grid
        self.state = state
        self.max_settle_steps = max_settle_steps

    def settle_step(self) -> bool:
        moved = False
        x_dim = self.grid.x_dim
        # Only cells empty before this step are refilled; a tile leaving row 0 during
        # the step is replaced on the next one.
        refill = [x for x in range(x_dim) if self.grid.kind_at(x, 0) is PieceKind.EMPTY]
        # The bottom row can't fall any further.
        for y in range(self.grid.y_dim - 2, -1, -1):
            for loop_x in range(x_dim):
                x = x_dim - 1 - loop_x if self.state.inverse else loop_x
                if not is_movable(self.grid.kind_at(x, y)):
                    continue
                if self.grid.kind_at(x, y + 1) is PieceKind.EMPTY:
                    self.grid.move(x, y, x, y + 1)
                    moved = True
                elif self._slide_diagonally(x, y):
                    moved = True

        for x in refill:
            if self.grid.kind_at(x, 0) is not PieceKind.EMPTY:
                continue
            self.grid.spawn_from_above(x, PieceKind.NORMAL, self.grid.random_color())
            moved = True

        if moved:
            self.state.inverse = not self.state.inverse
        return moved

    def _slide_diagonally(self, x: int, y: int) -> bool:
        for diag in (-1, 1):
            diag_x = x - diag if self.state.inverse else x + diag
            if not self.grid.is_in_bounds(diag_x, y + 1):
                continue
            if self.grid.kind_at(diag_x, y + 1) is not PieceKind.EMPTY:
                continue
            if self._column_feeds(diag_x, y):
                continue
            self.grid.move(x, y, diag_x, y + 1)
            return True
        return False

    def _column_feeds(self, x: int, from_y: int) -> bool:
        """True unless an obstacle caps column x above from_y before any movable tile.

        A column that stays empty up to the top row is fed by the refill.
        """
        for above_y in range(from_y, -1, -1):
            kind = self.grid.kind_at(x, above_y)
            if is_movable(kind):
                return True
            if kind is not PieceKind.EMPTY:
                return False
        return True

    def settle(self) -> int:
        """Run settle steps until nothing moves; returns the number of steps that moved."""
        steps = 0
        while self.settle_step():
            steps += 1
            if steps > self.max_settle_steps:
                raise CascadeLimitError(f"Board did not settle within {self.max_settle_steps} steps")
        return steps
