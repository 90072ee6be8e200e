from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Board:
    """Dense cell arena: cells[y * x_dim + x] holds the tile entity of that cell."""
    x_dim: int
    y_dim: int
    cells: List[int] = field(default_factory=list)

    def index(self, x: int, y: int) -> int:
        return y * self.x_dim + x

    def coords(self, index: int) -> tuple[int, int]:
        return index % self.x_dim, index // self.x_dim
