from dataclasses import dataclass


@dataclass(slots=True)
class GridPosition:
    """Cell coordinates of a tile entity; y = 0 is the top row."""
    x: int
    y: int
