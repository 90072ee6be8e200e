from dataclasses import dataclass


@dataclass(slots=True)
class Clearable:
    """Marks a tile that can be cleared.

    being_cleared flips to True the moment the clear primitive claims the tile and
    stays set until the cell is replaced by an Empty tile.
    """
    being_cleared: bool = False
