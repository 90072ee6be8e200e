from dataclasses import dataclass
from enum import Enum


class ColorType(Enum):
    YELLOW = 0
    PURPLE = 1
    RED = 2
    BLUE = 3
    GREEN = 4
    PINK = 5
    ANY = 6


# Drawable colors in declaration order; ANY is a wildcard and never drawn.
PALETTE = [color for color in ColorType if color is not ColorType.ANY]


def palette(num_colors: int) -> list[ColorType]:
    """Return the first ``num_colors`` drawable colors (clamped to the palette)."""
    if num_colors < 1:
        raise ValueError("num_colors must be at least 1")
    return PALETTE[:num_colors]


@dataclass(slots=True)
class TileColor:
    """Color of a colored tile. Empty and Bubble tiles carry no TileColor."""
    color: ColorType
