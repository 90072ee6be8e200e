from dataclasses import dataclass
from enum import Enum, auto


class PieceKind(Enum):
    """Closed set of tile kinds the board can hold."""
    EMPTY = auto()
    NORMAL = auto()
    BUBBLE = auto()
    ROW_CLEAR = auto()
    COLUMN_CLEAR = auto()
    RAINBOW = auto()
    COLOR_CHANGER = auto()


_MOVABLE = frozenset(kind for kind in PieceKind if kind not in (PieceKind.EMPTY, PieceKind.BUBBLE))
_CLEARABLE = frozenset(kind for kind in PieceKind if kind is not PieceKind.EMPTY)
_COLORED = frozenset({
    PieceKind.NORMAL,
    PieceKind.ROW_CLEAR,
    PieceKind.COLUMN_CLEAR,
    PieceKind.RAINBOW,
    PieceKind.COLOR_CHANGER,
})


def is_movable(kind: PieceKind) -> bool:
    return kind in _MOVABLE


def is_clearable(kind: PieceKind) -> bool:
    return kind in _CLEARABLE


def is_colored(kind: PieceKind) -> bool:
    return kind in _COLORED


@dataclass(slots=True)
class Piece:
    """Kind of the tile entity. Capabilities are derived from the kind."""
    kind: PieceKind
