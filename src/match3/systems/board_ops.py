"""Read-only board queries: stability checks, move hints and text dumps."""
from __future__ import annotations

from typing import List, Tuple

from match3.components.piece import PieceKind, is_clearable, is_movable
from match3.components.tile_color import ColorType
from match3.systems.grid import GridState
from match3.systems.match import Match, MatchDetector

Position = Tuple[int, int]

KIND_SYMBOLS = {
    PieceKind.EMPTY: '.',
    PieceKind.NORMAL: 'o',
    PieceKind.BUBBLE: '#',
    PieceKind.ROW_CLEAR: '-',
    PieceKind.COLUMN_CLEAR: '|',
    PieceKind.RAINBOW: '*',
    PieceKind.COLOR_CHANGER: '@',
}
COLOR_SYMBOLS = {
    ColorType.YELLOW: 'Y',
    ColorType.PURPLE: 'P',
    ColorType.RED: 'R',
    ColorType.BLUE: 'B',
    ColorType.GREEN: 'G',
    ColorType.PINK: 'K',
    ColorType.ANY: '?',
}


def find_all_matches(grid: GridState, detector: MatchDetector) -> List[Match]:
    """Matches found from every clearable cell, row-major, without clearing anything."""
    matches: List[Match] = []
    for x, y, entity in grid.cells():
        if not is_clearable(grid.kind(entity)):
            continue
        match = detector.find_match(entity, x, y)
        if match is not None:
            matches.append(match)
    return matches


def swap_creates_match(grid: GridState, detector: MatchDetector, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would be accepted by the swap controller."""
    tile_a = grid.get(*src)
    tile_b = grid.get(*dst)
    if not is_movable(grid.kind(tile_a)) or not is_movable(grid.kind(tile_b)):
        return False
    if grid.kind(tile_a) in (PieceKind.RAINBOW, PieceKind.COLOR_CHANGER):
        return True
    if grid.kind(tile_b) in (PieceKind.RAINBOW, PieceKind.COLOR_CHANGER):
        return True
    grid.swap_cells(src, dst)
    try:
        return (
            detector.find_match(tile_a, *dst) is not None
            or detector.find_match(tile_b, *src) is not None
        )
    finally:
        grid.swap_cells(src, dst)


def find_valid_swaps(grid: GridState, detector: MatchDetector) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps the controller would commit."""
    swaps: List[Tuple[Position, Position]] = []
    for y in range(grid.y_dim):
        for x in range(grid.x_dim):
            right = (x + 1, y)
            if grid.is_in_bounds(*right) and swap_creates_match(grid, detector, (x, y), right):
                swaps.append(((x, y), right))
            down = (x, y + 1)
            if grid.is_in_bounds(*down) and swap_creates_match(grid, detector, (x, y), down):
                swaps.append(((x, y), down))
    return swaps


def board_to_rows(grid: GridState) -> List[str]:
    """One string per row; colored tiles append a color letter to the kind symbol."""
    rows: List[str] = []
    for y in range(grid.y_dim):
        cells = []
        for x in range(grid.x_dim):
            entity = grid.get(x, y)
            symbol = KIND_SYMBOLS[grid.kind(entity)]
            color = grid.color(entity)
            cells.append(symbol + (COLOR_SYMBOLS[color] if color is not None else ' '))
        rows.append(' '.join(cells))
    return rows
