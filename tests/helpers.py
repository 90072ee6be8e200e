from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from match3.components.piece import PieceKind, is_colored
from match3.components.tile_color import ColorType
from match3.config import EngineConfig
from match3.world import Match3Engine

COLOR_CODES = {
    'R': ColorType.RED,
    'B': ColorType.BLUE,
    'G': ColorType.GREEN,
    'Y': ColorType.YELLOW,
    'P': ColorType.PURPLE,
    'K': ColorType.PINK,
}
SUFFIX_KINDS = {
    '-': PieceKind.ROW_CLEAR,
    '|': PieceKind.COLUMN_CLEAR,
    '*': PieceKind.RAINBOW,
    '@': PieceKind.COLOR_CHANGER,
}


def parse_token(token: str) -> Tuple[PieceKind, Optional[ColorType]]:
    """'.' empty, '#' bubble, '*' rainbow (ANY), 'R' red normal, 'R-' red row clear, ..."""
    if token == '.':
        return PieceKind.EMPTY, None
    if token == '#':
        return PieceKind.BUBBLE, None
    if token == '*':
        return PieceKind.RAINBOW, ColorType.ANY
    color = COLOR_CODES[token[0]]
    kind = SUFFIX_KINDS[token[1]] if len(token) > 1 else PieceKind.NORMAL
    return kind, color


def filler_layout(x_dim: int, y_dim: int, palette: str = "GYP") -> List[str]:
    """Match-free layout cycling three colors along both axes."""
    return [
        " ".join(palette[(x + y) % len(palette)] for x in range(x_dim))
        for y in range(y_dim)
    ]


def build_engine(
    layout: Sequence[str],
    overrides: Optional[Dict[Tuple[int, int], str]] = None,
    *,
    seed: int = 0,
    level=None,
    num_colors: int = 6,
) -> Match3Engine:
    """Engine whose board is exactly ``layout`` (rows top to bottom), with an empty event log."""
    rows = [row.split() for row in layout]
    y_dim = len(rows)
    x_dim = len(rows[0])
    engine = Match3Engine(
        EngineConfig(x_dim=x_dim, y_dim=y_dim, num_colors=num_colors),
        rng=random.Random(seed),
        level=level,
        fill=False,
    )
    cells = {(x, y): token for y, row in enumerate(rows) for x, token in enumerate(row)}
    cells.update(overrides or {})
    for (x, y), token in sorted(cells.items(), key=lambda item: (item[0][1], item[0][0])):
        kind, color = parse_token(token)
        engine.place(x, y, kind, color)
    engine.log.clear()
    return engine


def colored_count(engine: Match3Engine) -> int:
    return sum(1 for _, _, entity in engine.grid.cells() if is_colored(engine.grid.kind(entity)))


def events_before(engine: Match3Engine, name: str) -> List:
    """Logged entries up to (excluding) the first event called ``name``."""
    entries = []
    for entry in engine.log.entries:
        if entry.name == name:
            break
        entries.append(entry)
    return entries


class CountingLevel:
    def __init__(self):
        self.moves = 0

    def on_move(self):
        self.moves += 1
