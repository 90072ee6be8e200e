from match3.systems.board_ops import (
    board_to_rows,
    find_all_matches,
    find_valid_swaps,
    swap_creates_match,
)
from tests.helpers import build_engine, filler_layout


def test_filler_board_is_stable():
    engine = build_engine(filler_layout(5, 5))
    assert find_all_matches(engine.grid, engine.detector) == []


def test_valid_swaps_include_completing_move():
    engine = build_engine(filler_layout(5, 5), {(0, 0): 'R', (1, 0): 'R', (2, 0): 'R', (3, 0): 'B', (4, 0): 'R'})
    swaps = find_valid_swaps(engine.grid, engine.detector)
    assert ((3, 0), (4, 0)) in swaps


def test_swap_probe_restores_board():
    engine = build_engine(filler_layout(5, 5), {(0, 0): 'R', (1, 0): 'R', (2, 0): 'R', (3, 0): 'B', (4, 0): 'R'})
    before = engine.grid.snapshot()

    assert swap_creates_match(engine.grid, engine.detector, (3, 0), (4, 0))
    assert not swap_creates_match(engine.grid, engine.detector, (0, 2), (1, 2))

    assert engine.grid.snapshot() == before
    assert len(engine.log) == 0


def test_special_swaps_are_always_hinted():
    engine = build_engine(filler_layout(4, 4), {(2, 2): 'G@'})
    assert swap_creates_match(engine.grid, engine.detector, (2, 2), (2, 3))
    engine = build_engine(filler_layout(4, 4), {(0, 0): '#'})
    assert not swap_creates_match(engine.grid, engine.detector, (0, 0), (1, 0))


def test_board_to_rows():
    engine = build_engine([
        "R # .",
        "B- G| *",
        "Y@ P K",
    ])
    assert board_to_rows(engine.grid) == [
        "oR #  . ",
        "-B |G *?",
        "@Y oP oK",
    ]
