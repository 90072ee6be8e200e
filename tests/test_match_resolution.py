from match3.components.piece import PieceKind
from match3.components.tile_color import ColorType
from match3.events.bus import EVENT_MATCH_FOUND, EVENT_TILE_SPAWNED
from match3.systems.match import Match
from match3.systems.match_resolution import promotion_for
from tests.helpers import build_engine, colored_count, filler_layout


def specials_spawned(engine):
    return [
        e for e in engine.log.of(EVENT_TILE_SPAWNED)
        if e["kind"] not in (PieceKind.EMPTY, PieceKind.NORMAL)
    ]


def make_match(size, horizontal):
    match = Match(is_horizontal_primary=horizontal)
    for i in range(size):
        match.add(i, (i, 0))
    return match


def test_promotion_sizes():
    assert promotion_for(make_match(3, True)) is None
    assert promotion_for(make_match(4, True)) is PieceKind.COLUMN_CLEAR
    assert promotion_for(make_match(4, False)) is PieceKind.ROW_CLEAR
    assert promotion_for(make_match(5, False)) is PieceKind.RAINBOW
    assert promotion_for(make_match(6, True)) is None
    assert promotion_for(make_match(7, True)) is None


def test_no_match_resolves_nothing():
    engine = build_engine(filler_layout(5, 5))
    assert not engine.resolver.resolve_all_matches()
    assert len(engine.log) == 0


def test_three_match_clears_without_promotion():
    engine = build_engine(filler_layout(5, 5), {(0, 2): 'R', (1, 2): 'R', (2, 2): 'R'})

    assert engine.resolver.resolve_all_matches()

    assert engine.grid.positions_of(PieceKind.EMPTY) == [(0, 2), (1, 2), (2, 2)]
    assert specials_spawned(engine) == []
    found = engine.log.of(EVENT_MATCH_FOUND)
    assert len(found) == 1
    assert found[0]["size"] == 3 and found[0]["horizontal"] is True


def test_horizontal_four_promotes_to_column_clear():
    engine = build_engine(filler_layout(5, 5), {(x, 2): 'R' for x in range(4)})
    before = colored_count(engine)

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(0, 2) is PieceKind.COLUMN_CLEAR
    assert engine.grid.color_at(0, 2) is ColorType.RED
    assert engine.grid.positions_of(PieceKind.EMPTY) == [(1, 2), (2, 2), (3, 2)]
    assert before - colored_count(engine) == 3


def test_vertical_four_promotes_to_row_clear():
    engine = build_engine(filler_layout(5, 5), {(1, y): 'B' for y in range(4)})

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(1, 0) is PieceKind.ROW_CLEAR
    assert engine.grid.color_at(1, 0) is ColorType.BLUE
    assert engine.grid.positions_of(PieceKind.EMPTY) == [(1, 1), (1, 2), (1, 3)]


def test_five_in_a_row_promotes_to_rainbow():
    engine = build_engine(filler_layout(5, 5), {(x, 2): 'R' for x in range(5)})
    before = colored_count(engine)

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(0, 2) is PieceKind.RAINBOW
    assert engine.grid.color_at(0, 2) is ColorType.RED
    assert before - colored_count(engine) == 4


def test_plus_shape_clears_without_promotion():
    overrides = {(x, 2): 'R' for x in range(5)}
    overrides[(2, 1)] = 'R'
    engine = build_engine(filler_layout(5, 5), overrides)

    engine.resolver.resolve_all_matches()

    assert len(engine.grid.positions_of(PieceKind.EMPTY)) == 6
    assert specials_spawned(engine) == []


def test_promotion_lands_on_pressed_tile():
    engine = build_engine(filler_layout(5, 5), {(x, 2): 'R' for x in range(4)})
    engine.gesture.pressed = engine.grid.index_of(1, 2)
    engine.gesture.entered = engine.grid.index_of(1, 3)

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(1, 2) is PieceKind.COLUMN_CLEAR
    assert engine.grid.kind_at(0, 2) is PieceKind.EMPTY


def test_promotion_lands_on_entered_tile_when_pressed_tile_is_scanned():
    engine = build_engine(filler_layout(5, 5), {(x, 2): 'R' for x in range(4)})
    engine.gesture.pressed = engine.grid.index_of(0, 2)
    engine.gesture.entered = engine.grid.index_of(1, 3)

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(1, 3) is PieceKind.COLUMN_CLEAR
    assert engine.grid.color_at(1, 3) is ColorType.RED
    assert engine.grid.kind_at(0, 2) is PieceKind.EMPTY


def test_match_clears_adjacent_obstacles_only():
    engine = build_engine(filler_layout(5, 5), {
        (0, 2): 'R', (1, 2): 'R', (2, 2): 'R',
        (1, 3): '#', (4, 4): '#',
    })

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(1, 3) is PieceKind.EMPTY
    assert engine.grid.kind_at(4, 4) is PieceKind.BUBBLE
    assert (1, 3) not in engine.log.of(EVENT_MATCH_FOUND)[0]["positions"]


def test_matched_line_special_fires():
    engine = build_engine(filler_layout(5, 5), {(0, 0): 'R', (1, 0): 'R', (2, 0): 'R-'})

    engine.resolver.resolve_all_matches()

    assert [engine.grid.kind_at(x, 0) for x in range(5)] == [PieceKind.EMPTY] * 5


def test_overlapping_run_reuses_tile_cleared_earlier_in_pass():
    engine = build_engine(filler_layout(5, 5), {
        (0, 0): 'R', (0, 1): 'R', (0, 2): 'R',
        (1, 2): 'R', (2, 2): 'R',
        (2, 3): 'R', (2, 4): 'R',
    })

    engine.resolver.resolve_all_matches()

    # The lower arm picks up (2, 2) and the row branch through it, all still red.
    assert engine.grid.kind_at(2, 4) is PieceKind.EMPTY
    assert engine.grid.kind_at(2, 3) is PieceKind.RAINBOW
    assert engine.grid.color_at(2, 3) is ColorType.RED
    assert engine.grid.kind_at(0, 0) is PieceKind.RAINBOW
    assert [e["size"] for e in engine.log.of(EVENT_MATCH_FOUND)] == [5, 5]


def test_promoted_tile_survives_its_own_pass():
    engine = build_engine(filler_layout(5, 5), {
        (0, 0): 'R', (1, 0): 'R', (2, 0): 'R', (3, 0): 'R', (4, 0): 'B',
    })
    engine.gesture.pressed = engine.grid.index_of(4, 0)
    engine.gesture.entered = engine.grid.index_of(3, 0)

    engine.resolver.resolve_all_matches()

    assert engine.grid.kind_at(4, 0) is PieceKind.COLUMN_CLEAR
    assert engine.grid.color_at(4, 0) is ColorType.RED
    assert len(engine.log.of(EVENT_MATCH_FOUND)) == 1
