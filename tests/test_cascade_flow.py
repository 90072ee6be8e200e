import random

import pytest

from match3.components.engine_state import EnginePhase
from match3.components.piece import PieceKind
from match3.config import EngineConfig, PiecePosition
from match3.errors import CascadeLimitError
from match3.systems.board_ops import find_all_matches, find_valid_swaps
from match3.world import Match3Engine, create_engine


def assert_stable(engine):
    assert engine.phase is EnginePhase.IDLE
    assert find_all_matches(engine.grid, engine.detector) == []
    assert engine.grid.positions_of(PieceKind.EMPTY) == []


def play(engine, rng, moves=5):
    for _ in range(moves):
        swaps = find_valid_swaps(engine.grid, engine.detector)
        if not swaps:
            break
        src, dst = rng.choice(swaps)
        assert engine.swap(src, dst)
        assert_stable(engine)


@pytest.mark.parametrize("seed", range(5))
def test_initial_fill_and_swaps_leave_board_stable(seed):
    engine = Match3Engine(EngineConfig(x_dim=6, y_dim=6), rng=random.Random(seed))
    assert_stable(engine)
    play(engine, random.Random(seed + 100))


def test_fill_flows_around_obstacles():
    config = EngineConfig(
        x_dim=6,
        y_dim=6,
        initial_pieces=[PiecePosition(PieceKind.BUBBLE, 2, 2), PiecePosition(PieceKind.BUBBLE, 3, 2)],
    )
    engine = create_engine(config, rng=random.Random(3))

    assert engine.phase is EnginePhase.IDLE
    assert find_all_matches(engine.grid, engine.detector) == []
    assert engine.grid.positions_of(PieceKind.EMPTY) == []


def test_same_seed_replays_identically():
    def run(seed):
        engine = Match3Engine(EngineConfig(x_dim=7, y_dim=7), rng=random.Random(seed))
        play(engine, random.Random(seed), moves=4)
        return engine.log.entries, engine.grid.snapshot()

    assert run(11) == run(11)


def test_cascade_cap_raises():
    engine = Match3Engine(EngineConfig(x_dim=4, y_dim=4, max_cascade_rounds=3), rng=random.Random(0), fill=False)
    engine.resolver.resolve_all_matches = lambda: True

    with pytest.raises(CascadeLimitError):
        engine.controller.run_cascade()


def test_place_refused_while_busy():
    engine = Match3Engine(EngineConfig(x_dim=4, y_dim=4), rng=random.Random(0), fill=False)
    engine.state.phase = EnginePhase.FILLING

    with pytest.raises(RuntimeError, match="in progress"):
        engine.place(0, 0, PieceKind.BUBBLE)
    with pytest.raises(RuntimeError, match="in progress"):
        engine.settle()


def test_settle_fills_manually_built_board():
    engine = Match3Engine(EngineConfig(x_dim=4, y_dim=4), rng=random.Random(5), fill=False)
    engine.place(1, 3, PieceKind.BUBBLE)

    assert engine.settle() >= 1
    assert_stable(engine)


def test_place_and_settle_refused_after_game_over():
    engine = Match3Engine(EngineConfig(x_dim=4, y_dim=4), rng=random.Random(0))
    engine.game_over()

    with pytest.raises(RuntimeError, match="after game over"):
        engine.place(0, 0, PieceKind.BUBBLE)
    with pytest.raises(RuntimeError, match="after game over"):
        engine.settle()


def test_fill_time_does_not_change_the_board():
    def snapshot(fill_time):
        engine = Match3Engine(
            EngineConfig(x_dim=6, y_dim=6, fill_time=fill_time),
            rng=random.Random(9),
        )
        play(engine, random.Random(9), moves=3)
        return engine.grid.snapshot()

    assert snapshot(0.0) == snapshot(2.5)
