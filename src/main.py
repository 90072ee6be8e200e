"""Entry point for a headless match-three session.

Builds an engine, then plays hinted swaps until the move budget runs out, printing the
board after every move.
"""
import random
import time

from match3.config import EngineConfig, PiecePosition
from match3.components.piece import PieceKind
from match3.constants import GRID_X_DIM, GRID_Y_DIM
from match3.events.bus import EVENT_CASCADE_COMPLETE, EVENT_SPECIAL_ACTIVATED
from match3.systems.board_ops import board_to_rows, find_valid_swaps
from match3.utils.logging_config import get_logger, setup_logging
from match3.world import Match3Engine

logger = get_logger("main")


class MoveLimitedLevel:
    """Level collaborator that ends the game after a fixed number of committed swaps."""

    def __init__(self, moves: int):
        self.moves_left = moves
        self.engine: Match3Engine | None = None

    def on_move(self):
        self.moves_left -= 1
        if self.moves_left <= 0 and self.engine is not None:
            self.engine.game_over()


def main(seed: int = 7, moves: int = 10):
    setup_logging("INFO")
    rng = random.Random(seed)
    level = MoveLimitedLevel(moves)
    config = EngineConfig(
        x_dim=GRID_X_DIM,
        y_dim=GRID_Y_DIM,
        initial_pieces=[
            PiecePosition(PieceKind.BUBBLE, 3, 4),
            PiecePosition(PieceKind.BUBBLE, 4, 4),
            PiecePosition(PieceKind.COLOR_CHANGER, 0, 7),
        ],
    )
    engine = Match3Engine(config, rng=rng, level=level)
    level.engine = engine
    engine.event_bus.subscribe(
        EVENT_SPECIAL_ACTIVATED,
        lambda sender, **k: logger.info("%s fired at (%d, %d)", k["kind"].name, k["x"], k["y"]),
    )
    engine.event_bus.subscribe(
        EVENT_CASCADE_COMPLETE,
        lambda sender, **k: logger.info("Cascade settled after %d rounds", k["depth"]),
    )
    print("\n".join(board_to_rows(engine.grid)))
    while not engine.is_game_over:
        swaps = find_valid_swaps(engine.grid, engine.detector)
        if not swaps:
            logger.info("No valid swaps left")
            break
        src, dst = rng.choice(swaps)
        logger.info("Swapping %s and %s", src, dst)
        engine.swap(src, dst)
        print("\n".join(board_to_rows(engine.grid)))
        print()
        time.sleep(engine.config.fill_time)


if __name__ == "__main__":
    main()
