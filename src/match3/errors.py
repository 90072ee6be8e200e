class Match3Error(Exception):
    """Base class for engine failures that indicate a broken invariant."""


class GridIndexError(Match3Error, IndexError):
    """Raised when a grid cell outside the board is read or written."""

    def __init__(self, x: int, y: int, x_dim: int, y_dim: int):
        super().__init__(f"Cell ({x}, {y}) is outside the {x_dim}x{y_dim} grid")
        self.x = x
        self.y = y


class CascadeLimitError(Match3Error, RuntimeError):
    """Raised when a settle or cascade loop fails to reach a fixed point."""
