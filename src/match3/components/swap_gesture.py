from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class SwapGesture:
    """In-progress player selection as flat cell indices (y * x_dim + x).

    After a committed swap both indices point at the cells the two tiles landed on,
    so ``pressed`` always follows the tile the player pressed.
    """
    pressed: Optional[int] = None
    entered: Optional[int] = None

    def reset(self) -> None:
        self.pressed = None
        self.entered = None

    @property
    def complete(self) -> bool:
        return self.pressed is not None and self.entered is not None
