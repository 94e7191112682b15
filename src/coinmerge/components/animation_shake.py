import math
from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class ShakeAnimation:
    pos: Tuple[int,int]
    linear: float = 0.0
    swings: int = 4

    @property
    def offset(self) -> float:
        """Horizontal displacement factor in [-1, 1]; 0 at both ends."""
        return math.sin(self.linear * self.swings * math.pi)
