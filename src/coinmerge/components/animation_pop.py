from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class PopAnimation:
    pos: Tuple[int,int]
    linear: float = 0.0

    @property
    def scale(self) -> float:
        # 0.6 -> 1.2 over the first 60%, then back to 1.0
        if self.linear < 0.6:
            return 0.6 + 0.6 * (self.linear / 0.6)
        return 1.2 - 0.2 * ((self.linear - 0.6) / 0.4)
