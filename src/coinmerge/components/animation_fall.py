from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FallAnimation:
    """Visual proxy travelling from src to dst; src row is negative for spawned tiles."""
    src: Tuple[int,int]
    dst: Tuple[int,int]
    value: int
    linear: float = 0.0  # 0..1
