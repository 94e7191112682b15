from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True)
class TileValue:
    """Per-cell denomination.

    value: the tile's denomination, or None while the cell is empty. Empty cells only
    exist between a clear and the end of the following collapse.
    """
    value: Optional[int] = None
