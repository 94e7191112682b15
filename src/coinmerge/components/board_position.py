from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Fixed slot of a cell entity; never changes for the lifetime of the grid."""
    row: int
    col: int
