"""Interaction phase resource shared by the grid systems."""
from dataclasses import dataclass
from enum import Enum, auto


class InteractionPhase(Enum):
    """Exactly one phase holds for the whole grid at any time."""
    IDLE = auto()
    SELECTING = auto()
    RESOLVING = auto()
    COLLAPSING = auto()


@dataclass(slots=True)
class InteractionState:
    """Singleton component storing the current interaction phase."""
    phase: InteractionPhase = InteractionPhase.IDLE
    torn_down: bool = False
