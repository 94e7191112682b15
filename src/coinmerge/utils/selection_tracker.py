from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

Position = Tuple[int, int]


class SelectionChange(Enum):
    ADDED = auto()
    REMOVED = auto()
    IGNORED = auto()


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return abs(ar - br) + abs(ac - bc) == 1


@dataclass(slots=True)
class SelectionTracker:
    """Owns the in-progress drag path.

    The tracker is either empty or active. While active it accepts cells that are
    4-adjacent to *any* cell already in the path and whose value is compatible with the
    first cell's value. Retracing onto the second-to-last cell undoes the last step.
    Rejected candidates are silent no-ops.

    ``compatible`` decides value compatibility; it defaults to plain equality.
    """

    compatible: Optional[Callable[[int, int], bool]] = field(default=None, repr=False)

    _path: List[Position] = field(init=False, default_factory=list)
    _base_value: Optional[int] = field(init=False, default=None)

    @property
    def active(self) -> bool:
        return bool(self._path)

    @property
    def path(self) -> List[Position]:
        return list(self._path)

    @property
    def base_value(self) -> Optional[int]:
        return self._base_value

    def __len__(self) -> int:
        return len(self._path)

    def __contains__(self, pos: Position) -> bool:
        return pos in self._path

    def begin(self, pos: Position, value: Optional[int]) -> bool:
        if self._path or value is None:
            return False
        self._path = [pos]
        self._base_value = value
        return True

    def extend(self, pos: Position, value: Optional[int]) -> SelectionChange:
        path = self._path
        if not path:
            return SelectionChange.IGNORED
        if len(path) >= 2 and path[-2] == pos:
            path.pop()
            return SelectionChange.REMOVED
        if pos in path:
            return SelectionChange.IGNORED
        if not self._value_compatible(value):
            return SelectionChange.IGNORED
        if not any(is_adjacent(p, pos) for p in path):
            return SelectionChange.IGNORED
        path.append(pos)
        return SelectionChange.ADDED

    def end(self) -> List[Position]:
        finished = self._path
        self._path = []
        self._base_value = None
        return finished

    def _value_compatible(self, value: Optional[int]) -> bool:
        if value is None or self._base_value is None:
            return False
        if self.compatible is None:
            return value == self._base_value
        return self.compatible(self._base_value, value)
