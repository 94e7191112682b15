from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence, Tuple

from coinmerge.components.grid_config import GridConfig
from coinmerge.events.bus import (EventBus, EVENT_TICK, EVENT_POINTER_DOWN, EVENT_POINTER_MOVE,
                                  EVENT_POINTER_UP)
from coinmerge.grid import GridSystems, create_grid


def drive(bus: EventBus, ticks: int, dt: float = 0.02) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def make_grid(layout: Sequence[Sequence[Optional[int]]], seed: int = 7, **config) -> GridSystems:
    """Grid sized to layout and loaded with it, using a seeded rng for refills."""
    bus = EventBus()
    cfg = GridConfig(rows=len(layout), cols=len(layout[0]), **config)
    grid = create_grid(bus, cfg, rng=random.Random(seed))
    grid.board.load([list(row) for row in layout])
    return grid


def drag(bus: EventBus, cells: Iterable[Tuple[int, int]], release: bool = True) -> None:
    cells = list(cells)
    first = cells[0]
    bus.emit(EVENT_POINTER_DOWN, row=first[0], col=first[1])
    for r, c in cells[1:]:
        bus.emit(EVENT_POINTER_MOVE, row=r, col=c)
    if release:
        bus.emit(EVENT_POINTER_UP)


def record(bus: EventBus, name: str) -> List[dict]:
    """Collect the payload of every emission of one event."""
    seen: List[dict] = []
    bus.subscribe(name, lambda sender, **kw: seen.append(kw))
    return seen
