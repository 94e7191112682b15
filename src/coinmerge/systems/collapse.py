from __future__ import annotations

import logging
import random
from typing import Dict, List, Tuple

from esper import World

from coinmerge.constants import (
    SETTLE_WATCHDOG_GRACE,
    SHIFT_FALL_DURATION,
    SHIFT_FALL_JITTER,
    SPAWN_FALL_DURATION,
    SPAWN_FALL_JITTER,
)
from coinmerge.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_FAILED,
    EVENT_ANIMATION_START,
    EVENT_COLLAPSE_COMPLETE,
    EVENT_COLLAPSE_STARTED,
    EVENT_GRID_TEARDOWN,
    EVENT_TICK,
    EventBus,
)
from coinmerge.systems.board_ops import SettleOp, SettleSource, get_config, plan_collapse, set_value
from coinmerge.utils.weighted_picker import WeightedPicker

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class CollapseSystem:
    """Gravity and refill after cells have been cleared.

    Every column is planned from one snapshot, transplanted sources are emptied at
    once, and each destination receives its value only when its own fall animation
    reports completion. ``EVENT_COLLAPSE_COMPLETE`` fires after the last destination
    of the last column has been committed.
    """

    def __init__(self, world: World, event_bus: EventBus, picker: WeightedPicker | None = None):
        self.world = world
        self.event_bus = event_bus
        rng = getattr(world, "random", None)
        self.rng: random.Random = rng if isinstance(rng, random.Random) else random.Random()
        if picker is None:
            config = get_config(world)
            picker = WeightedPicker(config.values, config.weights, rng=self.rng)
        self.picker = picker
        self._pending: Dict[Position, SettleOp] = {}
        self._deadlines: Dict[Position, float] = {}
        self._token: Tuple[str, int] | None = None
        self._sequence = 0
        self._clock = 0.0
        self._settled = 0
        self._torn_down = False
        event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        event_bus.subscribe(EVENT_ANIMATION_FAILED, self.on_animation_failed)
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_GRID_TEARDOWN, self.on_teardown)

    @property
    def active(self) -> bool:
        return self._token is not None

    @property
    def pending_ops(self) -> List[SettleOp]:
        return list(self._pending.values())

    def collapse(self) -> List[SettleOp]:
        """Start a collapse and return its settle operations.

        A grid with no empty cells yields no operations and completes immediately.
        """
        if self._torn_down:
            return []
        if self._token is not None:
            raise RuntimeError("collapse already in progress")
        plans = plan_collapse(self.world, self.picker.pick)
        ops = [op for plan in plans for op in plan.ops]
        for plan in plans:
            for row, col in plan.sources_to_clear:
                set_value(self.world, row, col, None, self.event_bus)
        if not ops:
            self.event_bus.emit(EVENT_COLLAPSE_COMPLETE, settled=0)
            return []
        self._sequence += 1
        self._token = ("collapse", self._sequence)
        self._settled = 0
        for op in ops:
            op.duration = self._fall_duration(op)
            self._pending[op.dst] = op
            self._deadlines[op.dst] = self._clock + op.duration + SETTLE_WATCHDOG_GRACE
        logger.debug("collapse %s started with %d settle ops", self._token, len(ops))
        self.event_bus.emit(EVENT_COLLAPSE_STARTED, ops=list(ops))
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fall', items=list(ops), token=self._token)
        return ops

    def _fall_duration(self, op: SettleOp) -> float:
        if op.source is SettleSource.GENERATED:
            return SPAWN_FALL_DURATION + self.rng.random() * SPAWN_FALL_JITTER
        return SHIFT_FALL_DURATION + self.rng.random() * SHIFT_FALL_JITTER

    def on_animation_complete(self, sender, **kwargs):
        if kwargs.get('kind') != 'fall' or self._token is None:
            return
        if kwargs.get('token') != self._token:
            return
        for op in kwargs.get('items') or []:
            self._commit(op)

    def on_animation_failed(self, sender, **kwargs):
        if kwargs.get('kind') != 'fall' or self._token is None:
            return
        if kwargs.get('token') != self._token:
            return
        items = kwargs.get('items') or list(self._pending.values())
        logger.warning(
            "fall animation failed (%s); committing %d cells without animation",
            kwargs.get('reason'),
            len(items),
        )
        for op in list(items):
            self._commit(op)

    def on_tick(self, sender, **kwargs):
        if self._token is None:
            return
        self._clock += kwargs.get('dt', 1/60)
        overdue = [dst for dst, deadline in self._deadlines.items() if self._clock >= deadline]
        if overdue:
            logger.warning("settle watchdog committing %d overdue cells", len(overdue))
        for dst in overdue:
            op = self._pending.get(dst)
            if op is not None:
                self._commit(op)

    def on_teardown(self, sender, **kwargs):
        self._torn_down = True
        self._pending.clear()
        self._deadlines.clear()
        self._token = None

    def _commit(self, op: SettleOp) -> None:
        if self._pending.get(op.dst) is not op:
            return
        del self._pending[op.dst]
        self._deadlines.pop(op.dst, None)
        row, col = op.dst
        set_value(self.world, row, col, op.value, self.event_bus)
        self._settled += 1
        if not self._pending:
            settled = self._settled
            logger.debug("collapse %s complete, %d cells settled", self._token, settled)
            self._token = None
            self._settled = 0
            self.event_bus.emit(EVENT_COLLAPSE_COMPLETE, settled=settled)
