from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Tuple

from esper import World

from coinmerge.constants import AUTO_MERGE_CLEAR_DELAY
from coinmerge.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_FAILED,
    EVENT_ANIMATION_START,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRID_TEARDOWN,
    EVENT_MERGE_ACCEPTED,
    EventBus,
)
from coinmerge.systems.board_ops import Group, find_groups, get_config, get_value, set_value
from coinmerge.systems.collapse import CollapseSystem
from coinmerge.utils.merge_rules import next_denomination

logger = logging.getLogger(__name__)


class AutoMergeSystem:
    """Adjacency-driven merge cascade run after a collapse settles.

    A pass collects every group at least ``min_run_length`` long and merges them one
    at a time: the last enumerated cell becomes the next denomination, the rest fade,
    are cleared and collapsed, and only then does the next group start. A group that an
    earlier collapse in the same pass has disturbed is skipped; the following pass
    rediscovers whatever it has become. ``EVENT_CASCADE_COMPLETE`` ends every run,
    including runs that found nothing to merge.
    """

    def __init__(self, world: World, event_bus: EventBus, collapse: CollapseSystem):
        self.world = world
        self.event_bus = event_bus
        self.collapse = collapse
        self._queue: Deque[Group] = deque()
        self._current: Group | None = None
        self._delay_token: Tuple[str, int] | None = None
        self._sequence = 0
        self._depth = 0
        self._active = False
        self._torn_down = False
        event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        event_bus.subscribe(EVENT_ANIMATION_FAILED, self.on_animation_complete)
        event_bus.subscribe(EVENT_GRID_TEARDOWN, self.on_teardown)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def depth(self) -> int:
        return self._depth

    def start(self) -> None:
        if self._torn_down or self._active:
            return
        self._active = True
        self._depth = 0
        self._begin_pass()

    def on_collapse_complete(self) -> None:
        """Called by the grid engine once the collapse for the current group settled."""
        if not self._active or self._torn_down:
            return
        self._current = None
        self._process_next_group()

    def _begin_pass(self) -> None:
        config = get_config(self.world)
        if self._depth >= config.max_cascade_passes:
            logger.warning("auto-merge stopped after %d passes", self._depth)
            self._finish(capped=True)
            return
        groups = [g for g in find_groups(self.world) if len(g) >= config.min_run_length]
        if not groups:
            self._finish(capped=False)
            return
        self._depth += 1
        self._queue = deque(groups)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=self._depth, groups=len(groups))
        self._process_next_group()

    def _process_next_group(self) -> None:
        config = get_config(self.world)
        while self._queue:
            group = self._queue.popleft()
            if not self._intact(group):
                logger.debug("skipping stale group of %d x %s", len(group), group.value)
                continue
            target = group.cells[-1]
            others = group.cells[:-1]
            new_value = next_denomination(group.value, config.values)
            self._current = group
            self.event_bus.emit(
                EVENT_MERGE_ACCEPTED,
                positions=list(group.cells),
                target=target,
                value=new_value,
                source='auto',
            )
            self._sequence += 1
            self.event_bus.emit(EVENT_ANIMATION_START, kind='fade', items=list(others), token=('auto_fade', self._sequence))
            self.event_bus.emit(EVENT_ANIMATION_START, kind='pop', items=[target], token=('auto_pop', self._sequence))
            set_value(self.world, target[0], target[1], new_value, self.event_bus)
            self._sequence += 1
            self._delay_token = ('auto_merge', self._sequence)
            self.event_bus.emit(
                EVENT_ANIMATION_START,
                kind='delay',
                items=[],
                token=self._delay_token,
                duration=AUTO_MERGE_CLEAR_DELAY,
            )
            return
        self._begin_pass()

    def _intact(self, group: Group) -> bool:
        return all(get_value(self.world, r, c) == group.value for r, c in group.cells)

    def on_animation_complete(self, sender, **kwargs):
        if kwargs.get('kind') != 'delay' or self._delay_token is None:
            return
        if kwargs.get('token') != self._delay_token:
            return
        self._delay_token = None
        group = self._current
        if group is None or self._torn_down:
            return
        for row, col in group.cells[:-1]:
            set_value(self.world, row, col, None, self.event_bus)
        self.collapse.collapse()

    def on_teardown(self, sender, **kwargs):
        self._torn_down = True
        self._queue.clear()
        self._current = None
        self._delay_token = None
        self._active = False

    def _finish(self, *, capped: bool) -> None:
        depth = self._depth
        self._active = False
        self._queue.clear()
        self._current = None
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, capped=capped)
