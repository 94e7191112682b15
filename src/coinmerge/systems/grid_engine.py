from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from esper import World

from coinmerge.components.interaction_state import InteractionPhase, InteractionState
from coinmerge.constants import JACKPOT_FADE_DURATION, MERGE_CLEAR_DELAY
from coinmerge.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_FAILED,
    EVENT_ANIMATION_START,
    EVENT_CASCADE_COMPLETE,
    EVENT_COLLAPSE_COMPLETE,
    EVENT_GRID_TEARDOWN,
    EVENT_INTERACTION_CHANGED,
    EVENT_JACKPOT_COLLECTED,
    EVENT_MERGE_ACCEPTED,
    EVENT_MERGE_REJECTED,
    EVENT_POINTER_DOWN,
    EVENT_POINTER_MOVE,
    EVENT_POINTER_UP,
    EVENT_SCORE_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_TAP,
    EVENT_TILE_HIGHLIGHT,
    EventBus,
)
from coinmerge.systems.auto_merge import AutoMergeSystem
from coinmerge.systems.board_ops import (SettleOp, get_config, get_interaction, get_score, get_value, in_bounds,
                                         set_value)
from coinmerge.systems.collapse import CollapseSystem
from coinmerge.utils.merge_rules import resolve
from coinmerge.utils.selection_tracker import SelectionChange, SelectionTracker

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(slots=True)
class PendingClear:
    """Cells waiting for the reveal delay before a merge or jackpot is applied."""
    token: Tuple[str, int]
    target: Position
    others: List[Position] = field(default_factory=list)
    value: Optional[int] = None
    award: int = 0
    reason: str = 'merge'


class GridEngine:
    """Interaction state machine for one grid.

    IDLE -> SELECTING on pointer-down over a tile, SELECTING -> IDLE on release of a
    path shorter than the minimum run, otherwise RESOLVING. A rejected merge shakes the
    target and returns to IDLE; an accepted one clears cells after the reveal delay and
    COLLAPSING lasts until gravity (and, with auto merge, the cascade) has settled.
    Input outside IDLE/SELECTING is ignored.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        collapse: CollapseSystem | None = None,
        auto_merge: AutoMergeSystem | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.config = get_config(world)
        self.collapse = collapse or CollapseSystem(world, event_bus)
        self.auto_merge = auto_merge or AutoMergeSystem(world, event_bus, self.collapse)
        self.tracker = SelectionTracker(compatible=self.config.compatible)
        self._pending: PendingClear | None = None
        self._sequence = 0
        self.event_bus.subscribe(EVENT_POINTER_DOWN, self.on_pointer_down)
        self.event_bus.subscribe(EVENT_POINTER_MOVE, self.on_pointer_move)
        self.event_bus.subscribe(EVENT_POINTER_UP, self.on_pointer_up)
        self.event_bus.subscribe(EVENT_TAP, self.on_tap)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        self.event_bus.subscribe(EVENT_ANIMATION_FAILED, self.on_animation_complete)
        self.event_bus.subscribe(EVENT_COLLAPSE_COMPLETE, self.on_collapse_complete)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_cascade_complete)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> InteractionState:
        return get_interaction(self.world)

    @property
    def phase(self) -> InteractionPhase:
        return self.state.phase

    @property
    def score(self) -> int:
        return get_score(self.world).value

    @property
    def selection(self) -> List[Position]:
        return self.tracker.path

    def subscribe_score(self, fn: Callable[[int], None]) -> None:
        """Call fn with the current score now and with the new score on every change."""
        self.event_bus.subscribe(EVENT_SCORE_CHANGED, lambda sender, **kw: fn(kw['score']))
        fn(self.score)

    def _set_phase(self, phase: InteractionPhase) -> None:
        state = self.state
        previous = state.phase
        if previous == phase:
            return
        state.phase = phase
        logger.debug("interaction %s -> %s", previous.name, phase.name)
        self.event_bus.emit(EVENT_INTERACTION_CHANGED, previous=previous, phase=phase)

    def _award(self, amount: int, reason: str) -> None:
        if amount <= 0:
            return
        score = get_score(self.world)
        score.value += amount
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=amount, reason=reason)

    def _next_token(self, kind: str) -> Tuple[str, int]:
        self._sequence += 1
        return (kind, self._sequence)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def on_pointer_down(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        state = self.state
        if state.torn_down or state.phase != InteractionPhase.IDLE:
            return
        if not in_bounds(self.world, row, col):
            return
        if not self.tracker.begin((row, col), get_value(self.world, row, col)):
            return
        self._set_phase(InteractionPhase.SELECTING)
        self.event_bus.emit(EVENT_TILE_HIGHLIGHT, row=row, col=col, on=True)
        self.event_bus.emit(EVENT_SELECTION_CHANGED, path=self.tracker.path)

    def on_pointer_move(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        state = self.state
        if state.torn_down or state.phase != InteractionPhase.SELECTING:
            return
        if not in_bounds(self.world, row, col):
            return
        before = self.tracker.path
        change = self.tracker.extend((row, col), get_value(self.world, row, col))
        if change is SelectionChange.IGNORED:
            return
        if change is SelectionChange.REMOVED:
            r, c = before[-1]
            self.event_bus.emit(EVENT_TILE_HIGHLIGHT, row=r, col=c, on=False)
        else:
            self.event_bus.emit(EVENT_TILE_HIGHLIGHT, row=row, col=col, on=True)
        self.event_bus.emit(EVENT_SELECTION_CHANGED, path=self.tracker.path)

    def on_pointer_up(self, sender, **kwargs):
        state = self.state
        if state.torn_down or state.phase != InteractionPhase.SELECTING:
            return
        path = self.tracker.end()
        for r, c in path:
            self.event_bus.emit(EVENT_TILE_HIGHLIGHT, row=r, col=c, on=False)
        self.event_bus.emit(EVENT_SELECTION_CHANGED, path=[])
        if len(path) < self.config.min_run_length:
            self._set_phase(InteractionPhase.IDLE)
            return
        self._set_phase(InteractionPhase.RESOLVING)
        self._resolve(path)

    def on_tap(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        state = self.state
        if state.torn_down or state.phase != InteractionPhase.IDLE:
            return
        if not in_bounds(self.world, row, col):
            return
        value = get_value(self.world, row, col)
        if not self.config.is_jackpot(value):
            return
        self._set_phase(InteractionPhase.RESOLVING)
        self._award(value, 'jackpot')
        self.event_bus.emit(EVENT_JACKPOT_COLLECTED, row=row, col=col, value=value)
        self.event_bus.emit(EVENT_ANIMATION_START, kind='pop', items=[(row, col)], token=self._next_token('pop'))
        token = self._next_token('jackpot')
        self._pending = PendingClear(token=token, target=(row, col), reason='jackpot')
        self.event_bus.emit(
            EVENT_ANIMATION_START,
            kind='fade',
            items=[(row, col)],
            token=token,
            duration=JACKPOT_FADE_DURATION,
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def _resolve(self, path: List[Position]) -> None:
        selected_values = [get_value(self.world, r, c) for r, c in path]
        outcome = resolve(
            selected_values,
            self.config.values,
            self.config.min_run_length,
            self.config.mix_groups,
        )
        target = path[-1]
        if not outcome.accepted:
            logger.debug("merge of %s rejected (%s)", selected_values, outcome.reason)
            self.event_bus.emit(EVENT_ANIMATION_START, kind='shake', items=[target], token=self._next_token('shake'))
            self.event_bus.emit(EVENT_MERGE_REJECTED, positions=list(path), target=target, reason=outcome.reason)
            self._set_phase(InteractionPhase.IDLE)
            return
        others = path[:-1]
        token = self._next_token('merge')
        self._pending = PendingClear(
            token=token,
            target=target,
            others=list(others),
            value=outcome.result_value,
            award=outcome.result_value,
            reason=outcome.reason,
        )
        self.event_bus.emit(
            EVENT_MERGE_ACCEPTED,
            positions=list(path),
            target=target,
            value=outcome.result_value,
            source='player',
        )
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fade', items=list(others), token=self._next_token('fade'))
        self.event_bus.emit(EVENT_ANIMATION_START, kind='pop', items=[target], token=self._next_token('pop'))
        self.event_bus.emit(
            EVENT_ANIMATION_START,
            kind='delay',
            items=[],
            token=token,
            duration=MERGE_CLEAR_DELAY,
        )

    def on_animation_complete(self, sender, **kwargs):
        pending = self._pending
        if pending is None or kwargs.get('token') != pending.token:
            return
        self._pending = None
        if self.state.torn_down:
            return
        if pending.reason == 'jackpot':
            set_value(self.world, pending.target[0], pending.target[1], None, self.event_bus)
        else:
            self._award(pending.award, 'merge')
            set_value(self.world, pending.target[0], pending.target[1], pending.value, self.event_bus)
            for r, c in pending.others:
                set_value(self.world, r, c, None, self.event_bus)
        self._set_phase(InteractionPhase.COLLAPSING)
        self.collapse.collapse()

    # ------------------------------------------------------------------
    # Settling
    # ------------------------------------------------------------------
    def on_collapse_complete(self, sender, **kwargs):
        if self.state.torn_down:
            return
        if self.auto_merge.active:
            self.auto_merge.on_collapse_complete()
            return
        if self.phase != InteractionPhase.COLLAPSING:
            return
        if self.config.auto_merge:
            self.auto_merge.start()
            return
        self._set_phase(InteractionPhase.IDLE)

    def on_cascade_complete(self, sender, **kwargs):
        if self.state.torn_down:
            return
        self._set_phase(InteractionPhase.IDLE)

    def settle(self) -> List[SettleOp]:
        """Collapse any empty cells while idle, as after an external board edit."""
        if self.state.torn_down or self.phase != InteractionPhase.IDLE:
            return []
        self._set_phase(InteractionPhase.COLLAPSING)
        return self.collapse.collapse()

    def teardown(self) -> None:
        """Cancel everything in flight; safe to call more than once."""
        state = self.state
        if state.torn_down:
            return
        logger.debug("grid teardown")
        self.tracker.end()
        self._pending = None
        state.torn_down = True
        state.phase = InteractionPhase.IDLE
        self.event_bus.emit(EVENT_GRID_TEARDOWN)
