import random

import pytest

from coinmerge.components.grid_config import GridConfig
from coinmerge.events.bus import (EventBus, EVENT_ANIMATION_FAILED, EVENT_ANIMATION_START,
                                  EVENT_COLLAPSE_COMPLETE, EVENT_COLLAPSE_STARTED, EVENT_GRID_TEARDOWN)
from coinmerge.constants import DEFAULT_VALUES
from coinmerge.systems.animation import AnimationSystem
from coinmerge.systems.board import BoardSystem
from coinmerge.systems.board_ops import SettleSource
from coinmerge.systems.collapse import CollapseSystem
from coinmerge.world import create_world
from tests.helpers import drive, record


def build(layout, animate=True):
    bus = EventBus()
    config = GridConfig(rows=len(layout), cols=len(layout[0]))
    world = create_world(bus, config, rng=random.Random(5))
    board = BoardSystem(world, bus)
    board.load(layout)
    if animate:
        AnimationSystem(world, bus)
    collapse = CollapseSystem(world, bus)
    return bus, board, collapse


def test_column_settles_with_survivors_at_bottom():
    bus, board, collapse = build([[None], [7], [None], [3]])
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    ops = collapse.collapse()
    assert sorted(op.dst for op in ops) == [(0, 0), (1, 0), (2, 0)]
    # Sources are emptied at once; destinations wait for their fall.
    assert board.snapshot() == [[None], [None], [None], [3]]
    assert done == []
    drive(bus, 60)
    column = [row[0] for row in board.snapshot()]
    assert column[2:] == [7, 3]
    assert column[0] in DEFAULT_VALUES and column[1] in DEFAULT_VALUES
    assert done == [{'settled': 3}]
    assert not collapse.active


def test_full_grid_completes_immediately():
    bus, board, collapse = build([[1, 5], [10, 25]])
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    started = record(bus, EVENT_COLLAPSE_STARTED)
    assert collapse.collapse() == []
    assert done == [{'settled': 0}]
    assert started == []
    assert board.snapshot() == [[1, 5], [10, 25]]


def test_each_destination_commits_on_its_own_fall():
    bus, board, collapse = build([[None], [None], [5]])
    committed = []
    ops = collapse.collapse()
    assert all(op.source is SettleSource.GENERATED for op in ops)
    shortest = min(op.duration for op in ops)
    longest = max(op.duration for op in ops)
    ticks = 0
    while ticks * 0.01 < longest + 0.02:
        drive(bus, 1, dt=0.01)
        ticks += 1
        filled = [r for r in range(2) if board.get_value(r, 0) is not None]
        committed.append(len(filled))
        if ticks * 0.01 < shortest - 0.01:
            assert filled == []
    assert committed[-1] == 2


def test_overlapping_collapse_is_refused():
    bus, board, collapse = build([[None], [1]])
    collapse.collapse()
    with pytest.raises(RuntimeError):
        collapse.collapse()


def test_failed_fall_commits_without_animation():
    bus, board, collapse = build([[None], [10], [None]])
    starts = record(bus, EVENT_ANIMATION_START)
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    collapse.collapse()
    token = starts[-1]['token']
    bus.emit(EVENT_ANIMATION_FAILED, kind='fall', items=[], token=token, reason='renderer_gone')
    column = [row[0] for row in board.snapshot()]
    assert column[2] == 10
    assert None not in column
    assert done and done[0]['settled'] == 3


def test_watchdog_commits_when_no_animation_reports():
    bus, board, collapse = build([[None], [25]], animate=False)
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    collapse.collapse()
    drive(bus, 20)
    assert done == []
    drive(bus, 60)
    assert done == [{'settled': 1}]
    assert board.get_value(0, 0) is not None


def test_teardown_drops_pending_ops():
    bus, board, collapse = build([[None], [50]])
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    collapse.collapse()
    bus.emit(EVENT_GRID_TEARDOWN)
    drive(bus, 100)
    assert board.snapshot() == [[None], [50]]
    assert done == []
    assert collapse.collapse() == []


def test_cancelled_fall_commits_and_completes():
    bus = EventBus()
    world = create_world(bus, GridConfig(rows=3, cols=1), rng=random.Random(5))
    board = BoardSystem(world, bus)
    board.load([[None], [10], [None]])
    animation = AnimationSystem(world, bus)
    collapse = CollapseSystem(world, bus)
    starts = record(bus, EVENT_ANIMATION_START)
    failed = record(bus, EVENT_ANIMATION_FAILED)
    done = record(bus, EVENT_COLLAPSE_COMPLETE)
    collapse.collapse()
    assert animation.active_count('fall') == 3
    animation.cancel(starts[-1]['token'])
    assert animation.active_count() == 0
    assert failed[0]['reason'] == 'cancelled'
    assert len(failed[0]['items']) == 3
    column = [row[0] for row in board.snapshot()]
    assert column[2] == 10
    assert None not in column
    assert done == [{'settled': 3}]
    assert not collapse.active
