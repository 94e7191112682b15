from coinmerge.events.bus import (EventBus, EVENT_ANIMATION_COMPLETE, EVENT_ANIMATION_FAILED,
                                  EVENT_ANIMATION_START, EVENT_GRID_TEARDOWN)
from coinmerge.systems.animation import AnimationSystem
from coinmerge.world import create_world
from tests.helpers import drive, record


def setup():
    bus = EventBus()
    world = create_world(bus)
    anim = AnimationSystem(world, bus)
    return bus, world, anim


def test_fade_group_completes_once_all_items_done():
    bus, world, anim = setup()
    done = record(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ANIMATION_START, kind='fade', items=[(0, 0), (0, 1)], token='f1')
    assert anim.active_count('fade') == 2
    drive(bus, 5)
    assert done == []
    drive(bus, 10)
    assert done == [{'kind': 'fade', 'items': [(0, 0), (0, 1)], 'token': 'f1'}]
    assert anim.active_count() == 0


def test_delay_completes_after_duration():
    bus, world, anim = setup()
    done = record(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ANIMATION_START, kind='delay', items=[], token='d', duration=0.1)
    drive(bus, 4)
    assert done == []
    drive(bus, 2)
    assert done == [{'kind': 'delay', 'items': [], 'token': 'd'}]


def test_empty_group_completes_immediately():
    bus, world, anim = setup()
    done = record(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ANIMATION_START, kind='pop', items=[], token='p')
    assert done == [{'kind': 'pop', 'items': [], 'token': 'p'}]


def test_unknown_kind_and_bad_duration_fail():
    bus, world, anim = setup()
    failed = record(bus, EVENT_ANIMATION_FAILED)
    bus.emit(EVENT_ANIMATION_START, kind='spin', items=[(0, 0)], token='s')
    bus.emit(EVENT_ANIMATION_START, kind='fade', items=[(0, 0)], token='n', duration=-1)
    bus.emit(EVENT_ANIMATION_START, kind='fade', items=[(0, 0)], token='x', duration='soon')
    assert [f['reason'] for f in failed] == ['unknown_kind', 'invalid_duration', 'invalid_duration']
    assert anim.active_count() == 0


def test_cancel_reports_failure_and_stops_completion():
    bus, world, anim = setup()
    done = record(bus, EVENT_ANIMATION_COMPLETE)
    failed = record(bus, EVENT_ANIMATION_FAILED)
    bus.emit(EVENT_ANIMATION_START, kind='shake', items=[(1, 1)], token='sh')
    anim.cancel('sh')
    drive(bus, 30)
    assert done == []
    assert failed == [{'kind': 'shake', 'items': [(1, 1)], 'token': 'sh', 'reason': 'cancelled'}]


def test_teardown_deletes_without_completion():
    bus, world, anim = setup()
    done = record(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ANIMATION_START, kind='pop', items=[(0, 0)], token='p')
    bus.emit(EVENT_ANIMATION_START, kind='delay', items=[], token='d', duration=0.05)
    bus.emit(EVENT_GRID_TEARDOWN)
    drive(bus, 30)
    assert done == []
    assert anim.active_count() == 0
    bus.emit(EVENT_ANIMATION_START, kind='pop', items=[(0, 0)], token='late')
    assert anim.active_count() == 0
