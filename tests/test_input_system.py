from coinmerge.events.bus import (EventBus, EVENT_MOUSE_DRAG, EVENT_MOUSE_PRESS, EVENT_MOUSE_RELEASE,
                                  EVENT_POINTER_DOWN, EVENT_POINTER_MOVE, EVENT_POINTER_UP, EVENT_TAP)
from coinmerge.systems.input import InputSystem
from coinmerge.ui.layout import BoardGeometry

GEO = BoardGeometry(rows=2, cols=2, square_size=50, gap=0, left=0, bottom=0)


def setup():
    bus = EventBus()
    InputSystem(bus, lambda: GEO)
    seen = []
    for name in (EVENT_POINTER_DOWN, EVENT_POINTER_MOVE, EVENT_POINTER_UP, EVENT_TAP):
        bus.subscribe(name, lambda s, _name=name, **k: seen.append((_name, k)))
    return bus, seen


def test_drag_emits_pointer_events():
    bus, seen = setup()
    bus.emit(EVENT_MOUSE_PRESS, x=10, y=90, button=1)
    bus.emit(EVENT_MOUSE_DRAG, x=60, y=90)
    bus.emit(EVENT_MOUSE_DRAG, x=500, y=500)
    bus.emit(EVENT_MOUSE_RELEASE, x=500, y=500, button=1)
    assert seen == [
        (EVENT_POINTER_DOWN, {'row': 0, 'col': 0}),
        (EVENT_POINTER_MOVE, {'row': 0, 'col': 1}),
        (EVENT_POINTER_MOVE, {'row': None, 'col': None}),
        (EVENT_POINTER_UP, {}),
    ]


def test_click_in_place_is_a_tap():
    bus, seen = setup()
    bus.emit(EVENT_MOUSE_PRESS, x=60, y=10, button=1)
    bus.emit(EVENT_MOUSE_RELEASE, x=61, y=11, button=1)
    assert seen[-2:] == [(EVENT_POINTER_UP, {}), (EVENT_TAP, {'row': 1, 'col': 1})]


def test_other_buttons_are_ignored():
    bus, seen = setup()
    bus.emit(EVENT_MOUSE_PRESS, x=10, y=10, button=4)
    bus.emit(EVENT_MOUSE_RELEASE, x=10, y=10, button=4)
    assert seen == []
