from typing import Callable, Optional, Tuple

from coinmerge.events.bus import (
    EventBus,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_POINTER_DOWN,
    EVENT_POINTER_MOVE,
    EVENT_POINTER_UP,
    EVENT_TAP,
)
from coinmerge.ui.layout import BoardGeometry, cell_at_point

LEFT_BUTTON = 1


class InputSystem:
    """Turns raw mouse events into grid pointer events.

    A press that is released without the pointer entering another cell is also reported
    as a tap on the pressed cell, after the pointer-up.
    """
    def __init__(self, event_bus: EventBus, geometry_provider: Callable[[], BoardGeometry]):
        self.event_bus = event_bus
        self.geometry_provider = geometry_provider
        self._pressed: Optional[Tuple[int, int]] = None
        self._moved = False
        self._down = False
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_DRAG, self.on_mouse_drag)
        self.event_bus.subscribe(EVENT_MOUSE_RELEASE, self.on_mouse_release)

    def _cell(self, kwargs) -> Optional[Tuple[int, int]]:
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return None
        return cell_at_point(x, y, self.geometry_provider())

    def on_mouse_press(self, sender, **kwargs):
        if kwargs.get('button', LEFT_BUTTON) != LEFT_BUTTON:
            return
        cell = self._cell(kwargs)
        self._down = True
        self._pressed = cell
        self._moved = False
        if cell is None:
            return
        self.event_bus.emit(EVENT_POINTER_DOWN, row=cell[0], col=cell[1])

    def on_mouse_drag(self, sender, **kwargs):
        if not self._down:
            return
        cell = self._cell(kwargs)
        if cell != self._pressed:
            self._moved = True
        if cell is None:
            self.event_bus.emit(EVENT_POINTER_MOVE, row=None, col=None)
            return
        self.event_bus.emit(EVENT_POINTER_MOVE, row=cell[0], col=cell[1])

    def on_mouse_release(self, sender, **kwargs):
        if kwargs.get('button', LEFT_BUTTON) != LEFT_BUTTON or not self._down:
            return
        pressed = self._pressed
        tapped = pressed is not None and not self._moved and self._cell(kwargs) == pressed
        self._down = False
        self._pressed = None
        self.event_bus.emit(EVENT_POINTER_UP)
        if tapped:
            self.event_bus.emit(EVENT_TAP, row=pressed[0], col=pressed[1])
