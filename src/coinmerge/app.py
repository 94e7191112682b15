"""Arcade entry point for the coin merge prototype.

Sets up the grid systems, event bus, render and input systems, and the Arcade window.
"""
import argparse
import logging

from arcade import Window, run, color
from coinmerge.components.grid_config import GridConfig
from coinmerge.constants import JACKPOT_VALUES, JACKPOT_WEIGHTS
from coinmerge.events.bus import (EVENT_TICK, EventBus, EVENT_MOUSE_PRESS, EVENT_MOUSE_DRAG,
                                  EVENT_MOUSE_RELEASE)
from coinmerge.grid import create_grid
from coinmerge.systems.input import InputSystem
from coinmerge.systems.render import RenderSystem


class CoinMergeWindow(Window):
    def __init__(self, config: GridConfig):
        super().__init__(720, 800, "Coin Merge", resizable=True)
        self.set_update_rate(1/60)
        self.background_color = color.BLACK
        self.event_bus = EventBus()
        self.grid = create_grid(self.event_bus, config)
        self.world = self.grid.world
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.input_system = InputSystem(self.event_bus, lambda: self.render_system.geometry)
        self.grid.engine.subscribe_score(self.render_system.on_score)

    def on_resize(self, width: int, height: int):
        self.render_system.notify_resize(width, height)
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_DRAG, x=x, y=y)

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_RELEASE, x=x, y=y, button=button)

    def on_close(self):
        self.grid.engine.teardown()
        super().on_close()


def main():
    parser = argparse.ArgumentParser(description="Coin merge puzzle")
    parser.add_argument("--auto-merge", action="store_true", help="merge adjacent groups after every settle")
    parser.add_argument("--jackpot", action="store_true", help="spawn 500 tiles that are collected with a tap")
    parser.add_argument("--rows", type=int, default=8)
    parser.add_argument("--cols", type=int, default=8)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    table = {"values": JACKPOT_VALUES, "weights": JACKPOT_WEIGHTS} if args.jackpot else {}
    config = GridConfig(rows=args.rows, cols=args.cols, auto_merge=args.auto_merge, **table)
    CoinMergeWindow(config)
    run()


if __name__ == "__main__":
    main()
