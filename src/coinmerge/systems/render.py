from typing import List, Set, Tuple

from esper import World

from coinmerge.events.bus import (EventBus, EVENT_TILE_HIGHLIGHT, EVENT_SELECTION_CHANGED,
                                  EVENT_GRID_TEARDOWN)
from coinmerge.rendering.board_renderer import BoardRenderer
from coinmerge.rendering.context import RenderContext, build_render_context
from coinmerge.systems.board_ops import get_config
from coinmerge.ui.layout import BoardGeometry, compute_board_geometry

HUD_MARGIN = 60


class RenderSystem:
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_TILE_HIGHLIGHT, self.on_tile_highlight)
        self.event_bus.subscribe(EVENT_SELECTION_CHANGED, self.on_selection_changed)
        self.event_bus.subscribe(EVENT_GRID_TEARDOWN, self.on_teardown)
        self.highlighted: Set[Tuple[int, int]] = set()
        self.selection_path: List[Tuple[int, int]] = []
        self.score = 0
        self._board_renderer = BoardRenderer()
        self._render_ctx: RenderContext | None = None
        self._last_window_size = None
        self._geometry: BoardGeometry | None = None

    @property
    def geometry(self) -> BoardGeometry:
        size = (self.window.width, self.window.height)
        if self._geometry is None or size != self._last_window_size:
            self._last_window_size = size
            self._geometry = compute_board_geometry(size[0], size[1], get_config(self.world), HUD_MARGIN)
        return self._geometry

    def notify_resize(self, width: int, height: int):
        self._geometry = None

    def on_score(self, score: int) -> None:
        self.score = score

    def on_tile_highlight(self, sender, **kwargs):
        pos = (kwargs.get('row'), kwargs.get('col'))
        if kwargs.get('on'):
            self.highlighted.add(pos)
        else:
            self.highlighted.discard(pos)

    def on_selection_changed(self, sender, **kwargs):
        self.selection_path = list(kwargs.get('path') or [])

    def on_teardown(self, sender, **kwargs):
        self.highlighted.clear()
        self.selection_path = []

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        ctx = build_render_context(
            self.world,
            self.geometry,
            highlighted=self.highlighted,
            selection_path=self.selection_path,
        )
        self._render_ctx = ctx
        self._board_renderer.render(arcade, ctx, headless=headless)
        if not headless:
            self._render_hud(arcade)

    def _render_hud(self, arcade):
        arcade.draw_text(
            f"Score: {self.score}",
            self.window.width / 2,
            HUD_MARGIN / 2,
            (255, 255, 255),
            font_size=20,
            anchor_x="center",
            anchor_y="center",
        )
