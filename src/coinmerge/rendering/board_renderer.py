from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Tuple

from coinmerge.constants import SHAKE_OFFSET, SPAWN_OFFSET
from coinmerge.rendering.palette import color_for, text_color_for

if TYPE_CHECKING:
    from coinmerge.rendering.context import RenderContext


def _ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1


class BoardRenderer:
    def __init__(self, use_easing: bool = True):
        self.use_easing = use_easing
        # Last frame's tile rectangles keyed by cell, for tests and hit debugging.
        self.last_layout: Dict[Tuple[int, int], Tuple[float, float, float]] = {}

    def render(self, arcade, ctx: RenderContext, headless: bool) -> None:
        geo = ctx.geometry
        self.last_layout = {}
        size = geo.square_size
        outlines = []

        for (row, col), value in ctx.values.items():
            cx, cy = geo.cell_center(row, col)
            if not headless:
                arcade.draw_lrbt_rectangle_filled(
                    cx - size / 2, cx + size / 2, cy - size / 2, cy + size / 2, color_for(None)
                )
            if value is None or (row, col) in ctx.fall_by_dst:
                continue
            draw_size = size
            alpha = 255
            shake = ctx.shake_by_pos.get((row, col))
            if shake is not None:
                cx += shake.offset * SHAKE_OFFSET
            pop = ctx.pop_by_pos.get((row, col))
            if pop is not None:
                draw_size = size * pop.scale
            fade = ctx.fade_by_pos.get((row, col))
            if fade is not None:
                alpha = int(255 * fade.alpha)
            self.last_layout[(row, col)] = (cx, cy, draw_size)
            if (row, col) in ctx.highlighted:
                outlines.append((cx, cy, draw_size))
            if not headless:
                self._draw_tile(arcade, cx, cy, draw_size, value, alpha)

        for dst, fall in ctx.fall_by_dst.items():
            p = _ease_in_out(fall.linear) if self.use_easing else fall.linear
            sx, sy = geo.cell_center(*fall.src)
            dx, dy = geo.cell_center(*dst)
            if fall.src[0] < 0:
                sy += SPAWN_OFFSET
            x = sx + (dx - sx) * p
            y = sy + (dy - sy) * p
            self.last_layout[dst] = (x, y, size)
            if not headless:
                self._draw_tile(arcade, x, y, size, fall.value, 255)

        if headless:
            return
        if len(ctx.selection_path) > 1:
            points = [geo.cell_center(r, c) for r, c in ctx.selection_path]
            arcade.draw_line_strip(points, (255, 255, 255), 4)
        for cx, cy, draw_size in outlines:
            half = draw_size / 2 + 2
            arcade.draw_lrbt_rectangle_outline(cx - half, cx + half, cy - half, cy + half, (255, 255, 255), 3)

    @staticmethod
    def _draw_tile(arcade, cx: float, cy: float, size: float, value: int, alpha: int) -> None:
        r, g, b = color_for(value)
        half = size / 2
        arcade.draw_lrbt_rectangle_filled(cx - half, cx + half, cy - half, cy + half, (r, g, b, alpha))
        tr, tg, tb = text_color_for((r, g, b))
        arcade.draw_text(
            str(value),
            cx,
            cy,
            (tr, tg, tb, alpha),
            font_size=max(8, int(size * 0.3)),
            anchor_x="center",
            anchor_y="center",
            bold=True,
        )
