from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from esper import World

from coinmerge.components.animation_fade import FadeAnimation
from coinmerge.components.animation_fall import FallAnimation
from coinmerge.components.animation_pop import PopAnimation
from coinmerge.components.animation_shake import ShakeAnimation
from coinmerge.systems.board_ops import value_map
from coinmerge.ui.layout import BoardGeometry

BoardPos = Tuple[int, int]


@dataclass(slots=True)
class RenderContext:
    """Frame-scoped rendering data shared across renderer subcomponents."""

    world: World
    geometry: BoardGeometry
    values: Dict[BoardPos, Optional[int]]
    fall_by_dst: Dict[BoardPos, FallAnimation] = field(default_factory=dict)
    fade_by_pos: Dict[BoardPos, FadeAnimation] = field(default_factory=dict)
    pop_by_pos: Dict[BoardPos, PopAnimation] = field(default_factory=dict)
    shake_by_pos: Dict[BoardPos, ShakeAnimation] = field(default_factory=dict)
    highlighted: frozenset = frozenset()
    selection_path: List[BoardPos] = field(default_factory=list)


def collect_animation_maps(world: World):
    fall_by_dst = {fall.dst: fall for _, fall in world.get_component(FallAnimation)}
    fade_by_pos = {fade.pos: fade for _, fade in world.get_component(FadeAnimation)}
    pop_by_pos = {pop.pos: pop for _, pop in world.get_component(PopAnimation)}
    shake_by_pos = {shake.pos: shake for _, shake in world.get_component(ShakeAnimation)}
    return fall_by_dst, fade_by_pos, pop_by_pos, shake_by_pos


def build_render_context(
    world: World,
    geometry: BoardGeometry,
    *,
    highlighted=(),
    selection_path=(),
) -> RenderContext:
    """Populate a RenderContext for the current frame."""
    fall_by_dst, fade_by_pos, pop_by_pos, shake_by_pos = collect_animation_maps(world)
    return RenderContext(
        world=world,
        geometry=geometry,
        values=value_map(world),
        fall_by_dst=fall_by_dst,
        fade_by_pos=fade_by_pos,
        pop_by_pos=pop_by_pos,
        shake_by_pos=shake_by_pos,
        highlighted=frozenset(highlighted),
        selection_path=list(selection_path),
    )
