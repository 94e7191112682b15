from esper import World
from coinmerge.components.animation_token import AnimationToken
from coinmerge.components.animation_delay import DelayTimer
from coinmerge.components.animation_fade import FadeAnimation
from coinmerge.components.animation_fall import FallAnimation
from coinmerge.components.animation_pop import PopAnimation
from coinmerge.components.animation_shake import ShakeAnimation
from coinmerge.components.duration import Duration
from coinmerge.constants import FADE_DURATION, POP_DURATION, SHAKE_DURATION, SHIFT_FALL_DURATION
from coinmerge.systems.board_ops import SettleOp
from typing import Any, List, Tuple

class AnimationFactory:
    def __init__(self, world: World):
        self.world = world

    def create_fade_group(self, positions: List[Tuple[int,int]], token: Any = None, duration: float = FADE_DURATION) -> List[int]:
        ents = []
        for pos in positions:
            ent = self.world.create_entity(
                FadeAnimation(pos=pos),
                Duration(duration),
                AnimationToken(kind='fade', token=token, item=pos),
            )
            ents.append(ent)
        return ents

    def create_fall_group(self, ops: List[SettleOp], token: Any = None) -> List[int]:
        ents = []
        for op in ops:
            ent = self.world.create_entity(
                FallAnimation(src=op.src, dst=op.dst, value=op.value),
                Duration(op.duration or SHIFT_FALL_DURATION),
                AnimationToken(kind='fall', token=token, item=op),
            )
            ents.append(ent)
        return ents

    def create_pop_group(self, positions: List[Tuple[int,int]], token: Any = None, duration: float = POP_DURATION) -> List[int]:
        ents = []
        for pos in positions:
            ent = self.world.create_entity(
                PopAnimation(pos=pos),
                Duration(duration),
                AnimationToken(kind='pop', token=token, item=pos),
            )
            ents.append(ent)
        return ents

    def create_shake_group(self, positions: List[Tuple[int,int]], token: Any = None, duration: float = SHAKE_DURATION) -> List[int]:
        ents = []
        for pos in positions:
            ent = self.world.create_entity(
                ShakeAnimation(pos=pos),
                Duration(duration),
                AnimationToken(kind='shake', token=token, item=pos),
            )
            ents.append(ent)
        return ents

    def create_delay(self, duration: float, token: Any = None) -> List[int]:
        ent = self.world.create_entity(
            DelayTimer(),
            Duration(duration),
            AnimationToken(kind='delay', token=token),
        )
        return [ent]
