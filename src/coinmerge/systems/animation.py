import logging
import math
from typing import Any, Dict, List, Tuple

from esper import World

from coinmerge.animation_factory import AnimationFactory
from coinmerge.components.animation_delay import DelayTimer
from coinmerge.components.animation_fade import FadeAnimation
from coinmerge.components.animation_fall import FallAnimation
from coinmerge.components.animation_pop import PopAnimation
from coinmerge.components.animation_shake import ShakeAnimation
from coinmerge.components.animation_token import AnimationToken
from coinmerge.components.duration import Duration
from coinmerge.events.bus import (EVENT_TICK, EventBus, EVENT_ANIMATION_START, EVENT_ANIMATION_COMPLETE,
                                  EVENT_ANIMATION_FAILED, EVENT_GRID_TEARDOWN)

logger = logging.getLogger(__name__)

KIND_COMPONENTS = {
    'fade': FadeAnimation,
    'fall': FallAnimation,
    'pop': PopAnimation,
    'shake': ShakeAnimation,
    'delay': DelayTimer,
}


class AnimationSystem:
    """Drives timing of animations; each animated item is its own entity.

    Fade, pop, shake and delay groups complete together once every entity started by
    the same token has finished. Fall entities complete individually so each settled
    destination can be committed as soon as its own tile lands.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.factory = AnimationFactory(world)
        self._torn_down = False
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_ANIMATION_FAILED, self.on_animation_failed)
        event_bus.subscribe(EVENT_GRID_TEARDOWN, self.on_teardown)

    def on_animation_start(self, sender, **kwargs):
        if self._torn_down:
            return
        kind = kwargs.get('kind')
        items = list(kwargs.get('items') or [])
        token = kwargs.get('token')
        duration = kwargs.get('duration')
        if kind not in KIND_COMPONENTS:
            self._fail(kind, items, token, reason='unknown_kind')
            return
        if duration is not None:
            try:
                duration = float(duration)
            except (TypeError, ValueError):
                duration = math.nan
            if not math.isfinite(duration) or duration < 0.0:
                self._fail(kind, items, token, reason='invalid_duration')
                return
        if kind == 'delay':
            self.factory.create_delay(duration or 0.0, token=token)
            return
        if not items:
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=[], token=token)
            return
        if kind == 'fall':
            self.factory.create_fall_group(items, token=token)
        elif kind == 'fade':
            self._create(self.factory.create_fade_group, items, token, duration)
        elif kind == 'pop':
            self._create(self.factory.create_pop_group, items, token, duration)
        elif kind == 'shake':
            self._create(self.factory.create_shake_group, items, token, duration)

    @staticmethod
    def _create(fn, items, token, duration):
        if duration is None:
            return fn(items, token=token)
        return fn(items, token=token, duration=duration)

    def on_animation_failed(self, sender, **kwargs):
        # A collaborator gave up on a tween; drop what is left of it so it cannot complete later.
        token = kwargs.get('token')
        kind = kwargs.get('kind')
        for ent, tag in list(self.world.get_component(AnimationToken)):
            if tag.token == token and tag.kind == kind:
                self._delete_animation_entity(ent)

    def on_teardown(self, sender, **kwargs):
        self._torn_down = True
        for ent, _ in list(self.world.get_component(AnimationToken)):
            self._delete_animation_entity(ent)

    def cancel(self, token: Any) -> None:
        """Stop every animation carrying token and report it as failed."""
        grouped: Dict[str, List[Any]] = {}
        for ent, tag in list(self.world.get_component(AnimationToken)):
            if tag.token != token:
                continue
            grouped.setdefault(tag.kind, []).append(tag.item)
            self._delete_animation_entity(ent)
        for kind, items in grouped.items():
            self._fail(kind, [i for i in items if i is not None], token, reason='cancelled')

    def active_count(self, kind: str | None = None) -> int:
        return sum(1 for _, tag in self.world.get_component(AnimationToken) if kind is None or tag.kind == kind)

    def on_tick(self, sender, **kwargs):
        if self._torn_down:
            return
        dt = kwargs.get('dt', 1/60)
        completions: List[Tuple[str, Any, List[Any]]] = []
        completions.extend(self._advance_fades(dt))
        for kind in ('pop', 'shake', 'delay'):
            completions.extend(self._advance_group(kind, dt))
        completions.extend(self._advance_falls(dt))
        for kind, token, items in completions:
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=items, token=token)

    def _advance_fades(self, dt: float):
        for ent, (fade, dur) in list(self.world.get_components(FadeAnimation, Duration)):
            if fade.alpha > 0.0:
                fade.alpha = fade.alpha - dt / dur.value if dur.value > 0 else 0.0
                if fade.alpha < 0.0:
                    fade.alpha = 0.0
        return self._collect_groups('fade', lambda anim: anim.alpha <= 0.0)

    def _advance_group(self, kind: str, dt: float):
        comp_type = KIND_COMPONENTS[kind]
        for ent, (anim, dur) in list(self.world.get_components(comp_type, Duration)):
            self._step_linear(anim, dur, dt)
        return self._collect_groups(kind, lambda anim: anim.linear >= 1.0)

    def _advance_falls(self, dt: float):
        finished: Dict[Any, List[Tuple[int, Any]]] = {}
        for ent, (fall, dur, tag) in list(self.world.get_components(FallAnimation, Duration, AnimationToken)):
            self._step_linear(fall, dur, dt)
            if fall.linear >= 1.0:
                finished.setdefault(tag.token, []).append((ent, tag.item))
        completions = []
        for token, entries in finished.items():
            for ent, _ in entries:
                self._delete_animation_entity(ent)
            completions.append(('fall', token, [item for _, item in entries]))
        return completions

    def _collect_groups(self, kind: str, is_done):
        comp_type = KIND_COMPONENTS[kind]
        groups: Dict[Any, List[Tuple[int, Any, bool]]] = {}
        for ent, (anim, tag) in list(self.world.get_components(comp_type, AnimationToken)):
            groups.setdefault(tag.token, []).append((ent, tag.item, is_done(anim)))
        completions = []
        for token, entries in groups.items():
            if not all(done for _, _, done in entries):
                continue
            for ent, _, _ in entries:
                self._delete_animation_entity(ent)
            items = [item for _, item, _ in entries if item is not None]
            completions.append((kind, token, items))
        return completions

    @staticmethod
    def _step_linear(anim, dur: Duration, dt: float) -> None:
        if anim.linear >= 1.0:
            return
        if dur.value <= 0.0:
            anim.linear = 1.0
            return
        anim.linear += dt / dur.value
        if anim.linear > 1.0:
            anim.linear = 1.0

    def _fail(self, kind, items, token, *, reason: str) -> None:
        logger.warning("animation %s (token=%r) failed: %s", kind, token, reason)
        self.event_bus.emit(EVENT_ANIMATION_FAILED, kind=kind, items=items, token=token, reason=reason)

    def _delete_animation_entity(self, ent: int):
        try:
            self.world.delete_entity(ent, immediate=True)
        except KeyError:
            pass
