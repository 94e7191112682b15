import random

from esper import World
from coinmerge.events.bus import EventBus
from coinmerge.components.grid_config import GridConfig
from coinmerge.components.interaction_state import InteractionState
from coinmerge.components.score import Score


def create_world(
    event_bus: EventBus,
    config: GridConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Single resource entity holding configuration, score ledger and interaction phase.
    world.create_entity(
        config or GridConfig(),
        Score(),
        InteractionState(),
    )
    return world
