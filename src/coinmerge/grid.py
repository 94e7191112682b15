import random
from dataclasses import dataclass

from esper import World

from coinmerge.components.grid_config import GridConfig
from coinmerge.events.bus import EventBus
from coinmerge.systems.animation import AnimationSystem
from coinmerge.systems.auto_merge import AutoMergeSystem
from coinmerge.systems.board import BoardSystem
from coinmerge.systems.collapse import CollapseSystem
from coinmerge.systems.grid_engine import GridEngine
from coinmerge.world import create_world


@dataclass
class GridSystems:
    """Every system of one grid, wired to a shared world and bus."""
    world: World
    event_bus: EventBus
    board: BoardSystem
    animation: AnimationSystem
    collapse: CollapseSystem
    auto_merge: AutoMergeSystem
    engine: GridEngine


def create_grid(
    event_bus: EventBus,
    config: GridConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> GridSystems:
    world = create_world(event_bus, config, rng=rng)
    # Board first so the cell arena exists before anything plans against it.
    board = BoardSystem(world, event_bus)
    animation = AnimationSystem(world, event_bus)
    collapse = CollapseSystem(world, event_bus)
    auto_merge = AutoMergeSystem(world, event_bus, collapse)
    engine = GridEngine(world, event_bus, collapse=collapse, auto_merge=auto_merge)
    return GridSystems(
        world=world,
        event_bus=event_bus,
        board=board,
        animation=animation,
        collapse=collapse,
        auto_merge=auto_merge,
        engine=engine,
    )
