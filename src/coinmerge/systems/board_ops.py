from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from esper import World

from coinmerge.components.board import Board
from coinmerge.components.board_position import BoardPosition
from coinmerge.components.grid_config import GridConfig
from coinmerge.components.interaction_state import InteractionState
from coinmerge.components.score import Score
from coinmerge.components.tile import TileValue
from coinmerge.events.bus import EVENT_CELL_VALUE_CHANGED, EventBus

Position = Tuple[int, int]
ValueMap = Dict[Position, Optional[int]]

NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(slots=True)
class Group:
    """Maximal 4-connected region of equal-valued cells. Ephemeral."""
    value: int
    cells: List[Position] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cells)


class SettleSource(Enum):
    GENERATED = "generated"
    TRANSPLANTED = "transplanted"


@dataclass(slots=True)
class SettleOp:
    """One destination cell waiting for its fall animation.

    ``src`` is the original cell for transplanted tiles and a virtual slot above the
    grid (negative row) for generated ones, so both kinds animate the same way.
    """
    dst: Position
    value: int
    source: SettleSource
    src: Position
    duration: float = 0.0


@dataclass(slots=True)
class ColumnPlan:
    col: int
    final_vals: List[int]
    ops: List[SettleOp]

    @property
    def sources_to_clear(self) -> List[Position]:
        return [op.src for op in self.ops if op.source is SettleSource.TRANSPLANTED]


def _singleton(world: World, comp_type):
    for _, comp in world.get_component(comp_type):
        return comp
    raise RuntimeError(f"{comp_type.__name__} resource not found")


def get_config(world: World) -> GridConfig:
    return _singleton(world, GridConfig)


def get_score(world: World) -> Score:
    return _singleton(world, Score)


def get_interaction(world: World) -> InteractionState:
    return _singleton(world, InteractionState)


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def in_bounds(world: World, row: int | None, col: int | None) -> bool:
    dims = board_dimensions(world)
    if dims is None or row is None or col is None:
        return False
    rows, cols = dims
    return 0 <= row < rows and 0 <= col < cols


def get_entity_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(BoardPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def get_value(world: World, row: int, col: int) -> Optional[int]:
    entity = get_entity_at(world, row, col)
    if entity is None:
        return None
    try:
        return world.component_for_entity(entity, TileValue).value
    except KeyError:
        return None


def set_value(
    world: World,
    row: int,
    col: int,
    value: Optional[int],
    event_bus: EventBus | None = None,
) -> bool:
    """Write a cell's value and notify the renderer. Returns False for unknown cells."""
    entity = get_entity_at(world, row, col)
    if entity is None:
        return False
    try:
        tile: TileValue = world.component_for_entity(entity, TileValue)
    except KeyError:
        return False
    tile.value = value
    if event_bus is not None:
        event_bus.emit(EVENT_CELL_VALUE_CHANGED, row=row, col=col, value=value)
    return True


def iter_cells(world: World) -> Iterator[Tuple[int, int, Optional[int]]]:
    """Yield (row, col, value) in row-major order."""
    values = value_map(world)
    for row, col in sorted(values):
        yield row, col, values[(row, col)]


def value_map(world: World) -> ValueMap:
    mapping: ValueMap = {}
    for entity, position in world.get_component(BoardPosition):
        try:
            tile: TileValue = world.component_for_entity(entity, TileValue)
        except KeyError:
            continue
        mapping[(position.row, position.col)] = tile.value
    return mapping


def values_snapshot(world: World) -> List[List[Optional[int]]]:
    dims = board_dimensions(world)
    if not dims:
        return []
    rows, cols = dims
    values = value_map(world)
    return [[values.get((r, c)) for c in range(cols)] for r in range(rows)]


def find_groups_in(values: Mapping[Position, Optional[int]], rows: int, cols: int) -> List[Group]:
    """Flood-fill 4-connected equal-valued regions.

    Seeds are visited in row-major order and neighbours in up, down, left, right order,
    so identical grids always produce identical groups. Empty cells join no group.
    """
    visited = [[False] * cols for _ in range(rows)]
    groups: List[Group] = []
    for r in range(rows):
        for c in range(cols):
            if visited[r][c]:
                continue
            visited[r][c] = True
            v = values.get((r, c))
            if v is None:
                continue
            group = Group(value=v)
            queue = deque([(r, c)])
            while queue:
                cr, cc = queue.popleft()
                group.cells.append((cr, cc))
                for dr, dc in NEIGHBOR_OFFSETS:
                    nr, nc = cr + dr, cc + dc
                    if nr < 0 or nc < 0 or nr >= rows or nc >= cols:
                        continue
                    if visited[nr][nc]:
                        continue
                    if values.get((nr, nc)) == v:
                        visited[nr][nc] = True
                        queue.append((nr, nc))
            groups.append(group)
    return groups


def find_groups(world: World) -> List[Group]:
    dims = board_dimensions(world)
    if not dims:
        return []
    rows, cols = dims
    return find_groups_in(value_map(world), rows, cols)


def plan_column_collapse(
    col: int,
    src_vals: Sequence[Optional[int]],
    generate: Callable[[], int],
) -> ColumnPlan:
    """Compute gravity for one column from a top-to-bottom snapshot.

    Fresh tiles fill the top ``empty_count`` rows; survivors keep their relative order
    below them, the i-th surviving source landing in the i-th non-generated row.
    Survivors that stay in place produce no op.
    """
    rows = len(src_vals)
    sources = [(r, v) for r, v in enumerate(src_vals) if v is not None]
    empty_count = rows - len(sources)
    generated = [generate() for _ in range(empty_count)]
    final_vals = generated + [v for _, v in sources]
    ops: List[SettleOp] = []
    for dst_row in range(empty_count):
        ops.append(
            SettleOp(
                dst=(dst_row, col),
                value=generated[dst_row],
                source=SettleSource.GENERATED,
                src=(dst_row - empty_count, col),
            )
        )
    for i, (src_row, value) in enumerate(sources):
        dst_row = empty_count + i
        if dst_row == src_row:
            continue
        ops.append(
            SettleOp(
                dst=(dst_row, col),
                value=value,
                source=SettleSource.TRANSPLANTED,
                src=(src_row, col),
            )
        )
    return ColumnPlan(col=col, final_vals=final_vals, ops=ops)


def plan_collapse(world: World, generate: Callable[[], int]) -> List[ColumnPlan]:
    """Plan every column from a snapshot taken before anything is mutated."""
    dims = board_dimensions(world)
    if not dims:
        return []
    rows, cols = dims
    values = value_map(world)
    plans: List[ColumnPlan] = []
    for col in range(cols):
        src_vals = [values.get((r, col)) for r in range(rows)]
        plans.append(plan_column_collapse(col, src_vals, generate))
    return plans
