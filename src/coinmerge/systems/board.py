import random
from typing import Callable, Iterator, List, Optional, Tuple
from esper import World
from coinmerge.events.bus import EventBus
from coinmerge.components.board import Board
from coinmerge.components.board_position import BoardPosition
from coinmerge.components.tile import TileValue
from coinmerge.systems.board_ops import (get_config, get_entity_at, get_value, iter_cells, set_value,
                                         values_snapshot)
from coinmerge.utils.weighted_picker import WeightedPicker


class BoardSystem:
    """Creates the cell arena once and offers cell-level access.

    Cells are never created or destroyed after construction; emptying a tile sets its
    value to None.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        config = get_config(world)
        self.rows = config.rows
        self.cols = config.cols
        rng = getattr(world, "random", None)
        self.picker = WeightedPicker(config.values, config.weights,
                                     rng=rng if isinstance(rng, random.Random) else None)
        self.board_entity = self.world.create_entity(Board(rows=self.rows, cols=self.cols))
        self._init_board()

    def _init_board(self):
        for r in range(self.rows):
            for c in range(self.cols):
                self.world.create_entity(
                    BoardPosition(row=r, col=c),
                    TileValue(value=self.picker.pick()),
                )

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_entity_at(self, row: int, col: int):
        if not self.in_bounds(row, col):
            return None
        return get_entity_at(self.world, row, col)

    def get_value(self, row: int, col: int) -> Optional[int]:
        if not self.in_bounds(row, col):
            return None
        return get_value(self.world, row, col)

    def set_value(self, row: int, col: int, value: Optional[int]) -> bool:
        if not self.in_bounds(row, col):
            return False
        return set_value(self.world, row, col, value, self.event_bus)

    def iter_cells(self) -> Iterator[Tuple[int, int, Optional[int]]]:
        return iter_cells(self.world)

    def set_all_values(self, fn: Callable[[int, int], Optional[int]]) -> None:
        for r in range(self.rows):
            for c in range(self.cols):
                self.set_value(r, c, fn(r, c))

    def load(self, layout: List[List[Optional[int]]]) -> None:
        """Overwrite the board from a row-major layout of matching shape."""
        if len(layout) != self.rows or any(len(row) != self.cols for row in layout):
            raise ValueError(f"Layout must be {self.rows}x{self.cols}")
        self.set_all_values(lambda r, c: layout[r][c])

    def snapshot(self) -> List[List[Optional[int]]]:
        return values_snapshot(self.world)
