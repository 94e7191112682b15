from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence, Tuple

from coinmerge.constants import (
    DEFAULT_MIX_GROUPS,
    DEFAULT_VALUES,
    DEFAULT_WEIGHTS,
    GAP,
    GRID_COLS,
    GRID_ROWS,
    JACKPOT_VALUE,
    MAX_CASCADE_PASSES,
    MIN_RUN_LENGTH,
    SQUARE_SIZE,
)
from coinmerge.utils.weighted_picker import normalize_weights

logger = logging.getLogger(__name__)

MixGroup = Tuple[FrozenSet[int], int]


@dataclass(slots=True)
class GridConfig:
    """Per-grid configuration supplied at construction.

    ``weights`` is normalised in place: a length mismatch with ``values`` is replaced
    by a decreasing synthetic series, never an error. ``mix_groups`` lists value sets
    that may be interleaved in one selection, each with the sum a mixed run resolves to.
    """

    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    square_size: int = SQUARE_SIZE
    gap: int = GAP
    values: Sequence[int] = DEFAULT_VALUES
    weights: Optional[Sequence[float]] = DEFAULT_WEIGHTS
    min_run_length: int = MIN_RUN_LENGTH
    auto_merge: bool = False
    mix_groups: Sequence[MixGroup] = DEFAULT_MIX_GROUPS
    jackpot_value: Optional[int] = JACKPOT_VALUE
    max_cascade_passes: int = MAX_CASCADE_PASSES

    weights_synthesized: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")
        if not self.values:
            raise ValueError("Grid needs at least one denomination")
        self.values = tuple(int(v) for v in self.values)
        if self.weights is None or len(self.weights) != len(self.values):
            self.weights_synthesized = True
            logger.debug(
                "weights %r do not match %d values; using synthetic weights",
                self.weights,
                len(self.values),
            )
        self.weights = tuple(normalize_weights(self.values, self.weights))
        self.min_run_length = max(1, int(self.min_run_length))
        self.max_cascade_passes = max(1, int(self.max_cascade_passes))
        self.mix_groups = tuple((frozenset(members), int(result)) for members, result in self.mix_groups)

    def mix_group_for(self, a: int | None, b: int | None) -> MixGroup | None:
        """Return the mix group containing both values, if any."""
        if a is None or b is None:
            return None
        for group in self.mix_groups:
            members, _ = group
            if a in members and b in members:
                return group
        return None

    def compatible(self, first: int | None, candidate: int | None) -> bool:
        if first is None or candidate is None:
            return False
        return first == candidate or self.mix_group_for(first, candidate) is not None

    def is_jackpot(self, value: int | None) -> bool:
        return value is not None and self.jackpot_value is not None and value == self.jackpot_value
