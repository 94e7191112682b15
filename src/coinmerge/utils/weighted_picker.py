from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence


def synthetic_weights(count: int) -> List[float]:
    """Decreasing series (n, n-1, ..., 1) favouring earlier, lower denominations."""
    return [float(count - i) for i in range(count)]


def normalize_weights(values: Sequence[int], weights: Optional[Sequence[float]] = None) -> List[float]:
    """Return weights parallel to values that sum to 1.

    Missing or mismatched weights are replaced by ``synthetic_weights``. A non-positive
    total falls back to a uniform distribution.
    """
    count = len(values)
    if count == 0:
        return []
    if weights is None or len(weights) != count:
        raw = synthetic_weights(count)
    else:
        raw = [max(0.0, float(w)) for w in weights]
    total = sum(raw)
    if total <= 0.0:
        return [1.0 / count] * count
    return [w / total for w in raw]


def pick(values: Sequence[int], weights: Sequence[float], rng: random.Random | None = None) -> int | None:
    """Cumulative linear scan over normalised weights.

    Returns the first value whose running total reaches ``r``; float drift that leaves
    ``r`` above every running total returns the last value.
    """
    if not values:
        return None
    r = (rng or random).random()
    acc = 0.0
    for value, weight in zip(values, weights):
        acc += weight
        if r <= acc:
            return value
    return values[-1]


@dataclass(slots=True)
class WeightedPicker:
    values: Sequence[int]
    weights: Optional[Sequence[float]] = None
    rng: Optional[random.Random] = field(default=None, repr=False)

    _normalized: List[float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.values = tuple(self.values)
        self._normalized = normalize_weights(self.values, self.weights)
        if self.rng is None:
            self.rng = random.Random()

    @property
    def normalized_weights(self) -> List[float]:
        return list(self._normalized)

    def pick(self) -> int | None:
        return pick(self.values, self._normalized, self.rng)

    def pick_many(self, count: int) -> List[int]:
        return [self.pick() for _ in range(max(0, count))]
