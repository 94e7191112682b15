"""Merge acceptance rules for player-drawn selections and auto-merge upgrades."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from coinmerge.components.grid_config import MixGroup
from coinmerge.constants import DEFAULT_MIX_GROUPS, MIN_RUN_LENGTH

REASON_TOO_SHORT = "too_short"
REASON_SUM = "sum"
REASON_MIX = "mix"
REASON_NO_MATCH = "no_match"


@dataclass(slots=True, frozen=True)
class MergeOutcome:
    accepted: bool
    result_value: Optional[int]
    reason: str


def _as_number(value) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def resolve(
    selected_values: Sequence[Optional[int]],
    values: Sequence[int],
    min_run_length: int = MIN_RUN_LENGTH,
    mix_groups: Iterable[MixGroup] = DEFAULT_MIX_GROUPS,
) -> MergeOutcome:
    """Decide whether a finished selection merges and what it becomes.

    Rules, first match wins:

    1. the sum of the selected values is a denomination;
    2. the sum equals a mix group's result and every member of that group occurs in
       the selection (five 5s and a 10 sum to 35, so they do not qualify);
       a bare 5 and 10 sum to 15 and are rejected too, whatever a looser reading
       of "5s and 10s make 25" suggests;
    3. otherwise the merge is rejected.

    Empty or non-numeric entries count as 0.
    """
    if len(selected_values) < min_run_length:
        return MergeOutcome(False, None, REASON_TOO_SHORT)
    numbers = [_as_number(v) for v in selected_values]
    total = sum(numbers)
    if total in values:
        return MergeOutcome(True, total, REASON_SUM)
    present = set(numbers)
    for members, result in mix_groups:
        if total == result and members <= present:
            return MergeOutcome(True, result, REASON_MIX)
    return MergeOutcome(False, None, REASON_NO_MATCH)


def next_denomination(value: int, values: Sequence[int]) -> int:
    """Auto-merge upgrade: the next configured value above ``value``.

    Capped at the largest denomination; values outside the table stay unchanged.
    """
    if value not in values:
        return value
    ordered = sorted(values)
    idx = ordered.index(value)
    return ordered[min(idx + 1, len(ordered) - 1)]
