"""Pure game rules: the day clock and the stat projection."""

from __future__ import annotations

from typing import Mapping, NamedTuple

from state import (
    SEGMENT_ORDER,
    ZERO_SLOT_SEGMENTS,
    Equipped,
    StatType,
    TimeSegment,
)

STAT_MIN = 0
STAT_MAX = 100
SLOTS_PER_SEGMENT = 3
SOCIAL_CLASS_DISPLAY_OFFSET = 50


class TimeAdvance(NamedTuple):
    segment: TimeSegment
    slots: int
    new_day: bool


def clamp(value: float, low: float = STAT_MIN, high: float = STAT_MAX) -> float:
    return max(low, min(high, value))


def advance_time(segment: TimeSegment, slots_used: int) -> TimeAdvance:
    """Return the clock position after one action.

    Pre-Dawn and Post-Night carry no action slots and hand over to the next
    segment straight away; leaving Post-Night starts a new day.  The other
    segments carry :data:`SLOTS_PER_SEGMENT` slots, indexed from zero.
    """
    segment = TimeSegment(segment)

    if segment is TimeSegment.PRE_DAWN:
        return TimeAdvance(TimeSegment.DAWN, 0, False)
    if segment is TimeSegment.POST_NIGHT:
        return TimeAdvance(TimeSegment.PRE_DAWN, 0, True)

    if slots_used < SLOTS_PER_SEGMENT - 1:
        return TimeAdvance(segment, slots_used + 1, False)

    next_index = SEGMENT_ORDER.index(segment) + 1
    if next_index < len(SEGMENT_ORDER):
        return TimeAdvance(SEGMENT_ORDER[next_index], 0, False)
    # Unreachable while Post-Night closes the cycle; keep the clock moving.
    return TimeAdvance(TimeSegment.PRE_DAWN, 0, True)


def slot_capacity(segment: TimeSegment) -> int:
    """Number of action slots *segment* offers."""
    return 0 if TimeSegment(segment) in ZERO_SLOT_SEGMENTS else SLOTS_PER_SEGMENT


def compute_effective_stats(
    base_stats: Mapping[str, float], equipped: Equipped
) -> dict[str, float]:
    """Fold equipped item modifiers into a copy of *base_stats*.

    Modifiers for stats not present in *base_stats* are ignored.  Nothing is
    clamped here: the result is a projection for display, not a committed
    value.
    """
    effective = dict(base_stats)
    for _, item in equipped.items():
        for stat, value in item.stats.items():
            if stat in effective and value is not None:
                effective[stat] += value
    return effective


def display_stat(stat: str, value: float) -> float:
    """Return *value* as shown to the player."""
    if stat == StatType.SOCIAL_CLASS.value:
        return value + SOCIAL_CLASS_DISPLAY_OFFSET
    return value
