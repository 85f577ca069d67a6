"""
Free-time computation for a single day.

Fixed events are never assumed to be sorted or disjoint: they are clipped to
the day envelope, sorted, and merged before the free gaps are derived.
"""

from datetime import datetime
from typing import Iterable, List

from dayplanr.models.entities import FixedEvent, Interval


def is_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    True if the two half-open intervals share a positive-length span.

    Touching intervals (a_end == b_start) do not overlap.
    """
    return max(a_start, b_start) < min(a_end, b_end)


def events_in_envelope(events: Iterable[FixedEvent], day_start: datetime, day_end: datetime) -> List[FixedEvent]:
    """Keep events that intersect the envelope, unchanged and in input order."""
    return [e for e in events if is_overlap(e.start, e.end, day_start, day_end)]


def merge_occupied(events: Iterable[FixedEvent], day_start: datetime, day_end: datetime) -> List[Interval]:
    """
    Clip events to the envelope and merge overlapping or touching ones.

    Args:
        events: Fixed events in any order
        day_start: Envelope start
        day_end: Envelope end

    Returns:
        Sorted, pairwise disjoint occupied intervals inside the envelope

    Complexity: O(n log n) for the sort
    """
    clipped = sorted(
        (max(e.start, day_start), min(e.end, day_end))
        for e in events
        if is_overlap(e.start, e.end, day_start, day_end)
    )
    merged: List[Interval] = []
    for start, end in clipped:
        if merged and start <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end))
        else:
            merged.append((start, end))
    return merged


def free_gaps(occupied: List[Interval], day_start: datetime, day_end: datetime) -> List[Interval]:
    """
    Walk merged occupied intervals against the envelope.

    Returns the ordered free gaps; zero-length gaps are dropped.
    """
    gaps: List[Interval] = []
    cursor = day_start
    for start, end in occupied:
        if start > cursor:
            gaps.append((cursor, start))
        cursor = max(cursor, end)
    if day_end > cursor:
        gaps.append((cursor, day_end))
    return gaps
