"""
Greedy Day Planner

Places flexible tasks into the free gaps left between fixed events of a single
day and follows every work block with a recovery break and a buffer.

Time Complexity: O(n log n + n * g) where:
    n = number of tasks
    g = number of free gaps

Key Rules:
- Tasks are placed whole or not at all (no splitting across gaps)
- Tasks are attempted in one fixed order for the whole day, never re-sorted per gap
- Breaks and buffers never cross a gap boundary
- Running out of room is not an error: unplaced tasks are simply omitted
"""

import uuid
from datetime import timedelta
from typing import Callable, List, Optional, Sequence

from dayplanr.engine.gaps import events_in_envelope, free_gaps, merge_occupied
from dayplanr.engine.ordering import order_tasks
from dayplanr.models.entities import BlockMeta, BlockType, DaySettings, FixedEvent, PlanBlock, Task
from dayplanr.models.errors import ValidationError


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_settings(settings: Optional[DaySettings]) -> None:
    """
    Reject settings the planner cannot work with.

    Raises:
        ValidationError: missing date/day bounds, dayEnd <= dayStart,
            non-positive focus/break length or negative buffer
    """
    if settings is None or settings.date is None or settings.day_start is None or settings.day_end is None:
        raise ValidationError("date, dayStart and dayEnd are required", code="missing_settings")
    if settings.day_end <= settings.day_start:
        raise ValidationError("dayEnd must be later than dayStart", code="invalid_day_window")
    if settings.focus_block_minutes <= 0 or settings.short_break_minutes <= 0:
        raise ValidationError("focus and break lengths must be positive")
    if settings.buffer_minutes < 0:
        raise ValidationError("buffer must not be negative")


def _work_block(task: Task, start, end, new_id: Callable[[], str]) -> PlanBlock:
    return PlanBlock(
        id=new_id(),
        title=task.title,
        start=start,
        end=end,
        type=BlockType.WORK,
        meta=BlockMeta(task_id=task.id, priority=task.priority, energy=task.energy, deadline=task.deadline),
    )


def _break_block(start, minutes: int, title: str, new_id: Callable[[], str]) -> PlanBlock:
    return PlanBlock(id=new_id(), title=title, start=start, end=start + timedelta(minutes=minutes), type=BlockType.BREAK)


def _fixed_block(event: FixedEvent) -> PlanBlock:
    return PlanBlock(id=event.id, title=event.title, start=event.start, end=event.end, type=BlockType.FIXED)


def plan_day(
    tasks: Sequence[Task],
    events: Sequence[FixedEvent],
    settings: DaySettings,
    break_title: str = "Break",
    id_factory: Callable[[], str] = _new_id,
) -> List[PlanBlock]:
    """
    Build the day's block sequence.

    Algorithm:
    1. Compute the envelope [date dayStart, date dayEnd]
    2. Keep events intersecting it; merge their clipped spans into occupied time
    3. Derive free gaps and order the tasks (see ordering.placement_key)
    4. Walk gaps left to right with a cursor, placing the head task while
       the pending buffer plus its duration fits in what is left of the gap
    5. Merge fixed and generated blocks chronologically

    After every work block a break follows, then the buffer. Either one that
    would cross the gap end is omitted and the gap closes.

    Head task that does not fit closes the current gap and keeps its place for
    the next one, so no later task is placed ahead of it. A task that fits no
    gap stays unplaced together with everything queued behind it.

    Args:
        tasks: Tasks in caller order (order is the final tie-break)
        events: Fixed events, any order, may overlap
        settings: Day envelope and work/break rhythm
        break_title: Title given to generated break blocks
        id_factory: Source of ids for generated blocks

    Returns:
        Chronologically sorted blocks; possibly empty

    Raises:
        ValidationError: when settings are unusable (see validate_settings)
    """
    validate_settings(settings)
    day_start, day_end = settings.envelope()

    visible = events_in_envelope(events, day_start, day_end)
    gaps = free_gaps(merge_occupied(visible, day_start, day_end), day_start, day_end)
    queue = order_tasks(tasks, settings.date)

    short_break = timedelta(minutes=settings.short_break_minutes)
    buffer = timedelta(minutes=settings.buffer_minutes)
    generated: List[PlanBlock] = []

    for gap_start, gap_end in gaps:
        cursor = gap_start
        pending = timedelta(0)

        while queue:
            task = queue[0]
            work = timedelta(minutes=task.duration_minutes)
            if cursor + pending + work > gap_end:
                break

            cursor += pending
            generated.append(_work_block(task, cursor, cursor + work, id_factory))
            cursor += work
            queue.pop(0)

            if cursor + short_break > gap_end:
                break
            generated.append(_break_block(cursor, settings.short_break_minutes, break_title, id_factory))
            cursor += short_break
            pending = buffer

    blocks = [_fixed_block(e) for e in visible] + generated
    return sorted(blocks, key=lambda b: (b.start, b.end))


def unscheduled_tasks(tasks: Sequence[Task], blocks: Sequence[PlanBlock]) -> List[Task]:
    """Tasks with no work block in the plan, in input order."""
    placed = {b.meta.task_id for b in blocks if b.type == BlockType.WORK and b.meta is not None}
    return [t for t in tasks if t.id not in placed]
