from typing import Iterable

from dayplanr.models.entities import BlockType, Interval, PlanBlock


def scheduled_minutes(blocks: Iterable[PlanBlock], kind: BlockType = BlockType.WORK) -> int:
    return sum(b.duration_minutes for b in blocks if b.type == kind)


def gap_capacity_minutes(gaps: Iterable[Interval]) -> int:
    return sum(int((end - start).total_seconds() // 60) for start, end in gaps)
