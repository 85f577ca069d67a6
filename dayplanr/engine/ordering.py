from datetime import date
from typing import List, Sequence, Tuple

from dayplanr.models.entities import Energy, Priority, Task


PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
# Demanding work goes first
ENERGY_RANK = {Energy.HIGH: 0, Energy.MEDIUM: 1, Energy.LOW: 2}


def placement_key(task: Task, index: int, plan_date: date) -> Tuple[int, int, int, int, int]:
    """
    Composite sort key for greedy placement.

    Precedence:
    1. Deadline on or before the planned day (overdue/urgent), earliest first
    2. Priority, high first
    3. Energy, high first
    4. Input position, so the order is total and stable
    """
    urgent = task.deadline is not None and task.deadline <= plan_date
    deadline_rank = task.deadline.toordinal() if urgent else 0
    return (
        0 if urgent else 1,
        deadline_rank,
        PRIORITY_RANK[task.priority],
        ENERGY_RANK[task.energy],
        index,
    )


def order_tasks(tasks: Sequence[Task], plan_date: date) -> List[Task]:
    keyed = sorted(enumerate(tasks), key=lambda pair: placement_key(pair[1], pair[0], plan_date))
    return [task for _, task in keyed]
