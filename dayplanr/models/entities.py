from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, Optional, Tuple


Interval = Tuple[datetime, datetime]


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Energy(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BlockType(str, Enum):
    WORK = "work"
    BREAK = "break"
    FIXED = "fixed"


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    duration_minutes: int
    priority: Priority = Priority.MEDIUM
    energy: Energy = Energy.MEDIUM
    deadline: Optional[date] = None


@dataclass(frozen=True)
class FixedEvent:
    id: str
    title: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class DaySettings:
    date: date
    day_start: time
    day_end: time
    focus_block_minutes: int = 52
    short_break_minutes: int = 10
    buffer_minutes: int = 5

    def envelope(self) -> Interval:
        """Absolute (start, end) of the schedulable day."""
        return datetime.combine(self.date, self.day_start), datetime.combine(self.date, self.day_end)


@dataclass(frozen=True)
class BlockMeta:
    """Annotations attached to a generated block. Closed set of known kinds."""
    task_id: Optional[str] = None
    priority: Optional[Priority] = None
    energy: Optional[Energy] = None
    deadline: Optional[date] = None

    def as_dict(self) -> Dict[str, str]:
        data = {
            "taskId": self.task_id,
            "priority": self.priority.value if self.priority else None,
            "energy": self.energy.value if self.energy else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "BlockMeta":
        deadline = data.get("deadline")
        return cls(
            task_id=data.get("taskId"),
            priority=Priority(data["priority"]) if data.get("priority") else None,
            energy=Energy(data["energy"]) if data.get("energy") else None,
            deadline=date.fromisoformat(deadline) if deadline else None,
        )


@dataclass(frozen=True)
class PlanBlock:
    id: str
    title: str
    start: datetime
    end: datetime
    type: BlockType
    meta: Optional[BlockMeta] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)
