from datetime import date, datetime, time

import pytest
from dayplanr.models.entities import DaySettings, Energy, FixedEvent, Priority, Task


class SequentialIds:
    """Deterministic id source for generated blocks."""

    def __init__(self):
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"block-{self.n}"


@pytest.fixture
def day_settings():
    """Default day shape: 08:00-22:00, 52 min focus, 10 min break, 5 min buffer."""
    return DaySettings(
        date=date(2024, 5, 1),
        day_start=time(8, 0),
        day_end=time(22, 0),
        focus_block_minutes=52,
        short_break_minutes=10,
        buffer_minutes=5,
    )


@pytest.fixture
def make_task():
    """Factory for tasks with medium priority/energy unless overridden."""
    def _make(task_id, duration, priority=Priority.MEDIUM, energy=Energy.MEDIUM, deadline=None, title=None):
        return Task(
            id=task_id,
            title=title or f"Task {task_id}",
            duration_minutes=duration,
            priority=priority,
            energy=energy,
            deadline=deadline,
        )
    return _make


@pytest.fixture
def make_event():
    """Factory for fixed events on 2024-05-01 given as (hour, minute) pairs."""
    def _make(event_id, start, end, title=None, day=date(2024, 5, 1)):
        return FixedEvent(
            id=event_id,
            title=title or f"Event {event_id}",
            start=datetime.combine(day, time(*start)),
            end=datetime.combine(day, time(*end)),
        )
    return _make


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def settings_payload():
    """Scenario settings as the UI sends them."""
    return {
        "date": "2024-05-01",
        "dayStart": "08:00",
        "dayEnd": "22:00",
        "focusBlockMinutes": 52,
        "shortBreakMinutes": 10,
        "bufferMinutes": 5,
    }
