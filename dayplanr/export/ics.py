"""
iCalendar export of a planned day.

One VEVENT per block, in the order given. Only title, start, end and block
type are carried over; block meta is not encoded.
"""

from datetime import date, datetime, timezone
from typing import Optional, Sequence

from icalendar import Calendar, Event

from dayplanr.models.entities import PlanBlock

MEDIA_TYPE = "text/calendar"


def export_filename(plan_date: date) -> str:
    return f"plan-{plan_date.isoformat()}.ics"


def encode_calendar(
    blocks: Sequence[PlanBlock],
    calendar_label: str,
    prodid: str = "-//DayPlanr//EN",
    uid_domain: str = "dayplanr",
    stamp: Optional[datetime] = None,
) -> str:
    """
    Serialize blocks to an iCalendar document.

    UIDs combine the position and the block id, so they stay distinct even if
    two input blocks share an id. `stamp` is the DTSTAMP of every event and
    defaults to the current UTC time; pass it explicitly for reproducible output.
    """
    stamp = stamp or datetime.now(timezone.utc)

    cal = Calendar()
    cal.add("prodid", prodid)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", calendar_label)

    for index, block in enumerate(blocks):
        event = Event()
        event.add("uid", f"{index}-{block.id}@{uid_domain}")
        event.add("dtstamp", stamp)
        event.add("dtstart", block.start)
        event.add("dtend", block.end)
        event.add("summary", block.title)
        event.add("categories", [block.type.value])
        cal.add_component(event)

    return cal.to_ical().decode("utf-8")
