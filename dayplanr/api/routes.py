from datetime import date, datetime, time
from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from dayplanr.api.messages import message
from dayplanr.config.settings import Settings, get_settings
from dayplanr.engine.planner import plan_day
from dayplanr.export.ics import MEDIA_TYPE, encode_calendar, export_filename
from dayplanr.models.entities import (
    BlockMeta,
    BlockType,
    DaySettings,
    Energy,
    FixedEvent,
    PlanBlock,
    Priority,
    Task,
)
from dayplanr.models.errors import ValidationError
from dayplanr.storage.database import get_db
from dayplanr.storage.repositories import PlannerStateRepository
from dayplanr.utils.metrics import scheduled_minutes

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

# Labels used by the Polish UI
PRIORITY_ALIASES = {"wysoki": "high", "średni": "medium", "sredni": "medium", "niski": "low"}
ENERGY_ALIASES = {"wysoka": "high", "średnia": "medium", "srednia": "medium", "niska": "low"}


def _to_local_naive(v: datetime) -> datetime:
    """Planning runs on the caller's wall clock; aware stamps are shifted to local time."""
    if v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TaskDTO(CamelModel):
    id: str
    title: str = ""
    duration_minutes: int = Field(..., alias="durationMinutes")
    priority: Priority = Priority.MEDIUM
    energy: Energy = Energy.MEDIUM
    deadline: Optional[date] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return PRIORITY_ALIASES.get(v, v)
        return v

    @field_validator("energy", mode="before")
    @classmethod
    def normalize_energy(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return ENERGY_ALIASES.get(v, v)
        return v

    @field_validator("deadline", mode="before")
    @classmethod
    def blank_deadline(cls, v):
        return None if v == "" else v

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v: int):
        """Ensure task duration is reasonable (1 min to 24 hours)."""
        if v < 1 or v > 1440:
            raise ValueError("durationMinutes must be between 1 and 1440")
        return v

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            duration_minutes=self.duration_minutes,
            priority=self.priority,
            energy=self.energy,
            deadline=self.deadline,
        )


class EventDTO(CamelModel):
    id: str
    title: str = ""
    start: datetime
    end: datetime

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("start", "end")
    @classmethod
    def local_time(cls, v: datetime):
        return _to_local_naive(v)

    @model_validator(mode="after")
    def validate_window(self):
        if self.end <= self.start:
            raise ValueError("event end must be later than its start")
        return self

    def to_domain(self) -> FixedEvent:
        return FixedEvent(id=self.id, title=self.title, start=self.start, end=self.end)


class SettingsDTO(CamelModel):
    date: Optional[str] = None
    day_start: Optional[str] = Field(None, alias="dayStart")
    day_end: Optional[str] = Field(None, alias="dayEnd")
    focus_block_minutes: Optional[int] = Field(None, alias="focusBlockMinutes")
    short_break_minutes: Optional[int] = Field(None, alias="shortBreakMinutes")
    buffer_minutes: Optional[int] = Field(None, alias="bufferMinutes")

    def to_domain(self, defaults: Settings) -> DaySettings:
        """
        Build engine settings, filling the work rhythm from configuration.

        Raises:
            ValidationError: date/dayStart/dayEnd absent, blank or unparseable
        """
        if not self.date or not self.day_start or not self.day_end:
            raise ValidationError("date, dayStart and dayEnd are required", code="missing_settings")
        try:
            plan_date = date.fromisoformat(self.date)
            day_start = time.fromisoformat(self.day_start)
            day_end = time.fromisoformat(self.day_end)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        def pick(value: Optional[int], fallback: int) -> int:
            return fallback if value is None else value

        return DaySettings(
            date=plan_date,
            day_start=day_start,
            day_end=day_end,
            focus_block_minutes=pick(self.focus_block_minutes, defaults.default_focus_block_minutes),
            short_break_minutes=pick(self.short_break_minutes, defaults.default_short_break_minutes),
            buffer_minutes=pick(self.buffer_minutes, defaults.default_buffer_minutes),
        )


class PlanBlockDTO(CamelModel):
    id: str
    title: str
    start: datetime
    end: datetime
    type: BlockType
    meta: Optional[Dict[str, str]] = None

    @field_validator("start", "end")
    @classmethod
    def local_time(cls, v: datetime):
        return _to_local_naive(v)

    @field_validator("meta")
    @classmethod
    def validate_meta(cls, v: Optional[Dict[str, str]]):
        if v is not None:
            BlockMeta.from_dict(v)
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.end <= self.start:
            raise ValueError("block end must be later than its start")
        return self

    @classmethod
    def from_domain(cls, b: PlanBlock) -> "PlanBlockDTO":
        meta = b.meta.as_dict() if b.meta else None
        return cls(id=b.id, title=b.title, start=b.start, end=b.end, type=b.type, meta=meta or None)

    def to_domain(self) -> PlanBlock:
        meta = BlockMeta.from_dict(self.meta) if self.meta else None
        return PlanBlock(id=self.id, title=self.title, start=self.start, end=self.end, type=self.type, meta=meta)


class PlanRequest(CamelModel):
    tasks: Optional[List[TaskDTO]] = None
    events: Optional[List[EventDTO]] = None
    settings: Optional[SettingsDTO] = None


class PlanResponse(BaseModel):
    plan: List[PlanBlockDTO]


class ExportRequest(CamelModel):
    plan: List[PlanBlockDTO] = Field(default_factory=list)
    plan_date: Optional[date] = Field(None, alias="date")
    label: Optional[str] = None


class PlannerStateDTO(CamelModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    date: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    events: List[Dict[str, Any]] = Field(default_factory=list)


@router.post("/plan", response_model=PlanResponse, response_model_exclude_none=True, summary="Plan a day")
def plan(req: PlanRequest):
    """
    Place tasks into the free gaps between fixed events.

    **Algorithm** (see `dayplanr.engine.planner.plan_day`):
    1. Validate settings (date, dayStart, dayEnd required; rhythm falls back to config)
    2. Merge fixed events and derive free gaps
    3. Greedily place ordered tasks, inserting breaks and buffers

    **Error Handling:**
    - 400: Missing/invalid settings or malformed body, as `{"error": message}`

    Tasks that do not fit are left out of `plan`; that is not an error.
    """
    if req.settings is None:
        raise ValidationError("settings are required", code="missing_settings")

    tasks = [t.to_domain() for t in req.tasks or []]
    events = [e.to_domain() for e in req.events or []]
    day = req.settings.to_domain(settings)
    logger.info(f"Plan request: {len(tasks)} tasks, {len(events)} events, date={day.date}")

    blocks = plan_day(tasks, events, day, break_title=message("break_title"))

    placed = sum(1 for b in blocks if b.type == BlockType.WORK)
    logger.info(f"Plan generated: {placed}/{len(tasks)} tasks placed, {scheduled_minutes(blocks)} work minutes")
    return {"plan": [PlanBlockDTO.from_domain(b) for b in blocks]}


@router.post("/plan/export", summary="Export a plan as iCalendar")
def export_plan(req: ExportRequest):
    """
    Encode a plan (as returned by `/plan`) into a downloadable `.ics` file.

    The file name is `plan-<date>.ics`; `date` defaults to the day of the first
    block, or today for an empty plan.
    """
    blocks = [b.to_domain() for b in req.plan]
    plan_date = req.plan_date or (blocks[0].start.date() if blocks else date.today())
    label = req.label or message("calendar_label", date=plan_date.isoformat())
    logger.info(f"Export request: {len(blocks)} blocks, date={plan_date}")

    body = encode_calendar(
        blocks,
        label,
        prodid=settings.calendar_prodid,
        uid_domain=settings.calendar_uid_domain,
    )
    return Response(
        content=body,
        media_type=f"{MEDIA_TYPE}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(plan_date)}"'},
    )


@router.get("/state/{key}", summary="Load saved planner state")
def load_state(key: str, db: Session = Depends(get_db)):
    payload = PlannerStateRepository(db).get(key)
    if payload is None:
        return JSONResponse(status_code=404, content={"error": message("state_not_found")})
    return payload


@router.put("/state/{key}", summary="Save planner state")
def save_state(key: str, state: PlannerStateDTO, db: Session = Depends(get_db)):
    """
    Store the UI's draft `{date, settings, tasks, events}` under `key`.

    The blob is kept verbatim and replaced on every save; the planner never reads it.
    """
    payload = state.model_dump(mode="json")
    PlannerStateRepository(db).save(key, payload)
    logger.info(f"State saved: key={key}, {len(state.tasks)} tasks, {len(state.events)} events")
    return payload
