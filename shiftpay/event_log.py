from __future__ import annotations
import json
from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .errors import EventLogFormatError
from .models import AttendanceEvent, EventType


class EventRecord(BaseModel):
    """Stored shape of one event: ``{"type": "in" | "out", "time": ISO-8601}``."""

    model_config = ConfigDict(extra="forbid")

    type: EventType
    time: datetime


_LOG_ADAPTER = TypeAdapter(List[EventRecord])


def encode_event_log(events: Iterable[AttendanceEvent]) -> list[dict[str, str]]:
    return [{"type": event.type.value, "time": event.time.isoformat()} for event in events]


def dumps_event_log(events: Iterable[AttendanceEvent]) -> str:
    return json.dumps(encode_event_log(events))


def decode_event_log(payload: Any) -> List[AttendanceEvent]:
    try:
        records = _LOG_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise EventLogFormatError(f"Invalid attendance event log: {exc}") from exc
    return [AttendanceEvent(type=record.type, time=record.time) for record in records]


def loads_event_log(text: str | bytes) -> List[AttendanceEvent]:
    try:
        records = _LOG_ADAPTER.validate_json(text)
    except ValidationError as exc:
        raise EventLogFormatError(f"Invalid attendance event log: {exc}") from exc
    return [AttendanceEvent(type=record.type, time=record.time) for record in records]


def first_check_in(events: Iterable[AttendanceEvent]) -> Optional[datetime]:
    times = [event.time for event in events if event.type is EventType.IN]
    return min(times) if times else None


def last_check_out(events: Iterable[AttendanceEvent]) -> Optional[datetime]:
    times = [event.time for event in events if event.type is EventType.OUT]
    return max(times) if times else None


def ends_open(events: List[AttendanceEvent]) -> bool:
    """True when the latest event is a check-in without a matching check-out."""
    if not events:
        return False
    latest = max(events, key=lambda e: e.time)
    return latest.type is EventType.IN
