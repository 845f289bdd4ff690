"""Business history timeline derived from task history records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel

from .contracts import TaskHistoryRecord


class EventKind(str, Enum):
    START = "START"
    END = "END"
    EMAIL = "EMAIL"
    TASK = "TASK"


class TimelineEntry(BaseModel):
    record: TaskHistoryRecord
    kind: EventKind
    label: str
    completed: bool
    duration: Optional[str] = None
    has_data: bool = False

    @property
    def timestamp(self) -> Optional[datetime]:
        return self.record.end_time or self.record.start_time


def classify_event(record: TaskHistoryRecord) -> EventKind:
    kind = record.type or ""
    name = (record.task_name or "").lower()
    if kind == "startEvent":
        return EventKind.START
    if kind == "endEvent":
        return EventKind.END
    if "email" in name or kind == "serviceTask":
        return EventKind.EMAIL
    return EventKind.TASK


def format_duration(
    start: Optional[datetime], end: Optional[datetime]
) -> Optional[str]:
    """Render the elapsed time between ``start`` and ``end`` compactly.

    Returns ``None`` for a step that has not ended or has no recorded start.
    """
    if start is None or end is None:
        return None
    minutes = max(0, int((end - start).total_seconds() // 60))
    hours, days = minutes // 60, minutes // (60 * 24)
    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"


def _sort_key(record: TaskHistoryRecord):
    # Open steps first (newest start first), then closed ones by newest end.
    # Steps missing the relevant time go last in their group.
    if not record.is_completed:
        if record.start_time is None:
            return (1, 0.0)
        return (0, -record.start_time.timestamp())
    if record.end_time is None:
        return (3, 0.0)
    return (2, -record.end_time.timestamp())


def build_timeline(records: Iterable[TaskHistoryRecord]) -> List[TimelineEntry]:
    """Return task history as timeline entries, most relevant first."""
    entries = []
    for record in sorted(records, key=_sort_key):
        entries.append(
            TimelineEntry(
                record=record,
                kind=classify_event(record),
                label=record.task_name or "Unnamed Task",
                completed=record.is_completed,
                duration=format_duration(record.start_time, record.end_time),
                has_data=bool(record.form_submission_id or record.form_key),
            )
        )
    return entries
