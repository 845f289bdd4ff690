"""Normalization of raw history payloads into typed records."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, List, Tuple, Type, TypeVar

from pydantic import ValidationError

from ..contracts import ActivityRecord, ActivityType, ApiModel, TaskHistoryRecord
from ..errors import MalformedHistoryError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=ApiModel)


def _entries(payload: Any, source: str) -> Sequence[Any]:
    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        raise MalformedHistoryError(
            source, f"expected a list of records, got {type(payload).__name__}"
        )
    return payload


def _has_start_time(entry: Mapping[str, Any]) -> bool:
    value = entry.get("startTime", entry.get("start_time"))
    return value is not None and value != ""


def _validate(model: Type[RecordT], entry: Mapping, source: str, index: int) -> RecordT:
    try:
        return model.model_validate(dict(entry))
    except ValidationError as exc:
        raise MalformedHistoryError(source, f"record {index}: {exc}") from exc


def normalize_activities(payload: Any) -> List[ActivityRecord]:
    """Convert the historic-activity payload into :class:`ActivityRecord` items.

    Records without ``startTime`` are dropped. Records with an unrecognized
    ``activityType`` are kept as ``unknown`` unless they also lack an
    ``activityId``; a record without an id cannot be placed on the diagram and
    is dropped whatever its type.

    Raises:
        MalformedHistoryError: If the payload is not a list of mappings or a
            record carries an unparseable value.
    """
    records: List[ActivityRecord] = []
    for index, entry in enumerate(_entries(payload, "activities")):
        if not isinstance(entry, Mapping):
            raise MalformedHistoryError("activities", f"record {index} is not an object")
        if not _has_start_time(entry):
            logger.debug(f"Dropping activity record {index}: missing startTime")
            continue
        activity_id = entry.get("activityId", entry.get("activity_id"))
        if not activity_id:
            raw_type = entry.get("activityType", entry.get("activity_type"))
            reason = (
                "unrecognized type and no activityId"
                if ActivityType.parse(raw_type) is ActivityType.UNKNOWN
                else "no activityId"
            )
            logger.debug(f"Dropping activity record {index}: {reason}")
            continue
        records.append(_validate(ActivityRecord, entry, "activities", index))
    return records


def normalize_task_history(payload: Any) -> List[TaskHistoryRecord]:
    """Convert the task-centric history payload into :class:`TaskHistoryRecord`.

    Unlike activity records, entries without ``startTime`` are kept: only the
    task id and name are needed to label the diagram.
    """
    records: List[TaskHistoryRecord] = []
    for index, entry in enumerate(_entries(payload, "task_history")):
        if not isinstance(entry, Mapping):
            raise MalformedHistoryError(
                "task_history", f"record {index} is not an object"
            )
        records.append(_validate(TaskHistoryRecord, entry, "task_history", index))
    return records


def normalize_history(
    activities: Any, task_history: Any
) -> Tuple[List[ActivityRecord], List[TaskHistoryRecord]]:
    """Normalize both history payloads of one process instance.

    Pure transform: no ordering, no filtering beyond what the per-payload
    helpers document.
    """
    return normalize_activities(activities), normalize_task_history(task_history)
