"""Core data contracts for flowtrace."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# The engine serialises offsets as ``+0000``; pydantic wants ``+00:00``.
_COMPACT_OFFSET = re.compile(r"(T[\d:.]+[+-]\d{2})(\d{2})$")


def _expand_offset(value: Any) -> Any:
    if isinstance(value, str):
        return _COMPACT_OFFSET.sub(r"\1:\2", value.strip())
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ApiModel(BaseModel):
    """Base for records mirrored from the engine's camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ActivityType(str, Enum):
    """BPMN element types reported by the history API."""

    START_EVENT = "startEvent"
    END_EVENT = "endEvent"
    TASK = "task"
    USER_TASK = "userTask"
    SERVICE_TASK = "serviceTask"
    SCRIPT_TASK = "scriptTask"
    MANUAL_TASK = "manualTask"
    SEND_TASK = "sendTask"
    RECEIVE_TASK = "receiveTask"
    BUSINESS_RULE_TASK = "businessRuleTask"
    CALL_ACTIVITY = "callActivity"
    SUB_PROCESS = "subProcess"
    SEQUENCE_FLOW = "sequenceFlow"
    GATEWAY = "gateway"
    EXCLUSIVE_GATEWAY = "exclusiveGateway"
    PARALLEL_GATEWAY = "parallelGateway"
    INCLUSIVE_GATEWAY = "inclusiveGateway"
    EVENT_BASED_GATEWAY = "eventBasedGateway"
    INTERMEDIATE_CATCH_EVENT = "intermediateCatchEvent"
    INTERMEDIATE_THROW_EVENT = "intermediateThrowEvent"
    BOUNDARY_EVENT = "boundaryEvent"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ActivityType":
        """Map a raw type string onto a member, ``UNKNOWN`` if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class ActivityRecord(ApiModel):
    """One node or edge traversal observed in the engine history."""

    activity_id: str
    activity_type: ActivityType = ActivityType.UNKNOWN
    activity_name: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    task_id: Optional[str] = None
    process_definition_id: Optional[str] = None

    @field_validator("activity_type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> ActivityType:
        return ActivityType.parse(value)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalise_offset(cls, value: Any) -> Any:
        return _expand_offset(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def is_edge(self) -> bool:
        return self.activity_type is ActivityType.SEQUENCE_FLOW

    @property
    def is_active(self) -> bool:
        return self.end_time is None


class TaskStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class TaskHistoryRecord(ApiModel):
    """Human-task-centric audit entry from the process history endpoint."""

    task_id: Optional[str] = None
    task_name: Optional[str] = None
    status: TaskStatus = TaskStatus.ACTIVE
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    completed_by: Optional[str] = None
    assignee: Optional[str] = None
    form_key: Optional[str] = None
    form_submission_id: Optional[str] = None
    submitted_form_key: Optional[str] = None
    activity_id: Optional[str] = None
    type: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalise_offset(cls, value: Any) -> Any:
        return _expand_offset(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @model_validator(mode="before")
    @classmethod
    def _derive_status(cls, data: Any) -> Any:
        # Unknown or missing status falls back to what the end time implies.
        if not isinstance(data, dict):
            return data
        status = data.get("status")
        if isinstance(status, str):
            status = status.strip().upper()
        if status not in {s.value for s in TaskStatus}:
            ended = data.get("endTime") or data.get("end_time")
            status = TaskStatus.COMPLETED.value if ended else TaskStatus.ACTIVE.value
        return {**data, "status": status}

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


class OrderedTrace(BaseModel):
    """Time-ordered activity records of one process instance."""

    model_config = ConfigDict(frozen=True)

    records: Tuple[ActivityRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def prefix(self, cursor: int) -> Tuple[ActivityRecord, ...]:
        """Return the first ``cursor`` records."""
        return self.records[:cursor]

    @property
    def process_definition_id(self) -> Optional[str]:
        """Definition the trace belongs to, taken from its first record."""
        for record in self.records:
            if record.process_definition_id:
                return record.process_definition_id
        return None


class NodeState(str, Enum):
    UNVISITED = "UNVISITED"
    DONE = "DONE"
    ACTIVE = "ACTIVE"


class EdgeState(str, Enum):
    NORMAL_DONE = "NORMAL_DONE"
    LOOP_BACK = "LOOP_BACK"


class AnnotationPlan(BaseModel):
    """Visual state to apply to a static diagram, keyed by element id.

    Elements absent from ``node_states`` and ``edge_states`` are unvisited.
    ``badges`` holds the latest step number of each node while ``visits``
    keeps every step number, since a node revisited in a loop carries one
    badge per visit.
    """

    model_config = ConfigDict(frozen=True)

    node_states: Dict[str, NodeState] = Field(default_factory=dict)
    edge_states: Dict[str, EdgeState] = Field(default_factory=dict)
    badges: Dict[str, int] = Field(default_factory=dict)
    visits: Dict[str, Tuple[int, ...]] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    cursor: int = 0
    trace_length: int = 0

    @property
    def active_node(self) -> Optional[str]:
        for activity_id, state in self.node_states.items():
            if state is NodeState.ACTIVE:
                return activity_id
        return None

    def to_json(self) -> str:
        """Serialize the plan to JSON."""
        return self.model_dump_json()
