"""Trace reconciliation: from raw history payloads to annotation plans."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..contracts import (
    ActivityRecord,
    AnnotationPlan,
    EdgeState,
    OrderedTrace,
    TaskHistoryRecord,
)
from ..graph import ProcessGraph
from .labels import reconcile_labels
from .loops import classify_edges
from .normalize import normalize_activities, normalize_history, normalize_task_history
from .ordering import order_trace
from .planner import clamp_cursor, plan_annotations

logger = logging.getLogger(__name__)


class TraceAnalysis(BaseModel):
    """Cursor-independent results for one fetch of an instance's history.

    Built once per fetch; :meth:`plan` is then the only step that depends on
    the replay cursor.
    """

    model_config = ConfigDict(frozen=True)

    trace: OrderedTrace
    edge_states: Dict[str, EdgeState] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    task_history: List[TaskHistoryRecord] = Field(default_factory=list)
    graph: Optional[ProcessGraph] = None

    @classmethod
    def from_records(
        cls,
        activities: List[ActivityRecord],
        task_history: List[TaskHistoryRecord],
        graph: Optional[ProcessGraph] = None,
    ) -> "TraceAnalysis":
        trace = order_trace(activities)
        analysis = cls(
            trace=trace,
            edge_states=classify_edges(trace, graph),
            labels=reconcile_labels(trace.records, task_history, graph),
            task_history=task_history,
            graph=graph,
        )
        logger.debug(
            f"Analysed trace of {len(trace)} records "
            f"({sum(s is EdgeState.LOOP_BACK for s in analysis.edge_states.values())} loop-backs)"
        )
        return analysis

    @classmethod
    def build(
        cls,
        activities: Any,
        task_history: Any,
        graph: Optional[ProcessGraph] = None,
    ) -> "TraceAnalysis":
        """Normalize raw payloads and analyse them.

        Raises:
            MalformedHistoryError: If either payload is malformed.
        """
        records, history = normalize_history(activities, task_history)
        return cls.from_records(records, history, graph)

    def __len__(self) -> int:
        return len(self.trace)

    def plan(self, cursor: Optional[int] = None) -> AnnotationPlan:
        """Return the annotation plan at ``cursor`` (default: whole trace)."""
        return plan_annotations(self.trace, self.edge_states, cursor, self.labels)


__all__ = [
    "TraceAnalysis",
    "classify_edges",
    "clamp_cursor",
    "normalize_activities",
    "normalize_history",
    "normalize_task_history",
    "order_trace",
    "plan_annotations",
    "reconcile_labels",
]
