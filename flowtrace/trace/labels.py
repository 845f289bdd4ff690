"""Display-name reconciliation between task history and diagram nodes."""

from __future__ import annotations

import warnings
from typing import Dict, Iterable, Optional

from ..contracts import ActivityRecord, TaskHistoryRecord
from ..errors import UnresolvedReferenceWarning
from ..graph import ProcessGraph


def reconcile_labels(
    activities: Iterable[ActivityRecord],
    task_history: Iterable[TaskHistoryRecord],
    graph: Optional[ProcessGraph] = None,
) -> Dict[str, str]:
    """Map activity ids to the task names recorded in business history.

    A task record is joined to its node through the ``taskId`` of the activity
    records, falling back to the task record's own ``activityId``. The task
    name wins over whatever name the diagram carries. Records that cannot be
    joined, or that join to an id ``graph`` does not contain, are skipped with
    a warning.
    """
    task_to_activity: Dict[str, str] = {}
    for record in activities:
        if record.task_id:
            task_to_activity[record.task_id] = record.activity_id

    labels: Dict[str, str] = {}
    for entry in task_history:
        activity_id = task_to_activity.get(entry.task_id) if entry.task_id else None
        if not activity_id:
            activity_id = entry.activity_id
        if not activity_id:
            warnings.warn(
                f"Task {entry.task_id or entry.task_name!r} has no matching activity",
                UnresolvedReferenceWarning,
                stacklevel=2,
            )
            continue
        if graph is not None and not graph.has_element(activity_id):
            warnings.warn(
                f"Activity {activity_id!r} for task {entry.task_id!r} is not in the diagram",
                UnresolvedReferenceWarning,
                stacklevel=2,
            )
            continue
        if entry.task_name:
            labels[activity_id] = entry.task_name
    return labels
