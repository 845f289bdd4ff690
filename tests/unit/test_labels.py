"""Tests for label reconciliation."""

import pytest

from flowtrace.errors import UnresolvedReferenceWarning
from flowtrace.graph import GraphNode, ProcessGraph
from flowtrace.trace import normalize_activities, normalize_task_history, reconcile_labels

ACTIVITIES = normalize_activities(
    [
        {"activityId": "start", "activityType": "startEvent", "startTime": 0},
        {"activityId": "review", "activityType": "userTask", "taskId": "t1", "startTime": 1},
    ]
)
GRAPH = ProcessGraph(
    nodes={
        "start": GraphNode(id="start", type="startEvent", name="Start"),
        "review": GraphNode(id="review", type="userTask", name="Review v1"),
    }
)


def _history(*entries):
    return normalize_task_history([{"startTime": 1, **entry} for entry in entries])


def test_task_name_overrides_graph_name():
    labels = reconcile_labels(ACTIVITIES, _history({"taskId": "t1", "taskName": "Review Invoice"}), GRAPH)
    assert GRAPH.name_of("review") == "Review v1"
    assert labels == {"review": "Review Invoice"}


def test_falls_back_to_activity_id_of_task_record():
    labels = reconcile_labels(
        ACTIVITIES, _history({"activityId": "start", "taskName": "Request Submitted"})
    )
    assert labels == {"start": "Request Submitted"}


def test_task_id_join_wins_over_activity_id():
    labels = reconcile_labels(
        ACTIVITIES,
        _history({"taskId": "t1", "activityId": "start", "taskName": "Review Invoice"}),
    )
    assert labels == {"review": "Review Invoice"}


def test_unresolved_task_is_skipped_with_warning():
    with pytest.warns(UnresolvedReferenceWarning):
        labels = reconcile_labels(ACTIVITIES, _history({"taskId": "t404", "taskName": "Lost"}))
    assert labels == {}


def test_activity_missing_from_graph_is_skipped():
    with pytest.warns(UnresolvedReferenceWarning):
        labels = reconcile_labels(
            ACTIVITIES, _history({"activityId": "oldTask", "taskName": "Renamed"}), GRAPH
        )
    assert labels == {}


def test_later_task_record_wins():
    labels = reconcile_labels(
        ACTIVITIES,
        _history(
            {"activityId": "review", "taskName": "First"},
            {"activityId": "review", "taskName": "Second"},
        ),
    )
    assert labels == {"review": "Second"}
