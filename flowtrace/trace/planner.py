"""Annotation planning for a replay cursor position."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from ..contracts import AnnotationPlan, EdgeState, NodeState, OrderedTrace


def clamp_cursor(cursor: Optional[int], length: int) -> int:
    """Clamp ``cursor`` to ``[0, length]``; ``None`` means the whole trace."""
    if cursor is None:
        return length
    return max(0, min(cursor, length))


def plan_annotations(
    trace: OrderedTrace,
    edge_states: Mapping[str, EdgeState],
    cursor: Optional[int] = None,
    labels: Optional[Mapping[str, str]] = None,
) -> AnnotationPlan:
    """Compute the annotation plan for the first ``cursor`` records of ``trace``.

    Every node record in the prefix gets the next step badge and is ``DONE``,
    except the last node record which is ``ACTIVE``. Flow records take their
    precomputed classification from ``edge_states``. Elements not touched by
    the prefix are left out of the plan. The result depends only on the
    arguments, so repeated calls yield identical plans.
    """
    cursor = clamp_cursor(cursor, len(trace))
    prefix = trace.prefix(cursor)

    last_node_index = None
    for index, record in enumerate(prefix):
        if not record.is_edge:
            last_node_index = index

    node_states: Dict[str, NodeState] = {}
    edge_plan: Dict[str, EdgeState] = {}
    badges: Dict[str, int] = {}
    visits: Dict[str, List[int]] = {}
    step = 0

    for index, record in enumerate(prefix):
        if record.is_edge:
            edge_plan[record.activity_id] = edge_states.get(
                record.activity_id, EdgeState.NORMAL_DONE
            )
            continue
        step += 1
        badges[record.activity_id] = step
        visits.setdefault(record.activity_id, []).append(step)
        node_states[record.activity_id] = (
            NodeState.ACTIVE if index == last_node_index else NodeState.DONE
        )

    return AnnotationPlan(
        node_states=node_states,
        edge_states=edge_plan,
        badges=badges,
        visits={key: tuple(value) for key, value in visits.items()},
        labels=dict(labels or {}),
        cursor=cursor,
        trace_length=len(trace),
    )
