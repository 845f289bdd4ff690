"""Classification of traversed sequence flows as forward or loop-back."""

from __future__ import annotations

import logging
import warnings
from typing import Dict, Optional, Set

from ..contracts import EdgeState, OrderedTrace
from ..errors import UnresolvedReferenceWarning
from ..graph import ProcessGraph

logger = logging.getLogger(__name__)


def classify_edges(
    trace: OrderedTrace, graph: Optional[ProcessGraph]
) -> Dict[str, EdgeState]:
    """Classify every sequence flow in ``trace``.

    Walks the full trace once, remembering each node as it is reached. A flow
    whose target has already been reached is ``LOOP_BACK``; any other flow,
    including one whose target is not in ``graph``, is ``NORMAL_DONE``. A flow
    traversed several times keeps the classification of its first traversal,
    so the result does not depend on how much of the trace is later shown.
    """
    visited: Set[str] = set()
    states: Dict[str, EdgeState] = {}

    for record in trace.records:
        if not record.is_edge:
            visited.add(record.activity_id)
            continue
        if record.activity_id in states:
            continue

        target = graph.target_of(record.activity_id) if graph is not None else None
        if target is None:
            warnings.warn(
                f"Sequence flow {record.activity_id!r} has no resolvable target; "
                "drawing it as a normal transition",
                UnresolvedReferenceWarning,
                stacklevel=2,
            )
            states[record.activity_id] = EdgeState.NORMAL_DONE
            continue

        if target in visited:
            logger.debug(f"Flow {record.activity_id} loops back to {target}")
            states[record.activity_id] = EdgeState.LOOP_BACK
        else:
            states[record.activity_id] = EdgeState.NORMAL_DONE

    return states
