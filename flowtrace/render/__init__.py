"""Apply annotation plans to a diagram surface."""

from __future__ import annotations

import logging
import warnings

from ..contracts import AnnotationPlan, EdgeState, NodeState
from ..errors import UnresolvedReferenceWarning
from .base import DiagramSurface
from .inmemory import InMemorySurface

logger = logging.getLogger(__name__)

SHAPE_DONE = "highlight-shape-done"
SHAPE_ACTIVE = "highlight-shape-active"
ARROW_DONE = "highlight-arrow-done"
ARROW_RETURN = "highlight-arrow-return"
BADGE = "diagram-badge"
BADGE_PULSE = "diagram-badge pulse"

NODE_MARKERS = {NodeState.DONE: SHAPE_DONE, NodeState.ACTIVE: SHAPE_ACTIVE}
EDGE_MARKERS = {EdgeState.NORMAL_DONE: ARROW_DONE, EdgeState.LOOP_BACK: ARROW_RETURN}


def _known(surface: DiagramSurface, element_id: str) -> bool:
    if surface.has_element(element_id):
        return True
    warnings.warn(
        f"Element {element_id!r} is not on the diagram; leaving it unmarked",
        UnresolvedReferenceWarning,
        stacklevel=3,
    )
    return False


def apply_plan(surface: DiagramSurface, plan: AnnotationPlan) -> None:
    """Replace everything on ``surface`` with ``plan``.

    Markers and overlays are always cleared first and the whole plan is
    reapplied; nothing is patched incrementally.
    """
    surface.clear_overlays()
    surface.clear_markers()

    active = plan.active_node
    for element_id, state in plan.node_states.items():
        if not _known(surface, element_id):
            continue
        marker = NODE_MARKERS.get(state)
        if marker:
            surface.add_marker(element_id, marker)
        for step in plan.visits.get(element_id, ()):
            pulse = element_id == active and step == plan.badges.get(element_id)
            surface.add_overlay(element_id, str(step), BADGE_PULSE if pulse else BADGE)

    for element_id, state in plan.edge_states.items():
        if _known(surface, element_id):
            surface.add_marker(element_id, EDGE_MARKERS[state])

    for element_id, text in plan.labels.items():
        if _known(surface, element_id):
            surface.set_label(element_id, text)

    logger.debug(
        f"Applied plan at cursor {plan.cursor}/{plan.trace_length}: "
        f"{len(plan.node_states)} nodes, {len(plan.edge_states)} flows"
    )


__all__ = [
    "ARROW_DONE",
    "ARROW_RETURN",
    "BADGE",
    "BADGE_PULSE",
    "DiagramSurface",
    "InMemorySurface",
    "SHAPE_ACTIVE",
    "SHAPE_DONE",
    "apply_plan",
]
