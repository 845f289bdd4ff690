"""Ordering of activity records into a replayable trace."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Tuple

from ..contracts import ActivityRecord, OrderedTrace


def _sort_key(record: ActivityRecord) -> Tuple[datetime, int]:
    # The engine stamps a flow and the node it enters with the same instant;
    # the flow has to come first so a replay never draws a node before its
    # incoming arrow.
    return record.start_time, 0 if record.is_edge else 1


def order_trace(records: Iterable[ActivityRecord]) -> OrderedTrace:
    """Sort records by start time, sequence flows first on ties.

    The sort is stable so fully tied records keep their input order. Repeated
    activity ids are kept: a recurring node is a loop, not a duplicate.
    """
    return OrderedTrace(records=tuple(sorted(records, key=_sort_key)))
