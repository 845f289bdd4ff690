"""Visit-frequency heatmap over all instances of a process definition."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Iterable

from .contracts import ActivityRecord

HIGH_THRESHOLD = 0.7
MEDIUM_THRESHOLD = 0.3


class HeatLevel(str, Enum):
    HIGH = "heatmap-high"
    MEDIUM = "heatmap-med"


def activity_counts(records: Iterable[ActivityRecord]) -> Dict[str, int]:
    return dict(Counter(record.activity_id for record in records))


def activity_heatmap(records: Iterable[ActivityRecord]) -> Dict[str, HeatLevel]:
    """Grade each activity by how often it ran relative to the busiest one.

    Activities at or below the medium threshold are left out.
    """
    counts = activity_counts(records)
    busiest = max(counts.values(), default=1)
    levels: Dict[str, HeatLevel] = {}
    for activity_id, count in counts.items():
        intensity = count / busiest
        if intensity > HIGH_THRESHOLD:
            levels[activity_id] = HeatLevel.HIGH
        elif intensity > MEDIUM_THRESHOLD:
            levels[activity_id] = HeatLevel.MEDIUM
    return levels
