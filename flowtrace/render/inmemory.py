"""Recording diagram surface for tests and text output."""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, List, Set, Tuple

from .base import DiagramSurface


class InMemorySurface(DiagramSurface):
    """Keep markers, overlays and labels in plain collections."""

    def __init__(self, element_ids: Iterable[str]) -> None:
        self._elements: Set[str] = set(element_ids)
        self.markers: DefaultDict[str, Set[str]] = defaultdict(set)
        self.overlays: List[Tuple[str, str, str]] = []
        self.labels: Dict[str, str] = {}

    def has_element(self, element_id: str) -> bool:
        return element_id in self._elements

    def add_marker(self, element_id: str, marker: str) -> None:
        self.markers[element_id].add(marker)

    def clear_markers(self) -> None:
        self.markers.clear()

    def add_overlay(self, element_id: str, text: str, css_class: str) -> None:
        self.overlays.append((element_id, text, css_class))

    def clear_overlays(self) -> None:
        self.overlays.clear()

    def set_label(self, element_id: str, text: str) -> None:
        self.labels[element_id] = text

    def markers_of(self, element_id: str) -> Set[str]:
        return set(self.markers.get(element_id, ()))
