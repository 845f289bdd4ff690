"""Interface between annotation plans and a diagram rendering library."""

from __future__ import annotations

import abc


class DiagramSurface(metaclass=abc.ABCMeta):
    """The marking primitives a diagram viewer exposes, addressed by element id."""

    @abc.abstractmethod
    def has_element(self, element_id: str) -> bool:
        """Return ``True`` if the diagram contains ``element_id``."""
        raise NotImplementedError

    @abc.abstractmethod
    def add_marker(self, element_id: str, marker: str) -> None:
        """Attach a CSS marker class to an element."""
        raise NotImplementedError

    @abc.abstractmethod
    def clear_markers(self) -> None:
        """Remove every marker from every element."""
        raise NotImplementedError

    @abc.abstractmethod
    def add_overlay(self, element_id: str, text: str, css_class: str) -> None:
        """Attach a small text overlay (a step badge) to an element."""
        raise NotImplementedError

    @abc.abstractmethod
    def clear_overlays(self) -> None:
        """Remove every overlay."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_label(self, element_id: str, text: str) -> None:
        """Replace the visible name of an element."""
        raise NotImplementedError
