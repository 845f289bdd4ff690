"""Base interface for workflow-engine history sources."""

from __future__ import annotations

import abc
from typing import Any, List


class HistorySource(metaclass=abc.ABCMeta):
    """Abstract read-only view of the engine's history API.

    Implementations return raw JSON-like payloads; validation is left to
    :mod:`flowtrace.trace.normalize` so a broken payload surfaces as
    :class:`~flowtrace.errors.MalformedHistoryError`.
    """

    async def connect(self) -> None:
        """Open connection to the engine (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close connection to the engine (no-op by default)."""
        pass

    async def __aenter__(self) -> "HistorySource":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    @abc.abstractmethod
    async def fetch_activities(self, instance_id: str) -> List[Any]:
        """Return the historic activity list of a process instance."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_task_history(self, instance_id: str) -> List[Any]:
        """Return the task-centric history of a process instance."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_definition_xml(self, definition_id: str) -> str:
        """Return the BPMN XML of a process definition."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_definition_activities(self, definition_id: str) -> List[Any]:
        """Return activity records of every instance of a definition."""
        raise NotImplementedError
