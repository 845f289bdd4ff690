"""In-memory history source for tests and offline replay."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from ..errors import SourceError
from .base import HistorySource


class InMemoryHistorySource(HistorySource):
    """Serve canned payloads keyed by instance and definition id.

    ``delay`` simulates network latency, which lets tests interleave
    overlapping fetches.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.activities: Dict[str, Any] = {}
        self.task_history: Dict[str, Any] = {}
        self.definitions: Dict[str, str] = {}
        self.delay = delay
        self.calls: List[tuple] = []

    def add_instance(
        self,
        instance_id: str,
        activities: Any,
        task_history: Optional[Any] = None,
    ) -> None:
        self.activities[instance_id] = activities
        self.task_history[instance_id] = task_history if task_history is not None else []

    def add_definition(self, definition_id: str, xml: str) -> None:
        self.definitions[definition_id] = xml

    async def _lookup(self, store: Dict[str, Any], key: str, kind: str) -> Any:
        self.calls.append((kind, key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if key not in store:
            raise SourceError(f"No {kind} for {key!r}")
        return store[key]

    async def fetch_activities(self, instance_id: str) -> List[Any]:
        return await self._lookup(self.activities, instance_id, "activities")

    async def fetch_task_history(self, instance_id: str) -> List[Any]:
        return await self._lookup(self.task_history, instance_id, "task_history")

    async def fetch_definition_xml(self, definition_id: str) -> str:
        return await self._lookup(self.definitions, definition_id, "definition_xml")

    async def fetch_definition_activities(self, definition_id: str) -> List[Any]:
        self.calls.append(("definition_activities", definition_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        return [
            record
            for records in self.activities.values()
            if isinstance(records, list)
            for record in records
            if isinstance(record, dict)
            and record.get("processDefinitionId") == definition_id
        ]
