"""Caller-owned cache of parsed process definitions."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from .graph import ProcessGraph, parse_bpmn
from .sources import HistorySource

logger = logging.getLogger(__name__)


class DefinitionCache:
    """Keep parsed :class:`ProcessGraph` objects by process definition id.

    Definitions are immutable once deployed, so entries never expire on their
    own; call :meth:`force_refresh` to drop them explicitly.
    """

    def __init__(self) -> None:
        self._graphs: Dict[str, ProcessGraph] = {}

    def __contains__(self, definition_id: str) -> bool:
        return definition_id in self._graphs

    def __len__(self) -> int:
        return len(self._graphs)

    async def get(self, definition_id: str, source: HistorySource) -> ProcessGraph:
        """Return the graph of ``definition_id``, loading it on a miss.

        Raises:
            SourceError: If the definition cannot be fetched.
            DiagramParseError: If the fetched XML is not valid BPMN.
        """
        graph = self._graphs.get(definition_id)
        if graph is None:
            logger.debug(f"Loading process definition {definition_id}")
            xml = await source.fetch_definition_xml(definition_id)
            graph = parse_bpmn(xml)
            self._graphs[definition_id] = graph
        return graph

    def force_refresh(self, definition_id: Optional[str] = None) -> None:
        """Invalidate one definition, or all of them when no id is given."""
        if definition_id is None:
            self._graphs.clear()
        else:
            self._graphs.pop(definition_id, None)
