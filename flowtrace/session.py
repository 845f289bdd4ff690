"""Fetch-and-annotate session for one process instance diagram."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .cache import DefinitionCache
from .contracts import AnnotationPlan
from .errors import FlowtraceError
from .graph import ProcessGraph
from .render import DiagramSurface, apply_plan
from .sources import HistorySource
from .trace import TraceAnalysis, clamp_cursor, normalize_history

logger = logging.getLogger(__name__)


class DiagramSession:
    """Keep the annotation plan of one instance in step with its history.

    Every :meth:`refresh` gets a generation number. A refresh that completes
    after a newer one has started, or after :meth:`switch_instance`, is
    discarded so a slow response can never overwrite a newer plan. A refresh
    that fails leaves the previous plan in place and records the error in
    :attr:`last_error`.
    """

    def __init__(
        self,
        source: HistorySource,
        instance_id: str,
        cache: Optional[DefinitionCache] = None,
        surface: Optional[DiagramSurface] = None,
    ) -> None:
        self.source = source
        self.instance_id = instance_id
        self.cache = cache if cache is not None else DefinitionCache()
        self.surface = surface
        self.last_error: Optional[FlowtraceError] = None
        self._generation = 0
        self._analysis: Optional[TraceAnalysis] = None
        self._plan: Optional[AnnotationPlan] = None
        self._cursor: Optional[int] = None

    @property
    def plan(self) -> Optional[AnnotationPlan]:
        return self._plan

    @property
    def analysis(self) -> Optional[TraceAnalysis]:
        return self._analysis

    @property
    def graph(self) -> Optional[ProcessGraph]:
        return self._analysis.graph if self._analysis else None

    @property
    def cursor(self) -> Optional[int]:
        return self._cursor

    async def refresh(self) -> Optional[AnnotationPlan]:
        """Fetch the instance history and rebuild the plan at full length.

        Returns:
            The current plan, which is the previous one if this refresh was
            superseded while in flight.

        Raises:
            FlowtraceError: If fetching or parsing fails. The previous plan
                stays applied.
        """
        self._generation += 1
        generation = self._generation
        instance_id = self.instance_id

        try:
            # Both fetches settle before any failure propagates.
            results = await asyncio.gather(
                self.source.fetch_activities(instance_id),
                self.source.fetch_task_history(instance_id),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            raw_activities, raw_history = results
            activities, task_history = normalize_history(raw_activities, raw_history)

            graph = None
            definition_id = next(
                (a.process_definition_id for a in activities if a.process_definition_id),
                None,
            )
            if definition_id:
                graph = await self.cache.get(definition_id, self.source)
        except FlowtraceError as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failure of superseded refresh for {instance_id}: {e}")
                return self._plan
            self.last_error = e
            logger.error(f"Refresh of instance {instance_id} failed: {e}")
            raise

        if generation != self._generation:
            logger.info(f"Discarding superseded refresh for instance {instance_id}")
            return self._plan

        self._analysis = TraceAnalysis.from_records(activities, task_history, graph)
        self._cursor = None
        self.last_error = None
        logger.info(
            f"Loaded {len(self._analysis)} history records for instance {instance_id}"
        )
        return self._apply()

    def set_cursor(self, cursor: Optional[int]) -> AnnotationPlan:
        """Replay the loaded trace up to ``cursor`` records (``None``: all)."""
        if self._analysis is None:
            raise RuntimeError("No history loaded; call refresh() first")
        self._cursor = None if cursor is None else clamp_cursor(cursor, len(self._analysis))
        return self._apply()

    def switch_instance(self, instance_id: str) -> None:
        """Point the session at another instance, dropping in-flight refreshes."""
        self.instance_id = instance_id
        self._generation += 1
        self._analysis = None
        self._plan = None
        self._cursor = None
        self.last_error = None
        if self.surface is not None:
            self.surface.clear_overlays()
            self.surface.clear_markers()

    def _apply(self) -> AnnotationPlan:
        self._plan = self._analysis.plan(self._cursor)
        if self.surface is not None:
            apply_plan(self.surface, self._plan)
        return self._plan
