"""HTTP history source backed by the workflow engine REST API."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..config import EngineConfig
from ..errors import SourceError
from ..utils.retry import schedule_retry
from .base import HistorySource

logger = logging.getLogger(__name__)


def unwrap_list_envelope(body: Any) -> Any:
    """Return the record list of a ``{"data": [...], "total": n}`` envelope.

    Any other body is returned unchanged.
    """
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    return body


class HttpHistorySource(HistorySource):
    """Fetch history payloads with :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        auth = None
        if self.config.username:
            auth = httpx.BasicAuth(self.config.username, self.config.password or "")
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            auth=auth,
            timeout=self.config.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str) -> httpx.Response:
        if self._client is None:
            await self.connect()

        attempt = 0
        while True:
            try:
                response = await self._client.get(path)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                raise SourceError(
                    f"GET {path} failed with status {e.response.status_code}"
                ) from e
            except httpx.TransportError as e:
                if attempt >= self.config.max_retries:
                    raise SourceError(f"GET {path} failed: {e}") from e
                logger.warning(
                    f"GET {path} failed ({e!r}); retry {attempt + 1}/{self.config.max_retries}"
                )
                await schedule_retry(attempt, self.config.retry_backoff)
                attempt += 1

    async def _get_list(self, path: str) -> Any:
        response = await self._get(path)
        try:
            body = response.json()
        except ValueError as e:
            raise SourceError(f"GET {path} returned invalid JSON") from e
        return unwrap_list_envelope(body)

    async def fetch_activities(self, instance_id: str) -> List[Any]:
        path = self.config.endpoints.activities.format(instance_id=instance_id)
        return await self._get_list(path)

    async def fetch_task_history(self, instance_id: str) -> List[Any]:
        path = self.config.endpoints.task_history.format(instance_id=instance_id)
        return await self._get_list(path)

    async def fetch_definition_xml(self, definition_id: str) -> str:
        path = self.config.endpoints.definition_xml.format(definition_id=definition_id)
        response = await self._get(path)
        return response.text

    async def fetch_definition_activities(self, definition_id: str) -> List[Any]:
        path = self.config.endpoints.definition_activities.format(
            definition_id=definition_id
        )
        return await self._get_list(path)
