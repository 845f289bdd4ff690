"""History source factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import FlowtraceConfig, load_config
from .base import HistorySource
from .http import HttpHistorySource, unwrap_list_envelope
from .inmemory import InMemoryHistorySource


def get_history_source(
    backend: Optional[str] = None, config: Optional[FlowtraceConfig] = None
) -> HistorySource:
    """Factory function to get the configured history source."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("FLOWTRACE_SOURCE")
        or config.source.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryHistorySource()
    elif backend == "http":
        return HttpHistorySource(config.engine)
    else:
        raise ValueError(f"Unsupported history source backend: {backend}")


__all__ = [
    "HistorySource",
    "HttpHistorySource",
    "InMemoryHistorySource",
    "get_history_source",
    "unwrap_list_envelope",
]
