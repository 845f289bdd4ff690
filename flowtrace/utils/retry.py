"""Backoff helpers for retrying engine requests."""

from __future__ import annotations

import asyncio
import logging
import random

logger = logging.getLogger(__name__)

MAX_BACKOFF = 10.0


def compute_backoff(
    attempt: int, base: float = 0.5, cap: float = MAX_BACKOFF, jitter: float = 0.25
) -> float:
    """Delay before retry ``attempt`` (0-based): ``base`` doubled per attempt, capped at ``cap``, plus jitter."""
    delay = min(base * (2 ** attempt), cap)
    return delay + random.uniform(0, jitter)


async def schedule_retry(attempt: int, base: float = 0.5) -> None:
    delay = compute_backoff(attempt, base)
    logger.debug(f"Retrying in {delay:.2f}s (attempt {attempt + 1})")
    await asyncio.sleep(delay)
