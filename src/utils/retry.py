"""Simple retry helper for transient upstream calls."""

from __future__ import annotations

from collections.abc import Callable
import logging
import time
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry(
    fn: Callable[[], T],
    attempts: int = 3,
    delay_seconds: float = 0.25,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    last_error: BaseException | None = None
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as exc:
            last_error = exc
            logger.debug("attempt %d/%d failed: %s", attempt, attempts, exc)
            if attempt < attempts:
                time.sleep(delay_seconds)
    assert last_error is not None
    raise last_error
