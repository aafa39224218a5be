"""Progress observers for long faceting runs.

Observers only receive status strings; nothing they do affects results.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.2


class ProgressObserver(Protocol):
    def update(self, message: str) -> None:
        ...


class LoggingProgress:
    """Forward status messages to a logger at INFO level."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def update(self, message: str) -> None:
        self.log.info("%s", message)


class RateLimitedProgress:
    """Pass at most one message per ``delay`` seconds to ``observer``.

    Messages are built lazily so skipped updates cost nothing.
    """

    def __init__(
        self,
        observer: ProgressObserver,
        delay: float = DEFAULT_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.observer = observer
        self.delay = delay
        self.clock = clock
        self._last = clock()

    def tick(self, message: Callable[[], str]) -> None:
        now = self.clock()
        if now - self._last > self.delay:
            self.observer.update(message())
            self._last = now


def rate_limited(observer: Optional[ProgressObserver], delay: float = DEFAULT_DELAY) -> Optional[RateLimitedProgress]:
    if observer is None:
        return None
    if isinstance(observer, RateLimitedProgress):
        return observer
    return RateLimitedProgress(observer, delay=delay)


__all__ = [
    "DEFAULT_DELAY",
    "ProgressObserver",
    "LoggingProgress",
    "RateLimitedProgress",
    "rate_limited",
]
