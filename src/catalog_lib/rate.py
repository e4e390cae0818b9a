import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed pause between consecutive enrichment calls."""

    def __init__(self, delay_ms: int, sleep: Callable[[float], None] = time.sleep) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")
        self.delay_ms = delay_ms
        self._sleep = sleep
        self.waits = 0

    def wait(self) -> None:
        if self.delay_ms == 0:
            return
        logger.info("Applying rate limit: waiting %dms before next request...", self.delay_ms)
        self._sleep(self.delay_ms / 1000.0)
        self.waits += 1
