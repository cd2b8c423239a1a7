# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Retry Policy & Manager — Storage retries with exponential backoff.

Only StorageFailure is retried. Access errors, InvalidReorder and NotFound
describe the request itself and are raised on the first attempt. Every
ordered-collection operation writes a final state ("set to this order"),
so re-running one after a rolled-back attempt is safe.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from mise_os.core.config import settings
from mise_os.core.errors import StorageFailure
from mise_os.core.metrics import platform_metrics

logger = logging.getLogger("mise.retry")

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    backoff_base: float = 0.1        # seconds
    backoff_multiplier: float = 2.0  # exponential factor
    max_backoff: float = 5.0         # cap

    def next_delay(self, attempt: int) -> float:
        """Calculate delay before next retry (exponential backoff)."""
        delay = self.backoff_base * (self.backoff_multiplier ** (attempt - 1))
        return min(delay, self.max_backoff)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.STORAGE_RETRY_ATTEMPTS,
            backoff_base=settings.STORAGE_RETRY_BACKOFF,
        )


class RetryManager:
    """Runs storage operations under a RetryPolicy."""

    def __init__(self, policy: Optional[RetryPolicy] = None):
        self._policy = policy or RetryPolicy.from_settings()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def should_retry(self, attempt: int) -> bool:
        """Check if we should retry based on attempt count."""
        return attempt < self._policy.max_attempts

    async def wait_before_retry(self, attempt: int) -> None:
        """Wait with exponential backoff before retrying."""
        delay = self._policy.next_delay(attempt)
        logger.info("Retry: waiting %.2fs before attempt %d", delay, attempt + 1)
        await asyncio.sleep(delay)

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "operation") -> T:
        """
        Await ``operation()``, re-invoking it after a StorageFailure.

        The last StorageFailure is re-raised once attempts are exhausted.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except StorageFailure as e:
                if not self.should_retry(attempt):
                    logger.error(
                        "%s failed after %d attempts: %s", label, attempt, e,
                    )
                    raise
                platform_metrics.inc("storage_retry")
                logger.warning(
                    "%s failed on attempt %d: %s; will retry", label, attempt, e,
                )
                await self.wait_before_retry(attempt)
                attempt += 1
