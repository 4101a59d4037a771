"""Exponential backoff for calls to the climate service."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from climaseries.core.exceptions import TransportError
from climaseries.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class RetryState(Enum):
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RetryConfig:
    """How often and how patiently a failing call is repeated.

    ``max_attempts`` counts the first call. Delays grow by
    ``exponential_base`` from ``base_delay`` and never exceed ``max_delay``,
    not even when the server asks for a longer pause.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    retry_on_exceptions: list[type[BaseException]] = field(default_factory=lambda: [TransportError])


class ExponentialBackoffRetry:
    """Runs a coroutine function until it succeeds or retrying is pointless.

    An exception is retried when it is one of ``retry_on_exceptions`` and
    does not say ``retryable = False``. A ``retry_after`` hint on the
    exception (seconds) stretches the next delay.
    """

    def __init__(self, config: RetryConfig):
        self.config = config
        self.state = RetryState.READY
        self.attempt_count = 0
        self.total_delay = 0.0
        self.last_exception: Exception | None = None

    def should_retry(self, exc: Exception) -> bool:
        if not isinstance(exc, tuple(self.config.retry_on_exceptions)):
            return False
        return bool(getattr(exc, "retryable", True))

    def next_delay(self, exc: Exception | None = None) -> float:
        """Pause before the next attempt, after ``attempt_count`` failures."""
        delay = self._calculate_delay(self.attempt_count - 1)
        retry_after = getattr(exc, "retry_after", None)
        if retry_after is not None:
            delay = min(max(delay, float(retry_after)), self.config.max_delay)
        return delay

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)``, retrying retryable failures.

        Raises:
            Exception: the last failure once attempts are used up or the
                failure is not retryable
        """
        self.state = RetryState.RUNNING
        self.attempt_count = 0
        self.total_delay = 0.0

        while True:
            self.attempt_count += 1
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                self.last_exception = e
                if self.attempt_count >= self.config.max_attempts or not self.should_retry(e):
                    self.state = RetryState.FAILED
                    raise
                delay = self.next_delay(e)
                logger.debug("retrying", attempt=self.attempt_count, delay=delay, error=str(e))
                await asyncio.sleep(delay)
                self.total_delay += delay
            else:
                self.state = RetryState.COMPLETED
                return result

    def _calculate_delay(self, attempt_number: int) -> float:
        """Backoff for the retry following failure ``attempt_number`` (0 based)."""
        if attempt_number < 0:
            return 0.0

        delay = self.config.base_delay * (self.config.exponential_base**attempt_number)
        if self.config.jitter:
            spread = min(delay * 0.1, 1.0)
            delay += random.uniform(-spread, spread)
        return max(0.0, min(delay, self.config.max_delay))

    def get_stats(self) -> dict[str, Any]:
        return {
            "attempts": self.attempt_count,
            "max_attempts": self.config.max_attempts,
            "total_delay": self.total_delay,
            "state": self.state.value,
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }
