from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List, Optional, TypeVar

from ..core.errors import ZakatError, ZakatErrorCode

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class CircuitBreakerConfig:
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0


class CircuitState:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Stops calling the price API after repeated consecutive failures.

    Once open, calls fail fast with ``CIRCUIT_OPEN`` until ``reset_timeout_seconds``
    pass; the next call is then let through as a half-open probe.
    """

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._config = config or CircuitBreakerConfig()
        self._clock = clock or time.monotonic
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> str:
        return self._state

    def _can_attempt(self) -> bool:
        if self._state == CircuitState.OPEN:
            if (self._clock() - self._opened_at) >= self._config.reset_timeout_seconds:
                self._state = CircuitState.HALF_OPEN
                return True
            return False
        return True

    def _on_success(self) -> None:
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _on_failure(self) -> None:
        self._failures += 1
        if self._state == CircuitState.HALF_OPEN or self._failures >= self._config.failure_threshold:
            if self._state != CircuitState.OPEN:
                _logger.warning("Circuit opened after %d consecutive failures", self._failures)
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        if not self._can_attempt():
            raise ZakatError(
                ZakatErrorCode.CIRCUIT_OPEN,
                "Metal price API temporarily disabled after repeated failures",
            )
        try:
            result = await fn()
        except Exception:
            self._on_failure()
            raise
        else:
            self._on_success()
            return result


def _is_retryable(exc: Exception) -> bool:
    return isinstance(exc, ZakatError) and exc.retryable


async def with_retries(
    coro_factory: Callable[[], Awaitable[T]],
    attempts: int = 3,
    backoff_ms: Optional[Iterable[int]] = None,
    retry_if: Callable[[Exception], bool] = _is_retryable,
) -> T:
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")
    backoff_seq: List[int] = list(backoff_ms or [100, 500, 2000])
    last_exc: Exception | None = None
    for attempt in range(attempts):
        try:
            return await coro_factory()
        except Exception as exc:  # noqa: BLE001 - broad for retry wrapper
            last_exc = exc
            if attempt == attempts - 1 or not retry_if(exc):
                break
            delay_ms = backoff_seq[min(attempt, len(backoff_seq) - 1)]
            _logger.warning("Attempt %d/%d failed (%s); retrying in %dms", attempt + 1, attempts, exc, delay_ms)
            await asyncio.sleep(delay_ms / 1000.0)
    assert last_exc is not None
    raise last_exc
