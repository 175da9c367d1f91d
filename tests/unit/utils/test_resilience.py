"""Unit tests for resilience utilities."""

from unittest.mock import AsyncMock

import pytest

from zakat_prices.core.errors import ZakatError, ZakatErrorCode
from zakat_prices.utils.resilience import CircuitBreaker, CircuitBreakerConfig, CircuitState, with_retries


def _network_error():
    return ZakatError(ZakatErrorCode.NETWORK_ERROR, "connection reset")


@pytest.mark.asyncio
class TestWithRetries:
    """Test with_retries retry functionality."""

    async def test_retry_success_first_attempt(self):
        """Test successful execution on first attempt."""
        mock_func = AsyncMock(return_value="success")

        result = await with_retries(mock_func, attempts=3)

        assert result == "success"
        assert mock_func.call_count == 1

    async def test_retry_transient_failure_then_success(self):
        """Test retry on transient failure followed by success."""
        call_count = 0

        async def func_with_failures():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise _network_error()
            return "success"

        result = await with_retries(func_with_failures, attempts=3, backoff_ms=[1, 1])

        assert result == "success"
        assert call_count == 3

    async def test_retry_max_attempts_exceeded(self):
        """Test that retry stops after max attempts and re-raises."""
        mock_func = AsyncMock(side_effect=_network_error())

        with pytest.raises(ZakatError, match="connection reset"):
            await with_retries(mock_func, attempts=3, backoff_ms=[1, 1])

        assert mock_func.call_count == 3

    async def test_non_retryable_error_raised_immediately(self):
        """Test errors rejected by the predicate are not retried."""
        mock_func = AsyncMock(side_effect=ZakatError(ZakatErrorCode.PARSE_ERROR, "bad body"))

        with pytest.raises(ZakatError, match="bad body"):
            await with_retries(mock_func, attempts=3, backoff_ms=[1])

        assert mock_func.call_count == 1

    async def test_plain_exceptions_not_retried_by_default(self):
        """Test programming errors are not masked by retries."""
        mock_func = AsyncMock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError):
            await with_retries(mock_func, attempts=3, backoff_ms=[1])

        assert mock_func.call_count == 1

    async def test_zero_attempts_rejected(self):
        """Test a non-positive attempt count is refused before calling."""
        mock_func = AsyncMock(return_value="success")

        with pytest.raises(ValueError, match="attempts"):
            await with_retries(mock_func, attempts=0)

        mock_func.assert_not_called()

    async def test_custom_retry_predicate(self):
        """Test a custom predicate decides what is retried."""
        mock_func = AsyncMock(side_effect=[ValueError("boom"), "ok"])

        result = await with_retries(mock_func, attempts=2, backoff_ms=[1], retry_if=lambda exc: True)

        assert result == "ok"
        assert mock_func.call_count == 2

    async def test_backoff_sequence(self, monkeypatch):
        """Test delays follow the backoff list and repeat its last value."""
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("zakat_prices.utils.resilience.asyncio.sleep", fake_sleep)
        mock_func = AsyncMock(side_effect=_network_error())

        with pytest.raises(ZakatError):
            await with_retries(mock_func, attempts=4, backoff_ms=[50, 100])

        assert delays == [0.05, 0.1, 0.1]


class TestCircuitBreaker:
    """Test CircuitBreaker functionality."""

    @pytest.mark.asyncio
    async def test_circuit_initially_closed(self):
        """Test that circuit starts in closed state and allows calls."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=3))

        mock_func = AsyncMock(return_value="result")
        result = await breaker.run(mock_func)

        assert result == "result"
        assert breaker.state == CircuitState.CLOSED
        mock_func.assert_called_once()

    @pytest.mark.asyncio
    async def test_circuit_opens_after_threshold(self, clock):
        """Test circuit opens after failure threshold."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=3, reset_timeout_seconds=1), clock=clock)
        failing_func = AsyncMock(side_effect=_network_error())

        for _ in range(3):
            with pytest.raises(ZakatError, match="connection reset"):
                await breaker.run(failing_func)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(ZakatError) as excinfo:
            await breaker.run(failing_func)
        assert excinfo.value.code == ZakatErrorCode.CIRCUIT_OPEN
        assert failing_func.call_count == 3

    @pytest.mark.asyncio
    async def test_circuit_half_open_after_cooldown(self, clock):
        """Test circuit lets a probe through after cooldown and closes on success."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=1, reset_timeout_seconds=10), clock=clock)
        with pytest.raises(ZakatError):
            await breaker.run(AsyncMock(side_effect=_network_error()))

        clock.advance(10)
        result = await breaker.run(AsyncMock(return_value="success"))

        assert result == "success"
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_circuit_reopens_on_half_open_failure(self, clock):
        """Test a failed probe reopens the circuit."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=2, reset_timeout_seconds=10), clock=clock)
        failing_func = AsyncMock(side_effect=_network_error())
        for _ in range(2):
            with pytest.raises(ZakatError):
                await breaker.run(failing_func)

        clock.advance(10)
        with pytest.raises(ZakatError, match="connection reset"):
            await breaker.run(failing_func)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(ZakatError) as excinfo:
            await breaker.run(failing_func)
        assert excinfo.value.code == ZakatErrorCode.CIRCUIT_OPEN

    @pytest.mark.asyncio
    async def test_circuit_success_resets_failure_count(self):
        """Test successful calls reset failure count."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=3))
        failing_func = AsyncMock(side_effect=_network_error())
        success_func = AsyncMock(return_value="success")

        for _ in range(2):
            with pytest.raises(ZakatError):
                await breaker.run(failing_func)
        await breaker.run(success_func)
        for _ in range(2):
            with pytest.raises(ZakatError):
                await breaker.run(failing_func)

        assert await breaker.run(success_func) == "success"

    @pytest.mark.asyncio
    async def test_wrapped_callable_not_invoked_while_open(self, clock):
        """Test that wrapped callable is not invoked while circuit is open."""
        breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=1, reset_timeout_seconds=10), clock=clock)
        with pytest.raises(ZakatError):
            await breaker.run(AsyncMock(side_effect=_network_error()))

        tracked = AsyncMock(return_value="result")
        for _ in range(5):
            clock.advance(1)
            with pytest.raises(ZakatError):
                await breaker.run(tracked)

        tracked.assert_not_called()
