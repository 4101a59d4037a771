"""Tests for exponential backoff retry."""

import pytest

from climaseries.core.exceptions import NetworkError, TransportError
from climaseries.core.patterns import ExponentialBackoffRetry, RetryConfig, RetryState


class TestRetryConfig:
    """Retry configuration."""

    def test_default_config(self):
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.base_delay == 1.0
        assert config.max_delay == 30.0
        assert config.exponential_base == 2.0
        assert config.jitter is True
        assert TransportError in config.retry_on_exceptions


class TestExponentialBackoffRetry:
    """Exponential backoff behaviour."""

    @pytest.fixture
    def retry_instance(self):
        return ExponentialBackoffRetry(RetryConfig(max_attempts=3, base_delay=0.0, max_delay=0.0))

    @pytest.mark.asyncio
    async def test_successful_execution(self, retry_instance):
        async def success_func():
            return "success"

        result = await retry_instance.execute(success_func)

        assert result == "success"
        assert retry_instance.state == RetryState.COMPLETED
        assert retry_instance.attempt_count == 1

    @pytest.mark.asyncio
    async def test_retryable_failures_are_retried(self, retry_instance):
        call_count = 0

        async def flaky_func():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise NetworkError(f"attempt {call_count}", "test-service")
            return "success"

        result = await retry_instance.execute(flaky_func)

        assert result == "success"
        assert call_count == 3
        assert retry_instance.attempt_count == 3

    @pytest.mark.asyncio
    async def test_all_attempts_fail(self, retry_instance):
        call_count = 0

        async def always_fail_func():
            nonlocal call_count
            call_count += 1
            raise NetworkError(f"failure {call_count}", "test-service")

        with pytest.raises(NetworkError) as exc_info:
            await retry_instance.execute(always_fail_func)

        assert call_count == 3
        assert retry_instance.state == RetryState.FAILED
        assert "failure 3" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_retryable_transport_error(self, retry_instance):
        call_count = 0

        async def not_found_func():
            nonlocal call_count
            call_count += 1
            raise TransportError("not found", "test-service", status_code=404)

        with pytest.raises(TransportError):
            await retry_instance.execute(not_found_func)

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_unlisted_exception_is_not_retried(self, retry_instance):
        call_count = 0

        async def broken_func():
            nonlocal call_count
            call_count += 1
            raise ValueError("bug")

        with pytest.raises(ValueError):
            await retry_instance.execute(broken_func)

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_arguments_are_passed(self, retry_instance):
        async def add(a, b, *, scale):
            return (a + b) * scale

        assert await retry_instance.execute(add, 1, 2, scale=10) == 30

    def test_calculate_delay(self):
        retry_instance = ExponentialBackoffRetry(RetryConfig(base_delay=1.0, max_delay=10.0, jitter=False))

        assert retry_instance._calculate_delay(0) == 1.0
        assert retry_instance._calculate_delay(1) == 2.0
        assert retry_instance._calculate_delay(2) == 4.0
        assert retry_instance._calculate_delay(3) == 8.0
        assert retry_instance._calculate_delay(4) == 10.0

    def test_calculate_delay_with_jitter(self):
        retry_instance = ExponentialBackoffRetry(RetryConfig(base_delay=1.0, max_delay=10.0, jitter=True))

        delays = [retry_instance._calculate_delay(1) for _ in range(10)]

        assert all(1.8 <= d <= 2.2 for d in delays)

    @pytest.mark.asyncio
    async def test_get_stats(self, retry_instance):
        async def fail_func():
            raise NetworkError("down", "test-service")

        with pytest.raises(NetworkError):
            await retry_instance.execute(fail_func)

        stats = retry_instance.get_stats()
        assert stats["attempts"] == 3
        assert stats["max_attempts"] == 3
        assert stats["state"] == "failed"
        assert stats["last_exception"] == "down"

    def test_retry_after_stretches_delay(self):
        retry_instance = ExponentialBackoffRetry(RetryConfig(base_delay=1.0, max_delay=10.0, jitter=False))
        retry_instance.attempt_count = 1
        throttled = TransportError("slow down", "test-service", status_code=429, retryable=True, retry_after=5.0)

        assert retry_instance.next_delay(throttled) == 5.0
        assert retry_instance.next_delay(NetworkError("down", "test-service")) == 1.0

    def test_retry_after_is_capped(self):
        retry_instance = ExponentialBackoffRetry(RetryConfig(base_delay=1.0, max_delay=10.0, jitter=False))
        retry_instance.attempt_count = 1
        throttled = TransportError("slow down", "test-service", status_code=429, retryable=True, retry_after=120.0)

        assert retry_instance.next_delay(throttled) == 10.0

    def test_explicitly_non_retryable_error(self):
        retry_instance = ExponentialBackoffRetry(RetryConfig())

        assert retry_instance.should_retry(NetworkError("down", "test-service")) is True
        assert retry_instance.should_retry(TransportError("gone", "test-service", status_code=410)) is False
        assert retry_instance.should_retry(ValueError("bug")) is False
