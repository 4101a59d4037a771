"""Resilience patterns module."""

from climaseries.core.patterns.retry import ExponentialBackoffRetry, RetryConfig, RetryState

__all__ = [
    "ExponentialBackoffRetry",
    "RetryConfig",
    "RetryState",
]
