"""Utility functions."""

from .retry import RetryError, backoff_delays, retry_async

__all__ = ["RetryError", "backoff_delays", "retry_async"]
