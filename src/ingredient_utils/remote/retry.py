"""Retry decorator for directory HTTP calls."""

import logging
import time
from functools import wraps
from typing import Any, Callable

import requests

logger = logging.getLogger(__name__)

# Transient failures worth another attempt; HTTP error statuses are not retried
RETRYABLE_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.Timeout,
    ConnectionResetError,
)


def retry_on_connection_error(
    max_retries: int = 3, initial_delay: float = 1.0, backoff: float = 2.0
) -> Callable:
    """Decorator that retries a function on connection errors with exponential backoff.

    Args:
        max_retries: Total number of attempts
        initial_delay: Delay before the second attempt, in seconds
        backoff: Multiplier applied to the delay after each failed attempt

    Returns:
        Decorated function. The last connection error is re-raised once all
        attempts fail.

    Example:
        @retry_on_connection_error(max_retries=3, initial_delay=0.5)
        def fetch_units(session, url):
            return session.get(url, timeout=10)
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except RETRYABLE_ERRORS as e:
                    if attempt == max_retries:
                        logger.error(f"{func.__name__} failed after {max_retries} attempts: {e}")
                        raise
                    logger.warning(
                        f"Connection error on attempt {attempt}/{max_retries}: {e}. "
                        f"Retrying in {delay}s..."
                    )
                    time.sleep(delay)
                    delay *= backoff

        return wrapper

    return decorator
