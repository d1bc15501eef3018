"""Retry decorator for GitHub API rate limits.

Only rate limit responses are retried. Every other failure propagates to the
caller unchanged so that the synchronization engine can record it against the
issue being processed.
"""

import asyncio
import functools
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def is_rate_limit_response(exc: RequestFailed) -> bool:
    """Return True if a failed GitHub request was rejected because of a rate limit."""
    status_code = exc.response.status_code
    if status_code == 429:
        return True
    if status_code == 403:
        remaining = exc.response.headers.get("x-ratelimit-remaining")
        return remaining == "0" or "rate limit" in f"{exc} {exc.response.text}".lower()
    return False


def wait_time_from_headers(headers: Any, default: float) -> float:
    """Compute how long to wait before retrying from GitHub rate limit headers.

    `retry-after` takes precedence over `x-ratelimit-reset`. Unparseable header
    values fall back to the supplied default.
    """
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)
            return default

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            seconds_until_reset = int(rate_limit_reset) - int(time.time())
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset)
            return default
        if seconds_until_reset > 0:
            return float(seconds_until_reset + 1)
    return default


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying async GitHub calls that hit a rate limit.

    Args:
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Delay in seconds used when GitHub gives no hint (default: 10.0)
        max_delay: Upper bound for any single wait in seconds (default: 300.0)
        exponential_base: Growth factor of the fallback delay (default: 2.0)

    Returns:
        Decorated coroutine function with rate limit retry logic
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as exc:
                    if attempt == max_retries:
                        logger.error("Max retries reached for GitHub rate limit", function=func.__name__, attempt=attempt + 1)
                        raise
                    retry_after = getattr(exc, "retry_after", None)
                    wait_time = retry_after.total_seconds() if retry_after else delay
                    rate_limit_type = "primary" if isinstance(exc, PrimaryRateLimitExceeded) else "secondary"
                except RequestFailed as exc:
                    if not is_rate_limit_response(exc):
                        raise
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=exc.response.status_code,
                        )
                        raise
                    wait_time = wait_time_from_headers(exc.response.headers, delay)
                    rate_limit_type = "response"

                wait_time = min(wait_time, max_delay)
                logger.warning(
                    "GitHub rate limit exceeded, waiting before retrying",
                    function=func.__name__,
                    rate_limit_type=rate_limit_type,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)

        return wrapper  # type: ignore

    return decorator
