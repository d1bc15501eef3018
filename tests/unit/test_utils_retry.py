"""Unit tests for the GitHub rate limit retry decorator."""

import time
from typing import Callable
from unittest.mock import AsyncMock, patch

import pytest
from githubkit.exception import RequestFailed

from github_linear_sync.utils.retry import is_rate_limit_response, retry_on_rate_limit, wait_time_from_headers


@pytest.mark.parametrize(
    "status_code,headers,message,expected",
    [
        pytest.param(429, {}, "Too Many Requests", True, id="429"),
        pytest.param(403, {"x-ratelimit-remaining": "0"}, "Forbidden", True, id="403 exhausted"),
        pytest.param(403, {}, "API rate limit exceeded", True, id="403 rate limit message"),
        pytest.param(403, {"x-ratelimit-remaining": "10"}, "Resource not accessible", False, id="403 permission"),
        pytest.param(404, {}, "Not Found", False, id="404"),
    ],
)
def test_is_rate_limit_response(
    make_request_failed: Callable[..., RequestFailed], status_code: int, headers: dict[str, str], message: str, expected: bool
) -> None:
    """Test detection of rate limited responses."""
    assert is_rate_limit_response(make_request_failed(status_code, headers, message)) is expected


def test_wait_time_prefers_retry_after() -> None:
    """Test that retry-after wins over x-ratelimit-reset."""
    assert wait_time_from_headers({"retry-after": "7", "x-ratelimit-reset": str(int(time.time()) + 100)}, 10.0) == 7.0


def test_wait_time_from_reset() -> None:
    """Test that a future reset time is waited for."""
    with patch("github_linear_sync.utils.retry.time.time", return_value=1_000):
        assert wait_time_from_headers({"x-ratelimit-reset": "1030"}, 10.0) == 31.0


@pytest.mark.parametrize(
    "headers",
    [
        pytest.param({}, id="no headers"),
        pytest.param({"retry-after": "soon"}, id="invalid retry-after"),
        pytest.param({"x-ratelimit-reset": "never"}, id="invalid reset"),
    ],
)
def test_wait_time_default(headers: dict[str, str]) -> None:
    """Test falling back to the default delay."""
    assert wait_time_from_headers(headers, 10.0) == 10.0


@pytest.mark.asyncio
async def test_retries_rate_limited_call(make_request_failed: Callable[..., RequestFailed]) -> None:
    """Test that a rate limited call is retried after waiting."""
    call = AsyncMock(side_effect=[make_request_failed(429, {"retry-after": "2"}), "ok"])

    @retry_on_rate_limit(max_retries=2)
    async def fetch() -> str:
        return await call()

    with patch("github_linear_sync.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        assert await fetch() == "ok"
    mock_sleep.assert_awaited_once_with(2.0)
    assert call.await_count == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(make_request_failed: Callable[..., RequestFailed]) -> None:
    """Test that the rate limit error propagates once retries are exhausted."""
    call = AsyncMock(side_effect=make_request_failed(429))

    @retry_on_rate_limit(max_retries=2, initial_delay=1.0)
    async def fetch() -> str:
        return await call()

    with patch("github_linear_sync.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep, pytest.raises(RequestFailed):
        await fetch()
    assert call.await_count == 3
    assert [awaited.args[0] for awaited in mock_sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_other_errors_are_not_retried(make_request_failed: Callable[..., RequestFailed]) -> None:
    """Test that non rate limit failures propagate immediately."""
    call = AsyncMock(side_effect=make_request_failed(500))

    @retry_on_rate_limit()
    async def fetch() -> str:
        return await call()

    with patch("github_linear_sync.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep, pytest.raises(RequestFailed):
        await fetch()
    assert call.await_count == 1
    mock_sleep.assert_not_awaited()


def test_rejects_sync_functions() -> None:
    """Test that the decorator only accepts coroutine functions."""
    with pytest.raises(TypeError, match="must be async"):

        @retry_on_rate_limit()
        def fetch() -> str:
            return "ok"
