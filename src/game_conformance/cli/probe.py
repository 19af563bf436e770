"""Pre-flight readiness probe for the game server, with exponential backoff."""

from __future__ import annotations

import asyncio
import random
from typing import Callable, Optional

import httpx

from ..constants import (
    RETRY_BASE_DELAY_SECONDS,
    RETRY_EXPONENTIAL_BASE,
    RETRY_MAX_DELAY_SECONDS,
    SERVER_PROBE_MAX_ATTEMPTS,
    SERVER_PROBE_TIMEOUT_SECONDS,
)
from ..exceptions import ServerUnavailableError


def compute_retry_delay(attempt: int, base_delay: float = RETRY_BASE_DELAY_SECONDS) -> float:
    """Calculate exponential backoff delay with random jitter.

    Args:
        attempt (int): Retry attempt number, 1-indexed (1 = first retry).
        base_delay (float): Base delay in seconds, used for both the exponential
            term and the jitter range.

    Returns:
        float: Delay in seconds, capped at RETRY_MAX_DELAY_SECONDS.
    """
    exponential = base_delay * (RETRY_EXPONENTIAL_BASE ** (attempt - 1))
    jitter = random.uniform(0, base_delay)
    return min(RETRY_MAX_DELAY_SECONDS, exponential + jitter)


async def wait_for_server(
    base_url: str,
    max_attempts: int = SERVER_PROBE_MAX_ATTEMPTS,
    timeout_seconds: float = SERVER_PROBE_TIMEOUT_SECONDS,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """Poll ``base_url`` until it answers with a non-5xx status.

    Any HTTP answer below 500 counts as ready: a directory listing, an index
    page or even a 404 for the root all prove the server is accepting
    connections.

    Returns:
        int: The status code of the first ready response.

    Raises:
        ValueError: If max_attempts is less than 1.
        ServerUnavailableError: If every attempt failed.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    last_error: Optional[Exception] = None
    async with httpx.AsyncClient(timeout=timeout_seconds, transport=transport) as client:
        for attempt in range(1, max_attempts + 1):
            try:
                response = await client.get(base_url)
                if response.status_code < 500:
                    return response.status_code
                last_error = httpx.HTTPStatusError(
                    f"server answered {response.status_code}",
                    request=response.request,
                    response=response,
                )
            except httpx.RequestError as exc:
                last_error = exc

            if attempt == max_attempts:
                break
            delay = compute_retry_delay(attempt)
            if on_retry:
                on_retry(attempt, last_error, delay)
            await asyncio.sleep(delay)

    raise ServerUnavailableError(
        f"Game server at {base_url} is not reachable after {max_attempts} attempt(s): {last_error}"
    )
