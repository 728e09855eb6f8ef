"""Retrying HTTP calls for upstream providers."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff with jitter.

    The delay before retry ``i`` (0-based) is
    ``base_delay * 2**i + uniform(0, jitter)`` seconds.
    """

    attempts: int = 5
    base_delay: float = 0.4
    jitter: float = 0.15

    def delay(self, attempt: int) -> float:
        return self.base_delay * (2**attempt) + random.uniform(0, self.jitter)


def is_retryable(status_code: int) -> bool:
    """5xx and 429 are transient; every other 4xx is final."""
    return status_code >= 500 or status_code == 429


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, retrying transient failures.

    Args:
        client: Client to send the request with.
        method: HTTP method.
        url: Request URL.
        policy: Retry policy (defaults to ``RetryPolicy()``).
        **kwargs: Passed through to ``client.request``.

    Returns:
        The first 2xx response.

    Raises:
        httpx.HTTPStatusError: On a non-retryable status, or a retryable one
            once attempts are exhausted.
        httpx.TransportError: If the last attempt fails at the transport level.
    """
    policy = policy or RetryPolicy()
    attempts = max(1, policy.attempts)

    for attempt in range(attempts):
        last_attempt = attempt == attempts - 1
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            if last_attempt:
                raise
            reason = f"{type(e).__name__}: {e}"
        else:
            if not is_retryable(response.status_code) or last_attempt:
                response.raise_for_status()
                return response
            reason = f"HTTP {response.status_code}"

        delay = policy.delay(attempt)
        logger.warning(
            "Transient failure from %s (%s), retry %d/%d in %.2fs",
            url,
            reason,
            attempt + 1,
            attempts - 1,
            delay,
        )
        await asyncio.sleep(delay)

    # unreachable: the last attempt either returns or raises
    raise RuntimeError("retry loop exited without a response")
