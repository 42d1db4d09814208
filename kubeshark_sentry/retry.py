"""Retrying wrapper around httpx.AsyncClient.

The policy decides what is transient and how long to wait; the client only
runs the loop. Defaults mirror the usual retryable-HTTP contract:
- connection, timeout and protocol errors are retried
- 429 and every 5xx except 501 are retried
- invalid URLs, unsupported schemes and certificate failures are final
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, cast

import httpx

from kubeshark_sentry.settings import SentrySettings
from kubeshark_sentry.types import RetriesExhausted

logger = logging.getLogger(__name__)

# Statuses whose Retry-After header overrides the computed backoff
RETRY_AFTER_STATUSES = frozenset({httpx.codes.TOO_MANY_REQUESTS, httpx.codes.SERVICE_UNAVAILABLE})


def _is_certificate_error(error: BaseException) -> bool:
    """Walk the exception chain looking for a TLS verification failure."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLCertVerificationError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """When to retry and how long to wait between attempts."""

    max_retries: int = 3
    wait_min: float = 1.0
    wait_max: float = 30.0

    @classmethod
    def from_settings(cls, settings: SentrySettings) -> "RetryPolicy":
        return cls(
            max_retries=settings.retry_max,
            wait_min=settings.retry_wait_min,
            wait_max=settings.retry_wait_max,
        )

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def should_retry(
        self,
        response: httpx.Response | None = None,
        error: Exception | None = None,
    ) -> bool:
        """Check whether an attempt's outcome is transient.

        Args:
            response: Response of the attempt, if one was received
            error: Exception raised by the attempt, if any

        Returns:
            True if another attempt may succeed
        """
        if error is not None:
            if isinstance(error, httpx.UnsupportedProtocol):
                return False
            if _is_certificate_error(error):
                return False
            return isinstance(error, httpx.TransportError)

        if response is None:
            return False
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            return True
        return response.status_code >= 500 and response.status_code != httpx.codes.NOT_IMPLEMENTED

    def backoff(self, retry: int, response: httpx.Response | None = None) -> float:
        """Seconds to wait before retry number ``retry`` (0-based).

        Exponential from wait_min, capped at wait_max. A numeric Retry-After
        on 429/503 wins over the computed value.
        """
        if response is not None and response.status_code in RETRY_AFTER_STATUSES:
            retry_after = response.headers.get("retry-after", "")
            if retry_after.isdigit():
                return float(retry_after)

        wait = self.wait_min * (2**retry)
        return min(wait, self.wait_max)


class RetryingClient:
    """Sends requests through an httpx.AsyncClient, retrying per policy.

    Responses are streamed; use ``stream()`` so the body is always released.
    The wrapped client is not owned and is never closed here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` until it succeeds, fails for good, or attempts run out.

        Returns:
            The first non-retryable response (caller must close it)

        Raises:
            httpx.RequestError: Non-retryable transport failure
            RetriesExhausted: Every attempt failed transiently
        """
        attempts = self.policy.attempts
        last_error: Exception | None = None

        for retry in range(attempts):
            attempt = retry + 1
            logger.debug(f"{request.method} {request.url} (attempt {attempt}/{attempts})")

            response: httpx.Response | None = None
            error: Exception | None = None
            try:
                response = await self._client.send(request, stream=True)
            except httpx.RequestError as e:
                error = e

            if not self.policy.should_retry(response=response, error=error):
                if error is not None:
                    raise error
                return cast(httpx.Response, response)

            last_error = error
            wait = self.policy.backoff(retry, response)
            if response is not None:
                outcome = f"status {response.status_code}"
                await response.aclose()
            else:
                outcome = f"{type(error).__name__}: {error}"

            if attempt == attempts:
                break

            logger.debug(f"{request.method} {request.url} {outcome}, retrying in {wait:.2f}s")
            await self._sleep(wait)

        raise RetriesExhausted(request.method, str(request.url), attempts, last_error) from last_error

    @asynccontextmanager
    async def stream(self, request: httpx.Request) -> AsyncIterator[httpx.Response]:
        """Send ``request`` and close the response when the block exits."""
        response = await self.send(request)
        try:
            yield response
        finally:
            await response.aclose()
