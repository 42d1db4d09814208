"""Fetch the Sentry DSN for a Kubeshark component from the cloud API.

One POST per call, retried by RetryingClient. A non-200 answer means
"reporting is not configured for this component" and yields an empty DSN.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from pydantic import ValidationError

from kubeshark_sentry.environment import ConfigSource, dsn_endpoint
from kubeshark_sentry.retry import RetryingClient, RetryPolicy
from kubeshark_sentry.settings import SentrySettings
from kubeshark_sentry.types import (
    ConfigurationError,
    DeserializationError,
    FetchRequest,
    FetchResponse,
    SerializationError,
    TransportError,
)

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def build_request_body(service: str, version: str) -> bytes:
    """Encode the FetchRequest payload as JSON."""
    try:
        return FetchRequest(service=service, version=version).model_dump_json().encode()
    except ValidationError as e:
        raise SerializationError(f"error marshalling request body: {e}") from e


def load_settings() -> SentrySettings:
    """Read SentrySettings from the environment and .env file."""
    try:
        return SentrySettings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid KUBESHARK_SENTRY_* settings: {e}") from e


@asynccontextmanager
async def _http_client(
    client: httpx.AsyncClient | None,
    settings: SentrySettings,
) -> AsyncIterator[httpx.AsyncClient]:
    # Injected clients belong to the caller
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as owned:
        yield owned


async def fetch_dsn(
    service: str,
    version: str,
    *,
    source: ConfigSource | None = None,
    client: httpx.AsyncClient | None = None,
    settings: SentrySettings | None = None,
) -> str:
    """Ask the Kubeshark cloud API for the DSN of ``service``.

    Args:
        service: Component name sent to the API
        version: Component build version sent to the API
        source: Config source for KUBESHARK_CLOUD_API_URL (defaults to os.environ)
        client: Optional httpx client to send through (left open)
        settings: Retry and timeout tuning (defaults to SentrySettings())

    Returns:
        The DSN, or "" when the API answers with anything but 200

    Raises:
        ConfigurationError: KUBESHARK_SENTRY_* settings are invalid
        SerializationError: Request body could not be encoded
        TransportError: Request could not be built or sent, even after retries
        DeserializationError: 200 response body is not a valid FetchResponse
        asyncio.CancelledError: The calling task was cancelled
    """
    settings = settings or load_settings()
    endpoint = dsn_endpoint(source)
    body = build_request_body(service, version)

    try:
        request = httpx.Request("POST", endpoint, content=body, headers=JSON_HEADERS)
    except httpx.InvalidURL as e:
        raise TransportError(f"error creating POST request: {e}") from e

    async with _http_client(client, settings) as http_client:
        retrying = RetryingClient(http_client, RetryPolicy.from_settings(settings))
        try:
            async with retrying.stream(request) as response:
                if response.status_code != httpx.codes.OK:
                    logger.debug(f"POST {endpoint} returned {response.status_code}, no DSN")
                    return ""
                try:
                    payload = await response.aread()
                except httpx.RequestError as e:
                    raise TransportError(f"error reading response body: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"error making POST request: {e}") from e

    try:
        dsn_response = FetchResponse.model_validate(json.loads(payload))
    except (ValueError, ValidationError) as e:
        raise DeserializationError(f"error unmarshalling response body: {e}") from e

    return dsn_response.dsn
