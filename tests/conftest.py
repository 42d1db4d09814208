"""Shared test fixtures.

HTTP calls never leave the process: every test routes requests through
httpx.MockTransport with a handler standing in for the Kubeshark cloud API.
"""

from typing import Callable

import httpx
import pytest

from kubeshark_sentry.settings import SentrySettings


@pytest.fixture
def fast_settings() -> SentrySettings:
    """Default retry ceiling with zero backoff, ignoring any local .env file."""
    return SentrySettings(_env_file=None, retry_wait_min=0, retry_wait_max=0)


@pytest.fixture
def make_client() -> Callable[[Callable], httpx.AsyncClient]:
    """Build an AsyncClient whose transport is the given request handler."""

    def _make(handler: Callable) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
