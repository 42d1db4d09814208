"""Sentry initialization for Kubeshark components.

Usage:
    from kubeshark_sentry import init_sentry

    await init_sentry("hub", __version__, tags={"cluster": cluster_id})
"""

import logging
from typing import Any, Mapping

import httpx
import sentry_sdk

from kubeshark_sentry.dsn import fetch_dsn
from kubeshark_sentry.environment import ConfigSource, is_enabled, resolve_environment
from kubeshark_sentry.settings import SentrySettings
from kubeshark_sentry.tags import TagSink, apply_tags

logger = logging.getLogger(__name__)


async def init_sentry(
    service: str,
    version: str,
    *,
    tags: Mapping[str, str] | None = None,
    source: ConfigSource | None = None,
    client: httpx.AsyncClient | None = None,
    settings: SentrySettings | None = None,
    sink: TagSink | None = None,
    **sentry_options: Any,
) -> bool:
    """Initialize sentry_sdk when reporting is enabled and a DSN is available.

    Fetch errors are not caught; the caller decides whether they are fatal.
    ``environment`` and ``release`` in ``sentry_options`` override the resolved
    environment and ``version``.

    Returns:
        True if sentry_sdk was initialized
    """
    if not is_enabled(source):
        logger.debug("Sentry disabled (SENTRY_ENABLED is not 'true')")
        return False

    dsn = await fetch_dsn(service, version, source=source, client=client, settings=settings)
    if not dsn:
        logger.info(f"Sentry reporting not configured for {service}")
        return False

    environment = resolve_environment(source)
    # Explicit environment/release in sentry_options override the resolved ones
    options = {"environment": environment, "release": version, **sentry_options}
    sentry_sdk.init(dsn=dsn, **options)
    environment = options["environment"]
    apply_tags({"service": service, **(tags or {})}, sink)

    logger.info(f"Sentry initialized for {service} {version} ({environment})")
    return True
