"""kubeshark-sentry - Sentry bootstrap for Kubeshark components.

Usage:
    from kubeshark_sentry import init_sentry
    await init_sentry("hub", version)

For the individual steps:
    from kubeshark_sentry import is_enabled, resolve_environment, fetch_dsn, apply_tags
"""

from kubeshark_sentry.bootstrap import init_sentry
from kubeshark_sentry.dsn import fetch_dsn
from kubeshark_sentry.environment import dsn_endpoint, is_enabled, resolve_environment
from kubeshark_sentry.retry import RetryingClient, RetryPolicy
from kubeshark_sentry.settings import SentrySettings
from kubeshark_sentry.tags import ScopeTagSink, TagSink, apply_tags
from kubeshark_sentry.types import (
    ConfigurationError,
    DeserializationError,
    RetriesExhausted,
    SentryBootstrapError,
    SerializationError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "DeserializationError",
    "RetriesExhausted",
    "RetryPolicy",
    "RetryingClient",
    "ScopeTagSink",
    "SentryBootstrapError",
    "SentrySettings",
    "SerializationError",
    "TagSink",
    "TransportError",
    "apply_tags",
    "dsn_endpoint",
    "fetch_dsn",
    "init_sentry",
    "is_enabled",
    "resolve_environment",
]
