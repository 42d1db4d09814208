"""Environment lookups for error reporting.

Every function takes an optional config source (any ``Mapping[str, str]``).
When omitted the process environment is used, so callers and tests can pass
a plain dict instead of patching ``os.environ``.
"""

import os
from typing import Mapping

ENABLED_VAR = "SENTRY_ENABLED"
ENVIRONMENT_VAR = "SENTRY_ENVIRONMENT"
API_URL_VAR = "KUBESHARK_CLOUD_API_URL"

DEFAULT_ENVIRONMENT = "undefined"
DEFAULT_API_URL = "https://api.kubeshark.co"
DSN_PATH = "/sentry"

ConfigSource = Mapping[str, str]


def _source(source: ConfigSource | None) -> ConfigSource:
    return os.environ if source is None else source


def is_enabled(source: ConfigSource | None = None) -> bool:
    """Return True only when SENTRY_ENABLED is exactly "true".

    No trimming and no case folding: "True", "1" and "" all disable reporting.
    """
    return _source(source).get(ENABLED_VAR) == "true"


def resolve_environment(source: ConfigSource | None = None) -> str:
    """Get the deployment environment tag.

    Priority:
    1. SENTRY_ENVIRONMENT, even when set to an empty string
    2. "undefined"
    """
    env = _source(source)
    if ENVIRONMENT_VAR in env:
        return env[ENVIRONMENT_VAR]
    return DEFAULT_ENVIRONMENT


def dsn_endpoint(source: ConfigSource | None = None) -> str:
    """Get the DSN endpoint URL.

    Priority:
    1. KUBESHARK_CLOUD_API_URL + "/sentry" (explicit override, used verbatim)
    2. https://api.kubeshark.co/sentry
    """
    env = _source(source)
    base = env[API_URL_VAR] if API_URL_VAR in env else DEFAULT_API_URL
    return f"{base}{DSN_PATH}"
