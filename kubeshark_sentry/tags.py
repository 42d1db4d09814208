"""Attach tags to the Sentry scope."""

from typing import Mapping, Protocol

import sentry_sdk


class TagSink(Protocol):
    """Anything that can receive a tag."""

    def apply(self, key: str, value: str) -> None: ...


class ScopeTagSink:
    """Writes tags to the current Sentry isolation scope."""

    def apply(self, key: str, value: str) -> None:
        sentry_sdk.set_tag(key, value)


def apply_tags(tags: Mapping[str, str], sink: TagSink | None = None) -> None:
    """Apply every non-empty tag to ``sink`` (the Sentry scope by default).

    Empty values are skipped, not treated as errors.
    """
    sink = sink or ScopeTagSink()
    for key, value in tags.items():
        if value:
            sink.apply(key, value)
