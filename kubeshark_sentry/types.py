"""Type definitions for kubeshark-sentry.

This module contains:
- Exception hierarchy for structured error handling
- Wire models exchanged with the Kubeshark cloud API
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# Exceptions
# =============================================================================


class SentryBootstrapError(Exception):
	"""Base for all kubeshark-sentry errors."""

	pass


class ConfigurationError(SentryBootstrapError):
	"""Tuning settings (KUBESHARK_SENTRY_*) are invalid."""

	pass


class SerializationError(SentryBootstrapError):
	"""Request body could not be encoded."""

	pass


class TransportError(SentryBootstrapError):
	"""Request could not be built or the exchange failed after retries.

	The underlying exception is kept as ``__cause__``.
	"""

	pass


class RetriesExhausted(TransportError):
	"""Every attempt failed with a retryable status or network error."""

	def __init__(self, method: str, url: str, attempts: int, error: Exception | None = None) -> None:
		message = f"{method} {url} giving up after {attempts} attempt(s)"
		if error is not None:
			message = f"{message}: {error}"
		super().__init__(message)
		self.method = method
		self.url = url
		self.attempts = attempts


class DeserializationError(SentryBootstrapError):
	"""Response body was not valid JSON of the expected shape."""

	pass


# =============================================================================
# Wire Models
# =============================================================================


class FetchRequest(BaseModel):
	"""Identifies the calling component to the DSN endpoint."""

	service: str = Field(..., description="Component name, e.g. 'hub' or 'worker'")
	version: str = Field(..., description="Build version of the component")


class FetchResponse(BaseModel):
	"""DSN endpoint answer.

	Unknown keys are ignored, the "dsn" key matches case-insensitively (last
	match wins), and null for either the body or the field means "no DSN".
	"""

	model_config = ConfigDict(extra="ignore")

	dsn: str = Field(default="", description="Sentry DSN, empty when reporting is not configured")

	@model_validator(mode="before")
	@classmethod
	def _fold_keys(cls, data: Any) -> Any:
		if data is None:
			return {}
		if not isinstance(data, dict):
			return data
		folded: dict[str, Any] = {}
		for key, value in data.items():
			if isinstance(key, str) and key.casefold() == "dsn":
				folded["dsn"] = value
		return folded

	@field_validator("dsn", mode="before")
	@classmethod
	def _null_dsn(cls, value: Any) -> Any:
		return "" if value is None else value
