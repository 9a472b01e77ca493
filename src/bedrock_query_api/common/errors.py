"""Exception types raised by the client adapter and config loader."""
from __future__ import annotations


class QueryApiError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(QueryApiError):
    """Required configuration is missing or malformed."""


class InferenceCallError(QueryApiError):
    """Transport or service failure while calling Bedrock."""


class DecodeError(QueryApiError):
    """Bedrock replied with a body that is not a valid model response."""
