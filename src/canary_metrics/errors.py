"""Error types raised by metrics providers."""

from typing import Optional


class ProviderError(Exception):
    """Base class for every failure surfaced by a metrics provider."""

    def __init__(self, message: str, provider_type: Optional[str] = None):
        super().__init__(message)
        self.provider_type = provider_type


class ProviderConfigError(ProviderError):
    """Missing or malformed credentials, address or metric interval."""


class InvalidQueryError(ProviderConfigError):
    """The query payload could not be decoded for the backend."""


class ProviderTransportError(ProviderError):
    """The backend could not be reached (connection failure, timeout)."""


class ProviderResponseError(ProviderError):
    """The backend answered with a non-success status or an unreadable body."""

    def __init__(
        self,
        message: str,
        provider_type: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, provider_type)
        self.status_code = status_code
        self.body = body


class NoValuesFoundError(ProviderError):
    """The backend answered successfully but returned no usable datapoint."""
