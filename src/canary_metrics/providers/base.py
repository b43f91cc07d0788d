"""Metrics provider abstraction.

Every backend client implements the same two operations:
- run_query: execute one backend-specific query and return the latest value
- is_online: cheap reachability and credential check

The base class implements the Template Method for both operations so that
instrumentation, logging and error normalization live in one place.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from canary_metrics.config import Credentials, decode_secret
from canary_metrics.errors import ProviderConfigError, ProviderError
from canary_metrics.instrumentation import track_request


class MetricsProvider(ABC):
    """Abstract base class for metrics providers."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Return the backend identifier (e.g., 'prometheus', 'datadog')."""
        pass

    @abstractmethod
    def _execute_query(self, query: str) -> float:
        """Run a query against the backend and return the latest value.

        Raises:
            ProviderError: If the backend cannot produce a value
        """
        pass

    @abstractmethod
    def _check_online(self) -> bool:
        """Perform the backend-specific health check.

        Raises:
            ProviderError: If the backend is unreachable or rejects credentials
        """
        pass

    def run_query(self, query: str) -> float:
        """Execute a query over the most recent window.

        Args:
            query: Backend-specific query string

        Returns:
            Value of the most recent datapoint.

        Raises:
            ProviderError: On transport failure, non-success status,
                empty result or malformed response.
        """
        with track_request(self.provider_type, "run_query"):
            try:
                return self._execute_query(query)
            except ProviderError as e:
                self._logger.warning("%s query failed: %s", self.provider_type, e)
                raise
            except Exception as e:
                self._logger.exception("Unexpected %s query failure", self.provider_type)
                raise ProviderError(
                    f"unexpected error running query: {e}", self.provider_type
                ) from e

    def is_online(self) -> bool:
        """Check that the backend is reachable and credentials are valid.

        Returns:
            True when the backend answered the health check.

        Raises:
            ProviderError: Describing why the backend is not usable.
        """
        with track_request(self.provider_type, "is_online"):
            try:
                return self._check_online()
            except ProviderError as e:
                self._logger.warning("%s health check failed: %s", self.provider_type, e)
                raise
            except Exception as e:
                self._logger.exception("Unexpected %s health check failure", self.provider_type)
                raise ProviderError(
                    f"unexpected error checking backend: {e}", self.provider_type
                ) from e

    def close(self) -> None:
        """Release resources owned by the provider."""
        pass

    def __enter__(self) -> "MetricsProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_secret(self, credentials: Optional[Credentials], key: str) -> str:
        """Look up a credential, failing closed when absent or undecodable."""
        if not credentials or key not in credentials:
            raise ProviderConfigError(
                f"{self.provider_type} credentials does not contain {key}",
                self.provider_type,
            )
        try:
            return decode_secret(credentials[key])
        except UnicodeDecodeError as e:
            raise ProviderConfigError(
                f"{self.provider_type} credential {key} is not valid UTF-8: {e}",
                self.provider_type,
            ) from e
