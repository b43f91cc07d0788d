"""Shared plumbing for providers that speak HTTP via requests."""

import logging
from typing import Any, Dict, Optional

import requests

from canary_metrics.errors import ProviderResponseError, ProviderTransportError
from canary_metrics.providers.base import MetricsProvider


class HTTPMetricsProvider(MetricsProvider):
    """Base class for providers backed by a requests session.

    The session is owned by the provider unless one is injected, in which
    case the caller keeps responsibility for closing it.

    The session is never mutated after construction; auth, headers and TLS
    verification are passed per request. requests does not document Session
    as thread-safe, so callers sharing one provider across threads should
    inject a session per thread when they need strict isolation.

    Attributes:
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        timeout: float,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger)
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _request_options(self) -> Dict[str, Any]:
        """Extra keyword arguments passed to every request."""
        return {}

    def _get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Issue a single GET bounded by the provider timeout."""
        try:
            return self._session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
                **self._request_options(),
            )
        except requests.exceptions.Timeout as e:
            raise ProviderTransportError(
                f"request to {url} timed out after {self.timeout}s", self.provider_type
            ) from e
        except requests.exceptions.RequestException as e:
            raise ProviderTransportError(
                f"request to {url} failed: {e}", self.provider_type
            ) from e

    def _check_status(self, response: requests.Response) -> None:
        """Raise with the response body when the status is not 200."""
        if response.status_code != 200:
            raise ProviderResponseError(
                f"error response: {response.text}",
                self.provider_type,
                status_code=response.status_code,
                body=response.text,
            )

    def _decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"error unmarshaling result: {e}, '{response.text}'",
                self.provider_type,
                status_code=response.status_code,
                body=response.text,
            ) from e
