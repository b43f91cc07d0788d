"""Prometheus metrics provider.

Executes instant PromQL queries against the Prometheus HTTP API with proper
error handling, logging, and testability.
"""

import logging
import math
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from canary_metrics.config import Credentials, ProviderConfig, default_prometheus_url
from canary_metrics.constants import (
    PROMETHEUS_ONLINE_QUERY,
    PROMETHEUS_PASSWORD_SECRET_KEY,
    PROMETHEUS_QUERY_PATH,
    PROMETHEUS_QUERY_TIMEOUT,
    PROMETHEUS_USERNAME_SECRET_KEY,
    PROVIDER_PROMETHEUS,
)
from canary_metrics.errors import (
    NoValuesFoundError,
    ProviderConfigError,
    ProviderResponseError,
)
from canary_metrics.providers.http import HTTPMetricsProvider


class PrometheusProvider(HTTPMetricsProvider):
    """Client for the Prometheus query API.

    Also serves Prometheus-compatible backends (Thanos, Mimir,
    VictoriaMetrics) and any provider type the factory does not recognize.

    Attributes:
        url: Base URL of the Prometheus server
        timeout: Query timeout in seconds
    """

    def __init__(
        self,
        config: ProviderConfig,
        credentials: Optional[Credentials] = None,
        session: Optional[requests.Session] = None,
        timeout: float = PROMETHEUS_QUERY_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Prometheus provider.

        Args:
            config: Provider configuration. If address is empty, uses
                environment config.
            credentials: username and password, required when the config
                references a secret.
            session: Optional requests session to use for HTTP calls.
            timeout: Query timeout in seconds.
            logger: Optional logger instance.

        Raises:
            ProviderConfigError: If the address is not an http(s) URL or
                basic-auth credentials are incomplete.
        """
        url = (config.address or default_prometheus_url()).rstrip("/")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ProviderConfigError(
                f"{PROVIDER_PROMETHEUS} address {url} is not a valid URL",
                PROVIDER_PROMETHEUS,
            )
        self.url = url

        self._auth = None
        if config.secret_ref:
            self._auth = (
                self._require_secret(credentials, PROMETHEUS_USERNAME_SECRET_KEY),
                self._require_secret(credentials, PROMETHEUS_PASSWORD_SECRET_KEY),
            )
        self._verify = not config.insecure_skip_verify

        super().__init__(timeout=timeout, session=session, logger=logger)

    @property
    def provider_type(self) -> str:
        return PROVIDER_PROMETHEUS

    def _request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self._auth is not None:
            options["auth"] = self._auth
        if not self._verify:
            options["verify"] = False
        return options

    def _execute_query(self, query: str) -> float:
        promql = query.replace("\n", " ").strip()
        response = self._get(self.url + PROMETHEUS_QUERY_PATH, params={"query": promql})
        self._check_status(response)
        body = self._decode_json(response)

        if not isinstance(body, dict) or body.get("status") != "success":
            raise ProviderResponseError(
                f"error response: {response.text}",
                PROVIDER_PROMETHEUS,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = body.get("data") or {}
            result = data.get("result")
            if data.get("resultType") == "scalar":
                # Scalar results are a bare [timestamp, "value"] pair
                sample = result
            else:
                if not result:
                    raise NoValuesFoundError(
                        f"no values found in response: {response.text}",
                        PROVIDER_PROMETHEUS,
                    )
                sample = result[0].get("value")
            value = float(sample[1])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderResponseError(
                f"error parsing result: {e}, '{response.text}'",
                PROVIDER_PROMETHEUS,
                status_code=response.status_code,
                body=response.text,
            ) from e

        if math.isnan(value):
            raise NoValuesFoundError(
                f"no values found in response: {response.text}", PROVIDER_PROMETHEUS
            )
        return value

    def _check_online(self) -> bool:
        value = self._execute_query(PROMETHEUS_ONLINE_QUERY)
        if value < 1:
            raise ProviderResponseError(
                f"invalid response: {value}", PROVIDER_PROMETHEUS
            )
        return True
