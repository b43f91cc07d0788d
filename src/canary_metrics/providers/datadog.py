"""Datadog metrics provider.

Queries the Datadog v1 metrics API and validates API keys against the
validation endpoint. See https://docs.datadoghq.com/api/.
"""

import logging
import time
from typing import Optional

import requests

from canary_metrics.config import Credentials, ProviderConfig
from canary_metrics.constants import (
    DATADOG_API_KEY_HEADER,
    DATADOG_API_KEY_SECRET_KEY,
    DATADOG_API_KEY_VALIDATION_PATH,
    DATADOG_APPLICATION_KEY_HEADER,
    DATADOG_APPLICATION_KEY_SECRET_KEY,
    DATADOG_DEFAULT_HOST,
    DATADOG_FROM_DELTA_MULTIPLIER,
    DATADOG_METRICS_QUERY_PATH,
    DATADOG_QUERY_TIMEOUT,
    PROVIDER_DATADOG,
)
from canary_metrics.errors import (
    NoValuesFoundError,
    ProviderConfigError,
    ProviderResponseError,
)
from canary_metrics.intervals import parse_interval
from canary_metrics.providers.http import HTTPMetricsProvider


class DatadogProvider(HTTPMetricsProvider):
    """Client for the Datadog metrics query API.

    Queries look back ``10 x metric interval`` seconds so that ingestion
    delay and sparse series still yield a datapoint.

    Attributes:
        metrics_query_endpoint: Full URL of the query endpoint
        api_key_validation_endpoint: Full URL of the key validation endpoint
        from_delta: Lookback window in seconds
    """

    def __init__(
        self,
        metric_interval: str,
        config: ProviderConfig,
        credentials: Optional[Credentials],
        session: Optional[requests.Session] = None,
        timeout: float = DATADOG_QUERY_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the Datadog provider.

        Args:
            metric_interval: Canary polling interval, e.g. "1m".
            config: Provider configuration; address defaults to the US site.
            credentials: Must hold datadog_api_key and datadog_application_key.
            session: Optional requests session to use for HTTP calls.
            timeout: Request timeout in seconds.
            logger: Optional logger instance.

        Raises:
            ProviderConfigError: If a key is missing or the interval is invalid.
        """
        address = (config.address or DATADOG_DEFAULT_HOST).rstrip("/")
        self.metrics_query_endpoint = address + DATADOG_METRICS_QUERY_PATH
        self.api_key_validation_endpoint = address + DATADOG_API_KEY_VALIDATION_PATH

        self._api_key = self._require_secret(credentials, DATADOG_API_KEY_SECRET_KEY)
        self._application_key = self._require_secret(
            credentials, DATADOG_APPLICATION_KEY_SECRET_KEY
        )

        try:
            interval_seconds = parse_interval(metric_interval)
        except ValueError as e:
            raise ProviderConfigError(
                f"error parsing metric interval: {e}", PROVIDER_DATADOG
            ) from e
        self.from_delta = int(DATADOG_FROM_DELTA_MULTIPLIER * interval_seconds)

        super().__init__(timeout=timeout, session=session, logger=logger)

    @property
    def provider_type(self) -> str:
        return PROVIDER_DATADOG

    def _headers(self):
        return {
            DATADOG_API_KEY_HEADER: self._api_key,
            DATADOG_APPLICATION_KEY_HEADER: self._application_key,
        }

    def _execute_query(self, query: str) -> float:
        now = int(time.time())
        response = self._get(
            self.metrics_query_endpoint,
            params={
                "query": query,
                "from": now - self.from_delta,
                "to": now,
            },
            headers=self._headers(),
        )
        self._check_status(response)
        body = self._decode_json(response)

        try:
            series = body.get("series")
            if not series:
                raise NoValuesFoundError(
                    f"no values found in response: {response.text}", PROVIDER_DATADOG
                )

            # Last point of the first series: [timestamp, value]
            pointlist = series[0].get("pointlist") or []
            point = pointlist[-1] if pointlist else []
            if len(point) < 2 or point[1] is None:
                raise NoValuesFoundError(
                    f"no values found in response: {response.text}", PROVIDER_DATADOG
                )
            return float(point[1])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderResponseError(
                f"malformed response: {e}, '{response.text}'",
                PROVIDER_DATADOG,
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _check_online(self) -> bool:
        response = self._get(self.api_key_validation_endpoint, headers=self._headers())
        self._check_status(response)
        return True
