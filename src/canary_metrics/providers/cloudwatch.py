"""CloudWatch metrics provider.

Queries are JSON-encoded lists of MetricDataQuery objects, exactly as
accepted by the GetMetricData API, for example::

    [{"Id": "e1", "Expression": "m1 / m2", "ReturnData": true}, ...]
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from canary_metrics.config import ProviderConfig
from canary_metrics.constants import (
    CLOUDWATCH_ADDRESS_PREFIX,
    CLOUDWATCH_ADDRESS_SUFFIX,
    CLOUDWATCH_DEFAULT_WINDOW,
    CLOUDWATCH_MAX_DATAPOINTS,
    CLOUDWATCH_MAX_RETRIES,
    CLOUDWATCH_WINDOW_MULTIPLIER,
    PROVIDER_CLOUDWATCH,
)
from canary_metrics.errors import (
    InvalidQueryError,
    NoValuesFoundError,
    ProviderConfigError,
    ProviderResponseError,
    ProviderTransportError,
)
from canary_metrics.intervals import parse_interval
from canary_metrics.providers.base import MetricsProvider

# Zero-value timestamp used by the health check
_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def region_from_address(address: str) -> str:
    """Derive the AWS region from a monitoring endpoint address.

    "monitoring.us-east-1.amazonaws.com" -> "us-east-1"
    """
    host = address.split("://", 1)[-1].rstrip("/")
    if host.startswith(CLOUDWATCH_ADDRESS_PREFIX):
        host = host[len(CLOUDWATCH_ADDRESS_PREFIX):]
    if host.endswith(CLOUDWATCH_ADDRESS_SUFFIX):
        host = host[: -len(CLOUDWATCH_ADDRESS_SUFFIX)]
    return host


def _status_code(error: ClientError) -> Optional[int]:
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


class CloudWatchProvider(MetricsProvider):
    """Client for CloudWatch GetMetricData.

    AWS credentials are resolved by the boto3 credential chain. The SDK
    client retries each call up to three times; no other retries happen.

    Attributes:
        region: AWS region derived from the address
        endpoint_url: Endpoint the client talks to, if overridden
        window: Request window in seconds
    """

    def __init__(
        self,
        config: ProviderConfig,
        metric_interval: str = "1m",
        client: Optional[Any] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the CloudWatch provider.

        Args:
            config: Provider configuration; address is the regional
                monitoring endpoint, e.g. monitoring.eu-west-1.amazonaws.com.
            metric_interval: Canary polling interval used to size the window.
            client: Optional boto3 CloudWatch client.
            logger: Optional logger instance.

        Raises:
            ProviderConfigError: If the SDK client cannot be built.
        """
        super().__init__(logger)

        address = config.address
        self.region = region_from_address(address) if address else None
        self.endpoint_url = None
        if address:
            self.endpoint_url = address if "://" in address else f"https://{address}"

        self.window = self._window_from_interval(metric_interval)

        self._owns_client = client is None
        self._client = client if client is not None else self._create_client()

    def _window_from_interval(self, metric_interval: str) -> float:
        try:
            seconds = parse_interval(metric_interval)
        except ValueError as e:
            self._logger.warning(
                "Invalid metric interval %r, using a %ss window: %s",
                metric_interval,
                CLOUDWATCH_DEFAULT_WINDOW,
                e,
            )
            return CLOUDWATCH_DEFAULT_WINDOW
        if seconds <= 0:
            return CLOUDWATCH_DEFAULT_WINDOW
        return CLOUDWATCH_WINDOW_MULTIPLIER * seconds

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _create_client(self):
        # Validation happens server side; the health check depends on it
        sdk_config = Config(
            retries={"max_attempts": CLOUDWATCH_MAX_RETRIES},
            parameter_validation=False,
        )
        try:
            session = boto3.session.Session(region_name=self.region or None)
            return session.client(
                "cloudwatch",
                endpoint_url=self.endpoint_url,
                config=sdk_config,
            )
        except (BotoCoreError, ValueError) as e:
            raise ProviderConfigError(
                f"error creating cloudwatch client: {e}", PROVIDER_CLOUDWATCH
            ) from e

    @property
    def provider_type(self) -> str:
        return PROVIDER_CLOUDWATCH

    @staticmethod
    def _decode_query(query: str) -> List[dict]:
        try:
            queries = json.loads(query)
        except (TypeError, ValueError) as e:
            raise InvalidQueryError(
                f"error unmarshaling query: {e}", PROVIDER_CLOUDWATCH
            ) from e

        if not isinstance(queries, list) or not all(isinstance(q, dict) for q in queries):
            raise InvalidQueryError(
                "error unmarshaling query: expected a JSON array of MetricDataQuery objects",
                PROVIDER_CLOUDWATCH,
            )
        return queries

    def _execute_query(self, query: str) -> float:
        queries = self._decode_query(query)

        end = datetime.now(timezone.utc)
        start = end - timedelta(seconds=self.window)
        try:
            response = self._client.get_metric_data(
                MetricDataQueries=queries,
                StartTime=start,
                EndTime=end,
                MaxDatapoints=CLOUDWATCH_MAX_DATAPOINTS,
            )
        except ClientError as e:
            raise ProviderResponseError(
                f"error requesting cloudwatch: {e}",
                PROVIDER_CLOUDWATCH,
                status_code=_status_code(e),
                body=str(e),
            ) from e
        except BotoCoreError as e:
            raise ProviderTransportError(
                f"error requesting cloudwatch: {e}", PROVIDER_CLOUDWATCH
            ) from e

        results = response.get("MetricDataResults") or []
        if not results:
            raise NoValuesFoundError(
                f"no values found in response: {response}", PROVIDER_CLOUDWATCH
            )

        values = results[0].get("Values") or []
        if not values:
            raise NoValuesFoundError(
                f"no values found in response: {response}", PROVIDER_CLOUDWATCH
            )

        return float(values[0])

    def _check_online(self) -> bool:
        # An empty query list is always rejected by the backend. A 400 means
        # the request got past authentication, which is all this checks.
        try:
            self._client.get_metric_data(
                MetricDataQueries=[],
                StartTime=_EPOCH,
                EndTime=_EPOCH,
            )
        except ClientError as e:
            status = _status_code(e)
            if status != 400:
                raise ProviderResponseError(
                    f"unexpected status code: {e}",
                    PROVIDER_CLOUDWATCH,
                    status_code=status,
                    body=str(e),
                ) from e
        except BotoCoreError as e:
            raise ProviderTransportError(
                f"unexpected error: {e}", PROVIDER_CLOUDWATCH
            ) from e
        return True
