"""Metrics provider layer for canary analysis.

Runs a single scalar query against Prometheus, Datadog or CloudWatch
behind one interface.
"""

from canary_metrics.config import ProviderConfig
from canary_metrics.errors import (
    InvalidQueryError,
    NoValuesFoundError,
    ProviderConfigError,
    ProviderError,
    ProviderResponseError,
    ProviderTransportError,
)
from canary_metrics.intervals import parse_interval
from canary_metrics.providers import (
    CloudWatchProvider,
    DatadogProvider,
    MetricsProvider,
    PrometheusProvider,
    ProviderFactory,
    create_provider,
)

__all__ = [
    "ProviderConfig",
    "ProviderError",
    "ProviderConfigError",
    "InvalidQueryError",
    "ProviderTransportError",
    "ProviderResponseError",
    "NoValuesFoundError",
    "parse_interval",
    "MetricsProvider",
    "PrometheusProvider",
    "DatadogProvider",
    "CloudWatchProvider",
    "ProviderFactory",
    "create_provider",
]
