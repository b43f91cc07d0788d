"""Metrics provider backends.

This module provides:
- The shared provider contract (MetricsProvider)
- Prometheus, Datadog and CloudWatch clients
- The provider factory (ProviderFactory, create_provider)
"""

from canary_metrics.providers.base import MetricsProvider
from canary_metrics.providers.cloudwatch import CloudWatchProvider
from canary_metrics.providers.datadog import DatadogProvider
from canary_metrics.providers.factory import ProviderFactory, create_provider
from canary_metrics.providers.prometheus import PrometheusProvider

__all__ = [
    "MetricsProvider",
    "PrometheusProvider",
    "DatadogProvider",
    "CloudWatchProvider",
    "ProviderFactory",
    "create_provider",
]
