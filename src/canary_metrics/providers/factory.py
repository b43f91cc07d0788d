"""Factory for metrics providers.

Maps the declared provider type to a constructed backend client. Unknown or
empty types resolve to the Prometheus client so that templates written
before the type field existed keep working.
"""

import logging
from typing import Any, Mapping, Optional, Union

from canary_metrics.config import Credentials, ProviderConfig
from canary_metrics.constants import (
    PROVIDER_CLOUDWATCH,
    PROVIDER_DATADOG,
    PROVIDER_PROMETHEUS,
)
from canary_metrics.providers.base import MetricsProvider
from canary_metrics.providers.cloudwatch import CloudWatchProvider
from canary_metrics.providers.datadog import DatadogProvider
from canary_metrics.providers.prometheus import PrometheusProvider

ProviderConfigLike = Union[ProviderConfig, Mapping[str, Any]]


class ProviderFactory:
    """Builds metrics providers from declarative configuration."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def provider(
        self,
        metric_interval: str,
        provider_config: ProviderConfigLike,
        credentials: Optional[Credentials] = None,
    ) -> MetricsProvider:
        """Create the provider for ``provider_config.type``.

        Args:
            metric_interval: Canary polling interval, e.g. "1m".
            provider_config: ProviderConfig or a provider block mapping.
            credentials: Named secrets for the backend.

        Returns:
            A ready-to-use MetricsProvider.

        Raises:
            ProviderConfigError: Propagated unchanged from the client.
        """
        if not isinstance(provider_config, ProviderConfig):
            provider_config = ProviderConfig.from_mapping(provider_config)

        provider_type = provider_config.type
        if provider_type == PROVIDER_PROMETHEUS:
            return PrometheusProvider(provider_config, credentials)
        if provider_type == PROVIDER_DATADOG:
            return DatadogProvider(metric_interval, provider_config, credentials)
        if provider_type == PROVIDER_CLOUDWATCH:
            return CloudWatchProvider(provider_config, metric_interval)

        self._logger.warning(
            "Unknown provider type %r, falling back to %s",
            provider_type,
            PROVIDER_PROMETHEUS,
        )
        return PrometheusProvider(provider_config, credentials)


def create_provider(
    metric_interval: str,
    provider_config: ProviderConfigLike,
    credentials: Optional[Credentials] = None,
    logger: Optional[logging.Logger] = None,
) -> MetricsProvider:
    """Factory function to create the appropriate metrics provider.

    Args:
        metric_interval: Canary polling interval, e.g. "1m".
        provider_config: ProviderConfig or a provider block mapping.
        credentials: Named secrets for the backend.
        logger: Optional logger instance.

    Returns:
        PrometheusProvider, DatadogProvider or CloudWatchProvider.
    """
    return ProviderFactory(logger).provider(metric_interval, provider_config, credentials)
