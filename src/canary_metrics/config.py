"""Provider configuration.

A ProviderConfig mirrors the declarative ``provider`` block of a metric
template. It is built once, handed to the factory and never mutated.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from canary_metrics.constants import (
    DEFAULT_PROVIDER_TYPE,
    PROMETHEUS_DEFAULT_URL,
    PROMETHEUS_URL_ENV,
)

Credentials = Mapping[str, Union[bytes, str]]


@dataclass(frozen=True)
class ProviderConfig:
    """Declarative configuration for a single metrics provider.

    Attributes:
        type: Backend type ("prometheus", "datadog", "cloudwatch"). Anything
            else is served by the Prometheus client.
        address: Backend base URL or regional endpoint. Each backend has its
            own default when empty.
        secret_ref: Name of the secret the credentials were loaded from.
        insecure_skip_verify: Disable TLS certificate verification.
    """

    type: str = DEFAULT_PROVIDER_TYPE
    address: str = ""
    secret_ref: Optional[str] = None
    insecure_skip_verify: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ProviderConfig":
        """Build a config from a provider block.

        Accepts both the camelCase keys used in manifests and snake_case keys.
        """
        data = data or {}

        secret_ref = data.get("secretRef", data.get("secret_ref"))
        if isinstance(secret_ref, Mapping):
            secret_ref = secret_ref.get("name")

        insecure = data.get("insecureSkipVerify", data.get("insecure_skip_verify", False))

        return cls(
            type=(data.get("type") or "").strip(),
            address=(data.get("address") or "").strip(),
            secret_ref=secret_ref or None,
            insecure_skip_verify=bool(insecure),
        )


def default_prometheus_url() -> str:
    """Get the default Prometheus URL.

    Priority:
    1. PROMETHEUS_URL environment variable
    2. In-cluster service name
    """
    return os.environ.get(PROMETHEUS_URL_ENV) or PROMETHEUS_DEFAULT_URL


def decode_secret(value: Union[bytes, str]) -> str:
    """Return a credential value as text."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
