"""Prometheus instrumentation for provider calls."""

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

PROVIDER_REQUESTS = Counter(
    "canary_metrics_provider_requests_total",
    "Outbound metrics provider requests by outcome",
    ["provider", "operation", "outcome"],
)

PROVIDER_REQUEST_DURATION = Histogram(
    "canary_metrics_provider_request_duration_seconds",
    "Duration of outbound metrics provider requests",
    ["provider", "operation"],
)


@contextmanager
def track_request(provider: str, operation: str) -> Iterator[None]:
    """Record duration and outcome of a provider call.

    The outcome label is "success" or the name of the raised exception class.
    """
    start = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception as e:
        outcome = e.__class__.__name__
        raise
    finally:
        PROVIDER_REQUEST_DURATION.labels(provider=provider, operation=operation).observe(
            time.perf_counter() - start
        )
        PROVIDER_REQUESTS.labels(
            provider=provider, operation=operation, outcome=outcome
        ).inc()
