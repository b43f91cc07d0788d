"""Constants for canary-metrics providers.

Centralizes endpoints, credential keys and timeouts shared by the backend clients.
"""

# =============================================================================
# Provider Types
# =============================================================================
PROVIDER_PROMETHEUS = "prometheus"
PROVIDER_DATADOG = "datadog"
PROVIDER_CLOUDWATCH = "cloudwatch"

DEFAULT_PROVIDER_TYPE = PROVIDER_PROMETHEUS

# =============================================================================
# HTTP Settings
# =============================================================================
PROMETHEUS_QUERY_TIMEOUT = 5  # seconds
DATADOG_QUERY_TIMEOUT = 5  # seconds

# =============================================================================
# Prometheus
# =============================================================================
PROMETHEUS_DEFAULT_URL = "http://prometheus:9090"
PROMETHEUS_URL_ENV = "PROMETHEUS_URL"
PROMETHEUS_QUERY_PATH = "/api/v1/query"
PROMETHEUS_ONLINE_QUERY = "vector(1)"

PROMETHEUS_USERNAME_SECRET_KEY = "username"
PROMETHEUS_PASSWORD_SECRET_KEY = "password"

# =============================================================================
# Datadog (https://docs.datadoghq.com/api/)
# =============================================================================
DATADOG_DEFAULT_HOST = "https://api.datadoghq.com"
DATADOG_METRICS_QUERY_PATH = "/api/v1/query"
DATADOG_API_KEY_VALIDATION_PATH = "/api/v1/validate"

DATADOG_API_KEY_SECRET_KEY = "datadog_api_key"
DATADOG_API_KEY_HEADER = "DD-API-KEY"

DATADOG_APPLICATION_KEY_SECRET_KEY = "datadog_application_key"
DATADOG_APPLICATION_KEY_HEADER = "DD-APPLICATION-KEY"

# Lookback window is this many metric intervals
DATADOG_FROM_DELTA_MULTIPLIER = 10

# =============================================================================
# CloudWatch
# =============================================================================
CLOUDWATCH_MAX_RETRIES = 3
CLOUDWATCH_ADDRESS_PREFIX = "monitoring."
CLOUDWATCH_ADDRESS_SUFFIX = ".amazonaws.com"
CLOUDWATCH_MAX_DATAPOINTS = 1

# Request window is this many metric intervals
CLOUDWATCH_WINDOW_MULTIPLIER = 10

# Used when the metric interval is empty or unparseable
CLOUDWATCH_DEFAULT_WINDOW = 600  # seconds
