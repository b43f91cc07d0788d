"""Shared pytest fixtures for canary-metrics tests.

All fixtures that are used across multiple test files should be defined here.
"""

import json
from unittest.mock import MagicMock

import pytest


def make_response(status_code=200, body=None, text=None):
    """Build a fake requests.Response.

    Args:
        status_code: HTTP status to report.
        body: JSON-serializable payload; json() raises ValueError when None
            and text is not valid JSON.
        text: Raw body text; defaults to the JSON encoding of body.
    """
    response = MagicMock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text

    try:
        decoded = json.loads(text)
    except ValueError:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = decoded
    return response


@pytest.fixture
def mock_session():
    """Fake requests session injected into HTTP providers."""
    return MagicMock()


@pytest.fixture
def datadog_credentials():
    """Complete Datadog credentials as loaded from a Kubernetes secret."""
    return {
        "datadog_api_key": b"api-key-12345",
        "datadog_application_key": b"app-key-67890",
    }


@pytest.fixture
def mock_cloudwatch_client():
    """Fake boto3 CloudWatch client."""
    return MagicMock()
