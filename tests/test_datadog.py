"""Tests for the Datadog provider."""

import json
from unittest.mock import patch

import pytest
import requests

from canary_metrics import (
    DatadogProvider,
    NoValuesFoundError,
    ProviderConfig,
    ProviderConfigError,
    ProviderResponseError,
    ProviderTransportError,
)
from conftest import make_response

DATADOG_CONFIG = ProviderConfig(type="datadog")


# =============================================================================
# Construction
# =============================================================================


class TestDatadogProviderInit:
    """Tests for DatadogProvider construction."""

    def test_default_address(self, datadog_credentials):
        """Endpoints default to the Datadog US site."""
        provider = DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials)

        assert provider.metrics_query_endpoint == "https://api.datadoghq.com/api/v1/query"
        assert (
            provider.api_key_validation_endpoint
            == "https://api.datadoghq.com/api/v1/validate"
        )

    def test_custom_address(self, datadog_credentials):
        """Endpoints are built from the configured address."""
        config = ProviderConfig(type="datadog", address="https://api.datadoghq.eu")
        provider = DatadogProvider("1m", config, datadog_credentials)

        assert provider.metrics_query_endpoint == "https://api.datadoghq.eu/api/v1/query"

    def test_timeout_is_five_seconds(self, datadog_credentials):
        provider = DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials)
        assert provider.timeout == 5

    @pytest.mark.parametrize(
        "interval,expected",
        [
            ("1m", 600),
            ("30s", 300),
            ("1h", 36000),
            ("1m30s", 900),
            ("500ms", 5),
        ],
    )
    def test_from_delta_is_ten_intervals(self, datadog_credentials, interval, expected):
        """from_delta is ten metric intervals, in seconds."""
        provider = DatadogProvider(interval, DATADOG_CONFIG, datadog_credentials)
        assert provider.from_delta == expected

    @pytest.mark.parametrize("missing_key", ["datadog_api_key", "datadog_application_key"])
    def test_missing_key_names_the_key(self, datadog_credentials, missing_key):
        """Construction fails and names the absent credential."""
        del datadog_credentials[missing_key]

        with pytest.raises(ProviderConfigError) as exc_info:
            DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials)

        assert missing_key in str(exc_info.value)

    def test_no_credentials(self):
        with pytest.raises(ProviderConfigError, match="datadog_api_key"):
            DatadogProvider("1m", DATADOG_CONFIG, None)

    def test_undecodable_credentials(self, datadog_credentials):
        datadog_credentials["datadog_api_key"] = b"\xff\xfe"

        with pytest.raises(ProviderConfigError, match="datadog_api_key"):
            DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials)

    @pytest.mark.parametrize("interval", ["", "1", "abc", "1x", "m"])
    def test_invalid_interval(self, datadog_credentials, interval):
        """Unparseable intervals fail construction."""
        with pytest.raises(ProviderConfigError, match="error parsing metric interval"):
            DatadogProvider(interval, DATADOG_CONFIG, datadog_credentials)

    def test_str_credentials_accepted(self):
        provider = DatadogProvider(
            "1m",
            DATADOG_CONFIG,
            {"datadog_api_key": "a", "datadog_application_key": "b"},
        )
        assert provider.provider_type == "datadog"


# =============================================================================
# run_query
# =============================================================================


class TestDatadogRunQuery:
    """Tests for DatadogProvider.run_query."""

    def _provider(self, credentials, session):
        return DatadogProvider("1m", DATADOG_CONFIG, credentials, session=session)

    @patch("canary_metrics.providers.datadog.time.time", return_value=10_000.4)
    def test_request_shape(self, _mock_time, datadog_credentials, mock_session):
        """Query, window and key headers are sent on a single GET."""
        mock_session.get.return_value = make_response(
            200, {"series": [{"pointlist": [[1000, 1.0]]}]}
        )
        provider = self._provider(datadog_credentials, mock_session)

        provider.run_query("avg:system.cpu.user{*}")

        mock_session.get.assert_called_once_with(
            "https://api.datadoghq.com/api/v1/query",
            params={"query": "avg:system.cpu.user{*}", "from": 9400, "to": 10000},
            headers={
                "DD-API-KEY": "api-key-12345",
                "DD-APPLICATION-KEY": "app-key-67890",
            },
            timeout=5,
        )

    def test_returns_last_point_of_first_series(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(
            200,
            text='{"series":[{"pointlist":[[1000,1.0],[2000,42.5]]},'
            '{"pointlist":[[1000,7.0]]}]}',
        )
        provider = self._provider(datadog_credentials, mock_session)

        assert provider.run_query("q") == 42.5

    def test_empty_series(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(200, {"series": []})
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(NoValuesFoundError, match="no values found"):
            provider.run_query("q")

    def test_empty_pointlist(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(200, {"series": [{"pointlist": []}]})
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(NoValuesFoundError):
            provider.run_query("q")

    def test_short_last_point(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(
            200, {"series": [{"pointlist": [[1000, 1.0], [2000]]}]}
        )
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(NoValuesFoundError):
            provider.run_query("q")

    def test_null_value(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(
            200, {"series": [{"pointlist": [[1000, None]]}]}
        )
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(NoValuesFoundError):
            provider.run_query("q")

    def test_non_200_includes_body(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(403, text='{"errors": ["Forbidden"]}')
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(ProviderResponseError) as exc_info:
            provider.run_query("q")

        assert "Forbidden" in str(exc_info.value)
        assert exc_info.value.status_code == 403

    def test_malformed_json(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(200, text="<html>oops</html>")
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(ProviderResponseError, match="oops"):
            provider.run_query("q")

    @pytest.mark.parametrize(
        "body",
        [
            {"series": ["nope"]},
            {"series": {"a": 1}},
            {"series": [{"pointlist": {"a": 1}}]},
            {"series": [{"pointlist": [[1000, "high"]]}]},
            [1, 2],
        ],
    )
    def test_unexpected_shape(self, datadog_credentials, mock_session, body):
        """Malformed bodies surface as response errors carrying the body."""
        mock_session.get.return_value = make_response(200, body)
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(ProviderResponseError, match="malformed response") as exc_info:
            provider.run_query("q")

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == json.dumps(body)

    def test_connection_error(self, datadog_credentials, mock_session):
        mock_session.get.side_effect = requests.exceptions.ConnectionError("refused")
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(ProviderTransportError, match="refused"):
            provider.run_query("q")

    def test_timeout(self, datadog_credentials, mock_session):
        mock_session.get.side_effect = requests.exceptions.Timeout()
        provider = self._provider(datadog_credentials, mock_session)

        with pytest.raises(ProviderTransportError, match="timed out"):
            provider.run_query("q")


# =============================================================================
# is_online
# =============================================================================


class TestDatadogIsOnline:
    """Tests for DatadogProvider.is_online."""

    def test_online(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(200, {"valid": True})
        provider = DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials, session=mock_session)

        assert provider.is_online() is True
        args, kwargs = mock_session.get.call_args
        assert args[0] == "https://api.datadoghq.com/api/v1/validate"
        assert kwargs["headers"]["DD-API-KEY"] == "api-key-12345"
        assert kwargs["headers"]["DD-APPLICATION-KEY"] == "app-key-67890"

    def test_non_200_includes_body(self, datadog_credentials, mock_session):
        mock_session.get.return_value = make_response(403, text='{"errors": ["Forbidden"]}')
        provider = DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials, session=mock_session)

        with pytest.raises(ProviderResponseError, match="Forbidden"):
            provider.is_online()

    def test_connection_error(self, datadog_credentials, mock_session):
        mock_session.get.side_effect = requests.exceptions.ConnectionError()
        provider = DatadogProvider("1m", DATADOG_CONFIG, datadog_credentials, session=mock_session)

        with pytest.raises(ProviderTransportError):
            provider.is_online()
