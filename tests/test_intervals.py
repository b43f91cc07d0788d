"""Tests for metric interval parsing."""

import pytest

from canary_metrics import parse_interval


class TestParseInterval:
    """Tests for parse_interval."""

    @pytest.mark.parametrize(
        "value,seconds",
        [
            ("0", 0.0),
            ("30s", 30.0),
            ("1m", 60.0),
            ("2h", 7200.0),
            ("1h30m", 5400.0),
            ("1m30s", 90.0),
            ("1.5h", 5400.0),
            ("500ms", 0.5),
            ("250us", 0.00025),
            ("+5m", 300.0),
            ("-5m", -300.0),
        ],
    )
    def test_valid(self, value, seconds):
        assert parse_interval(value) == pytest.approx(seconds)

    @pytest.mark.parametrize("value", ["", "abc", "1x", "m", "1m 30s", "-", "1d"])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="invalid duration"):
            parse_interval(value)

    def test_missing_unit(self):
        with pytest.raises(ValueError, match="missing unit"):
            parse_interval("10")

    def test_non_string(self):
        with pytest.raises(ValueError):
            parse_interval(60)
