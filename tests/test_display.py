"""Tests for recoflag.core.display — price and timestamp formatting."""

import re

import pytest

from recoflag.core.display import clean_price, format_log_timestamp


class TestCleanPrice:
    @pytest.mark.parametrize(
        "price, expected",
        [
            (None, ""),
            ("abc", ""),
            ("", ""),
            (10, "10"),
            (1234.5, "1,234.5"),
            (0.1, "0.1"),
            ("19.99", "19.99"),
            ("$1,299.00", "1,299"),
            ("9.999", "10"),
            ("-5", "-5"),
            ("EUR 12.50", "12.5"),
            ({"amount": 10}, ""),
            ([10], ""),
            (True, ""),
        ],
    )
    def test_formats(self, price, expected):
        assert clean_price(price) == expected

    def test_not_a_number(self):
        assert clean_price(float("nan")) == ""


class TestFormatLogTimestamp:
    def test_clock_time_passes_through(self):
        assert format_log_timestamp("12:34:56") == "12:34:56"

    def test_iso_timestamp_is_converted(self):
        assert format_log_timestamp("2024-05-01T03:04:05") == "03:04:05"

    def test_garbage_renders_current_time(self):
        assert re.fullmatch(r"\d{2}:\d{2}:\d{2}", format_log_timestamp("not a time"))
