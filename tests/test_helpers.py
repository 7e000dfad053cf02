import datetime as dt

import pytest

from utils import helpers
from utils.settings import Settings


@pytest.mark.parametrize(
    "value, expected",
    [
        (999, "$999"),
        (15_700, "$15.7K"),
        (1_500_000, "$1.5M"),
        (1_200_000_000, "$1.2B"),
        (-2_500_000, "-$2.5M"),
        (None, "$0"),
    ],
)
def test_format_usd(value, expected):
    assert helpers.format_usd(value) == expected


def test_truncate_address():
    assert helpers.truncate_address("0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2") == "0xc02a...6cc2"
    assert helpers.truncate_address("0xabc") == "0xabc"
    assert helpers.truncate_address(None) == "unknown"


def test_format_timestamp_variants():
    assert helpers.format_timestamp("2025-03-01T08:05:00Z") == "2025-03-01 08:05 UTC"
    aware = dt.datetime(2025, 3, 1, 10, 5, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    assert helpers.format_timestamp(aware) == "2025-03-01 08:05 UTC"
    assert helpers.format_timestamp("yesterday") == "yesterday"
    assert helpers.format_timestamp(None) == "unknown time"


def test_truncate_text():
    assert helpers.truncate_text("abc", 5) == "abc"
    assert helpers.truncate_text("abcdef", 3) == "abc..."


def test_settings_from_env_defaults_and_overrides():
    s = Settings.from_env(
        {
            "NANSEN_API_KEY": "n",
            "NEWS_TOP_HEADLINES": "7",
            "NEWS_FETCH_LIMIT": "not-a-number",
            "LOG_LEVEL": "debug",
        }
    )
    assert s.nansen_api_key == "n"
    assert s.news_top_headlines == 7
    assert s.news_fetch_limit == 50
    assert s.news_lookback_hours == 24
    assert s.log_level == "DEBUG"
    assert s.telegram_parse_mode == "HTML"
