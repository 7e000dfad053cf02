"""
helpers.py
----------
Small shared utilities used across the digest bot: time helpers and the
number / address formatting the prompt builders rely on.
"""

from __future__ import annotations
import datetime as dt


# ────────────────────────────────────────────────────────────────────────────
# 1. Date helpers
# ────────────────────────────────────────────────────────────────────────────
def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def utc_now_iso() -> str:
    """UTC timestamp like 2025-05-17T13:55:02Z."""
    return utc_now().strftime("%Y-%m-%dT%H:%M:%SZ")


def hours_ago(hours: float) -> dt.datetime:
    return utc_now() - dt.timedelta(hours=hours)


def format_timestamp(value: str | dt.datetime | None) -> str:
    """Render an ISO string or datetime as ``YYYY-MM-DD HH:MM UTC``.

    Unparseable strings are returned unchanged so a bad record never breaks
    prompt building.
    """
    if value is None or value == "":
        return "unknown time"
    if isinstance(value, dt.datetime):
        ts = value
    else:
        try:
            ts = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.UTC)
    return ts.astimezone(dt.UTC).strftime("%Y-%m-%d %H:%M UTC")


# ────────────────────────────────────────────────────────────────────────────
# 2. Money / address formatting ($15.7K, 0x1234...abcd)
# ────────────────────────────────────────────────────────────────────────────
def format_usd(value: float | int | None) -> str:
    """Compact dollar amount: ``$999``, ``$15.7K``, ``$1.5M``, ``$1.2B``."""
    if value is None:
        return "$0"
    value = float(value)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if magnitude >= threshold:
            return f"{sign}${magnitude / threshold:.1f}{suffix}"
    return f"{sign}${magnitude:.0f}"


def truncate_address(address: str | None, head: int = 6, tail: int = 4) -> str:
    if not address:
        return "unknown"
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}...{address[-tail:]}"


def truncate_text(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


# ────────────────────────────────────────────────────────────────────────────
# Stand-alone smoke test
# ────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    print("Now:", utc_now_iso())
    print("USD:", format_usd(15_700), format_usd(-1_500_000), format_usd(999))
    print("Addr:", truncate_address("0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"))
