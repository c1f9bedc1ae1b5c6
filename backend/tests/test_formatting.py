"""Tests for formatting helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from helpers.formatting import format_duration, rate_limit_info
from services.models import RateLimitSnapshot


@pytest.mark.parametrize("seconds,expected", [
    (0, "0 seconds"),
    (1, "1 second"),
    (59, "59 seconds"),
    (60, "1 minute"),
    (125, "2 minutes 5 seconds"),
    (3600, "1 hour"),
    (3720, "1 hour 2 minutes"),
    (-5, "0 seconds"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


class TestRateLimitInfo:

    def test_future_reset_mentions_wait(self):
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        snapshot = RateLimitSnapshot(limit=5000, remaining=12, reset_at=now + timedelta(minutes=15), used=4988)

        info = rate_limit_info(snapshot, now=now)

        assert info == ("12/5000 API requests remaining. "
                        "Resets in 15 minutes (at 2026-10-19 12:15:00 UTC).")

    def test_past_reset(self):
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        snapshot = RateLimitSnapshot(limit=5000, remaining=5000, reset_at=now - timedelta(minutes=1), used=0)

        assert rate_limit_info(snapshot, now=now) == "5000/5000 API requests remaining. Reset at 2026-10-19 11:59:00 UTC."
