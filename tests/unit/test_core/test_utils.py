"""Tests for time and code helpers."""
import pytest
from datetime import datetime, timezone

from groupshare.core.constants import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND
from groupshare.core.errors import ValidationError
from groupshare.core.utils import (
    datetime_to_ms,
    generate_group_code,
    ms_to_datetime,
    resolve_timestamp,
    time_ago,
)

NOW = 1_736_670_000_000


@pytest.mark.unit
class TestGenerateGroupCode:

    def test_six_digits(self):
        for _ in range(50):
            code = generate_group_code()
            assert len(code) == 6
            assert code.isdigit()
            assert not code.startswith("0")


@pytest.mark.unit
class TestTimeConversion:

    def test_naive_datetime_is_utc(self):
        assert datetime_to_ms(datetime(2025, 1, 12, 8, 30)) == datetime_to_ms(
            datetime(2025, 1, 12, 8, 30, tzinfo=timezone.utc)
        )

    def test_ms_to_datetime(self):
        value = ms_to_datetime(NOW)
        assert value.tzinfo == timezone.utc
        assert datetime_to_ms(value) == NOW


@pytest.mark.unit
class TestResolveTimestamp:

    def test_no_client_timestamp(self):
        assert resolve_timestamp(None, now=NOW) == NOW

    def test_recent_past_accepted(self):
        assert resolve_timestamp(NOW - 23 * MS_PER_HOUR, now=NOW) == NOW - 23 * MS_PER_HOUR

    def test_small_clock_skew_accepted(self):
        assert resolve_timestamp(NOW + 4 * MS_PER_MINUTE, now=NOW) == NOW + 4 * MS_PER_MINUTE

    def test_too_old(self):
        with pytest.raises(ValidationError, match="24 hours"):
            resolve_timestamp(NOW - 25 * MS_PER_HOUR, now=NOW)

    def test_too_far_ahead(self):
        with pytest.raises(ValidationError, match="future"):
            resolve_timestamp(NOW + 6 * MS_PER_MINUTE, now=NOW)


@pytest.mark.unit
class TestTimeAgo:

    @pytest.mark.parametrize("elapsed,expected", [
        (0, "just now"),
        (59 * MS_PER_SECOND, "just now"),
        (MS_PER_MINUTE, "1m ago"),
        (59 * MS_PER_MINUTE, "59m ago"),
        (3 * MS_PER_HOUR, "3h ago"),
        (2 * MS_PER_DAY, "2d ago"),
    ])
    def test_buckets(self, elapsed, expected):
        assert time_ago(NOW - elapsed, now=NOW) == expected

    def test_future_timestamp_is_just_now(self):
        assert time_ago(NOW + MS_PER_MINUTE, now=NOW) == "just now"
