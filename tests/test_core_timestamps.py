"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from src.core.utils.timestamps import ensure_datetime, normalize_timestamp, utcnow


class TestNormalizeTimestamp:
    """Test normalize_timestamp function."""

    def test_normalize_iso_string(self):
        """Test normalizing ISO format timestamp string."""
        result = normalize_timestamp("2025-11-18T10:30:00.123456")
        assert result == "2025-11-18T10:30:00.123456Z"

    def test_normalize_naive_datetime_assumed_utc(self):
        """Test that naive datetimes are treated as UTC."""
        result = normalize_timestamp(datetime(2025, 11, 18, 10, 30, 0))
        assert result == "2025-11-18T10:30:00Z"

    def test_normalize_converts_other_timezones(self):
        """Test that offsets are converted to UTC."""
        seoul = timezone(timedelta(hours=9))
        result = normalize_timestamp(datetime(2025, 11, 18, 19, 30, 0, tzinfo=seoul))
        assert result == "2025-11-18T10:30:00Z"

    def test_normalize_z_suffix_string(self):
        """Test that a "Z" suffixed string round-trips."""
        assert normalize_timestamp("2025-11-18T10:30:00Z") == "2025-11-18T10:30:00Z"

    def test_normalize_none_returns_current_time(self):
        """Test normalizing None returns current time ISO string."""
        result = normalize_timestamp(None)
        assert result.endswith("Z")
        assert "T" in result


class TestEnsureDatetime:
    """Test ensure_datetime function."""

    def test_aware_datetime_returned_unchanged(self):
        """Test that aware datetime objects are returned unchanged."""
        dt = datetime(2025, 11, 18, 10, 30, 0, tzinfo=timezone.utc)
        assert ensure_datetime(dt) is dt

    def test_naive_datetime_gets_utc(self):
        result = ensure_datetime(datetime(2025, 11, 18, 10, 30, 0))
        assert result.tzinfo is timezone.utc
        assert result.hour == 10

    def test_iso_string_converted_to_datetime(self):
        """Test converting ISO string to datetime."""
        result = ensure_datetime("2025-11-18T10:30:00.123456")
        assert result == datetime(2025, 11, 18, 10, 30, 0, 123456, tzinfo=timezone.utc)

    def test_invalid_string_returns_now(self):
        """Test that an unparsable string falls back to now."""
        result = ensure_datetime("not-a-date")
        assert abs((result - utcnow()).total_seconds()) < 5

    def test_none_returns_now(self):
        """Test that None returns current datetime."""
        result = ensure_datetime(None)
        assert result.tzinfo is not None
        assert abs((result - utcnow()).total_seconds()) < 5
