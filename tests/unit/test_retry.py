"""Unit tests for the backoff schedule."""

import pytest

from actionfetch.resilience.retry import backoff_delay_ms, backoff_schedule


class TestBackoffDelay:
    """Test backoff_delay_ms."""

    def test_first_attempt_has_no_delay(self):
        """The initial attempt never waits."""
        assert backoff_delay_ms(1, 1000) == 0

    def test_delays_double(self):
        """Attempt 2 waits base, then doubles each time."""
        assert backoff_delay_ms(2, 1000) == 1000
        assert backoff_delay_ms(3, 1000) == 2000
        assert backoff_delay_ms(4, 1000) == 4000
        assert backoff_delay_ms(5, 250) == 2000

    def test_delay_is_not_capped(self):
        """Large attempt numbers are not clamped."""
        assert backoff_delay_ms(12, 1000) == 1000 * 2**10

    def test_invalid_attempt(self):
        """Attempt numbers start at 1."""
        with pytest.raises(ValueError):
            backoff_delay_ms(0, 1000)

    def test_invalid_base(self):
        """Base delay must be positive."""
        with pytest.raises(ValueError):
            backoff_delay_ms(2, 0)


class TestBackoffSchedule:
    """Test backoff_schedule."""

    def test_schedule_without_retries(self):
        """No retries means a single attempt with no delay."""
        assert backoff_schedule(0, 1000) == [0]

    def test_schedule_with_retries(self):
        """One entry per attempt."""
        assert backoff_schedule(3, 1000) == [0, 1000, 2000, 4000]

    def test_negative_retries(self):
        """Negative retry counts are rejected."""
        with pytest.raises(ValueError):
            backoff_schedule(-1, 1000)
