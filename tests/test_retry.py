"""
Tests for the backoff state machine.
"""

import pytest

from filmlist.retry import BackoffState


class TestBackoffState:
    """Test attempt bookkeeping and delays."""

    def test_starts_pending(self):
        state = BackoffState()
        assert state.attempt == 0
        assert state.state == BackoffState.PENDING
        assert not state.done

    def test_success_on_first_try(self):
        """A success ends the machine without any delay."""
        state = BackoffState(max_attempts=3)
        state.record_success()
        assert state.done
        assert state.succeeded
        assert state.delays == []

    def test_exponential_delays(self):
        """Delays double from the base delay: 1s, 2s, 4s."""
        state = BackoffState(max_attempts=3, base_delay=1.0)
        assert state.delay_for(0) == 1.0
        assert state.delay_for(1) == 2.0
        assert state.delay_for(2) == 4.0

    def test_all_attempts_fail(self):
        """Three failures give two waits then exhaustion."""
        state = BackoffState(max_attempts=3, base_delay=1.0)

        assert state.record_failure() == 1.0
        assert state.attempt == 1
        assert state.record_failure() == 2.0
        assert state.attempt == 2
        assert state.is_final_attempt
        assert state.record_failure() is None

        assert state.state == BackoffState.EXHAUSTED
        assert state.done
        assert not state.succeeded
        assert state.delays == [1.0, 2.0]

    def test_retry_then_succeed(self):
        state = BackoffState(max_attempts=3)
        state.record_failure()
        state.record_success()
        assert state.succeeded
        assert state.attempt == 1

    def test_max_delay_cap(self):
        """Delay should not exceed max_delay."""
        state = BackoffState(max_attempts=6, base_delay=1.0, exponential_base=3.0, max_delay=2.0)
        delays = []
        while not state.done:
            delay = state.record_failure()
            if delay is not None:
                delays.append(delay)
        assert len(delays) == 5
        assert all(d <= 2.0 for d in delays)

    def test_single_attempt(self):
        state = BackoffState(max_attempts=1)
        assert state.is_final_attempt
        assert state.record_failure() is None
        assert state.done

    def test_terminal_state_rejects_updates(self):
        state = BackoffState(max_attempts=1)
        state.record_success()
        with pytest.raises(RuntimeError):
            state.record_failure()
        with pytest.raises(RuntimeError):
            state.record_success()

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            BackoffState(max_attempts=0)
