"""
Exponential backoff as an explicit state machine.

A BackoffState tracks the attempt index and the delay owed before the
next attempt. Callers drive it with record_success() / record_failure()
instead of wrapping work in an exception-driven retry decorator, so a
failed attempt never has to raise to be retried.
"""

from typing import Optional


class BackoffState:
    """
    Retry bookkeeping for one operation.

    States:
    - PENDING: attempts remain, no success yet
    - SUCCEEDED: an attempt succeeded (terminal)
    - EXHAUSTED: every attempt failed (terminal)

    Delay before attempt n+1 is base_delay * exponential_base ** n,
    capped at max_delay.
    """

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        exponential_base: float = 2.0,
        max_delay: float = 60.0,
    ):
        """
        Args:
            max_attempts: Total attempts allowed (first try included)
            base_delay: Delay in seconds after the first failed attempt
            exponential_base: Multiplier applied per further failure
            max_delay: Upper bound for a single delay in seconds
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.exponential_base = exponential_base
        self.max_delay = max_delay

        self.attempt = 0
        self.state = self.PENDING
        self.delays: list = []

    @property
    def done(self) -> bool:
        return self.state != self.PENDING

    @property
    def succeeded(self) -> bool:
        return self.state == self.SUCCEEDED

    @property
    def is_final_attempt(self) -> bool:
        return self.attempt >= self.max_attempts - 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after attempt `attempt` (0-based) fails."""
        return min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)

    def record_success(self) -> None:
        if self.done:
            raise RuntimeError(f"Backoff already {self.state}")
        self.state = self.SUCCEEDED

    def record_failure(self) -> Optional[float]:
        """
        Mark the current attempt as failed and advance.

        Returns:
            Delay in seconds before the next attempt, or None when the
            final attempt just failed and the state is now EXHAUSTED.
        """
        if self.done:
            raise RuntimeError(f"Backoff already {self.state}")

        if self.is_final_attempt:
            self.state = self.EXHAUSTED
            return None

        delay = self.delay_for(self.attempt)
        self.delays.append(delay)
        self.attempt += 1
        return delay
