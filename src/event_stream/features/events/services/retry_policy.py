"""Exponential backoff retry policy for deliveries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently a retryable delivery is retried.

    ``max_attempts`` counts the first attempt, so 3 means one try plus two
    retries. The delay before retry n (n >= 1) is
    ``base_delay_seconds * backoff_multiplier ** (n - 1)`` capped at
    ``max_delay_seconds``.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay_seconds: float = 300.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"Invalid max attempts: {self.max_attempts}. Must be at least 1")
        if self.base_delay_seconds < 0:
            raise ValueError("Base delay cannot be negative")
        if self.backoff_multiplier < 1.0:
            raise ValueError(f"Invalid backoff multiplier: {self.backoff_multiplier}. Must be >= 1.0")
        if self.max_delay_seconds < 0:
            raise ValueError("Max delay cannot be negative")

    def should_retry(self, attempt_number: int) -> bool:
        """True when another attempt is allowed after ``attempt_number``."""
        return attempt_number < self.max_attempts

    def delay_for(self, attempt_number: int) -> float:
        """Seconds to wait after failed attempt ``attempt_number``."""
        delay = self.base_delay_seconds * (self.backoff_multiplier ** (attempt_number - 1))
        return min(delay, self.max_delay_seconds)


NO_RETRY = RetryPolicy(max_attempts=1, base_delay_seconds=0.0)
