"""Retry policy value object.

Describes how many times a throttled remote call may be attempted and how
long to wait between attempts.
"""

from dataclasses import dataclass
from typing import Optional

# Defaults follow the backoff used by the original catalog wrapper:
# ten attempts starting from a half-second delay.
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_BASE_DELAY_S = 0.5
DEFAULT_MAX_DELAY_S = 20.0
DEFAULT_JITTER_FACTOR = 0.1


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule for throttled remote calls.

    Attributes:
        max_attempts: Total number of tries, including the first one.
            A value of 1 disables retrying.
        base_delay: Delay in seconds before the second attempt.
        max_delay: Upper bound in seconds for any single wait, jitter included.
        jitter_factor: Fraction of the exponential delay added as random jitter.
        max_elapsed: Optional total time budget in seconds across all attempts
            and waits. None means only max_attempts bounds the call.
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY_S
    max_delay: float = DEFAULT_MAX_DELAY_S
    jitter_factor: float = DEFAULT_JITTER_FACTOR
    max_elapsed: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be non-negative, got {self.base_delay}")
        if self.max_delay < self.base_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must not be smaller than base_delay ({self.base_delay})"
            )
        if self.jitter_factor < 0:
            raise ValueError(f"jitter_factor must be non-negative, got {self.jitter_factor}")
        if self.max_elapsed is not None and self.max_elapsed <= 0:
            raise ValueError(f"max_elapsed must be positive when set, got {self.max_elapsed}")
