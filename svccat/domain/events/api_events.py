"""Domain Events related to remote calls and resilience.

Emitted by the retrying caller when calls start, succeed, get rescheduled
after throttling, or fail definitively.
"""

from dataclasses import dataclass, field
import time


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class RemoteCallInitiated(DomainEvent):
    """Event triggered when an attempt of a remote call is about to be made."""
    operation: str  # e.g., 'list_portfolios'
    attempt_number: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class RemoteCallSucceeded(DomainEvent):
    """Event triggered when a remote call succeeds."""
    operation: str
    attempt_number: int
    latency_ms: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a throttled call is scheduled for another attempt."""
    operation: str
    attempt_number: int  # The attempt that was throttled
    delay_seconds: float
    error_code: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class RemoteCallFailed(DomainEvent):
    """Event triggered when a call fails with a non-retryable error."""
    operation: str
    attempt_number: int
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetriesExhausted(DomainEvent):
    """Event triggered when the retry budget runs out while still throttled."""
    operation: str
    attempts: int
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)
