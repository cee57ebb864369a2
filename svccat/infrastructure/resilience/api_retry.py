"""Service for executing remote calls with automatic retries.

Implements exponential backoff with jitter for throttled calls. Any failure
that is not classified as throttling propagates on the first attempt, with
the original exception untouched.
"""

import asyncio
import logging
import math
import random
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from svccat.domain.events.api_events import (
    DomainEvent, RemoteCallFailed, RemoteCallInitiated, RemoteCallSucceeded,
    RetriesExhausted, RetryScheduled
)
from svccat.domain.exceptions import RetriesExhaustedError
from svccat.domain.models.retry import RetryPolicy
from svccat.infrastructure.resilience.throttling import (
    ErrorClassifier, ErrorKind, classify_aws_error, error_code
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Zero-argument factory producing a fresh awaitable for every attempt
RemoteOperation = Callable[[], Awaitable[T]]
EventListener = Callable[[DomainEvent], None]
SleepFunc = Callable[[float], Awaitable[Any]]


def compute_backoff_delay(
    attempt_index: int,
    policy: RetryPolicy,
    rng: Optional[random.Random] = None,
) -> float:
    """Computes the wait before the next attempt (attempt_index is zero-based).

    The exponential part is capped at max_delay and jitter drawn from
    [0, jitter_factor * delay) is added. When adding would pass max_delay the
    jitter is subtracted instead (floored at 0), so callers waiting at the cap
    still spread out.
    """
    try:
        exponential = policy.base_delay * math.pow(2, attempt_index)
    except OverflowError:
        exponential = policy.max_delay
    capped = min(policy.max_delay, exponential)
    source = rng or random
    jitter = source.random() * capped * policy.jitter_factor
    if capped + jitter <= policy.max_delay:
        return capped + jitter
    return max(0.0, capped - jitter)


class RetryingRemoteCaller:
    """Executes remote operations, retrying the ones rejected by throttling."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        classifier: ErrorClassifier = classify_aws_error,
        sleep: SleepFunc = asyncio.sleep,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        event_listener: Optional[EventListener] = None,
    ):
        """Initializes the RetryingRemoteCaller.

        Args:
            policy: Default retry policy, used when execute() gets none.
            classifier: Decides whether a failure is throttling.
            sleep: Coroutine function used to wait between attempts.
            rng: Random source for jitter (module-level random if None).
            clock: Monotonic clock used for the elapsed-time budget.
            event_listener: Optional callback receiving domain events.
        """
        self.policy = policy or RetryPolicy()
        self.classifier = classifier
        self._sleep = sleep
        self._rng = rng
        self._clock = clock
        self._event_listener = event_listener

        logger.debug(
            f"RetryingRemoteCaller initialized: max_attempts={self.policy.max_attempts}, "
            f"base_delay={self.policy.base_delay}s, max_delay={self.policy.max_delay}s, "
            f"jitter={self.policy.jitter_factor}, max_elapsed={self.policy.max_elapsed}"
        )

    def _dispatch(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._event_listener is not None:
            self._event_listener(event)

    def _exhausted(self, name: str, attempts: int, exc: Exception) -> RetriesExhaustedError:
        logger.error(f"Retries exhausted for {name} after {attempts} attempt(s). Last error: {exc}")
        self._dispatch(RetriesExhausted(
            operation=name, attempts=attempts,
            error_type=type(exc).__name__, error_message=str(exc),
        ))
        return RetriesExhaustedError(exc, attempts, name)

    async def execute(
        self,
        operation: RemoteOperation[T],
        policy: Optional[RetryPolicy] = None,
        operation_name: Optional[str] = None,
    ) -> T:
        """Runs an operation, retrying while it fails with throttling.

        Args:
            operation: Zero-argument callable returning a new awaitable per call.
            policy: Retry policy for this call (the caller's default if None).
            operation_name: Name used in logs and events.

        Returns:
            Whatever the operation returns, unchanged.

        Raises:
            RetriesExhaustedError: If still throttled when the budget runs out.
            asyncio.CancelledError: If the awaiting task is cancelled.
            Exception: Any non-throttling failure of the operation, as raised.
        """
        effective_policy = policy or self.policy
        name = operation_name or getattr(operation, "__name__", "remote call")
        started = self._clock()
        attempt = 0

        while True:
            attempt += 1
            self._dispatch(RemoteCallInitiated(operation=name, attempt_number=attempt))
            attempt_start = time.perf_counter()
            try:
                result = await operation()
            except Exception as e:
                if self.classifier(e) is not ErrorKind.THROTTLED:
                    logger.error(f"Non-retryable error calling {name} on attempt {attempt}: {type(e).__name__}: {e}")
                    self._dispatch(RemoteCallFailed(
                        operation=name, attempt_number=attempt,
                        error_type=type(e).__name__, error_message=str(e),
                    ))
                    raise

                if attempt >= effective_policy.max_attempts:
                    raise self._exhausted(name, attempt, e) from e

                delay = compute_backoff_delay(attempt - 1, effective_policy, self._rng)
                if effective_policy.max_elapsed is not None:
                    elapsed = self._clock() - started
                    if elapsed + delay > effective_policy.max_elapsed:
                        logger.warning(
                            f"Waiting {delay:.2f}s would exceed the {effective_policy.max_elapsed}s budget for {name}"
                        )
                        raise self._exhausted(name, attempt, e) from e

                code = error_code(e)
                logger.warning(
                    f"Throttled calling {name} on attempt {attempt}/{effective_policy.max_attempts}: {code}. "
                    f"Waiting {delay:.2f}s..."
                )
                self._dispatch(RetryScheduled(
                    operation=name, attempt_number=attempt, delay_seconds=delay, error_code=code,
                ))
                try:
                    await self._sleep(delay)
                except asyncio.CancelledError:
                    logger.info(f"Retry of {name} cancelled while waiting after attempt {attempt}")
                    raise
                continue

            latency_ms = (time.perf_counter() - attempt_start) * 1000
            self._dispatch(RemoteCallSucceeded(operation=name, attempt_number=attempt, latency_ms=latency_ms))
            return result
