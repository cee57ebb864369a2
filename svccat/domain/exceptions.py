"""Custom exceptions raised by svccat.

Errors coming from the remote service itself are not wrapped: a non-throttling
failure reaches the caller as the SDK raised it.
"""


class SvccatError(Exception):
    """Base exception class for svccat errors."""
    pass


class ConfigurationError(SvccatError):
    """Raised when configuration values are invalid."""
    pass


class RemoteCallError(SvccatError):
    """Base class for failures produced by the resilience layer."""
    pass


class RetriesExhaustedError(RemoteCallError):
    """Raised when a call is still throttled after the retry budget is spent."""

    def __init__(self, last_error: BaseException, attempts: int, operation: str = "remote call"):
        self.last_error = last_error
        self.attempts = attempts
        self.operation = operation
        super().__init__(
            f"{operation} still throttled after {attempts} attempt(s). Last error: {last_error}"
        )
