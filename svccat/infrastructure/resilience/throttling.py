"""Classification of remote failures into throttled vs. other.

The retrying caller takes one of these classifiers as a strategy, so the
signal used to detect throttling stays specific to each remote service while
the retry loop stays generic.

For AWS the signal is the error code botocore reports in
``ClientError.response['Error']['Code']``, an HTTP 429 status, or one of the
transient connection errors botocore raises when a socket is reset or times
out.
"""

import logging
from enum import Enum
from typing import Callable, FrozenSet, Iterable, Optional, Tuple

from botocore.exceptions import (
    ClientError, ConnectionClosedError, ConnectTimeoutError, ReadTimeoutError
)

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """How the resilience layer treats a failure."""
    THROTTLED = "throttled"  # Retried after a delay
    OTHER = "other"          # Propagated immediately


ErrorClassifier = Callable[[BaseException], ErrorKind]

# Error codes AWS services use when rejecting a request that is expected to
# succeed if repeated later.
THROTTLING_ERROR_CODES: FrozenSet[str] = frozenset({
    "ConcurrentModificationException",
    "InsufficientDeliveryPolicyException",
    "NoAvailableDeliveryChannelException",
    "ConcurrentModifications",
    "LimitExceededException",
    "OperationNotPermittedException",
    "TooManyRequestsException",
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "RequestLimitExceeded",
    "InternalErrorException",
    "InternalException",
})

THROTTLING_HTTP_STATUSES: FrozenSet[int] = frozenset({429})

# botocore's counterparts of ECONNRESET, EPIPE and ETIMEDOUT
TRANSIENT_CONNECTION_ERRORS: Tuple[type, ...] = (
    ConnectionClosedError,
    ReadTimeoutError,
    ConnectTimeoutError,
)


def error_code(exc: BaseException) -> str:
    """Returns the service error code of an exception, or its type name."""
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code")
        if code:
            return str(code)
    return type(exc).__name__


def _http_status(exc: ClientError) -> Optional[int]:
    return exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def classifier_for_codes(
    codes: Iterable[str],
    http_statuses: Iterable[int] = THROTTLING_HTTP_STATUSES,
    transient_errors: Tuple[type, ...] = TRANSIENT_CONNECTION_ERRORS,
) -> ErrorClassifier:
    """Builds a classifier treating the given botocore error codes as throttling.

    Args:
        codes: Service error codes that signal throttling.
        http_statuses: HTTP statuses that signal throttling regardless of code.
        transient_errors: Exception types always treated as throttling.

    Returns:
        A function mapping an exception to its ErrorKind.
    """
    code_set = frozenset(codes)
    status_set = frozenset(http_statuses)

    def classify(exc: BaseException) -> ErrorKind:
        if transient_errors and isinstance(exc, transient_errors):
            return ErrorKind.THROTTLED
        if isinstance(exc, ClientError):
            if error_code(exc) in code_set or _http_status(exc) in status_set:
                return ErrorKind.THROTTLED
        return ErrorKind.OTHER

    return classify


classify_aws_error: ErrorClassifier = classifier_for_codes(THROTTLING_ERROR_CODES)
