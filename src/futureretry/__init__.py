"""futureretry - retry a fallible computation, get the outcome as an awaitable handle.

Example:
    >>> import asyncio
    >>> from futureretry import RetryPolicy, give_up_on_types, retry
    >>>
    >>> async def main() -> None:
    ...     policy = RetryPolicy(max_retry=3, deadline=5.0, give_up_on=give_up_on_types(PermissionError))
    ...     handle = retry(policy, fetch_quote, "BTC")
    ...     print(await handle, handle.attempts)
    >>>
    >>> asyncio.run(main())
"""

from .foundation import (
    AttemptTimeoutError,
    DeadlineExceededError,
    ErrorCode,
    Failure,
    Outcome,
    OutcomeStatus,
    RetryError,
    Success,
    TooManyRetriesError,
)
from .foundation.config import get_settings
from .observability import configure_logging
from .retry import (
    NO_RETRY,
    Backoff,
    CappedExponentialBackoff,
    ConstantBackoff,
    Deadline,
    ExponentialBackoff,
    FunctionBackoff,
    JitteredExponentialBackoff,
    RetryHandle,
    RetryPolicy,
    exponential,
    exponential_capped,
    exponential_jittered,
    give_up_on_types,
    never_give_up,
    retry,
    retry_sync,
    retrying,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "retry", "retry_sync", "retrying", "RetryHandle",
    # Policy
    "RetryPolicy", "NO_RETRY", "Deadline", "never_give_up", "give_up_on_types",
    # Backoff
    "Backoff", "ExponentialBackoff", "CappedExponentialBackoff", "JitteredExponentialBackoff",
    "ConstantBackoff", "FunctionBackoff", "exponential", "exponential_capped", "exponential_jittered",
    # Outcomes & errors
    "Outcome", "OutcomeStatus", "Success", "Failure",
    "ErrorCode", "RetryError", "TooManyRetriesError", "DeadlineExceededError", "AttemptTimeoutError",
    # Ambient
    "get_settings", "configure_logging",
]
