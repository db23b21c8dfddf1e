"""Retry engine with deadlines, backoff schedules and give-up predicates.

Example:
    >>> from futureretry.retry import RetryPolicy, JitteredExponentialBackoff, give_up_on_types, retry
    >>>
    >>> policy = RetryPolicy(
    ...     max_retry=5,
    ...     deadline=30.0,
    ...     backoff=JitteredExponentialBackoff(),
    ...     give_up_on=give_up_on_types(PermissionError),
    ... )
    >>> handle = retry(policy, fetch_quote, "BTC")
    >>> quote = await handle
"""

from .backoff import (
    BASE_DELAY,
    MAX_DELAY,
    Backoff,
    CappedExponentialBackoff,
    ConstantBackoff,
    ExponentialBackoff,
    FunctionBackoff,
    JitteredExponentialBackoff,
    as_backoff,
    exponential,
    exponential_capped,
    exponential_jittered,
)
from .deadline import Deadline, bounded
from .engine import AttemptState, RetryEngine, as_async_call, resolve_policy, retry, retry_sync, retrying
from .handle import RetryHandle
from .policy import NO_RETRY, RetryPolicy, give_up_on_types, never_give_up

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "CappedExponentialBackoff",
    "JitteredExponentialBackoff",
    "ConstantBackoff",
    "FunctionBackoff",
    "as_backoff",
    "exponential",
    "exponential_capped",
    "exponential_jittered",
    "BASE_DELAY",
    "MAX_DELAY",
    # Deadlines
    "Deadline",
    "bounded",
    # Policy
    "RetryPolicy",
    "NO_RETRY",
    "never_give_up",
    "give_up_on_types",
    # Execution
    "retry",
    "retry_sync",
    "retrying",
    "RetryHandle",
    "RetryEngine",
    "AttemptState",
    "as_async_call",
    "resolve_policy",
]
