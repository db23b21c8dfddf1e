"""Foundation: error taxonomy, outcomes, and configuration."""

from .errors import (
    AttemptTimeoutError,
    DeadlineExceededError,
    ErrorCode,
    RetryError,
    TooManyRetriesError,
)
from .outcome import Failure, Outcome, OutcomeStatus, Success

__all__ = [
    # Errors
    "ErrorCode", "RetryError", "TooManyRetriesError", "DeadlineExceededError", "AttemptTimeoutError",
    # Outcomes
    "Outcome", "OutcomeStatus", "Success", "Failure",
]
