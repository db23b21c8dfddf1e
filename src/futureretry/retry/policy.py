"""Retry policy configuration.

A RetryPolicy is the immutable description of one retry sequence: how many
retries, until when, how long to wait in between, and which failures end the
sequence early.

Optimizations:
- Frozen for immutability and hashability
- Bare callables coerced to Backoff once, at construction
- Relative deadlines resolved once, at construction
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    InstanceOf,
    computed_field,
    field_validator,
)

from .backoff import Backoff, ExponentialBackoff, as_backoff
from .deadline import Deadline

if TYPE_CHECKING:
    from futureretry.foundation.config import RetrySettings


GiveUpPredicate = Callable[[BaseException], bool]
RetryCallback = Callable[[int, BaseException, float], None]


def never_give_up(failure: BaseException) -> bool:
    """Default give-up predicate: every failure is retryable."""
    return False


def give_up_on_types(*exc_types: type[BaseException]) -> GiveUpPredicate:
    """Predicate that stops retrying on instances of ``exc_types``.

    Example:
        >>> policy = RetryPolicy(max_retry=10, give_up_on=give_up_on_types(ValueError, PermissionError))
    """
    if not exc_types:
        raise ValueError("give_up_on_types requires at least one exception type")

    def predicate(failure: BaseException) -> bool:
        return isinstance(failure, exc_types)

    predicate.__name__ = f"give_up_on_{'_'.join(t.__name__ for t in exc_types)}"
    return predicate


class RetryPolicy(BaseModel):
    """Configurable retry policy.

    Determines how often and how long a computation is retried, how long to
    wait between attempts, and which failures are terminal.

    Attributes:
        max_retry: Retries after the first attempt (0 = one attempt only,
            negative = unlimited)
        deadline: Instant after which no attempt starts (None = no deadline).
            Numbers and timedeltas are taken as seconds from now.
        backoff: Backoff strategy, or a plain ``attempt -> seconds`` callable
        give_up_on: Returns True when a failure must end the sequence
        on_retry: Optional callback ``(attempt, failure, delay)`` fired
            before each backoff wait

    Example:
        >>> policy = RetryPolicy(
        ...     max_retry=5,
        ...     deadline=30.0,
        ...     backoff=JitteredExponentialBackoff(base=0.2),
        ...     give_up_on=give_up_on_types(PermissionError),
        ... )
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol and Deadline
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_retry: int = 3
    deadline: InstanceOf[Deadline] | None = None
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    give_up_on: GiveUpPredicate = Field(default=never_give_up, repr=False)
    on_retry: RetryCallback | None = Field(default=None, exclude=True, repr=False)

    @field_validator("deadline", mode="before")
    @classmethod
    def _coerce_deadline(cls, v: Deadline | float | timedelta | None) -> Deadline | None:
        """Accept relative seconds/timedeltas and convert to an absolute Deadline."""
        return Deadline.coerce(v)

    @field_validator("backoff", mode="before")
    @classmethod
    def _coerce_backoff(cls, v: Backoff | Callable[[int], float]) -> Backoff:
        """Accept bare callables as backoff functions."""
        return as_backoff(v)

    @computed_field
    @property
    def is_unlimited(self) -> bool:
        """Whether the retry budget never runs out."""
        return self.max_retry < 0

    def is_exhausted(self, attempt: int) -> bool:
        """Whether ``attempt`` (0-indexed) is beyond the retry budget."""
        return self.max_retry >= 0 and attempt > self.max_retry

    def is_overdue(self) -> bool:
        """Whether the deadline is set and has been reached."""
        return self.deadline is not None and self.deadline.is_overdue()

    def get_delay(self, attempt: int) -> float:
        """Get delay before the attempt following ``attempt``."""
        return self.backoff.delay(attempt)

    def should_give_up(self, failure: BaseException) -> bool:
        """Whether ``failure`` ends the sequence immediately."""
        return bool(self.give_up_on(failure))

    def with_deadline(self, deadline: Deadline | float | timedelta | None) -> RetryPolicy:
        """Copy of this policy with a different deadline."""
        return self.model_copy(update={"deadline": Deadline.coerce(deadline)})

    @classmethod
    def from_settings(cls, settings: RetrySettings | None = None, **overrides: Any) -> RetryPolicy:
        """Build a policy from FUTURERETRY_RETRY_* configuration.

        Keyword overrides win over configured values.
        """
        if settings is None:
            from futureretry.foundation.config import get_settings
            settings = get_settings().retry
        return cls(**{
            "max_retry": settings.max_retry,
            "deadline": settings.deadline,
            "backoff": settings.build_backoff(),
            **overrides,
        })


# Singleton for single-attempt policy
NO_RETRY = RetryPolicy(max_retry=0)
