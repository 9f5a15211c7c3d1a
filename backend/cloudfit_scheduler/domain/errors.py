"""Scheduling error taxonomy and the tagged booking result.

Booking rule violations are returned inside a :class:`BookingResult` rather
than raised, so callers can match on the violated rule:

    >>> result = registry.book_interview(...)
    >>> match result.error:
    ...     case None:
    ...         print(result.interview_id)
    ...     case TimeConflict(conflicting_interview_id=other):
    ...         print("clashes with", other)

Every error is still an ``Exception`` so ``BookingResult.unwrap()`` (and the
HTTP layer) can raise it directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, cast


class SchedulingError(Exception):
    """Base class for all scheduling rule violations."""

    kind = "scheduling_error"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": str(self)}


class InvalidRange(SchedulingError, ValueError):
    """Raised when a time slot does not start strictly before it ends."""

    kind = "invalid_range"

    def __init__(self, start: Any, end: Any) -> None:
        super().__init__(f"Slot start {start} must be before end {end}")
        self.start = start
        self.end = end


class MixedTimezones(SchedulingError, ValueError):
    """Raised when timezone-aware and naive instants meet in one comparison."""

    kind = "mixed_timezones"

    def __init__(self, first: Any, second: Any) -> None:
        super().__init__(
            f"Cannot compare timezone-aware and naive times ({first}, {second})"
        )
        self.first = first
        self.second = second


class UnknownUser(SchedulingError):
    """A referenced person id does not exist."""

    kind = "unknown_user"

    def __init__(self, person_id: int) -> None:
        super().__init__(f"Unknown user id {person_id}")
        self.person_id = person_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "person_id": self.person_id}


class WrongRole(SchedulingError):
    """A person was used in a role they do not hold."""

    kind = "wrong_role"

    def __init__(self, person_id: int, expected: Any) -> None:
        label = getattr(expected, "value", expected)
        super().__init__(f"User {person_id} is not a {label}")
        self.person_id = person_id
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "person_id": self.person_id,
            "expected_role": getattr(self.expected, "value", self.expected),
        }


class OutsideAvailability(SchedulingError):
    """The slot is not contained in any single availability window."""

    kind = "outside_availability"

    def __init__(self, person_id: int, party: str) -> None:
        super().__init__(f"{party} {person_id} is not available at this time")
        self.person_id = person_id
        self.party = party

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "person_id": self.person_id,
            "party": self.party,
        }


class TimeConflict(SchedulingError):
    """The slot overlaps an active interview of one of the participants."""

    kind = "time_conflict"

    def __init__(self, person_id: int, conflicting_interview_id: int) -> None:
        super().__init__(
            f"Time slot conflicts with interview {conflicting_interview_id} "
            f"of user {person_id}"
        )
        self.person_id = person_id
        self.conflicting_interview_id = conflicting_interview_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "person_id": self.person_id,
            "conflicting_interview_id": self.conflicting_interview_id,
        }


class UnknownInterview(SchedulingError):
    kind = "unknown_interview"

    def __init__(self, interview_id: int) -> None:
        super().__init__(f"Unknown interview id {interview_id}")
        self.interview_id = interview_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "interview_id": self.interview_id}


class InvalidTransition(SchedulingError):
    """The interview's current status does not allow the requested change."""

    kind = "invalid_transition"

    def __init__(self, interview_id: int, current: Any, target: Any) -> None:
        current_label = getattr(current, "value", current)
        target_label = getattr(target, "value", target)
        super().__init__(
            f"Interview {interview_id} cannot move from {current_label} "
            f"to {target_label}"
        )
        self.interview_id = interview_id
        self.current = current
        self.target = target

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "interview_id": self.interview_id,
            "current_status": getattr(self.current, "value", self.current),
        }


# HTTP status code for each error, used by the API exception handler.
ERROR_STATUS_CODES = {
    UnknownUser: 404,
    UnknownInterview: 404,
    WrongRole: 400,
    OutsideAvailability: 409,
    TimeConflict: 409,
    InvalidTransition: 409,
    InvalidRange: 422,
    MixedTimezones: 422,
}


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a booking operation: an interview id or an error."""

    interview_id: int | None = None
    error: SchedulingError | None = None

    def __post_init__(self) -> None:
        if (self.interview_id is None) == (self.error is None):
            raise ValueError("BookingResult needs exactly one of interview_id or error")

    @classmethod
    def success(cls, interview_id: int) -> "BookingResult":
        return cls(interview_id=interview_id)

    @classmethod
    def failure(cls, error: SchedulingError) -> "BookingResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the interview id or raise the carried error."""
        if self.error is not None:
            raise self.error
        return cast(int, self.interview_id)
