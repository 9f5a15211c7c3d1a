"""Core scheduling entities represented as dataclasses.

The models are independent of any persistence or transport concerns. Persons
and interviews refer to each other by plain integer ids only; the
:class:`~cloudfit_scheduler.services.registry.SchedulingRegistry` owns both
and resolves ids on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Set

from .errors import InvalidRange, MixedTimezones


class Role(str, Enum):
    HR_MANAGER = "HR_MANAGER"
    INTERVIEWER = "INTERVIEWER"


class InterviewStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


@dataclass(frozen=True)
class TimeSlot:
    """Half-open interval ``[start, end)``.

    Example:
        >>> TimeSlot(
        ...     start=datetime(2024, 1, 1, 10, 0),
        ...     end=datetime(2024, 1, 1, 11, 0),
        ... )
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if _is_aware(self.start) != _is_aware(self.end):
            raise MixedTimezones(self.start, self.end)
        if not self.start < self.end:
            raise InvalidRange(self.start, self.end)

    @property
    def is_aware(self) -> bool:
        return _is_aware(self.start)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: TimeSlot) -> bool:
        """Touching endpoints do not overlap.

        Raises :class:`MixedTimezones` when one slot is timezone-aware and the
        other is naive.
        """
        if self.is_aware != other.is_aware:
            raise MixedTimezones(self.start, other.start)
        return self.start < other.end and self.end > other.start

    def contains(self, other: TimeSlot) -> bool:
        # A naive slot never lies inside an aware window, and vice versa.
        if self.is_aware != other.is_aware:
            return False
        return other.start >= self.start and other.end <= self.end


@dataclass
class Person:
    """HR manager or interviewer with declared availability.

    Example:
        >>> Person(id=1, name="Alice", email="a@example.com", role=Role.HR_MANAGER)
    """

    id: int
    name: str
    email: str
    role: Role
    availability: List[TimeSlot] = field(default_factory=list)
    booked_interview_ids: Set[int] = field(default_factory=set)

    def add_availability(self, slot: TimeSlot) -> None:
        # Windows are kept as declared: no merging, duplicates allowed.
        self.availability.append(slot)

    def is_available(self, slot: TimeSlot) -> bool:
        """True iff one single availability window contains ``slot``.

        Windows are never merged, so a slot spanning two adjacent windows is
        not available.
        """
        return any(window.contains(slot) for window in self.availability)

    def add_booking(self, interview_id: int) -> None:
        self.booked_interview_ids.add(interview_id)

    def remove_booking(self, interview_id: int) -> None:
        self.booked_interview_ids.discard(interview_id)

    def snapshot(self) -> Person:
        """Detached copy whose collections the registry no longer mutates."""
        return replace(
            self,
            availability=list(self.availability),
            booked_interview_ids=set(self.booked_interview_ids),
        )


@dataclass
class Interview:
    """Booking between one HR manager and one interviewer.

    Example:
        >>> Interview(
        ...     id=1,
        ...     candidate_name="John Doe",
        ...     position="Software Engineer",
        ...     hr_manager_id=1,
        ...     interviewer_id=3,
        ...     time_slot=TimeSlot(
        ...         datetime(2024, 1, 1, 10, 0), datetime(2024, 1, 1, 11, 0)
        ...     ),
        ... )
    """

    id: int
    candidate_name: str
    position: str
    hr_manager_id: int
    interviewer_id: int
    time_slot: TimeSlot
    status: InterviewStatus = InterviewStatus.SCHEDULED
    notes: Optional[str] = None
    rescheduled_from: Optional[int] = None
    rescheduled_to: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status is InterviewStatus.SCHEDULED

    @property
    def participant_ids(self) -> tuple[int, int]:
        return (self.hr_manager_id, self.interviewer_id)

    # The setters below touch only this record. They do not re-run any
    # availability or conflict check and do not update registry indices.

    def set_status(self, status: InterviewStatus) -> None:
        self.status = status

    def set_notes(self, notes: Optional[str]) -> None:
        self.notes = notes

    def set_time_slot(self, slot: TimeSlot) -> None:
        self.time_slot = slot

    def snapshot(self) -> Interview:
        return replace(self)


@dataclass(frozen=True)
class RegistryStatistics:
    """Headcount and per-status interview counts."""

    total_users: int
    hr_managers: int
    interviewers: int
    total_interviews: int
    scheduled: int
    completed: int
    cancelled: int
    rescheduled: int
