"""In-memory registry of persons and interviews.

The registry is the only owner of :class:`Person` and :class:`Interview`
objects and the only place where booking rules are enforced.
"""

from __future__ import annotations

import logging
import threading
from itertools import count
from typing import Dict, Iterable, List, Optional, TypeVar

from ..domain.errors import (
    BookingResult,
    InvalidTransition,
    MixedTimezones,
    OutsideAvailability,
    SchedulingError,
    TimeConflict,
    UnknownInterview,
    UnknownUser,
    WrongRole,
)
from ..domain.models import (
    Interview,
    InterviewStatus,
    Person,
    RegistryStatistics,
    Role,
    TimeSlot,
)

logger = logging.getLogger(__name__)

_PARTY_LABELS = {
    Role.HR_MANAGER: "HR manager",
    Role.INTERVIEWER: "Interviewer",
}

_Entity = TypeVar("_Entity", Person, Interview)


def _copies(entities: Iterable[_Entity], snapshot: bool) -> List[_Entity]:
    if snapshot:
        return [entity.snapshot() for entity in entities]
    return list(entities)


class SchedulingRegistry:
    """Owns all persons and interviews and validates every booking.

    All operations run under one re-entrant lock, so the checks done by
    :meth:`book_interview` always see the same state the booking is
    committed against.
    """

    def __init__(self) -> None:
        self._persons: Dict[int, Person] = {}
        self._interviews: Dict[int, Interview] = {}
        # person id -> every interview id that ever referenced the person
        self._history: Dict[int, List[int]] = {}
        self._person_ids = count(1)
        self._interview_ids = count(1)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Persons
    # ------------------------------------------------------------------

    def add_person(self, name: str, email: str, role: Role) -> int:
        with self._lock:
            person_id = next(self._person_ids)
            self._persons[person_id] = Person(
                id=person_id, name=name, email=email, role=Role(role)
            )
            self._history[person_id] = []
        logger.info(
            "person added", extra={"person_id": person_id, "role": Role(role).value}
        )
        return person_id

    def get_person(
        self, person_id: int, *, snapshot: bool = False
    ) -> Optional[Person]:
        """Return the person, or a detached copy when ``snapshot`` is set."""
        with self._lock:
            person = self._persons.get(person_id)
            if person is not None and snapshot:
                return person.snapshot()
            return person

    def add_availability(self, person_id: int, slot: TimeSlot) -> bool:
        with self._lock:
            person = self._persons.get(person_id)
            if person is None:
                return False
            person.add_availability(slot)
        logger.info("availability added", extra={"person_id": person_id})
        return True

    def get_users_by_role(
        self, role: Role, *, snapshot: bool = False
    ) -> List[Person]:
        with self._lock:
            return _copies(
                (
                    person
                    for _, person in sorted(self._persons.items())
                    if person.role == role
                ),
                snapshot,
            )

    def get_hr_managers(self) -> List[Person]:
        return self.get_users_by_role(Role.HR_MANAGER)

    def get_interviewers(self) -> List[Person]:
        return self.get_users_by_role(Role.INTERVIEWER)

    def get_all_persons(self, *, snapshot: bool = False) -> List[Person]:
        with self._lock:
            return _copies(
                (person for _, person in sorted(self._persons.items())), snapshot
            )

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    def book_interview(
        self,
        candidate_name: str,
        position: str,
        hr_manager_id: int,
        interviewer_id: int,
        slot: TimeSlot,
    ) -> BookingResult:
        """Validate and create a new interview.

        Checks run in a fixed order and the first failure is returned:
        unknown ids, HR manager role, interviewer role, availability
        containment, then conflicts with active interviews. A failed booking
        leaves the registry untouched.
        """
        with self._lock:
            error = self._validate_participants(hr_manager_id, interviewer_id)
            if error is None:
                error = self._validate_slot(
                    (hr_manager_id, interviewer_id), slot, exclude=None
                )
            if error is not None:
                return self._reject("booking rejected", error)

            interview = self._create_interview(
                candidate_name, position, hr_manager_id, interviewer_id, slot
            )
        logger.info(
            "interview booked",
            extra={
                "interview_id": interview.id,
                "hr_manager_id": hr_manager_id,
                "interviewer_id": interviewer_id,
            },
        )
        return BookingResult.success(interview.id)

    def cancel_interview(self, interview_id: int) -> bool:
        """Mark an interview cancelled and release both participants.

        Returns ``False`` when the id is unknown.
        """
        with self._lock:
            interview = self._interviews.get(interview_id)
            if interview is None:
                return False
            interview.set_status(InterviewStatus.CANCELLED)
            self._release(interview)
        logger.info("interview cancelled", extra={"interview_id": interview_id})
        return True

    def complete_interview(self, interview_id: int) -> BookingResult:
        with self._lock:
            interview = self._interviews.get(interview_id)
            if interview is None:
                return self._reject(
                    "completion rejected", UnknownInterview(interview_id)
                )
            if not interview.is_active:
                return self._reject(
                    "completion rejected",
                    InvalidTransition(
                        interview_id, interview.status, InterviewStatus.COMPLETED
                    ),
                )
            interview.set_status(InterviewStatus.COMPLETED)
        logger.info("interview completed", extra={"interview_id": interview_id})
        return BookingResult.success(interview_id)

    def reschedule_interview(
        self, interview_id: int, new_slot: TimeSlot
    ) -> BookingResult:
        """Move an active interview to ``new_slot``.

        The original interview becomes ``RESCHEDULED`` and a new ``SCHEDULED``
        interview is created for the same candidate and participants. The new
        slot must pass the same availability and conflict checks as a fresh
        booking, ignoring the interview being moved.
        """
        with self._lock:
            original = self._interviews.get(interview_id)
            if original is None:
                return self._reject(
                    "reschedule rejected", UnknownInterview(interview_id)
                )
            if not original.is_active:
                return self._reject(
                    "reschedule rejected",
                    InvalidTransition(
                        interview_id, original.status, InterviewStatus.RESCHEDULED
                    ),
                )
            error = self._validate_participants(
                original.hr_manager_id, original.interviewer_id
            )
            if error is None:
                error = self._validate_slot(
                    original.participant_ids, new_slot, exclude=interview_id
                )
            if error is not None:
                return self._reject("reschedule rejected", error)

            original.set_status(InterviewStatus.RESCHEDULED)
            self._release(original)
            replacement = self._create_interview(
                original.candidate_name,
                original.position,
                original.hr_manager_id,
                original.interviewer_id,
                new_slot,
            )
            replacement.set_notes(original.notes)
            replacement.rescheduled_from = original.id
            original.rescheduled_to = replacement.id
        logger.info(
            "interview rescheduled",
            extra={"interview_id": interview_id, "replacement_id": replacement.id},
        )
        return BookingResult.success(replacement.id)

    def set_interview_notes(self, interview_id: int, notes: Optional[str]) -> bool:
        with self._lock:
            interview = self._interviews.get(interview_id)
            if interview is None:
                return False
            interview.set_notes(notes)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_interview(
        self, interview_id: int, *, snapshot: bool = False
    ) -> Optional[Interview]:
        with self._lock:
            interview = self._interviews.get(interview_id)
            if interview is not None and snapshot:
                return interview.snapshot()
            return interview

    def get_person_interviews(
        self, person_id: int, *, snapshot: bool = False
    ) -> List[Interview]:
        """Interviews currently booked for the person, in id order.

        Cancelled and rescheduled interviews are released from the person
        and therefore do not appear here; see :meth:`get_person_history`.
        """
        with self._lock:
            person = self._persons.get(person_id)
            if person is None:
                return []
            interviews = self._resolve(sorted(person.booked_interview_ids))
            return _copies(interviews, snapshot)

    def get_person_history(
        self, person_id: int, *, snapshot: bool = False
    ) -> List[Interview]:
        """Every interview that ever referenced the person, any status."""
        with self._lock:
            interviews = self._resolve(self._history.get(person_id, []))
            return _copies(interviews, snapshot)

    def get_all_interviews(self, *, snapshot: bool = False) -> List[Interview]:
        with self._lock:
            return _copies(
                (interview for _, interview in sorted(self._interviews.items())),
                snapshot,
            )

    def statistics(self) -> RegistryStatistics:
        with self._lock:
            by_status = {status: 0 for status in InterviewStatus}
            for interview in self._interviews.values():
                by_status[interview.status] += 1
            roles = [person.role for person in self._persons.values()]
            return RegistryStatistics(
                total_users=len(roles),
                hr_managers=roles.count(Role.HR_MANAGER),
                interviewers=roles.count(Role.INTERVIEWER),
                total_interviews=len(self._interviews),
                scheduled=by_status[InterviewStatus.SCHEDULED],
                completed=by_status[InterviewStatus.COMPLETED],
                cancelled=by_status[InterviewStatus.CANCELLED],
                rescheduled=by_status[InterviewStatus.RESCHEDULED],
            )

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    def _validate_participants(
        self, hr_manager_id: int, interviewer_id: int
    ) -> Optional[SchedulingError]:
        for person_id in (hr_manager_id, interviewer_id):
            if person_id not in self._persons:
                return UnknownUser(person_id)
        if self._persons[hr_manager_id].role != Role.HR_MANAGER:
            return WrongRole(hr_manager_id, Role.HR_MANAGER)
        if self._persons[interviewer_id].role != Role.INTERVIEWER:
            return WrongRole(interviewer_id, Role.INTERVIEWER)
        return None

    def _validate_slot(
        self,
        participant_ids: Iterable[int],
        slot: TimeSlot,
        exclude: Optional[int],
    ) -> Optional[SchedulingError]:
        participants = [self._persons[person_id] for person_id in participant_ids]
        for person in participants:
            if not person.is_available(slot):
                return OutsideAvailability(person.id, _PARTY_LABELS[person.role])
        for person in participants:
            try:
                conflict = self._find_conflict(person, slot, exclude)
            except MixedTimezones as error:
                return error
            if conflict is not None:
                return TimeConflict(person.id, conflict)
        return None

    def _find_conflict(
        self, person: Person, slot: TimeSlot, exclude: Optional[int]
    ) -> Optional[int]:
        # Only the person's own bookings are scanned.
        for interview_id in sorted(person.booked_interview_ids):
            if interview_id == exclude:
                continue
            interview = self._interviews.get(interview_id)
            if (
                interview is not None
                and interview.is_active
                and interview.time_slot.overlaps(slot)
            ):
                return interview_id
        return None

    def _create_interview(
        self,
        candidate_name: str,
        position: str,
        hr_manager_id: int,
        interviewer_id: int,
        slot: TimeSlot,
    ) -> Interview:
        interview = Interview(
            id=next(self._interview_ids),
            candidate_name=candidate_name,
            position=position,
            hr_manager_id=hr_manager_id,
            interviewer_id=interviewer_id,
            time_slot=slot,
        )
        for person_id in interview.participant_ids:
            self._persons[person_id].add_booking(interview.id)
            self._history.setdefault(person_id, []).append(interview.id)
        self._interviews[interview.id] = interview
        return interview

    def _release(self, interview: Interview) -> None:
        for person_id in interview.participant_ids:
            person = self._persons.get(person_id)
            if person is not None:
                person.remove_booking(interview.id)

    def _resolve(self, interview_ids: Iterable[int]) -> List[Interview]:
        return [
            self._interviews[interview_id]
            for interview_id in interview_ids
            if interview_id in self._interviews
        ]

    @staticmethod
    def _reject(message: str, error: SchedulingError) -> BookingResult:
        logger.warning(message, extra={"error": error.kind, "detail": str(error)})
        return BookingResult.failure(error)
