"""Tests for booking, cancellation and queries on the registry."""

from datetime import datetime, timezone
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from cloudfit_scheduler.domain.errors import (  # noqa: E402
    BookingResult,
    InvalidTransition,
    MixedTimezones,
    OutsideAvailability,
    TimeConflict,
    UnknownInterview,
    UnknownUser,
    WrongRole,
)
from cloudfit_scheduler.domain.models import InterviewStatus, Role, TimeSlot  # noqa: E402
from cloudfit_scheduler.services.registry import SchedulingRegistry  # noqa: E402


def slot(start: tuple, end: tuple) -> TimeSlot:
    return TimeSlot(datetime(2024, 3, 4, *start), datetime(2024, 3, 4, *end))


@pytest.fixture
def registry() -> SchedulingRegistry:
    return SchedulingRegistry()


@pytest.fixture
def team(registry):
    """HR manager available 09-17, interviewer available 09-12."""
    hr = registry.add_person("Alice", "alice@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "bob@example.com", Role.INTERVIEWER)
    registry.add_availability(hr, slot((9,), (17,)))
    registry.add_availability(interviewer, slot((9,), (12,)))
    return hr, interviewer


def book(registry, hr, interviewer, time_slot, candidate="John Doe") -> BookingResult:
    return registry.book_interview(
        candidate, "Software Engineer", hr, interviewer, time_slot
    )


def snapshot(registry):
    return (
        [(i.id, i.status) for i in registry.get_all_interviews()],
        {p.id: set(p.booked_interview_ids) for p in registry.get_all_persons()},
    )


def test_person_ids_start_at_one_and_increase(registry) -> None:
    assert registry.add_person("A", "a@example.com", Role.HR_MANAGER) == 1
    assert registry.add_person("B", "b@example.com", Role.INTERVIEWER) == 2
    assert registry.get_person(2).role is Role.INTERVIEWER


def test_registries_do_not_share_id_sequences() -> None:
    first, second = SchedulingRegistry(), SchedulingRegistry()
    first.add_person("A", "a@example.com", Role.HR_MANAGER)
    first.add_person("B", "b@example.com", Role.HR_MANAGER)
    assert second.add_person("C", "c@example.com", Role.HR_MANAGER) == 1


def test_add_availability_unknown_person(registry) -> None:
    assert registry.add_availability(99, slot((9,), (10,))) is False


def test_booking_scenario(registry, team) -> None:
    hr, interviewer = team

    first = book(registry, hr, interviewer, slot((10,), (11,)))
    assert first.ok
    assert first.interview_id == 1

    outside = book(registry, hr, interviewer, slot((13,), (14,)))
    assert isinstance(outside.error, OutsideAvailability)
    assert outside.error.person_id == interviewer
    assert outside.error.party == "Interviewer"

    clash = book(registry, hr, interviewer, slot((10, 30), (11, 30)))
    assert isinstance(clash.error, TimeConflict)
    assert clash.error.conflicting_interview_id == first.interview_id

    assert [i.id for i in registry.get_all_interviews()] == [1]


def test_successful_booking_links_both_participants(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()

    interview = registry.get_interview(interview_id)
    assert interview.status is InterviewStatus.SCHEDULED
    assert interview.hr_manager_id == hr
    assert interview.interviewer_id == interviewer
    assert registry.get_person(hr).booked_interview_ids == {interview_id}
    assert registry.get_person(interviewer).booked_interview_ids == {interview_id}


def test_touching_interviews_do_not_conflict(registry, team) -> None:
    hr, interviewer = team
    assert book(registry, hr, interviewer, slot((9,), (10,))).ok
    assert book(registry, hr, interviewer, slot((10,), (11,))).ok


def test_unknown_user_creates_nothing(registry, team) -> None:
    hr, _ = team
    before = snapshot(registry)

    result = book(registry, hr, 42, slot((10,), (11,)))

    assert isinstance(result.error, UnknownUser)
    assert result.error.person_id == 42
    assert snapshot(registry) == before
    assert registry.get_all_interviews() == []


def test_unknown_user_checked_before_roles(registry) -> None:
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    # The interviewer sits in the HR slot, but the missing id wins.
    result = book(registry, interviewer, 7, slot((10,), (11,)))
    assert isinstance(result.error, UnknownUser)


def test_wrong_roles(registry, team) -> None:
    hr, interviewer = team
    other_hr = registry.add_person("Dana", "d@example.com", Role.HR_MANAGER)

    swapped = book(registry, interviewer, hr, slot((10,), (11,)))
    assert isinstance(swapped.error, WrongRole)
    assert swapped.error.person_id == interviewer
    assert swapped.error.expected is Role.HR_MANAGER

    two_managers = book(registry, hr, other_hr, slot((10,), (11,)))
    assert isinstance(two_managers.error, WrongRole)
    assert two_managers.error.person_id == other_hr
    assert two_managers.error.expected is Role.INTERVIEWER


def test_role_checked_before_availability(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    also_hr = registry.add_person("Dana", "d@example.com", Role.HR_MANAGER)
    result = book(registry, hr, also_hr, slot((10,), (11,)))
    assert isinstance(result.error, WrongRole)


def test_hr_manager_availability_checked_first(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    result = book(registry, hr, interviewer, slot((10,), (11,)))
    assert isinstance(result.error, OutsideAvailability)
    assert result.error.person_id == hr
    assert result.error.party == "HR manager"


def test_availability_checked_before_conflicts(registry, team) -> None:
    hr, interviewer = team
    book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    result = book(registry, hr, interviewer, slot((10, 30), (12, 30)))
    assert isinstance(result.error, OutsideAvailability)


def test_spanning_adjacent_windows_is_not_available(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    registry.add_availability(hr, slot((9,), (17,)))
    registry.add_availability(interviewer, slot((9,), (10,)))
    registry.add_availability(interviewer, slot((10,), (11,)))

    result = book(registry, hr, interviewer, slot((9, 30), (10, 30)))
    assert isinstance(result.error, OutsideAvailability)
    assert result.error.person_id == interviewer


def test_conflict_against_another_pairing(registry, team) -> None:
    hr, interviewer = team
    second = registry.add_person("Carol", "c@example.com", Role.INTERVIEWER)
    registry.add_availability(second, slot((9,), (17,)))

    first_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    result = book(registry, hr, second, slot((10, 30), (11, 30)))

    assert isinstance(result.error, TimeConflict)
    assert result.error.person_id == hr
    assert result.error.conflicting_interview_id == first_id


def test_failed_booking_is_atomic(registry, team) -> None:
    hr, interviewer = team
    book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    before = snapshot(registry)

    assert not book(registry, hr, interviewer, slot((10, 30), (11, 30))).ok
    assert not book(registry, hr, interviewer, slot((13,), (14,))).ok
    assert not book(registry, interviewer, hr, slot((9,), (10,))).ok

    assert snapshot(registry) == before


def test_failed_booking_does_not_consume_an_id(registry, team) -> None:
    hr, interviewer = team
    assert not book(registry, hr, interviewer, slot((13,), (14,))).ok
    assert book(registry, hr, interviewer, slot((9,), (10,))).interview_id == 1


def test_unwrap_raises_the_carried_error(registry, team) -> None:
    hr, interviewer = team
    with pytest.raises(OutsideAvailability):
        book(registry, hr, interviewer, slot((13,), (14,))).unwrap()


def test_result_can_be_matched_on_error_kind(registry, team) -> None:
    hr, interviewer = team
    first = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    result = book(registry, hr, interviewer, slot((10,), (11,)))

    match result.error:
        case TimeConflict(conflicting_interview_id=other):
            assert other == first
        case _:
            pytest.fail(f"unexpected result {result}")


def test_cancel_round_trip(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()

    assert registry.cancel_interview(interview_id) is True

    assert registry.get_person_interviews(hr) == []
    assert registry.get_person_interviews(interviewer) == []
    assert registry.get_interview(interview_id).status is InterviewStatus.CANCELLED


def test_cancel_frees_the_slot(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    registry.cancel_interview(interview_id)
    assert book(registry, hr, interviewer, slot((10,), (11,))).ok


def test_cancel_unknown_interview(registry, team) -> None:
    hr, interviewer = team
    book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    before = snapshot(registry)

    assert registry.cancel_interview(999) is False
    assert snapshot(registry) == before


def test_availability_edits_do_not_invalidate_bookings(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    registry.add_availability(hr, slot((9,), (17,)))
    registry.add_availability(interviewer, slot((9,), (12,)))
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()

    registry.get_person(interviewer).availability.clear()

    assert registry.get_interview(interview_id).is_active
    assert [i.id for i in registry.get_person_interviews(interviewer)] == [interview_id]


def test_person_interviews_in_id_order(registry, team) -> None:
    hr, interviewer = team
    late = book(registry, hr, interviewer, slot((11,), (12,))).unwrap()
    early = book(registry, hr, interviewer, slot((9,), (10,))).unwrap()

    assert [i.id for i in registry.get_person_interviews(hr)] == [late, early]
    assert late < early


def test_person_interviews_unknown_person(registry) -> None:
    assert registry.get_person_interviews(5) == []
    assert registry.get_person_history(5) == []


def test_history_keeps_cancelled_interviews(registry, team) -> None:
    hr, interviewer = team
    cancelled = book(registry, hr, interviewer, slot((9,), (10,))).unwrap()
    active = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    registry.cancel_interview(cancelled)

    history = registry.get_person_history(interviewer)
    assert [(i.id, i.status) for i in history] == [
        (cancelled, InterviewStatus.CANCELLED),
        (active, InterviewStatus.SCHEDULED),
    ]
    assert [i.id for i in registry.get_person_interviews(interviewer)] == [active]


def test_users_by_role(registry) -> None:
    a = registry.add_person("A", "a@example.com", Role.HR_MANAGER)
    b = registry.add_person("B", "b@example.com", Role.INTERVIEWER)
    c = registry.add_person("C", "c@example.com", Role.HR_MANAGER)

    assert [p.id for p in registry.get_users_by_role(Role.HR_MANAGER)] == [a, c]
    assert [p.id for p in registry.get_interviewers()] == [b]
    assert [p.id for p in registry.get_hr_managers()] == [a, c]


def test_complete_interview(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()

    assert registry.complete_interview(interview_id).ok
    interview = registry.get_interview(interview_id)
    assert interview.status is InterviewStatus.COMPLETED
    # Completed interviews stay on the person's list but stop blocking time.
    assert [i.id for i in registry.get_person_interviews(hr)] == [interview_id]
    assert book(registry, hr, interviewer, slot((10,), (11,))).ok


def test_complete_rejects_unknown_and_inactive(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    registry.cancel_interview(interview_id)

    assert isinstance(registry.complete_interview(77).error, UnknownInterview)
    result = registry.complete_interview(interview_id)
    assert isinstance(result.error, InvalidTransition)
    assert registry.get_interview(interview_id).status is InterviewStatus.CANCELLED


def test_reschedule_interview(registry, team) -> None:
    hr, interviewer = team
    original = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    registry.set_interview_notes(original, "Senior track")

    result = registry.reschedule_interview(original, slot((10, 30), (11, 30)))

    assert result.ok
    replacement = registry.get_interview(result.interview_id)
    old = registry.get_interview(original)
    assert old.status is InterviewStatus.RESCHEDULED
    assert old.rescheduled_to == replacement.id
    assert replacement.rescheduled_from == original
    assert replacement.status is InterviewStatus.SCHEDULED
    assert replacement.notes == "Senior track"
    assert replacement.candidate_name == old.candidate_name
    assert [i.id for i in registry.get_person_interviews(hr)] == [replacement.id]
    assert [i.id for i in registry.get_person_history(hr)] == [original, replacement.id]


def test_reschedule_validates_new_slot(registry, team) -> None:
    hr, interviewer = team
    first = book(registry, hr, interviewer, slot((9,), (10,))).unwrap()
    second = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    before = snapshot(registry)

    outside = registry.reschedule_interview(first, slot((12,), (13,)))
    clash = registry.reschedule_interview(first, slot((10, 30), (11, 30)))

    assert isinstance(outside.error, OutsideAvailability)
    assert isinstance(clash.error, TimeConflict)
    assert clash.error.conflicting_interview_id == second
    assert snapshot(registry) == before


def test_reschedule_rejects_unknown_and_inactive(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    registry.complete_interview(interview_id)

    assert isinstance(
        registry.reschedule_interview(50, slot((9,), (10,))).error, UnknownInterview
    )
    assert isinstance(
        registry.reschedule_interview(interview_id, slot((9,), (10,))).error,
        InvalidTransition,
    )


def test_set_interview_notes(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    assert registry.set_interview_notes(interview_id, "Remote") is True
    assert registry.get_interview(interview_id).notes == "Remote"
    assert registry.set_interview_notes(404, "x") is False


def test_statistics(registry, team) -> None:
    hr, interviewer = team
    registry.add_person("Eve", "e@example.com", Role.INTERVIEWER)
    a = book(registry, hr, interviewer, slot((9,), (10,))).unwrap()
    b = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()
    c = book(registry, hr, interviewer, slot((11,), (12,))).unwrap()
    registry.cancel_interview(a)
    registry.complete_interview(b)
    registry.reschedule_interview(c, slot((9,), (10,)))

    stats = registry.statistics()
    assert (stats.total_users, stats.hr_managers, stats.interviewers) == (3, 1, 2)
    assert stats.total_interviews == 4
    assert (stats.scheduled, stats.completed, stats.cancelled, stats.rescheduled) == (
        1,
        1,
        1,
        1,
    )


def utc_slot(start: tuple, end: tuple) -> TimeSlot:
    return TimeSlot(
        datetime(2024, 3, 4, *start, tzinfo=timezone.utc),
        datetime(2024, 3, 4, *end, tzinfo=timezone.utc),
    )


def test_naive_booking_against_aware_availability(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    registry.add_availability(hr, utc_slot((9,), (17,)))
    registry.add_availability(interviewer, utc_slot((9,), (17,)))

    result = book(registry, hr, interviewer, slot((10,), (11,)))

    assert isinstance(result.error, OutsideAvailability)
    assert result.error.person_id == hr
    assert book(registry, hr, interviewer, utc_slot((10,), (11,))).ok


def test_mixed_timezone_bookings_are_rejected_not_raised(registry) -> None:
    hr = registry.add_person("Alice", "a@example.com", Role.HR_MANAGER)
    interviewer = registry.add_person("Bob", "b@example.com", Role.INTERVIEWER)
    for person_id in (hr, interviewer):
        registry.add_availability(person_id, utc_slot((9,), (17,)))
        registry.add_availability(person_id, slot((9,), (17,)))
    book(registry, hr, interviewer, utc_slot((10,), (11,))).unwrap()
    before = snapshot(registry)

    result = book(registry, hr, interviewer, slot((10,), (11,)))

    assert isinstance(result.error, MixedTimezones)
    assert snapshot(registry) == before


def test_unwrap_returns_interview_id(registry, team) -> None:
    hr, interviewer = team
    result = book(registry, hr, interviewer, slot((10,), (11,)))
    assert result.unwrap() == result.interview_id == 1


def test_snapshot_queries_return_detached_copies(registry, team) -> None:
    hr, interviewer = team
    interview_id = book(registry, hr, interviewer, slot((10,), (11,))).unwrap()

    person = registry.get_person(hr, snapshot=True)
    everyone = registry.get_all_persons(snapshot=True)
    managers = registry.get_users_by_role(Role.HR_MANAGER, snapshot=True)
    interview = registry.get_interview(interview_id, snapshot=True)
    booked = registry.get_person_interviews(hr, snapshot=True)

    registry.add_availability(hr, slot((18,), (19,)))
    registry.cancel_interview(interview_id)

    assert person.booked_interview_ids == {interview_id}
    assert len(person.availability) == 1
    assert len(everyone[0].availability) == 1
    assert managers[0].booked_interview_ids == {interview_id}
    assert interview.status is InterviewStatus.SCHEDULED
    assert booked[0].status is InterviewStatus.SCHEDULED
    assert registry.get_person(hr) is not person
    assert len(registry.get_person(hr).availability) == 2
