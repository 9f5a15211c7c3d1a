"""Interview booking and lifecycle endpoints."""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status

from ..domain.schemas import (
    InterviewCreate,
    InterviewOut,
    NotesUpdate,
    SlotIn,
    Statistics,
)
from ..services.registry import SchedulingRegistry
from .deps import get_registry, not_found

router = APIRouter(tags=["interviews"])


def _interview_out(registry: SchedulingRegistry, interview_id: int) -> InterviewOut:
    interview = registry.get_interview(interview_id, snapshot=True)
    if interview is None:
        raise not_found("interview", interview_id)
    return InterviewOut.from_domain(interview)


@router.post(
    "/interviews", status_code=status.HTTP_201_CREATED, response_model=InterviewOut
)
def book_interview(
    body: InterviewCreate, registry: SchedulingRegistry = Depends(get_registry)
) -> InterviewOut:
    # Rule violations are raised here and mapped by the app's error handler.
    interview_id = registry.book_interview(
        body.candidate_name,
        body.position,
        body.hr_manager_id,
        body.interviewer_id,
        body.to_domain(),
    ).unwrap()
    return _interview_out(registry, interview_id)


@router.get("/interviews", response_model=List[InterviewOut])
def list_interviews(
    registry: SchedulingRegistry = Depends(get_registry),
) -> List[InterviewOut]:
    interviews = registry.get_all_interviews(snapshot=True)
    return [InterviewOut.from_domain(interview) for interview in interviews]


@router.get("/interviews/{interview_id}", response_model=InterviewOut)
def get_interview(
    interview_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> InterviewOut:
    return _interview_out(registry, interview_id)


@router.post("/interviews/{interview_id}/cancel", response_model=InterviewOut)
def cancel_interview(
    interview_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> InterviewOut:
    if not registry.cancel_interview(interview_id):
        raise not_found("interview", interview_id)
    return _interview_out(registry, interview_id)


@router.post("/interviews/{interview_id}/complete", response_model=InterviewOut)
def complete_interview(
    interview_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> InterviewOut:
    registry.complete_interview(interview_id).unwrap()
    return _interview_out(registry, interview_id)


@router.post(
    "/interviews/{interview_id}/reschedule",
    status_code=status.HTTP_201_CREATED,
    response_model=InterviewOut,
)
def reschedule_interview(
    interview_id: int, body: SlotIn, registry: SchedulingRegistry = Depends(get_registry)
) -> InterviewOut:
    """Move an interview; returns the replacement interview."""
    new_id = registry.reschedule_interview(interview_id, body.to_domain()).unwrap()
    return _interview_out(registry, new_id)


@router.patch("/interviews/{interview_id}/notes", response_model=InterviewOut)
def update_notes(
    interview_id: int,
    body: NotesUpdate,
    registry: SchedulingRegistry = Depends(get_registry),
) -> InterviewOut:
    if not registry.set_interview_notes(interview_id, body.notes):
        raise not_found("interview", interview_id)
    return _interview_out(registry, interview_id)


@router.get("/statistics", response_model=Statistics)
def statistics(registry: SchedulingRegistry = Depends(get_registry)) -> Statistics:
    return Statistics(**asdict(registry.statistics()))
