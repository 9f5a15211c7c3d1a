"""Person and availability endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ..domain.models import Role
from ..domain.schemas import InterviewOut, PersonCreate, PersonOut, SlotIn
from ..services.registry import SchedulingRegistry
from .deps import get_registry, not_found

router = APIRouter(prefix="/persons", tags=["persons"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PersonOut)
def create_person(
    body: PersonCreate, registry: SchedulingRegistry = Depends(get_registry)
) -> PersonOut:
    person_id = registry.add_person(body.name, str(body.email), body.role)
    return PersonOut.from_domain(registry.get_person(person_id, snapshot=True))


@router.get("", response_model=List[PersonOut])
def list_persons(
    role: Optional[Role] = None, registry: SchedulingRegistry = Depends(get_registry)
) -> List[PersonOut]:
    if role is None:
        persons = registry.get_all_persons(snapshot=True)
    else:
        persons = registry.get_users_by_role(role, snapshot=True)
    return [PersonOut.from_domain(person) for person in persons]


@router.get("/{person_id}", response_model=PersonOut)
def get_person(
    person_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> PersonOut:
    person = registry.get_person(person_id, snapshot=True)
    if person is None:
        raise not_found("user", person_id)
    return PersonOut.from_domain(person)


@router.post(
    "/{person_id}/availability",
    status_code=status.HTTP_201_CREATED,
    response_model=PersonOut,
)
def add_availability(
    person_id: int, body: SlotIn, registry: SchedulingRegistry = Depends(get_registry)
) -> PersonOut:
    if not registry.add_availability(person_id, body.to_domain()):
        raise not_found("user", person_id)
    return PersonOut.from_domain(registry.get_person(person_id, snapshot=True))


@router.get("/{person_id}/interviews", response_model=List[InterviewOut])
def person_interviews(
    person_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> List[InterviewOut]:
    """Interviews currently booked for the person."""
    if registry.get_person(person_id) is None:
        raise not_found("user", person_id)
    return [
        InterviewOut.from_domain(interview)
        for interview in registry.get_person_interviews(
            person_id, snapshot=True
        )
    ]


@router.get("/{person_id}/history", response_model=List[InterviewOut])
def person_history(
    person_id: int, registry: SchedulingRegistry = Depends(get_registry)
) -> List[InterviewOut]:
    """Every interview that ever involved the person, including cancelled ones."""
    if registry.get_person(person_id) is None:
        raise not_found("user", person_id)
    return [
        InterviewOut.from_domain(interview)
        for interview in registry.get_person_history(person_id, snapshot=True)
    ]
