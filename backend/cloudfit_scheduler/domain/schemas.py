"""Pydantic models used for request and response bodies.

These data transfer objects (DTOs) mirror the domain models but add
validation and serialization helpers for the API layer. Date/time text is
parsed here; the registry only ever sees ``datetime`` values.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, model_validator

from . import models
from .models import InterviewStatus, Role


class SlotIn(BaseModel):
    """Time range submitted by a client.

    Example:
        >>> SlotIn(start=datetime(2024, 1, 1, 9, 0), end=datetime(2024, 1, 1, 17, 0))
    """

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_range(self) -> "SlotIn":
        # Reuses the domain check so the error message matches.
        self.to_domain()
        return self

    def to_domain(self) -> models.TimeSlot:
        return models.TimeSlot(start=self.start, end=self.end)

    class Config:
        json_schema_extra = {
            "example": {"start": "2024-01-01T09:00:00", "end": "2024-01-01T17:00:00"}
        }


class SlotOut(BaseModel):
    start: datetime
    end: datetime

    class Config:
        frozen = True


class PersonCreate(BaseModel):
    """Payload for registering a person.

    Example:
        >>> PersonCreate(name="Alice", email="a@example.com", role=Role.HR_MANAGER)
    """

    name: str
    email: EmailStr
    role: Role

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Alice Johnson",
                "email": "alice@cloudfit.com",
                "role": "HR_MANAGER",
            }
        }


class PersonOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    availability: List[SlotOut]
    booked_interview_ids: List[int]

    class Config:
        frozen = True

    @classmethod
    def from_domain(cls, person: models.Person) -> "PersonOut":
        return cls(
            id=person.id,
            name=person.name,
            email=person.email,
            role=person.role,
            availability=[
                SlotOut(start=slot.start, end=slot.end)
                for slot in person.availability
            ],
            booked_interview_ids=sorted(person.booked_interview_ids),
        )


class InterviewCreate(SlotIn):
    """Booking request.

    Example:
        >>> InterviewCreate(
        ...     candidate_name="John Doe",
        ...     position="Software Engineer",
        ...     hr_manager_id=1,
        ...     interviewer_id=3,
        ...     start=datetime(2024, 1, 1, 10, 0),
        ...     end=datetime(2024, 1, 1, 11, 0),
        ... )
    """

    candidate_name: str
    position: str
    hr_manager_id: int
    interviewer_id: int

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_name": "John Doe",
                "position": "Software Engineer",
                "hr_manager_id": 1,
                "interviewer_id": 3,
                "start": "2024-01-01T10:00:00",
                "end": "2024-01-01T11:00:00",
            }
        }


class NotesUpdate(BaseModel):
    notes: Optional[str] = None


class InterviewOut(BaseModel):
    id: int
    candidate_name: str
    position: str
    hr_manager_id: int
    interviewer_id: int
    start: datetime
    end: datetime
    status: InterviewStatus
    notes: Optional[str] = None
    rescheduled_from: Optional[int] = None
    rescheduled_to: Optional[int] = None

    class Config:
        frozen = True

    @classmethod
    def from_domain(cls, interview: models.Interview) -> "InterviewOut":
        return cls(
            id=interview.id,
            candidate_name=interview.candidate_name,
            position=interview.position,
            hr_manager_id=interview.hr_manager_id,
            interviewer_id=interview.interviewer_id,
            start=interview.time_slot.start,
            end=interview.time_slot.end,
            status=interview.status,
            notes=interview.notes,
            rescheduled_from=interview.rescheduled_from,
            rescheduled_to=interview.rescheduled_to,
        )


class Statistics(BaseModel):
    total_users: int
    hr_managers: int
    interviewers: int
    total_interviews: int
    scheduled: int
    completed: int
    cancelled: int
    rescheduled: int

    class Config:
        frozen = True
