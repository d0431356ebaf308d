from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

if TYPE_CHECKING:
    from src.rsvp.repository.orm_models import RSVPSubmission

MIN_GUESTS = 1
MAX_GUESTS = 10


class RSVPSubmissionCreate(BaseModel):
    """RSVP form fields.

    Validated by the client before anything is sent and again by the API,
    which has the final say.
    """

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    attending: bool
    guests: int = Field(default=1, ge=MIN_GUESTS, le=MAX_GUESTS)
    dietary_restrictions: str | None = Field(default=None, max_length=500)
    message: str | None = Field(default=None, max_length=1000)

    @field_validator("dietary_restrictions", "message")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return v or None


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    """A stored RSVP submission."""

    id: UUID
    name: str
    email: str
    attending: bool
    guests: int
    created_at: datetime
    updated_at: datetime
    dietary_restrictions: str | None = None
    message: str | None = None

    @classmethod
    def from_model(cls, row: "RSVPSubmission") -> "RSVPSubmissionDTO":
        return cls(
            id=row.id,
            name=row.name,
            email=row.email,
            attending=row.attending,
            guests=row.guests,
            dietary_restrictions=row.dietary_restrictions,
            message=row.message,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
