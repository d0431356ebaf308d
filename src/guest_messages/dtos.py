from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from src.guest_messages.repository.orm_models import GuestMessage


class GuestMessageCreate(BaseModel):
    """Request body for leaving a message for the couple."""

    name: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=500)


@dataclass(frozen=True)
class GuestMessageDTO:
    """A stored guest message, as returned by read and write models."""

    id: UUID
    name: str
    message: str
    approved: bool
    created_at: datetime

    @classmethod
    def from_model(cls, row: "GuestMessage") -> "GuestMessageDTO":
        return cls(
            id=row.id,
            name=row.name,
            message=row.message,
            approved=row.approved,
            created_at=row.created_at,
        )
