from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RSVPRow(BaseModel):
    """An RSVP as held in the client cache; ``id`` is ``temp-...`` until the store confirms it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    attending: bool
    guests: int
    dietary_restrictions: str | None = None
    message: str | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_provisional(self) -> bool:
        return self.id.startswith("temp-")


class GuestMessage(BaseModel):
    """An approved guest message ready for rendering."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    message: str
    approved: bool
    created_at: datetime
