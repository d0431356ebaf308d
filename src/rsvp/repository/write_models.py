from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.errors import StoreError
from src.rsvp.dtos import RSVPSubmissionCreate, RSVPSubmissionDTO
from src.rsvp.repository.orm_models import RSVPSubmission


class RSVPSubmissionWriteModel(ABC):
    @abstractmethod
    async def create_submission(self, data: RSVPSubmissionCreate) -> RSVPSubmissionDTO:
        """Store an RSVP. Raises StoreError when the row could not be written."""
        raise NotImplementedError


class SqlRSVPSubmissionWriteModel(RSVPSubmissionWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_submission(self, data: RSVPSubmissionCreate) -> RSVPSubmissionDTO:
        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                row = RSVPSubmission(
                    name=data.name,
                    email=str(data.email),
                    attending=data.attending,
                    guests=data.guests,
                    dietary_restrictions=data.dietary_restrictions,
                    message=data.message,
                )
                session.add(row)
                await session.flush()
                await session.refresh(row)
                stored = RSVPSubmissionDTO.from_model(row)
        except SQLAlchemyError as e:
            raise StoreError("Failed to submit RSVP") from e
        return stored
