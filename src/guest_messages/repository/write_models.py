from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.errors import StoreError
from src.guest_messages.dtos import GuestMessageDTO
from src.guest_messages.repository.orm_models import GuestMessage


class GuestMessageWriteModel(ABC):
    """Abstract base class for guest message write operations."""

    @abstractmethod
    async def create_message(self, name: str, message: str) -> GuestMessageDTO:
        """Store a new guest message. It is always stored unapproved.

        Args:
            name: Name the guest signed the message with
            message: The message text

        Returns:
            GuestMessageDTO with the generated id and creation timestamp

        Raises:
            StoreError: the row could not be written
        """
        raise NotImplementedError

    @abstractmethod
    async def approve_message(self, message_id: UUID) -> GuestMessageDTO | None:
        """Make a message public. Returns None when no message has that id."""
        raise NotImplementedError


class SqlGuestMessageWriteModel(GuestMessageWriteModel):
    """SQL implementation of guest message write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_message(self, name: str, message: str) -> GuestMessageDTO:
        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                row = GuestMessage(name=name, message=message, approved=False)
                session.add(row)
                await session.flush()
                # load the server-generated created_at
                await session.refresh(row)
                stored = GuestMessageDTO.from_model(row)
        except SQLAlchemyError as e:
            raise StoreError("Failed to save message") from e
        return stored

    async def approve_message(self, message_id: UUID) -> GuestMessageDTO | None:
        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                row = await session.get(GuestMessage, message_id)
                if row is None:
                    return None
                row.approved = True
                await session.flush()
                approved = GuestMessageDTO.from_model(row)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to approve message {message_id}") from e
        return approved
