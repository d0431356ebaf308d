import abc
import logging
import time
from collections.abc import Callable
from functools import partial

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.table_names import DatabaseRoles
from src.errors import StoreError
from src.guest_messages.dtos import GuestMessageDTO
from src.guest_messages.repository.orm_models import GuestMessage

logger = logging.getLogger(__name__)


class GuestMessageReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_approved(self) -> list[GuestMessageDTO]:
        """
        Approved guest messages, most recent first.
        Raises StoreError when the database cannot be read.
        """
        raise NotImplementedError


class SqlGuestMessageReadModel(GuestMessageReadModel):
    """SQL implementation of the guest message read model.

    On PostgreSQL, public reads run as the non-owner ``wedding_public`` role,
    so the row-level security policy hides unapproved rows even from a query
    that leaves out the ``approved`` filter.
    """

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_approved(self) -> list[GuestMessageDTO]:
        stmt = (
            select(GuestMessage)
            .where(GuestMessage.approved.is_(True))
            .order_by(GuestMessage.created_at.desc())
        )
        return await self._list(stmt)

    async def list_pending(self) -> list[GuestMessageDTO]:
        """Messages waiting for an operator, oldest first."""
        stmt = (
            select(GuestMessage)
            .where(GuestMessage.approved.is_(False))
            .order_by(GuestMessage.created_at.asc())
        )
        return await self._list(stmt, public=False)

    async def _list(self, stmt, public: bool = True) -> list[GuestMessageDTO]:
        try:
            async with self.async_session_manager(
                auto_commit=False, session_overwrite=self.session_overwrite
            ) as session:
                if public and session.get_bind().dialect.name == "postgresql":
                    # Reverts when the transaction ends
                    await session.execute(text(f"SET LOCAL ROLE {DatabaseRoles.PUBLIC.value}"))
                result = await session.execute(stmt)
                return [GuestMessageDTO.from_model(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StoreError("Failed to fetch messages") from e


class RevalidatingGuestMessageReadModel(GuestMessageReadModel):
    """Serves the last successful read for ``revalidate`` seconds.

    Failed reads are never cached, so the next request tries the database again.
    """

    def __init__(
        self,
        read_model: GuestMessageReadModel,
        revalidate: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._read_model = read_model
        self._revalidate = revalidate
        self._clock = clock
        self._messages: list[GuestMessageDTO] | None = None
        self._fetched_at = 0.0

    async def list_approved(self) -> list[GuestMessageDTO]:
        now = self._clock()
        if self._messages is not None and now - self._fetched_at < self._revalidate:
            return list(self._messages)

        messages = await self._read_model.list_approved()
        logger.debug("Revalidated guest messages: %d approved", len(messages))
        self._messages = messages
        self._fetched_at = now
        return list(messages)
