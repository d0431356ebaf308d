"""Optimistic RSVP submission.

A submission moves through ``IDLE -> PENDING -> COMMITTED | ROLLED_BACK``.
While pending, the cached RSVP list already shows a provisional row; when
the store rejects the insert the list is put back exactly as it was.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import ValidationError

from src.client.models import RSVPRow
from src.client.query_client import QueryClient, QueryKey, QuerySnapshot
from src.client.store import RSVPStore
from src.client.toaster import Toaster
from src.config.cache import RSVP_SUBMISSIONS_QUERY_POLICY
from src.errors import FormValidationError
from src.rsvp.dtos import RSVPSubmissionCreate
from src.validation import field_errors

logger = logging.getLogger(__name__)

RSVP_SUBMISSIONS_KEY: QueryKey = ("rsvp-submissions",)
RSVP_COUNT_KEY: QueryKey = ("rsvp-count",)

SUCCESS_TITLE = "RSVP Submitted Successfully!"
ATTENDING_DESCRIPTION = "We can't wait to celebrate with you! 🎉"
NOT_ATTENDING_DESCRIPTION = "We'll miss you, but thank you for letting us know."
FAILURE_TITLE = "Failed to submit RSVP"
FAILURE_FALLBACK = "Please try again later."


class MutationPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class RSVPMutation:
    def __init__(
        self,
        query_client: QueryClient,
        store: RSVPStore,
        toaster: Toaster,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._query_client = query_client
        self._store = store
        self._toaster = toaster
        self._now = now
        self._query_client.set_policy(RSVP_SUBMISSIONS_KEY, RSVP_SUBMISSIONS_QUERY_POLICY)
        self.phase = MutationPhase.IDLE
        self.snapshot: QuerySnapshot | None = None
        self.data: RSVPRow | None = None
        self.error: Exception | None = None

    async def submit(self, form: Mapping[str, Any]) -> RSVPRow:
        """Validate raw form input, then run the optimistic submission.

        Raises:
            FormValidationError: a field is invalid; nothing was sent or cached
            Exception: whatever the store raised, after the rollback
        """
        try:
            data = RSVPSubmissionCreate.model_validate(form)
        except ValidationError as e:
            raise FormValidationError(field_errors(e)) from e
        return await self.mutate(data)

    async def mutate(self, data: RSVPSubmissionCreate) -> RSVPRow:
        # A refetch landing now would overwrite the provisional row
        await self._query_client.cancel_queries(RSVP_SUBMISSIONS_KEY)

        snapshot = self._query_client.snapshot(RSVP_SUBMISSIONS_KEY)
        self.phase = MutationPhase.PENDING
        self.snapshot = snapshot
        self.data = None
        self.error = None

        if snapshot.data is not None:
            provisional = self._provisional_row(data)
            self._query_client.set_query_data(
                RSVP_SUBMISSIONS_KEY, lambda old: [*(old or []), provisional]
            )

        try:
            row = await self._store.insert_rsvp(data)
        except Exception as e:
            self._query_client.restore(snapshot)
            self.phase = MutationPhase.ROLLED_BACK
            self.error = e
            logger.warning(f"RSVP submission rolled back: {e}")
            self._toaster.error(FAILURE_TITLE, str(e) or FAILURE_FALLBACK)
            raise
        finally:
            self._query_client.invalidate_queries(RSVP_SUBMISSIONS_KEY)
            self._query_client.invalidate_queries(RSVP_COUNT_KEY)

        self.phase = MutationPhase.COMMITTED
        self.data = row
        self._toaster.success(
            SUCCESS_TITLE,
            ATTENDING_DESCRIPTION if data.attending else NOT_ATTENDING_DESCRIPTION,
        )
        return row

    def _provisional_row(self, data: RSVPSubmissionCreate) -> RSVPRow:
        now = self._now()
        return RSVPRow(
            id=f"temp-{int(now.timestamp() * 1000)}",
            name=data.name,
            email=str(data.email),
            attending=data.attending,
            guests=data.guests,
            dietary_restrictions=data.dietary_restrictions,
            message=data.message,
            created_at=now,
            updated_at=now,
        )
