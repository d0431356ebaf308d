"""Tests for the optimistic RSVP submission."""

import asyncio
import logging
from datetime import UTC, datetime

import pytest
from tenacity import wait_none

from src.client.models import RSVPRow
from src.client.query_client import QueryClient
from src.client.rsvp_mutation import (
    ATTENDING_DESCRIPTION,
    FAILURE_FALLBACK,
    FAILURE_TITLE,
    NOT_ATTENDING_DESCRIPTION,
    RSVP_COUNT_KEY,
    RSVP_SUBMISSIONS_KEY,
    SUCCESS_TITLE,
    MutationPhase,
    RSVPMutation,
)
from src.client.toaster import LoggingToaster
from src.errors import FormValidationError, StoreError
from src.rsvp.dtos import RSVPSubmissionCreate

NOW = datetime(2026, 5, 1, 10, 30, tzinfo=UTC)

EXISTING = RSVPRow(
    id="b3c1a6a2-5d0e-4c37-9b84-0f4b9e1c2d11",
    name="John Smith",
    email="john@example.com",
    attending=True,
    guests=1,
    created_at=datetime(2026, 4, 1, tzinfo=UTC),
    updated_at=datetime(2026, 4, 1, tzinfo=UTC),
)


class RecordingToaster:
    def __init__(self):
        self.successes: list[tuple] = []
        self.errors: list[tuple] = []

    def success(self, title, description=None):
        self.successes.append((title, description))

    def error(self, title, description=None):
        self.errors.append((title, description))


class FakeStore:
    """Store whose insert can be held open and made to fail."""

    def __init__(self, error: Exception | None = None, hold: bool = False):
        self.inserted: list[RSVPSubmissionCreate] = []
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        if not hold:
            self.release.set()
        self._error = error

    async def insert_rsvp(self, data: RSVPSubmissionCreate) -> RSVPRow:
        self.inserted.append(data)
        self.started.set()
        await self.release.wait()
        if self._error is not None:
            raise self._error
        return RSVPRow(
            id="6f1d2c3b-aaaa-4bbb-8ccc-123456789abc",
            name=data.name,
            email=str(data.email),
            attending=data.attending,
            guests=data.guests,
            dietary_restrictions=data.dietary_restrictions,
            message=data.message,
            created_at=NOW,
            updated_at=NOW,
        )


@pytest.fixture
def query_client() -> QueryClient:
    return QueryClient(retry_wait=wait_none())


@pytest.fixture
def toaster() -> RecordingToaster:
    return RecordingToaster()


def rsvp(**changes) -> RSVPSubmissionCreate:
    fields = {"name": "Jane Doe", "email": "jane@example.com", "attending": True, "guests": 2}
    return RSVPSubmissionCreate(**(fields | changes))


def make_mutation(query_client, store, toaster) -> RSVPMutation:
    return RSVPMutation(query_client, store, toaster, now=lambda: NOW)


@pytest.mark.asyncio
async def test_provisional_row_visible_while_pending(query_client, toaster):
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, [EXISTING])
    store = FakeStore(hold=True)
    mutation = make_mutation(query_client, store, toaster)

    task = asyncio.create_task(mutation.mutate(rsvp()))
    await store.started.wait()

    cached = query_client.get_query_data(RSVP_SUBMISSIONS_KEY)
    assert mutation.phase == MutationPhase.PENDING
    assert cached[0] == EXISTING
    assert len(cached) == 2
    provisional = cached[1]
    assert provisional.is_provisional
    assert provisional.id == f"temp-{int(NOW.timestamp() * 1000)}"
    assert provisional.name == "Jane Doe"
    assert provisional.guests == 2
    assert provisional.created_at == NOW

    store.release.set()
    row = await task

    assert mutation.phase == MutationPhase.COMMITTED
    assert mutation.data == row
    assert not row.is_provisional


@pytest.mark.asyncio
async def test_success_invalidates_rsvp_queries(query_client, toaster):
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, [EXISTING])
    query_client.set_query_data(RSVP_COUNT_KEY, 1)
    query_client.set_query_data(("guest-messages",), [])
    mutation = make_mutation(query_client, FakeStore(), toaster)

    await mutation.mutate(rsvp())

    assert query_client.is_stale(RSVP_SUBMISSIONS_KEY)
    assert query_client.is_stale(RSVP_COUNT_KEY)
    assert not query_client.is_stale(("guest-messages",))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "attending, description",
    [(True, ATTENDING_DESCRIPTION), (False, NOT_ATTENDING_DESCRIPTION)],
)
async def test_success_toast_depends_on_attendance(query_client, toaster, attending, description):
    mutation = make_mutation(query_client, FakeStore(), toaster)

    await mutation.mutate(rsvp(attending=attending))

    assert toaster.successes == [(SUCCESS_TITLE, description)]
    assert toaster.errors == []


@pytest.mark.asyncio
async def test_failure_restores_list_exactly(query_client, toaster):
    original = [EXISTING]
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, original)
    store = FakeStore(error=StoreError("Failed to submit RSVP"))
    mutation = make_mutation(query_client, store, toaster)

    with pytest.raises(StoreError):
        await mutation.mutate(rsvp())

    assert mutation.phase == MutationPhase.ROLLED_BACK
    assert query_client.get_query_data(RSVP_SUBMISSIONS_KEY) is original
    assert query_client.get_query_data(RSVP_SUBMISSIONS_KEY) == [EXISTING]
    assert toaster.errors == [(FAILURE_TITLE, "Failed to submit RSVP")]
    assert toaster.successes == []


@pytest.mark.asyncio
async def test_failure_still_invalidates(query_client, toaster):
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, [EXISTING])
    query_client.set_query_data(RSVP_COUNT_KEY, 1)
    mutation = make_mutation(query_client, FakeStore(error=StoreError("nope")), toaster)

    with pytest.raises(StoreError):
        await mutation.mutate(rsvp())

    assert query_client.is_stale(RSVP_SUBMISSIONS_KEY)
    assert query_client.is_stale(RSVP_COUNT_KEY)


@pytest.mark.asyncio
async def test_failure_without_message_uses_fallback(query_client, toaster):
    mutation = make_mutation(query_client, FakeStore(error=StoreError()), toaster)

    with pytest.raises(StoreError):
        await mutation.mutate(rsvp())

    assert toaster.errors == [(FAILURE_TITLE, FAILURE_FALLBACK)]


@pytest.mark.asyncio
async def test_no_cached_list_means_no_provisional_row(query_client, toaster):
    store = FakeStore(hold=True)
    mutation = make_mutation(query_client, store, toaster)

    task = asyncio.create_task(mutation.mutate(rsvp()))
    await store.started.wait()
    assert query_client.get_query_data(RSVP_SUBMISSIONS_KEY) is None

    store.release.set()
    await task
    assert query_client.get_query_data(RSVP_SUBMISSIONS_KEY) is None


@pytest.mark.asyncio
async def test_failure_with_no_cached_list_leaves_cache_empty(query_client, toaster):
    mutation = make_mutation(query_client, FakeStore(error=StoreError("nope")), toaster)

    with pytest.raises(StoreError):
        await mutation.mutate(rsvp())

    assert query_client.get_query_entry(RSVP_SUBMISSIONS_KEY) is None


@pytest.mark.asyncio
async def test_in_flight_refetch_cancelled_before_optimistic_update(query_client, toaster):
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, [EXISTING])
    refetch_started = asyncio.Event()
    refetch_cancelled = False

    async def slow_refetch():
        nonlocal refetch_cancelled
        refetch_started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            refetch_cancelled = True
            raise
        return []

    refetch = asyncio.create_task(
        query_client.fetch_query(RSVP_SUBMISSIONS_KEY, slow_refetch, force=True)
    )
    await refetch_started.wait()

    store = FakeStore(hold=True)
    mutation = make_mutation(query_client, store, toaster)
    task = asyncio.create_task(mutation.mutate(rsvp()))
    await store.started.wait()

    assert refetch_cancelled
    assert await refetch == [EXISTING]
    assert len(query_client.get_query_data(RSVP_SUBMISSIONS_KEY)) == 2

    store.release.set()
    await task


@pytest.mark.asyncio
async def test_submit_invalid_form_sends_nothing(query_client, toaster):
    query_client.set_query_data(RSVP_SUBMISSIONS_KEY, [EXISTING])
    store = FakeStore()
    mutation = make_mutation(query_client, store, toaster)

    with pytest.raises(FormValidationError) as exc_info:
        await mutation.submit(
            {"name": "Jane Doe", "email": "jane@example.com", "attending": True, "guests": 11}
        )

    assert exc_info.value.field_errors == {"guests": "Maximum 10 guests allowed"}
    assert store.inserted == []
    assert mutation.phase == MutationPhase.IDLE
    assert query_client.get_query_data(RSVP_SUBMISSIONS_KEY) == [EXISTING]


@pytest.mark.asyncio
async def test_submit_valid_form(query_client, toaster):
    store = FakeStore()
    mutation = make_mutation(query_client, store, toaster)

    row = await mutation.submit(
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "attending": False,
            "guests": 1,
            "dietary_restrictions": "",
        }
    )

    assert row.attending is False
    assert store.inserted[0].dietary_restrictions is None
    assert mutation.phase == MutationPhase.COMMITTED


@pytest.mark.asyncio
async def test_logging_toaster_reports_outcome(query_client, caplog):
    caplog.set_level(logging.INFO, logger="src.client.toaster")
    mutation = make_mutation(query_client, FakeStore(error=StoreError("nope")), LoggingToaster())

    with pytest.raises(StoreError):
        await mutation.mutate(rsvp())

    assert "Failed to submit RSVP nope" in caplog.text
