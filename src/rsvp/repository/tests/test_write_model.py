"""Tests for the SQL RSVP write model, on SQLite."""

import pytest
from sqlalchemy import select

from src.errors import StoreError
from src.rsvp.dtos import RSVPSubmissionCreate
from src.rsvp.repository.orm_models import RSVPSubmission
from src.rsvp.repository.write_models import SqlRSVPSubmissionWriteModel


@pytest.mark.asyncio
async def test_create_submission_persists_all_fields(sqlite_session):
    write_model = SqlRSVPSubmissionWriteModel(session_overwrite=sqlite_session)
    data = RSVPSubmissionCreate(
        name="Jane Doe",
        email="jane@example.com",
        attending=True,
        guests=2,
        dietary_restrictions="Vegetarian",
        message="See you there!",
    )

    stored = await write_model.create_submission(data)

    assert stored.id is not None
    assert stored.name == "Jane Doe"
    assert stored.email == "jane@example.com"
    assert stored.attending is True
    assert stored.guests == 2
    assert stored.dietary_restrictions == "Vegetarian"
    assert stored.message == "See you there!"
    assert stored.created_at is not None
    assert stored.updated_at is not None

    result = await sqlite_session.execute(select(RSVPSubmission))
    rows = result.scalars().all()
    assert [row.id for row in rows] == [stored.id]


@pytest.mark.asyncio
async def test_create_submission_optional_fields_absent(sqlite_session):
    write_model = SqlRSVPSubmissionWriteModel(session_overwrite=sqlite_session)
    data = RSVPSubmissionCreate(name="John", email="john@example.com", attending=False)

    stored = await write_model.create_submission(data)

    assert stored.guests == 1
    assert stored.attending is False
    assert stored.dietary_restrictions is None
    assert stored.message is None


@pytest.mark.asyncio
async def test_guest_count_out_of_range_rejected_by_database(sqlite_session):
    """The table enforces the guest range even if validation is bypassed."""
    write_model = SqlRSVPSubmissionWriteModel(session_overwrite=sqlite_session)
    data = RSVPSubmissionCreate.model_construct(
        name="Jane Doe",
        email="jane@example.com",
        attending=True,
        guests=11,
        dietary_restrictions=None,
        message=None,
    )

    with pytest.raises(StoreError, match="Failed to submit RSVP"):
        await write_model.create_submission(data)
