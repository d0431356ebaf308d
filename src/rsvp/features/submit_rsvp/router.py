import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.config.cache import NO_STORE_CACHE_CONTROL
from src.errors import StoreError
from src.rsvp.dtos import RSVPSubmissionCreate
from src.rsvp.repository.write_models import (
    RSVPSubmissionWriteModel,
    SqlRSVPSubmissionWriteModel,
)
from src.rsvp.urls import RSVP_SUBMISSIONS_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rsvp_submission_write_model() -> RSVPSubmissionWriteModel:
    """Dependency to get RSVP submission write model instance."""
    return SqlRSVPSubmissionWriteModel()


@router.post(RSVP_SUBMISSIONS_URL, status_code=201)
async def submit_rsvp(
    payload: RSVPSubmissionCreate,
    write_model: RSVPSubmissionWriteModel = Depends(get_rsvp_submission_write_model),
) -> JSONResponse:
    """
    Insert an RSVP submission.

    Anyone may submit; submissions are not readable through the API.
    Validation here is authoritative even though the client validates first.
    """
    try:
        stored = await write_model.create_submission(payload)
    except StoreError:
        logger.exception("Database error while saving RSVP")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to submit RSVP"},
            headers={"Cache-Control": NO_STORE_CACHE_CONTROL},
        )

    logger.info(f"RSVP {stored.id} stored (attending={stored.attending}, guests={stored.guests})")
    return JSONResponse(
        status_code=201,
        content={"success": True, "data": jsonable_encoder(stored)},
        headers={"Cache-Control": NO_STORE_CACHE_CONTROL},
    )
