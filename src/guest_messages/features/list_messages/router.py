import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.config.cache import GUEST_MESSAGES_CACHE_CONTROL
from src.config.settings import settings
from src.errors import StoreError
from src.guest_messages.repository.read_models import (
    GuestMessageReadModel,
    RevalidatingGuestMessageReadModel,
    SqlGuestMessageReadModel,
)
from src.guest_messages.urls import GUEST_MESSAGES_URL

logger = logging.getLogger(__name__)

router = APIRouter()

# Shared across requests so the revalidation window spans them
public_read_model = RevalidatingGuestMessageReadModel(
    SqlGuestMessageReadModel(),
    revalidate=settings.guest_messages_revalidate,
)


def get_guest_message_read_model() -> GuestMessageReadModel:
    """Dependency to get the public guest message read model."""
    return public_read_model


@router.get(GUEST_MESSAGES_URL)
async def list_guest_messages(
    read_model: GuestMessageReadModel = Depends(get_guest_message_read_model),
) -> JSONResponse:
    """
    Approved guest messages, most recent first.

    Browsers may cache the response for 1 minute, the CDN for 5 minutes,
    and both may serve it stale for 10 minutes while revalidating.
    """
    try:
        messages = await read_model.list_approved()
    except StoreError:
        logger.exception("Database error while fetching guest messages")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch messages"})
    except Exception:
        logger.exception("Unexpected error while fetching guest messages")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # Never publish an unapproved row, whatever the read model returned
    approved = [message for message in messages if message.approved]

    return JSONResponse(
        status_code=200,
        content={"success": True, "data": jsonable_encoder(approved)},
        headers={"Cache-Control": GUEST_MESSAGES_CACHE_CONTROL},
    )
