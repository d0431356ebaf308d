import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.errors import StoreError
from src.guest_messages.dtos import GuestMessageCreate
from src.guest_messages.repository.write_models import (
    GuestMessageWriteModel,
    SqlGuestMessageWriteModel,
)
from src.guest_messages.urls import GUEST_MESSAGES_URL
from src.notifications import (
    GuestMessageNotifier,
    get_guest_message_notifier,
    notify_new_guest_message,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_guest_message_write_model() -> GuestMessageWriteModel:
    """Dependency to get guest message write model instance."""
    return SqlGuestMessageWriteModel()


@router.post(GUEST_MESSAGES_URL, status_code=201)
async def submit_guest_message(
    payload: GuestMessageCreate,
    background_tasks: BackgroundTasks,
    write_model: GuestMessageWriteModel = Depends(get_guest_message_write_model),
    notifier: GuestMessageNotifier = Depends(get_guest_message_notifier),
) -> JSONResponse:
    """
    Leave a message for the couple.

    The message is stored unapproved and only shows up publicly once an
    operator approves it. The couple is notified on Telegram after the
    response has been sent; a failed notification never fails the request.
    """
    try:
        stored = await write_model.create_message(name=payload.name, message=payload.message)
    except StoreError:
        logger.exception("Database error while saving guest message")
        return JSONResponse(status_code=500, content={"error": "Failed to save message"})
    except Exception:
        logger.exception("Unexpected error while saving guest message")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # Only reached once the row is committed
    background_tasks.add_task(
        notify_new_guest_message, notifier, payload.name, payload.message
    )

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Message submitted successfully",
            "data": jsonable_encoder(stored),
        },
    )
