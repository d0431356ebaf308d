from fastapi import APIRouter

from .features.list_messages.router import router as list_messages_router
from .features.submit_message.router import router as submit_message_router

router = APIRouter()

router.include_router(list_messages_router)
router.include_router(submit_message_router)
