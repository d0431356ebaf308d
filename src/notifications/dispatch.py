import logging

from src.notifications.telegram import GuestMessageNotifier

logger = logging.getLogger(__name__)


async def notify_new_guest_message(
    notifier: GuestMessageNotifier, guest_name: str, message: str
) -> None:
    """Background task run after a guest message has been stored.

    The message is already saved, so nothing here may fail the request:
    every failure ends up in the log instead.
    """
    try:
        result = await notifier(guest_name, message)
    except Exception:
        logger.exception(f"Telegram notification error for message from {guest_name!r}")
        return

    if not result.success:
        logger.error(f"Telegram notification failed: {result.error}")
    else:
        logger.info(f"Telegram notification sent for message from {guest_name!r}")
