from src.config.settings import settings
from src.notifications.dispatch import notify_new_guest_message
from src.notifications.telegram import (
    GuestMessageNotifier,
    NotificationResult,
    TelegramNotifier,
)


def get_guest_message_notifier() -> GuestMessageNotifier:
    """Factory for the guest message notifier. Override in tests."""
    return TelegramNotifier(config=settings)


__all__ = [
    "GuestMessageNotifier",
    "NotificationResult",
    "TelegramNotifier",
    "get_guest_message_notifier",
    "notify_new_guest_message",
]
