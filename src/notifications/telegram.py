"""Telegram Bot API client that tells the couple about new guest messages."""

import html
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from src.config.settings import settings

logger = logging.getLogger(__name__)

TELEGRAM_SEND_MESSAGE_URL = "https://api.telegram.org/bot{token}/sendMessage"

NOT_CONFIGURED = "Telegram not configured"


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    error: str | None = None


class TelegramConfig(Protocol):
    telegram_bot_token: str
    telegram_chat_id: str


class GuestMessageNotifier(Protocol):
    """Protocol for announcing a freshly stored guest message."""

    async def __call__(self, guest_name: str, message: str) -> NotificationResult:
        """Send the announcement. Failures are reported in the result, not raised."""
        ...


def format_guest_message(guest_name: str, message: str) -> str:
    # Sent with parse_mode=HTML, so guest input must not be able to open tags
    return (
        "💌 New Guest Message\n\n"
        f"👤 From: {html.escape(guest_name)}\n\n"
        f"📝 Message:\n{html.escape(message)}"
    )


class TelegramNotifier:
    """Default notifier posting to a Telegram chat via the Bot API."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        config: TelegramConfig = settings,
        timeout: float = 10.0,
    ):
        self._http_client_class = http_client_class
        self._config = config
        self._timeout = timeout

    async def __call__(self, guest_name: str, message: str) -> NotificationResult:
        bot_token = self._config.telegram_bot_token
        chat_id = self._config.telegram_chat_id
        if not bot_token or not chat_id:
            logger.error(
                "Telegram configuration missing: TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not set"
            )
            return NotificationResult(success=False, error=NOT_CONFIGURED)

        try:
            async with self._http_client_class(timeout=self._timeout) as client:
                response = await client.post(
                    TELEGRAM_SEND_MESSAGE_URL.format(token=bot_token),
                    headers={"Content-Type": "application/json"},
                    json={
                        "chat_id": chat_id,
                        "text": format_guest_message(guest_name, message),
                        "parse_mode": "HTML",
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to send Telegram message: {e!r}")
            return NotificationResult(success=False, error=str(e) or "Network error")

        if response.status_code < 200 or response.status_code >= 300:
            description = _error_description(response)
            logger.error(f"Telegram API error {response.status_code}: {description}")
            return NotificationResult(
                success=False, error=description or "Telegram API request failed"
            )

        return NotificationResult(success=True)


def _error_description(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("description")
    return None
