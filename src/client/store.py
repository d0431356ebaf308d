import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from src.client.models import RSVPRow
from src.config.settings import settings
from src.errors import FormValidationError, StoreError
from src.guest_messages.dtos import GuestMessageCreate
from src.guest_messages.urls import GUEST_MESSAGES_URL
from src.rsvp.dtos import RSVPSubmissionCreate
from src.rsvp.urls import RSVP_SUBMISSIONS_URL
from src.validation import field_errors

logger = logging.getLogger(__name__)


class RSVPStore(Protocol):
    async def insert_rsvp(self, data: RSVPSubmissionCreate) -> RSVPRow:
        """Insert an RSVP and return the stored row. Raises StoreError on failure."""
        ...


class GuestMessageSource(Protocol):
    async def fetch_approved_guest_messages(self) -> list[dict[str, Any]]:
        """Rows of approved guest messages, most recent first. Raises StoreError on failure."""
        ...


class ApiStore:
    """Talks to the site's API over HTTP."""

    def __init__(
        self,
        base_url: str = settings.api_base_url,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 10.0,
    ):
        self._base_url = base_url
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def insert_rsvp(self, data: RSVPSubmissionCreate) -> RSVPRow:
        body = await self._request("POST", RSVP_SUBMISSIONS_URL, json=data.model_dump(mode="json"))
        return RSVPRow.model_validate(body["data"])

    async def submit_guest_message(self, name: str, message: str) -> dict[str, Any]:
        """Send a guest message; invalid input is rejected before any request is made."""
        try:
            validated = GuestMessageCreate(name=name, message=message)
        except ValidationError as e:
            raise FormValidationError(field_errors(e)) from e
        body = await self._request("POST", GUEST_MESSAGES_URL, json=validated.model_dump())
        return body["data"]

    async def fetch_approved_guest_messages(self) -> list[dict[str, Any]]:
        body = await self._request("GET", GUEST_MESSAGES_URL)
        return body.get("data") or []

    async def _request(self, method: str, url: str, json: dict | None = None) -> dict[str, Any]:
        try:
            async with self._http_client_class(base_url=self._base_url, timeout=self._timeout) as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            raise StoreError(str(e) or "Network error") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code == 400 and body.get("details"):
            raise FormValidationError(
                {detail["path"]: detail["message"] for detail in body["details"]}
            )
        if response.is_error:
            raise StoreError(body.get("error") or f"Request failed with status {response.status_code}")
        return body
