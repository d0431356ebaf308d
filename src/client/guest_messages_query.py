import logging
from dataclasses import dataclass, field
from enum import Enum

from src.client.models import GuestMessage
from src.client.query_client import QueryClient, QueryKey
from src.client.store import GuestMessageSource
from src.config.cache import GUEST_MESSAGES_QUERY_POLICY
from src.errors import StoreError

logger = logging.getLogger(__name__)

GUEST_MESSAGES_KEY: QueryKey = ("guest-messages",)


class QueryStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class GuestMessagesState:
    """What the guest book renders: a spinner, an error, or the (maybe empty) list."""

    status: QueryStatus
    messages: list[GuestMessage] = field(default_factory=list)
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    @property
    def is_empty(self) -> bool:
        return self.status == QueryStatus.SUCCESS and not self.messages


class GuestMessagesQuery:
    def __init__(self, query_client: QueryClient, source: GuestMessageSource) -> None:
        self._query_client = query_client
        self._source = source
        self._query_client.set_policy(GUEST_MESSAGES_KEY, GUEST_MESSAGES_QUERY_POLICY)

    @property
    def state(self) -> GuestMessagesState:
        entry = self._query_client.get_query_entry(GUEST_MESSAGES_KEY)
        if entry is not None and entry.error is not None:
            # Messages fetched before the failure stay visible next to the error
            messages = list(entry.data) if entry.has_data else []
            return GuestMessagesState(
                status=QueryStatus.ERROR, messages=messages, error=str(entry.error)
            )
        if entry is not None and entry.has_data:
            return GuestMessagesState(status=QueryStatus.SUCCESS, messages=list(entry.data))
        return GuestMessagesState(status=QueryStatus.LOADING)

    async def load(self) -> GuestMessagesState:
        """Fetch unless cached messages may be reused, then report the resulting state."""
        policy = self._query_client.policy_for(GUEST_MESSAGES_KEY)
        entry = self._query_client.get_query_entry(GUEST_MESSAGES_KEY)
        if entry is not None and entry.has_data and not policy.refetch_on_mount:
            return self.state

        try:
            await self._query_client.fetch_query(GUEST_MESSAGES_KEY, self._fetch)
        except Exception as e:
            # Kept on the cache entry and reported through `state`
            logger.warning(f"Failed to load guest messages: {e}")
        return self.state

    async def refetch(self) -> GuestMessagesState:
        try:
            await self._query_client.fetch_query(GUEST_MESSAGES_KEY, self._fetch, force=True)
        except Exception as e:
            logger.warning(f"Failed to reload guest messages: {e}")
        return self.state

    async def _fetch(self) -> list[GuestMessage]:
        try:
            rows = await self._source.fetch_approved_guest_messages()
        except StoreError as e:
            raise StoreError(f"Failed to fetch guest messages: {e}") from e
        return [GuestMessage.model_validate(row) for row in rows]
