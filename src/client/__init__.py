"""Client side of the guest interaction pipeline: query cache, optimistic RSVP, guest book."""

from src.client.guest_messages_query import (
    GUEST_MESSAGES_KEY,
    GuestMessagesQuery,
    GuestMessagesState,
    QueryStatus,
)
from src.client.models import GuestMessage, RSVPRow
from src.client.query_client import QueryClient
from src.client.rsvp_mutation import (
    RSVP_COUNT_KEY,
    RSVP_SUBMISSIONS_KEY,
    MutationPhase,
    RSVPMutation,
)
from src.client.store import ApiStore
from src.client.toaster import LoggingToaster, Toaster

__all__ = [
    "ApiStore",
    "GUEST_MESSAGES_KEY",
    "GuestMessage",
    "GuestMessagesQuery",
    "GuestMessagesState",
    "LoggingToaster",
    "MutationPhase",
    "QueryClient",
    "QueryStatus",
    "RSVPMutation",
    "RSVPRow",
    "RSVP_COUNT_KEY",
    "RSVP_SUBMISSIONS_KEY",
    "Toaster",
]
