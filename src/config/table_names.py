from enum import Enum


class TableNames(str, Enum):
    RSVP_SUBMISSIONS = "rsvp_submissions"
    GUEST_MESSAGES = "guest_messages"


class DatabaseRoles(str, Enum):
    # Non-owner role that row-level security policies apply to
    PUBLIC = "wedding_public"
