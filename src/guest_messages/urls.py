GUEST_MESSAGES_URL = "/api/v1/guest-messages"
