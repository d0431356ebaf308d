RSVP_SUBMISSIONS_URL = "/api/v1/rsvp-submissions"
