"""Caching policy shared by the API and the client.

Three layers cache guest data:

* the client query cache (``src.client.query_client``), tuned per query key;
* the server-side revalidation window of the public guest message list;
* HTTP ``Cache-Control`` headers consumed by browsers and the CDN.
"""

from dataclasses import dataclass

MINUTE = 60


@dataclass(frozen=True)
class QueryCachePolicy:
    """Freshness policy for one query key in the client cache (seconds)."""

    stale_time: float
    gc_time: float
    refetch_on_mount: bool = True
    retry: int = 1


DEFAULT_QUERY_POLICY = QueryCachePolicy(stale_time=5 * MINUTE, gc_time=10 * MINUTE)

# Messages only change when an operator approves one, so keep them longer
GUEST_MESSAGES_QUERY_POLICY = QueryCachePolicy(
    stale_time=5 * MINUTE,
    gc_time=15 * MINUTE,
    refetch_on_mount=False,
)

RSVP_SUBMISSIONS_QUERY_POLICY = QueryCachePolicy(
    stale_time=2 * MINUTE,
    gc_time=5 * MINUTE,
    refetch_on_mount=True,
)

# Upper bound for the exponential backoff between read retries
MAX_RETRY_DELAY = 30

# Server-side revalidation period of the public guest message list
ISR_GUEST_MESSAGES_API = 5 * MINUTE


def generate_cache_control_header(
    max_age: int | None = None,
    s_max_age: int | None = None,
    stale_while_revalidate: int | None = None,
    is_public: bool = True,
    immutable: bool = False,
    no_store: bool = False,
) -> str:
    if no_store:
        return "no-store, no-cache, must-revalidate"

    parts: list[str] = []
    if is_public:
        parts.append("public")
    if max_age is not None:
        parts.append(f"max-age={max_age}")
    if s_max_age is not None:
        parts.append(f"s-maxage={s_max_age}")
    if stale_while_revalidate is not None:
        parts.append(f"stale-while-revalidate={stale_while_revalidate}")
    if immutable:
        parts.append("immutable")
    return ", ".join(parts)


# Browser 1 minute, CDN 5 minutes, serve stale for 10 minutes while revalidating
GUEST_MESSAGES_CACHE_CONTROL = generate_cache_control_header(
    max_age=1 * MINUTE,
    s_max_age=5 * MINUTE,
    stale_while_revalidate=10 * MINUTE,
)

NO_STORE_CACHE_CONTROL = generate_cache_control_header(no_store=True)
