"""In-process query cache for the site's client.

Holds the last known result per query key, knows when it goes stale, and
de-duplicates concurrent fetches of the same key. Reads are retried once
with exponential backoff before an error is surfaced; writes never go
through here.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from src.config.cache import DEFAULT_QUERY_POLICY, MAX_RETRY_DELAY, QueryCachePolicy

logger = logging.getLogger(__name__)

QueryKey = tuple[str, ...]


@dataclass
class QueryEntry:
    data: Any = None
    has_data: bool = False
    error: Exception | None = None
    updated_at: float = 0.0
    last_used_at: float = 0.0
    invalidated: bool = False
    task: asyncio.Task | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class QuerySnapshot:
    """Everything needed to put a cache entry back exactly as it was."""

    key: QueryKey
    entry: QueryEntry | None

    @property
    def data(self) -> Any:
        if self.entry is None or not self.entry.has_data:
            return None
        return self.entry.data


class QueryClient:
    def __init__(
        self,
        default_policy: QueryCachePolicy = DEFAULT_QUERY_POLICY,
        retry_wait: wait_base | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_policy = default_policy
        # 1s, 2s, 4s, ... capped
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, max=MAX_RETRY_DELAY)
        self._clock = clock
        self._entries: dict[QueryKey, QueryEntry] = {}
        self._policies: dict[QueryKey, QueryCachePolicy] = {}

    def set_policy(self, key: QueryKey, policy: QueryCachePolicy) -> None:
        self._policies[key] = policy

    def policy_for(self, key: QueryKey) -> QueryCachePolicy:
        return self._policies.get(key, self._default_policy)

    def get_query_entry(self, key: QueryKey) -> QueryEntry | None:
        self._collect_garbage()
        entry = self._entries.get(key)
        if entry is not None:
            entry.last_used_at = self._clock()
        return entry

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self.get_query_entry(key)
        if entry is None or not entry.has_data:
            return None
        return entry.data

    def set_query_data(self, key: QueryKey, updater: Any) -> Any:
        """Replace the cached data, or derive it from the old data when ``updater`` is callable."""
        entry = self._entries.setdefault(key, QueryEntry())
        old = entry.data if entry.has_data else None
        data = updater(old) if callable(updater) else updater
        now = self._clock()
        entry.data = data
        entry.has_data = True
        entry.error = None
        entry.updated_at = now
        entry.last_used_at = now
        entry.invalidated = False
        return data

    def snapshot(self, key: QueryKey) -> QuerySnapshot:
        entry = self._entries.get(key)
        if entry is None:
            return QuerySnapshot(key=key, entry=None)
        copied = QueryEntry(
            data=entry.data,
            has_data=entry.has_data,
            error=entry.error,
            updated_at=entry.updated_at,
            last_used_at=entry.last_used_at,
            invalidated=entry.invalidated,
        )
        return QuerySnapshot(key=key, entry=copied)

    def restore(self, snapshot: QuerySnapshot) -> None:
        if snapshot.entry is None:
            self._entries.pop(snapshot.key, None)
            return
        current = self._entries.get(snapshot.key)
        restored = QueryEntry(
            data=snapshot.entry.data,
            has_data=snapshot.entry.has_data,
            error=snapshot.entry.error,
            updated_at=snapshot.entry.updated_at,
            last_used_at=snapshot.entry.last_used_at,
            invalidated=snapshot.entry.invalidated,
            task=current.task if current is not None else None,
        )
        self._entries[snapshot.key] = restored

    def invalidate_queries(self, key: QueryKey) -> None:
        """Mark every entry whose key starts with ``key`` as stale."""
        for entry_key, entry in self._entries.items():
            if entry_key[: len(key)] == key:
                entry.invalidated = True
                logger.debug(f"Invalidated query {entry_key}")

    async def cancel_queries(self, key: QueryKey) -> None:
        """Cancel in-flight fetches under ``key``; cached data is left untouched."""
        tasks = [
            entry.task
            for entry_key, entry in self._entries.items()
            if entry_key[: len(key)] == key and entry.task is not None and not entry.task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
            logger.debug(f"Cancelled {len(tasks)} in-flight fetch(es) for {key}")

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or not entry.has_data or entry.invalidated:
            return True
        return self._clock() - entry.updated_at >= self.policy_for(key).stale_time

    async def fetch_query(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[Any]],
        force: bool = False,
    ) -> Any:
        """Return fresh cached data, or fetch it.

        Concurrent callers share one fetch. If the fetch is cancelled through
        ``cancel_queries`` the caller gets whatever is cached instead.
        """
        entry = self.get_query_entry(key)
        if entry is not None and not force and not self.is_stale(key):
            return entry.data

        if entry is None:
            entry = self._entries[key] = QueryEntry(last_used_at=self._clock())

        task = entry.task
        if task is None or task.done():
            task = asyncio.create_task(self._run_fetch(key, fetcher))
            entry.task = task

        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and (current is None or not current.cancelling()):
                return self.get_query_data(key)
            raise

    async def _run_fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        policy = self.policy_for(key)
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(policy.retry + 1),
                wait=self._retry_wait,
                retry=retry_if_exception_type(Exception),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.info(f"Retrying fetch of {key} (attempt {attempt.retry_state.attempt_number})")
                    data = await fetcher()
        except Exception as e:
            entry = self._entries.get(key)
            if entry is not None:
                entry.error = e
            raise

        self.set_query_data(key, data)
        return data

    def _collect_garbage(self) -> None:
        now = self._clock()
        expired = [
            key
            for key, entry in self._entries.items()
            if (entry.task is None or entry.task.done())
            and now - entry.last_used_at >= self.policy_for(key).gc_time
        ]
        for key in expired:
            del self._entries[key]
