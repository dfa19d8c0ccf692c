# 📄 File: freeexperience/shared/infrastructure/cache/keyed_async_cache.py
#
# 🧭 Purpose (Layman Explanation):
# Remembers the answers to recent questions for a few seconds, so when many parts of
# the app ask for the same profile or project list at once, the server is asked only once.
#
# 🧪 Purpose (Technical Summary):
# Process-wide TTL memoization for async reads with in-flight request coalescing,
# no negative caching, prefix invalidation and an optional per-fetch timeout that
# surfaces as TransportFailureError.
#
# 🔗 Dependencies:
# - asyncio: Tasks, shielding and timeouts
# - freeexperience.shared.core.exceptions: TransportFailureError
#
# 🔄 Connected Modules / Calls From:
# SessionResolver, ProfileService, ProjectService, ApplicationService, health endpoint

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from freeexperience.shared.core.exceptions import TransportFailureError
from freeexperience.shared.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_MISSING: Any = object()

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


@dataclass
class CacheEntry:
    """
    One memoized async result.

    Attributes:
        key: Opaque key, by convention ``"<entity>"`` or ``"<entity>:<id>"``
        value: Last successfully resolved result, or a sentinel when none yet
        expires_at: Monotonic deadline after which ``value`` is stale
        pending: In-flight fetch shared by every caller of this key
    """

    key: str
    value: Any = _MISSING
    expires_at: float = 0.0
    pending: Optional["asyncio.Task[Any]"] = None

    @property
    def has_value(self) -> bool:
        return self.value is not _MISSING

    def is_fresh(self, now: float) -> bool:
        return self.has_value and now < self.expires_at


class KeyedAsyncCache:
    """
    Short-TTL memoizing cache for async fetch functions.

    At most one fetch per key is in flight; concurrent callers of the same
    key await that one fetch and observe the same value or the same error.
    Failures are never cached. An entry invalidated while its fetch is in
    flight is not repopulated by that fetch.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.request_timeout = request_timeout
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
        force_refresh: bool = False,
    ) -> T:
        """
        Return the cached value for ``key`` or fetch it.

        Args:
            key: Cache key, must be non-empty
            fetch_fn: Zero-argument coroutine function producing the value
            ttl: Freshness window in seconds (default_ttl when omitted)
            force_refresh: Skip a fresh value; still joins an in-flight fetch

        Returns:
            The fresh cached value or the fetched one

        Raises:
            ValueError: If key is empty
            TransportFailureError: If the fetch exceeds request_timeout
            Exception: Whatever fetch_fn raised, unchanged
        """
        if not key:
            raise ValueError("Cache key must be a non-empty string")

        ttl = self.default_ttl if ttl is None else ttl
        entry = self._entries.get(key)

        if entry is not None:
            if not force_refresh and entry.is_fresh(self._clock()):
                logger.log_cache_operation("get", key, hit=True)
                return entry.value

            if entry.pending is not None:
                logger.log_cache_operation("join", key, hit=False)
                return await asyncio.shield(entry.pending)
        else:
            entry = CacheEntry(key=key)
            self._entries[key] = entry

        logger.log_cache_operation("fetch", key, hit=False, extra={"forced": force_refresh})
        task = asyncio.get_running_loop().create_task(self._run(entry, fetch_fn, ttl))
        task.add_done_callback(_consume_task_exception)
        entry.pending = task
        return await asyncio.shield(task)

    async def _run(self, entry: CacheEntry, fetch_fn: Callable[[], Awaitable[Any]], ttl: float) -> Any:
        started = self._clock()
        try:
            if self.request_timeout is None:
                value = await fetch_fn()
            else:
                value = await asyncio.wait_for(fetch_fn(), timeout=self.request_timeout)
        except asyncio.TimeoutError as e:
            self._evict(entry)
            logger.warning(
                f"Cache fetch for {entry.key} timed out after {self.request_timeout}s",
                extra={"cache_key": entry.key, "timeout": self.request_timeout},
            )
            raise TransportFailureError(
                f"Request for {entry.key} timed out",
                operation=entry.key,
            ) from e
        except asyncio.CancelledError:
            self._evict(entry)
            raise
        except Exception:
            self._evict(entry)
            logger.log_cache_operation("evict", entry.key, extra={"reason": "fetch_failed"})
            raise

        entry.pending = None
        if self._entries.get(entry.key) is entry:
            entry.value = value
            entry.expires_at = self._clock() + ttl
            logger.log_cache_operation(
                "store", entry.key, duration_ms=(self._clock() - started) * 1000
            )
        else:
            logger.log_cache_operation("discard", entry.key, extra={"reason": "invalidated"})
        return value

    def _evict(self, entry: CacheEntry) -> None:
        entry.pending = None
        if self._entries.get(entry.key) is entry:
            del self._entries[entry.key]

    def invalidate(self, prefix: Optional[str] = None) -> int:
        """
        Drop every entry whose key starts with ``prefix``.

        Args:
            prefix: Key prefix; None clears the whole cache

        Returns:
            int: Number of dropped entries
        """
        if prefix is None:
            dropped = list(self._entries)
        else:
            dropped = [key for key in self._entries if key.startswith(prefix)]

        for key in dropped:
            del self._entries[key]

        logger.log_cache_operation("invalidate", prefix or "*", extra={"dropped": len(dropped)})
        return len(dropped)

    def peek(self, key: str) -> Optional[Any]:
        """Fresh value for ``key`` without fetching, or None."""
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            return entry.value
        return None

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        return {
            "entries": len(self._entries),
            "fresh": sum(1 for entry in self._entries.values() if entry.is_fresh(now)),
            "in_flight": sum(1 for entry in self._entries.values() if entry.pending is not None),
        }


def _consume_task_exception(task: "asyncio.Task[Any]") -> None:
    # Every caller may have been cancelled before the fetch finished.
    if not task.cancelled():
        task.exception()
