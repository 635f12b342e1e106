"""Bounded in-process cache with per-entry TTL and FIFO eviction.

Responsibilities:
    - Speed up shortcode lookups without being the source of truth;
    - Bound memory with a maximum size (oldest-inserted entry is evicted first);
    - Expire entries lazily on read and proactively with a background sweep;
    - Never surface internal faults: a failing operation degrades to a miss.

NOTE: Eviction is insertion-order FIFO, not LRU. Reading an entry doesn't
      protect it from eviction, and re-setting an existing key refreshes its
      value and expiry but keeps its original position in the eviction queue.

Classes:
    ShortURLCache:
        Thread-safe key -> value cache used by the repository, keyed by shortcode.

Example:
    >>> cache = ShortURLCache(max_size=2, ttl=3600)
    >>> cache.set('abc123', short_url)
    True
    >>> cache.get('abc123') is short_url
    True
    >>> cache.set('def456', other_url)
    True
    >>> cache.set('ghi789', third_url)  # evicts 'abc123'
    True
    >>> cache.has('abc123')
    False
"""

import time
import logging
import functools
import threading
from dataclasses import dataclass
from typing import Any, TypeVar
from collections.abc import Callable, Hashable

from shortlinks.constants import TTL, Defaults
from shortlinks.utils.scheduling import RepeatingTask


__all__ = ['ShortURLCache']

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def absorb_cache_errors(default: Any) -> Callable[[F], F]:
    """Wrap cache methods so that internal faults are logged and replaced by `default`

    Args:
        default (Any):
            Value returned by the wrapped method when it raises.

    Example:
        >>> @absorb_cache_errors(default=None)
        ... def get(self, key):
        ...     return self._entries[key].value
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except Exception as e:
                logger.error(
                    'Cache operation failed.',
                    extra={'operation': method.__name__, 'error': e.__class__.__name__, 'reason': str(e)},
                )
                return default

        return wrapper

    return decorator


@dataclass(slots=True)
class CacheEntry:
    value: Any
    inserted_at: float  # epoch seconds
    expires_at: float  # epoch seconds

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class ShortURLCache:
    """Thread-safe bounded TTL cache with FIFO eviction

    Attributes:
        max_size (int):
            Maximum number of entries kept at once.
        ttl (int | float):
            Lifetime of every entry in seconds, counted from its last `set()`.
        sweep_interval (int | float):
            Period of the background sweep started by `start()`.

    Methods:
        set(key, value) -> bool
        get(key) -> Any | None
        has(key) -> bool
        delete(key) -> bool
        clear() -> None
        sweep() -> int
        stats() -> dict
        start() / close()
    """

    def __init__(
        self,
        max_size: int = Defaults.CACHE_MAX_SIZE,
        ttl: int | float = TTL.CACHE_ENTRY,
        sweep_interval: int | float = TTL.CACHE_SWEEP_INTERVAL,
    ):
        if max_size < 1:
            raise ValueError(f'Cache max_size must be a positive integer (given value: {max_size}).')
        if ttl <= 0:
            raise ValueError(f'Cache ttl must be a positive number of seconds (given value: {ttl}).')

        self.max_size = max_size
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        # dicts keep insertion order, which is the eviction order
        self._entries: dict[Hashable, CacheEntry] = {}
        self._lock = threading.RLock()
        self._sweeper = RepeatingTask(sweep_interval, self.sweep, name='short-url-cache-sweeper')

        logger.info('Short URL cache initialized.', extra={'max_size': max_size, 'ttl': ttl})

    def __len__(self) -> int:
        return len(self._entries)

    @absorb_cache_errors(default=False)
    def set(self, key: Hashable, value: Any) -> bool:
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.value = value
                entry.expires_at = now + self.ttl
                return True

            if len(self._entries) >= self.max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug('Cache full, evicted oldest entry.', extra={'evicted_key': oldest})

            self._entries[key] = CacheEntry(value=value, inserted_at=now, expires_at=now + self.ttl)
            return True

    @absorb_cache_errors(default=None)
    def get(self, key: Hashable) -> Any | None:
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug('Cache miss.', extra={'key': key})
                return None
            if entry.is_expired(now):
                del self._entries[key]
                logger.debug('Cache entry expired and removed.', extra={'key': key})
                return None
            return entry.value

    @absorb_cache_errors(default=False)
    def has(self, key: Hashable) -> bool:
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(now):
                del self._entries[key]
                return False
            return True

    @absorb_cache_errors(default=False)
    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    @absorb_cache_errors(default=None)
    def clear(self) -> None:
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
        logger.info('Cache cleared.', extra={'previous_size': size})

    @absorb_cache_errors(default=0)
    def sweep(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = time.time()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)

        if expired:
            logger.info('Cache sweep completed.', extra={'swept': len(expired), 'remaining': remaining})
        return len(expired)

    def stats(self) -> dict[str, Any]:
        size = len(self._entries)
        return {
            'size': size,
            'max_size': self.max_size,
            'ttl': self.ttl,
            'utilization': size / self.max_size * 100,
        }

    def start(self) -> None:
        """Start the background sweep."""
        self._sweeper.start()

    def close(self) -> None:
        """Stop the background sweep and drop every entry."""
        self._sweeper.stop()
        self.clear()
        logger.info('Short URL cache closed.')
