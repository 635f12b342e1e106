"""Data Access Object (DAO) implementation for managing shortened URLs in process memory

This module provides an in-memory implementation of ShortURLBaseDAO, fronted by
the bounded TTL cache.

Responsibilities:
    - Own the primary map (id -> record) and the unique index (shortcode -> id);
    - Keep map, index and cache consistent under a single re-entrant lock;
    - Delete expired records lazily on lookup and eagerly on cleanup;
    - Raise appropriate DAO exceptions.

Classes:
    ShortURLMemoryDAO:
        DAO for storing and retrieving ShortURLModel in process memory.

Example:
    >>> from shortlinks.dao import ShortURLCache, ShortURLMemoryDAO

    >>> dao = ShortURLMemoryDAO(cache=ShortURLCache(max_size=100))

    >>> short_url = dao.create(target='https://example.com/page', shortcode='abc123')
    >>> dao.find_by_shortcode('abc123') is short_url
    True

    >>> dao.add_click('abc123', ip='203.0.113.7').ip
    '203.0.113.7'
    >>> short_url.click_count()
    1

    >>> dao.update(short_url.id, shortcode='xyz789').shortcode
    'xyz789'
    >>> dao.find_by_shortcode('abc123') is None
    True
"""

import logging
import threading
from datetime import datetime
from typing import Any

from beartype import beartype

from shortlinks.models import ClickModel, Location, ShortURLModel
from shortlinks.exceptions import ValidationError
from shortlinks.dao.base import ShortURLBaseDAO
from shortlinks.dao.cache import ShortURLCache
from shortlinks.dao.memory.helpers import synchronized
from shortlinks.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortlinks.constants import Defaults


logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset({'target', 'shortcode'})


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface. The cache is a
    read-through accelerator keyed by shortcode; the primary map is the
    source of truth.

    NOTE: A cache hit is returned as is. The cache entry TTL is independent of
          the record's expiry, so callers that care must check `is_expired()`
          on the returned record (the service does).

    Attributes:
        cache (ShortURLCache):
            Bounded TTL cache of shortcode -> ShortURLModel.
        max_shortcode_length (int):
            Upper bound used to validate patched shortcodes.

    Methods:
        create(target, shortcode, expires_at=None) -> ShortURLModel
        find_by_shortcode(shortcode) -> ShortURLModel | None
        find_by_id(id) -> ShortURLModel | None
        update(id, **changes) -> ShortURLModel
        delete(id) -> bool
        add_click(shortcode, ip=None, user_agent=None, referer=None, location=None) -> ClickModel
        all() -> list[ShortURLModel]
        stats() -> dict
        cleanup() -> int
    """

    def __init__(self, cache: ShortURLCache | None = None, max_shortcode_length: int = Defaults.MAX_SHORTCODE_LENGTH):
        self.cache = cache if cache is not None else ShortURLCache()
        self.max_shortcode_length = max_shortcode_length
        self._records: dict[str, ShortURLModel] = {}
        self._index: dict[str, str] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    @synchronized
    @beartype
    def create(self, target: str, shortcode: str, expires_at: datetime | None = None) -> ShortURLModel:
        """Create a short URL and register it in the map, the index and the cache

        Raises:
            ShortURLAlreadyExistsError:
                If a record with the same shortcode already exists.
            ValidationError:
                If `target` or `shortcode` is empty.

        Example:
            >>> dao.create(target='https://example.com', shortcode='abc123').shortcode
            'abc123'
        """
        if shortcode in self._index:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")

        short_url = ShortURLModel(target=target, shortcode=shortcode, expires_at=expires_at)
        self._records[short_url.id] = short_url
        self._index[short_url.shortcode] = short_url.id
        self.cache.set(short_url.shortcode, short_url)

        logger.debug('Stored short URL.', extra={'shortcode': shortcode, 'id': short_url.id})
        return short_url

    @synchronized
    @beartype
    def find_by_shortcode(self, shortcode: str) -> ShortURLModel | None:
        """Retrieve a short URL by shortcode

        Cache hit -> returned immediately. Cache miss -> index -> primary map;
        an expired record is deleted everywhere and None is returned,
        otherwise the cache is repopulated.

        Raises:
            DataStoreError:
                If the index references a record missing from the primary map.
        """
        cached = self.cache.get(shortcode)
        if cached is not None:
            return cached

        id = self._index.get(shortcode)
        if id is None:
            return None

        short_url = self._records.get(id)
        if short_url is None:
            raise DataStoreError(f"Shortcode '{shortcode}' is indexed but record '{id}' is missing.")

        if short_url.is_expired():
            self._remove(short_url)
            logger.info('Deleted expired short URL on lookup.', extra={'shortcode': shortcode, 'id': id})
            return None

        self.cache.set(shortcode, short_url)
        return short_url

    @synchronized
    @beartype
    def find_by_id(self, id: str) -> ShortURLModel | None:
        return self._find_live(id)

    @synchronized
    @beartype
    def update(self, id: str, **changes: Any) -> ShortURLModel:
        """Patch `target` and/or `shortcode` of an existing short URL

        All changes are validated before anything is applied, so a failed update
        leaves the record untouched. A shortcode change moves both the index and
        the cache entry; the old shortcode stops resolving at once.

        Args:
            id (str):
                Id of the record to patch.
            **changes:
                New values for `target` and/or `shortcode`.

        Returns:
            ShortURLModel: the patched record.

        Raises:
            ShortURLNotFoundError:
                If no record with `id` exists or it has expired (the expired record is deleted).
            ValidationError:
                If a field other than `target`/`shortcode` is given or a value is malformed.
            ShortURLAlreadyExistsError:
                If the new shortcode is used by another record.

        Example:
            >>> dao.update(short_url.id, target='https://example.org').target
            'https://example.org'
        """
        short_url = self._find_live(id)
        if short_url is None:
            raise ShortURLNotFoundError(f"Short URL with id '{id}' doesn't exist or has expired.")

        rejected = sorted(set(changes) - PATCHABLE_FIELDS)
        if rejected:
            raise ValidationError(f'Fields {", ".join(rejected)} of a short URL cannot be updated.')

        if 'target' in changes and not ShortURLModel.validate_url(changes['target']):
            raise ValidationError(f"Invalid URL: '{changes['target']}'.")

        new_shortcode = changes.get('shortcode', short_url.shortcode)
        if not ShortURLModel.validate_shortcode(new_shortcode, self.max_shortcode_length):
            raise ValidationError(f"Invalid shortcode: '{new_shortcode}'.")
        if new_shortcode != short_url.shortcode and new_shortcode in self._index:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{new_shortcode}' already exists.")

        if 'target' in changes:
            short_url.target = changes['target']

        old_shortcode = short_url.shortcode
        if new_shortcode != old_shortcode:
            del self._index[old_shortcode]
            self.cache.delete(old_shortcode)
            short_url.shortcode = new_shortcode
            self._index[new_shortcode] = id
            logger.info('Relocated short URL.', extra={'id': id, 'old_shortcode': old_shortcode, 'shortcode': new_shortcode})

        self.cache.set(new_shortcode, short_url)
        return short_url

    @synchronized
    @beartype
    def delete(self, id: str) -> bool:
        short_url = self._records.get(id)
        if short_url is None:
            return False
        self._remove(short_url)
        return True

    @synchronized
    @beartype
    def add_click(
        self,
        shortcode: str,
        ip: str | None = None,
        user_agent: str | None = None,
        referer: str | None = None,
        location: Location | None = None,
    ) -> ClickModel:
        """Append a click to a live short URL and refresh its cache entry

        Raises:
            ShortURLNotFoundError:
                If the shortcode is unknown or the record has expired.
        """
        short_url = self.find_by_shortcode(shortcode)
        if short_url is None or short_url.is_expired():
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' doesn't exist or has expired.")

        click = short_url.add_click(ip=ip, user_agent=user_agent, referer=referer, location=location)
        self.cache.set(shortcode, short_url)
        return click

    @synchronized
    def all(self) -> list[ShortURLModel]:
        return list(self._records.values())

    @synchronized
    def stats(self) -> dict[str, Any]:
        """Count records by expiry state and attach cache statistics

        Returns:
            dict: `{total_urls, active_urls, expired_urls, cache_stats}`

        Example:
            >>> dao.stats()
            {'total_urls': 3, 'active_urls': 2, 'expired_urls': 1, 'cache_stats': {...}}
        """
        expired = sum(1 for short_url in self._records.values() if short_url.is_expired())
        total = len(self._records)
        return {
            'total_urls': total,
            'active_urls': total - expired,
            'expired_urls': expired,
            'cache_stats': self.cache.stats(),
        }

    @synchronized
    def cleanup(self) -> int:
        """Delete every expired record from the map, the index and the cache."""
        expired = [short_url for short_url in self._records.values() if short_url.is_expired()]
        for short_url in expired:
            self._remove(short_url)

        if expired:
            logger.info('Deleted expired short URLs.', extra={'deleted': len(expired), 'remaining': len(self._records)})
        return len(expired)

    def _find_live(self, id: str) -> ShortURLModel | None:
        # Caller must hold self._lock
        short_url = self._records.get(id)
        if short_url is None:
            return None

        if short_url.is_expired():
            self._remove(short_url)
            logger.info('Deleted expired short URL on lookup.', extra={'shortcode': short_url.shortcode, 'id': id})
            return None
        return short_url

    def _remove(self, short_url: ShortURLModel) -> None:
        # Caller must hold self._lock
        self._records.pop(short_url.id, None)
        if self._index.get(short_url.shortcode) == short_url.id:
            del self._index[short_url.shortcode]
        self.cache.delete(short_url.shortcode)
