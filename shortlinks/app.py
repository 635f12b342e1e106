"""Application container

Wires settings, cache, repository, service and cleanup scheduler into one
explicitly constructed object with an owned lifecycle. Nothing here is a
module-level singleton: every collaborator receives the container (or one of
its parts) by reference.

Example:
    >>> from shortlinks.app import ShortLinks
    >>> from shortlinks.utils import load_config

    >>> with ShortLinks(load_config()) as shortlinks:
    ...     short_url = shortlinks.service.create_short_url('https://example.com')
    >>> shortlinks.started
    False
"""

import time
import logging

from uvicorn.importer import ImportFromStringError, import_from_string

from shortlinks.dao import ShortURLCache, ShortURLMemoryDAO
from shortlinks.exceptions import BadConfigurationError
from shortlinks.scheduler import CleanupScheduler
from shortlinks.service import ShortURLService
from shortlinks.types import GeoLookup
from shortlinks.utils.config import Settings


logger = logging.getLogger(__name__)


def load_geo_lookup(reference: str | None) -> GeoLookup | None:
    """Import the geo lookup callable named by a `'package.module:function'` reference

    Raises:
        BadConfigurationError:
            If the reference can't be imported or doesn't name a callable.

    Example:
        >>> load_geo_lookup('myproject.geo:lookup')
        <function lookup at 0x...>
        >>> load_geo_lookup(None) is None
        True
    """
    if not reference:
        return None

    try:
        geo_lookup = import_from_string(reference)
    except ImportFromStringError as e:
        raise BadConfigurationError(f"Setting 'geo_lookup' can't be imported ({e}).") from e

    if not callable(geo_lookup):
        raise BadConfigurationError(f"Setting 'geo_lookup' must reference a callable (given value: {reference!r}).")
    return geo_lookup


class ShortLinks:
    """Own every long-lived component of the service

    Attributes:
        settings (Settings): application settings.
        cache (ShortURLCache): bounded TTL cache in front of the repository.
        dao (ShortURLMemoryDAO): authoritative in-memory store.
        service (ShortURLService): business rules.
        scheduler (CleanupScheduler): periodic expired link cleanup.
    """

    def __init__(self, settings: Settings | None = None, geo_lookup: GeoLookup | None = None):
        self.settings = settings or Settings()
        self.cache = ShortURLCache(
            max_size=self.settings.cache_max_size,
            ttl=self.settings.cache_ttl_seconds,
            sweep_interval=self.settings.cache_sweep_interval_seconds,
        )
        self.dao = ShortURLMemoryDAO(cache=self.cache, max_shortcode_length=self.settings.max_shortcode_length)
        if geo_lookup is None:
            geo_lookup = load_geo_lookup(self.settings.geo_lookup)
        self.service = ShortURLService(self.dao, self.settings, geo_lookup=geo_lookup)
        self.scheduler = CleanupScheduler(self.service, interval_seconds=self.settings.cleanup_interval_seconds)
        self._started_at: float | None = None

    def __enter__(self) -> 'ShortLinks':
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def started(self) -> bool:
        return self._started_at is not None

    def start(self) -> 'ShortLinks':
        """Start the background cache sweep and the cleanup scheduler."""
        if self.started:
            return self
        self.cache.start()
        self.scheduler.start()
        self._started_at = time.monotonic()
        logger.info('Application started.', extra={'settings': self.settings})
        return self

    def close(self) -> None:
        """Stop background work and clear the cache. Stored short URLs are kept."""
        if not self.started:
            return
        self.scheduler.stop()
        self.cache.close()
        self._started_at = None
        logger.info('Application closed.')

    def uptime(self) -> float:
        """Seconds since `start()`, 0 when not started."""
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at
