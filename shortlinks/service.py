"""Business rules on top of the short URL repository

Responsibilities:
    - Generate unique shortcodes (random draw + existence check, bounded retries);
    - Validate creation requests (URL, validity, custom shortcode) and compute expiry;
    - Resolve redirects: expiry checks, geolocation, click recording;
    - Expose per-link and service-wide statistics and expired link cleanup.

Classes:
    ShortURLService:
        Stateless orchestrator; all state lives in the injected DAO.

Example:
    >>> from shortlinks.dao import ShortURLCache, ShortURLMemoryDAO
    >>> from shortlinks.models import RequestMetadata
    >>> from shortlinks.utils import load_config

    >>> service = ShortURLService(ShortURLMemoryDAO(ShortURLCache()), load_config())
    >>> short_url = service.create_short_url('https://example.com/page', validity=60, shortcode='promo')
    >>> service.redirect_to_original_url('promo', RequestMetadata(ip='203.0.113.7'))
    'https://example.com/page'
    >>> service.get_short_url_stats('promo')['total_clicks']
    1
"""

import logging
import ipaddress
from datetime import datetime, timedelta, UTC

from shortlinks.constants import RESERVED_SHORTCODES, UNKNOWN
from shortlinks.dao.base import ShortURLBaseDAO
from shortlinks.dao.exceptions import ShortURLAlreadyExistsError
from shortlinks.exceptions import ValidationError, NotFoundError, ExpiredError, ExhaustedError
from shortlinks.models import Location, RequestMetadata, ShortURLModel
from shortlinks.types import GeoLookup, StatsPayload
from shortlinks.utils.config import Settings
from shortlinks.utils.shortener import random_shortcode


logger = logging.getLogger(__name__)


def is_loopback(ip: str) -> bool:
    """Return True for loopback addresses, including IPv4-mapped IPv6 ones (::ffff:127.0.0.1)."""
    address = ipaddress.ip_address(ip)
    mapped = getattr(address, 'ipv4_mapped', None)
    return address.is_loopback or (mapped is not None and mapped.is_loopback)


class ShortURLService:
    """Orchestrate shortcode generation, expiry, click recording and statistics

    Attributes:
        dao (ShortURLBaseDAO):
            Repository holding every short URL.
        settings (Settings):
            Validity bounds and shortcode generation parameters.
        geo_lookup (Optional[GeoLookup]):
            Callable mapping an IP address to `{'country', 'region', 'city'}`.
            Without one, every click is located as Unknown.
    """

    def __init__(self, dao: ShortURLBaseDAO, settings: Settings, geo_lookup: GeoLookup | None = None):
        self.dao = dao
        self.settings = settings
        self.geo_lookup = geo_lookup

    def generate_unique_shortcode(self) -> str:
        """Draw random shortcodes until one is neither taken nor reserved

        Returns:
            str: an unused shortcode of `settings.shortcode_length` characters.

        Raises:
            ExhaustedError:
                If every one of `settings.max_shortcode_attempts` draws collided.
        """
        attempts = self.settings.max_shortcode_attempts
        for attempt in range(1, attempts + 1):
            shortcode = random_shortcode(length=self.settings.shortcode_length, salt=self.settings.shortcode_salt)
            if shortcode.lower() not in RESERVED_SHORTCODES and self.dao.find_by_shortcode(shortcode) is None:
                return shortcode
            logger.warning('Shortcode collision, retrying.', extra={'shortcode': shortcode, 'attempt': attempt})

        raise ExhaustedError(f'Failed to generate a unique shortcode after {attempts} attempts.')

    def create_short_url(self, url: str, validity: int | None = None, shortcode: str | None = None) -> ShortURLModel:
        """Validate a creation request and store the new short URL

        Args:
            url (str):
                Absolute URL to shorten.
            validity (Optional[int]):
                Lifetime in minutes, 1 to `settings.max_validity_minutes`.
                Defaults to `settings.default_validity_minutes`.
            shortcode (Optional[str]):
                Custom shortcode. Generated when None.

        Returns:
            ShortURLModel: the stored short URL.

        Raises:
            ValidationError:
                If the URL, validity or custom shortcode is malformed, or the shortcode is reserved.
            ConflictError:
                If the custom shortcode is taken by a live short URL.
            ExhaustedError:
                If no unique shortcode could be generated.

        Example:
            >>> service.create_short_url('https://example.com', validity=1).expires_at
            datetime.datetime(2025, 1, 1, 12, 1, tzinfo=datetime.timezone.utc)
        """
        if not ShortURLModel.validate_url(url):
            raise ValidationError(f"Invalid URL: '{url}'.")

        if validity is None:
            validity = self.settings.default_validity_minutes
        elif not isinstance(validity, int) or isinstance(validity, bool):
            raise ValidationError(f'Validity must be an integer number of minutes (given value: {validity!r}).')
        elif not 1 <= validity <= self.settings.max_validity_minutes:
            raise ValidationError(f'Validity must be between 1 and {self.settings.max_validity_minutes} minutes (given value: {validity}).')

        if shortcode is None:
            shortcode = self.generate_unique_shortcode()
        else:
            self._check_custom_shortcode(shortcode)

        expires_at = datetime.now(UTC) + timedelta(minutes=validity)
        short_url = self.dao.create(target=url, shortcode=shortcode, expires_at=expires_at)

        logger.info(
            'Created short URL.',
            extra={'shortcode': shortcode, 'target': url, 'validity': validity, 'expires_at': expires_at.isoformat()},
        )
        return short_url

    def redirect_to_original_url(self, shortcode: str, request: RequestMetadata | None = None) -> str:
        """Record a click on a live short URL and return its target

        The geo lookup runs before the click is recorded and outside any
        repository lock. Lookup failures never fail the redirect.

        Raises:
            ValidationError:
                If the shortcode is malformed.
            NotFoundError:
                If the shortcode is unknown or was deleted.
            ExpiredError:
                If the short URL has expired.
        """
        request = request or RequestMetadata()
        short_url = self._resolve(shortcode)

        location = self.resolve_location(request.ip)
        self.dao.add_click(
            shortcode,
            ip=request.ip,
            user_agent=request.user_agent,
            referer=request.referer,
            location=location,
        )

        logger.info(
            'Recorded click.',
            extra={'shortcode': shortcode, 'country': location.country, 'total_clicks': short_url.click_count()},
        )
        return short_url.target

    def get_short_url_stats(self, shortcode: str) -> StatsPayload:
        """Return a JSON-ready snapshot of a live short URL, including its full click history."""
        return self._resolve(shortcode).to_dict()

    def cleanup_expired_urls(self) -> int:
        logger.info('Starting cleanup of expired short URLs.')
        deleted = self.dao.cleanup()
        logger.info('Cleanup of expired short URLs completed.', extra={'deleted': deleted})
        return deleted

    def get_service_stats(self) -> StatsPayload:
        """Merge repository counts with cache utilization

        Returns:
            dict: `{total_urls, active_urls, expired_urls, cache, timestamp}`
        """
        stats = self.dao.stats()
        return {
            'total_urls': stats['total_urls'],
            'active_urls': stats['active_urls'],
            'expired_urls': stats['expired_urls'],
            'cache': stats['cache_stats'],
            'timestamp': datetime.now(UTC).isoformat(),
        }

    def resolve_location(self, ip: str | None) -> Location:
        """Locate `ip` with the geo lookup, degrading to Unknown on any failure."""
        if not ip or self.geo_lookup is None:
            return Location.unknown()

        try:
            if is_loopback(ip):
                return Location.unknown()
            result = self.geo_lookup(ip)
            if not result:
                return Location.unknown()
            return Location(
                country=result.get('country') or UNKNOWN,
                region=result.get('region') or UNKNOWN,
                city=result.get('city') or UNKNOWN,
            )
        except Exception as e:
            logger.warning('Geo lookup failed.', extra={'ip': ip, 'error': e.__class__.__name__, 'reason': str(e)})
            return Location.unknown()

    def _check_custom_shortcode(self, shortcode: str) -> None:
        if not ShortURLModel.validate_shortcode(shortcode, self.settings.max_shortcode_length):
            raise ValidationError(
                f"Invalid shortcode '{shortcode}': use 1 to {self.settings.max_shortcode_length} characters from [A-Za-z0-9_-]."
            )
        if shortcode.lower() in RESERVED_SHORTCODES:
            raise ValidationError(f"Shortcode '{shortcode}' is reserved.")

        existing = self.dao.find_by_shortcode(shortcode)
        if existing is None:
            return
        if existing.is_expired():
            # Expired records still cached free their shortcode here
            self.dao.delete(existing.id)
            return
        raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")

    def _resolve(self, shortcode: str) -> ShortURLModel:
        if not ShortURLModel.validate_shortcode(shortcode, self.settings.max_shortcode_length):
            raise ValidationError(f"Invalid shortcode: '{shortcode}'.")

        short_url = self.dao.find_by_shortcode(shortcode)
        if short_url is None:
            raise NotFoundError(f"Short URL with code '{shortcode}' doesn't exist.")
        if short_url.is_expired():
            raise ExpiredError(f"Short URL with code '{shortcode}' has expired.")
        return short_url
