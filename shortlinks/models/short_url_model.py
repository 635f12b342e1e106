import re
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any
from urllib.parse import urlparse

from shortlinks.constants import Defaults
from shortlinks.exceptions import ValidationError
from shortlinks.models.click_model import ClickModel, Location


SHORTCODE_PATTERN = re.compile(r'[A-Za-z0-9_-]+')

# Fields that can't be reassigned once the record is constructed
IMMUTABLE_FIELDS = frozenset({'id', 'created_at', 'expires_at', 'clicks'})


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class ShortURLModel:
    """Represent a shortened URL mapping and its click history.

    Unlike the click and location records, a short URL is a live entity: the
    repository hands out shared references and clicks are appended in place.
    Identity, creation time and expiry are fixed at construction.

    Attributes:
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        id (str):
            Process-unique identifier (uuid4), generated at construction.
        created_at (datetime):
            Aware UTC moment the record was created.
        expires_at (Optional[datetime]):
            Aware UTC moment after which the short URL is expired.
            None means the short URL never expires.
        clicks (list[ClickModel]):
            Append-only click history in chronological order.

    Raises:
        ValidationError:
            If `target` or `shortcode` is missing.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> url = ShortURLModel(
        ...     target='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     expires_at=datetime.now(UTC) + timedelta(minutes=30),
        ... )
        >>> url.is_expired()
        False
        >>> url.add_click(ip='203.0.113.7').ip
        '203.0.113.7'
        >>> url.click_count()
        1
    """

    target: str
    shortcode: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)
    expires_at: datetime | None = None
    clicks: list[ClickModel] = field(default_factory=list)

    def __post_init__(self):
        if not self.target:
            raise ValidationError('Original URL is required.')
        if not self.shortcode:
            raise ValidationError('Shortcode is required.')

    def __setattr__(self, name: str, value: Any) -> None:
        if name in IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Field '{name}' of ShortURLModel is immutable.")
        super().__setattr__(name, value)

    def add_click(
        self,
        ip: str | None = None,
        user_agent: str | None = None,
        referer: str | None = None,
        location: Location | None = None,
    ) -> ClickModel:
        """Append a click event stamped with a fresh id and the current time

        NOTE: `clicks` is mutated in place, so every holder of this record
              (repository, cache) observes the new click.

        Returns:
            ClickModel: the recorded click.
        """
        click = ClickModel(
            id=_new_id(),
            timestamp=_utcnow(),
            ip=ip,
            user_agent=user_agent,
            referer=referer,
            location=location or Location.unknown(),
        )
        self.clicks.append(click)
        return click

    def click_count(self) -> int:
        return len(self.clicks)

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return _utcnow() > self.expires_at

    def time_until_expiry(self) -> int | None:
        """Whole minutes left before expiry (negative once expired, None without expiry)."""
        if self.expires_at is None:
            return None
        remaining = (self.expires_at - _utcnow()).total_seconds()
        return math.floor(remaining / 60)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'shortcode': self.shortcode,
            'original_url': self.target,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'total_clicks': self.click_count(),
            'time_until_expiry': self.time_until_expiry(),
            'clicks': [click.to_dict() for click in list(self.clicks)],
        }

    @staticmethod
    def validate_url(url: Any) -> bool:
        """Return True if `url` parses as an absolute URL (scheme + network location)."""
        if not isinstance(url, str) or not url or any(c.isspace() for c in url):
            return False
        try:
            components = urlparse(url)
        except ValueError:
            return False
        return bool(components.scheme) and bool(components.netloc)

    @staticmethod
    def validate_shortcode(shortcode: Any, max_length: int = Defaults.MAX_SHORTCODE_LENGTH) -> bool:
        """Return True if `shortcode` is non-empty, at most `max_length` long and uses [A-Za-z0-9_-]."""
        if not isinstance(shortcode, str) or not shortcode:
            return False
        if len(shortcode) > max_length:
            return False
        return SHORTCODE_PATTERN.fullmatch(shortcode) is not None
