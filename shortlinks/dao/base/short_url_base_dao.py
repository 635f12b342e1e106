"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism.

Responsibilities:
    - Provide an interface for creating, looking up, patching and deleting ShortURLModel objects;
    - Treat expiry uniformly: expired records are never returned by store lookups;
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.dao import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO(cache=ShortURLCache())
        >>> short_url = dao.create(target='https://example.com/blog/article-123', shortcode='a1b2c3')

        >>> retrieved = dao.find_by_shortcode('a1b2c3')
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> dao.delete(retrieved.id)
        True
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from shortlinks.models import ClickModel, Location, ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        create(target, shortcode, expires_at=None) -> ShortURLModel:
            Raises ShortURLAlreadyExistsError if the shortcode is taken.

        find_by_shortcode(shortcode) -> ShortURLModel | None
        find_by_id(id) -> ShortURLModel | None

        update(id, **changes) -> ShortURLModel:
            Raises ShortURLNotFoundError, ValidationError or ShortURLAlreadyExistsError.

        delete(id) -> bool:
            Idempotent, returns False if the record was already gone.

        add_click(shortcode, ...) -> ClickModel:
            Raises ShortURLNotFoundError if the shortcode is absent or expired.

        all() -> list[ShortURLModel]
        stats() -> dict
        cleanup() -> int

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLMemoryDAO) must extend
        this class and implement all abstract methods.
    """

    @abstractmethod
    def create(self, target: str, shortcode: str, expires_at: datetime | None = None) -> ShortURLModel:
        """Create and store a new short URL.

        Args:
            target (str):
                Original long URL.
            shortcode (str):
                Unique shortcode of the new record.
            expires_at (Optional[datetime]):
                Aware UTC expiry. None means the record never expires.

        Returns:
            ShortURLModel: the stored record.

        Raises:
            ShortURLAlreadyExistsError:
                If a live record already uses `shortcode`.
            ValidationError:
                If `target` or `shortcode` is empty.
        """
        pass

    @abstractmethod
    def find_by_shortcode(self, shortcode: str) -> ShortURLModel | None:
        """Retrieve a short URL by its shortcode, None when unknown or expired."""
        pass

    @abstractmethod
    def find_by_id(self, id: str) -> ShortURLModel | None:
        """Retrieve a short URL by its id, None when unknown or expired."""
        pass

    @abstractmethod
    def update(self, id: str, **changes: Any) -> ShortURLModel:
        """Patch the mutable fields (`target`, `shortcode`) of a short URL.

        Raises:
            ShortURLNotFoundError:
                If no record with `id` exists.
            ValidationError:
                If a field can't be patched or a new value is malformed.
            ShortURLAlreadyExistsError:
                If the new shortcode is taken by another record.
        """
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete a short URL, returning False if it didn't exist."""
        pass

    @abstractmethod
    def add_click(
        self,
        shortcode: str,
        ip: str | None = None,
        user_agent: str | None = None,
        referer: str | None = None,
        location: Location | None = None,
    ) -> ClickModel:
        """Record a click on a live short URL.

        Raises:
            ShortURLNotFoundError:
                If the shortcode is unknown or expired.
        """
        pass

    @abstractmethod
    def all(self) -> list[ShortURLModel]:
        pass

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        """Return `{total_urls, active_urls, expired_urls, cache_stats}`."""
        pass

    @abstractmethod
    def cleanup(self) -> int:
        """Delete every expired record and return how many were deleted."""
        pass
