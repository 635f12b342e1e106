"""Exceptions related to Data Access Objects (DAO) operations.

DAO errors subclass the matching domain error so callers can rely on
`error.kind` regardless of which layer raised it.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a ShortURLModel is not found in the data store.

    ShortURLAlreadyExistsError:
        Raised when attempting to insert a ShortURLModel whose shortcode is taken.

    DataStoreError:
        Raised when the data store is internally inconsistent.

Example:
    >>> from shortlinks.dao.exceptions import ShortURLAlreadyExistsError
    >>> raise ShortURLAlreadyExistsError("Short URL with code 'abc123' already exists.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.ShortURLAlreadyExistsError: Short URL with code 'abc123' already exists.
"""

from shortlinks.exceptions import ShortLinksError, NotFoundError, ConflictError


class DAOError(ShortLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError, NotFoundError):
    """Raised when a ShortURLModel is not found in the data store."""

    error_code = 'dao:short_url_not_found_error'


class ShortURLAlreadyExistsError(DAOError, ConflictError):
    """Raised when inserting a ShortURLModel whose shortcode already exists in the data store."""

    error_code = 'dao:short_url_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    e.g. the shortcode index points at a record missing from the primary map.
    """

    error_code = 'dao:data_store_error'
