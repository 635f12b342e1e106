"""Application-wide exception hierarchy.

Every exception carries an `ErrorKind` tag and a stable `error_code`.
Callers (HTTP handlers, scheduler) switch on `error.kind`, never on the
exception message.

Classes:
    ErrorKind:
        Tagged enumeration of error categories.

    ShortLinksError:
        Base class for all application-specific errors.

    ValidationError, ConflictError, NotFoundError, ExpiredError, ExhaustedError:
        Domain errors raised by the model, repository and service layers.

    ConfigurationError, MissingConfigurationFileError, BadConfigurationError:
        Errors raised while loading application settings.

Example:
    >>> from shortlinks.exceptions import ErrorKind, ExpiredError
    >>> try:
    ...     raise ExpiredError("Short URL 'abc123' has expired.")
    ... except ExpiredError as error:
    ...     error.kind
    <ErrorKind.EXPIRED: 'expired'>
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = 'validation'
    CONFLICT = 'conflict'
    NOT_FOUND = 'not_found'
    EXPIRED = 'expired'
    EXHAUSTED = 'exhausted'
    INTERNAL = 'internal'
    CONFIGURATION = 'configuration'


class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    kind = ErrorKind.INTERNAL
    error_code = 'app:shortlinks_error'


class ValidationError(ShortLinksError):
    """Raised when user input (URL, shortcode, validity) is malformed."""

    kind = ErrorKind.VALIDATION
    error_code = 'app:validation_error'


class ConflictError(ShortLinksError):
    """Raised when a shortcode is already taken by a live short URL."""

    kind = ErrorKind.CONFLICT
    error_code = 'app:conflict_error'


class NotFoundError(ShortLinksError):
    """Raised when a shortcode is unknown or was deleted."""

    kind = ErrorKind.NOT_FOUND
    error_code = 'app:not_found_error'


class ExpiredError(ShortLinksError):
    """Raised when a shortcode exists but is past its expiry."""

    kind = ErrorKind.EXPIRED
    error_code = 'app:expired_error'


class ExhaustedError(ShortLinksError):
    """Raised when no unique shortcode could be generated within the retry bound."""

    kind = ErrorKind.EXHAUSTED
    error_code = 'app:exhausted_error'


class ConfigurationError(ShortLinksError):
    """Base exception for all configuration errors."""

    kind = ErrorKind.CONFIGURATION
    error_code = 'config:configuration_error'


class MissingConfigurationFileError(ConfigurationError):
    """Raised when the configured settings file doesn't exist."""

    error_code = 'config:missing_configuration_file_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
