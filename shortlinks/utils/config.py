"""Utility functions for application configuration management.

Settings are resolved in three layers, later layers overriding earlier ones:

    1. Built-in defaults (see `shortlinks.constants.Defaults` and `TTL`).
    2. An optional YAML file, selected with `CONFIG_FILE` or the `path`
       argument of `load_config()`.
    3. Environment variables (`PORT`, `CACHE_MAX_SIZE`, ...).

The YAML file is a flat mapping whose keys are `Settings` field names:

    port: 8080
    default_validity_minutes: 60
    cache_max_size: 500

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting
        to `'local'`.

    load_config(path=None, environ=None) -> Settings
        Build validated application settings.

Example:
    >>> from shortlinks.utils.config import load_config
    >>> settings = load_config()
    >>> settings.default_validity_minutes
    30
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from collections.abc import Mapping

import yaml

from shortlinks.constants import ENV, TTL, Defaults
from shortlinks.exceptions import BadConfigurationError, MissingConfigurationFileError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Validated application settings.

    Attributes:
        host, port:
            Address the HTTP server binds to.
        base_url:
            Public base URL used to build short links. Derived from the request when None.
        default_validity_minutes, max_validity_minutes:
            Lifetime applied to new short URLs and the largest lifetime a caller may ask for.
        shortcode_length, max_shortcode_length:
            Length of generated shortcodes and upper bound for custom ones.
        shortcode_salt:
            Salt of the shortcode permutation. Random draws stay uniform whatever
            the salt, so it only changes which codes a given seed maps to.
        max_shortcode_attempts:
            Collision retries before shortcode generation gives up.
        cache_ttl_seconds, cache_max_size, cache_sweep_interval_seconds:
            Bounded TTL cache tuning.
        cleanup_interval_seconds:
            Period of the expired short URL cleanup.
        log_level:
            Root log level.
        geo_lookup:
            'package.module:function' reference to the IP geolocation callable.
            Clicks are located as Unknown when None.
    """

    host: str = Defaults.HOST
    port: int = Defaults.PORT
    base_url: str | None = None
    default_validity_minutes: int = Defaults.VALIDITY_MINUTES
    max_validity_minutes: int = Defaults.MAX_VALIDITY_MINUTES
    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    max_shortcode_length: int = Defaults.MAX_SHORTCODE_LENGTH
    shortcode_salt: str = Defaults.SHORTCODE_SALT
    max_shortcode_attempts: int = Defaults.MAX_SHORTCODE_ATTEMPTS
    cache_ttl_seconds: int = TTL.CACHE_ENTRY
    cache_max_size: int = Defaults.CACHE_MAX_SIZE
    cache_sweep_interval_seconds: int = TTL.CACHE_SWEEP_INTERVAL
    cleanup_interval_seconds: int = TTL.CLEANUP_INTERVAL
    log_level: str = 'INFO'
    geo_lookup: str | None = None

    def __post_init__(self):
        for name in POSITIVE_INT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise BadConfigurationError(f"Setting '{name}' must be a positive integer (given value: {value!r}).")
        if self.port > 65535:
            raise BadConfigurationError(f"Setting 'port' must be a valid TCP port (given value: {self.port}).")
        if self.max_shortcode_length > Defaults.MAX_SHORTCODE_LENGTH:
            raise BadConfigurationError(
                f"Setting 'max_shortcode_length' can't exceed {Defaults.MAX_SHORTCODE_LENGTH} (given value: {self.max_shortcode_length})."
            )
        if self.shortcode_length > self.max_shortcode_length:
            raise BadConfigurationError(
                f"Setting 'shortcode_length' ({self.shortcode_length}) can't exceed 'max_shortcode_length' ({self.max_shortcode_length})."
            )
        if self.default_validity_minutes > self.max_validity_minutes:
            raise BadConfigurationError(
                f"Setting 'default_validity_minutes' ({self.default_validity_minutes}) can't exceed "
                f"'max_validity_minutes' ({self.max_validity_minutes})."
            )
        if not isinstance(self.shortcode_salt, str) or not self.shortcode_salt:
            raise BadConfigurationError("Setting 'shortcode_salt' must be a non-empty string.")
        if logging.getLevelName(str(self.log_level).upper()) not in VALID_LOG_LEVELS:
            raise BadConfigurationError(f"Setting 'log_level' must be a logging level name (given value: {self.log_level!r}).")
        if self.geo_lookup is not None and (not isinstance(self.geo_lookup, str) or ':' not in self.geo_lookup):
            raise BadConfigurationError(f"Setting 'geo_lookup' must look like 'package.module:function' (given value: {self.geo_lookup!r}).")


POSITIVE_INT_FIELDS = (
    'port',
    'default_validity_minutes',
    'max_validity_minutes',
    'shortcode_length',
    'max_shortcode_length',
    'max_shortcode_attempts',
    'cache_ttl_seconds',
    'cache_max_size',
    'cache_sweep_interval_seconds',
    'cleanup_interval_seconds',
)

VALID_LOG_LEVELS = frozenset({logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL})

# Settings field -> environment variable
ENVIRONMENT_OVERRIDES = {
    'host': ENV.Server.HOST,
    'port': ENV.Server.PORT,
    'base_url': ENV.Server.BASE_URL,
    'default_validity_minutes': ENV.Shortener.DEFAULT_VALIDITY_MINUTES,
    'max_validity_minutes': ENV.Shortener.MAX_VALIDITY_MINUTES,
    'shortcode_length': ENV.Shortener.SHORTCODE_LENGTH,
    'max_shortcode_length': ENV.Shortener.MAX_SHORTCODE_LENGTH,
    'shortcode_salt': ENV.Shortener.SHORTCODE_SALT,
    'max_shortcode_attempts': ENV.Shortener.MAX_SHORTCODE_ATTEMPTS,
    'cache_ttl_seconds': ENV.Cache.TTL_SECONDS,
    'cache_max_size': ENV.Cache.MAX_SIZE,
    'cache_sweep_interval_seconds': ENV.Cache.SWEEP_INTERVAL_SECONDS,
    'cleanup_interval_seconds': ENV.Cleanup.INTERVAL_SECONDS,
    'log_level': ENV.App.LOG_LEVEL,
    'geo_lookup': ENV.Geo.LOOKUP,
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()



def _coerce(name: str, value: Any) -> Any:
    """Cast a raw YAML/environment value onto the type of Settings field `name`."""
    if name in POSITIVE_INT_FIELDS:
        if isinstance(value, bool):
            raise BadConfigurationError(f"Setting '{name}' must be an integer (given value: {value!r}).")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f"Setting '{name}' must be an integer (given value: {value!r}).") from e
    if value is None:
        return None
    return str(value)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise MissingConfigurationFileError(f'Configuration file {path} does not exist.')

    with path.open('r', encoding='utf-8') as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e

    document = document or {}
    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping.')

    unknown = sorted(set(document) - set(ENVIRONMENT_OVERRIDES))
    if unknown:
        raise BadConfigurationError(f'Unknown settings in {path}: {", ".join(map(str, unknown))}.')
    return document


def load_config(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Load application settings from defaults, an optional YAML file and the environment

    Args:
        path (Optional[str | Path]):
            YAML settings file. Defaults to the value of `CONFIG_FILE`, if any.
        environ (Optional[Mapping[str, str]]):
            Environment to read overrides from. Defaults to `os.environ`.

    Returns:
        Settings: validated, immutable settings.

    Raises:
        MissingConfigurationFileError:
            If the selected YAML file doesn't exist.
        BadConfigurationError:
            If any value is malformed or out of range.

    Example:
        >>> load_config(environ={'PORT': '8080'}).port
        8080
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    path = path or environ.get(ENV.App.CONFIG_FILE)
    if path:
        for name, value in _load_yaml(Path(path)).items():
            values[name] = _coerce(name, value)
        logger.debug('Loaded settings file.', extra={'path': str(path)})

    for name, variable in ENVIRONMENT_OVERRIDES.items():
        raw = environ.get(variable)
        if raw is not None and raw != '':
            values[name] = _coerce(name, raw)

    return Settings(**values)
