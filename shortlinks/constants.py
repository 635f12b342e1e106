from enum import StrEnum


class TTL:
    """Durations in seconds."""

    # Bounded cache entry lifetime (1 hour)
    CACHE_ENTRY = 3_600  # 60 * 60
    # Background cache sweep period (5 minutes)
    CACHE_SWEEP_INTERVAL = 300  # 5 * 60
    # Expired short URL cleanup period (30 minutes)
    CLEANUP_INTERVAL = 1_800  # 30 * 60


class Defaults:
    """Default application settings."""

    HOST = 'localhost'
    PORT = 3000
    VALIDITY_MINUTES = 30
    MAX_VALIDITY_MINUTES = 1_440  # 24 hours
    SHORTCODE_LENGTH = 6
    MAX_SHORTCODE_LENGTH = 20
    SHORTCODE_SALT = 'default_salt'
    MAX_SHORTCODE_ATTEMPTS = 10
    CACHE_MAX_SIZE = 1_000


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        CONFIG_FILE = 'CONFIG_FILE'
        LOG_LEVEL = 'LOG_LEVEL'

    class Server(StrEnum):
        HOST = 'HOST'
        PORT = 'PORT'
        BASE_URL = 'BASE_URL'

    class Shortener(StrEnum):
        DEFAULT_VALIDITY_MINUTES = 'DEFAULT_VALIDITY_MINUTES'
        MAX_VALIDITY_MINUTES = 'MAX_VALIDITY_MINUTES'
        SHORTCODE_LENGTH = 'SHORTCODE_LENGTH'
        MAX_SHORTCODE_LENGTH = 'MAX_SHORTCODE_LENGTH'
        SHORTCODE_SALT = 'SHORTCODE_SALT'
        MAX_SHORTCODE_ATTEMPTS = 'MAX_SHORTCODE_ATTEMPTS'

    class Cache(StrEnum):
        TTL_SECONDS = 'CACHE_TTL_SECONDS'
        MAX_SIZE = 'CACHE_MAX_SIZE'
        SWEEP_INTERVAL_SECONDS = 'CACHE_SWEEP_INTERVAL_SECONDS'

    class Cleanup(StrEnum):
        INTERVAL_SECONDS = 'CLEANUP_INTERVAL_SECONDS'

    class Geo(StrEnum):
        LOOKUP = 'GEO_LOOKUP'


# Placeholder for every location field that can't be resolved
UNKNOWN = 'Unknown'

# Shortcodes that collide with fixed HTTP routes
RESERVED_SHORTCODES = frozenset({'health', 'shorturls', 'cleanup'})

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
