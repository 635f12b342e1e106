"""In-memory URL shortener with click analytics and expiring links."""

__version__ = '0.1.0'
