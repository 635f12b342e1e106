from shortlinks.dao.cache.short_url_cache import ShortURLCache

__all__ = [
    'ShortURLCache',
]
