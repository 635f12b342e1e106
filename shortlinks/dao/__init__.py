from shortlinks.dao.base import ShortURLBaseDAO
from shortlinks.dao.cache import ShortURLCache
from shortlinks.dao.memory import ShortURLMemoryDAO


__all__ = [
    'ShortURLBaseDAO',
    'ShortURLCache',
    'ShortURLMemoryDAO',
]
