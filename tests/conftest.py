import pytest

from shortlinks.app import ShortLinks
from shortlinks.dao import ShortURLCache, ShortURLMemoryDAO
from shortlinks.service import ShortURLService
from shortlinks.utils.config import Settings


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Keep tests independent from the developer's shell environment."""
    for variable in ('APP_ENV', 'CONFIG_FILE', 'LOG_LEVEL', 'BASE_URL', 'PORT', 'HOST', 'GEO_LOOKUP'):
        monkeypatch.delenv(variable, raising=False)
    # Reported by the health check
    monkeypatch.setenv('APP_ENV', 'test')


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url='https://sho.rt')


@pytest.fixture
def cache() -> ShortURLCache:
    return ShortURLCache(max_size=100, ttl=3600)


@pytest.fixture
def dao(cache) -> ShortURLMemoryDAO:
    return ShortURLMemoryDAO(cache=cache)


@pytest.fixture
def service(dao, settings) -> ShortURLService:
    return ShortURLService(dao, settings)


@pytest.fixture
def app(settings) -> ShortLinks:
    """Application container without background threads (not started)."""
    _app = ShortLinks(settings)
    yield _app
    _app.close()
