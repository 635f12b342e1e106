import pytest
from fastapi.testclient import TestClient

from shortlinks.api import create_app


@pytest.fixture
def client(app) -> TestClient:
    """HTTP client bound to the `app` container

    Used outside a `with` block, so the lifespan never runs and no background
    thread is started.
    """
    return TestClient(create_app(app), raise_server_exceptions=False)
