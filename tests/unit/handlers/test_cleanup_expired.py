"""Unit tests for the POST /cleanup handler

Test coverage includes:

1. success: expired short URLs are deleted and counted.
2. skipped: another cleanup is already running.
3. error: cleanup failures are reported with a 500.
"""

from datetime import timedelta
from unittest.mock import MagicMock

from freezegun import freeze_time

from shortlinks.scheduler import SKIPPED, CleanupResult


def test_cleanup_success(app, client):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        app.service.create_short_url('https://example.com/1', validity=1)
        app.service.create_short_url('https://example.com/2', validity=60)
        frozen.tick(timedelta(minutes=2))

        response = client.post('/cleanup')

    body = response.json()
    assert response.status_code == 200
    assert body['status'] == 'success'
    assert body['cleaned_count'] == 1
    assert body['message'] == 'Successfully deleted 1 expired short URLs'
    assert len(app.dao) == 1


def test_cleanup_skipped(app, client, monkeypatch):
    monkeypatch.setattr(app.scheduler, 'run_manual_cleanup', MagicMock(return_value=CleanupResult(status=SKIPPED)))

    response = client.post('/cleanup')
    body = response.json()

    assert response.status_code == 200
    assert body['status'] == 'skipped'
    assert body['cleaned_count'] == 0


def test_cleanup_error(app, client, monkeypatch):
    monkeypatch.setattr(app.service, 'cleanup_expired_urls', MagicMock(side_effect=RuntimeError('store exploded')))

    response = client.post('/cleanup')

    assert response.status_code == 500
    assert response.json() == {
        'status': 'error',
        'message': 'Failed to clean up expired short URLs',
        'reason': 'store exploded',
        'error': 'RuntimeError',
    }
