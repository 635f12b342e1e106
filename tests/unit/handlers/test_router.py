"""Unit tests for the route table

Test coverage includes:

1. Every application route end to end, with path parameters.
2. Fixed routes take precedence over the /{shortcode} catch-all.
3. Unknown routes -> 404, wrong methods -> 405 with an Allow header.
"""

import pytest

from shortlinks.handlers import build_router


# -------------------------------
# 1. Full flow
# -------------------------------

def test_full_flow(client):
    created = client.post('/shorturls', json={'url': 'https://example.com', 'shortcode': 'flow'})
    assert created.status_code == 201

    redirected = client.get('/flow', follow_redirects=False)
    assert redirected.status_code == 302
    assert redirected.headers['location'] == 'https://example.com'

    stats = client.get('/shorturls/flow')
    assert stats.status_code == 200
    assert stats.json()['total_clicks'] == 1

    assert client.get('/health').status_code == 200
    assert client.post('/cleanup').status_code == 200


def test_trailing_slash_redirects_to_canonical_path(client):
    client.post('/shorturls', json={'url': 'https://example.com', 'shortcode': 'flow'})

    response = client.get('/shorturls/flow/')

    assert response.status_code == 200
    assert response.json()['shortcode'] == 'flow'


# -------------------------------
# 2. Precedence
# -------------------------------

def test_fixed_routes_are_registered_before_catch_all():
    paths = [route.path for route in build_router().routes]
    assert paths == ['/health', '/shorturls', '/cleanup', '/shorturls/{shortcode}', '/{shortcode}']


def test_health_is_never_a_shortcode_lookup(app, client, monkeypatch):
    monkeypatch.setattr(app.service, 'redirect_to_original_url', lambda *a, **kw: pytest.fail('redirect attempted'))
    assert client.get('/health').json()['status'] == 'healthy'


# -------------------------------
# 3. Errors
# -------------------------------

@pytest.mark.parametrize('path', ['/', '/a/b/c', '/shorturls/abc/extra'])
def test_unknown_route(client, path):
    response = client.get(path)

    assert response.status_code == 404
    assert response.json() == {'message': f'Not Found (GET {path})', 'error_code': 'http:route_not_found'}


@pytest.mark.parametrize(
    'method, path',
    [
        ('DELETE', '/health'),
        ('POST', '/health'),
        ('POST', '/abc123'),
        ('PUT', '/shorturls/abc123'),
        ('DELETE', '/abc123'),
    ],
)
def test_method_not_allowed(client, method, path):
    response = client.request(method, path)

    assert response.status_code == 405
    assert response.headers['allow'] == 'GET'
    assert response.json()['error_code'] == 'http:method_not_allowed'
