"""Route table of the HTTP surface

Routes are matched in registration order, so `/health`, `/shorturls` and
`/cleanup` are registered before the `/{shortcode}` catch-all. A path that
matches a route only for another method answers 405 with an Allow header,
unless a later route fully matches it.
"""

from fastapi import APIRouter

from shortlinks.handlers import cleanup_expired, healthcheck, redirect_url, shorten_url, url_stats


def build_router() -> APIRouter:
    router = APIRouter()
    router.add_api_route('/health', healthcheck.handler, methods=['GET'], name='healthcheck')
    router.add_api_route('/shorturls', shorten_url.handler, methods=['POST'], name='shorten_url')
    router.add_api_route('/cleanup', cleanup_expired.handler, methods=['POST'], name='cleanup_expired')
    router.add_api_route('/shorturls/{shortcode}', url_stats.handler, methods=['GET'], name='url_stats')
    router.add_api_route('/{shortcode}', redirect_url.handler, methods=['GET'], name='redirect_url')
    return router
