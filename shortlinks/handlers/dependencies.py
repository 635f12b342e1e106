from fastapi import Request

from shortlinks.app import ShortLinks


def get_shortlinks(request: Request) -> ShortLinks:
    """Return the application container the ASGI app was created for."""
    return request.app.state.shortlinks
