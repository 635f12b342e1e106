from shortlinks.handlers.router import build_router

__all__ = [
    'build_router',
]
