import functools
from typing import Any, TypeVar
from collections.abc import Callable


__all__ = ['synchronized']

F = TypeVar('F', bound=Callable[..., Any])


def synchronized(method: F) -> F:
    """Run a DAO method while holding the DAO's re-entrant lock

    The primary map, the shortcode index and the cache must always agree, so
    every public operation is one critical section. The lock is re-entrant
    because operations call each other (e.g. add_click -> find_by_shortcode).

    Args:
        method (Callable[..., Any]):
            DAO method reading or mutating in-memory state.

    Returns:
        Callable[..., Any]:
            Wrapped method executed under `self._lock`.

    Example:
        >>> @synchronized
        ... def delete(self, id):
        ...     return self._records.pop(id, None) is not None
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper
