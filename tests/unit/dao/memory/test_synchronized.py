"""Unit tests for the DAO lock decorator in dao/memory/helpers.py.

Test coverage includes:

1. Exports
   - `synchronized` is the module's public name.

2. Locking
   - The wrapped method runs while the owner's lock is held.
   - The wrapped method keeps its name and return value.
"""

import threading

from shortlinks.dao.memory import helpers
from shortlinks.dao.memory.helpers import synchronized


class Owner:
    def __init__(self):
        self._lock = threading.RLock()

    @synchronized
    def locked(self, value):
        """Report whether the lock is held."""
        # RLock has no public owner check; a non-blocking acquire from another thread fails while held
        acquired = []
        other_thread = threading.Thread(target=lambda: acquired.append(self._lock.acquire(blocking=False)))
        other_thread.start()
        other_thread.join()
        return value, acquired[0]


# -------------------------------
# 1. Exports
# -------------------------------

def test_synchronized_is_exported():
    assert helpers.__all__ == ['synchronized']


# -------------------------------
# 2. Locking
# -------------------------------

def test_method_runs_under_lock():
    assert Owner().locked('value') == ('value', False)


def test_wrapper_keeps_metadata():
    assert Owner.locked.__name__ == 'locked'
    assert Owner.locked.__doc__ == 'Report whether the lock is held.'
