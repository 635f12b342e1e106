"""Cancellable repeating background task

Classes:
    RepeatingTask:
        Run a callable every `interval` seconds on a daemon thread until stopped.

Example:
    >>> task = RepeatingTask(300, cache.sweep, name='cache-sweeper')
    >>> task.start()
    >>> task.is_alive
    True
    >>> task.stop()
    >>> task.is_alive
    False
"""

import logging
import threading
from collections.abc import Callable


logger = logging.getLogger(__name__)


class RepeatingTask:
    """Invoke `function` every `interval` seconds on a daemon thread.

    The first invocation happens one full interval after `start()`. Exceptions
    raised by `function` are logged and the schedule keeps going. `stop()` wakes
    the thread immediately instead of waiting out the current interval.
    """

    def __init__(self, interval: float, function: Callable[[], object], name: str | None = None):
        if interval <= 0:
            raise ValueError(f'Interval must be a positive number of seconds (given value: {interval}).')

        self.interval = interval
        self.function = function
        self.name = name or getattr(function, '__qualname__', 'repeating-task')
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_alive:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug('Started repeating task.', extra={'task': self.name, 'interval': self.interval})

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stopped.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug('Stopped repeating task.', extra={'task': self.name})

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self.function()
            except Exception:
                logger.exception('Repeating task iteration failed.', extra={'task': self.name})
