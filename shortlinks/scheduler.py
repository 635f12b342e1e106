"""Periodic cleanup of expired short URLs

Classes:
    CleanupResult:
        Outcome of a single cleanup run.

    CleanupScheduler:
        Run `ShortURLService.cleanup_expired_urls()` on a fixed period, with a
        non-blocking guard so that at most one sweep executes at a time.

NOTE: `is_running` reports a sweep in progress, `is_scheduled` reports whether
      the periodic timer is active. They are independent.

Example:
    >>> scheduler = CleanupScheduler(service, interval_seconds=1800)
    >>> scheduler.start()
    >>> scheduler.status()['is_scheduled']
    True
    >>> scheduler.run_manual_cleanup().cleaned_count
    0
    >>> scheduler.stop()
"""

import time
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Any

from shortlinks.constants import TTL
from shortlinks.service import ShortURLService
from shortlinks.utils.scheduling import RepeatingTask


logger = logging.getLogger(__name__)

SUCCESS = 'success'
SKIPPED = 'skipped'
ERROR = 'error'


@dataclass(frozen=True)
class CleanupResult:
    status: str  # SUCCESS or SKIPPED
    cleaned_count: int = 0
    duration_ms: float = 0.0

    @property
    def skipped(self) -> bool:
        return self.status == SKIPPED


class CleanupScheduler:
    """Cancellable periodic cleanup with a re-entrancy guard

    Attributes:
        service (ShortURLService):
            Service whose `cleanup_expired_urls()` is invoked.
        interval_seconds (int | float):
            Period between two scheduled runs.
        last_run (Optional[datetime]):
            Completion time of the last successful run.
        next_run (Optional[datetime]):
            Expected time of the next scheduled run, None when not scheduled.
    """

    def __init__(self, service: ShortURLService, interval_seconds: int | float = TTL.CLEANUP_INTERVAL):
        self.service = service
        self.interval_seconds = interval_seconds
        self.last_run: datetime | None = None
        self.next_run: datetime | None = None
        self._guard = threading.Lock()
        self._task = RepeatingTask(interval_seconds, self.run_cleanup, name='cleanup-scheduler')

    @property
    def is_running(self) -> bool:
        return self._guard.locked()

    @property
    def is_scheduled(self) -> bool:
        return self._task.is_alive

    def start(self) -> None:
        if self.is_scheduled:
            return
        self._task.start()
        self._schedule_next_run()
        logger.info(
            'Cleanup scheduler started.',
            extra={'interval_seconds': self.interval_seconds, 'next_run': self.next_run},
        )

    def stop(self) -> None:
        self._task.stop()
        self.next_run = None
        logger.info('Cleanup scheduler stopped.')

    def run_cleanup(self) -> CleanupResult | None:
        """Scheduled entry point: failures are logged and never propagated."""
        try:
            result = self._run_guarded(trigger='scheduled')
        except Exception as error:
            logger.exception(
                'Scheduled cleanup failed.',
                extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
            )
            result = None

        if self.is_scheduled:
            self._schedule_next_run()
        return result

    def run_manual_cleanup(self) -> CleanupResult:
        """Run a cleanup right now, unless one is already in progress

        Returns:
            CleanupResult: SUCCESS with the number of deleted short URLs, or SKIPPED.

        Raises:
            Exception:
                Whatever the cleanup raised, so the caller can report it.
        """
        logger.info('Manual cleanup requested.')
        return self._run_guarded(trigger='manual')

    def status(self) -> dict[str, Any]:
        return {
            'is_running': self.is_running,
            'is_scheduled': self.is_scheduled,
            'last_run': self.last_run.isoformat() if self.last_run else None,
            'next_run': self.next_run.isoformat() if self.next_run else None,
            'interval_seconds': self.interval_seconds,
        }

    def _run_guarded(self, trigger: str) -> CleanupResult:
        if not self._guard.acquire(blocking=False):
            logger.warning('Cleanup already running, skipping this run.', extra={'event': SKIPPED, 'trigger': trigger})
            return CleanupResult(status=SKIPPED)

        try:
            started = time.perf_counter()
            cleaned_count = self.service.cleanup_expired_urls()
            duration_ms = (time.perf_counter() - started) * 1000
            self.last_run = datetime.now(UTC)
        finally:
            self._guard.release()

        logger.info(
            'Cleanup completed.',
            extra={'event': SUCCESS, 'trigger': trigger, 'cleaned_count': cleaned_count, 'duration_ms': round(duration_ms, 3)},
        )
        return CleanupResult(status=SUCCESS, cleaned_count=cleaned_count, duration_ms=duration_ms)

    def _schedule_next_run(self) -> None:
        self.next_run = datetime.now(UTC) + timedelta(seconds=self.interval_seconds)
