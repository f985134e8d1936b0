import logging
import threading
from datetime import date, datetime
from typing import Callable

from booking.core import config
from booking.services.lifecycle import run_daily_purge, run_sweep
from booking.store import CollectionStore

logger = logging.getLogger(__name__)


class SweepScheduler:
    """Background thread running the slot sweep and the daily past-day purge.

    The first tick happens ``startup_delay_seconds`` after ``start()``, then
    every ``interval_minutes``. The purge runs on the first tick of each new
    local date.
    """

    def __init__(
        self,
        store: CollectionStore,
        interval_minutes: int = config.SWEEP_INTERVAL_MINUTES,
        startup_delay_seconds: int = config.SWEEP_STARTUP_DELAY_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.interval_minutes = interval_minutes
        self.startup_delay_seconds = startup_delay_seconds
        self.clock = clock
        self.last_purge_date: date | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        now = self.clock()
        if self.last_purge_date != now.date():
            if run_daily_purge(self.store, now.date()) is not None:
                self.last_purge_date = now.date()
        run_sweep(self.store, now)

    def _run(self) -> None:
        logger.info(
            'Sweep scheduler started. Interval=%smin, first run in %ss',
            self.interval_minutes,
            self.startup_delay_seconds,
        )
        if self._stop.wait(self.startup_delay_seconds):
            return

        while True:
            try:
                self.tick()
            except Exception as e:
                logger.error('Sweep tick failed (%s: %s)', type(e).__name__, e)
            if self._stop.wait(self.interval_minutes * 60):
                return

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='sweep-scheduler', daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info('Sweep scheduler stopped')
