"""APScheduler-based window reset job."""

import logging
import threading
from datetime import datetime, timedelta

from apscheduler.executors.pool import ThreadPoolExecutor as APSThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from crpt_client.quota.gate import AdmissionGate

logger = logging.getLogger(__name__)

RESET_JOB_ID = "window-reset"


class WindowResetScheduler:
    """
    Periodically resets an admission gate.

    The first reset happens inside start(); later resets run every
    ``window`` on a single scheduler worker thread, so two firings never
    overlap.
    """

    def __init__(
        self,
        gate: AdmissionGate,
        window: timedelta,
        timezone: str = "UTC",
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            gate: Gate whose count is reset on every firing
            window: Time between firings
            timezone: Scheduler timezone
        """
        self._gate = gate
        self._window = window
        self._timezone = timezone
        self._scheduler: BackgroundScheduler | None = None
        self._firings = 0
        self._firings_lock = threading.Lock()

    @property
    def window(self) -> timedelta:
        return self._window

    @property
    def firings(self) -> int:
        """Number of completed resets."""
        return self._firings

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def _create_scheduler(self) -> BackgroundScheduler:
        executors = {
            "default": APSThreadPoolExecutor(max_workers=1),
        }

        job_defaults = {
            "coalesce": True,  # Collapse missed resets into one
            "max_instances": 1,
            "misfire_grace_time": None,
        }

        return BackgroundScheduler(
            executors=executors,
            job_defaults=job_defaults,
            timezone=self._timezone,
        )

    def fire(self) -> None:
        """Reset the gate and wake all waiters. Never raises."""
        try:
            previous = self._gate.reset()
            with self._firings_lock:
                self._firings += 1
            logger.info(f"Request count reset to 0 (was {previous})")
        except Exception:
            logger.exception("Window reset failed")

    def start(self) -> None:
        """Fire once immediately, then every window."""
        if self.running:
            logger.warning("Window reset scheduler is already running")
            return

        self.fire()

        self._scheduler = self._create_scheduler()
        self._scheduler.add_job(
            self.fire,
            trigger=IntervalTrigger(seconds=self._window.total_seconds()),
            id=RESET_JOB_ID,
            name=RESET_JOB_ID,
            next_run_time=datetime.now(self._scheduler.timezone) + self._window,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            f"Window reset scheduler started, interval={self._window.total_seconds()}s"
        )

    def stop(self) -> None:
        """Cancel all future resets. Blocked waiters are left blocked."""
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Window reset scheduler stopped")
        self._scheduler = None
