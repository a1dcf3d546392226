"""
Admission gate for per-window request quotas.

Callers pass through :meth:`AdmissionGate.acquire` before doing any work
that counts against the quota. Capacity is freed only by :meth:`reset`,
never by the caller finishing its request.
"""

from dataclasses import dataclass
from typing import Any
import logging
import threading

from crpt_client.errors import ConfigurationError, InterruptedWait

logger = logging.getLogger(__name__)


@dataclass
class GateStatus:
    """Point-in-time snapshot of an admission gate."""

    limit: int
    """Maximum admissions per window."""

    admitted: int
    """Admissions granted since the last reset."""

    waiting: int
    """Threads currently blocked in acquire()."""

    closed: bool
    """Whether the gate rejects all callers."""

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.admitted)

    def to_dict(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "admitted": self.admitted,
            "remaining": self.remaining,
            "waiting": self.waiting,
            "closed": self.closed,
        }


class AdmissionGate:
    """
    Blocking counter that admits at most ``limit`` callers per window.

    The counter and the wait condition share a single lock. Waiters always
    re-check the counter after waking, so a broadcast reset lets exactly as
    many of them through as there is capacity.
    """

    def __init__(self, limit: int) -> None:
        """
        Initialize the gate.

        Args:
            limit: Maximum admissions between two resets

        Raises:
            ConfigurationError: If limit is not a positive integer
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigurationError(f"Request limit must be a positive integer, got {limit!r}")
        self._limit = limit
        self._count = 0
        self._waiting = 0
        self._closed = False
        self._condition = threading.Condition()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def count(self) -> int:
        """Admissions granted since the last reset."""
        with self._condition:
            return self._count

    @property
    def waiting(self) -> int:
        """Number of threads blocked in acquire()."""
        with self._condition:
            return self._waiting

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def acquire(self) -> int:
        """
        Block until the caller can be counted against the quota.

        Returns:
            The admitted count including this caller

        Raises:
            InterruptedWait: If the gate is closed before the caller is admitted
        """
        with self._condition:
            self._waiting += 1
            try:
                while True:
                    if self._closed:
                        raise InterruptedWait("Admission gate closed while waiting")
                    if self._count < self._limit:
                        break
                    self._condition.wait()
            finally:
                self._waiting -= 1

            self._count += 1
            logger.debug(f"Request count incremented: {self._count}")
            return self._count

    def reset(self) -> int:
        """
        Zero the admitted count and wake every waiter.

        Returns:
            The count before the reset
        """
        with self._condition:
            previous = self._count
            self._count = 0
            self._condition.notify_all()
            return previous

    def close(self) -> None:
        """Reject all current and future callers with InterruptedWait."""
        with self._condition:
            if self._closed:
                return
            self._closed = True
            waiting = self._waiting
            self._condition.notify_all()
        logger.info(f"Admission gate closed, cancelling {waiting} waiting callers")

    def status(self) -> GateStatus:
        with self._condition:
            return GateStatus(
                limit=self._limit,
                admitted=self._count,
                waiting=self._waiting,
                closed=self._closed,
            )
