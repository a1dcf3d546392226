"""Tests for the window reset scheduler."""

import logging
import threading
import time
from collections.abc import Callable, Generator
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from crpt_client.errors import InterruptedWait
from crpt_client.quota.gate import AdmissionGate
from crpt_client.quota.scheduler import WindowResetScheduler


class TestWindowResetScheduler:
    """Tests for WindowResetScheduler."""

    @pytest.fixture
    def gate(self) -> AdmissionGate:
        return AdmissionGate(2)

    @pytest.fixture
    def scheduler(
        self, gate: AdmissionGate
    ) -> Generator[WindowResetScheduler, None, None]:
        """Scheduler with a short window, stopped after the test."""
        scheduler = WindowResetScheduler(gate, timedelta(milliseconds=200))
        yield scheduler
        scheduler.stop()

    def test_not_running_before_start(self, scheduler: WindowResetScheduler) -> None:
        assert scheduler.running is False
        assert scheduler.firings == 0
        assert scheduler.window == timedelta(milliseconds=200)

    def test_first_firing_on_start(self, gate: AdmissionGate) -> None:
        """Test that start() resets immediately, before any later window."""
        gate.acquire()
        scheduler = WindowResetScheduler(gate, timedelta(hours=1))
        try:
            scheduler.start()

            assert scheduler.running is True
            assert scheduler.firings == 1
            assert gate.count == 0
        finally:
            scheduler.stop()

    def test_periodic_firings(
        self,
        scheduler: WindowResetScheduler,
        wait_until: Callable[..., bool],
    ) -> None:
        """Test that resets keep firing every window."""
        scheduler.start()

        assert wait_until(lambda: scheduler.firings >= 3)

    def test_reset_admits_blocked_caller(
        self,
        gate: AdmissionGate,
        scheduler: WindowResetScheduler,
        wait_until: Callable[..., bool],
    ) -> None:
        """Test that a blocked caller gets through after the next firing."""
        scheduler.start()
        admitted = threading.Event()

        def call() -> None:
            gate.acquire()
            admitted.set()

        gate.acquire()
        gate.acquire()
        threading.Thread(target=call, daemon=True).start()

        assert admitted.wait(timeout=5)
        assert wait_until(lambda: scheduler.firings >= 2)

    def test_stop_cancels_future_firings(
        self,
        scheduler: WindowResetScheduler,
        wait_until: Callable[..., bool],
    ) -> None:
        """Test that no reset fires after stop()."""
        scheduler.start()
        assert wait_until(lambda: scheduler.firings >= 2)

        scheduler.stop()
        time.sleep(0.05)
        firings = scheduler.firings

        assert scheduler.running is False
        assert not wait_until(lambda: scheduler.firings > firings, timeout=0.6)

    def test_stop_is_idempotent(self, scheduler: WindowResetScheduler) -> None:
        scheduler.stop()
        scheduler.start()
        scheduler.stop()
        scheduler.stop()

        assert scheduler.running is False

    def test_stop_leaves_waiters_blocked(
        self,
        gate: AdmissionGate,
        scheduler: WindowResetScheduler,
        wait_until: Callable[..., bool],
    ) -> None:
        """Test that stopping the scheduler does not wake waiters."""
        scheduler.start()
        scheduler.stop()
        gate.acquire()
        gate.acquire()

        interrupted = threading.Event()

        def call() -> None:
            try:
                gate.acquire()
            except InterruptedWait:
                interrupted.set()

        thread = threading.Thread(target=call, daemon=True)
        thread.start()

        assert wait_until(lambda: gate.waiting == 1)
        thread.join(timeout=0.5)
        assert thread.is_alive()

        gate.close()
        thread.join(timeout=5)
        assert interrupted.is_set()

    def test_double_start_warns(
        self, gate: AdmissionGate, caplog: pytest.LogCaptureFixture
    ) -> None:
        scheduler = WindowResetScheduler(gate, timedelta(hours=1))
        try:
            scheduler.start()
            with caplog.at_level(logging.WARNING):
                scheduler.start()

            assert scheduler.firings == 1
            assert "already running" in caplog.text
        finally:
            scheduler.stop()

    def test_fire_swallows_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a failing reset is logged and does not propagate."""
        gate = MagicMock(spec=AdmissionGate)
        gate.reset.side_effect = RuntimeError("boom")
        scheduler = WindowResetScheduler(gate, timedelta(seconds=1))

        with caplog.at_level(logging.ERROR):
            scheduler.fire()

        assert scheduler.firings == 0
        assert "Window reset failed" in caplog.text

    def test_failing_firing_does_not_cancel_schedule(
        self, wait_until: Callable[..., bool]
    ) -> None:
        """Test that resets keep running after one of them fails."""
        gate = MagicMock(spec=AdmissionGate)
        gate.reset.side_effect = [RuntimeError("boom"), 0, 0, 0, 0, 0, 0, 0, 0, 0]
        scheduler = WindowResetScheduler(gate, timedelta(milliseconds=100))
        try:
            scheduler.start()
            assert wait_until(lambda: scheduler.firings >= 2)
        finally:
            scheduler.stop()

    def test_concurrent_fire_counts_every_firing(self, gate: AdmissionGate) -> None:
        """Test that firings from several threads are all counted."""
        scheduler = WindowResetScheduler(gate, timedelta(hours=1))
        barrier = threading.Barrier(8)

        def call() -> None:
            barrier.wait()
            for _ in range(250):
                scheduler.fire()

        threads = [threading.Thread(target=call) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert scheduler.firings == 2000
