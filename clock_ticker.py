"""Periodic Qt timer that advances a running stopwatch by a fixed quantum."""

from __future__ import annotations

import logging

from PyQt5.QtCore import QObject, QTimer

from stopwatch_core import QUANTUM_MS, Stopwatch, StopwatchSnapshot

logger = logging.getLogger(__name__)


class ClockTicker(QObject):
    """Adds ``quantum_ms`` to the stopwatch every ``quantum_ms`` while it runs.

    The timer follows the stopwatch's snapshots: it starts when a snapshot
    reports running and stops on the first idle one. Each timeout re-checks
    the running flag, so a pause lands within one quantum. Ticks are not
    anchored to the wall clock; scheduler jitter accumulates as drift.
    """

    def __init__(self, stopwatch: Stopwatch, quantum_ms: int = QUANTUM_MS, parent: QObject | None = None):
        super().__init__(parent)
        self.stopwatch = stopwatch
        self.quantum_ms = quantum_ms

        self.timer = QTimer(self)
        self.timer.setInterval(quantum_ms)
        self.timer.timeout.connect(self.tick)

        self._unsubscribe = stopwatch.subscribe(self._on_snapshot)
        self.destroyed.connect(lambda _obj=None, release=self._unsubscribe: release())
        if stopwatch.is_running:
            self._activate()

    def is_active(self) -> bool:
        return self.timer.isActive()

    def _activate(self) -> None:
        if self.timer.isActive():
            return
        self.timer.start()
        logger.debug("ticker activated (%d ms quantum)", self.quantum_ms)

    def _deactivate(self) -> None:
        if not self.timer.isActive():
            return
        self.timer.stop()
        logger.debug("ticker deactivated at %d ms", self.stopwatch.elapsed_ms)

    def _on_snapshot(self, snapshot: StopwatchSnapshot) -> None:
        if snapshot.is_running:
            self._activate()
        else:
            self._deactivate()

    def tick(self) -> None:
        if not self.stopwatch.is_running:
            self._deactivate()
            return
        self.stopwatch.advance(self.quantum_ms)

    def detach(self) -> None:
        self._deactivate()
        self._unsubscribe()
