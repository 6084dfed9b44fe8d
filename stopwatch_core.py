"""Stopwatch state machine, lap records and elapsed-time formatting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

QUANTUM_MS = 10

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60_000


def format_elapsed(elapsed_ms: int) -> str:
    """Render milliseconds as ``MM:SS:mmm``; minutes keep growing past 99."""
    if elapsed_ms < 0:
        raise ValueError(f"elapsed time must be non-negative, got {elapsed_ms}")
    minutes = elapsed_ms // MS_PER_MINUTE
    seconds = (elapsed_ms % MS_PER_MINUTE) // MS_PER_SECOND
    millis = elapsed_ms % MS_PER_SECOND
    return f"{minutes:02}:{seconds:02}:{millis:03}"


def hand_angles(elapsed_ms: int) -> tuple[float, float]:
    """Return ``(minute_deg, second_deg)`` clockwise from twelve o'clock."""
    seconds = (elapsed_ms % MS_PER_MINUTE) // MS_PER_SECOND
    minutes = elapsed_ms // MS_PER_MINUTE
    return float((minutes % 60) * 6), float((seconds % 60) * 6)


@dataclass(frozen=True)
class LapRecord:
    index: int
    display_text: str

    def label(self) -> str:
        return f"Lap {self.index}: {self.display_text}"


@dataclass(frozen=True)
class StopwatchSnapshot:
    elapsed_ms: int
    is_running: bool
    laps: tuple[LapRecord, ...]


Subscriber = Callable[[StopwatchSnapshot], None]


class Stopwatch:
    """Elapsed time, running flag and laps for one session.

    Every mutation pushes a fresh :class:`StopwatchSnapshot` to subscribers,
    in subscription order. Operations that change nothing (``start`` while
    running, ``pause`` while idle) emit nothing.
    """

    def __init__(self) -> None:
        self.elapsed_ms = 0
        self.is_running = False
        self.laps: list[LapRecord] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self) -> StopwatchSnapshot:
        return StopwatchSnapshot(self.elapsed_ms, self.is_running, tuple(self.laps))

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    def start(self) -> None:
        if self.is_running:
            return
        self.is_running = True
        logger.debug("stopwatch started at %d ms", self.elapsed_ms)
        self._publish()

    def pause(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        logger.debug("stopwatch paused at %d ms", self.elapsed_ms)
        self._publish()

    def reset(self) -> None:
        self.is_running = False
        self.elapsed_ms = 0
        self.laps = []
        logger.debug("stopwatch reset")
        self._publish()

    def lap(self) -> LapRecord:
        record = LapRecord(index=len(self.laps) + 1, display_text=format_elapsed(self.elapsed_ms))
        self.laps.append(record)
        logger.debug("recorded %s", record.label())
        self._publish()
        return record

    def advance(self, quantum_ms: int = QUANTUM_MS) -> None:
        if quantum_ms < 0:
            raise ValueError(f"quantum must be non-negative, got {quantum_ms}")
        # A tick already queued when pause() ran must not move a frozen clock.
        if not self.is_running:
            return
        self.elapsed_ms += quantum_ms
        self._publish()
