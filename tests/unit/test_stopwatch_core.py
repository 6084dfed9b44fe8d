# tests/unit/test_stopwatch_core.py
import random

import pytest

from stopwatch_core import (
    QUANTUM_MS,
    LapRecord,
    Stopwatch,
    StopwatchSnapshot,
    format_elapsed,
    hand_angles,
)


def _tick(stopwatch: Stopwatch, count: int) -> None:
    for _ in range(count):
        stopwatch.advance(QUANTUM_MS)


@pytest.mark.parametrize(
    "elapsed_ms, expected",
    [
        (0, "00:00:000"),
        (1000, "00:01:000"),
        (61234, "01:01:234"),
        (3599999, "59:59:999"),
        (6000000, "100:00:000"),
        (999, "00:00:999"),
    ],
)
def test_format_elapsed(elapsed_ms, expected):
    assert format_elapsed(elapsed_ms) == expected


def test_format_elapsed_rejects_negative():
    with pytest.raises(ValueError):
        format_elapsed(-1)


def test_hand_angles_step_on_whole_units():
    assert hand_angles(0) == (0.0, 0.0)
    assert hand_angles(1999) == (0.0, 6.0)
    assert hand_angles(61234) == (6.0, 6.0)
    # Minute hand wraps every hour.
    assert hand_angles(3_600_000 + 15_000) == (0.0, 90.0)


def test_new_stopwatch_is_idle_and_empty():
    stopwatch = Stopwatch()
    assert stopwatch.snapshot() == StopwatchSnapshot(0, False, ())


def test_start_tick_pause_lap_reset_scenario():
    stopwatch = Stopwatch()
    stopwatch.start()
    _tick(stopwatch, 3)
    assert stopwatch.elapsed_ms == 30

    stopwatch.pause()
    record = stopwatch.lap()
    assert record == LapRecord(index=1, display_text=format_elapsed(30))
    assert stopwatch.laps == [record]

    stopwatch.reset()
    assert stopwatch.snapshot() == StopwatchSnapshot(0, False, ())


def test_advance_is_ignored_while_idle():
    stopwatch = Stopwatch()
    _tick(stopwatch, 5)
    assert stopwatch.elapsed_ms == 0


def test_advance_rejects_negative_quantum():
    stopwatch = Stopwatch()
    stopwatch.start()
    with pytest.raises(ValueError):
        stopwatch.advance(-10)
    assert stopwatch.elapsed_ms == 0


def test_laps_after_pause_never_change_elapsed():
    stopwatch = Stopwatch()
    stopwatch.start()
    _tick(stopwatch, 7)
    stopwatch.pause()
    for _ in range(5):
        stopwatch.lap()
        assert stopwatch.elapsed_ms == 70
        assert stopwatch.is_running is False


def test_repeated_laps_are_dense_and_identical():
    stopwatch = Stopwatch()
    stopwatch.start()
    _tick(stopwatch, 12)
    laps = [stopwatch.lap() for _ in range(4)]

    assert [lap.index for lap in laps] == [1, 2, 3, 4]
    assert {lap.display_text for lap in laps} == {"00:00:120"}
    assert stopwatch.is_running is True


def test_lap_while_idle_captures_current_display():
    stopwatch = Stopwatch()
    assert stopwatch.lap().label() == "Lap 1: 00:00:000"


def test_reset_while_running_stops():
    stopwatch = Stopwatch()
    stopwatch.start()
    _tick(stopwatch, 2)
    stopwatch.lap()
    stopwatch.reset()

    assert stopwatch.elapsed_ms == 0
    assert stopwatch.laps == []
    assert stopwatch.is_running is False
    _tick(stopwatch, 2)
    assert stopwatch.elapsed_ms == 0


def test_start_and_pause_are_idempotent():
    stopwatch = Stopwatch()
    emitted = []
    stopwatch.subscribe(emitted.append)

    stopwatch.start()
    once = stopwatch.snapshot()
    stopwatch.start()
    assert stopwatch.snapshot() == once
    assert len(emitted) == 1

    stopwatch.pause()
    paused = stopwatch.snapshot()
    stopwatch.pause()
    assert stopwatch.snapshot() == paused
    assert len(emitted) == 2


def test_resume_continues_from_frozen_value():
    stopwatch = Stopwatch()
    stopwatch.start()
    _tick(stopwatch, 3)
    stopwatch.pause()
    stopwatch.start()
    _tick(stopwatch, 2)
    assert stopwatch.elapsed_ms == 50


def test_subscribers_receive_immutable_snapshots():
    stopwatch = Stopwatch()
    received = []
    stopwatch.subscribe(received.append)

    stopwatch.start()
    stopwatch.advance()
    stopwatch.lap()

    assert [s.elapsed_ms for s in received] == [0, 10, 10]
    assert received[1].laps == ()
    assert received[2].laps == (LapRecord(1, "00:00:010"),)
    with pytest.raises(AttributeError):
        received[0].elapsed_ms = 99


def test_unsubscribe_stops_notifications():
    stopwatch = Stopwatch()
    received = []
    unsubscribe = stopwatch.subscribe(received.append)
    stopwatch.start()
    unsubscribe()
    unsubscribe()
    stopwatch.pause()
    assert len(received) == 1


def test_subscriber_errors_propagate():
    stopwatch = Stopwatch()

    def broken(_snapshot):
        raise RuntimeError("render failed")

    stopwatch.subscribe(broken)
    with pytest.raises(RuntimeError):
        stopwatch.start()


def test_random_operation_sequences_keep_invariants():
    rng = random.Random(1234)
    stopwatch = Stopwatch()
    operations = [stopwatch.start, stopwatch.pause, stopwatch.reset, stopwatch.lap, stopwatch.advance]

    for _ in range(500):
        before = stopwatch.snapshot()
        operation = rng.choice(operations)
        operation()

        assert stopwatch.elapsed_ms >= 0
        assert [lap.index for lap in stopwatch.laps] == list(range(1, len(stopwatch.laps) + 1))
        if operation in (stopwatch.pause, stopwatch.reset):
            assert stopwatch.is_running is False
        if operation == stopwatch.lap:
            assert stopwatch.elapsed_ms == before.elapsed_ms
            assert stopwatch.is_running == before.is_running
        if before.is_running and operation == stopwatch.advance:
            assert stopwatch.elapsed_ms == before.elapsed_ms + QUANTUM_MS
