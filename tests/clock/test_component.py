"""Tests for the analog clock component."""

import math
import threading
from unittest.mock import MagicMock

import pytest

from analog_clock.clock.component import AnalogClock
from analog_clock.clock.scheduler import StartHeartbeat, Tick
from analog_clock.errors import ClockError, ConfigurationError, TimerError


def test_construction_draws_current_time(timers, fake_now):
    on_draw = MagicMock()

    clock = AnalogClock({"show_seconds": True}, timers=timers, on_draw=on_draw, now=fake_now)

    on_draw.assert_called_once_with(clock.drawing)
    assert clock.state.last_resolved_sample.second == 1
    assert clock.drawing.get("second_hand").rotate == pytest.approx(2 * math.pi / 60)
    assert timers.once == []


def test_invalid_options_rejected(timers, fake_now):
    with pytest.raises(ConfigurationError):
        AnalogClock({"radius": "huge"}, timers=timers, now=fake_now)
    with pytest.raises(ConfigurationError):
        AnalogClock({"colour": "red"}, timers=timers, now=fake_now)


def test_start_aligns_heartbeat(timers, fake_now):
    clock = AnalogClock(timers=timers, now=fake_now)

    delay = clock.start(background=False)

    assert delay == 751
    assert len(timers.once) == 1


def test_alignment_starts_heartbeat_and_updates(timers, fake_now):
    on_draw = MagicMock()
    clock = AnalogClock({"show_seconds": True}, timers=timers, on_draw=on_draw, now=fake_now)
    clock.start(background=False)

    fake_now.advance(1)
    timers.fire_once()
    handled = clock.drain()

    assert handled == 1
    assert len(timers.repeating) == 1
    assert on_draw.call_count == 2
    assert clock.state.last_resolved_sample.second == 2


def test_ticks_within_a_minute_do_not_redraw(timers, fake_now):
    on_draw = MagicMock()
    clock = AnalogClock(timers=timers, on_draw=on_draw, now=fake_now)
    drawing = clock.drawing

    for _ in range(3):
        fake_now.advance(1)
        clock.post(Tick())
    clock.drain()

    assert on_draw.call_count == 1
    assert clock.drawing is drawing


def test_ticks_processed_in_order(timers, fake_now):
    clock = AnalogClock({"show_seconds": True}, timers=timers, now=fake_now)
    patches = []

    for _ in range(3):
        fake_now.advance(1)
        patches.append(clock.handle(Tick()))

    seconds = [dict(patch)["second_hand"] for patch in patches]
    assert seconds == sorted(seconds)
    assert clock.drawing.get("second_hand").rotate == seconds[-1]


def test_minute_change_rotates_hour_and_minute_hands(timers, fake_now):
    clock = AnalogClock(timers=timers, now=fake_now)

    fake_now.advance(60)
    patch = clock.handle(Tick())

    assert [hand for hand, _ in patch] == ["hour_hand", "minute_hand"]
    assert clock.drawing.get("minute_hand").rotate == dict(patch)["minute_hand"]


def test_failed_publish_keeps_previous_state(timers, fake_now):
    on_draw = MagicMock()
    clock = AnalogClock({"show_seconds": True}, timers=timers, on_draw=on_draw, now=fake_now)
    previous_state, previous_drawing = clock.state, clock.drawing

    on_draw.side_effect = OSError("disk full")
    fake_now.advance(1)
    assert clock.handle(Tick()) is None
    assert clock.state is previous_state
    assert clock.drawing is previous_drawing

    on_draw.side_effect = None
    assert clock.handle(Tick()) is not None
    assert clock.state.last_resolved_sample.second == 2


def test_stop_drops_later_messages(timers, fake_now):
    clock = AnalogClock({"show_seconds": True}, timers=timers, now=fake_now)
    clock.start(background=False)
    timers.fire_once()
    clock.drain()
    state = clock.state

    clock.stop()
    fake_now.advance(1)
    timers.fire_repeating()

    assert clock.post(Tick()) is False
    assert clock.drain() == 0
    assert clock.state is state
    assert clock.stopped


def test_background_consumer_handles_heartbeat(timers, fake_now):
    redrawn = threading.Event()
    drawings = []

    def on_draw(drawing):
        drawings.append(drawing)
        if len(drawings) == 2:
            redrawn.set()

    clock = AnalogClock({"show_seconds": True}, timers=timers, on_draw=on_draw, now=fake_now)
    clock.start()
    try:
        fake_now.advance(1)
        timers.fire_once()
        assert redrawn.wait(2.0)
    finally:
        clock.stop()

    assert len(timers.repeating) == 1
    assert clock.state.last_resolved_sample.second == 2


def test_heartbeat_failure_stops_clock(timers, fake_now):
    timers.fail_repeating = True
    clock = AnalogClock(timers=timers, now=fake_now)
    clock.start()

    timers.fire_once()

    with pytest.raises(TimerError):
        clock.join(poll=0.05)
    assert clock.stopped


def test_alignment_failure_propagates_from_start(timers, fake_now):
    timers.fail_once = True
    clock = AnalogClock(timers=timers, now=fake_now)

    with pytest.raises(TimerError):
        clock.start(background=False)


def test_unknown_message_ignored(timers, fake_now):
    clock = AnalogClock(timers=timers, now=fake_now)
    assert clock.handle("hello") is None


def test_start_twice_rejected(timers, fake_now):
    clock = AnalogClock(timers=timers, now=fake_now)
    clock.start(background=False)

    with pytest.raises(ClockError):
        clock.start(background=False)

    timers.fire_once()
    clock.drain()
    clock.stop()

    assert len(timers.repeating) == 1
    assert all(handle.cancelled for _, _, handle in timers.repeating)


def test_start_after_stop_rejected(timers, fake_now):
    clock = AnalogClock(timers=timers, now=fake_now)
    clock.stop()

    with pytest.raises(ClockError):
        clock.start(background=False)
    assert timers.once == []


def test_stop_during_heartbeat_creation_cancels_timer(timers, fake_now):
    timers.block_repeating = True
    clock = AnalogClock(timers=timers, now=fake_now)
    clock.start(background=False)
    timers.fire_once()

    worker = threading.Thread(target=clock.drain)
    worker.start()
    assert timers.repeating_entered.wait(2.0)

    clock.stop()
    timers.release_repeating.set()
    worker.join(2.0)

    assert [handle.cancelled for _, _, handle in timers.repeating] == [True]
