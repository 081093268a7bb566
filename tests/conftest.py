import threading
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from analog_clock.clock.timers import TimerHandle, TimerService
from analog_clock.config.settings import Settings
from analog_clock.errors import TimerError


class FakeTimerService(TimerService):
    """Timer service whose timers only fire when a test says so."""

    def __init__(self):
        self.once = []
        self.repeating = []
        self.cancelled = []
        self.fail_once = False
        self.fail_repeating = False
        self.block_repeating = False
        self.repeating_entered = threading.Event()
        self.release_repeating = threading.Event()

    def schedule_once(self, delay_ms, callback):
        if self.fail_once:
            raise TimerError("no timers available")
        handle = TimerHandle()
        self.once.append((delay_ms, callback, handle))
        return handle

    def schedule_repeating(self, period_ms, callback):
        if self.block_repeating:
            self.repeating_entered.set()
            self.release_repeating.wait(5.0)
        if self.fail_repeating:
            raise TimerError("no timers available")
        handle = TimerHandle(repeating=True)
        self.repeating.append((period_ms, callback, handle))
        return handle

    def cancel(self, handle):
        handle._cancelled.set()
        self.cancelled.append(handle)

    def fire_once(self):
        """Fire every pending one-shot timer (even cancelled ones, like a late thread)."""
        pending, self.once = self.once, []
        for _, callback, _ in pending:
            callback()

    def fire_repeating(self):
        """Fire every repeating timer once."""
        for _, callback, _ in self.repeating:
            callback()


class FakeNow:
    """Callable wall clock that tests move by hand."""

    def __init__(self, value: datetime):
        self.value = value
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.value

    def advance(self, seconds: float = 1) -> None:
        self.value += timedelta(seconds=seconds)


@pytest.fixture(scope="session")
def test_settings(tmp_path_factory):
    """Override settings for tests."""
    return Settings(
        radius=50,
        show_seconds=True,
        svg_output_path=tmp_path_factory.mktemp("cache") / "clock.svg",
        log_file=tmp_path_factory.mktemp("logs") / "test.log",
    )


@pytest.fixture(scope="session", autouse=True)
def mock_settings(test_settings):
    """Patch get_settings to return test settings."""
    with patch("analog_clock.config.get_settings", return_value=test_settings):
        yield


@pytest.fixture
def timers():
    return FakeTimerService()


@pytest.fixture
def fake_now():
    return FakeNow(datetime(2024, 3, 9, 10, 15, 1, 250000))
