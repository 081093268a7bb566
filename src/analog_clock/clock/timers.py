"""Timer service used to drive the clock heartbeat."""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from analog_clock.errors import TimerError
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """Handle to a scheduled timer; cancelling it is idempotent."""

    def __init__(self, repeating: bool = False):
        self.repeating = repeating
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class TimerService(ABC):
    """Abstract source of one-shot and repeating timers."""

    @abstractmethod
    def schedule_once(self, delay_ms: int, callback: Callback) -> TimerHandle:
        """
        Run a callback once after a delay.

        Args:
            delay_ms: Delay in milliseconds
            callback: Function to call

        Returns:
            Handle that can be passed to cancel()

        Raises:
            TimerError: If the timer could not be created
        """
        pass

    @abstractmethod
    def schedule_repeating(self, period_ms: int, callback: Callback) -> TimerHandle:
        """
        Run a callback every period until cancelled.

        Args:
            period_ms: Period in milliseconds
            callback: Function to call

        Returns:
            Handle that can be passed to cancel()

        Raises:
            TimerError: If the timer could not be created
        """
        pass

    @abstractmethod
    def cancel(self, handle: TimerHandle) -> None:
        """Stop a timer. Cancelling twice is harmless."""
        pass


class ThreadingTimerService(TimerService):
    """
    Timers backed by daemon threads.

    Repeating timers keep a fixed schedule relative to their start, so a slow
    callback delays one firing but does not shift the ones after it.
    """

    def schedule_once(self, delay_ms: int, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise TimerError(f"Delay must not be negative, got {delay_ms} ms")

        handle = TimerHandle()

        def run() -> None:
            if not handle._cancelled.wait(delay_ms / 1000):
                self._fire(callback)

        self._start(handle, run, "clock-once")
        return handle

    def schedule_repeating(self, period_ms: int, callback: Callback) -> TimerHandle:
        if period_ms <= 0:
            raise TimerError(f"Period must be positive, got {period_ms} ms")

        handle = TimerHandle(repeating=True)
        period = period_ms / 1000

        def run() -> None:
            deadline = time.monotonic() + period
            while not handle._cancelled.wait(max(0.0, deadline - time.monotonic())):
                self._fire(callback)
                deadline += period

        self._start(handle, run, "clock-interval")
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        handle._cancelled.set()

    def _start(self, handle: TimerHandle, target: Callback, name: str) -> None:
        thread = threading.Thread(target=target, name=name, daemon=True)
        try:
            thread.start()
        except RuntimeError as e:
            raise TimerError(f"Could not start timer thread: {e}") from e
        handle._thread = thread

    @staticmethod
    def _fire(callback: Callback) -> None:
        try:
            callback()
        except Exception as e:
            logger.error(f"Timer callback failed: {e}", exc_info=True)
