"""Phase-aligned one-second heartbeat."""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from analog_clock.clock.timers import TimerHandle, TimerService
from analog_clock.errors import ClockError
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)

TICK_PERIOD_MS = 1000

# Land just after the second boundary, never just before it
ALIGNMENT_OFFSET_MS = 1


@dataclass(frozen=True)
class StartHeartbeat:
    """Message: the alignment delay has elapsed, start ticking."""


@dataclass(frozen=True)
class Tick:
    """Message: one heartbeat of the repeating timer."""


def initial_delay_ms(ms_into_second: int) -> int:
    """
    Milliseconds to wait so the first tick lands just past the next second.

    Args:
        ms_into_second: Milliseconds elapsed in the current second (0-999)

    Returns:
        Strictly positive delay
    """
    return TICK_PERIOD_MS + ALIGNMENT_OFFSET_MS - ms_into_second


class Scheduler:
    """
    Turns timers into messages for the clock's inbox.

    ``start()`` arms a one-shot alignment timer which posts StartHeartbeat.
    The owner handles that message by calling ``start_heartbeat()``, which
    arms the repeating timer posting Tick once per second. The heartbeat is
    never re-aligned afterwards.
    """

    def __init__(self, timers: TimerService, post: Callable[[object], object]):
        """
        Initialize scheduler.

        Args:
            timers: Timer service
            post: Delivers a message to the owner's inbox
        """
        self.timers = timers
        self._post = post
        self._align_handle: Optional[TimerHandle] = None
        self._tick_handle: Optional[TimerHandle] = None
        self._started = False
        self._stopped = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._tick_handle is not None and not self._stopped

    def start(self, now: Optional[datetime] = None) -> int:
        """
        Arm the alignment timer.

        Args:
            now: Start instant (defaults to the current time)

        Returns:
            Alignment delay in milliseconds

        Raises:
            ClockError: If the scheduler was already started or stopped
            TimerError: If the timer could not be created
        """
        with self._lock:
            if self._started or self._stopped:
                raise ClockError("Clock heartbeat already started")
            self._started = True

        moment = now or datetime.now()
        delay = initial_delay_ms(moment.microsecond // 1000)
        handle = self.timers.schedule_once(delay, self._on_aligned)
        if self._keep(handle, "_align_handle"):
            logger.info(f"Clock heartbeat aligns in {delay} ms")
        return delay

    def start_heartbeat(self) -> None:
        """
        Arm the repeating one-second timer.

        Raises:
            TimerError: If the timer could not be created
        """
        with self._lock:
            if self._stopped or self._tick_handle is not None:
                return

        handle = self.timers.schedule_repeating(TICK_PERIOD_MS, self._on_tick)
        if self._keep(handle, "_tick_handle"):
            logger.debug("Clock heartbeat started")

    def stop(self) -> None:
        """Cancel all timers; late callbacks are ignored."""
        with self._lock:
            self._stopped = True
            handles = (self._align_handle, self._tick_handle)
            self._align_handle = None
            self._tick_handle = None

        for handle in handles:
            if handle is not None:
                self.timers.cancel(handle)

    def _keep(self, handle: TimerHandle, attr: str) -> bool:
        # stop() may have run while the timer was being created
        with self._lock:
            if not self._stopped:
                setattr(self, attr, handle)
                return True
        self.timers.cancel(handle)
        return False

    def _on_aligned(self) -> None:
        if not self._stopped:
            self._post(StartHeartbeat())

    def _on_tick(self) -> None:
        if not self._stopped:
            self._post(Tick())
