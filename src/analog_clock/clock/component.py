"""Analog clock component: owns the clock state and processes ticks in order."""

import queue
import threading
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from analog_clock.clock.drawing import Drawing, apply_patch, build_initial_drawing
from analog_clock.clock.engine import ClockState, Patch, update
from analog_clock.clock.options import ClockOptions, resolve_options
from analog_clock.clock.scheduler import Scheduler, StartHeartbeat, Tick
from analog_clock.clock.timers import ThreadingTimerService, TimerService
from analog_clock.errors import ClockError
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)

_STOP = object()


class AnalogClock:
    """
    A live analog clock.

    All state changes happen while handling messages from a FIFO inbox, one
    at a time, so a patch is applied and recorded before the next tick is
    looked at. Timer threads only post messages.

    Typical use:
        clock = AnalogClock({"radius": 50, "show_seconds": True}, on_draw=show)
        clock.start()
        ...
        clock.stop()
    """

    def __init__(
        self,
        options: Union[None, ClockOptions, Mapping[str, Any]] = None,
        timers: Optional[TimerService] = None,
        on_draw: Optional[Callable[[Drawing], None]] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the clock and draw the current time.

        Args:
            options: Construction options (see ClockOptions)
            timers: Timer service; defaults to thread-backed timers
            on_draw: Called with every new drawing
            now: Source of the local wall-clock time

        Raises:
            ConfigurationError: If the options are malformed
        """
        self.options = resolve_options(options)
        self.state = ClockState(
            show_seconds=self.options.show_seconds,
            geometry=self.options.geometry,
        )
        self.drawing = build_initial_drawing(
            self.options.geometry,
            self.options.theme,
            self.options.show_seconds,
            self.options.show_ticks,
        )
        self.timers = timers or ThreadingTimerService()
        self.scheduler = Scheduler(self.timers, self.post)

        self._on_draw = on_draw
        self._now = now
        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._started = False
        self._error: Optional[BaseException] = None

        self._update()

    @property
    def stopped(self) -> bool:
        return self._stopping.is_set()

    def start(self, background: bool = True) -> int:
        """
        Arm the heartbeat and, by default, start the inbox consumer thread.

        Args:
            background: Start a consumer thread; pass False to process the
                inbox yourself with drain()

        Returns:
            Alignment delay in milliseconds

        Raises:
            ClockError: If the clock was already started or has been stopped
            TimerError: If the heartbeat could not be created
        """
        if self._started or self._stopping.is_set():
            raise ClockError("Clock can only be started once")
        self._started = True

        delay = self.scheduler.start(self._now())
        if background:
            self._thread = threading.Thread(target=self._run, name="analog-clock", daemon=True)
            self._thread.start()
        return delay

    def post(self, message: object) -> bool:
        """
        Queue a message for the clock.

        Returns:
            False if the clock is shutting down and the message was dropped
        """
        if self._stopping.is_set():
            return False
        self._inbox.put(message)
        return True

    def drain(self) -> int:
        """
        Handle every queued message on the calling thread.

        Returns:
            Number of messages handled
        """
        handled = 0
        while True:
            try:
                message = self._inbox.get_nowait()
            except queue.Empty:
                return handled
            if message is _STOP or self._stopping.is_set():
                return handled
            self.handle(message)
            handled += 1

    def handle(self, message: object) -> Optional[Patch]:
        """
        Handle one message.

        Args:
            message: StartHeartbeat or Tick

        Returns:
            The patch that was applied, if any

        Raises:
            TimerError: If the heartbeat could not be started
        """
        if isinstance(message, StartHeartbeat):
            self.scheduler.start_heartbeat()
            return self._update()
        if isinstance(message, Tick):
            return self._update()
        logger.warning(f"Ignoring unknown message: {message!r}")
        return None

    def join(self, poll: float = 0.5) -> None:
        """
        Block until the consumer thread exits.

        Raises:
            ClockError: The fatal error that stopped the clock, if any
        """
        while self._thread is not None and self._thread.is_alive():
            self._thread.join(poll)
        if self._error is not None:
            raise self._error

    def stop(self) -> None:
        """Stop the heartbeat and the consumer thread; later ticks are dropped."""
        if self._stopping.is_set():
            return
        self._stopping.set()
        self.scheduler.stop()
        self._inbox.put(_STOP)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        logger.info("Clock stopped")

    def _run(self) -> None:
        while True:
            message = self._inbox.get()
            if message is _STOP or self._stopping.is_set():
                return
            try:
                self.handle(message)
            except ClockError as e:
                logger.error(f"Clock failed: {e}")
                self._error = e
                self._stopping.set()
                self.scheduler.stop()
                return
            except Exception as e:
                logger.error(f"Error handling {message!r}: {e}", exc_info=True)

    def _update(self) -> Optional[Patch]:
        state, patch = update(self.state, self._now)
        if patch is None:
            return None

        drawing = apply_patch(self.drawing, patch)
        if self._on_draw is not None:
            try:
                self._on_draw(drawing)
            except Exception as e:
                # Keep the old state so the next tick redraws
                logger.error(f"Failed to publish clock drawing: {e}", exc_info=True)
                return None

        self.drawing = drawing
        self.state = state
        logger.debug(f"Applied patch {patch}")
        return patch
