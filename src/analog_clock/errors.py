"""Exceptions raised by the analog clock."""


class ClockError(Exception):
    """Base class for analog clock errors."""


class ConfigurationError(ClockError):
    """Construction input could not be validated."""


class TimerError(ClockError):
    """The timer service could not create the heartbeat."""


class DrawingError(ClockError):
    """A patch referenced an element the drawing does not contain."""
