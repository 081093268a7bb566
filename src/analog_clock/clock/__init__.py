"""Analog clock component, engine and drawing model."""

from analog_clock.clock.component import AnalogClock
from analog_clock.clock.drawing import Drawing, apply_patch, build_initial_drawing, to_svg
from analog_clock.clock.engine import ClockState, HandAngles, TimeSample, hand_angles, update
from analog_clock.clock.options import ClockOptions, resolve_options
from analog_clock.clock.scheduler import Scheduler, initial_delay_ms

__all__ = [
    "AnalogClock",
    "ClockOptions",
    "ClockState",
    "Drawing",
    "HandAngles",
    "Scheduler",
    "TimeSample",
    "apply_patch",
    "build_initial_drawing",
    "hand_angles",
    "initial_delay_ms",
    "resolve_options",
    "to_svg",
    "update",
]
