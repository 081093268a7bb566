"""Clock state engine: time sampling, change detection and hand angles."""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional, Tuple

from analog_clock.clock.geometry import GeometryParams
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)

TWO_PI = 2 * math.pi

HOUR_HAND = "hour_hand"
MINUTE_HAND = "minute_hand"
SECOND_HAND = "second_hand"

# Ordered (hand_id, rotation in radians) entries
Patch = Tuple[Tuple[str, float], ...]


@dataclass(frozen=True)
class TimeSample:
    """A single reading of the local wall clock."""

    hour: int
    minute: int
    second: int
    day: date

    @classmethod
    def from_datetime(cls, moment: datetime) -> "TimeSample":
        return cls(
            hour=moment.hour,
            minute=moment.minute,
            second=moment.second,
            day=moment.date(),
        )


@dataclass(frozen=True)
class ResolvedTimeSample:
    """
    A time sample reduced to what the clock displays.

    ``second`` is None when the second hand is hidden, so samples within the
    same minute compare equal.
    """

    day: date
    hour: int
    minute: int
    second: Optional[int] = None


@dataclass(frozen=True)
class HandAngles:
    """Hand rotations in radians, clockwise from 12 o'clock."""

    hour_radians: float
    minute_radians: float
    second_radians: float


@dataclass(frozen=True)
class ClockState:
    """What the engine last rendered, plus the fixed display parameters."""

    show_seconds: bool
    geometry: GeometryParams
    last_resolved_sample: Optional[ResolvedTimeSample] = None


def sample_time(now: Callable[[], datetime] = datetime.now) -> TimeSample:
    """Read the local wall clock once."""
    return TimeSample.from_datetime(now())


def resolve_sample(sample: TimeSample, show_seconds: bool) -> ResolvedTimeSample:
    """Drop the seconds from the comparison key when they are not displayed."""
    return ResolvedTimeSample(
        day=sample.day,
        hour=sample.hour,
        minute=sample.minute,
        second=sample.second if show_seconds else None,
    )


def hand_percents(sample: TimeSample) -> Tuple[float, float, float]:
    """
    Compute how far round the dial each hand is.

    The minute hand creeps with the seconds and the hour hand creeps with
    the minutes. Noon and midnight both map to 0.0.

    Args:
        sample: Time sample

    Returns:
        (hour_percent, minute_percent, second_percent), each in [0, 1)
    """
    second_percent = sample.second / 60.0
    minute_percent = (sample.minute + second_percent) / 60.0
    hour_percent = (sample.hour % 12 + minute_percent) / 12.0
    return hour_percent, minute_percent, second_percent


def hand_angles(sample: TimeSample) -> HandAngles:
    """Convert hand percents to radians."""
    hour_percent, minute_percent, second_percent = hand_percents(sample)
    return HandAngles(
        hour_radians=TWO_PI * hour_percent,
        minute_radians=TWO_PI * minute_percent,
        second_radians=TWO_PI * second_percent,
    )


def build_patch(angles: HandAngles, show_seconds: bool) -> Patch:
    """Build the hand rotations to apply; the second hand only when shown."""
    patch = [
        (HOUR_HAND, angles.hour_radians),
        (MINUTE_HAND, angles.minute_radians),
    ]
    if show_seconds:
        patch.append((SECOND_HAND, angles.second_radians))
    return tuple(patch)


def update(
    state: ClockState,
    now: Callable[[], datetime] = datetime.now,
) -> Tuple[ClockState, Optional[Patch]]:
    """
    Advance the clock state to the current time.

    Args:
        state: Current clock state
        now: Source of the local wall-clock time

    Returns:
        The new state and the patch to apply, or the unchanged state and None
        if nothing visible changed or the time could not be read
    """
    try:
        sample = sample_time(now)
    except Exception as e:
        logger.warning(f"Could not read the time source, skipping tick: {e}")
        return state, None

    resolved = resolve_sample(sample, state.show_seconds)
    if resolved == state.last_resolved_sample:
        return state, None

    patch = build_patch(hand_angles(sample), state.show_seconds)
    return replace(state, last_resolved_sample=resolved), patch
