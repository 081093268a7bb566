"""Clock face geometry derived from the radius."""

from dataclasses import dataclass

DEFAULT_RADIUS = 10.0

BACK_SIZE_RATIO = 0.1
HOUR_SIZE_RATIO = -0.6
MINUTE_SIZE_RATIO = -0.9
SECOND_SIZE_RATIO = -0.9
TICK_RATIO = 0.08

# Below this radius tick marks are hidden unless explicitly requested
MIN_RADIUS_FOR_DEFAULT_TICKS = 30.0


@dataclass(frozen=True)
class GeometryParams:
    """
    Sizes of the clock face, all relative to a center at the origin.

    Hand sizes are negative because hands point up (towards -y) before
    rotation; ``back_size`` is the short tail behind the pin.
    """

    radius: float
    back_size: float
    hour_size: float
    minute_size: float
    second_size: float
    tick_size: float
    thickness: float

    @classmethod
    def from_radius(cls, radius: float = DEFAULT_RADIUS) -> "GeometryParams":
        return cls(
            radius=radius,
            back_size=radius * BACK_SIZE_RATIO,
            hour_size=radius * HOUR_SIZE_RATIO,
            minute_size=radius * MINUTE_SIZE_RATIO,
            second_size=radius * SECOND_SIZE_RATIO,
            tick_size=radius * TICK_RATIO,
            thickness=2.0 if radius > 40 else 1.2,
        )
