"""Construction options for the analog clock component."""

import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    ValidationError,
    field_validator,
)

from analog_clock.clock.geometry import (
    DEFAULT_RADIUS,
    MIN_RADIUS_FOR_DEFAULT_TICKS,
    GeometryParams,
)
from analog_clock.clock.theme import DEFAULT_THEME, PRESETS, ThemeColors, get_theme
from analog_clock.errors import ConfigurationError


class ClockOptions(BaseModel):
    """
    Options a host passes when constructing a clock.

    Every field has a default; an absent or non-positive radius falls back to
    the default radius. Anything else that is not well formed is rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    radius: Optional[Union[StrictInt, StrictFloat]] = None
    show_seconds: StrictBool = False
    show_ticks: Union[StrictBool, Literal["auto"]] = "auto"
    theme: Union[str, ThemeColors] = DEFAULT_THEME

    @field_validator("radius")
    @classmethod
    def normalize_radius(cls, v: Optional[Union[int, float]]) -> Optional[float]:
        """Reject non-finite radii and treat a non-positive one like an absent one."""
        if v is None:
            return None
        try:
            radius = float(v)
        except OverflowError:
            raise ValueError("radius is too large") from None
        if not math.isfinite(radius):
            raise ValueError("radius must be a finite number")
        if radius <= 0:
            return None
        return radius

    @field_validator("theme")
    @classmethod
    def validate_theme_name(cls, v: Union[str, ThemeColors]) -> Union[str, ThemeColors]:
        """Preset names must exist."""
        if isinstance(v, str) and v not in PRESETS:
            raise ValueError(f"Unknown theme: {v}")
        return v


@dataclass(frozen=True)
class ResolvedOptions:
    """Options with every default applied, computed once at construction."""

    geometry: GeometryParams
    theme: ThemeColors
    show_seconds: bool
    show_ticks: bool


def resolve_options(
    raw: Union[None, ClockOptions, Mapping[str, Any]] = None,
) -> ResolvedOptions:
    """
    Validate construction input and merge in defaults.

    Args:
        raw: None for all defaults, a mapping of option values, or ClockOptions

    Returns:
        Fully resolved options

    Raises:
        ConfigurationError: If the input is malformed
    """
    if raw is None:
        options = ClockOptions()
    elif isinstance(raw, ClockOptions):
        options = raw
    elif isinstance(raw, Mapping):
        try:
            options = ClockOptions.model_validate(dict(raw))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid clock options: {e}") from e
    else:
        raise ConfigurationError(
            f"Invalid clock options: expected a mapping, got {type(raw).__name__}"
        )

    radius = options.radius if options.radius is not None else DEFAULT_RADIUS

    if options.show_ticks == "auto":
        show_ticks = radius >= MIN_RADIUS_FOR_DEFAULT_TICKS
    else:
        show_ticks = options.show_ticks

    theme = options.theme
    if isinstance(theme, str):
        theme = get_theme(theme)

    return ResolvedOptions(
        geometry=GeometryParams.from_radius(radius),
        theme=theme,
        show_seconds=options.show_seconds,
        show_ticks=show_ticks,
    )
