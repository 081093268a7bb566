"""Clock face color themes."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_THEME = "dark"


class ThemeColors(BaseModel):
    """Colors used to paint the clock face and hands."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    background: str
    border: str
    hours: Optional[str] = None
    minutes: Optional[str] = None
    second: Optional[str] = None

    @property
    def hour_color(self) -> str:
        return self.hours or self.border

    @property
    def minute_color(self) -> str:
        return self.minutes or self.border

    @property
    def second_color(self) -> str:
        return self.second or self.border


PRESETS: Dict[str, ThemeColors] = {
    "dark": ThemeColors(background="#000000", border="#d3d3d3"),
    "light": ThemeColors(background="#ffffff", border="#a9a9a9"),
    "primary": ThemeColors(background="#487afc", border="#3c68d6"),
    "secondary": ThemeColors(background="#6f757d", border="#565a5f"),
}


def get_theme(name: str) -> ThemeColors:
    """
    Look up a preset theme by name.

    Args:
        name: Preset name (dark, light, primary, secondary)

    Returns:
        Theme colors

    Raises:
        ValueError: If the preset does not exist
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown theme: {name} (expected one of {', '.join(sorted(PRESETS))})"
        ) from None
