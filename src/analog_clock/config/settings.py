"""Settings and configuration management using Pydantic."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Type, Union

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from analog_clock.clock.options import ClockOptions
from analog_clock.clock.theme import PRESETS, ThemeColors
from analog_clock.errors import ConfigurationError
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)

CONFIG_FILE = Path("config.yaml")


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """
    A simple settings source class that loads variables from a YAML file
    in the working directory.
    """

    def _load(self) -> Dict[str, Any]:
        if not CONFIG_FILE.exists():
            return {}
        encoding = self.config.get("env_file_encoding")
        return yaml.safe_load(CONFIG_FILE.read_text(encoding)) or {}

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        return self._load().get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        try:
            content = self._load()
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load {CONFIG_FILE}: {e}")
            return {}

        if not isinstance(content, dict):
            logger.warning(f"Ignoring {CONFIG_FILE}: expected a mapping at the top level")
            return {}
        return content


class Settings(BaseSettings):
    """Analog clock configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # First source wins: environment overrides config.yaml
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # Clock face
    radius: Optional[float] = Field(
        default=None,
        description="Clock radius; absent or non-positive uses the default of 10",
    )
    show_seconds: bool = Field(
        default=False,
        description="Draw the second hand",
    )
    show_ticks: Union[bool, Literal["auto"]] = Field(
        default="auto",
        description="Draw hour tick marks (auto: only when radius >= 30)",
    )
    theme: Union[str, ThemeColors] = Field(
        default="dark",
        description="Theme preset name or explicit colors",
    )

    # Output
    svg_output_path: Path = Field(
        default=Path("/var/cache/analog_clock/clock.svg"),
        description="Path to save generated clock SVG",
    )
    svg_size: Optional[int] = Field(
        default=None,
        ge=16,
        description="Pixel width and height of the SVG (unset: scale freely)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Log file path",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v: Union[str, ThemeColors]) -> Union[str, ThemeColors]:
        """Theme names must be a known preset."""
        if isinstance(v, str) and v not in PRESETS:
            raise ValueError(
                f"Unknown theme: {v} (expected one of {', '.join(sorted(PRESETS))})"
            )
        return v

    @field_validator("svg_output_path", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Union[str, Path, None]) -> Optional[Path]:
        """Expand environment variables and user paths."""
        if v is None:
            return None
        if isinstance(v, str):
            v = os.path.expandvars(os.path.expanduser(v))
        return Path(v)

    def clock_options(self) -> ClockOptions:
        """
        Build the clock's construction options from these settings.

        Raises:
            ConfigurationError: If the options do not validate
        """
        try:
            return ClockOptions(
                radius=self.radius,
                show_seconds=self.show_seconds,
                show_ticks=self.show_ticks,
                theme=self.theme,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid clock options: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
