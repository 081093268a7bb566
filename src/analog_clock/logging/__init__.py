"""Logging setup for Analog Clock."""

from analog_clock.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
