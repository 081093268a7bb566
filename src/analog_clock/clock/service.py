"""Clock Service daemon."""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from analog_clock.clock.component import AnalogClock
from analog_clock.clock.drawing import Drawing, to_svg
from analog_clock.config import Settings, get_settings
from analog_clock.logging.config import get_logger

logger = get_logger(__name__)


class ClockService:
    """Service that keeps an SVG file of the clock up to date."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize clock service.

        Args:
            settings: Settings to use (defaults to get_settings())
            now: Source of the local wall-clock time

        Raises:
            ConfigurationError: If the configured clock options are invalid
        """
        self.settings = settings or get_settings()
        self.output_path = Path(self.settings.svg_output_path)
        self.clock = AnalogClock(
            self.settings.clock_options(),
            on_draw=self.write_svg,
            now=now,
        )

    def run_daemon(self) -> None:
        """
        Run the clock until interrupted.

        Raises:
            ClockError: If the heartbeat could not be started
        """
        logger.info(f"Clock service started, outputting to {self.output_path}")
        try:
            self.clock.start()
            self.clock.join()
        except KeyboardInterrupt:
            logger.info("Clock service stopped")
        finally:
            self.clock.stop()

    def write_svg(self, drawing: Drawing) -> None:
        """Write the drawing to the output path atomically."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.output_path.with_suffix(".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(to_svg(drawing, size=self.settings.svg_size))

        temp_path.replace(self.output_path)
