"""Command-line interface for Analog Clock."""

import json
import math
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from analog_clock.config import get_settings
from analog_clock.errors import ClockError
from analog_clock.logging import configure_logging

app = typer.Typer(
    name="clock",
    help="Analog Clock - a live analog clock face rendered as SVG",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """Analog Clock CLI."""
    settings = get_settings()
    if debug or settings.debug:
        configure_logging(log_level="DEBUG", log_file=settings.log_file)
    else:
        configure_logging(log_level=settings.log_level, log_file=settings.log_file)


# Config commands
config_app = typer.Typer(help="Configuration management")
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show current configuration."""
    settings = get_settings()

    if json_output:
        typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        return

    table = Table(title="Analog Clock Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for field_name in type(settings).model_fields:
        table.add_row(field_name, str(getattr(settings, field_name)))

    console.print(table)


@app.command("render")
def render(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write SVG to this file"),
    seconds: Optional[bool] = typer.Option(
        None, "--seconds/--no-seconds", help="Override second hand display"
    ),
    radius: Optional[float] = typer.Option(None, "--radius", "-r", help="Override clock radius"),
) -> None:
    """Render the current time once as SVG."""
    from analog_clock.clock import AnalogClock, to_svg

    settings = get_settings()
    try:
        options = settings.clock_options().model_dump()
        if seconds is not None:
            options["show_seconds"] = seconds
        if radius is not None:
            options["radius"] = radius
        clock = AnalogClock(options)
    except ClockError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    svg = to_svg(clock.drawing, size=settings.svg_size)
    if output is None:
        typer.echo(svg, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(svg, encoding="utf-8")
    rprint(f"[green]✓ Clock written to[/green] {output}")


@app.command("angles")
def angles(
    at: Optional[str] = typer.Argument(None, help="Time (HH:MM:SS), defaults to now"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show hand angles for a time of day."""
    from analog_clock.clock.engine import TimeSample, hand_angles, hand_percents

    if at:
        try:
            moment = datetime.combine(datetime.now().date(), datetime.strptime(at, "%H:%M:%S").time())
        except ValueError:
            rprint(f"[red]Invalid time format: {escape(at)}. Use HH:MM:SS[/red]")
            raise typer.Exit(1)
    else:
        moment = datetime.now()

    sample = TimeSample.from_datetime(moment)
    percents = dict(zip(("hour", "minute", "second"), hand_percents(sample)))
    result = hand_angles(sample)
    radians = {
        "hour": result.hour_radians,
        "minute": result.minute_radians,
        "second": result.second_radians,
    }

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "time": moment.strftime("%H:%M:%S"),
                    "hands": {
                        hand: {"percent": percents[hand], "radians": radians[hand]}
                        for hand in radians
                    },
                },
                indent=2,
            )
        )
        return

    table = Table(title=f"Hand angles at {moment.strftime('%H:%M:%S')}", show_header=True)
    table.add_column("Hand", style="cyan")
    table.add_column("Percent", style="green")
    table.add_column("Radians", style="yellow")
    table.add_column("Degrees", style="magenta")

    for hand, value in radians.items():
        table.add_row(hand, f"{percents[hand]:.6f}", f"{value:.6f}", f"{math.degrees(value):.2f}")

    console.print(table)


@app.command("run")
def run() -> None:
    """Run the clock service, updating the SVG file every second."""
    from analog_clock.clock.service import ClockService

    try:
        service = ClockService()
        rprint(f"[cyan]Writing clock to[/cyan] {service.output_path} [dim](Ctrl+C to stop)[/dim]")
        service.run_daemon()
    except ClockError as e:
        rprint(f"[red]Clock failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
