"""
Formats and devices commands - list what can be converted.
"""

import typer

from cli.display.tables import display_devices, display_formats
from tribeconv.converters.converter import get_supported_conversions
from tribeconv.formats.device import list_devices

app = typer.Typer()


@app.command()
def formats() -> None:
    """List supported file formats and conversions."""
    display_formats(get_supported_conversions())


@app.command()
def devices() -> None:
    """List device codecs usable with --device."""
    display_devices(list_devices())


if __name__ == "__main__":
    app()
