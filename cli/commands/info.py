"""
Info command - display decoded pattern information.
"""

from dataclasses import asdict
from pathlib import Path

import typer
from rich.console import Console

from cli.commands.convert import device_option
from cli.display.hex_view import display_hex_dump
from cli.display.tables import display_pattern_info
from tribeconv.converters.converter import Converter
from tribeconv.errors import TribeConvError
from tribeconv.formats.detection import FileFormat, detect_file_format
from tribeconv.formats.device import get_device
from tribeconv.formats.td3.seq_reader import SeqReader

console = Console()
app = typer.Typer()


@app.command()
def info(
    file: Path = typer.Argument(..., help="Pattern file to analyze (.mid, .seq or .syx)"),
    show_hex: bool = typer.Option(False, "--hex", "-x", help="Show a hex dump of the file"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    device: str = device_option(),
) -> None:
    """
    Display pattern file information.

    Decodes the file and shows every step with its note, gate, accent,
    slide, tie and velocity. For .seq files the header fields (device
    name, version, triplet flag) are shown as well.

    Examples:

        tribeconv info pattern.seq

        tribeconv info bassline.mid --json

        tribeconv info pattern.syx --hex
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    with open(file, "rb") as f:
        data = f.read()

    file_format = detect_file_format(file, data)
    if file_format == FileFormat.UNKNOWN:
        console.print(f"[red]Error: Unknown file type: {file.suffix}[/red]")
        console.print("Supported formats: .mid (MIDI), .seq (TD-3), .syx (TD-3 SysEx)")
        raise typer.Exit(1)

    try:
        pattern = Converter(get_device(device)).decode(data, file_format)
        header = SeqReader.read_header(data) if file_format == FileFormat.SEQ else None
    except TribeConvError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        payload = asdict(pattern)
        payload["format"] = file_format.value
        if header is not None:
            payload["header"] = asdict(header)
        console.print_json(data=payload)
        return

    display_pattern_info(pattern, file, file_format, len(data), header)

    if show_hex:
        display_hex_dump(data, title=f"{file.name} ({len(data)} bytes)")


if __name__ == "__main__":
    app()
