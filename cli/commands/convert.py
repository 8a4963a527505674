"""
Convert commands - conversion between MIDI, .seq and .syx files.
"""

from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from tribeconv.converters.converter import Converter
from tribeconv.errors import TribeConvError
from tribeconv.formats.detection import FileFormat
from tribeconv.formats.device import get_device

console = Console()
app = typer.Typer()

FORMAT_NAMES = {
    FileFormat.MIDI: "MIDI",
    FileFormat.SEQ: "TD-3 .seq",
    FileFormat.SYX: "TD-3 SysEx",
}


def device_option():
    return typer.Option(
        "td3", "--device", "-d", envvar="TRIBECONV_DEVICE", help="Device codec for .seq/.syx"
    )


def run_conversion(
    source: Path,
    output: Path,
    device: str,
    source_format: Optional[FileFormat] = None,
    dest_format: Optional[FileFormat] = None,
) -> None:
    """Convert one file and report the result, exiting with 1 on failure."""
    if not source.exists():
        console.print(f"[red]Error: Source file not found: {source}[/red]")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Converting {source.name}...", total=None)

        try:
            converter = Converter(get_device(device))
            src, dst = converter.convert_file(source, output, source_format, dest_format)
        except (TribeConvError, OSError) as e:
            progress.stop()
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

        progress.update(task, description="Done!")

    console.print(f"[green]Converted:[/green] {source} -> {output}")
    console.print(f"[dim]{FORMAT_NAMES[src]} -> {FORMAT_NAMES[dst]}, {output.stat().st_size} bytes[/dim]")


@app.command()
def convert(
    source: Path = typer.Argument(..., help="Source file (.mid, .seq or .syx)"),
    output: Path = typer.Option(..., "--output", "-o", help="Output file path"),
    device: str = device_option(),
) -> None:
    """
    Convert between MIDI, TD-3 .seq and TD-3 SysEx files.

    Formats are taken from the file extensions. A source file with an
    unknown extension is identified from its contents.

    Examples:

        tribeconv convert bassline.mid -o bassline.seq

        tribeconv convert pattern.syx -o pattern.mid
    """
    run_conversion(source, output, device)


def make_pair_command(source_format: FileFormat, dest_format: FileFormat) -> Callable[..., None]:
    """Build a fixed-pair conversion command such as midi2seq."""

    def command(
        source: Path = typer.Argument(..., help=f"Source file ({source_format.extension})"),
        output: Optional[Path] = typer.Option(
            None, "--output", "-o", help=f"Output file (default: source with {dest_format.extension})"
        ),
        device: str = device_option(),
    ) -> None:
        output_path = output or source.with_suffix(dest_format.extension)
        run_conversion(source, output_path, device, source_format, dest_format)

    command.__name__ = f"{source_format.value}2{dest_format.value}"
    command.__doc__ = (
        f"Convert a {FORMAT_NAMES[source_format]} file to {FORMAT_NAMES[dest_format]}."
    )
    return command


midi2seq = make_pair_command(FileFormat.MIDI, FileFormat.SEQ)
midi2syx = make_pair_command(FileFormat.MIDI, FileFormat.SYX)
seq2midi = make_pair_command(FileFormat.SEQ, FileFormat.MIDI)
seq2syx = make_pair_command(FileFormat.SEQ, FileFormat.SYX)
syx2midi = make_pair_command(FileFormat.SYX, FileFormat.MIDI)
syx2seq = make_pair_command(FileFormat.SYX, FileFormat.SEQ)


if __name__ == "__main__":
    app()
