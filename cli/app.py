"""
TribeConv - Converter between MIDI files and Behringer TD-3 pattern files.

A CLI tool for converting and inspecting TD-3 bass-line patterns.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli.commands.convert import (
    convert,
    midi2seq,
    midi2syx,
    seq2midi,
    seq2syx,
    syx2midi,
    syx2seq,
)
from cli.commands.dump import dump
from cli.commands.formats import devices, formats
from cli.commands.info import info
from cli.commands.validate import validate
from tribeconv import __version__

console = Console()

# Main app
app = typer.Typer(
    name="tribeconv",
    help="Convert between MIDI and Behringer TD-3 pattern files.",
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="convert")(convert)
app.command(name="midi2seq")(midi2seq)
app.command(name="midi2syx")(midi2syx)
app.command(name="seq2midi")(seq2midi)
app.command(name="seq2syx")(seq2syx)
app.command(name="syx2midi")(syx2midi)
app.command(name="syx2seq")(syx2seq)
app.command(name="info")(info)
app.command(name="dump")(dump)
app.command(name="validate")(validate)
app.command(name="formats")(formats)
app.command(name="devices")(devices)


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]tribeconv[/bold] version {__version__}")
    console.print("[dim]Converter between MIDI and Behringer TD-3 pattern files[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    TribeConv - Convert between MIDI and Behringer TD-3 patterns.

    Supports conversion between:

    - [cyan]MIDI[/cyan] files (.mid)
    - [cyan]TD-3[/cyan] pattern files (.seq)
    - [cyan]TD-3[/cyan] SysEx dumps (.syx)

    [bold]Quick Start:[/bold]

        tribeconv midi2seq bassline.mid      # Writes bassline.seq
        tribeconv convert in.syx -o out.mid  # Formats from extensions
        tribeconv info pattern.seq           # Show steps

    [bold]Utility Commands:[/bold]

        tribeconv dump pattern.seq      # Annotated hex dump
        tribeconv validate pattern.syx  # Validate file structure
        tribeconv formats               # Supported conversions

    Use --help with any command for more details.
    """
    configure_logging(verbose)

    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
