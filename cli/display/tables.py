"""
Rich table displays for pattern information.
"""

from pathlib import Path
from typing import Iterable, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tribeconv.formats.detection import FileFormat
from tribeconv.formats.td3.seq_reader import SeqHeader
from tribeconv.models.pattern import Pattern, note_name

console = Console()


def flag(value: bool, label: str = "*") -> str:
    return f"[green]{label}[/green]" if value else "[dim]-[/dim]"


def display_pattern_info(
    pattern: Pattern,
    path: Path,
    file_format: FileFormat,
    size: int,
    header: Optional[SeqHeader] = None,
) -> None:
    """Display a decoded pattern: summary panel plus one row per step."""

    summary = f"""[bold]File:[/bold] {path}
[bold]Format:[/bold] {file_format}
[bold]Size:[/bold] {size} bytes
[bold]Pattern:[/bold] {pattern.name or "N/A"}
[bold]Length:[/bold] {pattern.length} steps ({len(pattern.active_steps)} gated)
[bold]Tempo:[/bold] {pattern.tempo:.1f} BPM"""

    if header is not None:
        summary += f"""
[bold]Device:[/bold] {header.device_name or "N/A"}
[bold]Version:[/bold] {header.version or "N/A"}
[bold]Triplet:[/bold] {"Yes" if header.triplet else "No"}"""
    elif file_format == FileFormat.SYX:
        summary += f"\n[bold]Device ID:[/bold] 0x{pattern.device_id:02X}"

    console.print(
        Panel(
            summary,
            title="[bold blue]Pattern Info[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )

    console.print(create_step_table(pattern))

    problems = pattern.validate()
    for problem in problems:
        console.print(f"[yellow]Warning: {problem}[/yellow]")


def create_step_table(pattern: Pattern) -> Table:
    """Build the per-step table."""
    table = Table(title="Steps", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Note", style="cyan", width=5)
    table.add_column("MIDI", width=4)
    table.add_column("Gate", width=4)
    table.add_column("Acc", width=3)
    table.add_column("Sld", width=3)
    table.add_column("Tie", width=3)
    table.add_column("Vel", width=4)

    for i, step in enumerate(pattern.steps):
        if step.gate:
            name = note_name(step.note)
            gate = "[green]On[/green]"
        else:
            name = "[dim]---[/dim]"
            gate = "[dim]Off[/dim]"

        table.add_row(
            str(i + 1),
            name,
            str(step.note),
            gate,
            flag(step.accent),
            flag(step.slide),
            flag(step.tie and i > 0),
            str(step.effective_velocity) if step.gate else "[dim]-[/dim]",
        )

    return table


def display_formats(conversions: Iterable[Tuple[FileFormat, FileFormat]]) -> None:
    """Display supported formats and conversion pairs."""
    formats = Table(
        title="Formats", box=box.ROUNDED, show_header=True, header_style="bold cyan"
    )
    formats.add_column("Format", style="cyan", width=8)
    formats.add_column("Extension", width=10)
    formats.add_column("Description", width=40)

    formats.add_row("midi", ".mid .midi", "Standard MIDI file, quantized to 16 steps")
    formats.add_row("seq", ".seq", "Binary pattern file (146 bytes)")
    formats.add_row("syx", ".syx", "SysEx pattern dump")

    console.print(formats)

    pairs = Table(
        title="Conversions", box=box.SIMPLE, show_header=True, header_style="bold green"
    )
    pairs.add_column("From", style="cyan", width=6)
    pairs.add_column("To", style="cyan", width=6)
    pairs.add_column("Command", width=12)

    for source, dest in conversions:
        pairs.add_row(source.value, dest.value, f"{source.value}2{dest.value}")

    console.print(pairs)


def display_devices(devices: Iterable[Tuple[str, str, str]]) -> None:
    """Display registered device codecs."""
    table = Table(title="Devices", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Key", style="cyan", width=8)
    table.add_column("Name", width=20)
    table.add_column("Description", width=30)

    for key, name, description in devices:
        table.add_row(key, name, description)

    console.print(table)
