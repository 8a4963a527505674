"""
Dump command - annotated hex dump of a TD-3 .seq file.
"""

from pathlib import Path
from typing import Dict, List, NamedTuple

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tribeconv.formats.td3.seq_reader import SeqLayout

console = Console()
app = typer.Typer()


class Region(NamedTuple):
    start: int
    end: int
    name: str
    description: str
    color: str

    @property
    def size(self) -> int:
        return self.end - self.start


REGIONS: List[Region] = [
    Region(0x00, SeqLayout.DEVICE_NAME, "MAGIC", "File magic", "bright_blue"),
    Region(SeqLayout.DEVICE_NAME, SeqLayout.VERSION, "DEVICE", "Device name block", "cyan"),
    Region(SeqLayout.VERSION, SeqLayout.FILL, "VERSION", "Version block", "cyan"),
    Region(SeqLayout.FILL, SeqLayout.NOTES, "FILL", "Remaining structure size", "dim"),
    Region(SeqLayout.NOTES, SeqLayout.ACCENTS, "NOTES", "Notes (16 nibble pairs)", "green"),
    Region(SeqLayout.ACCENTS, SeqLayout.SLIDES, "ACCENTS", "Accent flags", "yellow"),
    Region(SeqLayout.SLIDES, SeqLayout.TRIPLET, "SLIDES", "Slide flags", "yellow"),
    Region(SeqLayout.TRIPLET, SeqLayout.LENGTH, "TRIPLET", "Triplet flag", "magenta"),
    Region(SeqLayout.LENGTH, SeqLayout.RESERVED, "LENGTH", "Sequence length", "magenta"),
    Region(SeqLayout.RESERVED, SeqLayout.TIE, "RESERVED", "Reserved", "dim"),
    Region(SeqLayout.TIE, SeqLayout.REST, "TIE", "Tie mask (0 = sustain)", "red"),
    Region(SeqLayout.REST, SeqLayout.FILE_SIZE, "REST", "Rest mask (1 = rest)", "red"),
]

REGIONS_BY_NAME: Dict[str, Region] = {r.name: r for r in REGIONS}

TRAILING = Region(SeqLayout.FILE_SIZE, SeqLayout.FILE_SIZE, "TRAILING", "Bytes after pattern data", "white")


def region_at(offset: int) -> Region:
    """Region containing a file offset."""
    return next((r for r in REGIONS if r.start <= offset < r.end), TRAILING)


def format_hex_line(data: bytes, offset: int, bytes_per_line: int = 16) -> Text:
    """
    Render one dump line: offset, the region the line starts in, the bytes
    colored by their own region, and an ASCII column.
    """
    first = region_at(offset)
    line = Text.assemble(
        (f"{offset:02X} ", "dim"),
        (f"[{first.name:8s}] ", first.color),
    )

    for pos, byte in enumerate(data):
        color = "dim" if byte == 0 else f"bold {region_at(offset + pos).color}"
        line.append(f"{byte:02X}", style=color)
        line.append(" ")
    line.append("   " * max(0, bytes_per_line - len(data)))

    line.append(" ")
    for byte in data:
        printable = 32 <= byte < 127
        line.append(chr(byte) if printable else ".", style="green" if printable else "dim")

    return line


def create_legend() -> Table:
    """Legend table of region names, sizes and offsets."""
    table = Table(title="Legend", box=box.SIMPLE, show_header=False, expand=False)
    table.add_column("Region", width=10)
    table.add_column("Description", width=40)

    for r in REGIONS:
        table.add_row(
            Text(r.name, style=r.color),
            f"{r.description} ({r.size} bytes, 0x{r.start:02X}-0x{r.end - 1:02X})",
        )

    return table


@app.command()
def dump(
    file: Path = typer.Argument(..., help=".seq file to dump"),
    width: int = typer.Option(16, "--width", "-w", min=1, help="Bytes per line"),
    no_legend: bool = typer.Option(False, "--no-legend", help="Hide the legend"),
    region: str = typer.Option("", "--region", "-r", help="Show only one region (e.g. NOTES)"),
) -> None:
    """
    Annotated hex dump of a TD-3 .seq pattern file.

    Each line is tagged with the file region it starts in, and bytes are
    colored by region.

    Examples:

        tribeconv dump pattern.seq

        tribeconv dump pattern.seq --region TIE
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    if file.suffix.lower() != ".seq":
        console.print(f"[red]Error: Only .seq files supported: {file}[/red]")
        raise typer.Exit(1)

    data = file.read_bytes()
    start, end = 0, len(data)

    if region:
        selected = REGIONS_BY_NAME.get(region.upper())
        if selected is None:
            console.print(f"[red]Unknown region: {region}[/red]")
            console.print(f"Available regions: {', '.join(REGIONS_BY_NAME)}")
            raise typer.Exit(1)
        start, end = selected.start, min(selected.end, len(data))
        console.print(f"[{selected.color}]{selected.name}: {selected.description}[/{selected.color}]")
    elif not no_legend:
        console.print(create_legend())
        console.print()

    last = max(start, end - 1)
    console.print(
        Panel(
            f"[bold]File:[/bold] {file}\n"
            f"[bold]Size:[/bold] {len(data)} bytes (expected {SeqLayout.FILE_SIZE})\n"
            f"[bold]Range:[/bold] 0x{start:02X}-0x{last:02X} ({end - start} bytes)",
            title="[bold].seq Hex Dump[/bold]",
            border_style="blue",
        )
    )

    offsets = range(start, end, width)
    for offset in offsets:
        console.print(format_hex_line(data[offset : min(offset + width, end)], offset, width))

    console.print()
    console.print(f"[dim]{len(offsets)} lines[/dim]")
