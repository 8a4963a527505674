"""
Hex dump display utilities.
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

console = Console()


def hex_line(chunk: bytes, address: int, bytes_per_line: int = 16) -> Text:
    """Address, hex bytes split in two halves, and printable ASCII."""
    halves = [chunk[:8], chunk[8:]]
    hex_str = "  ".join(" ".join(f"{b:02X}" for b in half) for half in halves if half)
    ascii_str = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)

    return Text.assemble(
        (f"{address:04X}", "dim"),
        "  ",
        hex_str.ljust(bytes_per_line * 3 + 1),
        "  ",
        (ascii_str, "cyan"),
    )


def display_hex_dump(
    data: bytes,
    title: str = "Hex Dump",
    start_offset: int = 0,
    bytes_per_line: int = 16,
    max_lines: int = 32,
) -> None:
    """Print a paneled hex dump of at most max_lines lines."""
    end = min(len(data), max_lines * bytes_per_line)

    body = Text("\n").join(
        hex_line(data[offset : offset + bytes_per_line], start_offset + offset, bytes_per_line)
        for offset in range(0, end, bytes_per_line)
    )
    if len(data) > end:
        body.append(f"\n... {len(data) - end} more bytes ...", style="dim")

    console.print(Panel(body, title=title, border_style="blue", expand=False))
