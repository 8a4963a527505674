"""
Validate command - check .seq and .syx file structure.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tribeconv.formats.detection import FileFormat, detect_file_format
from tribeconv.formats.td3.validator import validate_seq, validate_syx
from tribeconv.utils.validation import ValidationIssue

console = Console()
app = typer.Typer()


@dataclass
class ValidationResult:
    """Result of validating one file."""

    filepath: str
    file_format: FileFormat
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    info: List[ValidationIssue] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.info)

    @classmethod
    def from_issues(
        cls, filepath: str, file_format: FileFormat, issues: List[ValidationIssue]
    ) -> "ValidationResult":
        errors = [i for i in issues if i.severity == "error"]
        return cls(
            filepath=filepath,
            file_format=file_format,
            valid=not errors,
            errors=errors,
            warnings=[i for i in issues if i.severity == "warning"],
            info=[i for i in issues if i.severity == "info"],
        )


def display_validation(result: ValidationResult, verbose: bool = False) -> None:
    """Display validation result with Rich formatting."""
    if result.valid and not result.warnings:
        status, border = "[green]VALID[/green]", "green"
    elif result.valid:
        status, border = "[yellow]VALID (with warnings)[/yellow]", "yellow"
    else:
        status, border = "[red]INVALID[/red]", "red"

    console.print(
        Panel(
            f"[bold]File:[/bold] {result.filepath}\n"
            f"[bold]Format:[/bold] {result.file_format}\n"
            f"[bold]Status:[/bold] {status}\n\n"
            f"Errors: [red]{len(result.errors)}[/red]  "
            f"Warnings: [yellow]{len(result.warnings)}[/yellow]  "
            f"Info: [blue]{len(result.info)}[/blue]",
            title="[bold]Validation Result[/bold]",
            border_style=border,
        )
    )

    rows = [("[red]ERROR[/red]", i) for i in result.errors]
    rows += [("[yellow]WARN[/yellow]", i) for i in result.warnings]
    if verbose:
        rows += [("[blue]INFO[/blue]", i) for i in result.info]

    if not rows:
        return

    table = Table(title="Issues", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Severity", width=10)
    table.add_column("Area", style="cyan", width=12)
    table.add_column("Offset", style="dim", width=8)
    table.add_column("Message", width=40)
    table.add_column("Expected", width=12)
    table.add_column("Actual", width=12)

    for severity, issue in rows:
        table.add_row(
            severity,
            issue.area,
            f"0x{issue.offset:02X}",
            issue.message,
            issue.expected,
            issue.actual,
        )

    console.print(table)


@app.command()
def validate(
    file: Path = typer.Argument(..., help="File to validate (.seq or .syx)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show informational findings"),
    strict: bool = typer.Option(False, "--strict", "-s", help="Treat warnings as errors"),
) -> None:
    """
    Validate a TD-3 .seq or SysEx file structure.

    Checks for:

    - File size and magic bytes (.seq)
    - Sequence length and nibble field ranges (.seq)
    - SysEx framing, manufacturer ID and 7-bit data (.syx)
    - Payload length and checksum (.syx)

    Examples:

        tribeconv validate pattern.seq

        tribeconv validate pattern.syx --strict
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    with open(file, "rb") as f:
        data = f.read()

    file_format = detect_file_format(file, data)

    if file_format == FileFormat.SEQ:
        issues = validate_seq(data)
    elif file_format == FileFormat.SYX:
        issues = validate_syx(data)
    else:
        console.print(f"[red]Error: Only .seq and .syx files can be validated: {file}[/red]")
        raise typer.Exit(1)

    result = ValidationResult.from_issues(str(file), file_format, issues)

    if strict and result.warnings:
        result.valid = False

    display_validation(result, verbose=verbose)

    if not result.valid:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
