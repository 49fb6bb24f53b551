"""Report rendering for conversion results."""

import json
from dataclasses import dataclass, field
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cronsight.converter import ConversionResult
from cronsight.formatting import format_occurrence
from cronsight.scheduling.presets import PRESETS
from cronsight.scheduling.describe import describe_frequency


@dataclass
class ScheduleReport:
    """A conversion result plus any further upcoming runs."""

    result: ConversionResult
    upcoming: list[datetime] = field(default_factory=list)

    def __str__(self) -> str:
        """Return a formatted string representation using Rich."""
        console = Console(force_terminal=True, width=80)
        with console.capture() as capture:
            self._print_to_console(console)
        return capture.get()

    def _print_to_console(self, console: Console) -> None:
        """Print the report to a Rich console."""
        console.print()
        console.print(f"[bold]Frequency[/bold]: {escape(self.result.frequency)}", soft_wrap=True)
        console.print(f"[bold]Next Execution[/bold]: {self.result.next_run_display}", soft_wrap=True)
        console.print(f"[dim]Time Zone: {escape(self.result.timezone)}[/dim]", soft_wrap=True)

        if len(self.upcoming) > 1:
            console.print()
            table = Table(show_header=True, header_style="bold")
            table.add_column("#", justify="right")
            table.add_column("Run", style="cyan")

            for index, run in enumerate(self.upcoming, start=1):
                table.add_row(str(index), format_occurrence(run))

            console.print(table)

        console.print()

    def print(self) -> None:
        """Print the report to stdout."""
        console = Console()
        self._print_to_console(console)

    def to_dict(self) -> dict:
        """Convert report to dictionary for JSON serialization."""
        data = self.result.to_dict()
        data["upcoming"] = [run.isoformat() for run in self.upcoming]
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def print_presets() -> None:
    """Print the preset expressions as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Expression", no_wrap=True)
    table.add_column("Meaning")
    table.add_column("Description", style="dim")

    for preset in PRESETS.values():
        table.add_row(
            preset.name,
            preset.expression.expression,
            preset.label,
            describe_frequency(preset.expression.expression),
        )

    Console().print(table)
