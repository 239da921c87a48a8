"""
Console rendering of new and current free slots.
"""

from typing import Optional, Sequence

from rich.console import Console

from ..domain.models import FreeSlot


class ConsoleReporter:
    """
    Prints the newly appeared slots followed by the full calendar.

    Output:
        New times:
        *2023-12-04 11:00-14:00 (3h)

        Calendar:
         2023-12-02 16:00-17:00 (1h)
         2023-12-04 11:00-14:00 (3h)
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def report(self, new_slots: Sequence[FreeSlot], current_slots: Sequence[FreeSlot]) -> None:
        if new_slots:
            self.console.print("[bold green]New times:[/bold green]")
            for slot in new_slots:
                self.console.print(f"*{slot.format_display()}", highlight=False)
        else:
            self.console.print("[yellow]No new times available.[/yellow]")

        self.console.print()
        self.console.print("[bold]Calendar:[/bold]")

        if not current_slots:
            self.console.print(" [dim](no free slots)[/dim]")
        for slot in current_slots:
            self.console.print(f" {slot.format_display()}", highlight=False)
