#!/usr/bin/env python
"""
Output formatting with Rich console.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme


# Custom theme for the docbundler CLI
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting."""

    def __init__(self, console: Console = None):
        self.console = console or Console(theme=custom_theme)

    def print(self, text: str = "", **kwargs):
        """Print text to console."""
        self.console.print(text, **kwargs)

    def print_json(self, data):
        self.console.print_json(data=data)

    def print_table(self, title: str, columns: list, rows: list):
        """Print rows under the given column headers."""
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        self.console.print(table)

    def print_error(self, text: str):
        """Print error text."""
        self.console.print(f"[red]Error:[/red] {escape(text)}")

    def print_success(self, text: str):
        """Print success text."""
        self.console.print(f"[green]Success:[/green] {text}")

    def print_warning(self, text: str):
        """Print warning text."""
        self.console.print(f"[yellow]Warning:[/yellow] {text}")

    def print_dim(self, text: str):
        """Print dimmed text."""
        self.console.print(f"[dim]{text}[/dim]")
