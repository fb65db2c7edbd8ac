"""
Console output for the CLI. Results go to stdout, problems to stderr.
"""

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def success(message: str):
    console.print(f"✔ {message}", style="bold green")


def info(message: str):
    console.print(message, style="cyan", highlight=False)


def warning(message: str):
    err_console.print(f"⚠  {message}", style="bold yellow")


def error(message: str):
    err_console.print(f"✖ {message}", style="bold red")


def create_table(title: str, columns: Sequence[str]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    return table


def print_table(title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """Render ``rows`` as a table on stdout"""
    table = create_table(title, columns)
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    console.print(table)
