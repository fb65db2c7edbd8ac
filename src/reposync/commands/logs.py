"""
Log commands: inspect the reposync log file.
"""

from collections import deque
from typing import Optional

import typer
from rich.syntax import Syntax

from reposync.constants import LOG_APP_NAME, LOG_LINES_TO_SHOW
from reposync.logging import LogLevel
from reposync.logging.config import get_log_file_path
from reposync.utils.console import console, error, info, warning

app = typer.Typer(help="Inspect reposync logs")


@app.command("show")
def show_logs(
    lines: int = typer.Option(
        LOG_LINES_TO_SHOW, "--lines", "-n", help="Number of lines to show"
    ),
    level: Optional[str] = typer.Option(
        None, "--level", help="Only show entries of this level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Show the most recent log entries"""
    wanted = None
    if level:
        wanted = LogLevel.parse(level)
        if wanted is None:
            error(f"Invalid log level '{level}'")
            raise typer.Exit(1)

    log_file = get_log_file_path()
    if not log_file.exists():
        warning(f"No log file yet, run a {LOG_APP_NAME} command first.")
        return

    with open(log_file, "r", encoding="utf-8") as f:
        entries = (line for line in f if wanted is None or f" {wanted.value} " in line)
        tail = deque(entries, maxlen=lines)

    if not tail:
        info("No matching log entries.")
        return

    console.print(Syntax("".join(tail), "log", theme="monokai"))


@app.command("path")
def log_path() -> None:
    """Print the log file location"""
    console.print(str(get_log_file_path()), highlight=False)
