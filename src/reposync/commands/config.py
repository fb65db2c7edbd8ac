"""
Configuration commands: stored git token and user settings.
"""

import typer

from reposync.constants import DEFAULT_GIT_USERNAME
from reposync.logging import LogLevel, get_logger
from reposync.utils.config_store import ConfigStore
from reposync.utils.console import error, print_table, success

app = typer.Typer(help="Manage reposync settings and credentials")

SETTING_KEYS = ("git_user", "provider", "log_level")


@app.command("set-token")
def set_token(
    git_user: str = typer.Option(
        DEFAULT_GIT_USERNAME, "--git-user", "-u", help="User name the token belongs to"
    ),
    token: str = typer.Option(
        ..., "--git-token", "-t", prompt=True, hide_input=True, help="Git provider token"
    ),
) -> None:
    """Store a git token in the system keyring"""
    logger = get_logger("reposync.commands.config")
    ConfigStore().save_git_token(git_user, token)
    logger.info(f"Stored git token for user '{git_user}'")
    success(f"Token stored for '{git_user}'")


@app.command("set")
def set_setting(
    key: str = typer.Argument(..., help=f"One of: {', '.join(SETTING_KEYS)}"),
    value: str = typer.Argument(..., help="Setting value"),
) -> None:
    """Store a user setting"""
    if key not in SETTING_KEYS:
        error(f"Unknown setting '{key}', use one of: {', '.join(SETTING_KEYS)}")
        raise typer.Exit(1)
    if key == "log_level" and value.upper() not in [lev.value for lev in LogLevel]:
        error(f"Invalid log level '{value}'")
        raise typer.Exit(1)

    ConfigStore().set_setting(key, value.upper() if key == "log_level" else value)
    success(f"{key} = {value}")


@app.command("show")
def show_settings() -> None:
    """Show stored settings"""
    print_table("Settings", ["Setting", "Value"], ConfigStore().get_settings().items())
