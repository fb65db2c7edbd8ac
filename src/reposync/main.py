from typing import Optional

import typer

from reposync import __version__
from reposync.commands import config, logs
from reposync.commands.repo import list_providers, persist, provision
from reposync.logging import get_logger, setup_logging

app = typer.Typer(
    help="[bold blue]reposync[/bold blue] - provision git repositories and push changes to them",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(config.app, name="config")
app.add_typer(logs.app, name="logs")

app.command("provision")(provision)
app.command("persist")(persist)
app.command("providers")(list_providers)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"reposync {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_print_version, is_eager=True, help="Show the version and exit"
    ),
):
    """
    Clone, create or initialize a git repository from a single URL and
    persist generated files back to it.
    """


def main():
    setup_logging()
    logger = get_logger("reposync.main")
    logger.debug("reposync started")

    try:
        app()
    except Exception as e:
        logger.exception(f"Unhandled error: {e}")
        raise
    finally:
        logger.debug("reposync finished")


if __name__ == "__main__":
    main()
