"""Command-line entry point.

``gpmctl install`` does the work; ``gpmctl config`` manages settings.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from gpmctl import __version__
from gpmctl.cli.commands import config, install
from gpmctl.utils.formatting import err_console

app = typer.Typer(
    name="gpmctl",
    help="Install plugins and themes into a site.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gpmctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Only warnings are shown by default; --verbose enables debug records.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug details to stderr."),
    ] = False,
) -> None:
    """gpmctl - Plugin and theme installer.

    Installs packages and their dependencies from a package index, or
    symlinks them from local development checkouts.
    """
    configure_logging(verbose)


app.command(name="install")(install.install_packages)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
