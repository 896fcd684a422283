"""Config command implementation.

Shows and edits the user configuration: development roots searched for
symlink sources and the package index location.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from gpmctl.core.config import (
    ConfigError,
    LocalConfig,
    load_local_config_or_default,
    save_local_config,
)
from gpmctl.core.paths import get_config_path
from gpmctl.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Show and edit gpmctl settings.",
    no_args_is_help=True,
)


def _load() -> LocalConfig:
    try:
        return load_local_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _save(config: LocalConfig) -> None:
    try:
        path = save_local_config(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_info(f"Saved {path}")


@app.command()
def show() -> None:
    """Show the current settings."""
    config = _load()

    table = Table(
        title=f"Settings ({get_config_path()})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    table.add_row("index", config.index)
    if config.dev_roots:
        for position, root in enumerate(config.dev_roots, start=1):
            table.add_row(f"dev_roots[{position}]", root)
    else:
        table.add_row("dev_roots", "[muted](none)[/muted]")

    console.print(table)


@app.command("add-root")
def add_root(
    path: Annotated[Path, typer.Argument(help="Directory holding development checkouts.")],
) -> None:
    """Append a development root (searched after existing ones)."""
    config = _load()
    root = str(path.expanduser().resolve())

    if root in config.dev_roots:
        print_info(f"Development root already configured: {root}")
        return
    if not Path(root).is_dir():
        print_warning(f"Directory does not exist (yet): {root}")

    _save(config.model_copy(update={"dev_roots": [*config.dev_roots, root]}))
    print_success(f"Added development root: {root}")


@app.command("remove-root")
def remove_root(
    path: Annotated[Path, typer.Argument(help="Development root to remove.")],
) -> None:
    """Remove a development root."""
    config = _load()
    root = str(path.expanduser().resolve())
    matches = {str(path), root}

    if not matches.intersection(config.dev_roots):
        print_error(f"Development root not configured: {root}")
        raise typer.Exit(code=1)

    _save(config.model_copy(update={"dev_roots": [r for r in config.dev_roots if r not in matches]}))
    print_success(f"Removed development root: {root}")


@app.command("set-index")
def set_index(
    value: Annotated[str, typer.Argument(help="Package index URL or local path.")],
) -> None:
    """Set the package index location."""
    config = _load()
    _save(config.model_copy(update={"index": value}))
    print_success(f"Package index set to {value}")
