"""Install command implementation.

Installs one or more plugins or themes, together with their
dependencies, into a site.
"""

from pathlib import Path
from typing import Annotated

import typer

from gpmctl.cli.display import (
    ConsoleReporter,
    console_confirm,
    create_results_table,
    print_run_summary,
)
from gpmctl.core.catalog import CatalogError, IndexCatalog
from gpmctl.core.config import ConfigError, InstallConfig, LocalConfig, load_local_config_or_default
from gpmctl.core.destination import detect_platform_version, is_site_root
from gpmctl.core.download import HttpTransfer
from gpmctl.core.installer import ZipInstaller
from gpmctl.core.orchestrator import install_all
from gpmctl.utils.formatting import console, print_error, print_info


def _resolve_symlink_preference(
    local: LocalConfig,
    symlinks: bool | None,
    all_yes: bool,
) -> bool:
    """Decide whether symlinks should be used for this run.

    An explicit flag wins. Otherwise the user is asked, but only when
    development roots are configured and prompting is allowed.
    """
    if symlinks is not None:
        return symlinks
    if not local.dev_roots or all_yes:
        return False
    return console_confirm("Should gpmctl use the symlinks if available?")


def install_packages(
    packages: Annotated[
        list[str],
        typer.Argument(help="The package(s) to install."),
    ],
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Force re-fetching the package index.",
        ),
    ] = False,
    all_yes: Annotated[
        bool,
        typer.Option(
            "--all-yes",
            "-y",
            help="Assume yes (or the safest choice) instead of prompting.",
        ),
    ] = False,
    destination: Annotated[
        Path | None,
        typer.Option(
            "--destination",
            "-d",
            help="Site root to install into. Defaults to the current directory.",
        ),
    ] = None,
    symlinks: Annotated[
        bool | None,
        typer.Option(
            "--symlinks/--no-symlinks",
            help="Symlink packages from configured development roots when available.",
        ),
    ] = None,
    platform_version: Annotated[
        str | None,
        typer.Option(
            "--platform-version",
            help="Platform version to check requirements against (detected by default).",
        ),
    ] = None,
    index: Annotated[
        str | None,
        typer.Option(
            "--index",
            help="Package index URL or path (overrides config).",
        ),
    ] = None,
) -> None:
    """Install plugins and themes into a site.

    Dependencies are resolved first and installed after confirmation:
    missing ones, then required updates, then optional updates.

    Examples:
        gpmctl install admin             # Install the admin plugin
        gpmctl install quark -y          # Install without prompting
        gpmctl install admin --symlinks  # Prefer local checkouts
    """
    site_root = (destination or Path.cwd()).expanduser().resolve()
    if not is_site_root(site_root):
        print_error(f"{site_root} is not a valid site root (no 'user' directory).")
        raise typer.Exit(code=1)

    try:
        local = load_local_config_or_default()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e

    version = platform_version or detect_platform_version(site_root)
    if version is None:
        print_error("Could not detect the platform version of the site.")
        print_info("Pass it explicitly with --platform-version.")
        raise typer.Exit(code=1)

    config = InstallConfig(
        destination=site_root,
        dev_roots=local.dev_root_paths,
        force=force,
        assume_yes=all_yes,
        use_symlinks=_resolve_symlink_preference(local, symlinks, all_yes),
        platform_version=version,
    )

    transfer = HttpTransfer()
    try:
        catalog = IndexCatalog.from_source(index or local.index, config, transfer)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print()
    result = install_all(
        packages,
        config,
        catalog=catalog,
        installer=ZipInstaller(),
        transfer=transfer,
        confirm=console_confirm,
        reporter=ConsoleReporter(),
    )

    if result.outcomes:
        console.print(create_results_table(result))
    print_run_summary(result)

    if not result.success:
        raise typer.Exit(code=1)
