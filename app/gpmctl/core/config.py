"""Run configuration and user settings.

This module provides the immutable per-run configuration threaded through
every installer component, plus the user configuration file that lists
development roots and the package index location.

User configuration is stored in ~/.config/gpmctl/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gpmctl.core.paths import get_config_path, get_download_dir

logger = logging.getLogger(__name__)

# Default package index (same layout as the upstream GPM repository feed)
DEFAULT_INDEX = "https://getgrav.org/downloads/gpm.json"


class InstallConfig(BaseModel):
    """Immutable configuration for a single install run.

    Attributes:
        destination: Site root packages are installed into.
        dev_roots: Development roots searched for local checkouts, in order.
        force: Re-fetch remote data instead of using the cache.
        assume_yes: Assume yes (or the safest choice) instead of prompting.
        use_symlinks: Prefer symlinking local checkouts over downloading.
        platform_version: Version of the running site platform.
        download_dir: Parent directory for temporary download directories.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    destination: Path
    dev_roots: tuple[Path, ...] = ()
    force: bool = False
    assume_yes: bool = False
    use_symlinks: bool = False
    platform_version: str
    download_dir: Path = Field(default_factory=get_download_dir)

    def destination_path(self, relative_path: str) -> Path:
        """Resolve a package-relative path against the destination root."""
        return self.destination / relative_path


class LocalConfig(BaseModel):
    """User settings read from config.toml.

    Attributes:
        dev_roots: Directories holding development checkouts, searched in order.
        index: URL or local path of the package index.
    """

    model_config = ConfigDict(extra="forbid")

    dev_roots: Annotated[
        list[str],
        Field(description="Development roots searched for symlink sources"),
    ] = []
    index: Annotated[
        str,
        Field(min_length=1, description="Package index URL or path"),
    ] = DEFAULT_INDEX

    @property
    def dev_root_paths(self) -> tuple[Path, ...]:
        """Development roots as expanded paths, order preserved."""
        return tuple(Path(root).expanduser() for root in self.dev_roots)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_local_config(path: Path | None = None) -> LocalConfig:
    """Load user configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated LocalConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return LocalConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_local_config_or_default(path: Path | None = None) -> LocalConfig:
    """Load user configuration, falling back to defaults when absent.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    try:
        return load_local_config(path)
    except ConfigNotFoundError:
        logger.debug("No user config found, using defaults")
        return LocalConfig()


def save_local_config(config: LocalConfig, path: Path | None = None) -> Path:
    """Save user configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The LocalConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, object] = {"dev_roots": list(config.dev_roots)}
    if config.index != DEFAULT_INDEX:
        data["index"] = config.index

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
