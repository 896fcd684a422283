"""Per-user file locations.

Settings live under ``$XDG_CONFIG_HOME/gpmctl`` (``~/.config/gpmctl``),
the cached package index and download scratch space under
``$XDG_CACHE_HOME/gpmctl`` (``~/.cache/gpmctl``).
"""

import os
from pathlib import Path

APP_NAME = "gpmctl"


def _get_xdg_dir(env_var: str, fallback: str) -> Path:
    base = os.environ.get(env_var)
    root = Path(base) if base else Path.home() / fallback
    return root / APP_NAME


def get_config_dir() -> Path:
    """Directory holding config.toml and theme.toml."""
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_cache_dir() -> Path:
    """Directory holding the index cache and temporary downloads."""
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    return get_config_dir() / "theme.toml"


def get_index_cache_path() -> Path:
    """Cached copy of the last remote package index fetched."""
    return get_cache_dir() / "index.json"


def get_download_dir() -> Path:
    """Parent of the per-download temporary directories.

    Each download gets its own directory below this one, removed once the
    package has been placed.
    """
    return get_cache_dir() / "tmp"

