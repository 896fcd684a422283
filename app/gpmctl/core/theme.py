"""Console color theme.

Status lines produced during an install run carry Rich markup that refers
to the semantic style names defined here (``success``, ``warning``,
``error``, ``package``...). Colors can be overridden per user in
``~/.config/gpmctl/theme.toml``::

    [colors]
    package = "#ffaa00"
    error = "#ff0000"
"""

import logging
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from gpmctl.core.paths import get_theme_path

logger = logging.getLogger(__name__)

# Rich style name -> (color field, extra style attributes)
_STYLE_MAP: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "package": ("package", "bold"),
    "progress": ("progress", ""),
}


def _check_hex(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field}: color must be a string")
    color = value.strip()
    if not color.startswith("#"):
        raise ValueError(f"{field}: color must start with '#'")
    digits = color[1:]
    if len(digits) not in (3, 6):
        raise ValueError(f"{field}: color must be #RGB or #RRGGBB format")
    if any(ch not in "0123456789abcdefABCDEF" for ch in digits):
        raise ValueError(f"{field}: invalid hex color '{color}'")
    return color


class ThemeColors(BaseModel):
    """Hex colors backing the console styles."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    package: str = "#0ec1c8"
    progress: str = "#b2bec3"

    @field_validator("*", mode="before")
    @classmethod
    def _validate_color(cls, value: object, info) -> str:
        return _check_hex(info.field_name, value)


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Returns:
        String values of the table, or None if the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return {key: value for key, value in table.items() if isinstance(value, str)}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors with user overrides applied.

    Invalid override files are ignored with a warning; the defaults are
    used instead.

    Args:
        path: Theme file. If None, uses ~/.config/gpmctl/theme.toml.
    """
    theme_path = path or get_theme_path()
    overrides = _load_toml_colors(theme_path)
    if not overrides:
        return ThemeColors()

    try:
        colors = ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid colors in %s, using defaults: %s", theme_path, e)
        return ThemeColors()

    logger.debug("Loaded theme overrides from %s", theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a set of colors (loaded if not given)."""
    colors = colors or load_theme()
    styles: dict[str, str] = {}
    for name, (field, extra) in _STYLE_MAP.items():
        color = getattr(colors, field)
        styles[name] = f"{extra} {color}".strip()
    return Theme(styles)


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme shared by every console, loaded on first use."""
    return get_rich_theme()
