"""Console colors for kprune.

The bundled ``data/theme.toml`` defines every color. A user file at
``~/.config/kprune/theme.toml`` may override any subset of them; an
override rich cannot parse is dropped on its own and the bundled value
stays in effect.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.color import Color, ColorParseError
from rich.theme import Theme

from kprune.core.paths import get_theme_path

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Colors used by kprune output.

    Any color rich understands is accepted: names (``red``), hex
    (``#ff0000``) or ``color(196)``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Verdicts
    keep: str
    delete: str
    skip: str

    # Messages
    success: str
    info: str
    warning: str
    error: str

    # Tables
    header: str
    border: str
    muted: str

    @field_validator("*")
    @classmethod
    def check_color(cls, v: str) -> str:
        try:
            Color.parse(v)
        except ColorParseError as e:
            raise ValueError(str(e)) from None
        return v


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped with the package."""
    return Path(str(resources.files("kprune.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    A missing or unreadable file yields no colors. Problems other than a
    missing file are logged.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] must be a table", path)
        return {}
    return {str(k): v for k, v in table.items() if isinstance(v, str)}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled colors with user overrides applied.

    Args:
        user_path: Override file, ``get_theme_path()`` when omitted.

    Raises:
        ValidationError: If the bundled theme itself is invalid.
    """
    bundled = read_colors(get_bundled_theme_path())
    overrides = read_colors(user_path or get_theme_path())

    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        rejected = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        for key in sorted(rejected):
            logger.warning("Ignoring theme color %r: %s", key, overrides.get(key, "<unset>"))
        kept = {k: v for k, v in overrides.items() if k not in rejected}
        return ThemeColors(**{**bundled, **kept})


def build_rich_theme(colors: ThemeColors) -> Theme:
    """Map theme colors onto the style names used in markup and tables."""
    return Theme(
        {
            "keep": colors.keep,
            "delete": f"bold {colors.delete}",
            "skip": colors.skip,
            "success": colors.success,
            "info": colors.info,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "bold_header": f"bold {colors.header}",
            "border": colors.border,
            "muted": colors.muted,
            "dim": colors.muted,
            "object.namespace": colors.muted,
        }
    )


@cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return build_rich_theme(load_theme())
