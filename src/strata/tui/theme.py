"""Colors, effects, palettes and theme loading.

A :class:`Theme` assigns concrete :class:`Color` values to a fixed set of
:class:`PaletteColor` roles.  Views never name concrete colors directly;
they print with a :class:`ColorStyle` that is resolved against the active
palette at draw time.  Palettes may carry path-scoped overrides, read from
nested tables of the theme file.

Themes are loaded from TOML::

    shadow = true
    borders = "simple"

    [palette]
    background = "blue"
    view = ["#c0c0c0", "white"]   # first parseable entry wins

    [palette.menubar]
    highlight = "light red"       # palette.get("menubar/highlight", ...)
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

__all__ = [
    "BaseColor",
    "Color",
    "ColorPair",
    "ColorStyle",
    "Effect",
    "PaletteColor",
    "Palette",
    "BorderStyle",
    "Theme",
    "ThemeError",
    "default_palette",
    "load_default",
    "load_toml",
    "load_theme_file",
]


class ThemeError(ValueError):
    """Raised when theme data cannot be read or parsed."""


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class BaseColor(Enum):
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


@dataclass(frozen=True)
class Color:
    """A concrete terminal color.

    ``kind`` is one of ``"default"`` (the terminal's own color), ``"dark"``
    and ``"light"`` (the 16 base colors) or ``"rgb"``.
    """

    kind: str
    base: BaseColor | None = None
    rgb: tuple[int, int, int] | None = None

    @classmethod
    def terminal_default(cls) -> Color:
        return cls("default")

    @classmethod
    def dark(cls, base: BaseColor) -> Color:
        return cls("dark", base=base)

    @classmethod
    def light(cls, base: BaseColor) -> Color:
        return cls("light", base=base)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        return cls("rgb", rgb=(r, g, b))

    @classmethod
    def parse(cls, value: str) -> Color | None:
        """Parse a color name, ``"light <name>"``, ``#rgb`` or ``#rrggbb``."""
        value = value.strip().lower()
        if value in ("default", "terminal_default"):
            return cls.terminal_default()
        if value.startswith("#"):
            digits = value[1:]
            try:
                if len(digits) == 3:
                    r, g, b = (int(d, 16) * 17 for d in digits)
                    return cls.from_rgb(r, g, b)
                if len(digits) == 6:
                    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
                    return cls.from_rgb(r, g, b)
            except ValueError:
                return None
            return None
        light = False
        if value.startswith("light "):
            light = True
            value = value[len("light ") :].strip()
        try:
            base = BaseColor[value.upper()]
        except KeyError:
            return None
        return cls.light(base) if light else cls.dark(base)


@dataclass(frozen=True)
class ColorPair:
    front: Color
    back: Color

    def invert(self) -> ColorPair:
        return ColorPair(self.back, self.front)


class Effect(Enum):
    SIMPLE = "simple"
    REVERSE = "reverse"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------


class PaletteColor(Enum):
    """Color roles a theme assigns."""

    BACKGROUND = "background"
    SHADOW = "shadow"
    VIEW = "view"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    TITLE_PRIMARY = "title_primary"
    TITLE_SECONDARY = "title_secondary"
    HIGHLIGHT = "highlight"
    HIGHLIGHT_INACTIVE = "highlight_inactive"


# A node of the override tree: either a color or a nested table.
PaletteNode = Union[Color, dict[str, "PaletteNode"]]


def _default_colors() -> dict[PaletteColor, Color]:
    return {
        PaletteColor.BACKGROUND: Color.dark(BaseColor.BLUE),
        PaletteColor.SHADOW: Color.dark(BaseColor.BLACK),
        PaletteColor.VIEW: Color.dark(BaseColor.WHITE),
        PaletteColor.PRIMARY: Color.dark(BaseColor.BLACK),
        PaletteColor.SECONDARY: Color.dark(BaseColor.BLUE),
        PaletteColor.TERTIARY: Color.dark(BaseColor.WHITE),
        PaletteColor.TITLE_PRIMARY: Color.dark(BaseColor.RED),
        PaletteColor.TITLE_SECONDARY: Color.dark(BaseColor.YELLOW),
        PaletteColor.HIGHLIGHT: Color.dark(BaseColor.RED),
        PaletteColor.HIGHLIGHT_INACTIVE: Color.dark(BaseColor.BLUE),
    }


@dataclass
class Palette:
    """Role -> color mapping, plus optional path-scoped overrides."""

    colors: dict[PaletteColor, Color] = field(default_factory=_default_colors)
    custom: dict[str, PaletteNode] | None = None

    def __getitem__(self, role: PaletteColor) -> Color:
        return self.colors[role]

    def __setitem__(self, role: PaletteColor, color: Color) -> None:
        self.colors[role] = color

    def get(self, path: str, role: PaletteColor) -> Color:
        """Look up the override at the slash-separated *path*.

        Falls back to the color of *role* whenever the path does not lead
        to a color in the override tree.
        """
        node: PaletteNode | None = self.custom
        if node is None:
            return self.colors[role]
        for name in path.split("/"):
            if not isinstance(node, dict):
                return self.colors[role]
            node = node.get(name)
        if isinstance(node, Color):
            return node
        return self.colors[role]


def default_palette() -> Palette:
    return Palette()


# ---------------------------------------------------------------------------
# Color styles
# ---------------------------------------------------------------------------

# A style side is either a palette role or a concrete color.
ColorType = Union[PaletteColor, Color]


@dataclass(frozen=True)
class ColorStyle:
    """Front/back colors expressed in palette roles or concrete colors."""

    front: ColorType
    back: ColorType

    @classmethod
    def background(cls) -> ColorStyle:
        return cls(PaletteColor.BACKGROUND, PaletteColor.BACKGROUND)

    @classmethod
    def shadow(cls) -> ColorStyle:
        return cls(PaletteColor.SHADOW, PaletteColor.SHADOW)

    @classmethod
    def view(cls) -> ColorStyle:
        return cls(PaletteColor.VIEW, PaletteColor.VIEW)

    @classmethod
    def primary(cls) -> ColorStyle:
        return cls(PaletteColor.PRIMARY, PaletteColor.VIEW)

    @classmethod
    def secondary(cls) -> ColorStyle:
        return cls(PaletteColor.SECONDARY, PaletteColor.VIEW)

    @classmethod
    def tertiary(cls) -> ColorStyle:
        return cls(PaletteColor.TERTIARY, PaletteColor.VIEW)

    @classmethod
    def title_primary(cls) -> ColorStyle:
        return cls(PaletteColor.TITLE_PRIMARY, PaletteColor.VIEW)

    @classmethod
    def title_secondary(cls) -> ColorStyle:
        return cls(PaletteColor.TITLE_SECONDARY, PaletteColor.VIEW)

    @classmethod
    def highlight(cls) -> ColorStyle:
        return cls(PaletteColor.VIEW, PaletteColor.HIGHLIGHT)

    @classmethod
    def highlight_inactive(cls) -> ColorStyle:
        return cls(PaletteColor.VIEW, PaletteColor.HIGHLIGHT_INACTIVE)

    @classmethod
    def with_front(cls, color: Color) -> ColorStyle:
        return cls(color, PaletteColor.VIEW)

    def resolve(self, palette: Palette) -> ColorPair:
        return ColorPair(_resolve(self.front, palette), _resolve(self.back, palette))


def _resolve(color: ColorType, palette: Palette) -> Color:
    if isinstance(color, PaletteColor):
        return palette[color]
    return color


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


class BorderStyle(Enum):
    SIMPLE = "simple"
    OUTSET = "outset"
    NONE = "none"


@dataclass
class Theme:
    shadow: bool = True
    borders: BorderStyle = BorderStyle.SIMPLE
    palette: Palette = field(default_factory=Palette)


def load_default() -> Theme:
    return Theme()


def load_toml(content: str) -> Theme:
    """Build a theme from TOML *content*, starting from the defaults.

    Raises :class:`ThemeError` on malformed TOML or invalid values.
    """
    try:
        table = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ThemeError(f"invalid theme: {exc}") from exc

    theme = load_default()

    shadow = table.get("shadow")
    if shadow is not None:
        if not isinstance(shadow, bool):
            raise ThemeError(f"'shadow' must be a boolean, got {shadow!r}")
        theme.shadow = shadow

    borders = table.get("borders")
    if borders is not None:
        try:
            theme.borders = BorderStyle(str(borders).lower())
        except ValueError as exc:
            raise ThemeError(f"unknown border style {borders!r}") from exc

    palette_table = table.get("palette")
    if palette_table is not None:
        if not isinstance(palette_table, dict):
            raise ThemeError("'palette' must be a table")
        _load_palette(theme.palette, palette_table)

    return theme


def load_theme_file(path: str | Path) -> Theme:
    """Read and parse a TOML theme file."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ThemeError(f"cannot read theme file {path}: {exc}") from exc
    return load_toml(content)


def _load_palette(palette: Palette, table: dict[str, Any]) -> None:
    custom: dict[str, PaletteNode] = {}
    for key, value in table.items():
        if isinstance(value, dict):
            custom[key] = _load_node(value)
            continue
        try:
            role = PaletteColor(key)
        except ValueError:
            logger.warning("Ignoring unknown palette role %r", key)
            continue
        color = _parse_color_value(value)
        if color is None:
            logger.warning("Ignoring unparseable color %r for %s", value, key)
            continue
        palette[role] = color
    if custom:
        palette.custom = custom


def _load_node(table: dict[str, Any]) -> dict[str, PaletteNode]:
    node: dict[str, PaletteNode] = {}
    for key, value in table.items():
        if isinstance(value, dict):
            node[key] = _load_node(value)
        else:
            color = _parse_color_value(value)
            if color is not None:
                node[key] = color
    return node


def _parse_color_value(value: Any) -> Color | None:
    if isinstance(value, str):
        return Color.parse(value)
    if isinstance(value, list):
        for item in value:
            color = _parse_color_value(item)
            if color is not None:
                return color
    return None
