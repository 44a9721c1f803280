"""Color themes: Pygments styles plus user themes loaded from YAML.

A theme maps token types to a foreground color and font flags. The
built-in themes are the Pygments styles; extra themes can be described in
a small YAML file::

    name: dusk
    background: "#1d1f21"
    line_number_color: "#5c6370"
    styles:
      Comment: "italic #969896"
      Keyword: "bold #b294bb"
      String: "#b5bd68"
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml
from pygments.style import Style, ansicolors
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import STANDARD_TYPES, Token, _TokenType, string_to_tokentype
from pygments.util import ClassNotFound

from ..grammars.base import Color, SpanStyle

DEFAULT_THEME_NAME = "monokai"

_LIGHT_FOREGROUND = Color(0xD0, 0xD0, 0xD0)
_DARK_FOREGROUND = Color(0x20, 0x20, 0x20)

_FLAGS = {
    "bold", "nobold", "italic", "noitalic", "underline", "nounderline",
    "noinherit", "roman", "sans", "mono",
}


class ThemeNotFoundError(LookupError):
    """Raised when a theme name is not registered."""

    def __init__(self, name: str, available: list[str]):
        super().__init__(f"Theme '{name}' not found")
        self.name = name
        self.available = available


class ThemeFileError(ValueError):
    """Raised when a YAML theme file cannot be turned into a theme."""


@dataclass(frozen=True)
class Theme:
    """A resolved color scheme backed by a Pygments style class."""

    name: str
    style: type[Style]
    _cache: dict[_TokenType, SpanStyle] = field(
        default_factory=dict, compare=False, repr=False,
    )

    @property
    def foreground(self) -> Color:
        """Default text color: the root token's color, else picked for the background."""
        color = _parse_color(self.style.style_for_token(Token)["color"])
        if color is not None:
            return color
        background = _parse_color(self.style.background_color)
        if background is None:
            return _LIGHT_FOREGROUND
        r, g, b = background
        return _DARK_FOREGROUND if (r * 299 + g * 587 + b * 114) > 128000 else _LIGHT_FOREGROUND

    @property
    def line_number_style(self) -> Optional[SpanStyle]:
        color = _parse_color(self.style.line_number_color)
        return SpanStyle(color) if color is not None else None

    def style_for(self, ttype: _TokenType) -> SpanStyle:
        """Span style for a token type, inheriting from parent types."""
        cached = self._cache.get(ttype)
        if cached is not None:
            return cached
        lookup = ttype
        while not self.style.styles_token(lookup) and lookup.parent is not None:
            lookup = lookup.parent
        token_style = self.style.style_for_token(lookup)
        span_style = SpanStyle(
            foreground=_parse_color(token_style["color"]) or self.foreground,
            bold=token_style["bold"],
            italic=token_style["italic"],
            underline=token_style["underline"],
        )
        self._cache[ttype] = span_style
        return span_style


class ThemeRegistry:
    """Theme lookup over the Pygments styles and registered YAML themes."""

    def __init__(self):
        self._custom: dict[str, type[Style]] = {}

    def register(self, style: type[Style]) -> Theme:
        self._custom[style.name] = style
        return Theme(style.name, style)

    def load_file(self, path: Union[str, Path]) -> Theme:
        """Load a YAML theme file and register it under its name."""
        return self.register(load_theme_style(path))

    def get(self, name: str) -> Theme:
        """Look up a theme by name.

        Raises:
            ThemeNotFoundError: if neither a registered nor a Pygments theme matches.
        """
        if name in self._custom:
            return Theme(name, self._custom[name])
        try:
            return Theme(name, get_style_by_name(name))
        except ClassNotFound:
            raise ThemeNotFoundError(name, self.names()) from None

    def names(self) -> list[str]:
        return sorted(set(get_all_styles()) | set(self._custom))


def load_theme_style(path: Union[str, Path]) -> type[Style]:
    """Build a Pygments style class from a YAML theme file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ThemeFileError(f"Cannot read theme file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ThemeFileError(f"Theme file {path} must contain a mapping")

    raw_styles = data.get("styles") or {}
    if not isinstance(raw_styles, dict):
        raise ThemeFileError(f"'styles' in {path} must be a mapping")

    styles = {}
    for key, value in raw_styles.items():
        ttype = _token_type(str(key), path)
        value = "" if value is None else str(value)
        for word in value.split():
            if not _valid_style_word(word):
                raise ThemeFileError(f"Bad style {value!r} for {key} in {path}")
        styles[ttype] = value

    name = str(data.get("name") or path.stem)
    attrs = {
        "name": name,
        "styles": styles,
        "background_color": data.get("background"),
        "line_number_color": data.get("line_number_color", "inherit"),
    }
    class_name = "".join(part.title() for part in name.replace("-", " ").split()) + "Style"
    return type(class_name, (Style,), attrs)


def _token_type(key: str, path: Path) -> _TokenType:
    if key == "Token":
        return Token
    if key.startswith("Token."):
        key = key[len("Token."):]
    try:
        ttype = string_to_tokentype(key)
    except AttributeError:
        ttype = None
    # attribute access on a token type invents new subtypes; accept known ones only
    if not isinstance(ttype, _TokenType) or ttype not in STANDARD_TYPES:
        raise ThemeFileError(f"Unknown token type {key!r} in {path}")
    return ttype


def _valid_style_word(word: str) -> bool:
    if word in _FLAGS:
        return True
    for prefix in ("bg:", "border:"):
        if word.startswith(prefix):
            return _valid_color(word[len(prefix):])
    return _valid_color(word)


def _valid_color(text: str) -> bool:
    if text == "" or text in ansicolors:
        return True
    return text.startswith("#") and _parse_color(text) is not None


def _parse_color(value: Optional[str]) -> Optional[Color]:
    if not value:
        return None
    try:
        return Color.from_hex(value)
    except ValueError:
        return None
