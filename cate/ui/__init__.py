"""Terminal output: themes, color projection, gutter and the stream renderer."""

from .theme import DEFAULT_THEME_NAME, Theme, ThemeRegistry
from .color import ColorMode, detect_color_mode
from .gutter import render_gutter
from .stream import StreamRenderer

__all__ = [
    "DEFAULT_THEME_NAME",
    "Theme",
    "ThemeRegistry",
    "ColorMode",
    "detect_color_mode",
    "render_gutter",
    "StreamRenderer",
]
