"""Render configuration handed from the CLI layer to the core."""

from dataclasses import dataclass
from typing import Optional

from .encoding import normalize_encoding
from .ui.color import COLOR_CHOICES
from .ui.stream import MAX_LINE_BYTES
from .ui.theme import DEFAULT_THEME_NAME

# Prefix for environment overrides of CLI options (CATE_THEME, CATE_COLOR, ...).
ENV_PREFIX = "CATE"


@dataclass(frozen=True)
class RenderConfig:
    """Validated settings for rendering one or more inputs."""

    encoding: Optional[str] = None
    fallback_encoding: Optional[str] = None
    language: Optional[str] = None
    highlight: bool = True
    theme: str = DEFAULT_THEME_NAME
    line_numbers: bool = False
    color: str = "auto"
    max_line_bytes: int = MAX_LINE_BYTES

    @classmethod
    def from_options(
        cls,
        encoding: Optional[str] = None,
        fallback_encoding: Optional[str] = None,
        language: Optional[str] = None,
        highlight: bool = True,
        theme: Optional[str] = None,
        line_numbers: bool = False,
        color: str = "auto",
    ) -> "RenderConfig":
        """Build a config from raw option values.

        Encoding labels are normalized to Python codec names.

        Raises:
            UnknownEncodingError: for an encoding label no codec answers to.
            ValueError: for an unknown color choice.
        """
        if color not in COLOR_CHOICES:
            raise ValueError(f"unknown color choice: {color!r}")
        return cls(
            encoding=normalize_encoding(encoding) if encoding else None,
            fallback_encoding=normalize_encoding(fallback_encoding) if fallback_encoding else None,
            language=language or None,
            highlight=highlight,
            theme=theme or DEFAULT_THEME_NAME,
            line_numbers=line_numbers,
            color=color,
        )
