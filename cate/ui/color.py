"""Projection of styled spans onto terminal escape sequences.

Three color depths are supported. The depth is picked once per render and
never changes while a stream is being written.
"""

from enum import Enum
from typing import Iterable, Optional

from rich.console import Console

from ..grammars.base import Color, SpanStyle, StyledSpan

RESET = "\x1b[0m"

COLOR_CHOICES = ("auto", "always", "never", "truecolor", "256")


class ColorMode(Enum):
    TRUECOLOR = "truecolor"
    PALETTE256 = "256"
    NONE = "none"


def palette_index(color: Color) -> int:
    """Nearest-step index into the 6x6x6 cube of the 256-color palette."""
    r, g, b = (channel * 5 // 255 for channel in color)
    return 16 + 36 * r + 6 * g + b


def sgr_prologue(style: SpanStyle, mode: ColorMode) -> str:
    """The escape sequence that switches the terminal to ``style``."""
    codes = []
    if style.bold:
        codes.append("1")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    r, g, b = style.foreground
    if mode is ColorMode.TRUECOLOR:
        codes.append(f"38;2;{r};{g};{b}")
    elif mode is ColorMode.PALETTE256:
        codes.append(f"38;5;{palette_index(style.foreground)}")
    else:
        return ""
    return f"\x1b[{';'.join(codes)}m"


def project_span(span: StyledSpan, mode: ColorMode) -> str:
    """Render one span: escape prologue, literal text, reset."""
    if not span.text or span.style is None or mode is ColorMode.NONE:
        return span.text
    return f"{sgr_prologue(span.style, mode)}{span.text}{RESET}"


def project_spans(spans: Iterable[StyledSpan], mode: ColorMode) -> str:
    return "".join(project_span(span, mode) for span in spans)


def detect_color_mode(choice: str = "auto", console: Optional[Console] = None) -> ColorMode:
    """Map a ``--color`` choice and the terminal's capabilities to a mode.

    Args:
        choice: One of ``COLOR_CHOICES``.
        console: Console whose ``color_system`` is inspected; a new stdout
            console when None.
    """
    if choice == "never":
        return ColorMode.NONE
    if choice == "truecolor":
        return ColorMode.TRUECOLOR
    if choice == "256":
        return ColorMode.PALETTE256
    if choice not in ("auto", "always"):
        raise ValueError(f"unknown color choice: {choice!r}")

    forced = choice == "always"
    con = console or Console(force_terminal=True if forced else None)
    if con.no_color and not forced:
        return ColorMode.NONE
    system = con.color_system
    if system == "truecolor":
        return ColorMode.TRUECOLOR
    if system is None:
        return ColorMode.PALETTE256 if forced else ColorMode.NONE
    return ColorMode.PALETTE256
