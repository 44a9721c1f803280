"""Line-number gutter.

Numbers are right-aligned and followed by a two-space separator. When the
total line count is known up front every number gets the same width; for
streamed input the width grows with the highest number printed so far.
"""

from typing import Optional

from ..grammars.base import SpanStyle, StyledSpan

GUTTER_SEPARATOR = "  "


def number_width(total_lines: Optional[int]) -> int:
    """Digit count of the highest line number that will be printed."""
    if not total_lines or total_lines < 1:
        return 1
    return len(str(total_lines))


def render_gutter(number: int, width: int, style: Optional[SpanStyle] = None) -> StyledSpan:
    """Build the gutter span for a 1-based line number."""
    return StyledSpan(f"{number:>{width}}{GUTTER_SEPARATOR}", style)
