"""Output rendering -- thin facade wiring an input through the pipeline.

Decoding decision, language resolution and the stream renderer are run
once per input, in that order.
"""

import logging
from typing import Iterable, Optional, TextIO

from rich.console import Console
from rich.text import Text

from ..config import RenderConfig
from ..encoding import EncodingDecision
from ..grammars.base import LanguageDescriptor, Tokenizer
from ..grammars.registry import GrammarRegistry
from ..grammars.resolver import resolve_language
from ..source import DecodedInput, InputSource
from .color import ColorMode
from .stream import StreamRenderer

_log = logging.getLogger(__name__)

ERROR_COLOR = "#e55a6e"
MUTED_COLOR = "#363648"

console = Console()
err_console = Console(stderr=True)


def print_source(
    source: InputSource,
    config: RenderConfig,
    grammars: GrammarRegistry,
    tokenizer: Optional[Tokenizer],
    mode: ColorMode,
    sink: TextIO,
) -> tuple[EncodingDecision, LanguageDescriptor]:
    """Decode, resolve and render one input to ``sink``.

    ``tokenizer`` should be None when highlighting is disabled.

    Returns:
        The encoding decision and language used, for diagnostics.
    """
    decoded = DecodedInput.open(source, config.encoding, config.fallback_encoding)
    decision = decoded.decision
    _log.debug(
        "Final encoding: %s (confidence: %s, source: %s)",
        decision.encoding, decision.confidence.value, decision.source.value,
    )

    descriptor = resolve_language(
        grammars, config.language, source.name, decoded.first_line(),
    )
    _log.debug("Language: %s", descriptor.name)

    total_lines = decoded.count_lines() if config.line_numbers else None

    gutter_style = None
    if tokenizer is not None:
        gutter_style = getattr(getattr(tokenizer, "theme", None), "line_number_style", None)

    renderer = StreamRenderer(
        tokenizer,
        descriptor,
        mode,
        sink,
        line_numbers=config.line_numbers,
        total_lines=total_lines,
        gutter_style=gutter_style,
        max_line_bytes=config.max_line_bytes,
    )
    renderer.render(decoded.chunks())
    _log.debug("Rendered %d lines", renderer.state.line_index)
    return decision, descriptor


def render_error(text: str, con: Optional[Console] = None) -> None:
    """Render an error message to stderr."""
    err = Text()
    err.append("err ", style=f"bold {ERROR_COLOR}")
    err.append("| ", style=f"dim {MUTED_COLOR}")
    err.append(text, style=ERROR_COLOR)
    (con or err_console).print(err, soft_wrap=True)


def render_listing(
    items: Iterable[str],
    title: str = "",
    con: Optional[Console] = None,
    indent: str = "  ",
) -> None:
    """Print a titled, indented list, one item per line."""
    con = con or console
    if title:
        con.print(title, markup=False, highlight=False)
    else:
        indent = ""
    for item in items:
        con.print(f"{indent}{item}", markup=False, highlight=False, soft_wrap=True)
