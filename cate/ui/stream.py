"""Streaming line renderer.

Decoded text arrives in chunks with arbitrary boundaries. Complete lines
are tokenized with the state carried from the previous line, projected
through the active color mode and written to the sink straight away, so
only the current line is ever held in memory.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TextIO

from ..grammars.base import LanguageDescriptor, SpanStyle, StyledSpan, Tokenizer, TokenizerError
from .color import ColorMode, project_span, project_spans
from .gutter import number_width, render_gutter

_log = logging.getLogger(__name__)

# Lines longer than this (in UTF-8 bytes) skip the tokenizer.
MAX_LINE_BYTES = 16 * 1024


@dataclass
class RenderState:
    """Per-render mutable state. Owned by a single StreamRenderer."""

    carry: Any = None
    line_index: int = 0
    total_lines: Optional[int] = None
    number_width: int = 1


class StreamRenderer:
    """Stateful renderer that handles arbitrary chunk boundaries.

    Usage:
        renderer = StreamRenderer(tokenizer, descriptor, mode, sys.stdout)
        for chunk in decoded.chunks():
            renderer.feed(chunk)
        renderer.finish()
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer],
        descriptor: LanguageDescriptor,
        mode: ColorMode,
        sink: TextIO,
        *,
        line_numbers: bool = False,
        total_lines: Optional[int] = None,
        gutter_style: Optional[SpanStyle] = None,
        max_line_bytes: int = MAX_LINE_BYTES,
    ):
        self._descriptor = descriptor
        self._mode = mode
        self._sink = sink
        self._line_numbers = line_numbers
        self._gutter_style = gutter_style
        self._max_line_bytes = max_line_bytes
        self._pending: list[str] = []

        highlight = (
            tokenizer is not None
            and not descriptor.is_plain_text
            and mode is not ColorMode.NONE
        )
        self._tokenizer = tokenizer if highlight else None
        self._state = RenderState(
            carry=self._tokenizer.start_state(descriptor) if self._tokenizer else None,
            total_lines=total_lines,
            number_width=number_width(total_lines),
        )

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def highlighting(self) -> bool:
        return self._tokenizer is not None

    def feed(self, chunk: str) -> None:
        """Feed a chunk of decoded text."""
        if "\n" not in chunk:
            if chunk:
                self._pending.append(chunk)
            return
        head, *lines, tail = chunk.split("\n")
        self._pending.append(head)
        first = "".join(self._pending)
        self._pending = [tail] if tail else []
        self._emit_line(first)
        for line in lines:
            self._emit_line(line)

    def finish(self) -> None:
        """Emit a final unterminated line, if any, and flush the sink."""
        line = "".join(self._pending)
        self._pending = []
        if line:
            self._emit_line(line)
        self._sink.flush()

    def render(self, chunks: Iterable[str]) -> None:
        for chunk in chunks:
            self.feed(chunk)
        self.finish()

    def _emit_line(self, line: str) -> None:
        eol = "\n"
        if line.endswith("\r"):
            line, eol = line[:-1], "\r\n"

        state = self._state
        state.line_index += 1
        out = []
        if self._line_numbers:
            if state.total_lines is None:
                state.number_width = max(state.number_width, number_width(state.line_index))
            gutter = render_gutter(state.line_index, state.number_width, self._gutter_style)
            out.append(project_span(gutter, self._mode))

        out.append(project_spans(self._spans(line), self._mode))
        out.append(eol)
        self._sink.write("".join(out))

    def _spans(self, line: str) -> list[StyledSpan]:
        if self._tokenizer is None:
            return [StyledSpan(line)]
        if self._too_long(line):
            _log.debug("Line %d exceeds %d bytes, not highlighted",
                       self._state.line_index, self._max_line_bytes)
            return [StyledSpan(line)]
        try:
            spans, carry = self._tokenizer.tokenize(self._descriptor, self._state.carry, line)
        except TokenizerError as e:
            _log.debug("Tokenizer failed on line %d: %s", self._state.line_index, e)
            return [StyledSpan(line)]
        self._state.carry = carry
        return spans

    def _too_long(self, line: str) -> bool:
        limit = self._max_line_bytes
        if len(line) > limit:
            return True
        if len(line) * 4 <= limit:
            return False
        return len(line.encode("utf-8", "surrogatepass")) > limit
