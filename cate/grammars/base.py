"""Base tokenizer interface and the shared span types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional


class TokenizerError(Exception):
    """A tokenizer could not produce spans for one line."""


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse ``#rrggbb``, ``rrggbb`` or the short ``#rgb`` form."""
        digits = value.lstrip("#")
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) != 6:
            raise ValueError(f"not a hex color: {value!r}")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


@dataclass(frozen=True)
class SpanStyle:
    """Foreground color plus font flags for one span."""

    foreground: Color
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class StyledSpan:
    """A run of text with a single style. ``style=None`` means unstyled."""

    text: str
    style: Optional[SpanStyle] = None


@dataclass(frozen=True)
class LanguageDescriptor:
    """The grammar identity resolved for one input."""

    name: str
    is_plain_text: bool = False


PLAIN_TEXT = LanguageDescriptor("Plain Text", is_plain_text=True)


class Tokenizer(ABC):
    """Line-oriented tokenizer that carries state between lines.

    Implementations must be deterministic for identical
    (descriptor, state, line) triples.
    """

    @abstractmethod
    def start_state(self, descriptor: LanguageDescriptor) -> Any:
        """Return the state to carry into the first line of a stream."""
        pass

    @abstractmethod
    def tokenize(
        self,
        descriptor: LanguageDescriptor,
        state: Any,
        line: str,
    ) -> tuple[list[StyledSpan], Any]:
        """Split one line (without its terminator) into styled spans.

        Returns:
            Tuple of (spans covering ``line`` exactly, state for the next line).

        Raises:
            TokenizerError: if the line cannot be tokenized.
        """
        pass
