"""Language detection and tokenization on top of Pygments."""

from .base import (
    PLAIN_TEXT,
    Color,
    LanguageDescriptor,
    SpanStyle,
    StyledSpan,
    Tokenizer,
    TokenizerError,
)
from .registry import GrammarRegistry
from .resolver import resolve_language
from .pygments_tokenizer import PygmentsTokenizer

__all__ = [
    "PLAIN_TEXT",
    "Color",
    "LanguageDescriptor",
    "SpanStyle",
    "StyledSpan",
    "Tokenizer",
    "TokenizerError",
    "GrammarRegistry",
    "resolve_language",
    "PygmentsTokenizer",
]
