"""cate - cat with syntax highlighting and encoding detection."""

__version__ = "0.1.0"

from .cli import cli, CateApp
from .config import RenderConfig
from .encoding import EncodingDecision, resolve_encoding
from .grammars import GrammarRegistry, LanguageDescriptor, resolve_language

__all__ = [
    "cli",
    "CateApp",
    "RenderConfig",
    "EncodingDecision",
    "resolve_encoding",
    "GrammarRegistry",
    "LanguageDescriptor",
    "resolve_language",
]
