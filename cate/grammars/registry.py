"""Grammar registry built from the Pygments lexer index.

Build one ``GrammarRegistry`` at startup and pass it to whatever needs to
resolve languages or instantiate lexers. Lookup tables are filled from
``pygments.lexers.get_all_lexers()``; lexer classes are only imported when
a lookup actually needs one.
"""

import logging
from typing import Optional

from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class, get_all_lexers
from pygments.util import shebang_matches

from .base import PLAIN_TEXT, LanguageDescriptor

_log = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")

# Pygments lexer name -> the name shown to users.
DISPLAY_NAMES: dict[str, str] = {
    "Text only": PLAIN_TEXT.name,
    "Docker": "Dockerfile",
}

PLAIN_TEXT_LEXER = "Text only"

# Interpreter patterns for ``#!`` lines, checked in order. Each pattern is
# matched against the interpreter's basename (``env`` is looked through).
SHEBANG_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"pythonw?(\d+(\.\d+)?)?", "python"),
    (r"(ba|z|k|da|a)?sh", "bash"),
    (r"perl(\d+(\.\d+)*)?", "perl"),
    (r"j?ruby(\d+(\.\d+)?)?", "ruby"),
    (r"(node(js)?|deno|bun)", "javascript"),
    (r"php(\d+(\.\d+)?)?", "php"),
    (r"lua(jit|\d+(\.\d+)?)?", "lua"),
    (r"(tclsh|wish)[\d.]*", "tcl"),
    (r"[gmn]?awk", "awk"),
    (r"fish", "fish"),
    (r"(pwsh|powershell)", "powershell"),
    (r"rscript", "r"),
    (r"julia", "julia"),
    (r"g?make", "make"),
)


class GrammarRegistry:
    """Lookup tables over every lexer Pygments knows about."""

    def __init__(self, plugins: bool = True):
        self._names: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        self._extensions: dict[str, list[str]] = {}
        self._filenames: dict[str, list[str]] = {}
        self._display: dict[str, str] = {}
        self._lexer_names: dict[str, str] = {}
        self._shebangs: list[tuple[str, str]] = []
        self._classes: dict[str, type[Lexer]] = {}

        for lexer_name, aliases, patterns, _mimetypes in get_all_lexers(plugins=plugins):
            self._add_lexer(lexer_name, aliases, patterns)

        for pattern, alias in SHEBANG_PATTERNS:
            self.register_shebang(pattern, alias)

    def _add_lexer(self, lexer_name: str, aliases, patterns) -> None:
        display = DISPLAY_NAMES.get(lexer_name, lexer_name)
        if display.lower() in self._names:
            return
        self._names[display.lower()] = lexer_name
        self._names.setdefault(lexer_name.lower(), lexer_name)
        self._display[lexer_name] = display
        self._lexer_names[display] = lexer_name
        for alias in aliases:
            self._aliases.setdefault(alias.lower(), lexer_name)
        for pattern in patterns:
            if pattern.startswith("*.") and not _GLOB_CHARS & set(pattern[2:]):
                table, key = self._extensions, pattern[2:].lower()
            elif not _GLOB_CHARS & set(pattern):
                table, key = self._filenames, pattern.lower()
            else:
                continue
            claimed = table.setdefault(key, [])
            if lexer_name not in claimed:
                claimed.append(lexer_name)

    def register_shebang(self, pattern: str, alias: str) -> None:
        """Map an interpreter pattern to the lexer with the given alias."""
        lexer_name = self._aliases.get(alias.lower())
        if lexer_name is None:
            _log.debug("No lexer for shebang alias %r, skipping", alias)
            return
        self._shebangs.append((pattern, lexer_name))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def descriptor(self, lexer_name: str) -> LanguageDescriptor:
        if lexer_name == PLAIN_TEXT_LEXER:
            return PLAIN_TEXT
        return LanguageDescriptor(self._display.get(lexer_name, lexer_name))

    def find_by_name(self, name: str) -> Optional[LanguageDescriptor]:
        """Case-insensitive match on a language name or alias."""
        key = name.strip().lower()
        lexer_name = self._names.get(key) or self._aliases.get(key)
        return self.descriptor(lexer_name) if lexer_name else None

    def find_by_extension(self, extension: str) -> Optional[LanguageDescriptor]:
        candidates = self._extensions.get(extension.lstrip(".").lower())
        return self._pick(candidates)

    def find_by_filename(self, filename: str) -> Optional[LanguageDescriptor]:
        """Exact, case-insensitive match on a special file name."""
        return self._pick(self._filenames.get(filename.lower()))

    def find_by_first_line(self, line: str) -> Optional[LanguageDescriptor]:
        if not line.startswith("#!"):
            return None
        for pattern, lexer_name in self._shebangs:
            if shebang_matches(line, pattern):
                return self.descriptor(lexer_name)
        return None

    def names(self) -> list[str]:
        """All language names, sorted case-insensitively."""
        return sorted(self._lexer_names, key=str.lower)

    def lexer_class(self, descriptor: LanguageDescriptor) -> type[Lexer]:
        """Import and return the Pygments lexer class behind a descriptor."""
        lexer_name = self._lexer_names.get(descriptor.name)
        if lexer_name is None:
            raise KeyError(descriptor.name)
        return self._load(lexer_name)

    # ------------------------------------------------------------------

    def _load(self, lexer_name: str) -> type[Lexer]:
        cls = self._classes.get(lexer_name)
        if cls is None:
            cls = find_lexer_class(lexer_name)
            if cls is None:
                raise KeyError(lexer_name)
            self._classes[lexer_name] = cls
        return cls

    def _pick(self, candidates: Optional[list[str]]) -> Optional[LanguageDescriptor]:
        """Highest Pygments priority wins; ties go to the first registered."""
        if not candidates:
            return None
        if len(candidates) == 1:
            return self.descriptor(candidates[0])
        best = candidates[0]
        best_priority = self._priority(best)
        for lexer_name in candidates[1:]:
            priority = self._priority(lexer_name)
            if priority > best_priority:
                best, best_priority = lexer_name, priority
        return self.descriptor(best)

    def _priority(self, lexer_name: str) -> float:
        try:
            return getattr(self._load(lexer_name), "priority", 0)
        except KeyError:
            return float("-inf")
