"""Language resolution: override, special filename, extension, shebang, plain text."""

import logging
import os
from typing import Iterator, Optional

from .base import PLAIN_TEXT, LanguageDescriptor
from .registry import GrammarRegistry

_log = logging.getLogger(__name__)


def resolve_language(
    grammars: GrammarRegistry,
    override: Optional[str] = None,
    filename: Optional[str] = None,
    first_line: str = "",
) -> LanguageDescriptor:
    """Pick exactly one language for an input. Never fails.

    Args:
        grammars: Registry to look languages up in.
        override: Language name, alias or file extension chosen by the user.
        filename: Path or name of the input, if it has one.
        first_line: First decoded line of the content, for shebang matching.
    """
    if override:
        found = (
            grammars.find_by_name(override)
            or grammars.find_by_extension(override)
        )
        if found:
            _log.debug("Language %s from override %r", found.name, override)
            return found
        _log.debug("Override %r matches no language, ignoring", override)

    if filename:
        basename = os.path.basename(filename)
        found = grammars.find_by_filename(basename)
        if found:
            _log.debug("Language %s from file name %r", found.name, basename)
            return found
        for extension in candidate_extensions(basename):
            found = grammars.find_by_extension(extension)
            if found:
                _log.debug("Language %s from extension %r", found.name, extension)
                return found

    if first_line.startswith("#!"):
        found = grammars.find_by_first_line(first_line)
        if found:
            _log.debug("Language %s from shebang %r", found.name, first_line)
            return found

    return PLAIN_TEXT


def candidate_extensions(basename: str) -> Iterator[str]:
    """Dotted suffixes of a file name, longest first.

    ``"a.html.erb"`` yields ``"html.erb"`` then ``"erb"``. A leading dot
    (``".bashrc"``) does not start an extension.
    """
    parts = basename.lstrip(".").split(".")
    for i in range(1, len(parts)):
        extension = ".".join(parts[i:])
        if extension:
            yield extension
