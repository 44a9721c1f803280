"""Tests for cate.grammars.registry."""

import pytest

from cate.grammars.base import PLAIN_TEXT, LanguageDescriptor
from cate.grammars.registry import GrammarRegistry

_GRAMMARS = GrammarRegistry()


def test_find_by_name_is_case_insensitive():
    assert _GRAMMARS.find_by_name("python").name == "Python"
    assert _GRAMMARS.find_by_name("PYTHON").name == "Python"


def test_find_by_alias():
    assert _GRAMMARS.find_by_name("py").name == "Python"
    assert _GRAMMARS.find_by_name("sh").name == "Bash"


def test_find_by_name_unknown():
    assert _GRAMMARS.find_by_name("no-such-language") is None


def test_find_by_extension():
    assert _GRAMMARS.find_by_extension("py").name == "Python"
    assert _GRAMMARS.find_by_extension(".RS").name == "Rust"
    assert _GRAMMARS.find_by_extension("zzz-not-real") is None


def test_find_by_filename():
    assert _GRAMMARS.find_by_filename("Makefile").name == "Makefile"
    assert _GRAMMARS.find_by_filename("MAKEFILE").name == "Makefile"
    assert _GRAMMARS.find_by_filename("Dockerfile").name == "Dockerfile"
    assert _GRAMMARS.find_by_filename("notes") is None


def test_display_names():
    names = _GRAMMARS.names()
    assert "Plain Text" in names
    assert "Dockerfile" in names
    assert "Text only" not in names
    assert "Docker" not in names
    assert names == sorted(names, key=str.lower)


def test_plain_text_descriptor():
    assert _GRAMMARS.find_by_name("Plain Text") == PLAIN_TEXT
    assert _GRAMMARS.find_by_name("text") == PLAIN_TEXT


@pytest.mark.parametrize("line, expected", [
    ("#!/bin/bash", "Bash"),
    ("#!/bin/sh -e", "Bash"),
    ("#!/usr/bin/env python3", "Python"),
    ("#!/usr/bin/python", "Python"),
    ("#!/usr/bin/env perl -w", "Perl"),
    ("#!/usr/bin/env node", "JavaScript"),
])
def test_find_by_first_line(line, expected):
    assert _GRAMMARS.find_by_first_line(line).name == expected


def test_find_by_first_line_requires_shebang():
    assert _GRAMMARS.find_by_first_line("python") is None
    assert _GRAMMARS.find_by_first_line("#!/usr/bin/unknown-interp") is None


def test_register_shebang():
    grammars = GrammarRegistry()
    grammars.register_shebang(r"mypython", "python")
    assert grammars.find_by_first_line("#!/opt/bin/mypython").name == "Python"


def test_lexer_class():
    cls = _GRAMMARS.lexer_class(_GRAMMARS.find_by_name("python"))
    assert "python" in cls.aliases


def test_lexer_class_unknown_descriptor():
    with pytest.raises(KeyError):
        _GRAMMARS.lexer_class(LanguageDescriptor("Not A Language"))


@pytest.mark.parametrize("line", [
    "#!/usr/bin/nodemon",
    "#!/opt/x/mydeno",
    "#!/usr/bin/pwsh-preview",
    "#!/usr/local/bin/notbun",
])
def test_shebang_alternatives_match_whole_interpreter(line):
    assert _GRAMMARS.find_by_first_line(line) is None


@pytest.mark.parametrize("line, expected", [
    ("#!/usr/bin/env deno", "JavaScript"),
    ("#!/usr/bin/env bun", "JavaScript"),
    ("#!/usr/bin/env pwsh", "PowerShell"),
    ("#!/usr/bin/powershell", "PowerShell"),
])
def test_shebang_alternatives(line, expected):
    assert _GRAMMARS.find_by_first_line(line).name == expected
