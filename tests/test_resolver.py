"""Tests for cate.grammars.resolver."""

from cate.grammars.base import PLAIN_TEXT
from cate.grammars.registry import GrammarRegistry
from cate.grammars.resolver import candidate_extensions, resolve_language

_GRAMMARS = GrammarRegistry()


def _name(**kwargs) -> str:
    return resolve_language(_GRAMMARS, **kwargs).name


def test_special_filename():
    assert _name(filename="Dockerfile") == "Dockerfile"
    assert _name(filename="/src/project/makefile") == "Makefile"


def test_override_beats_filename():
    assert _name(override="python", filename="Makefile") == "Python"


def test_override_by_extension():
    assert _name(override="rs", filename="notes.txt") == "Rust"


def test_unknown_override_falls_through():
    assert _name(override="nonsense-lang", filename="main.py") == "Python"


def test_extension():
    assert _name(filename="lib/main.rs") == "Rust"
    assert _name(filename="SCRIPT.PY") == "Python"


def test_leading_dot_is_not_an_extension():
    assert list(candidate_extensions(".bashrc")) == []
    assert list(candidate_extensions("a.html.erb")) == ["html.erb", "erb"]
    assert list(candidate_extensions("README")) == []


def test_extension_beats_shebang():
    assert _name(filename="tool.rb", first_line="#!/usr/bin/env python") == "Ruby"


def test_shebang_without_extension():
    assert _name(filename="run", first_line="#!/usr/bin/env python3") == "Python"
    assert _name(first_line="#!/bin/bash") == "Bash"


def test_plain_text_fallback():
    assert resolve_language(_GRAMMARS) == PLAIN_TEXT
    assert resolve_language(_GRAMMARS, filename="notes", first_line="hello") == PLAIN_TEXT
    assert resolve_language(_GRAMMARS, filename="file.zzzunknown") == PLAIN_TEXT


def test_resolution_is_deterministic():
    first = resolve_language(_GRAMMARS, filename="x.h")
    for _ in range(3):
        assert resolve_language(_GRAMMARS, filename="x.h") == first


def test_shebang_requires_whole_interpreter_name():
    assert resolve_language(_GRAMMARS, first_line="#!/usr/bin/nodemon") == PLAIN_TEXT
    assert _name(first_line="#!/usr/bin/env node") == "JavaScript"
