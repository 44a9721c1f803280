"""Tests for cate.grammars.pygments_tokenizer."""

import pytest
from pygments.token import Comment, Name, String

from cate.grammars.base import PLAIN_TEXT, LanguageDescriptor, TokenizerError
from cate.grammars.pygments_tokenizer import ROOT_STATE, PygmentsTokenizer, lex_line
from cate.grammars.registry import GrammarRegistry
from cate.ui.theme import ThemeRegistry

_GRAMMARS = GrammarRegistry()
_THEME = ThemeRegistry().get("monokai")


def _tokenizer() -> PygmentsTokenizer:
    return PygmentsTokenizer(_GRAMMARS, _THEME)


def _lang(name: str) -> LanguageDescriptor:
    return _GRAMMARS.find_by_name(name)


def test_start_state_for_regex_lexer():
    assert _tokenizer().start_state(_lang("python")) == ROOT_STATE


def test_spans_cover_line_exactly():
    tok = _tokenizer()
    python = _lang("python")
    line = "def greet(name):  # say hi"
    spans, state = tok.tokenize(python, tok.start_state(python), line)
    assert "".join(span.text for span in spans) == line
    assert all(span.text for span in spans)
    assert state == ROOT_STATE


def test_empty_line_has_no_spans():
    tok = _tokenizer()
    python = _lang("python")
    spans, _ = tok.tokenize(python, ROOT_STATE, "")
    assert spans == []


def test_adjacent_equal_styles_are_merged():
    tok = _tokenizer()
    python = _lang("python")
    spans, _ = tok.tokenize(python, ROOT_STATE, "# a comment with words")
    assert len(spans) == 1
    assert spans[0].style == _THEME.style_for(Comment.Single)


def test_state_carries_across_lines():
    tok = _tokenizer()
    python = _lang("python")
    _, state = tok.tokenize(python, ROOT_STATE, 'x = """opening')
    assert state != ROOT_STATE

    carried, state = tok.tokenize(python, state, "still inside")
    assert carried[0].style == _THEME.style_for(String.Double)

    fresh, _ = tok.tokenize(python, ROOT_STATE, "still inside")
    assert fresh[0].style == _THEME.style_for(Name)
    assert carried[0].style != fresh[0].style

    _, state = tok.tokenize(python, state, 'closed"""')
    assert state == ROOT_STATE


def test_tokenize_is_deterministic():
    tok = _tokenizer()
    c = _lang("c")
    first = tok.tokenize(c, ROOT_STATE, "int main(void) { return 0; }")
    second = tok.tokenize(c, ROOT_STATE, "int main(void) { return 0; }")
    assert first == second


def test_non_regex_lexer_has_no_state():
    tok = _tokenizer()
    text = _lang("text")
    assert text == PLAIN_TEXT
    assert tok.start_state(text) is None


def test_unknown_language_raises_tokenizer_error():
    tok = _tokenizer()
    with pytest.raises(TokenizerError):
        tok.tokenize(LanguageDescriptor("Not A Language"), None, "x")


def test_lex_line_returns_stack_tuple():
    lexer = _tokenizer().lexer(_lang("python"))
    tokens, state = lex_line(lexer, None, "'''start\n")
    assert "".join(value for _, value in tokens) == "'''start\n"
    assert isinstance(state, tuple)
    assert state[0] == "root"
    assert len(state) > 1
