"""Pygments-backed tokenizer that carries lexer state across lines.

For ``RegexLexer`` grammars the carried state is the lexer's state stack.
Each line is lexed starting from the stack left by the previous line, so
block comments and multi-line strings keep their color. Other lexers are
run line by line with no carried state.
"""

from typing import TYPE_CHECKING, Any, Iterator, Optional

from pygments.lexer import ExtendedRegexLexer, Lexer, LexerContext, RegexLexer
from pygments.token import Error, Whitespace, _TokenType

from .base import LanguageDescriptor, StyledSpan, Tokenizer, TokenizerError
from .registry import GrammarRegistry

if TYPE_CHECKING:
    from ..ui.theme import Theme

ROOT_STATE: tuple[str, ...] = ("root",)

Token = tuple[_TokenType, str]


class PygmentsTokenizer(Tokenizer):
    """Tokenizer over Pygments lexers, styled with a theme."""

    def __init__(self, grammars: GrammarRegistry, theme: "Theme"):
        self.grammars = grammars
        self.theme = theme
        self._lexers: dict[str, Lexer] = {}

    def lexer(self, descriptor: LanguageDescriptor) -> Lexer:
        lexer = self._lexers.get(descriptor.name)
        if lexer is None:
            cls = self.grammars.lexer_class(descriptor)
            lexer = cls(stripnl=False, stripall=False, ensurenl=False)
            self._lexers[descriptor.name] = lexer
        return lexer

    def start_state(self, descriptor: LanguageDescriptor) -> Optional[tuple[str, ...]]:
        try:
            lexer = self.lexer(descriptor)
        except KeyError:
            return None
        return ROOT_STATE if isinstance(lexer, RegexLexer) else None

    def tokenize(
        self,
        descriptor: LanguageDescriptor,
        state: Any,
        line: str,
    ) -> tuple[list[StyledSpan], Any]:
        try:
            lexer = self.lexer(descriptor)
            tokens, new_state = lex_line(lexer, state, line + "\n")
        except TokenizerError:
            raise
        except Exception as e:
            raise TokenizerError(f"{descriptor.name}: {e}") from e

        if "".join(value for _, value in tokens) != line + "\n":
            raise TokenizerError(f"{descriptor.name}: tokens do not cover the line")

        return self._spans(tokens, len(line)), new_state

    def _spans(self, tokens: list[Token], length: int) -> list[StyledSpan]:
        """Style tokens, merge equal neighbours and drop the appended newline."""
        spans: list[StyledSpan] = []
        remaining = length
        for ttype, value in tokens:
            if remaining <= 0:
                break
            value = value[:remaining]
            remaining -= len(value)
            if not value:
                continue
            style = self.theme.style_for(ttype)
            if spans and spans[-1].style == style:
                spans[-1] = StyledSpan(spans[-1].text + value, style)
            else:
                spans.append(StyledSpan(value, style))
        return spans


def lex_line(lexer: Lexer, state: Any, text: str) -> tuple[list[Token], Any]:
    """Lex ``text`` from ``state``; return tokens and the state after it."""
    if isinstance(lexer, ExtendedRegexLexer):
        context = LexerContext(text, 0, stack=list(state or ROOT_STATE))
        tokens = [(t, v) for _, t, v in lexer.get_tokens_unprocessed(context=context)]
        return tokens, tuple(context.stack)

    if isinstance(lexer, RegexLexer):
        stack = list(state or ROOT_STATE)
        tokens = [(t, v) for _, t, v in _regex_tokens(lexer, text, stack)]
        return tokens, tuple(stack)

    return [(t, v) for _, t, v in lexer.get_tokens_unprocessed(text)], state


def _regex_tokens(lexer: RegexLexer, text: str, stack: list[str]) -> Iterator[tuple[int, _TokenType, str]]:
    """The ``RegexLexer`` state machine, updating ``stack`` in place.

    Mirrors ``RegexLexer.get_tokens_unprocessed`` so the final stack is
    visible to the caller once the generator is exhausted.
    """
    pos = 0
    tokendefs = lexer._tokens
    statetokens = tokendefs[stack[-1]]
    while True:
        for rexmatch, action, new_state in statetokens:
            m = rexmatch(text, pos)
            if not m:
                continue
            if action is not None:
                if type(action) is _TokenType:
                    yield pos, action, m.group()
                else:
                    yield from action(lexer, m)
            pos = m.end()
            if new_state is not None:
                _transition(stack, new_state)
                statetokens = tokendefs[stack[-1]]
            break
        else:
            if pos >= len(text):
                return
            if text[pos] == "\n":
                # no rule matched the newline: back to root
                del stack[:]
                stack.append("root")
                statetokens = tokendefs["root"]
                yield pos, Whitespace, "\n"
            else:
                yield pos, Error, text[pos]
            pos += 1


def _transition(stack: list[str], new_state) -> None:
    if isinstance(new_state, tuple):
        for state in new_state:
            if state == "#pop":
                if len(stack) > 1:
                    stack.pop()
            elif state == "#push":
                stack.append(stack[-1])
            else:
                stack.append(state)
    elif isinstance(new_state, int):
        # keep at least the root state
        if abs(new_state) >= len(stack):
            del stack[1:]
        else:
            del stack[new_state:]
    elif new_state == "#push":
        stack.append(stack[-1])
    else:
        raise TokenizerError(f"wrong state def: {new_state!r}")
