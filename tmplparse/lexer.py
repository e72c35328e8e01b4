"""Lexer turning template source into a sequence of tokens."""

from __future__ import annotations

import re
from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from tmplparse.stream import TokenStream
from tmplparse.tokens import Token, TokenType

_ESCAPED_STRINGS = {'\\"': '"', "\\'": "'"}

_CLOSERS = {
    ")": TokenType.RPAREN,
    "}": TokenType.RBRACE,
    "]": TokenType.RBRACKET,
}

_OPENERS = {
    "(": (TokenType.LPAREN, ")"),
    "{": (TokenType.LBRACE, "}"),
    "[": (TokenType.LBRACKET, "]"),
}

_SINGLE_CHAR = {
    ",": TokenType.COMMA,
    "|": TokenType.PIPE,
    "+": TokenType.ADD,
    "~": TokenType.TILDE,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "%": TokenType.MOD,
}

# Characters that may be doubled or followed by a second character.
_PAIRED = {
    "/": ("/", TokenType.FLOORDIV, TokenType.DIV),
    "<": ("=", TokenType.LTEQ, TokenType.LT),
    ">": ("=", TokenType.GTEQ, TokenType.GT),
    "*": ("*", TokenType.POW, TokenType.MUL),
    "=": ("=", TokenType.EQ, TokenType.ASSIGN),
}

_State = Optional[Callable[[], Generator[Token, None, Any]]]


@dataclass(frozen=True)
class LexerConfig:
    """Delimiters recognised by the lexer."""

    variable_start_string: str = "{{"
    variable_end_string: str = "}}"
    block_start_string: str = "{%"
    block_end_string: str = "%}"
    comment_start_string: str = "{#"
    comment_end_string: str = "#}"


def _is_space(ch: str | None) -> bool:
    return ch == " " or ch == "\t"


def _is_numeric(ch: str | None) -> bool:
    return ch is not None and ch.isdecimal()


def _is_alphanumeric(ch: str | None) -> bool:
    return ch is not None and (ch == "_" or ch.isalpha() or ch.isdecimal())


def _unescape(text: str) -> str:
    text = text[1:-1]
    for escaped, plain in _ESCAPED_STRINGS.items():
        text = text.replace(escaped, plain)
    return text


class Lexer:
    """Scans a template and yields its tokens.

    Lexing stops after the EOF token, or right after an error token that
    ends the scan.
    """

    def __init__(self, text: str, config: LexerConfig | None = None) -> None:
        self.text = text
        self.config = config or LexerConfig()
        block_start = re.escape(self.config.block_start_string)
        self.raw_statements = {
            name: re.compile(rf"{block_start}-?\s*end{name}")
            for name in ("raw", "comment")
        }
        self._reset()

    def _reset(self) -> None:
        self.start = 0
        self.pos = 0
        self.width = 0
        self._delimiters: list[str] = []
        self._raw_end: re.Pattern[str] | None = None

    def tokens(self) -> Iterator[Token]:
        """Yield the tokens of the whole text, lexing it from the start."""
        self._reset()
        state: _State = self._lex_data
        while state is not None:
            state = yield from state()

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    # -- character handling -------------------------------------------------

    def _next(self) -> str | None:
        if self.pos >= len(self.text):
            self.width = 0
            return None
        ch = self.text[self.pos]
        self.width = 1
        self.pos += 1
        return ch

    def _backup(self) -> None:
        self.pos -= self.width

    def _peek(self) -> str | None:
        ch = self._next()
        self._backup()
        return ch

    def _accept(self, valid: str) -> bool:
        ch = self._next()
        if ch is not None and ch in valid:
            return True
        self._backup()
        return False

    def _has_prefix(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def _current(self) -> str:
        return self.text[self.start:self.pos]

    def _emit(
        self, kind: TokenType, transform: Callable[[str], str] | None = None
    ) -> Token:
        start = self.start
        line = self.text.count("\n", 0, start) + 1
        col = start - (self.text.rfind("\n", 0, start) + 1) + 1
        val = self._current()
        if transform is not None:
            val = transform(val)
        self.start = self.pos
        return Token(kind, val, start, line, col)

    def _error(self, message: str) -> Token:
        return Token(TokenType.ERROR, message, self.pos)

    def _pop_delimiter(self, ch: str) -> Token | None:
        if not self._delimiters:
            return self._error(f'Unexpected delimiter "{ch}"')
        expected = self._delimiters[-1]
        if ch != expected:
            return self._error(
                f'Unbalanced delimiters, expected "{expected}", got "{ch}"'
            )
        self._delimiters.pop()
        return None

    def _expect_delimiter(self, ch: str | None) -> bool:
        return bool(self._delimiters) and ch == self._delimiters[-1]

    def _next_identifier(self) -> str:
        while _is_alphanumeric(self._next()):
            pass
        self._backup()
        return self._current()

    # -- states ------------------------------------------------------------

    def _lex_data(self) -> Generator[Token, None, _State]:
        cfg = self.config
        starts = (
            (cfg.comment_start_string, self._lex_comment),
            (cfg.variable_start_string, self._lex_variable),
            (cfg.block_start_string, self._lex_block),
        )
        while True:
            for prefix, state in starts:
                if self._has_prefix(prefix):
                    if self.pos > self.start:
                        yield self._emit(TokenType.DATA)
                    return state
            if self._next() is None:
                break
        if self.pos > self.start:
            yield self._emit(TokenType.DATA)
        yield self._emit(TokenType.EOF)
        return None

    def _lex_raw(self) -> Generator[Token, None, _State]:
        assert self._raw_end is not None
        found = self._raw_end.search(self.text, self.pos)
        if found is None:
            yield self._error("Unable to find raw closing statement")
            return None
        self.pos = found.start()
        yield self._emit(TokenType.DATA)
        self._raw_end = None
        return self._lex_block

    def _lex_comment(self) -> Generator[Token, None, _State]:
        cfg = self.config
        self.pos += len(cfg.comment_start_string)
        self._accept("-")
        yield self._emit(TokenType.COMMENT_BEGIN)
        end = self.text.find(cfg.comment_end_string, self.pos)
        if end < 0:
            yield self._error("unclosed comment")
            return None
        self.pos = end
        if self.pos > self.start and self.text[self.pos - 1] == "-":
            self.pos -= 1
        yield self._emit(TokenType.DATA)
        self._accept("-")
        self.pos += len(cfg.comment_end_string)
        yield self._emit(TokenType.COMMENT_END)
        return self._lex_data

    def _lex_variable(self) -> Generator[Token, None, _State]:
        self.pos += len(self.config.variable_start_string)
        self._accept("-")
        yield self._emit(TokenType.VARIABLE_BEGIN)
        return self._lex_expression

    def _lex_variable_end(self) -> Generator[Token, None, _State]:
        self._accept("-")
        self.pos += len(self.config.variable_end_string)
        yield self._emit(TokenType.VARIABLE_END)
        return self._lex_data

    def _lex_block(self) -> Generator[Token, None, _State]:
        self.pos += len(self.config.block_start_string)
        self._accept("-")
        yield self._emit(TokenType.BLOCK_BEGIN)
        while _is_space(self._peek()):
            self._next()
        if self._current():
            yield self._emit(TokenType.WHITESPACE)
        statement = self._next_identifier()
        yield self._emit(TokenType.NAME)
        raw_end = self.raw_statements.get(statement)
        if raw_end is not None:
            self._raw_end = raw_end
        return self._lex_expression

    def _lex_block_end(self) -> Generator[Token, None, _State]:
        self._accept("-")
        self.pos += len(self.config.block_end_string)
        yield self._emit(TokenType.BLOCK_END)
        return self._lex_raw if self._raw_end is not None else self._lex_data

    def _lex_expression(self) -> Generator[Token, None, _State]:
        cfg = self.config
        while True:
            if not self._expect_delimiter(self._peek()):
                if self._has_prefix(cfg.variable_end_string):
                    return self._lex_variable_end
                if self._has_prefix(cfg.block_end_string):
                    return self._lex_block_end

            r = self._next()
            if r is None:
                yield self._error("Unexpected end of input")
                return None
            if _is_space(r):
                return self._lex_space
            if _is_numeric(r):
                return self._lex_number
            if r in "\"'":
                self._backup()
                return self._lex_string
            if r in _SINGLE_CHAR:
                yield self._emit(_SINGLE_CHAR[r])
            elif r == "-":
                if self._has_prefix(cfg.block_end_string):
                    self._backup()
                    return self._lex_block_end
                if self._has_prefix(cfg.variable_end_string):
                    self._backup()
                    return self._lex_variable_end
                yield self._emit(TokenType.SUB)
            elif r in _PAIRED:
                second, doubled, single = _PAIRED[r]
                yield self._emit(doubled if self._accept(second) else single)
            elif r == "!":
                if self._accept("="):
                    yield self._emit(TokenType.NE)
                else:
                    yield self._error('Unexpected "!"')
            elif r in _OPENERS:
                kind, closer = _OPENERS[r]
                yield self._emit(kind)
                self._delimiters.append(closer)
            elif r in _CLOSERS:
                error = self._pop_delimiter(r)
                if error is not None:
                    yield error
                    return None
                yield self._emit(_CLOSERS[r])
            elif r == "i" and self._accept("n"):
                if not _is_space(self._peek()):
                    return self._lex_identifier
                yield self._emit(TokenType.IN)
            elif r == "i" and self._accept("s"):
                if not _is_space(self._peek()):
                    return self._lex_identifier
                yield self._emit(TokenType.IS)
            elif r == "a" and self._accept("n"):
                if not (self._accept("d") and _is_space(self._peek())):
                    return self._lex_identifier
                yield self._emit(TokenType.AND)
            elif r == "o" and self._accept("r"):
                if not _is_space(self._peek()):
                    return self._lex_identifier
                yield self._emit(TokenType.OR)
            elif r == "n" and self._accept("o"):
                if not (self._accept("t") and _is_space(self._peek())):
                    return self._lex_identifier
                yield self._emit(TokenType.NOT)
            elif _is_alphanumeric(r):
                return self._lex_identifier

    def _lex_space(self) -> Generator[Token, None, _State]:
        while _is_space(self._peek()):
            self._next()
        yield self._emit(TokenType.WHITESPACE)
        return self._lex_expression

    def _lex_identifier(self) -> Generator[Token, None, _State]:
        self._next_identifier()
        yield self._emit(TokenType.NAME)
        return self._lex_expression

    def _lex_number(self) -> Generator[Token, None, _State]:
        kind = TokenType.INTEGER
        while True:
            r = self._next()
            if _is_numeric(r):
                continue
            if r == ".":
                if kind is TokenType.INTEGER:
                    kind = TokenType.FLOAT
                else:
                    yield self._error("two dots in numeric token")
            elif _is_alphanumeric(r) and kind is TokenType.INTEGER:
                return self._lex_identifier
            else:
                self._backup()
                yield self._emit(kind)
                return self._lex_expression

    def _lex_string(self) -> Generator[Token, None, _State]:
        quote = self._next()
        prev: str | None = None
        near: list[str] = []
        r = self._next()
        while r != quote or prev == "\\":
            if (not near or near[-1] != "\n") and r is not None:
                near.append(r)
            if r is None:
                yield self._error("".join(near))
                return None
            r, prev = self._next(), r
        yield self._emit(TokenType.STRING, _unescape)
        return self._lex_expression


def lex(text: str, config: LexerConfig | None = None) -> TokenStream:
    """Lex ``text`` into a whitespace-free token stream."""
    return TokenStream(Lexer(text, config).tokens())