"""A cursor over a token stream with the matching helpers parsers rely on."""

from __future__ import annotations

from typing import Optional

from tmplparse.lexer import LexerConfig
from tmplparse.stream import TokenStream
from tmplparse.tokens import Token, TokenType

_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        elif ord(ch) < 0x80:
            parts.append(f"\\x{ord(ch):02x}")
        elif ord(ch) <= 0xFFFF:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(parts) + '"'


class TemplateSyntaxError(Exception):
    """A template could not be parsed; carries the offending token if known."""

    def __init__(self, message: str, token: Optional[Token] = None) -> None:
        self.message = message
        self.token = token
        super().__init__(self._render())

    def _render(self) -> str:
        tok = self.token
        if tok is None:
            return self.message
        return (
            f"{self.message}, line: {tok.line}, col: {tok.col}, "
            f"near: {_quote(tok.val)}, token: {_quote(str(tok))}"
        )

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

    @property
    def col(self) -> Optional[int]:
        return self.token.col if self.token is not None else None


def _is_of(tok: Optional[Token], types: tuple[TokenType, ...]) -> bool:
    return tok is not None and tok.type in types


class TokenCursor:
    """Reads tokens from a stream, matching them by type or by name."""

    def __init__(
        self,
        name: str,
        stream: TokenStream,
        config: Optional[LexerConfig] = None,
    ) -> None:
        self.name = name
        self.stream = stream
        self.config = config or LexerConfig()

    def match(self, *types: TokenType) -> Optional[Token]:
        """Consume and return the current token if it is one of ``types``."""
        tok = self.stream.current()
        if _is_of(tok, types):
            self.stream.next()
            return tok
        return None

    def match_name(self, *names: str) -> Optional[Token]:
        """Consume and return the current name token if it is one of ``names``."""
        if self.current_name(*names) is not None:
            return self.pop()
        return None

    def pop(self) -> Optional[Token]:
        """Return the current token and advance past it."""
        return self.stream.next()

    def current(self, *types: TokenType) -> Optional[Token]:
        """Return the current token, restricted to ``types`` when given."""
        tok = self.stream.current()
        if not types:
            return tok
        return tok if _is_of(tok, types) else None

    def peek(self, *types: TokenType) -> Optional[Token]:
        """Return the following token, restricted to ``types`` when given."""
        tok = self.stream.peek()
        if not types:
            return tok
        return tok if _is_of(tok, types) else None

    def current_name(self, *names: str) -> Optional[Token]:
        """Return the current name token if its value is one of ``names``."""
        tok = self.current(TokenType.NAME)
        if tok is not None and tok.val in names:
            return tok
        return None

    def consume(self) -> None:
        """Drop the current token."""
        self.stream.next()

    def next(self) -> Optional[Token]:
        """Consume the current token and return it."""
        return self.stream.next()

    def at_end(self) -> bool:
        return self.stream.at_end()

    def error(self, message: str, token: Optional[Token]) -> TemplateSyntaxError:
        """Build a syntax error located at ``token`` when one is given."""
        return TemplateSyntaxError(message, token)