"""A buffered stream of tokens that skips whitespace."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from tmplparse.tokens import Token, TokenType


def _with_eof(tokens: Iterable[Token]) -> Iterator[Token]:
    last = None
    for tok in tokens:
        last = tok
        yield tok
    if last is None or last.type is not TokenType.EOF:
        yield Token(TokenType.EOF)


class TokenStream:
    """Walks over tokens with one token of lookahead and one step of backup.

    Whitespace tokens are dropped. An EOF token is added when the input
    does not end with one.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._source = _with_eof(tokens)
        self._previous: Token | None = None
        self._current: Token | None = self._non_ignored()
        self._next: Token | None = None
        self._backup: Token | None = None
        if not self.at_end():
            self._next = self._non_ignored()

    def _non_ignored(self) -> Token | None:
        for tok in self._source:
            if tok.type is not TokenType.WHITESPACE:
                return tok
        return None

    def current(self) -> Token | None:
        """Return the current token without consuming it."""
        return self._current

    def next(self) -> Token | None:
        """Consume the current token and return it."""
        self._previous = self._current
        self._current = self._next
        if self._backup is not None:
            self._next = self._backup
            self._backup = None
        elif self.at_end():
            self._next = None
        else:
            self._next = self._non_ignored()
        return self._previous

    def peek(self) -> Token | None:
        """Return the token after the current one."""
        return self._next

    def backup(self) -> None:
        """Step back to the previously consumed token."""
        if self._previous is None:
            raise RuntimeError("can't back up: no previous token")
        self._backup = self._next
        self._next = self._current
        self._current = self._previous
        self._previous = None

    def at_eof(self) -> bool:
        """True when the current token is EOF or the stream is exhausted."""
        return self._current is None or self._current.type is TokenType.EOF

    def is_error(self) -> bool:
        return self._current is not None and self._current.type is TokenType.ERROR

    def at_end(self) -> bool:
        return self.at_eof() or self.is_error()