"""Template parser building a syntax tree from template source."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Optional

from tmplparse import nodes
from tmplparse.cursor import TemplateSyntaxError
from tmplparse.expressions import ExpressionParser
from tmplparse.lexer import LexerConfig, lex
from tmplparse.stream import TokenStream
from tmplparse.tokens import Token, TokenType

StatementParser = Callable[["Parser", "Parser"], Any]

_TAG_STARTS = (
    TokenType.VARIABLE_BEGIN,
    TokenType.COMMENT_BEGIN,
    TokenType.BLOCK_BEGIN,
)


def _trims_left(token: Token) -> bool:
    return token.val.startswith("-")


class Parser(ExpressionParser):
    """Parses a whole template: text, comments, output tags and statements.

    ``statements`` maps a statement name to a callable receiving this
    parser and a parser over the statement's own arguments; it returns
    the statement object stored in the resulting ``StatementBlock``.
    """

    def __init__(
        self,
        name: str,
        stream: TokenStream,
        config: Optional[LexerConfig] = None,
        statements: Optional[Mapping[str, StatementParser]] = None,
    ) -> None:
        super().__init__(name, stream, config)
        self.statements: dict[str, StatementParser] = dict(statements or {})
        self.template: Optional[nodes.Template] = None

    def _trim_following_data(self, end: Token) -> None:
        data = self.current(TokenType.DATA)
        if data is not None:
            data.trim = data.trim or _trims_left(end)

    def parse(self) -> nodes.Template:
        """Parse the whole token stream into a template."""
        return self.parse_template()

    def parse_template(self) -> nodes.Template:
        """Parse every element up to the end of the stream."""
        template = nodes.Template(name=self.name)
        self.template = template
        while not self.at_end():
            node = self._parse_doc_element()
            if node is not None:
                template.nodes.append(node)
        return template

    def _parse_doc_element(self) -> Optional[nodes.Node]:
        tok = self.current()
        if tok is None:
            raise self.error("Unexpected end of input", None)
        if tok.type is TokenType.DATA:
            node = nodes.Data(data=tok, trim=nodes.Trim(left=tok.trim))
            following = self.peek(*_TAG_STARTS)
            if following is not None and following.val.endswith("-"):
                node.trim.right = True
            self.consume()
            return node
        if tok.type is TokenType.EOF:
            self.consume()
            return None
        if tok.type is TokenType.COMMENT_BEGIN:
            return self.parse_comment()
        if tok.type is TokenType.VARIABLE_BEGIN:
            return self.parse_expression_node()
        if tok.type is TokenType.BLOCK_BEGIN:
            return self.parse_statement_block()
        raise self.error(
            "Unexpected token (only HTML/tags/filters in templates allowed)", tok
        )

    def parse_comment(self) -> nodes.Comment:
        """Parse a comment tag."""
        start = self.match(TokenType.COMMENT_BEGIN)
        if start is None:
            raise self.error(
                f"Expected '{self.config.comment_start_string}' , got {self.current()}",
                self.current(),
            )
        comment = nodes.Comment(start=start)
        text = self.match(TokenType.DATA)
        comment.text = text.val if text is not None else ""

        end = self.match(TokenType.COMMENT_END)
        if end is None:
            raise self.error(
                f"Expected '{self.config.comment_end_string}' , got {self.current()}",
                self.current(),
            )
        comment.end = end
        self._trim_following_data(end)
        return comment

    def parse_expression_node(self) -> nodes.Output:
        """Parse an output tag with its optional inline condition."""
        start = self.match(TokenType.VARIABLE_BEGIN)
        if start is None:
            raise self.error("'{{' expected here", self.current())
        node = nodes.Output(start=start)

        expr = self.parse_expression()
        if expr is None:
            raise self.error("Expected an expression.", self.current())
        node.expression = expr

        if self.match_name("if") is not None:
            condition = self.parse_expression()
            if condition is None:
                raise self.error("Expected a condition", self.current())
            node.condition = condition
            if self.match_name("else") is not None:
                node.alternative = self.parse_expression()

        end = self.match(TokenType.VARIABLE_END)
        if end is None:
            raise self.error("'}}' expected here", self.current())
        node.end = end
        self._trim_following_data(end)
        return node

    def parse_statement_block(self) -> nodes.StatementBlock:
        """Parse a statement tag using the registered statement parsers."""
        begin = self.match(TokenType.BLOCK_BEGIN)
        if begin is None:
            raise TemplateSyntaxError(
                f'Expected "{self.config.block_start_string}" got "{self.current()}"'
            )

        name = self.match(TokenType.NAME)
        if name is None:
            raise self.error("Expected a statement name here", self.current())

        statement_parser = self.statements.get(name.val)
        if statement_parser is None:
            raise self.error(
                f"Statement '{name.val}' not found (or beginning not provided)", name
            )

        args: list[Token] = []
        while self.current(TokenType.BLOCK_END) is None and not self.at_end():
            tok = self.next()
            if tok is not None:
                args.append(tok)

        end = self.match(TokenType.BLOCK_END)
        if end is None:
            raise self.error(
                f'Expected end of block "{self.config.block_end_string}"',
                self.current(),
            )
        self._trim_following_data(end)

        arg_parser = Parser(f"{name.val}:args", TokenStream(args), self.config)
        try:
            stmt = statement_parser(self, arg_parser)
        except TemplateSyntaxError as exc:
            raise TemplateSyntaxError(
                f'Unable to parse statement "{name.val}": {exc}'
            ) from exc
        return nodes.StatementBlock(location=begin, name=name.val, stmt=stmt)

    def wrap_until(self, *names: str) -> tuple[nodes.Wrapper, "Parser"]:
        """Collect nodes up to one of the end tags ``names``.

        Returns the wrapper and a parser over the end tag's arguments.
        """
        wrapper = nodes.Wrapper(location=self.current(), trim=nodes.Trim())
        args: list[Token] = []

        while not self.at_end():
            if self.match(TokenType.BLOCK_BEGIN) is not None:
                end_tag = self.current_name(*names)
                if end_tag is not None:
                    self.consume()
                    while True:
                        end = self.match(TokenType.BLOCK_END)
                        if end is not None:
                            wrapper.end_tag = end_tag.val
                            self._trim_following_data(end)
                            return wrapper, Parser(
                                self.name, TokenStream(args), self.config
                            )
                        if self.at_end() or self.current(TokenType.EOF) is not None:
                            raise self.error("Unexpected EOF.", self.current())
                        tok = self.next()
                        if tok is not None:
                            args.append(tok)
                self.stream.backup()

            node = self._parse_doc_element()
            if node is not None:
                wrapper.nodes.append(node)

        raise self.error(
            f"Unexpected EOF, expected tag {' or '.join(names)}.", self.current()
        )


def parse(text: str) -> nodes.Template:
    """Parse ``text`` with the default delimiters and no statements."""
    return Parser("parser", lex(text), LexerConfig()).parse()