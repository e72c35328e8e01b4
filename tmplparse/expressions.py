"""Parsing of template expressions: literals, variables, operators, filters and tests."""

from __future__ import annotations

import re
from typing import Optional

from tmplparse import nodes
from tmplparse.cursor import TemplateSyntaxError, TokenCursor
from tmplparse.tokens import Token, TokenType

_COMPARE_OPS = (
    TokenType.EQ,
    TokenType.NE,
    TokenType.GT,
    TokenType.GTEQ,
    TokenType.LT,
    TokenType.LTEQ,
)

_TEST_STARTERS = (
    TokenType.GT,
    TokenType.GTEQ,
    TokenType.LT,
    TokenType.LTEQ,
    TokenType.NOT,
    TokenType.IN,
    TokenType.IS,
)

_ESCAPE = re.compile(
    r'\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|[abfnrtv\\"]|.?)',
    re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}


def _escape_value(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if len(seq) == 3 and all(ch in "01234567" for ch in seq):
        code = int(seq, 8)
        if code > 0xFF:
            raise ValueError(seq)
        return chr(code)
    if len(seq) > 1 and seq[0] in "xuU":
        code = int(seq[1:], 16)
        if seq[0] != "x" and (0xD800 <= code <= 0xDFFF or code > 0x10FFFF):
            raise ValueError(seq)
        return chr(code)
    raise ValueError(seq)


def _interpret_escapes(text: str) -> str:
    """Resolve backslash escape sequences such as ``\\n`` in a string literal."""
    return _ESCAPE.sub(_escape_value, text)


class ExpressionParser(TokenCursor):
    """Builds expression nodes from the tokens of a cursor."""

    # -- entry points ------------------------------------------------------

    def parse_expression(self) -> Optional[nodes.Node]:
        """Parse a logical expression followed by an optional filter chain."""
        expr = self.parse_logical_expression()
        return self.parse_filter_expression(expr)

    def parse_filter_expression(self, expr: Optional[nodes.Node]) -> Optional[nodes.Node]:
        """Wrap ``expr`` in a filtered expression when a filter chain follows."""
        if self.current(TokenType.PIPE) is not None:
            filtered = nodes.FilteredExpression(expression=expr)
            while self.match(TokenType.PIPE) is not None:
                filtered.filters.append(self.parse_filter())
            expr = filtered
        return expr

    def parse_filter(self) -> nodes.FilterCall:
        """Parse one filter with its optional arguments."""
        ident = self.match(TokenType.NAME)
        if ident is None:
            raise self.error("Filter name must be an identifier.", self.current())

        filter_call = nodes.FilterCall(token=ident, name=ident.val)
        if self.match(TokenType.LPAREN) is not None:
            if self.current(TokenType.VARIABLE_END) is not None:
                raise self.error("Filter parameter required after '('.", None)
            self._parse_arguments(filter_call.args, filter_call.kwargs)
        return filter_call

    def _parse_arguments(self, args: list, kwargs: dict) -> None:
        while self.match(TokenType.COMMA) is not None or self.match(TokenType.RPAREN) is None:
            value = self.parse_expression()
            if self.match(TokenType.ASSIGN) is not None:
                key_token = value.position() if value is not None else None
                if key_token is None:
                    raise self.error("Expected an argument name.", self.current())
                kwargs[key_token.val] = self.parse_expression()
            else:
                args.append(value)

    # -- logic ---------------------------------------------------------------

    def parse_logical_expression(self) -> Optional[nodes.Node]:
        """Parse ``or``/``and``/``not`` combinations of comparisons."""
        return self._parse_or()

    def _parse_or(self) -> Optional[nodes.Node]:
        expr = self._parse_and()
        while self.current(TokenType.OR) is not None:
            op = nodes.BinOperator(token=self.pop())
            right = self._parse_and()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    def _parse_and(self) -> Optional[nodes.Node]:
        expr = self._parse_not()
        while self.current(TokenType.AND) is not None:
            op = nodes.BinOperator(token=self.pop())
            right = self._parse_not()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    def _parse_not(self) -> Optional[nodes.Node]:
        op = self.match(TokenType.NOT)
        expr = self._parse_compare()
        if op is not None:
            expr = nodes.Negation(operator=op, term=expr)
        return expr

    def _parse_compare(self) -> Optional[nodes.Node]:
        expr = self.parse_math()
        while self.current(*_COMPARE_OPS, TokenType.NOT, TokenType.IN) is not None:
            op = self.pop()
            right = self.parse_math()
            if right is not None:
                expr = nodes.BinaryExpression(
                    left=expr, operator=nodes.BinOperator(token=op), right=right
                )
        return self.parse_test(expr)

    def parse_test(self, expr: Optional[nodes.Node]) -> Optional[nodes.Node]:
        """Parse filters and an optional test such as ``is odd`` after ``expr``."""
        expr = self.parse_filter_expression(expr)
        if self.current(*_TEST_STARTERS) is None:
            return expr

        self.match(TokenType.IS)
        negated = self.match(TokenType.NOT)
        ident = self.next()
        if ident is None:
            raise self.error("Expected a test name.", self.current())

        test = nodes.TestCall(token=ident, name=ident.val)
        # "else" belongs to an inline condition, not to the test.
        if self.current_name("else") is None:
            try:
                arg = self.parse_expression()
            except TemplateSyntaxError:
                arg = None
            if arg is not None:
                test.args.append(arg)

        expr = nodes.TestExpression(expression=expr, test=test)
        if negated is not None:
            expr = nodes.Negation(term=expr, operator=negated)
        return expr

    # -- maths ---------------------------------------------------------------

    def parse_math(self) -> Optional[nodes.Node]:
        """Parse additions and subtractions."""
        expr = self._parse_concat()
        while self.current(TokenType.ADD, TokenType.SUB) is not None:
            op = nodes.BinOperator(token=self.pop())
            right = self._parse_concat()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    def _parse_concat(self) -> Optional[nodes.Node]:
        expr = self.parse_math_prioritary()
        while self.current(TokenType.TILDE) is not None:
            op = nodes.BinOperator(token=self.pop())
            right = self.parse_math_prioritary()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    def parse_math_prioritary(self) -> Optional[nodes.Node]:
        """Parse multiplications, divisions and modulos."""
        expr = self._parse_unary()
        while (
            self.current(TokenType.MUL, TokenType.DIV, TokenType.FLOORDIV, TokenType.MOD)
            is not None
        ):
            op = nodes.BinOperator(token=self.pop())
            right = self._parse_unary()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    def _parse_unary(self) -> Optional[nodes.Node]:
        sign = self.match(TokenType.ADD, TokenType.SUB)
        expr = self.parse_power()
        if sign is not None:
            expr = nodes.UnaryExpression(
                operator=sign, negative=sign.val == "-", term=expr
            )
        return expr

    def parse_power(self) -> Optional[nodes.Node]:
        """Parse a term raised to powers; nothing is parsed before ``in``."""
        if self.current(TokenType.IN) is not None:
            return None
        expr = self.parse_variable_or_literal()
        while self.current(TokenType.POW) is not None:
            op = nodes.BinOperator(token=self.pop())
            right = self.parse_variable_or_literal()
            expr = nodes.BinaryExpression(left=expr, right=right, operator=op)
        return expr

    # -- literals --------------------------------------------------------------

    def _parse_number(self) -> nodes.Node:
        tok = self.match(TokenType.INTEGER, TokenType.FLOAT)
        if tok is None:
            raise self.error("Expected a number", None)
        try:
            if tok.type is TokenType.INTEGER:
                return nodes.Integer(location=tok, val=int(tok.val))
            return nodes.Float(location=tok, val=float(tok.val))
        except ValueError as exc:
            raise self.error(str(exc), tok) from exc

    def _parse_string(self) -> nodes.Node:
        tok = self.match(TokenType.STRING)
        if tok is None:
            raise self.error("Expected a string", None)
        try:
            value = _interpret_escapes(tok.val)
        except ValueError as exc:
            raise self.error("invalid syntax", tok) from exc
        return nodes.String(location=tok, val=value)

    def _parse_collection(self) -> Optional[nodes.Node]:
        tok = self.current()
        kind = tok.type if tok is not None else None
        if kind is TokenType.LBRACKET:
            return self._parse_list()
        if kind is TokenType.LPAREN:
            return self._parse_tuple()
        if kind is TokenType.LBRACE:
            return self._parse_dict()
        return None

    def _parse_list(self) -> nodes.Node:
        tok = self.match(TokenType.LBRACKET)
        if tok is None:
            raise self.error("Expected [", None)
        if self.match(TokenType.RBRACKET) is not None:
            return nodes.List(location=tok, val=[])

        items = [self.parse_expression()]
        while self.match(TokenType.COMMA) is not None:
            if self.current(TokenType.RBRACKET) is not None:
                break
            expr = self.parse_expression()
            if expr is None:
                raise self.error("Expected a value", self.current())
            items.append(expr)

        if self.match(TokenType.RBRACKET) is None:
            raise self.error("Expected ]", self.current())
        return nodes.List(location=tok, val=items)

    def _parse_tuple(self) -> Optional[nodes.Node]:
        tok = self.match(TokenType.LPAREN)
        if tok is None:
            raise self.error("Expected (", None)
        first = self.parse_expression()
        items = [first]
        trailing_comma = False

        while self.match(TokenType.COMMA) is not None:
            if self.current(TokenType.RPAREN) is not None:
                trailing_comma = True
                break
            expr = self.parse_expression()
            if expr is None:
                raise self.error("Expected a value", self.current())
            items.append(expr)

        if self.match(TokenType.RPAREN) is None:
            raise self.error("Unbalanced parenthesis", tok)

        if len(items) > 1 or trailing_comma:
            return nodes.Tuple(location=tok, val=items)
        return first

    def _parse_pair(self) -> nodes.Pair:
        key = self.parse_expression()
        if self.match(TokenType.COLON) is None:
            raise self.error('Expected ":"', self.current())
        value = self.parse_expression()
        return nodes.Pair(key=key, value=value)

    def _parse_dict(self) -> nodes.Node:
        tok = self.match(TokenType.LBRACE)
        if tok is None:
            raise self.error("Expected {", None)
        result = nodes.Dict(token=tok)
        if self.current(TokenType.RBRACE) is None:
            result.pairs.append(self._parse_pair())
        while self.match(TokenType.COMMA) is not None:
            result.pairs.append(self._parse_pair())
        if self.match(TokenType.RBRACE) is None:
            raise self.error("Expected }", self.current())
        return result

    # -- variables -------------------------------------------------------------

    def parse_variable(self) -> nodes.Node:
        """Parse a name with its attribute, item and call suffixes."""
        tok = self.match(TokenType.NAME)
        if tok is None:
            raise self.error("Expected an identifier.", None)

        if tok.val in ("true", "True"):
            return nodes.Bool(location=tok, val=True)
        if tok.val in ("nil", "None"):
            return nodes.NoneLiteral(location=tok)
        if tok.val in ("false", "False"):
            return nodes.Bool(location=tok, val=False)

        variable: nodes.Node = nodes.Name(name=tok)
        while not self.stream.at_eof():
            dot = self.match(TokenType.DOT)
            if dot is not None:
                variable = self._parse_getattr(dot, variable)
                continue
            bracket = self.match(TokenType.LBRACKET)
            if bracket is not None:
                variable = self._parse_getitem(bracket, variable)
                continue
            lparen = self.match(TokenType.LPAREN)
            if lparen is not None:
                call = nodes.Call(location=lparen, func=variable)
                self._parse_arguments(call.args, call.kwargs)
                variable = call
                continue
            break
        return variable

    def _parse_getattr(self, dot: Token, variable: nodes.Node) -> nodes.Node:
        getattr_node = nodes.Getattr(location=dot, node=variable)
        tok = self.match(TokenType.NAME, TokenType.INTEGER)
        if tok is None:
            raise self.error(
                "This token is not allowed within a variable name.", self.current()
            )
        if tok.type is TokenType.NAME:
            getattr_node.attr = tok.val
        else:
            try:
                getattr_node.index = int(tok.val)
            except ValueError as exc:
                raise self.error(str(exc), tok) from exc
        return getattr_node

    def _parse_getitem(self, bracket: Token, variable: nodes.Node) -> nodes.Node:
        getitem = nodes.Getitem(location=bracket, node=variable)
        tok = self.match(TokenType.STRING, TokenType.INTEGER)
        if tok is None:
            try:
                getitem.arg = self.parse_expression()
            except TemplateSyntaxError as exc:
                raise self.error("Invalid expression", self.current()) from exc
        elif tok.type is TokenType.STRING:
            getitem.arg = nodes.String(location=tok, val=tok.val.strip('"'))
        else:
            try:
                getitem.arg = nodes.Integer(location=tok, val=int(tok.val))
            except ValueError as exc:
                raise self.error(str(exc), tok) from exc

        if self.match(TokenType.RBRACKET) is None:
            raise self.error("Unbalanced bracket", bracket)
        return getitem

    def parse_variable_or_literal(self) -> Optional[nodes.Node]:
        """Parse a number, string, collection or variable."""
        tok = self.current()
        if tok is None:
            raise self.error(
                "Unexpected EOF, expected a number, string, keyword or identifier.",
                None,
            )
        if tok.type in (TokenType.INTEGER, TokenType.FLOAT):
            return self._parse_number()
        if tok.type is TokenType.STRING:
            return self._parse_string()
        if tok.type in (TokenType.LPAREN, TokenType.LBRACE, TokenType.LBRACKET):
            return self._parse_collection()
        if tok.type is TokenType.NAME:
            return self.parse_variable()
        raise self.error("Expected either a number, string, keyword or identifier.", tok)