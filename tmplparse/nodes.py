"""Syntax tree nodes produced by the template parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from tmplparse.tokens import Token


class Node:
    """Base of every syntax tree node."""

    def position(self) -> Optional[Token]:
        """Return the token that locates this node in the source, if any."""
        return None


@dataclass
class Trim:
    """Whitespace trimming requested on either side of a node."""

    left: bool = False
    right: bool = False


@dataclass
class Template(Node):
    """A whole parsed template."""

    name: str = ""
    nodes: list[Node] = field(default_factory=list)
    blocks: dict[str, Any] = field(default_factory=dict)
    macros: dict[str, Any] = field(default_factory=dict)

    def position(self) -> Optional[Token]:
        for node in self.nodes:
            token = node.position()
            if token is not None:
                return token
        return None


@dataclass
class Data(Node):
    """Literal text between tags."""

    data: Optional[Token] = None
    trim: Trim = field(default_factory=Trim)

    def position(self) -> Optional[Token]:
        return self.data


@dataclass
class Comment(Node):
    """A comment tag and its text."""

    start: Optional[Token] = None
    text: str = ""
    end: Optional[Token] = None

    def position(self) -> Optional[Token]:
        return self.start


@dataclass
class Output(Node):
    """An output tag, optionally with an inline condition and alternative."""

    start: Optional[Token] = None
    expression: Optional[Node] = None
    condition: Optional[Node] = None
    alternative: Optional[Node] = None
    end: Optional[Token] = None

    def position(self) -> Optional[Token]:
        return self.start


@dataclass
class StatementBlock(Node):
    """A statement tag such as ``{% if ... %}``."""

    location: Optional[Token] = None
    name: str = ""
    stmt: Any = None

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Wrapper(Node):
    """The nodes enclosed by a statement up to its end tag."""

    location: Optional[Token] = None
    nodes: list[Node] = field(default_factory=list)
    end_tag: str = ""
    trim: Trim = field(default_factory=Trim)

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Name(Node):
    """A variable reference."""

    name: Optional[Token] = None

    def position(self) -> Optional[Token]:
        return self.name


@dataclass
class Getattr(Node):
    """Attribute or numeric index access with a dot."""

    location: Optional[Token] = None
    node: Optional[Node] = None
    attr: Optional[str] = None
    index: Optional[int] = None

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Getitem(Node):
    """Subscript access with brackets."""

    location: Optional[Token] = None
    node: Optional[Node] = None
    arg: Optional[Node] = None

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Call(Node):
    """A function or method call."""

    location: Optional[Token] = None
    func: Optional[Node] = None
    args: list[Node] = field(default_factory=list)
    kwargs: dict[str, Node] = field(default_factory=dict)

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class FilterCall(Node):
    """One filter applied in a filter chain."""

    token: Optional[Token] = None
    name: str = ""
    args: list[Node] = field(default_factory=list)
    kwargs: dict[str, Node] = field(default_factory=dict)

    def position(self) -> Optional[Token]:
        return self.token


@dataclass
class FilteredExpression(Node):
    """An expression followed by a chain of filters."""

    expression: Optional[Node] = None
    filters: list[FilterCall] = field(default_factory=list)

    def position(self) -> Optional[Token]:
        return self.expression.position() if self.expression else None


@dataclass
class TestCall(Node):
    """A test such as ``odd`` or ``equal(3)``."""

    __test__ = False

    token: Optional[Token] = None
    name: str = ""
    args: list[Node] = field(default_factory=list)
    kwargs: dict[str, Node] = field(default_factory=dict)

    def position(self) -> Optional[Token]:
        return self.token


@dataclass
class TestExpression(Node):
    """An expression checked by a test."""

    __test__ = False

    expression: Optional[Node] = None
    test: Optional[TestCall] = None

    def position(self) -> Optional[Token]:
        return self.expression.position() if self.expression else None


@dataclass
class BinOperator(Node):
    """The operator of a binary expression."""

    token: Optional[Token] = None

    def position(self) -> Optional[Token]:
        return self.token


@dataclass
class BinaryExpression(Node):
    """Two operands joined by an operator."""

    left: Optional[Node] = None
    right: Optional[Node] = None
    operator: Optional[BinOperator] = None

    def position(self) -> Optional[Token]:
        return self.left.position() if self.left else None


@dataclass
class UnaryExpression(Node):
    """A signed term."""

    operator: Optional[Token] = None
    negative: bool = False
    term: Optional[Node] = None

    def position(self) -> Optional[Token]:
        return self.operator


@dataclass
class Negation(Node):
    """A ``not`` applied to a term."""

    operator: Optional[Token] = None
    term: Optional[Node] = None

    def position(self) -> Optional[Token]:
        return self.operator


@dataclass
class String(Node):
    """A string literal."""

    location: Optional[Token] = None
    val: str = ""

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Integer(Node):
    """An integer literal."""

    location: Optional[Token] = None
    val: int = 0

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Float(Node):
    """A floating point literal."""

    location: Optional[Token] = None
    val: float = 0.0

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Bool(Node):
    """A boolean literal."""

    location: Optional[Token] = None
    val: bool = False

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class NoneLiteral(Node):
    """The ``None`` literal."""

    location: Optional[Token] = None

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class List(Node):
    """A list literal."""

    location: Optional[Token] = None
    val: list[Node] = field(default_factory=list)

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Tuple(Node):
    """A tuple literal."""

    location: Optional[Token] = None
    val: list[Node] = field(default_factory=list)

    def position(self) -> Optional[Token]:
        return self.location


@dataclass
class Pair(Node):
    """A key and value inside a dict literal."""

    key: Optional[Node] = None
    value: Optional[Node] = None

    def position(self) -> Optional[Token]:
        return self.key.position() if self.key else None


@dataclass
class Dict(Node):
    """A dict literal."""

    token: Optional[Token] = None
    pairs: list[Pair] = field(default_factory=list)

    def position(self) -> Optional[Token]:
        return self.token