"""Token types, tokens and source positions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_MAX_SHOWN = 1000


class TokenType(Enum):
    """Kinds of token produced by the lexer; the value is the readable name."""

    ERROR = "Error"
    ADD = "Add"
    ASSIGN = "Assign"
    COLON = "Colon"
    COMMA = "Comma"
    DIV = "Div"
    DOT = "Dot"
    EQ = "Eq"
    FLOORDIV = "Floordiv"
    GT = "Gt"
    GTEQ = "Gteq"
    LBRACE = "Lbrace"
    LBRACKET = "Lbracket"
    LPAREN = "Lparen"
    LT = "Lt"
    LTEQ = "Lteq"
    NOT = "Not"
    IS = "Is"
    IN = "In"
    AND = "And"
    OR = "Or"
    MOD = "Mod"
    MUL = "Mul"
    NE = "Ne"
    PIPE = "Pipe"
    POW = "Pow"
    RBRACE = "Rbrace"
    RBRACKET = "Rbracket"
    RPAREN = "Rparen"
    SEMICOLON = "Semicolon"
    SUB = "Sub"
    TILDE = "Tilde"
    WHITESPACE = "Whitespace"
    FLOAT = "Float"
    INTEGER = "Integer"
    NAME = "Name"
    STRING = "String"
    OPERATOR = "Operator"
    BLOCK_BEGIN = "BlockBegin"
    BLOCK_END = "BlockEnd"
    VARIABLE_BEGIN = "VariableBegin"
    VARIABLE_END = "VariableEnd"
    RAW_BEGIN = "RawBegin"
    RAW_END = "RawEnd"
    COMMENT_BEGIN = "CommentBegin"
    COMMENT_END = "CommentEnd"
    COMMENT = "Comment"
    LINESTATEMENT_BEGIN = "LinestatementBegin"
    LINESTATEMENT_END = "LinestatementEnd"
    LINECOMMENT_BEGIN = "LinecommentBegin"
    LINECOMMENT_END = "LinecommentEnd"
    LINECOMMENT = "Linecomment"
    DATA = "Data"
    INITIAL = "Initial"
    EOF = "EOF"

    def __str__(self) -> str:
        return self.value


@dataclass
class Token:
    """A unit of lexing."""

    type: TokenType
    val: str = ""
    pos: int = 0
    line: int = 0
    col: int = 0
    trim: bool = False

    def __str__(self) -> str:
        val = self.val
        if len(val) > _MAX_SHOWN:
            val = f"{val[:10]}...{val[-5:]}"
        return (
            f"<Token[{self.type.value}] Val='{val}' Pos={self.pos} "
            f"Line={self.line} Col={self.col}>"
        )


@dataclass
class Position:
    """A source position; valid when the line number is positive."""

    filename: str = ""
    offset: int = 0
    line: int = 0
    column: int = 0

    def is_valid(self) -> bool:
        return self.line > 0

    def __str__(self) -> str:
        text = self.filename
        if self.is_valid():
            if text:
                text += ":"
            text += str(self.line)
            if self.column != 0:
                text += f":{self.column}"
        return text or "-"


def readable_position(pos: int, text: str) -> tuple[int, int]:
    """Return the 1-based (line, column) of offset ``pos`` in ``text``."""
    lines = text[:pos].split("\n")
    return len(lines), len(lines[-1]) + 1